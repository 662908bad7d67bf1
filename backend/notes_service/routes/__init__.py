# Routes package init
"""
Notes Service — API Routes Package
===================================

Route Inventory:
    - contracts.py:   Declarative endpoint contracts for /notes and /notes/{id}
    - dispatcher.py:  Mounts the contracts and runs validate → execute → respond
    - health.py:      GET /health (service health check)

Routes stay thin: matching, validation and status codes live here; business
behavior lives in services.
"""
