# Middleware package init
"""
Notes Service — Middleware Package
===================================

Middleware Chain (outermost first):
    Request → [Request ID] → [Logging] → [GZip] → [CORS] → Route
"""
