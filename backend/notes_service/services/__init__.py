# Services package init
"""
Notes Service — Services Layer
===============================

What:  Business logic sitting between the dispatcher (HTTP) and the database.

Service Inventory:
    - note_store:    Persistence operations (insert, select, delete) on `notes`
    - NoteService:   Operation handlers, one per endpoint contract
"""
