"""
Notes Service — Application Package Initializer
================================================

What: Marks the `notes_service` directory as a Python package.
Who:  Imported by uvicorn (`notes_service.main:app`), pytest and the
      `python -m notes_service` entry point.

Architecture Note:
    The backend is a schema-validated endpoint dispatch pipeline:

    ┌─────────────────────────────────────┐
    │   Routes (contracts + dispatcher)   │  ← HTTP matching, validation, status codes
    ├─────────────────────────────────────┤
    │   Services (handlers + store ops)   │  ← Business behavior per operation
    ├─────────────────────────────────────┤
    │   Models & Schemas (Data)           │  ← SQLAlchemy ORM + Pydantic descriptors
    ├─────────────────────────────────────┤
    │   Database (Persistence)            │  ← Async SQLAlchemy engine over SQLite
    └─────────────────────────────────────┘

    Cross-cutting: tracing (OpenTelemetry spans per operation), request IDs,
    access logging.
"""

__version__ = "1.0.0"
