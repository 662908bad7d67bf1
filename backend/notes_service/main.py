"""
Notes Service — FastAPI Application Factory
============================================

What:  Creates and configures the FastAPI application instance.
How:   Factory pattern: create_app() wires the store handle, the tracer
       provider, middleware, exception handlers, the contract routes and the
       health route, and returns a configured FastAPI instance.
Who:   Called by uvicorn (`notes_service.main:app`) and by tests, which pass
       their own Database and TracerProvider.

Application Architecture:
    ┌─────────────────────────────────────────────────────┐
    │                   FastAPI App                       │
    │                                                     │
    │  Middleware Chain:                                  │
    │  ┌──────────┐ ┌──────────┐ ┌──────┐ ┌──────┐        │
    │  │  Req ID  │→│ Logging  │→│ GZip │→│ CORS │        │
    │  └──────────┘ └──────────┘ └──────┘ └──────┘        │
    │                                                     │
    │  Routes:                                            │
    │  ┌───────────────────────────────┐ ┌─────────────┐  │
    │  │ contracts → ContractDispatcher│ │ GET /health │  │
    │  └───────────────────────────────┘ └─────────────┘  │
    │                                                     │
    │  Exception Handlers:                                │
    │  ┌──────────────────────────────────────────────┐   │
    │  │ Validation→400 │ 404/405 │ Serialization→500 │   │
    │  └──────────────────────────────────────────────┘   │
    └─────────────────────────────────────────────────────┘

Lifecycle:
    Startup:
    1. Initialize logging
    2. Create tables (CREATE TABLE IF NOT EXISTS); requests are not served
       until this completes
    Shutdown:
    1. Dispose database engine (close all connections)
    2. Flush and shut down the tracer provider
"""

import logging
import sys
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse
from opentelemetry.sdk.trace import TracerProvider
from starlette.exceptions import HTTPException as StarletteHTTPException

from notes_service import __version__
from notes_service.config import Settings, settings as default_settings
from notes_service.database import Database
from notes_service.exceptions import RequestValidationFailure, ResponseSerializationError
from notes_service.middleware.logging import RequestLoggingMiddleware
from notes_service.middleware.request_id import RequestIDMiddleware, request_id_var
from notes_service.routes import health
from notes_service.routes.contracts import NOTE_CONTRACTS, ContractTable
from notes_service.routes.dispatcher import ContractDispatcher
from notes_service.tracing import TRACER_NAME, setup_tracing

logger = logging.getLogger(__name__)


# ══════════════════════════════════════════════════════════════════════════
# Logging Configuration
# ══════════════════════════════════════════════════════════════════════════

def setup_logging(config: Optional[Settings] = None) -> None:
    """
    Configure logging for the entire application.

    Format: %(asctime)s [%(levelname)s] %(name)s: %(message)s
    When:   Called once during app startup, before any other initialization.
    """
    config = config or default_settings
    logging.basicConfig(
        level=getattr(logging, config.log_level, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
        handlers=[logging.StreamHandler(sys.stdout)],
        force=True,
    )

    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
    logging.getLogger("aiosqlite").setLevel(logging.WARNING)


# ══════════════════════════════════════════════════════════════════════════
# Application Lifespan (Startup & Shutdown)
# ══════════════════════════════════════════════════════════════════════════

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Startup: logging, then table creation. Shutdown: engine and tracer.

    The ASGI server only starts accepting requests once this context manager
    has yielded, so every operation sees the `notes` table.
    """
    config: Settings = app.state.settings
    database: Database = app.state.database
    tracer_provider: TracerProvider = app.state.tracer_provider

    # ── Startup ───────────────────────────────────────────────────────────
    setup_logging(config)
    logger.info("Notes Service %s starting up...", __version__)

    await database.create_tables()

    logger.info("Server ready at http://%s:%d", config.backend_host, config.backend_port)

    yield

    # ── Shutdown ──────────────────────────────────────────────────────────
    logger.info("Notes Service shutting down...")
    await database.dispose()
    tracer_provider.shutdown()
    logger.info("Shutdown complete.")


# ══════════════════════════════════════════════════════════════════════════
# Exception Handlers
# ══════════════════════════════════════════════════════════════════════════

def register_exception_handlers(app: FastAPI) -> None:
    """
    Map exceptions that escape the dispatcher to `{message, details}` bodies.

    Handler hierarchy:
        RequestValidationFailure    → 400 Bad Request
        StarletteHTTPException      → its own status (404 unknown route, 405 method)
        ResponseSerializationError  → 500 (handler output broke its schema)
        Exception (fallback)        → 500

    Handler failures never get here: the dispatcher answers OperationError
    itself with the contract's ErrorBody.
    """

    @app.exception_handler(RequestValidationFailure)
    async def handle_validation_error(request: Request, exc: RequestValidationFailure):
        """Malformed body or path; the handler was never invoked."""
        return JSONResponse(
            status_code=400,
            content={"message": exc.message, "details": exc.details or exc.message},
        )

    @app.exception_handler(StarletteHTTPException)
    async def handle_http_exception(request: Request, exc: StarletteHTTPException):
        """No contract matches the method and path."""
        rid = request_id_var.get("")
        logger.warning(
            "[%s] %s %s → %d %s", rid, request.method, request.url.path, exc.status_code, exc.detail
        )
        return JSONResponse(
            status_code=exc.status_code,
            content={
                "message": str(exc.detail),
                "details": f"{request.method} {request.url.path}",
            },
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(ResponseSerializationError)
    async def handle_serialization_error(request: Request, exc: ResponseSerializationError):
        """A handler returned data that does not match its declared schema."""
        rid = request_id_var.get("")
        logger.error(
            "[%s] Response serialization failed: %s | %s",
            rid,
            exc.message,
            exc.details,
            exc_info=exc,
        )
        return JSONResponse(
            status_code=500,
            content={"message": "Internal server error", "details": exc.message},
        )

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception):
        """Catch-all; the stack trace is logged server-side only."""
        rid = request_id_var.get("")
        logger.error("[%s] Unexpected error: %s", rid, str(exc), exc_info=exc)
        return JSONResponse(
            status_code=500,
            content={
                "message": "Internal server error",
                "details": "An unexpected error occurred",
            },
        )


# ══════════════════════════════════════════════════════════════════════════
# Application Factory
# ══════════════════════════════════════════════════════════════════════════

def create_app(
    config: Optional[Settings] = None,
    database: Optional[Database] = None,
    tracer_provider: Optional[TracerProvider] = None,
    contracts: Optional[ContractTable] = None,
) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        config:           Settings; defaults to the environment-loaded singleton
        database:         Store handle; defaults to one built from `config`
        tracer_provider:  Span pipeline; defaults to `setup_tracing(config)`
        contracts:        Endpoints to serve; defaults to NOTE_CONTRACTS

    Returns: Fully configured FastAPI instance ready to receive requests.
    """
    config = config or default_settings
    database = database or Database.from_settings(config)
    tracer_provider = tracer_provider or setup_tracing(config)

    app = FastAPI(
        title="Notes Service API",
        description="CRUD over notes with schema-validated contracts and per-operation tracing.",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.settings = config
    app.state.database = database
    app.state.tracer_provider = tracer_provider

    # ── Register Middleware ───────────────────────────────────────────────
    # Last added = first to execute
    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.cors_origins_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["X-Request-ID"],
    )
    app.add_middleware(GZipMiddleware, minimum_size=500)
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(RequestIDMiddleware)

    # ── Register Exception Handlers ───────────────────────────────────────
    register_exception_handlers(app)

    # ── Register Routes ───────────────────────────────────────────────────
    dispatcher = ContractDispatcher(
        contracts or NOTE_CONTRACTS,
        database,
        tracer_provider.get_tracer(TRACER_NAME, __version__),
    )
    app.include_router(dispatcher.build_router())
    app.include_router(health.router)

    return app


# ── Application Instance ─────────────────────────────────────────────────
# uvicorn expects `notes_service.main:app` to be importable
app = create_app()
