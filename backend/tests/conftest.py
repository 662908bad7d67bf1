"""
Notes Service — Test Configuration (conftest.py)
=================================================

What:  Shared pytest fixtures for the entire test suite.
How:   pytest auto-discovers conftest.py and makes fixtures available to all tests.

Fixture Hierarchy (all function-scoped):
    ├── mock_db_session: Mock async session (handler unit tests, no real DB)
    ├── database_url:    SQLite file URL inside the test's tmp_path
    ├── database:        Database handle with tables created
    ├── span_exporter:   In-memory OpenTelemetry exporter
    ├── tracer_provider: Provider exporting synchronously to span_exporter
    └── test_client:     HTTPX AsyncClient against a fresh app, lifespan entered
"""

import os
import tempfile
from unittest.mock import AsyncMock, MagicMock

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import SimpleSpanProcessor
from opentelemetry.sdk.trace.export.in_memory_span_exporter import InMemorySpanExporter


# ══════════════════════════════════════════════════════════════════════════
# Environment Setup
# ══════════════════════════════════════════════════════════════════════════

# Override settings BEFORE any app imports so the module-level app never
# touches ./notes.db or prints spans to stdout
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///" + os.path.join(
    tempfile.mkdtemp(prefix="notes_service_test_"), "notes.db"
)
os.environ["TRACE_EXPORTER"] = "none"
os.environ["LOG_LEVEL"] = "WARNING"


# ══════════════════════════════════════════════════════════════════════════
# Function-Scoped Fixtures
# ══════════════════════════════════════════════════════════════════════════

@pytest.fixture
def mock_db_session():
    """
    Provides a mock async database session.

    Usage:
        async def test_handler(mock_db_session):
            result = await note_service.get_notes(mock_db_session)
    """
    session = AsyncMock()
    session.execute = AsyncMock()
    session.commit = AsyncMock()
    session.rollback = AsyncMock()
    session.close = AsyncMock()
    session.add = MagicMock()
    return session


@pytest.fixture
def database_url(tmp_path):
    """SQLite file URL private to one test."""
    return f"sqlite+aiosqlite:///{tmp_path / 'notes.db'}"


@pytest_asyncio.fixture
async def database(database_url):
    """A Database handle with the notes table created; disposed afterwards."""
    from notes_service.database import Database

    db = Database(database_url)
    await db.create_tables()
    yield db
    await db.dispose()


@pytest.fixture
def span_exporter():
    return InMemorySpanExporter()


@pytest.fixture
def tracer_provider(span_exporter):
    """Spans are exported synchronously so tests can read them immediately."""
    provider = TracerProvider()
    provider.add_span_processor(SimpleSpanProcessor(span_exporter))
    return provider


@pytest_asyncio.fixture
async def test_client(database_url, tracer_provider):
    """
    Provides an async HTTP test client for endpoint testing.

    How: Builds a fresh app on the test's own SQLite file, enters its lifespan
         (which creates the table) and routes requests through ASGITransport.

    Usage:
        async def test_list(test_client):
            response = await test_client.get("/notes")
            assert response.status_code == 200
    """
    from notes_service.database import Database
    from notes_service.main import create_app

    app = create_app(database=Database(database_url), tracer_provider=tracer_provider)
    async with app.router.lifespan_context(app):
        transport = ASGITransport(app=app)
        async with AsyncClient(transport=transport, base_url="http://test") as client:
            yield client
