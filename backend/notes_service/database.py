"""
Notes Service — Database Handle
================================

What:  Async SQLAlchemy engine, session factory and table bootstrap, wrapped
       in a single `Database` handle.
How:   `Database` owns one async engine (and its connection pool) for the
       whole process. Each unit of work borrows a session through
       `Database.session()`, which commits on success, rolls back on error
       and always closes.
Who:   Built by the application factory and passed explicitly to the
       dispatcher and the lifespan. Tests build their own handle against a
       temporary SQLite file.
When:  Created once at startup; `create_tables()` runs in the lifespan before
       the server accepts requests; `dispose()` runs at shutdown.
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

from sqlalchemy import text
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

from notes_service.config import Settings, settings as default_settings

logger = logging.getLogger(__name__)


class Base(DeclarativeBase):
    """
    Base class for all SQLAlchemy ORM models.

    All models inherit from this class to register with the shared metadata
    that `Database.create_tables()` materializes.
    """
    pass


class Database:
    """
    Process-wide store handle.

    Attributes:
        url:              The SQLAlchemy URL this handle is connected to
        engine:           Async engine managing the connection pool
        session_factory:  Creates `AsyncSession` instances bound to the engine
    """

    def __init__(self, url: str, *, echo: bool = False, pool_pre_ping: bool = True):
        self.url = url
        self.engine: AsyncEngine = create_async_engine(
            url,
            pool_pre_ping=pool_pre_ping,
            echo=echo,
        )
        # expire_on_commit=False: rows returned by a committed unit of work
        # stay readable after the commit
        self.session_factory = async_sessionmaker(
            self.engine,
            class_=AsyncSession,
            expire_on_commit=False,
        )

    @classmethod
    def from_settings(cls, config: Optional[Settings] = None) -> "Database":
        """Build a handle from application settings."""
        config = config or default_settings
        return cls(
            config.database_url,
            echo=config.log_level == "DEBUG",
            pool_pre_ping=config.db_pool_pre_ping,
        )

    async def create_tables(self) -> None:
        """
        Create every mapped table that does not exist yet.

        `create_all` checks for each table first, which gives the
        CREATE TABLE IF NOT EXISTS behavior the startup sequence relies on.
        """
        # Import registers the Note model on Base.metadata
        from notes_service.models import note  # noqa: F401

        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
        logger.info("Database tables ready (%s)", self.url)

    @asynccontextmanager
    async def session(self) -> AsyncIterator[AsyncSession]:
        """
        Provide one unit of work.

        How it works:
            1. Creates a new session from the factory
            2. Yields it to the caller
            3. On success: commits anything still pending
            4. On error: rolls back and re-raises
            5. Always: closes the session (returns the connection to the pool)
        """
        async with self.session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise
            finally:
                await session.close()

    async def ping(self) -> None:
        """Execute SELECT 1; raises if the store is unreachable."""
        async with self.engine.connect() as conn:
            await conn.execute(text("SELECT 1"))

    async def dispose(self) -> None:
        """Close all pooled connections."""
        await self.engine.dispose()
