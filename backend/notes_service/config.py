"""
Notes Service — Application Configuration
==========================================

What:  Centralized configuration management using Pydantic Settings.
How:   Pydantic Settings reads from environment variables (or a .env file),
       validates types/ranges, and provides a singleton `settings` object.
Who:   Imported by the application factory, the database layer and the
       `python -m notes_service` entry point.
When:  Loaded once at module import time.
"""

from typing import List

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    All settings have defaults suitable for local development.
    Attributes are grouped by concern for readability.
    """

    # ── Database ──────────────────────────────────────────────────────────
    # What: Async SQLAlchemy connection string for the file-backed store
    # Format: sqlite+aiosqlite:///<path to database file>
    database_url: str = Field(
        default="sqlite+aiosqlite:///./notes.db",
        description="Async SQLAlchemy connection URL",
    )

    # What: Validates pooled connections before use with a lightweight query
    db_pool_pre_ping: bool = Field(default=True)

    # ── Server ────────────────────────────────────────────────────────────
    backend_host: str = Field(default="0.0.0.0")
    backend_port: int = Field(default=3000, ge=1, le=65535)

    # ── CORS ──────────────────────────────────────────────────────────────
    # Format: Comma-separated origins (split by cors_origins_list)
    cors_origins: str = Field(default="http://localhost:3000")

    @property
    def cors_origins_list(self) -> List[str]:
        """Splits comma-separated CORS origins into a list."""
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]

    # ── Logging ───────────────────────────────────────────────────────────
    # Valid: DEBUG, INFO, WARNING, ERROR, CRITICAL
    log_level: str = Field(default="INFO")

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Ensures log level is a valid Python logging level name."""
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        upper = v.upper()
        if upper not in valid_levels:
            raise ValueError(f"Invalid log_level '{v}'. Must be one of: {valid_levels}")
        return upper

    # ── Tracing ───────────────────────────────────────────────────────────
    # What: Where finished spans are exported
    #   console: ConsoleSpanExporter writes one JSON document per span to stdout
    #   none:    spans are still created (and visible to in-process processors)
    #            but nothing is exported
    trace_exporter: str = Field(default="console")
    service_name: str = Field(default="notes-service")

    @field_validator("trace_exporter")
    @classmethod
    def validate_trace_exporter(cls, v: str) -> str:
        """Ensures the exporter is one we know how to build."""
        valid = {"console", "none"}
        lower = v.lower()
        if lower not in valid:
            raise ValueError(f"Invalid trace_exporter '{v}'. Must be one of: {valid}")
        return lower

    # ── Pydantic Settings Config ──────────────────────────────────────────
    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": False,  # DATABASE_URL and database_url both work
    }


# Singleton instance, imported throughout the application
settings = Settings()
