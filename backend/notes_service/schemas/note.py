"""
Notes Service — Pydantic Request/Response Models
=================================================

What:  Pydantic models describing every payload the API accepts or returns.
How:   The schema registry (`schemas/registry.py`) wraps these models in named
       descriptors; the dispatcher validates requests and serializes responses
       through those descriptors, and FastAPI publishes them in OpenAPI.

Payload inventory:
    CreateNoteRequest  {content: str}            POST /notes body
    NotePathParams     {id: numeric string→int}  /notes/{id} path
    NoteResponse       {id: int, content: str}   single note
    ErrorResponse      {message: str, details: str}
    HealthResponse     GET /health
"""

import re
from typing import Annotated, Any

from pydantic import BaseModel, BeforeValidator, Field

_NUMERIC = re.compile(r"^-?[0-9]+\Z")


def _parse_numeric_string(value: Any) -> Any:
    """
    Integer-parsed-from-string descriptor.

    Path segments always arrive as strings. Integer strings ("42", "-3") become
    ints; anything else ("abc", "1.5", "5\\n", "") is rejected here so the
    request never reaches a handler. Real ints pass through unchanged.
    """
    if isinstance(value, bool):
        raise ValueError("Input should be a numeric string")
    if isinstance(value, int):
        return value
    if isinstance(value, str) and _NUMERIC.match(value):
        return int(value)
    raise ValueError("Input should be a numeric string")


NumericId = Annotated[int, BeforeValidator(_parse_numeric_string)]


# ══════════════════════════════════════════════════════════════════════════
# Request Models
# ══════════════════════════════════════════════════════════════════════════


class CreateNoteRequest(BaseModel):
    """Body of POST /notes."""

    content: str = Field(description="Note text; unique across all notes")


class NotePathParams(BaseModel):
    """Path parameters of /notes/{id}."""

    id: NumericId = Field(description="Note identifier (numeric path segment)")


# ══════════════════════════════════════════════════════════════════════════
# Response Models
# ══════════════════════════════════════════════════════════════════════════


class NoteResponse(BaseModel):
    """
    What:  Wire representation of a note.
    Who:   Returned by GET /notes/{id}; arrays of it by POST/GET /notes.
    """

    id: int = Field(description="Unique note identifier")
    content: str = Field(description="Note text")

    model_config = {"from_attributes": True}


class ErrorResponse(BaseModel):
    """
    Error body shared by every failure response.

    Fields:
        message: Operation-specific context, e.g. "Error creating note"
        details: Description of the underlying failure

    Example:
        {
            "message": "Error creating note",
            "details": "UNIQUE constraint failed: notes.content"
        }
    """

    message: str = Field(description="Human-readable error context")
    details: str = Field(description="Description of the underlying failure")


class HealthResponse(BaseModel):
    """Health check response showing service and store status."""

    status: str = Field(description="Overall service status: healthy, unhealthy")
    version: str = Field(description="Application version")
    database: str = Field(description="Database connectivity: connected, disconnected")
    uptime_seconds: float = Field(description="Seconds since service started")
