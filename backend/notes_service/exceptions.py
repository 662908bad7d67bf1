"""
Notes Service — Exception Hierarchy and Error Mapper
=====================================================

What:  Application-specific exceptions plus the error mapper that turns a
       handler failure into the typed `{message, details}` error body.
How:   Persistence operations raise `StoreError` / `NotFoundError`. Each
       operation handler is decorated with `fails_with(<context message>)`,
       which catches whatever the handler raised and re-raises it as an
       `OperationError` carrying the mapped body. The dispatcher answers an
       `OperationError` with status 500; global handlers in main.py format
       everything else.
Who:   Raised by services and the dispatcher; caught by the dispatcher and
       the global handlers.

Exception Hierarchy:
    NotesServiceError (base)
    ├── RequestValidationFailure    → 400 Bad Request (before any handler runs)
    ├── NotFoundError               → collapsed into OperationError (500)
    ├── StoreError                  → collapsed into OperationError (500)
    ├── OperationError              → 500 with the handler's ErrorBody
    └── ResponseSerializationError  → 500 generic (handler output is a defect)
"""

import functools
from typing import Any, Awaitable, Callable, Dict, Optional, TypeVar

from notes_service.schemas.note import ErrorResponse

# Status code for every handler-level failure; there is no finer taxonomy
OPERATION_ERROR_STATUS = 500

F = TypeVar("F", bound=Callable[..., Awaitable[Any]])


class NotesServiceError(Exception):
    """
    Base exception for all Notes Service application errors.

    Attributes:
        message:  Human-readable description (safe to return in API response)
        context:  Additional debug info (logged, not returned to the client)
    """

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


class RequestValidationFailure(NotesServiceError):
    """
    Raised by the dispatcher when a request body or path does not match the
    contract's schema.

    HTTP: 400 Bad Request; the handler is never invoked.

    Attributes:
        details: Field-level description of the mismatch, e.g.
                 "id: Input should be a numeric string"
    """

    def __init__(
        self,
        message: str = "Invalid request",
        details: str = "",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)
        self.details = details


class NotFoundError(NotesServiceError):
    """
    Raised when a requested row does not exist.

    Kept separate from StoreError so callers can tell "absent" from
    "broken"; the current handlers map both to the same 500 body.
    """

    def __init__(
        self,
        resource: str = "resource",
        resource_id: Optional[Any] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        message = f"The requested {resource} was not found"
        if resource_id is not None:
            message = f"{resource} with id {resource_id} was not found"
        ctx = context or {}
        ctx["resource"] = resource
        if resource_id is not None:
            ctx["resource_id"] = resource_id
        super().__init__(message=message, context=ctx)


class StoreError(NotesServiceError):
    """
    Raised when an insert, select or delete fails inside the store.

    When:  Uniqueness violation, connection lost, locked database, etc.
    The message carries the driver's description of the failure (for example
    "UNIQUE constraint failed: notes.content") without the SQL text.
    """

    def __init__(
        self,
        message: str = "A database error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class OperationError(NotesServiceError):
    """
    A handler failure that has already been mapped to its error body.

    Attributes:
        body:  The ErrorResponse returned to the client with status 500
    """

    def __init__(self, body: ErrorResponse, context: Optional[Dict[str, Any]] = None):
        super().__init__(message=body.message, context=context)
        self.body = body
        self.status_code = OPERATION_ERROR_STATUS


class ResponseSerializationError(NotesServiceError):
    """
    Raised when a handler's result does not match the contract's declared
    response schema. This indicates a bug in the handler, not a client or
    store problem.
    """

    def __init__(self, schema_name: str, details: str):
        super().__init__(
            message=f"Response does not match schema '{schema_name}'",
            context={"schema": schema_name, "details": details},
        )
        self.details = details


# ══════════════════════════════════════════════════════════════════════════
# Error Mapper
# ══════════════════════════════════════════════════════════════════════════


def describe_error(error: BaseException) -> str:
    """Human-readable description of an exception; never empty."""
    if isinstance(error, NotesServiceError) and error.message:
        return error.message
    return str(error) or type(error).__name__


def map_error(context_message: str, error: BaseException) -> ErrorResponse:
    """
    Pure mapping `(contextMessage, underlyingError) → ErrorBody`.

    Example:
        map_error("Error creating note", StoreError("UNIQUE constraint failed: notes.content"))
        → ErrorResponse(message="Error creating note",
                        details="UNIQUE constraint failed: notes.content")
    """
    return ErrorResponse(message=context_message, details=describe_error(error))


def fails_with(context_message: str) -> Callable[[F], F]:
    """
    Decorator for operation handlers: any exception raised by the handler is
    re-raised as an `OperationError` whose body is
    `map_error(context_message, exc)`.
    """

    def decorator(func: F) -> F:
        @functools.wraps(func)
        async def wrapper(*args: Any, **kwargs: Any) -> Any:
            try:
                return await func(*args, **kwargs)
            except OperationError:
                raise
            except Exception as exc:
                raise OperationError(
                    map_error(context_message, exc),
                    context={"error_type": type(exc).__name__},
                ) from exc

        return wrapper  # type: ignore[return-value]

    return decorator
