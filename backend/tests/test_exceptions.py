"""
Notes Service — Error Mapper Unit Tests
========================================

What:  map_error() always yields a complete ErrorBody, and fails_with()
       re-labels any handler failure as an OperationError.
"""

import pytest

from notes_service.exceptions import (
    NotFoundError,
    OperationError,
    StoreError,
    describe_error,
    fails_with,
    map_error,
)
from notes_service.schemas.note import ErrorResponse


class TestMapError:

    def test_store_error_details(self):
        body = map_error(
            "Error creating note", StoreError("UNIQUE constraint failed: notes.content")
        )
        assert body == ErrorResponse(
            message="Error creating note",
            details="UNIQUE constraint failed: notes.content",
        )

    def test_not_found_details(self):
        body = map_error("Error getting note", NotFoundError(resource="Note", resource_id=9))
        assert body.details == "Note with id 9 was not found"

    def test_details_never_empty(self):
        """An exception without a message falls back to its class name."""
        assert describe_error(RuntimeError()) == "RuntimeError"
        assert map_error("Error getting notes", KeyError()).details == "KeyError"

    def test_plain_exception_message(self):
        assert describe_error(ValueError("bad")) == "bad"


class TestFailsWith:

    @pytest.mark.asyncio
    async def test_success_passes_through(self):
        @fails_with("Error getting notes")
        async def handler():
            return ["ok"]

        assert await handler() == ["ok"]

    @pytest.mark.asyncio
    async def test_failure_becomes_operation_error(self):
        @fails_with("Error deleting note")
        async def handler():
            raise StoreError("database is locked")

        with pytest.raises(OperationError) as exc_info:
            await handler()

        error = exc_info.value
        assert error.status_code == 500
        assert error.body.message == "Error deleting note"
        assert error.body.details == "database is locked"
        assert isinstance(error.__cause__, StoreError)
        assert error.context["error_type"] == "StoreError"

    @pytest.mark.asyncio
    async def test_existing_operation_error_not_rewrapped(self):
        inner = OperationError(ErrorResponse(message="inner", details="d"))

        @fails_with("outer")
        async def handler():
            raise inner

        with pytest.raises(OperationError) as exc_info:
            await handler()
        assert exc_info.value is inner

    def test_wraps_preserves_name(self):
        @fails_with("Error creating note")
        async def create_note():
            return None

        assert create_note.__name__ == "create_note"
