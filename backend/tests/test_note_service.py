"""
Notes Service — Operation Handler Unit Tests
=============================================

What:  Tests for NoteService business logic (create, list, get, delete).
How:   Uses a mock DB session and a patched persistence module (no real DB).

What we test:
    ✅ create returns the full collection after the insert
    ✅ confirmation strings for the delete operations
    ✅ every failure leaves the handler as OperationError with its message
"""

from types import SimpleNamespace
from unittest.mock import AsyncMock, patch

import pytest

from notes_service.exceptions import NotFoundError, OperationError, StoreError
from notes_service.schemas.note import CreateNoteRequest, NotePathParams, NoteResponse
from notes_service.services.note_service import NoteService


def _row(note_id, content):
    return SimpleNamespace(id=note_id, content=content)


class TestCreateNote:

    def setup_method(self):
        self.service = NoteService()

    @pytest.mark.asyncio
    async def test_returns_full_collection(self, mock_db_session):
        with patch("notes_service.services.note_service.note_store") as mock_store:
            mock_store.insert_note = AsyncMock(return_value=_row(2, "new"))
            mock_store.select_all_notes = AsyncMock(
                return_value=[_row(1, "old"), _row(2, "new")]
            )

            result = await self.service.create_note(
                mock_db_session, body=CreateNoteRequest(content="new")
            )

            assert result == [
                NoteResponse(id=1, content="old"),
                NoteResponse(id=2, content="new"),
            ]
            mock_store.insert_note.assert_awaited_once_with(mock_db_session, "new")
            mock_store.select_all_notes.assert_awaited_once_with(mock_db_session)

    @pytest.mark.asyncio
    async def test_duplicate_maps_to_operation_error(self, mock_db_session):
        with patch("notes_service.services.note_service.note_store") as mock_store:
            mock_store.insert_note = AsyncMock(
                side_effect=StoreError("UNIQUE constraint failed: notes.content")
            )
            mock_store.select_all_notes = AsyncMock()

            with pytest.raises(OperationError) as exc_info:
                await self.service.create_note(
                    mock_db_session, body=CreateNoteRequest(content="dup")
                )

            assert exc_info.value.body.message == "Error creating note"
            assert exc_info.value.body.details == "UNIQUE constraint failed: notes.content"
            mock_store.select_all_notes.assert_not_awaited()


class TestReadHandlers:

    def setup_method(self):
        self.service = NoteService()

    @pytest.mark.asyncio
    async def test_get_notes(self, mock_db_session):
        with patch("notes_service.services.note_service.note_store") as mock_store:
            mock_store.select_all_notes = AsyncMock(return_value=[_row(1, "a")])
            result = await self.service.get_notes(mock_db_session)
        assert result == [NoteResponse(id=1, content="a")]

    @pytest.mark.asyncio
    async def test_get_notes_failure(self, mock_db_session):
        with patch("notes_service.services.note_service.note_store") as mock_store:
            mock_store.select_all_notes = AsyncMock(side_effect=StoreError("disk I/O error"))
            with pytest.raises(OperationError) as exc_info:
                await self.service.get_notes(mock_db_session)
        assert exc_info.value.body.message == "Error getting notes"

    @pytest.mark.asyncio
    async def test_get_note_found(self, mock_db_session):
        with patch("notes_service.services.note_service.note_store") as mock_store:
            mock_store.select_note = AsyncMock(return_value=_row(3, "c"))
            result = await self.service.get_note(mock_db_session, path=NotePathParams(id=3))
        assert result == NoteResponse(id=3, content="c")
        mock_store.select_note.assert_awaited_once_with(mock_db_session, 3)

    @pytest.mark.asyncio
    async def test_get_note_missing_is_generic_failure(self, mock_db_session):
        """Not-found collapses into the operation's uniform failure."""
        with patch("notes_service.services.note_service.note_store") as mock_store:
            mock_store.select_note = AsyncMock(
                side_effect=NotFoundError(resource="Note", resource_id=99)
            )
            with pytest.raises(OperationError) as exc_info:
                await self.service.get_note(mock_db_session, path=NotePathParams(id=99))
        assert exc_info.value.status_code == 500
        assert exc_info.value.body.message == "Error getting note"
        assert exc_info.value.body.details == "Note with id 99 was not found"


class TestDeleteHandlers:

    def setup_method(self):
        self.service = NoteService()

    @pytest.mark.asyncio
    async def test_delete_notes(self, mock_db_session):
        with patch("notes_service.services.note_service.note_store") as mock_store:
            mock_store.delete_all_notes = AsyncMock(return_value=0)
            assert await self.service.delete_notes(mock_db_session) == "All notes deleted"

    @pytest.mark.asyncio
    async def test_delete_note_missing_still_confirms(self, mock_db_session):
        with patch("notes_service.services.note_service.note_store") as mock_store:
            mock_store.delete_note = AsyncMock(return_value=0)
            result = await self.service.delete_note(mock_db_session, path=NotePathParams(id=8))
        assert result == "Note deleted"

    @pytest.mark.asyncio
    async def test_delete_note_failure(self, mock_db_session):
        with patch("notes_service.services.note_service.note_store") as mock_store:
            mock_store.delete_note = AsyncMock(side_effect=StoreError("database is locked"))
            with pytest.raises(OperationError) as exc_info:
                await self.service.delete_note(mock_db_session, path=NotePathParams(id=8))
        assert exc_info.value.body.message == "Error deleting note"
        assert exc_info.value.body.details == "database is locked"
