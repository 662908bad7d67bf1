"""
Notes Service — Operation Handlers
===================================

What:  One handler per endpoint contract, composing persistence operations
       into the business behavior of that endpoint.
How:   Each handler is an async method taking the borrowed session plus the
       validated inputs its contract declares (`body`, `path`). Every handler
       is wrapped in `fails_with(...)`, so any failure leaves it as an
       `OperationError` carrying an operation-specific message and the
       underlying error's description.
Who:   Bound into the contract table (`routes/contracts.py`); invoked by the
       dispatcher inside the operation's span.

Behavior:
    create_note   insert, then return the full updated collection
    get_notes     full collection
    delete_notes  delete all → "All notes deleted"
    get_note      single note (missing id → generic failure, status 500)
    delete_note   delete by id, idempotent → "Note deleted"
"""

import logging
from typing import List

from sqlalchemy.ext.asyncio import AsyncSession

from notes_service.exceptions import fails_with
from notes_service.schemas.note import CreateNoteRequest, NotePathParams, NoteResponse
from notes_service.services import note_store

logger = logging.getLogger(__name__)

ALL_NOTES_DELETED = "All notes deleted"
NOTE_DELETED = "Note deleted"


class NoteService:
    """
    Business logic layer for note operations.

    Stateless: every call receives its session, so one instance serves all
    concurrent requests.
    """

    @fails_with("Error creating note")
    async def create_note(self, db: AsyncSession, body: CreateNoteRequest) -> List[NoteResponse]:
        """
        Insert a note and return the current collection.

        Callers always receive the full state after the mutation, not just
        the inserted row.
        """
        note = await note_store.insert_note(db, body.content)
        logger.info("Note %s created", note.id)
        notes = await note_store.select_all_notes(db)
        return [NoteResponse.model_validate(row) for row in notes]

    @fails_with("Error getting notes")
    async def get_notes(self, db: AsyncSession) -> List[NoteResponse]:
        notes = await note_store.select_all_notes(db)
        return [NoteResponse.model_validate(row) for row in notes]

    @fails_with("Error deleting notes")
    async def delete_notes(self, db: AsyncSession) -> str:
        await note_store.delete_all_notes(db)
        return ALL_NOTES_DELETED

    @fails_with("Error getting note")
    async def get_note(self, db: AsyncSession, path: NotePathParams) -> NoteResponse:
        """
        Fetch one note.

        A missing id raises NotFoundError in the store layer; it is mapped to
        the same 500 body as every other failure of this operation.
        """
        note = await note_store.select_note(db, path.id)
        return NoteResponse.model_validate(note)

    @fails_with("Error deleting note")
    async def delete_note(self, db: AsyncSession, path: NotePathParams) -> str:
        removed = await note_store.delete_note(db, path.id)
        if not removed:
            logger.debug("Delete of note %s was a no-op", path.id)
        return NOTE_DELETED


# ── Singleton Instance ────────────────────────────────────────────────────
note_service = NoteService()
