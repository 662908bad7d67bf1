"""
Notes Service — Persistence Operations
=======================================

What:  The fixed set of parameterized store actions against the `notes` table.
How:   Plain async functions taking the borrowed `AsyncSession` first. Writes
       commit their own unit of work; any SQLAlchemy failure is rolled back
       and re-raised as `StoreError` with the driver's description.
Who:   Composed by the operation handlers in `note_service.py`.

Operations:
    insert_note(db, content)     → Note          (StoreError on duplicate content)
    select_all_notes(db)         → List[Note]    (ordered by id)
    select_note(db, note_id)     → Note          (NotFoundError when absent)
    delete_all_notes(db)         → int           (rows removed; 0 is fine)
    delete_note(db, note_id)     → int           (0 or 1; absent id is a no-op)
"""

import logging
from typing import List

from sqlalchemy import delete, select
from sqlalchemy.exc import DBAPIError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from notes_service.exceptions import NotFoundError, StoreError
from notes_service.models.note import Note

logger = logging.getLogger(__name__)


def _store_error(operation: str, exc: SQLAlchemyError) -> StoreError:
    # DBAPIError.orig is the driver exception; its text omits the SQL statement
    if isinstance(exc, DBAPIError) and exc.orig is not None:
        description = str(exc.orig)
    else:
        description = str(exc)
    description = description or type(exc).__name__
    logger.error("Store failure during %s: %s", operation, description)
    return StoreError(message=description, context={"operation": operation})


async def insert_note(db: AsyncSession, content: str) -> Note:
    """Insert one row and return it with its store-assigned id."""
    note = Note(content=content)
    try:
        db.add(note)
        await db.commit()
    except SQLAlchemyError as exc:
        await db.rollback()
        raise _store_error("insert_note", exc) from exc
    logger.info("Note %s inserted", note.id)
    return note


async def select_all_notes(db: AsyncSession) -> List[Note]:
    """Return every row, oldest first."""
    try:
        result = await db.execute(select(Note).order_by(Note.id))
        return list(result.scalars().all())
    except SQLAlchemyError as exc:
        raise _store_error("select_all_notes", exc) from exc


async def select_note(db: AsyncSession, note_id: int) -> Note:
    """Return exactly one row or raise NotFoundError."""
    try:
        result = await db.execute(select(Note).where(Note.id == note_id))
        note = result.scalar_one_or_none()
    except SQLAlchemyError as exc:
        raise _store_error("select_note", exc) from exc

    if note is None:
        raise NotFoundError(resource="Note", resource_id=note_id)
    return note


async def delete_all_notes(db: AsyncSession) -> int:
    """Remove every row; returns how many were removed."""
    try:
        result = await db.execute(delete(Note))
        await db.commit()
    except SQLAlchemyError as exc:
        await db.rollback()
        raise _store_error("delete_all_notes", exc) from exc
    logger.info("Deleted %d notes", result.rowcount)
    return result.rowcount


async def delete_note(db: AsyncSession, note_id: int) -> int:
    """Remove the row with `note_id` if present; returns 0 or 1."""
    try:
        result = await db.execute(delete(Note).where(Note.id == note_id))
        await db.commit()
    except SQLAlchemyError as exc:
        await db.rollback()
        raise _store_error("delete_note", exc) from exc
    logger.info("Delete note %s removed %d row(s)", note_id, result.rowcount)
    return result.rowcount
