"""
Notes Service — Note SQLAlchemy Model
======================================

What:  ORM model representing the `notes` table.
How:   Inherits from the shared DeclarativeBase; `Database.create_tables()`
       creates the table from this mapping at startup.
Who:   Used by the persistence operations in `services/note_store.py`.

Table:
    notes(id INTEGER PRIMARY KEY, content TEXT UNIQUE)

    - id: SQLite rowid alias, assigned by the store on insert
    - content: unique across all notes; a duplicate insert fails with an
      IntegrityError inside the store
"""

from sqlalchemy import Integer, Text
from sqlalchemy.orm import Mapped, mapped_column

from notes_service.database import Base


class Note(Base):
    """A single note row."""

    __tablename__ = "notes"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)

    content: Mapped[str] = mapped_column(Text, nullable=False, unique=True)

    def __repr__(self) -> str:
        """Developer-friendly string representation for debugging."""
        return f"<Note(id={self.id}, content={self.content!r})>"
