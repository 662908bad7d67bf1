"""
Notes Service — Persistence Operation Tests
============================================

What:  The store actions against a real SQLite file (one per test).
How:   Each test borrows sessions from the `database` fixture exactly as the
       dispatcher does.
"""

import pytest

from notes_service.exceptions import NotFoundError, StoreError
from notes_service.services import note_store


class TestInsertAndSelect:

    @pytest.mark.asyncio
    async def test_insert_assigns_integer_id(self, database):
        async with database.session() as db:
            note = await note_store.insert_note(db, "first")
        assert isinstance(note.id, int)
        assert note.content == "first"

    @pytest.mark.asyncio
    async def test_select_all_in_insertion_order(self, database):
        async with database.session() as db:
            for content in ("a", "b", "c"):
                await note_store.insert_note(db, content)

        async with database.session() as db:
            notes = await note_store.select_all_notes(db)
        assert [n.content for n in notes] == ["a", "b", "c"]
        assert [n.id for n in notes] == sorted(n.id for n in notes)

    @pytest.mark.asyncio
    async def test_duplicate_content_is_store_error(self, database):
        async with database.session() as db:
            await note_store.insert_note(db, "same")
            with pytest.raises(StoreError) as exc_info:
                await note_store.insert_note(db, "same")
            # The session is still usable after the failed insert
            notes = await note_store.select_all_notes(db)

        assert "UNIQUE" in exc_info.value.message
        assert exc_info.value.context["operation"] == "insert_note"
        assert [n.content for n in notes] == ["same"]

    @pytest.mark.asyncio
    async def test_select_note_by_id(self, database):
        async with database.session() as db:
            created = await note_store.insert_note(db, "findme")
        async with database.session() as db:
            found = await note_store.select_note(db, created.id)
        assert (found.id, found.content) == (created.id, "findme")

    @pytest.mark.asyncio
    async def test_select_missing_note_is_not_found(self, database):
        async with database.session() as db:
            with pytest.raises(NotFoundError) as exc_info:
                await note_store.select_note(db, 404)
        assert not isinstance(exc_info.value, StoreError)
        assert exc_info.value.context["resource_id"] == 404


class TestDelete:

    @pytest.mark.asyncio
    async def test_delete_all(self, database):
        async with database.session() as db:
            await note_store.insert_note(db, "x")
            await note_store.insert_note(db, "y")
            removed = await note_store.delete_all_notes(db)
            remaining = await note_store.select_all_notes(db)
        assert removed == 2
        assert remaining == []

    @pytest.mark.asyncio
    async def test_delete_all_on_empty_table(self, database):
        async with database.session() as db:
            assert await note_store.delete_all_notes(db) == 0

    @pytest.mark.asyncio
    async def test_delete_one(self, database):
        async with database.session() as db:
            keep = await note_store.insert_note(db, "keep")
            drop = await note_store.insert_note(db, "drop")
            assert await note_store.delete_note(db, drop.id) == 1
            remaining = await note_store.select_all_notes(db)
        assert [n.id for n in remaining] == [keep.id]

    @pytest.mark.asyncio
    async def test_delete_missing_is_noop(self, database):
        async with database.session() as db:
            assert await note_store.delete_note(db, 12345) == 0


class TestTableCreation:

    @pytest.mark.asyncio
    async def test_create_tables_is_idempotent(self, database):
        async with database.session() as db:
            await note_store.insert_note(db, "survives")
        await database.create_tables()
        async with database.session() as db:
            notes = await note_store.select_all_notes(db)
        assert [n.content for n in notes] == ["survives"]
