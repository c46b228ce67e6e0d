"""
NoteVault Backend: Note Repository Tests
=========================================

What:  Tests for NoteRepository create/find/replace/filter/limit over a real
       JsonNoteStore in a temporary directory.

What we test:
    ✅ Ids come from the id factory and stay unique
    ✅ find_by_id returns exactly the matching note, or nothing
    ✅ replace_by_id keeps id/user/date and position
    ✅ replace_by_id on a missing id writes nothing and raises NotFoundError
    ✅ Date filter excludes the boundary and keeps stored order
    ✅ Limit sorts newest first, stably, and truncates
    ✅ Concurrent mutations are serialized (no lost updates)
"""

import asyncio
from datetime import datetime, timedelta, timezone
from unittest.mock import AsyncMock

import pytest

from notevault.exceptions import NotFoundError, StoreUnavailableError, ValidationError
from notevault.services.note_repository import NoteRepository, uuid4_id

from conftest import MISSING_ID, NOTE_A_ID, NOTE_B_ID


class TestCreate:

    @pytest.mark.asyncio
    async def test_create_assigns_factory_id_and_persists(self, repository, store):
        note = await repository.create(
            user="mario", date="2023-01-01", title="Hello", body="World"
        )

        assert note.id == "00000000-0000-4000-8000-000000000001"
        assert (note.user, note.date, note.title, note.body) == (
            "mario", "2023-01-01", "Hello", "World",
        )
        assert await store.load() == [note]

    @pytest.mark.asyncio
    async def test_create_appends_at_the_end(self, repository, store, seed_notes, sample_notes):
        seed_notes(sample_notes)
        note = await repository.create(user="peach", date="2022-01-01", title="t", body="b")

        ids = [n.id for n in await store.load()]
        assert ids == [NOTE_A_ID, NOTE_B_ID, note.id]

    @pytest.mark.asyncio
    async def test_created_ids_are_unique(self, store):
        repository = NoteRepository(store)  # random UUIDv4 ids
        notes = [
            await repository.create(user="u", date="2023-01-01", title=str(i), body="")
            for i in range(50)
        ]
        ids = [n.id for n in notes]
        assert len(set(ids)) == len(ids)
        assert len(await store.load()) == 50

    def test_default_id_is_canonical_uuid(self):
        value = uuid4_id()
        assert len(value) == 36
        assert value[14] == "4"

    @pytest.mark.asyncio
    async def test_colliding_id_factory_is_rejected(self, store, seed_notes, sample_notes, notes_file):
        seed_notes(sample_notes)
        before = notes_file.read_bytes()
        repository = NoteRepository(store, id_factory=lambda: NOTE_A_ID)

        with pytest.raises(ValidationError):
            await repository.create(user="u", date="2023-01-01", title="t", body="b")

        assert notes_file.read_bytes() == before

    @pytest.mark.asyncio
    async def test_create_propagates_store_failure(self, repository, store):
        store.save = AsyncMock(side_effect=StoreUnavailableError())
        with pytest.raises(StoreUnavailableError):
            await repository.create(user="u", date="2023-01-01", title="t", body="b")


class TestFindById:

    @pytest.mark.asyncio
    async def test_find_existing(self, repository, seed_notes, sample_notes):
        seed_notes(sample_notes)
        result = await repository.find_by_id(NOTE_B_ID)
        assert [n.id for n in result] == [NOTE_B_ID]
        assert result[0].title == "Trip"

    @pytest.mark.asyncio
    async def test_find_missing_is_empty(self, repository, seed_notes, sample_notes):
        seed_notes(sample_notes)
        assert await repository.find_by_id(MISSING_ID) == []

    @pytest.mark.asyncio
    async def test_find_is_exact_match(self, repository, seed_notes, sample_notes):
        seed_notes(sample_notes)
        assert await repository.find_by_id(NOTE_A_ID.upper()) == []
        assert await repository.find_by_id(NOTE_A_ID[:-1]) == []

    @pytest.mark.asyncio
    async def test_find_on_empty_store(self, repository):
        assert await repository.find_by_id(NOTE_A_ID) == []


class TestReplaceById:

    @pytest.mark.asyncio
    async def test_replace_keeps_identity_fields(self, repository, seed_notes, sample_notes):
        seed_notes(sample_notes)
        updated = await repository.replace_by_id(NOTE_A_ID, title="new title", body="new body")

        assert updated.id == NOTE_A_ID
        assert updated.user == "mario"
        assert updated.date == "2023-01-01"
        assert updated.title == "new title"
        assert updated.body == "new body"

    @pytest.mark.asyncio
    async def test_replace_updates_in_place(self, repository, store, seed_notes, sample_notes):
        seed_notes(sample_notes)
        await repository.replace_by_id(NOTE_A_ID, title="new title", body="new body")

        notes = await store.load()
        assert [n.id for n in notes] == [NOTE_A_ID, NOTE_B_ID]
        assert (notes[0].title, notes[0].body) == ("new title", "new body")
        assert notes[1].model_dump() == sample_notes[1]

    @pytest.mark.asyncio
    async def test_replace_keeps_extra_stored_fields(self, repository, store, seed_notes, sample_notes):
        sample_notes[0]["created_at"] = "2023-01-01T08:00:00Z"
        seed_notes(sample_notes)

        await repository.replace_by_id(NOTE_A_ID, title="t", body="b")

        stored = (await store.load())[0].model_dump()
        assert stored["created_at"] == "2023-01-01T08:00:00Z"

    @pytest.mark.asyncio
    async def test_replace_missing_raises_and_writes_nothing(
        self, repository, store, seed_notes, sample_notes, notes_file
    ):
        seed_notes(sample_notes)
        before = notes_file.read_bytes()
        store.save = AsyncMock(wraps=store.save)

        with pytest.raises(NotFoundError):
            await repository.replace_by_id(MISSING_ID, title="x", body="y")

        store.save.assert_not_awaited()
        assert notes_file.read_bytes() == before

    @pytest.mark.asyncio
    async def test_replace_missing_on_empty_store_creates_no_file(self, repository, notes_file):
        with pytest.raises(NotFoundError):
            await repository.replace_by_id(MISSING_ID, title="x", body="y")
        assert not notes_file.exists()


class TestFilterByDateAfter:

    @pytest.mark.asyncio
    async def test_filter_returns_later_notes(self, repository, seed_notes, sample_notes):
        seed_notes(sample_notes)
        result = await repository.filter_by_date_after(datetime(2023, 3, 1))
        assert [n.id for n in result] == [NOTE_B_ID]

    @pytest.mark.asyncio
    async def test_filter_excludes_boundary(self, repository, seed_notes, sample_notes):
        seed_notes(sample_notes)
        result = await repository.filter_by_date_after(datetime(2023, 6, 1))
        assert result == []

    @pytest.mark.asyncio
    async def test_filter_just_before_boundary(self, repository, seed_notes, sample_notes):
        seed_notes(sample_notes)
        threshold = datetime(2023, 6, 1, tzinfo=timezone.utc) - timedelta(seconds=1)
        result = await repository.filter_by_date_after(threshold)
        assert [n.id for n in result] == [NOTE_B_ID]

    @pytest.mark.asyncio
    async def test_filter_compares_dates_not_strings(self, repository, seed_notes):
        seed_notes([
            {"id": "1", "user": "u", "date": "2023/10/01", "title": "", "body": ""},
            # 2023-02-02T04:00Z: sorts before "2023-02-02" as text, later as a date
            {"id": "2", "user": "u", "date": "2023-02-01T23:00:00-05:00", "title": "", "body": ""},
            # 2023-02-01T22:00Z: sorts after "2023-02-02" as text, earlier as a date
            {"id": "3", "user": "u", "date": "2023-02-02T01:00:00+03:00", "title": "", "body": ""},
        ])
        result = await repository.filter_by_date_after(datetime(2023, 2, 2))
        assert [n.id for n in result] == ["1", "2"]

    @pytest.mark.asyncio
    async def test_filter_preserves_stored_order(self, repository, seed_notes, sample_notes):
        seed_notes(list(reversed(sample_notes)))
        result = await repository.filter_by_date_after(datetime(2022, 1, 1))
        assert [n.id for n in result] == [NOTE_B_ID, NOTE_A_ID]


class TestTopNByRecency:

    @pytest.fixture
    def dated_notes(self, seed_notes):
        return seed_notes([
            {"id": "old", "user": "u", "date": "2021-05-01", "title": "", "body": ""},
            {"id": "tie-1", "user": "u", "date": "2023-01-01", "title": "", "body": ""},
            {"id": "newest", "user": "u", "date": "2024-02-29T12:00:00Z", "title": "", "body": ""},
            {"id": "tie-2", "user": "u", "date": "2023-01-01T00:00:00Z", "title": "", "body": ""},
        ])

    @pytest.mark.asyncio
    async def test_sorted_descending_with_stable_ties(self, repository, dated_notes):
        result = await repository.top_n_by_recency(10)
        assert [n.id for n in result] == ["newest", "tie-1", "tie-2", "old"]

    @pytest.mark.asyncio
    async def test_truncates_to_n(self, repository, dated_notes):
        result = await repository.top_n_by_recency(2)
        assert [n.id for n in result] == ["newest", "tie-1"]

    @pytest.mark.asyncio
    async def test_zero_returns_nothing(self, repository, dated_notes):
        assert await repository.top_n_by_recency(0) == []

    @pytest.mark.asyncio
    async def test_length_is_min_of_n_and_size(self, repository, dated_notes):
        for n in range(7):
            assert len(await repository.top_n_by_recency(n)) == min(n, 4)

    @pytest.mark.asyncio
    async def test_negative_rejected(self, repository, dated_notes):
        with pytest.raises(ValidationError):
            await repository.top_n_by_recency(-1)

    @pytest.mark.asyncio
    async def test_does_not_reorder_stored_collection(self, repository, store, dated_notes):
        await repository.top_n_by_recency(4)
        assert [n.id for n in await store.load()] == ["old", "tie-1", "newest", "tie-2"]


class TestScenario:
    """Two notes, A (2023-01-01) and B (2023-06-01), through every operation."""

    @pytest.mark.asyncio
    async def test_walkthrough(self, repository, store, seed_notes, sample_notes, notes_file):
        seed_notes(sample_notes)

        filtered = await repository.filter_by_date_after(datetime(2023, 3, 1))
        assert [n.id for n in filtered] == [NOTE_B_ID]

        top = await repository.top_n_by_recency(1)
        assert [n.id for n in top] == [NOTE_B_ID]

        await repository.replace_by_id(NOTE_A_ID, "new title", "new body")
        notes = await store.load()
        assert [n.id for n in notes] == [NOTE_A_ID, NOTE_B_ID]
        assert notes[0].title == "new title"
        assert notes[0].body == "new body"
        assert notes[0].date == "2023-01-01"

        before = notes_file.read_bytes()
        with pytest.raises(NotFoundError):
            await repository.replace_by_id("nonexistent", "x", "y")
        assert notes_file.read_bytes() == before


class TestConcurrentMutations:
    """Interleaved mutations must not overwrite each other's saves."""

    @pytest.mark.asyncio
    async def test_concurrent_creates_are_all_kept(self, repository, store):
        await asyncio.gather(*(
            repository.create(user="u", date="2023-01-01", title=str(i), body="")
            for i in range(20)
        ))
        notes = await store.load()
        assert len(notes) == 20
        assert sorted(int(n.title) for n in notes) == list(range(20))

    @pytest.mark.asyncio
    async def test_concurrent_updates_are_all_kept(self, repository, store, seed_notes, sample_notes):
        seed_notes(sample_notes)
        await asyncio.gather(
            repository.replace_by_id(NOTE_A_ID, title="A2", body="a"),
            repository.replace_by_id(NOTE_B_ID, title="B2", body="b"),
            repository.create(user="u", date="2023-01-01", title="C", body="c"),
        )
        notes = await store.load()
        assert [n.title for n in notes] == ["A2", "B2", "C"]
