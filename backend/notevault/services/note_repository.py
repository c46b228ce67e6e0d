"""
NoteVault Backend: Note Repository
===================================

What:  Note-level operations over the collection held by a JsonNoteStore.
How:   Each call loads the full collection, computes the view or mutation
       in memory, and (for mutations) saves the whole collection back.
Who:   Called by NoteService; calls the store.

Operations:
    create(user, date, title, body)   → Note            (load, append, save)
    find_by_id(id)                    → [Note] or []    (load)
    replace_by_id(id, title, body)    → Note            (load, update in place, save)
    filter_by_date_after(threshold)   → [Note]          (load)
    top_n_by_recency(n)               → [Note]          (load)
    list_all()                        → [Note]          (load)

Write Serialization:
    create() and replace_by_id() run load → modify → save while holding
    `self._write_lock`. With the asyncio event loop suspending at store I/O,
    two unguarded mutations could interleave and the second save would drop
    the first one's change. Reads do not take the lock.

    The lock is per repository instance; run one repository per notes file
    in one process.
"""

import asyncio
import logging
import uuid
from datetime import datetime
from typing import Callable, List, Optional

from notevault.exceptions import NotFoundError, ValidationError
from notevault.models.note import Note, parse_note_date
from notevault.services.store import JsonNoteStore

logger = logging.getLogger(__name__)

IdFactory = Callable[[], str]


def uuid4_id() -> str:
    """Default id factory: canonical UUIDv4 string."""
    return str(uuid.uuid4())


class NoteRepository:
    """
    Create / find / replace / filter / limit over the stored collection.

    Args:
        store: Backing whole-collection store.
        id_factory: Produces the id of each new note. Tests pass a
            deterministic factory; production uses random UUIDv4 strings.
    """

    def __init__(self, store: JsonNoteStore, id_factory: Optional[IdFactory] = None):
        self.store = store
        self.id_factory = id_factory or uuid4_id
        self._write_lock = asyncio.Lock()

    # ── Reads ─────────────────────────────────────────────────────────────

    async def list_all(self) -> List[Note]:
        return await self.store.load()

    async def find_by_id(self, note_id: str) -> List[Note]:
        """Notes whose id equals `note_id` exactly: one element, or none."""
        notes = await self.store.load()
        return [note for note in notes if note.id == note_id]

    async def filter_by_date_after(self, threshold: datetime) -> List[Note]:
        """
        Notes dated strictly after `threshold`, in stored order.

        A note dated exactly at the threshold is excluded. Naive thresholds
        are read as UTC, like note dates.
        """
        cutoff = parse_note_date(threshold)
        notes = await self.store.load()
        return [note for note in notes if note.moment > cutoff]

    async def top_n_by_recency(self, n: int) -> List[Note]:
        """
        The `n` most recent notes, newest first.

        Notes sharing a date keep their stored relative order (sorted() is
        stable). `n` larger than the collection returns all of it sorted.

        Raises:
            ValidationError: `n` is negative.
        """
        if n < 0:
            raise ValidationError(
                message=f"limit must be a non-negative integer, got {n}",
                field="limit",
            )
        if n == 0:
            return []
        notes = await self.store.load()
        ordered = sorted(notes, key=lambda note: note.moment, reverse=True)
        return ordered[:n]

    # ── Mutations ─────────────────────────────────────────────────────────

    async def create(self, user: str, date: str, title: str, body: str) -> Note:
        """Append a new note with a fresh id and persist the collection."""
        async with self._write_lock:
            notes = await self.store.load()
            note = Note(
                id=self.id_factory(),
                user=user,
                date=date,
                title=title,
                body=body,
            )
            if any(existing.id == note.id for existing in notes):
                # An id factory handing out a used id would break uniqueness
                raise ValidationError(
                    message="Generated note id is already in use",
                    field="id",
                    context={"id": note.id},
                )
            notes.append(note)
            await self.store.save(notes)

        logger.info("Created note %s for user %s", note.id, note.user)
        return note

    async def replace_by_id(self, note_id: str, title: str, body: str) -> Note:
        """
        Replace title/body of the note with id `note_id`.

        The note keeps its position in the collection and its id, user and
        date. When no note matches, nothing is written.

        Raises:
            NotFoundError: No note has this id.
        """
        async with self._write_lock:
            notes = await self.store.load()
            index = next(
                (i for i, note in enumerate(notes) if note.id == note_id),
                None,
            )
            if index is None:
                raise NotFoundError(resource="note", resource_id=note_id)

            updated = notes[index].with_content(title=title, body=body)
            notes[index] = updated
            await self.store.save(notes)

        logger.info("Updated note %s", note_id)
        return updated
