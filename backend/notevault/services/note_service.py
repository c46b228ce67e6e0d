"""
NoteVault Backend: Note Service (Query Façade)
===============================================

What:  Turns externally supplied parameters into NoteRepository calls and
       wraps the results in response envelopes.
How:   Validates ids, payloads, date thresholds and limits, delegates to
       the repository, converts Note models to response schemas.
Who:   Called by the route handlers; calls NoteRepository.

Operation map:
    list_all()              → repository.list_all()              → NoteListResponse
    get_one(id)             → repository.find_by_id(id)          → NoteSingleResponse
    create(payload)         → repository.create(...)             → NoteResponse
    update(id, payload)     → repository.replace_by_id(...)      → NoteUpdateResponse
    filter_by_date(raw)     → repository.filter_by_date_after()  → NoteFilteredResponse
    limit(n)                → repository.top_n_by_recency(n)     → NoteLimitedResponse

The service does no filtering, sorting or identity logic of its own.
Errors from the repository (NotFoundError, StoreUnavailableError) pass
through unchanged to the global exception handlers.
"""

import logging
from datetime import datetime
from typing import Any, List, Optional

from notevault.config import settings
from notevault.exceptions import ValidationError
from notevault.models.note import Note, parse_note_date
from notevault.schemas.note import (
    NoteCreate,
    NoteFilteredResponse,
    NoteLimitedResponse,
    NoteListResponse,
    NoteResponse,
    NoteSingleResponse,
    NoteUpdate,
    NoteUpdateResponse,
)
from notevault.services.note_repository import NoteRepository
from notevault.services.store import JsonNoteStore

logger = logging.getLogger(__name__)


def _to_response(notes: List[Note]) -> List[NoteResponse]:
    return [NoteResponse.model_validate(note) for note in notes]


def _require_text(value: Optional[str], field: str, allow_empty: bool = True) -> str:
    """Ensures a payload field is present (and non-blank when allow_empty is False)."""
    if value is None:
        raise ValidationError(message=f"'{field}' is required", field=field)
    if not allow_empty and not value.strip():
        raise ValidationError(message=f"'{field}' must not be empty", field=field)
    return value


def _parse_threshold(raw: Any, field: str = "date") -> datetime:
    """Parses a date parameter, rejecting anything that is not a calendar date."""
    if raw is None or (isinstance(raw, str) and not raw.strip()):
        raise ValidationError(message=f"'{field}' is required", field=field)
    try:
        return parse_note_date(raw.strip() if isinstance(raw, str) else raw)
    except ValueError:
        raise ValidationError(
            message=f"'{field}' is not a valid calendar date: {raw!r}",
            field=field,
            context={"value": str(raw)},
        )


class NoteService:
    """
    Query façade over a NoteRepository.

    Responsibilities:
        - Input validation the repository may rely on (ids, dates, limits)
        - Envelope shaping for each read operation
        - Logging of what was requested
    """

    def __init__(self, repository: NoteRepository):
        self.repository = repository

    async def list_all(self) -> NoteListResponse:
        notes = await self.repository.list_all()
        return NoteListResponse(data=_to_response(notes))

    async def get_one(self, note_id: str) -> NoteSingleResponse:
        """
        Look up one note by id.

        Returns an envelope whose `data` is empty when the id is unknown;
        the route decides how to present that (it answers 200 with no data).
        """
        note_id = _require_text(note_id, "id", allow_empty=False)
        notes = await self.repository.find_by_id(note_id)
        return NoteSingleResponse(data=_to_response(notes))

    async def create(self, payload: NoteCreate) -> NoteResponse:
        """
        Validate a create payload and store the new note.

        Raises:
            ValidationError: user missing/blank, date missing/unparseable,
                title or body missing.
        """
        user = _require_text(payload.user, "user", allow_empty=False)
        _parse_threshold(payload.date, field="date")
        title = _require_text(payload.title, "title")
        body = _require_text(payload.body, "body")

        note = await self.repository.create(
            user=user,
            date=payload.date.strip(),
            title=title,
            body=body,
        )
        return NoteResponse.model_validate(note)

    async def update(self, note_id: str, payload: NoteUpdate) -> NoteUpdateResponse:
        """
        Replace title and body of an existing note.

        Raises:
            ValidationError: title or body missing.
            NotFoundError: no note has this id (stored collection untouched).
        """
        note_id = _require_text(note_id, "id", allow_empty=False)
        title = _require_text(payload.title, "title")
        body = _require_text(payload.body, "body")

        note = await self.repository.replace_by_id(note_id, title=title, body=body)
        return NoteUpdateResponse(data=NoteResponse.model_validate(note))

    async def filter_by_date(self, raw_threshold: Any) -> NoteFilteredResponse:
        """Notes dated strictly after the given date (whitespace around it is ignored)."""
        threshold = _parse_threshold(raw_threshold)
        logger.info("Filtering notes dated after %s", threshold.isoformat())
        notes = await self.repository.filter_by_date_after(threshold)
        return NoteFilteredResponse(data=_to_response(notes))

    async def limit(self, n: Any) -> NoteLimitedResponse:
        """
        The `n` most recent notes, newest first.

        Raises:
            ValidationError: `n` is not a non-negative integer.
        """
        if isinstance(n, bool) or not isinstance(n, int) or n < 0:
            raise ValidationError(
                message=f"'limit' must be a non-negative integer, got {n!r}",
                field="limit",
            )
        logger.info("Listing the %d most recent notes", n)
        notes = await self.repository.top_n_by_recency(n)
        return NoteLimitedResponse(data=_to_response(notes))


def build_note_service(notes_file: Optional[str] = None) -> NoteService:
    """Wires store → repository → service for the given (or configured) notes file."""
    store = JsonNoteStore(notes_file or settings.notes_path, indent=settings.json_indent)
    return NoteService(NoteRepository(store))


# ── Singleton Instance ────────────────────────────────────────────────────
# One service per process: the repository's write lock only serializes
# mutations that go through the same instance.
note_service = build_note_service()


def get_note_service() -> NoteService:
    """FastAPI dependency returning the process-wide NoteService."""
    return note_service
