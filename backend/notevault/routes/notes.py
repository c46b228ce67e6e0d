"""
NoteVault Backend: Notes Route Handlers
========================================

What:  HTTP endpoints for listing, reading, creating, editing, filtering and
       limiting notes.
How:   Extracts path/query/body parameters, delegates to NoteService, and
       returns its envelopes. No note logic lives here.
Who:   Called by API clients.

Route Inventory:
    GET  /api/notes                  list every note
    POST /api/notes                  create a note            (API key)
    GET  /api/notes/date?date=D      notes dated after D
    GET  /api/notes/limit?limit=N    N most recent notes
    GET  /api/notes/{note_id}        one note, or empty data
    PUT  /api/notes/{note_id}        replace title/body       (API key)

    /date and /limit are declared before /{note_id}; routes match in
    declaration order and the id route would otherwise capture them.
"""

import logging
from fastapi import APIRouter, Depends, Path, Query

from notevault.middleware.auth import require_api_key
from notevault.schemas.note import (
    ErrorResponse,
    NoteCreate,
    NoteFilteredResponse,
    NoteLimitedResponse,
    NoteListResponse,
    NoteResponse,
    NoteSingleResponse,
    NoteUpdate,
    NoteUpdateResponse,
)
from notevault.services.note_service import NoteService, get_note_service

logger = logging.getLogger(__name__)

# ── Router Configuration ──────────────────────────────────────────────────
router = APIRouter(prefix="/api", tags=["Notes"])

# Canonical 8-4-4-4-12 hex form, either case. The id is matched as sent.
_NOTE_ID_PATTERN = r"^[0-9a-fA-F]{8}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{12}$"


@router.get(
    "/notes",
    response_model=NoteListResponse,
    responses={503: {"description": "Notes file unavailable", "model": ErrorResponse}},
    summary="List all notes",
)
async def list_notes(
    service: NoteService = Depends(get_note_service),
) -> NoteListResponse:
    """Returns the whole collection in stored order."""
    return await service.list_all()


@router.post(
    "/notes",
    status_code=201,
    response_model=NoteResponse,
    dependencies=[Depends(require_api_key)],
    responses={
        400: {"description": "Missing or invalid fields", "model": ErrorResponse},
        401: {"description": "Missing or invalid API key", "model": ErrorResponse},
        503: {"description": "Notes file unavailable", "model": ErrorResponse},
    },
    summary="Create a note",
)
async def create_note(
    payload: NoteCreate,
    service: NoteService = Depends(get_note_service),
) -> NoteResponse:
    """
    Create a note from user, date, title and body.

    The server assigns the id. Responds 201 with the created note.
    """
    return await service.create(payload)


@router.get(
    "/notes/date",
    response_model=NoteFilteredResponse,
    responses={
        400: {"description": "Invalid date", "model": ErrorResponse},
        503: {"description": "Notes file unavailable", "model": ErrorResponse},
    },
    summary="Notes dated after a given date",
)
async def filter_notes_by_date(
    date: str = Query(
        ...,
        description="Threshold date (ISO 8601 or YYYY/MM/DD). Notes dated exactly on it are excluded.",
    ),
    service: NoteService = Depends(get_note_service),
) -> NoteFilteredResponse:
    return await service.filter_by_date(date)


@router.get(
    "/notes/limit",
    response_model=NoteLimitedResponse,
    responses={
        400: {"description": "Invalid limit", "model": ErrorResponse},
        503: {"description": "Notes file unavailable", "model": ErrorResponse},
    },
    summary="Most recent notes",
)
async def limit_notes(
    limit: int = Query(..., ge=0, description="Maximum number of notes to return"),
    service: NoteService = Depends(get_note_service),
) -> NoteLimitedResponse:
    """Returns at most `limit` notes, newest `date` first."""
    return await service.limit(limit)


@router.get(
    "/notes/{note_id}",
    response_model=NoteSingleResponse,
    responses={
        400: {"description": "Malformed note id", "model": ErrorResponse},
        503: {"description": "Notes file unavailable", "model": ErrorResponse},
    },
    summary="Get a single note by ID",
)
async def get_note(
    note_id: str = Path(..., pattern=_NOTE_ID_PATTERN, description="Note id (UUID)"),
    service: NoteService = Depends(get_note_service),
) -> NoteSingleResponse:
    """
    Look up one note.

    An unknown id is not an error here: the response is 200 with an empty
    `data` list. Malformed ids are rejected with 400 by request validation.
    """
    return await service.get_one(note_id)


@router.put(
    "/notes/{note_id}",
    response_model=NoteUpdateResponse,
    dependencies=[Depends(require_api_key)],
    responses={
        400: {"description": "Malformed id or body", "model": ErrorResponse},
        401: {"description": "Missing or invalid API key", "model": ErrorResponse},
        404: {"description": "Note does not exist", "model": ErrorResponse},
        503: {"description": "Notes file unavailable", "model": ErrorResponse},
    },
    summary="Replace title and body of a note",
)
async def update_note(
    payload: NoteUpdate,
    note_id: str = Path(..., pattern=_NOTE_ID_PATTERN, description="Note id (UUID)"),
    service: NoteService = Depends(get_note_service),
) -> NoteUpdateResponse:
    """id, user and date of the stored note are kept; title and body are replaced."""
    return await service.update(note_id, payload)
