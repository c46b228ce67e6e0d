"""
NoteVault Backend: Pydantic Request/Response Schemas
=====================================================

What:  Pydantic models defining the API contract of the notes endpoints.
How:   FastAPI uses these models to parse request bodies, serialize
       responses, and generate the OpenAPI documentation.
Who:   Built by NoteService; declared as response models by the routes.

Request bodies declare every field optional. NoteService validates presence
and format itself, so a missing field and a malformed one produce the same
400 `validation_error` body.

Envelope shapes (one flag per read operation):
    GET /api/notes              {"success": true, "list": true,     "data": [...]}
    GET /api/notes/{id}         {"success": true, "single": true,   "data": [...]}
    GET /api/notes/date?date=   {"success": true, "filtered": true, "data": [...]}
    GET /api/notes/limit?limit= {"success": true, "limited": true,  "data": [...]}
    PUT /api/notes/{id}         {"success": true, "data": {...}}
"""

from typing import List, Optional

from pydantic import BaseModel, Field


# ══════════════════════════════════════════════════════════════════════════
# Request Models
# ══════════════════════════════════════════════════════════════════════════


class NoteCreate(BaseModel):
    """Body of POST /api/notes."""
    user: Optional[str] = Field(default=None, description="Owner of the note")
    date: Optional[str] = Field(
        default=None,
        description="Calendar date of the note (ISO 8601 date or date-time, or YYYY/MM/DD)",
    )
    title: Optional[str] = Field(default=None, description="Short label")
    body: Optional[str] = Field(default=None, description="Note content")


class NoteUpdate(BaseModel):
    """
    Body of PUT /api/notes/{id}.

    Only title and body can change; id, user and date of the stored note
    are kept even if the client sends them.
    """
    title: Optional[str] = Field(default=None, description="New title")
    body: Optional[str] = Field(default=None, description="New content")


# ══════════════════════════════════════════════════════════════════════════
# Response Models
# ══════════════════════════════════════════════════════════════════════════


class NoteResponse(BaseModel):
    """One note as returned to clients. Unknown stored fields are not exposed."""
    id: str = Field(description="Unique note identifier (UUID)")
    user: str = Field(description="Owner of the note")
    date: str = Field(description="Calendar date of the note, as stored")
    title: str = Field(description="Short label")
    body: str = Field(description="Note content")

    model_config = {"from_attributes": True}


class NoteEnvelope(BaseModel):
    """Common part of every successful collection response."""
    success: bool = Field(default=True, description="Always true on success")
    data: List[NoteResponse] = Field(default_factory=list, description="Matching notes")


class NoteListResponse(NoteEnvelope):
    list: bool = Field(default=True, description="Marks the full-collection listing")


class NoteSingleResponse(NoteEnvelope):
    """
    Result of a lookup by id.

    `data` holds the note, or nothing when the id is unknown. Absence is not
    an error for this endpoint.
    """
    single: bool = Field(default=True, description="Marks a lookup by id")


class NoteFilteredResponse(NoteEnvelope):
    filtered: bool = Field(default=True, description="Marks a date-filtered listing")


class NoteLimitedResponse(NoteEnvelope):
    limited: bool = Field(default=True, description="Marks a most-recent-first, truncated listing")


class NoteUpdateResponse(BaseModel):
    """Result of a successful PUT /api/notes/{id}."""
    success: bool = Field(default=True)
    data: NoteResponse = Field(description="The note after the update")


# ══════════════════════════════════════════════════════════════════════════
# Error / Health Models
# ══════════════════════════════════════════════════════════════════════════


class ErrorResponse(BaseModel):
    """
    Standardized error body for all API errors.

    Example:
        {
            "success": false,
            "error": "not_found",
            "message": "note with ID '3f1c...' was not found",
            "details": null,
            "request_id": "a1b2c3d4"
        }
    """
    success: bool = Field(default=False)
    error: str = Field(description="Machine-readable error code")
    message: str = Field(description="Human-readable error description")
    details: Optional[dict] = Field(default=None, description="Additional error context")
    request_id: Optional[str] = Field(default=None, description="Request correlation ID")


class HealthResponse(BaseModel):
    """Service health and whether the notes file can be read."""
    status: str = Field(description="Overall service status: healthy, unhealthy")
    version: str = Field(description="Application version")
    store: str = Field(description="Notes file status: readable, unavailable")
    notes_count: Optional[int] = Field(default=None, description="Notes currently stored")
    auth_enabled: bool = Field(description="Whether mutating routes require an API key")
    uptime_seconds: float = Field(description="Seconds since service started")
