"""
NoteVault Backend: Note Domain Model
=====================================

What:  Pydantic model of one persisted note record, plus the date parsing
       used everywhere notes are compared by time.
How:   The JSON store validates every record of the notes file into `Note`
       and dumps them back with `model_dump()`.
Who:   Used by JsonNoteStore (parse/serialize), NoteRepository (logic),
       and NoteService (building new notes from payloads).

Record layout (field names are the on-disk contract):
    {
        "id":    "3f1c7a52-8a41-4b8e-9d0c-2f5f3c1e9b11",
        "user":  "mario",
        "date":  "2023-06-01",
        "title": "Shopping",
        "body":  "milk, eggs"
    }

    `date` is stored verbatim as the caller supplied it so existing files
    round-trip byte-for-byte. Comparisons go through `parse_note_date()`,
    which turns it into a timezone-aware instant.

    Extra keys already present in a file (for example `created_at` written
    by older deployments) are kept and written back unchanged.
"""

import re
from datetime import date, datetime, time, timezone
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

# YYYY/MM/DD, the slash-delimited form accepted alongside ISO dates
_SLASH_DATE = re.compile(r"^(\d{4})/(\d{1,2})/(\d{1,2})$")


def parse_note_date(value: Any) -> datetime:
    """
    Convert a note date (or a filter threshold) into an aware datetime.

    Accepts ISO-8601 dates and date-times (`2023-06-01`, `2023-06-01T10:30:00`,
    `2023-06-01T10:30:00Z`, with or without offset), `YYYY/MM/DD`, and
    `date`/`datetime` objects. Naive values are taken as UTC, so a bare date
    means midnight UTC of that day.

    Raises:
        ValueError: the value is not a calendar date.
    """
    if isinstance(value, datetime):
        moment = value
    elif isinstance(value, date):
        moment = datetime.combine(value, time.min)
    elif isinstance(value, str):
        text = value.strip()
        if not text:
            raise ValueError("empty date")
        match = _SLASH_DATE.match(text)
        if match:
            year, month, day = (int(part) for part in match.groups())
            moment = datetime(year, month, day)
        else:
            # fromisoformat() only learned the trailing "Z" in Python 3.11
            if text[-1] in "zZ":
                text = text[:-1] + "+00:00"
            moment = datetime.fromisoformat(text)
    else:
        raise ValueError(f"unsupported date type: {type(value).__name__}")

    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    return moment


class Note(BaseModel):
    """
    A single note of the collection.

    Lifecycle:
        1. Built by NoteRepository.create() with a freshly generated id
        2. title/body replaced by NoteRepository.replace_by_id()
        3. id, user, date never change; notes are never deleted
    """

    model_config = ConfigDict(extra="allow")

    id: str = Field(min_length=1, description="Unique identifier (canonical UUID string)")
    user: str = Field(description="Owner of the note")
    date: str = Field(description="Calendar timestamp of the note content (ISO 8601)")
    title: str = Field(description="Short label")
    body: str = Field(description="Note content")

    @field_validator("date", mode="before")
    @classmethod
    def validate_date(cls, v: Any) -> str:
        """Keeps the original text but refuses values that are not dates."""
        if isinstance(v, (date, datetime)):
            return v.isoformat()
        try:
            parse_note_date(v)
        except ValueError as e:
            raise ValueError(f"invalid note date {v!r}: {e}") from e
        return v

    @property
    def moment(self) -> datetime:
        """The note's `date` as an aware datetime, used for filtering and sorting."""
        return parse_note_date(self.date)

    def with_content(self, title: str, body: str) -> "Note":
        """Copy of this note with new title/body; every other field is kept."""
        return self.model_copy(update={"title": title, "body": body})

    def __repr__(self) -> str:
        return f"<Note(id={self.id}, user='{self.user}', date='{self.date}')>"
