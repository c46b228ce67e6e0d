"""
NoteVault Backend: JSON Note Store
===================================

What:  Reads and writes the entire note collection as one JSON document.
How:   `load()` parses the file into a list of Note; `save()` serializes the
       list to a temporary sibling file and renames it over the original.
Who:   Used by NoteRepository; nothing else touches the notes file.
When:  Every request loads the collection; create/update save it back.

Atomic Save:
    notes.json.<random>.tmp  ← write + flush + fsync
    os.replace(tmp, notes.json)

    Readers only ever open the final path, so they see the previous or the
    next document in full, never a truncated one. A crash mid-write leaves
    a stray .tmp file and the old document intact.

Concurrency:
    The store itself does not lock. Two callers that each load, modify and
    save can still overwrite each other (last writer wins for the whole
    collection). NoteRepository serializes its mutations with an
    asyncio.Lock around the load-modify-save sequence.

Errors:
    Missing file, empty file, or a JSON `null` document → empty collection.
    OS errors, bytes that are not UTF-8, malformed JSON, records that fail
    Note validation, and ids stored more than once → StoreUnavailableError
    (never retried here).
"""

import asyncio
import json
import logging
import os
import uuid
from collections import Counter
from pathlib import Path
from typing import List, Sequence, Union

import aiofiles
import aiofiles.os
from pydantic import TypeAdapter
from pydantic import ValidationError as PydanticValidationError

from notevault.exceptions import StoreUnavailableError
from notevault.models.note import Note

logger = logging.getLogger(__name__)

_NOTE_LIST = TypeAdapter(List[Note])


class JsonNoteStore:
    """
    Whole-collection persistence on a single JSON file.

    File layout:
        [
          {"id": "...", "user": "...", "date": "...", "title": "...", "body": "..."},
          ...
        ]

    Args:
        path: Location of the notes file. Its directory is created on first save.
        indent: JSON indentation for written documents (0 writes compact JSON).
    """

    def __init__(self, path: Union[str, Path], indent: int = 2):
        self.path = Path(path)
        self.indent = indent or None

    async def load(self) -> List[Note]:
        """
        Read and parse the full collection.

        Returns:
            Notes in stored order. Empty list when nothing has been stored yet.

        Raises:
            StoreUnavailableError: The file exists but cannot be read or parsed.
        """
        try:
            async with aiofiles.open(self.path, "r", encoding="utf-8") as f:
                raw = await f.read()
        except FileNotFoundError:
            logger.debug("Notes file %s does not exist yet; empty collection", self.path)
            return []
        except OSError as e:
            logger.error("Failed to read notes file %s: %s", self.path, str(e))
            raise StoreUnavailableError(
                context={"path": str(self.path), "os_error": str(e)},
            ) from e
        except UnicodeDecodeError as e:
            logger.error("Notes file %s is not valid UTF-8: %s", self.path, str(e))
            raise StoreUnavailableError(
                context={"path": str(self.path), "parse_error": str(e)},
            ) from e

        if not raw.strip():
            return []

        try:
            data = json.loads(raw)
        except json.JSONDecodeError as e:
            logger.error("Notes file %s is not valid JSON: %s", self.path, str(e))
            raise StoreUnavailableError(
                context={"path": str(self.path), "parse_error": str(e)},
            ) from e

        if data is None:
            return []

        try:
            notes = _NOTE_LIST.validate_python(data)
        except PydanticValidationError as e:
            logger.error(
                "Notes file %s holds invalid records: %d error(s)",
                self.path,
                e.error_count(),
            )
            raise StoreUnavailableError(
                context={"path": str(self.path), "parse_error": str(e)},
            ) from e

        counts = Counter(note.id for note in notes)
        duplicates = sorted(note_id for note_id, count in counts.items() if count > 1)
        if duplicates:
            logger.error(
                "Notes file %s holds %d duplicated id(s): %s",
                self.path,
                len(duplicates),
                ", ".join(duplicates),
            )
            raise StoreUnavailableError(
                context={"path": str(self.path), "duplicate_ids": duplicates},
            )

        logger.debug("Loaded %d notes from %s", len(notes), self.path)
        return notes

    async def save(self, notes: Sequence[Note]) -> None:
        """
        Replace the stored collection with `notes`.

        Raises:
            StoreUnavailableError: The document could not be written.
        """
        payload = json.dumps(
            [note.model_dump() for note in notes],
            indent=self.indent,
            ensure_ascii=False,
        )
        tmp_path = self.path.with_name(f"{self.path.name}.{uuid.uuid4().hex}.tmp")

        try:
            await aiofiles.os.makedirs(self.path.parent, exist_ok=True)
            async with aiofiles.open(tmp_path, "w", encoding="utf-8") as f:
                await f.write(payload)
                await f.write("\n")
                await f.flush()
                await asyncio.to_thread(os.fsync, f.fileno())
            await aiofiles.os.replace(tmp_path, self.path)
        except OSError as e:
            logger.error("Failed to write notes file %s: %s", self.path, str(e))
            await self._discard(tmp_path)
            raise StoreUnavailableError(
                context={"path": str(self.path), "os_error": str(e)},
            ) from e

        logger.debug("Saved %d notes to %s", len(notes), self.path)

    async def _discard(self, tmp_path: Path) -> None:
        """Best-effort removal of a temporary file left by a failed save."""
        try:
            await aiofiles.os.remove(tmp_path)
        except FileNotFoundError:
            pass
        except OSError as e:
            logger.warning("Could not remove temporary file %s: %s", tmp_path, str(e))
