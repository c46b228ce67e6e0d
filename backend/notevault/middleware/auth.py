"""
NoteVault Backend: API Key Check for Mutating Routes
=====================================================

What:  FastAPI dependency that gates note creation and editing.
How:   Compares the X-API-Key request header with settings.api_key in
       constant time. Raises AuthenticationError (→ 401) on mismatch.
Who:   Declared with Depends() on POST /api/notes and PUT /api/notes/{id}.

When settings.api_key is empty the check is disabled and every request
passes; main.py logs a warning about it at startup. Read-only routes never
depend on this.
"""

import logging
import secrets
from typing import Optional

from fastapi import Header

from notevault.config import settings
from notevault.exceptions import AuthenticationError
from notevault.middleware.request_id import request_id_var

logger = logging.getLogger(__name__)


async def require_api_key(
    x_api_key: Optional[str] = Header(default=None, alias="X-API-Key"),
) -> None:
    """Rejects the request unless it carries the configured API key."""
    if not settings.auth_enabled:
        return

    if x_api_key is None or not secrets.compare_digest(
        x_api_key.encode("utf-8"), settings.api_key.encode("utf-8")
    ):
        logger.warning(
            "[%s] Rejected mutating request: %s API key",
            request_id_var.get(""),
            "missing" if x_api_key is None else "invalid",
        )
        raise AuthenticationError()
