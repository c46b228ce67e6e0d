"""
NoteVault Backend: Health Check Route
======================================

What:  Health check endpoint for monitoring and container probes.
How:   Loads the notes file through the service's store and reports whether
       that worked, plus version, auth state and uptime.
Who:   Called by Docker health checks, load balancers, and monitoring.

Status levels:
    - healthy:   notes file readable (HTTP 200)
    - unhealthy: notes file unreadable or corrupt (HTTP 503)
"""

import logging
import time

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from notevault import __version__
from notevault.config import settings
from notevault.exceptions import StoreUnavailableError
from notevault.schemas.note import HealthResponse
from notevault.services.note_service import NoteService, get_note_service

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Health"])

# Process start, for uptime reporting
_start_time = time.time()


@router.get(
    "/health",
    response_model=HealthResponse,
    responses={503: {"description": "Notes file unavailable", "model": HealthResponse}},
    summary="Service health check",
)
async def health_check(service: NoteService = Depends(get_note_service)):
    """
    Probe the notes file.

    A missing file counts as healthy (no notes stored yet); an unreadable or
    corrupt one makes the service unhealthy.
    """
    store_status = "readable"
    notes_count = None
    overall = "healthy"

    try:
        notes_count = len(await service.repository.store.load())
    except StoreUnavailableError as e:
        store_status = "unavailable"
        overall = "unhealthy"
        logger.warning("Health check: notes file unavailable: %s", e.context)

    body = HealthResponse(
        status=overall,
        version=__version__,
        store=store_status,
        notes_count=notes_count,
        auth_enabled=settings.auth_enabled,
        uptime_seconds=round(time.time() - _start_time, 2),
    )
    if overall == "unhealthy":
        return JSONResponse(status_code=503, content=body.model_dump())
    return body
