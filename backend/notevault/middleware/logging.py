"""
NoteVault Backend: Request Logging Middleware
===============================================

What:  One access log line per HTTP request.
How:   Times the rest of the stack, then logs method, matched route,
       notes query parameters, status, duration, request ID and client.
Who:   Applied to every request via Starlette middleware.
When:  Runs inside RequestIDMiddleware, so the request ID is already set.

Example lines:
    2024-01-15T12:00:00 [INFO] notevault.access: PUT /api/notes/{note_id} 200 4.2ms [a1b2c3d4] from 127.0.0.1
    2024-01-15T12:00:01 [INFO] notevault.access: GET /api/notes/limit?limit=5 200 1.9ms [e5f6a7b8] from 127.0.0.1

The route template is logged instead of the raw path, so note ids only
appear in log lines written by the repository. Request bodies and the
X-API-Key header are never logged.
"""

import logging
import time

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from notevault.middleware.request_id import request_id_var

logger = logging.getLogger("notevault.access")

# Query parameters worth seeing in the access log
_LOGGED_PARAMS = ("date", "limit")

_QUIET_PATHS = frozenset({"/health"})


def _route_label(request: Request) -> str:
    route = request.scope.get("route")
    label = getattr(route, "path", None) or request.url.path
    params = [
        f"{name}={request.query_params[name]}"
        for name in _LOGGED_PARAMS
        if name in request.query_params
    ]
    if params:
        label = f"{label}?{'&'.join(params)}"
    return label


def _level_for(status: int) -> int:
    if status >= 500:
        return logging.ERROR
    if status >= 400:
        return logging.WARNING
    return logging.INFO


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Logs each request; 5xx at ERROR, 4xx at WARNING, the rest at INFO."""

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        if request.url.path in _QUIET_PATHS:
            return await call_next(request)

        started = time.perf_counter()
        response = await call_next(request)
        elapsed_ms = (time.perf_counter() - started) * 1000

        rid = request_id_var.get("")
        client = request.client.host if request.client else "unknown"
        label = _route_label(request)

        logger.log(
            _level_for(response.status_code),
            "%s %s %d %.1fms [%s] from %s",
            request.method,
            label,
            response.status_code,
            elapsed_ms,
            rid,
            client,
            extra={
                "request_id": rid,
                "method": request.method,
                "route": label,
                "status": response.status_code,
                "duration_ms": round(elapsed_ms, 2),
                "client_ip": client,
            },
        )
        return response
