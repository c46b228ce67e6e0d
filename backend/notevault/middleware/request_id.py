"""
NoteVault Backend: Request ID Middleware
=========================================

What:  Gives every request a correlation ID and returns it as X-Request-ID.
How:   Accepts the client's X-Request-ID when it is a short, log-safe token,
       otherwise mints one. The ID lives in `request_id_var` while the
       request is served and is restored afterwards.
Who:   Applied to every request via Starlette middleware.

Readers of `request_id_var`:
    - RequestLoggingMiddleware (access log line)
    - exception handlers in main.py (`request_id` of error bodies)
    - auth and store log messages
"""

import re
import uuid
from contextvars import ContextVar

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

REQUEST_ID_HEADER = "X-Request-ID"

request_id_var: ContextVar[str] = ContextVar("request_id", default="")

# Client IDs end up in log lines and JSON bodies verbatim
_CLIENT_ID = re.compile(r"^[A-Za-z0-9._:-]{1,64}$")


def new_request_id() -> str:
    return uuid.uuid4().hex[:8]


def resolve_request_id(header_value) -> str:
    """The client's ID if it is a plain token of at most 64 characters, else a fresh one."""
    if header_value and _CLIENT_ID.match(header_value):
        return header_value
    return new_request_id()


class RequestIDMiddleware(BaseHTTPMiddleware):
    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        rid = resolve_request_id(request.headers.get(REQUEST_ID_HEADER))
        request.state.request_id = rid
        token = request_id_var.set(rid)
        try:
            response = await call_next(request)
        finally:
            request_id_var.reset(token)

        response.headers[REQUEST_ID_HEADER] = rid
        return response
