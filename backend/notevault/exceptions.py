"""
NoteVault Backend: Custom Exception Hierarchy
==============================================

What:  Application-specific exceptions for the different failure outcomes.
How:   Each exception carries a user-facing message and an optional context
       dict. Global exception handlers (registered in main.py) map them to
       HTTP status codes and a structured JSON error body.
Who:   Raised by the store, repository, service, and auth dependency.

Exception Hierarchy:
    NoteVaultError (base)           → 500 Internal Server Error
    ├── ValidationError             → 400 Bad Request (client can fix)
    ├── AuthenticationError         → 401 Unauthorized
    ├── NotFoundError               → 404 Not Found
    └── StoreUnavailableError       → 503 Service Unavailable

    None of these are retried by the core. A StoreUnavailableError reaches
    the caller as-is; retry policy belongs to the client.
"""

from typing import Any, Dict, Optional


class NoteVaultError(Exception):
    """
    Base exception for all NoteVault application errors.

    Attributes:
        message:  User-facing error description (safe to return in API response)
        context:  Additional debug info (logged, returned only where the handler allows)
    """

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


class ValidationError(NoteVaultError):
    """
    Raised when input fails validation.

    When:    Missing note fields, unparseable date threshold, negative limit.
    HTTP:    400 Bad Request

    Example response:
        {
            "success": false,
            "error": "validation_error",
            "message": "'date' is not a valid calendar date: 'yesterday'",
            "details": {"field": "date"}
        }
    """

    def __init__(
        self,
        message: str = "Validation failed",
        field: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        if field:
            ctx["field"] = field
        super().__init__(message=message, context=ctx)
        self.field = field


class AuthenticationError(NoteVaultError):
    """
    Raised when a mutating request lacks a valid API key.

    HTTP:    401 Unauthorized
    """

    def __init__(
        self,
        message: str = "A valid X-API-Key header is required for this operation",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class NotFoundError(NoteVaultError):
    """
    Raised when an operation addresses a note that does not exist.

    When:    PUT /api/notes/{id} with an id absent from the collection.
    HTTP:    404 Not Found

    Point lookups (GET /api/notes/{id}) do not raise this; they return an
    empty result and leave the "not found" decision to the caller.
    """

    def __init__(
        self,
        resource: str = "resource",
        resource_id: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        message = f"The requested {resource} was not found"
        if resource_id:
            message = f"{resource} with ID '{resource_id}' was not found"
        ctx = context or {}
        ctx["resource"] = resource
        if resource_id:
            ctx["resource_id"] = resource_id
        super().__init__(message=message, context=ctx)


class StoreUnavailableError(NoteVaultError):
    """
    Raised when the backing notes file cannot be read, parsed, or written.

    When:    Permission denied, disk full, malformed JSON, records missing fields.
    HTTP:    503 Service Unavailable

    Security Note:
        The message returned to the client is generic. The file path and the
        underlying OS or parse error travel in `context` and are logged
        server-side only.
    """

    def __init__(
        self,
        message: str = "Note storage is temporarily unavailable. Please try again later.",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)
