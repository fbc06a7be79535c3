"""
QuickNotes Backend: Custom Exception Hierarchy
================================================

What:  Application-specific exceptions for the notes service.
How:   Each exception carries a client-safe message and an optional context
       dict. Global handlers (registered in main.py) map them to HTTP status
       codes and plain-text bodies; the context is only ever logged.
Who:   Raised by NoteStore, NoteRepository, AssetService and middleware.

Exception Hierarchy:
    QuickNotesError (base)
    ├── ValidationError            → 400 Bad Request
    ├── NotFoundError              → 404 Not Found
    │   └── AssetMissingError      → 404 Not Found
    ├── DuplicateKeyError          → 409 Conflict
    ├── StorageError               → 400 Bad Request (mutations only)
    │   └── StorageUnavailableError → fatal at startup
    └── RequestTimeoutError        → 504 Gateway Timeout
"""

from typing import Any, Dict, Optional


class QuickNotesError(Exception):
    """
    Base exception for all QuickNotes application errors.

    Attributes:
        message:  User-facing error description (safe to return in a response)
        context:  Additional debug info (logged but NOT returned to client)
    """

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


class ValidationError(QuickNotesError):
    """
    Raised when client input fails a business rule.

    When:    Empty note content on create or update.
    HTTP:    400 Bad Request

    Schema-level problems (missing fields, non-integer ids) never reach this
    class; FastAPI answers those with its own 422.
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


class NotFoundError(QuickNotesError):
    """
    Raised when a requested resource does not exist.

    When:    GET /notes/{id} with an id that has no row.
    HTTP:    404 Not Found
    """

    def __init__(
        self,
        resource: str = "resource",
        resource_id: Optional[Any] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        message = f"The requested {resource} was not found"
        if resource_id is not None:
            message = f"{resource} with ID '{resource_id}' was not found"
        ctx = context or {}
        ctx["resource"] = resource
        if resource_id is not None:
            ctx["resource_id"] = resource_id
        super().__init__(message=message, context=ctx)


class AssetMissingError(NotFoundError):
    """Raised when the static client page is absent from the static directory."""

    def __init__(self, asset: str = "index.html", context: Optional[Dict[str, Any]] = None):
        super().__init__(resource="asset", resource_id=asset, context=context)
        self.asset = asset


class DuplicateKeyError(QuickNotesError):
    """
    Raised when a note is created with an id that is already taken.

    HTTP:    409 Conflict
    """

    def __init__(self, note_id: Optional[int] = None, context: Optional[Dict[str, Any]] = None):
        message = "A note with this ID already exists"
        if note_id is not None:
            message = f"A note with ID '{note_id}' already exists"
        ctx = context or {}
        if note_id is not None:
            ctx["note_id"] = note_id
        super().__init__(message=message, context=ctx)
        self.note_id = note_id


class StorageError(QuickNotesError):
    """
    Raised when a database statement fails.

    HTTP:    400 Bad Request with a generic reason on create/update/delete.
             Read paths (read, list, search) never surface it; the repository
             turns it into an empty or not-found result.

    The driver error is kept in `context` for the logs, never in `message`.
    """

    def __init__(
        self,
        message: str = "A storage error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class StorageUnavailableError(StorageError):
    """
    Raised when the storage location cannot be opened or prepared.

    When:    Store initialization (permission denied, missing directory,
             disk full, corrupt file).
    Effect:  Aborts process startup before the server begins listening.
    """

    def __init__(
        self,
        location: str = "",
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        ctx["location"] = location
        super().__init__(
            message=f"Storage location '{location}' could not be opened",
            context=ctx,
        )
        self.location = location


class RequestTimeoutError(QuickNotesError):
    """
    Raised when a request exceeds the configured per-request deadline.

    HTTP:    504 Gateway Timeout
    """

    def __init__(self, timeout: float = 0.0, context: Optional[Dict[str, Any]] = None):
        ctx = context or {}
        ctx["timeout_seconds"] = timeout
        super().__init__(
            message=f"Request did not complete within {timeout:g} seconds",
            context=ctx,
        )
        self.timeout = timeout
