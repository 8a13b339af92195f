"""
HotOrNot Backend — Custom Exception Hierarchy
===============================================

What:  Application-specific exceptions for each error scenario.
How:   Each exception carries a message (safe to return to the client) and an
       optional context dict (logged server-side only). Global handlers
       registered in main.py map them to JSON responses.
Who:   Raised by services; caught by the global handlers.

Exception Hierarchy:
    HotOrNotError (base)
    ├── ValidationError          → 400 Bad Request
    │   ├── InvalidVoteError     → 400 (vote value not "hot"/"not")
    │   └── UploadError          → 400 (missing or rejected upload)
    ├── NotFoundError            → 404 Not Found
    └── StorageError             → 500 Internal Server Error
        └── FileStorageError     → 500 (disk write/delete failed)
"""

from typing import Any, Dict, Iterable, Optional


class HotOrNotError(Exception):
    """
    Base exception for all application errors.

    Attributes:
        message:  User-facing error description (safe to return in API response)
        context:  Additional debug info (logged but NOT returned to client
                  unless the handler chooses to expose it as `details`)
    """

    error_code = "server_error"

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


class ValidationError(HotOrNotError):
    """
    Raised when client input fails a business rule.

    HTTP 400. FastAPI's own schema validation (422) is remapped to this
    shape as well so clients only ever see 400 for bad input.
    """

    error_code = "validation_error"

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


class InvalidVoteError(ValidationError):
    """Vote value outside the enumerated set. No mutation has happened."""

    error_code = "invalid_vote"

    def __init__(
        self,
        value: Any = None,
        allowed: Iterable[str] = ("hot", "not"),
        context: Optional[Dict[str, Any]] = None,
    ):
        allowed = list(allowed)
        ctx = context or {}
        ctx["allowed"] = allowed
        super().__init__(
            message=f"Invalid vote type. Expected one of: {', '.join(allowed)}",
            field="vote",
            context=ctx,
        )
        self.value = value


class UploadError(ValidationError):
    """Upload request had no file, an empty file, or a rejected file."""

    error_code = "upload_error"

    def __init__(
        self,
        message: str = "No file uploaded",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, field="image", context=context)


class NotFoundError(HotOrNotError):
    """
    Raised when an operation references a nonexistent resource.

    SQLAlchemy reports a missing row as None or rowcount 0; services turn
    that into NotFoundError so the route layer stays free of HTTP logic.
    """

    error_code = "not_found"

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
            ctx["resource_id"] = str(resource_id)
        super().__init__(message=message, context=ctx)


class StorageError(HotOrNotError):
    """
    Raised when the persistence layer fails.

    Security Note:
        The message returned to the client is always generic. Query text,
        constraint names and driver errors go to the log only.
    """

    def __init__(
        self,
        message: str = "A storage error occurred. Please try again later.",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class FileStorageError(StorageError):
    """
    Raised when file system operations fail (disk full, permission denied).

    The client gets a generic message; paths and OS errors are logged.
    """

    def __init__(
        self,
        message: str = "File storage operation failed",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)
