"""
CanvasBoard — Custom Exception Hierarchy
==========================================

What:  Application-specific exceptions shared by the server and the canvas core.
How:   Each exception carries a user-facing message and an optional context
       dict. Global FastAPI handlers (main.py) turn them into structured JSON
       responses; the canvas store turns PersistenceError into its ``error``
       field.
Who:   Raised by services, the board aggregate and persistence adapters.

Exception Hierarchy:
    CanvasBoardError (base)
    ├── ValidationError    → 400 Bad Request (client can fix)
    ├── NotFoundError      → 404 Not Found
    ├── ConflictError      → 409 Conflict (duplicate connection)
    ├── DatabaseError      → 500 Internal Server Error
    └── PersistenceError   → client-side only: adapter call failed
"""

from typing import Any, Dict, Optional


class CanvasBoardError(Exception):
    """
    Base exception for all CanvasBoard errors.

    Attributes:
        message:  User-facing error description (safe to return in API response)
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


class ValidationError(CanvasBoardError):
    """
    Raised when input breaks a board rule the schema cannot express.

    When:    Self-connection, section or card that belongs to another board,
             changing a card's kind.
    HTTP:    400 Bad Request
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


class NotFoundError(CanvasBoardError):
    """
    Raised when a referenced board, section, card, connection or note is absent.

    HTTP:    404 Not Found
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
        self.resource = resource
        self.resource_id = resource_id


class ConflictError(CanvasBoardError):
    """
    Raised when a create would duplicate an existing entity.

    When:    A connection already joins the same unordered pair of cards.
    HTTP:    409 Conflict
    """

    def __init__(
        self,
        message: str = "The resource already exists",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class DatabaseError(CanvasBoardError):
    """
    Raised when database operations fail unexpectedly.

    HTTP:    500 Internal Server Error. The response message is always generic;
             details go to the server log only.
    """

    def __init__(
        self,
        message: str = "A database error occurred. Please try again later.",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class PersistenceError(CanvasBoardError):
    """
    Raised by a canvas persistence adapter when a save or load fails.

    What:    The REST call returned a non-success status or kept failing at the
             transport level, or the local snapshot could not be read/written.
    Who:     Caught by CanvasStore, which reverts the optimistic mutation.
    """

    def __init__(
        self,
        message: str = "Could not save changes",
        status_code: Optional[int] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        if status_code is not None:
            ctx["status_code"] = status_code
        super().__init__(message=message, context=ctx)
        self.status_code = status_code
