"""
Domain errors raised by the service layer and mapped to HTTP responses in main.py
"""

from typing import Any, Optional


class EventraError(Exception):
    """Base class for errors surfaced to API callers"""

    status_code = 400
    error_code = "error"

    def __init__(self, message: str, details: Optional[Any] = None):
        super().__init__(message)
        self.message = message
        self.details = details


class NotFoundError(EventraError):
    status_code = 404
    error_code = "not_found"

    def __init__(self, resource: str = "Resource", details: Optional[Any] = None):
        super().__init__(f"{resource} not found", details)


class ClosedError(EventraError):
    """The event no longer accepts responses"""

    status_code = 403
    error_code = "closed"

    def __init__(self, message: str = "This poll has ended and is no longer accepting responses"):
        super().__init__(message)


class ConflictError(EventraError):
    status_code = 409
    error_code = "conflict"


class ValidationError(EventraError):
    """Invalid input; details holds every message found"""

    status_code = 422
    error_code = "validation_error"

    def __init__(self, errors: list[str], message: str = "Validation failed"):
        super().__init__(message, details=errors)
        self.errors = errors


class DatabaseError(EventraError):
    status_code = 500
    error_code = "database_error"

    def __init__(self, message: str = "Database operation failed", details: Optional[Any] = None):
        super().__init__(message, details)


class EventIdTaken(Exception):
    """A generated event id already exists in the store"""


class DuplicateParticipant(Exception):
    """The (event, email) uniqueness constraint rejected a new participant"""


class SlotTaken(Exception):
    """Another participant booked one of the slots inside the write transaction"""

    def __init__(self, slot_ids):
        super().__init__(f"Time slots already taken: {slot_ids}")
        self.slot_ids = slot_ids
