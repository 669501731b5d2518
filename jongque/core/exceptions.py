# jongque/core/exceptions.py
"""
Domain error taxonomy for the booking engine.

Services raise these; the HTTP layer maps them to status codes in one place
(see jongque.main). Callers retry on ConflictError, never blindly on
StorageFailureError.
"""
from typing import Optional


class JongQueError(Exception):
    """Base class for every error the booking engine reports"""

    code = "error"
    status_code = 500

    def __init__(self, message: str, code: Optional[str] = None):
        super().__init__(message)
        self.message = message
        if code:
            self.code = code

    def to_dict(self):
        return {"success": False, "error": self.code, "message": self.message}


class InvalidRequestError(JongQueError):
    """Missing or malformed input, detected before any write"""
    code = "invalid_request"
    status_code = 400


class DuplicateEntryError(InvalidRequestError):
    code = "duplicate_entry"


class AlreadyBookedError(InvalidRequestError):
    code = "already_booked"


class InvalidTransitionError(InvalidRequestError):
    code = "invalid_transition"


class NotFoundError(JongQueError):
    code = "not_found"
    status_code = 404


class BusinessNotFoundError(NotFoundError):
    code = "business_not_found"


class ServiceNotFoundError(NotFoundError):
    code = "service_not_found"


class ConflictError(JongQueError):
    """Slot or queue number already claimed; safe to retry with a fresh view"""
    code = "conflict"
    status_code = 409


class ServiceInUseError(ConflictError):
    """Upcoming bookings still depend on the service"""
    code = "service_in_use"


class StorageFailureError(JongQueError):
    code = "storage_failure"
    status_code = 500
