"""
Domain errors raised by the booking services.

Each error carries the HTTP status the API layer answers with; the handler
registered in ``app.main`` turns them into ``ErrorResponse`` bodies. None of
them are transient, so callers should not retry.
"""
from typing import Optional

from fastapi import status


class BookingError(Exception):
    status_code = status.HTTP_400_BAD_REQUEST
    error = "booking_error"
    default_detail = "Booking operation failed."

    def __init__(self, detail: Optional[str] = None):
        self.detail = detail or self.default_detail
        super().__init__(self.detail)


class NotFoundError(BookingError):
    status_code = status.HTTP_404_NOT_FOUND
    error = "not_found"
    default_detail = "Resource not found."


class InvalidInputError(BookingError):
    status_code = status.HTTP_400_BAD_REQUEST
    error = "invalid_input"
    default_detail = "Invalid input."


class ConflictError(BookingError):
    status_code = status.HTTP_409_CONFLICT
    error = "conflict"
    default_detail = "Selected time slot is not available."


class ForbiddenError(BookingError):
    status_code = status.HTTP_403_FORBIDDEN
    error = "forbidden"
    default_detail = "Not authorized to perform this action."


class InvalidStateError(BookingError):
    status_code = status.HTTP_409_CONFLICT
    error = "invalid_state"
    default_detail = "Operation not allowed in the booking's current state."
