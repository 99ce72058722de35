"""Booking domain errors"""

from typing import Optional

from .schemas import Booking


class BookingError(Exception):
    """Any failed booking operation (network, validation, 4xx/5xx)"""

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        error: Optional[str] = None,
    ):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.error = error


class BookingConflict(BookingError):
    """The requested slot overlaps existing bookings (HTTP 409 on create)"""

    def __init__(self, message: str, conflicts: Optional[list[Booking]] = None):
        super().__init__(message, status_code=409, error="BOOKING_CONFLICT")
        self.conflicts = conflicts or []
