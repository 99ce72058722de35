"""Booking domain - Booking models, API repository and the client-side BookingStore"""

from .exceptions import BookingConflict, BookingError
from .repository import BookingRepository
from .schemas import (
    AvailabilityQuery,
    Booking,
    BookingCreate,
    BookingScope,
    BookingStatus,
    BookingUpdate,
    PaymentStatus,
    Pricing,
    SlotAvailability,
    TimeSlot,
    ref_id,
)
from .service import BookingStore

__all__ = [
    "AvailabilityQuery",
    "Booking",
    "BookingConflict",
    "BookingCreate",
    "BookingError",
    "BookingRepository",
    "BookingScope",
    "BookingStatus",
    "BookingStore",
    "BookingUpdate",
    "PaymentStatus",
    "Pricing",
    "SlotAvailability",
    "TimeSlot",
    "ref_id",
]
