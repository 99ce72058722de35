"""Schedfy booking API client"""

from .api_client import ApiClient, ApiError
from .domain.bookings import BookingConflict, BookingError, BookingScope, BookingStore
from .domain.promotions import AttributionEngine, build_promotion_report

__version__ = "1.0.0"

__all__ = [
    "ApiClient",
    "ApiError",
    "AttributionEngine",
    "BookingConflict",
    "BookingError",
    "BookingScope",
    "BookingStore",
    "build_promotion_report",
]
