"""Shared validation utilities"""

from datetime import datetime
from typing import Optional


def validate_iso_datetime(value: Optional[str]) -> Optional[str]:
    """
    Validate an ISO 8601 timestamp without changing how it is written.

    Args:
        value: Timestamp string, e.g. "2026-03-01T09:00:00.000Z"

    Returns:
        The original string, untouched

    Raises:
        ValueError: If the string is not ISO 8601
    """
    if not value:
        return value

    try:
        datetime.fromisoformat(value.replace("Z", "+00:00"))
    except (ValueError, AttributeError):
        raise ValueError(f"Invalid ISO 8601 datetime: {value}")

    return value


def validate_amount(amount: Optional[float]) -> Optional[float]:
    """Amounts are major currency units and may not be negative"""
    if amount is not None and amount < 0:
        raise ValueError("Amount must not be negative")
    return amount


def validate_percentage(value: float) -> float:
    if not 0 <= value <= 100:
        raise ValueError("Percentage must be between 0 and 100")
    return value
