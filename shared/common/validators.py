"""
Shared Validators Module.

Common validation utilities used across services.
"""
from datetime import date, timedelta
from decimal import Decimal, InvalidOperation
from typing import Any, List
from uuid import UUID

from django.core.exceptions import ValidationError
from django.core.validators import validate_email as django_validate_email


# =============================================================================
# UUID VALIDATORS
# =============================================================================

def validate_uuid(value: Any, field_name: str = "value") -> UUID:
    """Validate and convert a value to UUID."""
    if isinstance(value, UUID):
        return value
    try:
        return UUID(str(value))
    except (ValueError, TypeError):
        raise ValidationError(f"Invalid UUID format for {field_name}")


def validate_uuid_list(values: List, field_name: str = "values") -> List[UUID]:
    """Validate and convert a list of values to UUIDs."""
    if values is None:
        return []
    if not isinstance(values, (list, tuple, set)):
        raise ValidationError(f"{field_name} must be a list")
    return [validate_uuid(v, field_name) for v in values]


# =============================================================================
# DATE VALIDATORS
# =============================================================================

def validate_booking_date(
    value: date,
    today: date,
    allow_today: bool = False,
    max_days_ahead: int = 365,
    field_name: str = "date"
) -> None:
    """
    Validate that a date falls inside the bookable window.

    The window opens today (or tomorrow when same-day bookings are not
    allowed) and closes max_days_ahead days from today.
    """
    earliest = today if allow_today else today + timedelta(days=1)
    if value < earliest:
        msg = "must be today or later" if allow_today else "must be after today"
        raise ValidationError(f"{field_name} {msg}")

    latest = today + timedelta(days=max_days_ahead)
    if value > latest:
        raise ValidationError(
            f"{field_name} cannot be more than {max_days_ahead} days ahead"
        )


# =============================================================================
# STRING AND NUMBER VALIDATORS
# =============================================================================

def validate_email(value: str, field_name: str = "email") -> str:
    """Validate email format."""
    value = (value or '').strip().lower()
    django_validate_email(value)
    return value


def validate_required(value: Any, field_name: str) -> Any:
    """Reject None and blank strings."""
    if value is None or (isinstance(value, str) and not value.strip()):
        raise ValidationError(f"{field_name} is required")
    return value


def validate_positive_decimal(value: Any, field_name: str = "amount") -> Decimal:
    """Validate that a value is a positive decimal."""
    try:
        value = Decimal(str(value))
    except (InvalidOperation, TypeError):
        raise ValidationError(f"{field_name} must be a number")
    if not value.is_finite():
        raise ValidationError(f"{field_name} must be a finite number")
    if value <= 0:
        raise ValidationError(f"{field_name} must be positive")
    return value


def validate_range(
    value: int,
    min_value: int = None,
    max_value: int = None,
    field_name: str = "value"
) -> int:
    """Validate that a value is within range."""
    if min_value is not None and value < min_value:
        raise ValidationError(f"{field_name} must be at least {min_value}")
    if max_value is not None and value > max_value:
        raise ValidationError(f"{field_name} cannot exceed {max_value}")
    return value
