# shared/common/utils.py
"""
Common Utility Functions

Clock arithmetic, money conversion and local-date helpers shared by services.
"""

import re
from datetime import date, datetime, time
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from typing import Union
from zoneinfo import ZoneInfo

from django.core.exceptions import ValidationError
from django.utils import timezone

MINUTES_PER_DAY = 24 * 60

_CLOCK_RE = re.compile(r'^(\d{1,2}):(\d{2})(?::(\d{2}))?$')


# =============================================================================
# CLOCK UTILITIES
# =============================================================================

def parse_clock(value: Union[str, time]) -> int:
    """
    Convert an "HH:MM" / "HH:MM:SS" string or a time into minutes after midnight.

    Seconds are dropped. Raises ValidationError for anything that is not a
    valid clock reading.
    """
    if isinstance(value, time):
        return value.hour * 60 + value.minute

    match = _CLOCK_RE.match(str(value).strip()) if value is not None else None
    if not match:
        raise ValidationError(f"Invalid time '{value}', expected HH:MM")

    hours, minutes = int(match.group(1)), int(match.group(2))
    if hours > 23 or minutes > 59:
        raise ValidationError(f"Invalid time '{value}', expected HH:MM")
    return hours * 60 + minutes


def format_clock(minutes: int) -> str:
    """Format minutes after midnight as HH:MM, folding values outside one day."""
    minutes %= MINUTES_PER_DAY
    return f"{minutes // 60:02d}:{minutes % 60:02d}"


def clock_to_time(minutes: int) -> time:
    minutes %= MINUTES_PER_DAY
    return time(minutes // 60, minutes % 60)


def parse_hours(value) -> int:
    """Whole number of hours from an int or numeric string."""
    try:
        hours = Decimal(str(value))
    except (InvalidOperation, TypeError):
        raise ValidationError(f"Invalid duration '{value}'")
    if not hours.is_finite() or hours <= 0 or hours != hours.to_integral_value():
        raise ValidationError(f"Duration must be a whole number of hours, got '{value}'")
    return int(hours)


# =============================================================================
# MONEY UTILITIES
# =============================================================================

def round_half_up(value: Union[Decimal, int]) -> int:
    """Round to the nearest integer, halves away from zero."""
    return int(Decimal(value).quantize(Decimal(1), rounding=ROUND_HALF_UP))


def percent_of(amount: int, percent: Union[int, Decimal]) -> int:
    """Integer percentage of an integer amount, rounded half up."""
    return round_half_up(Decimal(amount) * Decimal(str(percent)) / Decimal(100))


def to_minor(amount: Union[Decimal, int, str], decimals: int = 2) -> int:
    """Convert a currency amount into integer minor units."""
    scaled = Decimal(str(amount)) * (Decimal(10) ** decimals)
    return round_half_up(scaled)


def from_minor(amount: int, decimals: int = 2) -> Decimal:
    """Convert integer minor units back into a Decimal currency amount."""
    return (Decimal(amount) / (Decimal(10) ** decimals)).quantize(Decimal(10) ** -decimals)


def format_currency(amount: Union[Decimal, float], currency: str = 'COP') -> str:
    """Format amount as currency string"""
    symbols = {
        'COP': '$',
        'USD': '$',
        'EUR': '€',
    }
    symbol = symbols.get(currency, currency + ' ')
    return f"{symbol}{amount:,.2f}"


# =============================================================================
# DATE UTILITIES
# =============================================================================

def local_now(tz_name: str) -> datetime:
    """Current time in the named timezone."""
    return timezone.now().astimezone(ZoneInfo(tz_name))


def local_today(tz_name: str) -> date:
    """Today's calendar date in the named timezone."""
    return local_now(tz_name).date()


def parse_date(value: Union[str, date]) -> date:
    """Accept a date or an ISO YYYY-MM-DD string."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    try:
        return date.fromisoformat(str(value))
    except ValueError:
        raise ValidationError(f"Invalid date '{value}', expected YYYY-MM-DD")
