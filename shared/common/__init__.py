# Shared Common Library for the event space services.
# Model mixins live in shared.common.mixins and are imported directly by
# models so that importing this package never touches the app registry.

__version__ = "1.0.0"

from .utils import (
    MINUTES_PER_DAY,
    parse_clock,
    format_clock,
    clock_to_time,
    parse_hours,
    round_half_up,
    percent_of,
    to_minor,
    from_minor,
    format_currency,
    local_today,
    parse_date,
)

from .validators import (
    validate_uuid,
    validate_uuid_list,
    validate_booking_date,
    validate_email,
    validate_required,
    validate_positive_decimal,
    validate_range,
)

__all__ = [
    # Version
    '__version__',

    # Utilities
    'MINUTES_PER_DAY',
    'parse_clock',
    'format_clock',
    'clock_to_time',
    'parse_hours',
    'round_half_up',
    'percent_of',
    'to_minor',
    'from_minor',
    'format_currency',
    'local_today',
    'parse_date',

    # Validators
    'validate_uuid',
    'validate_uuid_list',
    'validate_booking_date',
    'validate_email',
    'validate_required',
    'validate_positive_decimal',
    'validate_range',
]
