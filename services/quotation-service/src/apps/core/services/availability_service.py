# services/quotation-service/src/apps/core/services/availability_service.py
"""
Availability Validator

Decides whether a requested event fits the venue's operating hours and the
space's calendar, setup and teardown buffers included.
"""

import logging
from dataclasses import asdict, dataclass
from datetime import date
from typing import Any, Dict, Iterable, Optional, Union

from django.conf import settings
from django.core.exceptions import ValidationError as DjangoValidationError

from shared.common.utils import MINUTES_PER_DAY, format_clock, parse_clock, parse_date, parse_hours

from ..models import CalendarBlock, OperatingSchedule, Space
from ..time_window import TimeWindow
from .operating_hours_service import OperatingHoursResolver

logger = logging.getLogger(__name__)

NEXT_DAY_SUFFIX = ' (next day)'

# A close time of 23:59 is read as "open until midnight"
END_OF_DAY = MINUTES_PER_DAY - 1


@dataclass
class AvailabilityResult:
    """Outcome of an availability check. Rejections are results, not errors."""

    available: bool
    message: str
    end_time: Optional[str] = None
    crosses_midnight: bool = False
    conflict: Optional[Dict[str, Any]] = None

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def buffered_window(space: Space, event: TimeWindow) -> TimeWindow:
    """Event window grown by the space's setup and teardown buffers."""
    setup, teardown = space.buffer_hours
    return event.extended(setup * 60, teardown * 60)


def first_conflict(window: TimeWindow, blocks: Iterable[CalendarBlock]) -> Optional[CalendarBlock]:
    for block in blocks:
        if window.overlaps(block.window):
            return block
    return None


class AvailabilityValidator:
    """
    Read-only availability checks.

    Results are a snapshot; confirmation re-checks the calendar under a lock.
    """

    def __init__(self, resolver: OperatingHoursResolver = None):
        self.resolver = resolver or OperatingHoursResolver()

    def validate(
        self,
        space_id,
        target_date: Union[date, str],
        start_time,
        duration_hours,
        event_type: str = None
    ) -> AvailabilityResult:
        """
        Check a requested event.

        Raises QuotationValidationError for malformed input and
        SpaceNotFoundError for an unknown space. Every business rejection
        comes back as an unavailable result with a display message.
        """
        from . import QuotationValidationError

        try:
            target_date = parse_date(target_date)
            start = parse_clock(start_time)
            hours = parse_hours(duration_hours)
        except DjangoValidationError as e:
            raise QuotationValidationError(e.messages[0]) from e

        space = self.get_space(space_id)
        if not space.is_active:
            return AvailabilityResult(False, f"{space.name} is not available for bookings")

        # 1. Operating schedule
        schedule, found = self.resolver.resolve_for_date(target_date)
        if not found:
            day_name = self.resolver.weekday_name(self.resolver.weekday_for(target_date))
            return AvailabilityResult(False, f"The venue is closed on {day_name}")

        # 2. Duration bounds
        min_hours = settings.QUOTATION_MIN_DURATION_HOURS
        max_hours = settings.QUOTATION_MAX_DURATION_HOURS
        if not min_hours <= hours <= max_hours:
            return AvailabilityResult(
                False,
                f"Duration must be between {min_hours} and {max_hours} hours "
                f"(requested {hours} hours)"
            )

        # 3. Event window
        event = TimeWindow.for_event(start, hours)

        # 4-5. Operating hours
        reason = self._check_operating_hours(schedule, event, target_date)
        if reason:
            return AvailabilityResult(False, reason, crosses_midnight=event.crosses_midnight)

        # 6. Calendar blocks
        blocks = CalendarBlock.for_space_and_date(space.id, target_date)
        conflict = first_conflict(buffered_window(space, event), blocks)
        if conflict:
            setup, teardown = space.buffer_hours
            logger.info(
                f"Requested {event} on {target_date} conflicts with block {conflict.id}",
                extra={'space_id': str(space.id), 'event_type': event_type}
            )
            return AvailabilityResult(
                False,
                f"The requested time overlaps another event ({conflict.window}): "
                f"{conflict.reason or 'The space is reserved'}. "
                f"Events require {setup}h setup and {teardown}h teardown",
                crosses_midnight=event.crosses_midnight,
                conflict={
                    'id': str(conflict.id),
                    'start': conflict.window.start_label,
                    'end': conflict.window.end_label,
                    'reason': conflict.reason,
                },
            )

        # 7. Available
        end_label = event.end_label
        message = f"Available from {event.start_label} to {end_label}"
        if event.crosses_midnight:
            message += NEXT_DAY_SUFFIX
        return AvailabilityResult(
            True,
            message,
            end_time=end_label,
            crosses_midnight=event.crosses_midnight,
        )

    def get_space(self, space_id) -> Space:
        from . import SpaceNotFoundError

        try:
            return Space.objects.get(id=space_id)
        except (Space.DoesNotExist, DjangoValidationError):
            raise SpaceNotFoundError(f"Space {space_id} not found")

    # ==========================================================================
    # Helper Methods
    # ==========================================================================

    def _check_operating_hours(
        self,
        schedule: OperatingSchedule,
        event: TimeWindow,
        target_date: date
    ) -> Optional[str]:
        """Rejection message when the event falls outside opening hours."""
        opening = self.resolver.opening_window(schedule)
        open_label = format_clock(opening.start)
        close_label = format_clock(opening.end)
        crosses = self.resolver.crosses_midnight(schedule)

        if crosses and opening.end_clock < event.start < opening.start:
            return f"The venue is closed between {close_label} and {open_label}"

        if event.start < opening.start:
            return f"The venue opens at {open_label}; events cannot start earlier"

        if event.start >= opening.end:
            return f"The venue closes at {close_label}; events cannot start at or after closing time"

        if event.end > opening.end and not self._continues_next_day(opening, event, target_date):
            end_label = event.end_label + (NEXT_DAY_SUFFIX if event.crosses_midnight else '')
            close_suffix = NEXT_DAY_SUFFIX if crosses else ''
            return (
                f"The event would end at {end_label} but the venue closes at "
                f"{close_label}{close_suffix}"
            )

        return None

    def _continues_next_day(self, opening: TimeWindow, event: TimeWindow, target_date: date) -> bool:
        """
        True when an event running to or past midnight stays inside opening hours.

        The venue has to be open until midnight and open again at 00:00 on
        the following day, long enough to cover the rest of the event.
        """
        if opening.end < END_OF_DAY:
            return False
        if event.end <= MINUTES_PER_DAY:
            return True

        schedule, found = self.resolver.resolve_following_day(target_date)
        if not found or schedule.open_minute != 0:
            return False

        next_opening = self.resolver.opening_window(schedule)
        return event.end - MINUTES_PER_DAY <= next_opening.end

