# services/quotation-service/src/apps/core/services/operating_hours_service.py
"""
Operating Hours Resolver

Looks up the weekly schedule that applies to a date.
"""

import logging
from datetime import date, datetime, time, timedelta
from typing import Optional, Tuple
from zoneinfo import ZoneInfo

from django.conf import settings

from ..models import OperatingSchedule
from ..time_window import TimeWindow

logger = logging.getLogger(__name__)


class OperatingHoursResolver:
    """
    Resolves operating schedules.

    Weekdays use 0 = Sunday and are always derived in the configured
    QUOTATION_TIME_ZONE, never the process' local zone.
    """

    def __init__(self, time_zone: str = None):
        self.time_zone = ZoneInfo(time_zone or settings.QUOTATION_TIME_ZONE)

    def weekday_for(self, target_date: date) -> int:
        """Weekday of a calendar date, 0 = Sunday ... 6 = Saturday."""
        local_midnight = datetime.combine(target_date, time.min, tzinfo=self.time_zone)
        return (local_midnight.weekday() + 1) % 7

    def resolve(self, weekday: int) -> Tuple[Optional[OperatingSchedule], bool]:
        """
        Schedule for a weekday.

        found is False when there is no row or the row is inactive; callers
        treat the day as closed.
        """
        schedule = OperatingSchedule.objects.filter(weekday=weekday).first()
        if schedule is None or not schedule.is_active:
            logger.debug(f"No active schedule for weekday {weekday}")
            return schedule, False
        return schedule, True

    def resolve_for_date(self, target_date: date) -> Tuple[Optional[OperatingSchedule], bool]:
        return self.resolve(self.weekday_for(target_date))

    def resolve_following_day(self, target_date: date) -> Tuple[Optional[OperatingSchedule], bool]:
        return self.resolve_for_date(target_date + timedelta(days=1))

    @staticmethod
    def crosses_midnight(schedule: OperatingSchedule) -> bool:
        """True when the schedule closes on the day after it opens."""
        return schedule.close_minute < schedule.open_minute

    @staticmethod
    def opening_window(schedule: OperatingSchedule) -> TimeWindow:
        return TimeWindow.between(schedule.open_minute, schedule.close_minute)

    @staticmethod
    def weekday_name(weekday: int) -> str:
        return OperatingSchedule.Weekday(weekday).label
