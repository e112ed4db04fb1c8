# services/quotation-service/src/apps/core/models/schedule.py
"""
Operating Schedule Model

Weekly opening hours of the venue.
"""

from django.db import models

from shared.common.mixins import TimestampMixin, UUIDPrimaryKeyMixin
from shared.common.utils import parse_clock


class OperatingSchedule(UUIDPrimaryKeyMixin, TimestampMixin):
    """
    Opening hours for one weekday.

    A close time earlier than the open time means the venue stays open past
    midnight into the following day.
    """

    class Weekday(models.IntegerChoices):
        SUNDAY = 0, 'Sunday'
        MONDAY = 1, 'Monday'
        TUESDAY = 2, 'Tuesday'
        WEDNESDAY = 3, 'Wednesday'
        THURSDAY = 4, 'Thursday'
        FRIDAY = 5, 'Friday'
        SATURDAY = 6, 'Saturday'

    weekday = models.IntegerField(choices=Weekday.choices, unique=True)
    open_time = models.TimeField()
    close_time = models.TimeField()
    is_active = models.BooleanField(default=True)

    class Meta:
        db_table = 'operating_schedules'
        ordering = ['weekday']

    def __str__(self):
        return f"{self.get_weekday_display()}: {self.open_time:%H:%M} - {self.close_time:%H:%M}"

    @property
    def open_minute(self) -> int:
        return parse_clock(self.open_time)

    @property
    def close_minute(self) -> int:
        return parse_clock(self.close_time)
