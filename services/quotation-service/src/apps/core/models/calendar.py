# services/quotation-service/src/apps/core/models/calendar.py
"""
Calendar Block Model

Reserved intervals on a space's calendar.
"""

from django.db import models

from shared.common.mixins import TimestampMixin, UUIDPrimaryKeyMixin

from ..time_window import TimeWindow
from .space import Space


class CalendarBlock(UUIDPrimaryKeyMixin, TimestampMixin):
    """
    A reserved interval, setup and teardown buffers included.

    buffered_end at or before buffered_start means the block runs past
    midnight. Blocks of the same space and date never overlap.
    """

    class BlockType(models.TextChoices):
        CONFIRMED_RESERVATION = 'confirmed_reservation', 'Confirmed Reservation'
        MANUAL = 'manual', 'Manual'
        MAINTENANCE = 'maintenance', 'Maintenance'

    space = models.ForeignKey(
        Space,
        on_delete=models.CASCADE,
        related_name='calendar_blocks'
    )
    date = models.DateField(db_index=True)
    buffered_start = models.TimeField()
    buffered_end = models.TimeField()

    quote = models.ForeignKey(
        'core.Quote',
        on_delete=models.SET_NULL,
        blank=True,
        null=True,
        related_name='calendar_blocks'
    )
    block_type = models.CharField(
        max_length=30,
        choices=BlockType.choices,
        default=BlockType.MANUAL
    )
    reason = models.CharField(max_length=500, blank=True, null=True)

    class Meta:
        db_table = 'calendar_blocks'
        ordering = ['date', 'buffered_start']
        indexes = [
            models.Index(fields=['space', 'date']),
        ]

    def __str__(self):
        return f"{self.space_id} {self.date} {self.window}"

    @property
    def window(self) -> TimeWindow:
        return TimeWindow.from_times(self.buffered_start, self.buffered_end)

    @classmethod
    def for_space_and_date(cls, space_id, target_date):
        return cls.objects.filter(space_id=space_id, date=target_date).order_by('buffered_start')
