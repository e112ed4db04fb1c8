# services/quotation-service/src/apps/core/time_window.py
"""
Time Window

Minute-of-day intervals with support for windows that run past midnight.
Every overlap test in the service goes through this module.
"""

from dataclasses import dataclass
from datetime import time
from decimal import Decimal
from typing import Tuple, Union

from shared.common.utils import MINUTES_PER_DAY, format_clock, parse_clock


@dataclass(frozen=True)
class TimeWindow:
    """
    Half-open interval [start, start + minutes) on a day's minute line.

    start is folded into 0..1439, so a window built from a negative start
    (a setup buffer reaching back before midnight) begins late the previous
    evening and wraps. end may exceed 1440 when the window spills into the
    following day.
    """

    start: int
    minutes: int

    def __post_init__(self):
        if self.minutes < 0:
            raise ValueError(f"Window length cannot be negative: {self.minutes}")
        object.__setattr__(self, 'start', self.start % MINUTES_PER_DAY)

    # ==========================================================================
    # Construction
    # ==========================================================================

    @classmethod
    def between(cls, start: int, end: int) -> 'TimeWindow':
        """
        Window between two clock offsets.

        An end at or before the start means the window runs past midnight,
        so equal offsets describe a whole day.
        """
        start %= MINUTES_PER_DAY
        end %= MINUTES_PER_DAY
        if end <= start:
            end += MINUTES_PER_DAY
        return cls(start, end - start)

    @classmethod
    def from_times(cls, start: Union[str, time], end: Union[str, time]) -> 'TimeWindow':
        return cls.between(parse_clock(start), parse_clock(end))

    @classmethod
    def for_event(cls, start: Union[str, time, int], duration_hours) -> 'TimeWindow':
        """Window of an event starting at a clock time and lasting some hours."""
        if not isinstance(start, int):
            start = parse_clock(start)
        return cls(start, hours_to_minutes(duration_hours))

    def extended(self, before: int, after: int) -> 'TimeWindow':
        """Window grown by `before` minutes at the start and `after` at the end."""
        return TimeWindow(self.start - before, self.minutes + before + after)

    # ==========================================================================
    # Properties
    # ==========================================================================

    @property
    def end(self) -> int:
        return self.start + self.minutes

    @property
    def crosses_midnight(self) -> bool:
        """True when the window ends on or after the following midnight."""
        return self.end >= MINUTES_PER_DAY

    @property
    def end_clock(self) -> int:
        return self.end % MINUTES_PER_DAY

    @property
    def start_label(self) -> str:
        return format_clock(self.start)

    @property
    def end_label(self) -> str:
        return format_clock(self.end_clock)

    def segments(self) -> Tuple[Tuple[int, int], ...]:
        """
        Split into at most two absolute sub-intervals inside [0, 1440).

        Empty windows have no segments and windows of a day or longer cover
        the whole day.
        """
        if self.minutes == 0:
            return ()
        if self.minutes >= MINUTES_PER_DAY:
            return ((0, MINUTES_PER_DAY),)
        if self.end <= MINUTES_PER_DAY:
            return ((self.start, self.end),)
        return ((self.start, MINUTES_PER_DAY), (0, self.end - MINUTES_PER_DAY))

    # ==========================================================================
    # Comparison
    # ==========================================================================

    def overlaps(self, other: 'TimeWindow') -> bool:
        """Half-open overlap: touching windows do not overlap."""
        return any(
            not (a_end <= b_start or a_start >= b_end)
            for a_start, a_end in self.segments()
            for b_start, b_end in other.segments()
        )

    def collides_inclusive(self, other: 'TimeWindow') -> bool:
        """
        Overlap test used when cancelling competing quotes.

        `other` collides when its start falls inside [start, end), its end
        inside (start, end], or it contains this window entirely. For
        non-empty windows this agrees with overlaps().
        """
        for start, end in self.segments():
            for other_start, other_end in other.segments():
                if start <= other_start < end:
                    return True
                if start < other_end <= end:
                    return True
                if other_start <= start and other_end >= end:
                    return True
        return False

    def __str__(self):
        return f"{self.start_label}-{self.end_label}"


def overlaps(a: TimeWindow, b: TimeWindow) -> bool:
    return a.overlaps(b)


def hours_to_minutes(hours) -> int:
    """Whole minutes in an hour count given as int, float or Decimal."""
    return int(Decimal(str(hours)) * 60)
