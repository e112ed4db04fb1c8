# services/quotation-service/src/apps/core/services/slot_service.py
"""
Slot Generator

Lists the start times still free for an event of a given length.
"""

import logging
from datetime import date
from typing import List, Union

from django.core.exceptions import ValidationError as DjangoValidationError

from shared.common.utils import MINUTES_PER_DAY, parse_date, parse_hours

from ..models import CalendarBlock
from ..time_window import TimeWindow, hours_to_minutes
from .availability_service import AvailabilityValidator, buffered_window, first_conflict
from .operating_hours_service import OperatingHoursResolver

logger = logging.getLogger(__name__)

SLOT_STEP_MINUTES = 60


class SlotGenerator:
    """Hourly start-time enumeration, filtered by the space's calendar."""

    def __init__(self, resolver: OperatingHoursResolver = None, validator: AvailabilityValidator = None):
        self.resolver = resolver or OperatingHoursResolver()
        self.validator = validator or AvailabilityValidator(self.resolver)

    def list_available_starts(
        self,
        space_id,
        target_date: Union[date, str],
        duration_hours=4
    ) -> List[str]:
        """
        Free start times as HH:MM strings in chronological order.

        Candidates run hourly from opening time to the last start that still
        ends by closing time and falls on the requested date. Each candidate
        is dropped when its buffered window overlaps a calendar block.
        Inactive spaces have no slots.
        """
        from . import QuotationValidationError

        try:
            target_date = parse_date(target_date)
            hours = parse_hours(duration_hours)
        except DjangoValidationError as e:
            raise QuotationValidationError(e.messages[0]) from e

        space = self.validator.get_space(space_id)
        if not space.is_active:
            return []

        schedule, found = self.resolver.resolve_for_date(target_date)
        if not found:
            return []

        opening = self.resolver.opening_window(schedule)
        # Starts stay on the requested date, even when the venue is open past midnight
        last_start = min(opening.end - hours_to_minutes(hours), MINUTES_PER_DAY - 1)
        blocks = list(CalendarBlock.for_space_and_date(space.id, target_date))

        slots = []
        candidate = opening.start
        while candidate <= last_start:
            event = TimeWindow(candidate, hours_to_minutes(hours))
            if first_conflict(buffered_window(space, event), blocks) is None:
                slots.append(event)
            candidate += SLOT_STEP_MINUTES

        logger.debug(
            f"{len(slots)} free slots for space {space.id} on {target_date} ({hours}h)"
        )
        return [slot.start_label for slot in slots]
