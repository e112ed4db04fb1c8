# services/quotation-service/src/apps/core/services/pricing_service.py
"""
Pricing Calculator

Itemized prices for feasible event requests. All arithmetic runs on
integer minor currency units.
"""

import logging
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any, Dict, List, Sequence

from django.conf import settings
from django.core.exceptions import ValidationError as DjangoValidationError
from django.db.models import Q

from shared.common.utils import format_clock, from_minor, parse_clock, parse_hours, percent_of, to_minor

from ..models import AddOnService, AdditionalHourRate, RateCard
from ..time_window import TimeWindow

logger = logging.getLogger(__name__)

SHORT_TIER_HOURS = 4
LONG_TIER_HOURS = 8


@dataclass(frozen=True)
class LineItem:
    """One priced line; amounts in minor units."""

    description: str
    quantity: int
    unit_price: int
    line_total: int

    def as_dict(self, decimals: int) -> Dict[str, Any]:
        return {
            'description': self.description,
            'quantity': self.quantity,
            'unit_price': str(from_minor(self.unit_price, decimals)),
            'line_total': str(from_minor(self.line_total, decimals)),
        }


@dataclass
class PricingRequest:
    configuration_id: Any
    client_type: str
    start_time: Any
    duration_hours: int
    attendees: int = 0
    add_on_ids: Sequence[Any] = ()


@dataclass
class PriceBreakdown:
    line_items: List[LineItem] = field(default_factory=list)
    decimals: int = 2
    extra_hours_applied: bool = False
    night_surcharge_applied: bool = False

    @property
    def total_minor(self) -> int:
        return sum(item.line_total for item in self.line_items)

    @property
    def total(self) -> Decimal:
        return from_minor(self.total_minor, self.decimals)

    def as_json(self) -> List[Dict[str, Any]]:
        return [item.as_dict(self.decimals) for item in self.line_items]


class PricingCalculator:
    """
    Computes rental, extra hours, night surcharge and add-on lines.

    Raises RateNotFoundError when the configuration has no rate card for the
    client type and NoApplicableRateError when no tier covers the duration.
    """

    def __init__(self):
        self.decimals = settings.QUOTATION_CURRENCY_DECIMALS
        self.surcharge_cutoff = parse_clock(settings.QUOTATION_NIGHT_SURCHARGE_CUTOFF)
        self.surcharge_percent = settings.QUOTATION_NIGHT_SURCHARGE_PERCENT

    def calculate(self, request: PricingRequest) -> PriceBreakdown:
        from . import QuotationValidationError, RateNotFoundError

        try:
            hours = parse_hours(request.duration_hours)
            event = TimeWindow.for_event(request.start_time, hours)
        except DjangoValidationError as e:
            raise QuotationValidationError(e.messages[0]) from e

        rate_card = RateCard.objects.filter(
            configuration_id=request.configuration_id,
            client_type=request.client_type
        ).first()
        if rate_card is None:
            raise RateNotFoundError(
                f"No rate card for configuration {request.configuration_id} "
                f"and client type {request.client_type}"
            )

        breakdown = PriceBreakdown(decimals=self.decimals)

        # 1. Base rental
        base_price = self._base_price(rate_card, hours)
        breakdown.line_items.append(
            LineItem(f"Venue rental ({hours}h)", 1, base_price, base_price)
        )

        # 2. Hours beyond the long tier
        if hours > LONG_TIER_HOURS:
            extra_line = self._additional_hours_line(request, hours - LONG_TIER_HOURS)
            if extra_line:
                breakdown.line_items.append(extra_line)
                breakdown.extra_hours_applied = True

        # 3. Night surcharge on everything priced so far
        if self.applies_night_surcharge(event):
            surcharge = percent_of(breakdown.total_minor, self.surcharge_percent)
            breakdown.line_items.append(
                LineItem(
                    f"Night surcharge (after {format_clock(self.surcharge_cutoff)})",
                    1,
                    surcharge,
                    surcharge
                )
            )
            breakdown.night_surcharge_applied = True

        # 4. Add-on services
        for add_on in self._add_ons(request):
            price = to_minor(add_on.price, self.decimals)
            breakdown.line_items.append(LineItem(add_on.name, 1, price, price))

        logger.debug(
            f"Priced {hours}h for configuration {request.configuration_id}: {breakdown.total}"
        )
        return breakdown

    def applies_night_surcharge(self, event: TimeWindow) -> bool:
        """Events ending after the cutoff, or running past midnight, pay the surcharge."""
        return event.end > self.surcharge_cutoff or event.crosses_midnight

    # ==========================================================================
    # Helper Methods
    # ==========================================================================

    def _base_price(self, rate_card: RateCard, hours: int) -> int:
        from . import NoApplicableRateError

        price_4h = self._present(rate_card.price_4h)
        price_8h = self._present(rate_card.price_8h)

        if hours <= SHORT_TIER_HOURS and price_4h is not None:
            return price_4h
        if hours <= LONG_TIER_HOURS and price_8h is not None:
            return price_8h
        if price_8h is not None:
            return price_8h

        raise NoApplicableRateError(f"No rate covers a {hours}h event for {rate_card}")

    def _present(self, price) -> Any:
        """Minor units of a price, or None when the tier is not offered."""
        if price is None or price <= 0:
            return None
        return to_minor(price, self.decimals)

    def _additional_hours_line(self, request: PricingRequest, extra_hours: int):
        rate = AdditionalHourRate.active().filter(
            configuration_id=request.configuration_id,
            client_type=request.client_type,
            base_hours=LONG_TIER_HOURS,
            min_attendees__lte=request.attendees,
        ).filter(
            Q(max_attendees__isnull=True) | Q(max_attendees__gte=request.attendees)
        ).order_by('min_attendees').first()

        if rate is None:
            logger.warning(
                f"No additional hour rate for {request.attendees} attendees, "
                f"{extra_hours} extra hours left unpriced",
                extra={'configuration_id': str(request.configuration_id)}
            )
            return None

        unit_price = to_minor(rate.price_per_hour, self.decimals)
        return LineItem("Additional hours", extra_hours, unit_price, unit_price * extra_hours)

    def _add_ons(self, request: PricingRequest):
        if not request.add_on_ids:
            return []
        return AddOnService.active().filter(
            id__in=list(request.add_on_ids),
            client_type=request.client_type,
        ).order_by('name')
