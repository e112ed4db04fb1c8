# services/quotation-service/src/apps/core/services/quotation_service.py
"""
Quotation Service

Turns a client's request into a priced, persisted quote: availability
first, then pricing, then storage and the quote-ready notification.
"""

import logging
import uuid
from dataclasses import dataclass, field, fields, replace
from datetime import date
from decimal import Decimal
from typing import Any, Dict, Optional, Sequence

from django.conf import settings
from django.core.exceptions import ValidationError as DjangoValidationError
from django.db import transaction

from shared.common.utils import (
    clock_to_time,
    from_minor,
    local_today,
    parse_clock,
    parse_date,
    parse_hours,
    percent_of,
)
from shared.common.validators import (
    validate_booking_date,
    validate_email,
    validate_range,
    validate_required,
    validate_uuid_list,
)

from ..models import ClientType, Quote, Space, SpaceConfiguration
from ..notifications import QuoteNotifier, get_notifier
from .availability_service import AvailabilityResult, AvailabilityValidator
from .pricing_service import PriceBreakdown, PricingCalculator, PricingRequest

logger = logging.getLogger(__name__)


@dataclass
class QuoteRequest:
    space_id: Any
    configuration_id: Any
    date: Any
    start_time: Any
    duration_hours: int
    attendees: int
    contact_name: str
    contact_email: str
    client_type: str = ClientType.NON_MEMBER
    event_type: Optional[str] = None
    add_on_ids: Sequence[Any] = ()
    contact_phone: Optional[str] = None
    observations: Optional[str] = None


UPDATABLE_FIELDS = frozenset(f.name for f in fields(QuoteRequest))


@dataclass
class QuoteResult:
    availability: AvailabilityResult
    breakdown: Optional[PriceBreakdown] = None
    deposit_minor: int = 0
    quote: Optional[Quote] = field(default=None)

    @property
    def available(self) -> bool:
        return self.availability.available

    @property
    def message(self) -> str:
        return self.availability.message

    @property
    def total(self) -> Decimal:
        return self.breakdown.total if self.breakdown else Decimal('0')

    @property
    def deposit_amount(self) -> Decimal:
        decimals = self.breakdown.decimals if self.breakdown else settings.QUOTATION_CURRENCY_DECIMALS
        return from_minor(self.deposit_minor, decimals)


class QuotationService:
    """
    Quote creation and editing.

    Holds no state beyond its collaborators, so one instance can serve any
    number of requests.
    """

    def __init__(
        self,
        validator: AvailabilityValidator = None,
        calculator: PricingCalculator = None,
        notifier: QuoteNotifier = None
    ):
        self.validator = validator or AvailabilityValidator()
        self.calculator = calculator or PricingCalculator()
        self.notifier = notifier or get_notifier()

    # ==========================================================================
    # Quotes
    # ==========================================================================

    def preview(self, request: QuoteRequest) -> QuoteResult:
        """Check availability and price a request without storing anything."""
        target_date, configuration = self._validate_request(request)

        availability = self.validator.validate(
            request.space_id,
            target_date,
            request.start_time,
            request.duration_hours,
            request.event_type,
        )
        if not availability.available:
            return QuoteResult(availability=availability)

        breakdown = self.calculator.calculate(PricingRequest(
            configuration_id=configuration.id,
            client_type=request.client_type,
            start_time=request.start_time,
            duration_hours=request.duration_hours,
            attendees=request.attendees,
            add_on_ids=request.add_on_ids,
        ))
        deposit = percent_of(breakdown.total_minor, settings.QUOTATION_DEPOSIT_PERCENT)

        return QuoteResult(availability=availability, breakdown=breakdown, deposit_minor=deposit)

    def create_quote(self, request: QuoteRequest) -> QuoteResult:
        """
        Price and store a pending quote.

        Unavailable requests are returned as-is and nothing is stored. The
        client is notified once the quote is committed.
        """
        result = self.preview(request)
        if not result.available:
            logger.info(
                f"Quote request not available: {result.message}",
                extra={'space_id': str(request.space_id)}
            )
            return result

        with transaction.atomic():
            quote = Quote.objects.create(**self._quote_fields(request, result))
            transaction.on_commit(lambda: self.notifier.notify_quote_ready(quote))

        result.quote = quote
        logger.info(f"Created quote {quote.number} for {quote.total}")
        return result

    def get_quote(self, quote_id: uuid.UUID) -> Quote:
        """Get quote by ID."""
        from . import QuoteNotFoundError

        try:
            return Quote.objects.select_related('space', 'configuration').get(id=quote_id)
        except (Quote.DoesNotExist, DjangoValidationError):
            raise QuoteNotFoundError(f"Quote {quote_id} not found")

    def update_quote(self, quote_id: uuid.UUID, changes: Dict[str, Any]) -> QuoteResult:
        """
        Edit a pending quote and price it again.

        `changes` holds QuoteRequest fields. The merged request goes through
        the same checks as a new one; when it is not available the stored
        quote is left untouched and the unavailable result is returned.
        """
        from . import QuotationValidationError, QuoteStateError

        unknown = set(changes) - UPDATABLE_FIELDS
        if unknown:
            raise QuotationValidationError(f"Cannot update fields: {', '.join(sorted(unknown))}")

        quote = self.get_quote(quote_id)
        if not quote.is_pending:
            raise QuoteStateError(f"Cannot update: quote status is {quote.status}")

        request = replace(self._request_for(quote), **changes)
        result = self.preview(request)
        if not result.available:
            logger.info(
                f"Update of quote {quote.number} not available: {result.message}",
                extra={'space_id': str(request.space_id)}
            )
            return result

        with transaction.atomic():
            Space.objects.select_for_update().get(id=quote.space_id)
            quote = Quote.objects.select_for_update().get(id=quote.id)
            if not quote.is_pending:
                raise QuoteStateError(f"Cannot update: quote status is {quote.status}")

            for name, value in self._quote_fields(request, result).items():
                setattr(quote, name, value)
            quote.save()

        result.quote = quote
        logger.info(f"Updated quote {quote.number}, new total {quote.total}")
        return result

    # ==========================================================================
    # Helper Methods
    # ==========================================================================

    @staticmethod
    def _request_for(quote: Quote) -> QuoteRequest:
        """The request a stored quote was priced from."""
        return QuoteRequest(
            space_id=quote.space_id,
            configuration_id=quote.configuration_id,
            date=quote.date,
            start_time=quote.start_time,
            duration_hours=quote.duration_hours,
            attendees=quote.attendees,
            contact_name=quote.contact_name,
            contact_email=quote.contact_email,
            client_type=quote.client_type,
            event_type=quote.event_type,
            add_on_ids=quote.add_on_ids or (),
            contact_phone=quote.contact_phone,
            observations=quote.observations,
        )

    @staticmethod
    def _quote_fields(request: QuoteRequest, result: QuoteResult) -> Dict[str, Any]:
        """Model fields for a priced, available request."""
        breakdown = result.breakdown
        return {
            'space_id': request.space_id,
            'configuration_id': request.configuration_id,
            'date': parse_date(request.date),
            'start_time': clock_to_time(parse_clock(request.start_time)),
            'duration_hours': parse_hours(request.duration_hours),
            'attendees': request.attendees,
            'event_type': request.event_type,
            'client_type': request.client_type,
            'add_on_ids': [str(add_on_id) for add_on_id in request.add_on_ids or ()],
            'contact_name': request.contact_name.strip(),
            'contact_email': validate_email(request.contact_email),
            'contact_phone': request.contact_phone,
            'observations': request.observations,
            'line_items': breakdown.as_json(),
            'total': breakdown.total,
            'deposit_amount': result.deposit_amount,
            'extra_hours_applied': breakdown.extra_hours_applied,
            'night_surcharge_applied': breakdown.night_surcharge_applied,
        }

    # ==========================================================================
    # Validation
    # ==========================================================================

    def _validate_request(self, request: QuoteRequest):
        """Field checks shared by preview and create."""
        from . import ConfigurationNotFoundError, QuotationValidationError

        try:
            validate_required(request.contact_name, 'contact_name')
            validate_email(request.contact_email)
            validate_range(request.attendees, min_value=1, field_name='attendees')
            validate_uuid_list(request.add_on_ids, 'add_on_ids')
            parse_clock(request.start_time)
            target_date = parse_date(request.date)
            self._validate_date_window(target_date)
        except DjangoValidationError as e:
            raise QuotationValidationError(e.messages[0]) from e
        except TypeError:
            raise QuotationValidationError("attendees must be a number")

        if request.client_type not in ClientType.values:
            raise QuotationValidationError(f"Unknown client type '{request.client_type}'")

        space = self.validator.get_space(request.space_id)
        try:
            configuration = SpaceConfiguration.active().filter(
                id=request.configuration_id,
                space=space
            ).first()
        except DjangoValidationError:
            configuration = None
        if configuration is None:
            raise ConfigurationNotFoundError(
                f"Configuration {request.configuration_id} not found for space {space.name}"
            )

        if configuration.max_capacity and request.attendees > configuration.max_capacity:
            raise QuotationValidationError(
                f"{configuration.name} holds at most {configuration.max_capacity} attendees"
            )

        return target_date, configuration

    def _validate_date_window(self, target_date: date):
        validate_booking_date(
            target_date,
            today=local_today(settings.QUOTATION_TIME_ZONE),
            allow_today=settings.QUOTATION_ALLOW_SAME_DAY,
            max_days_ahead=settings.QUOTATION_MAX_DAYS_AHEAD,
        )
