# services/quotation-service/src/apps/core/services/confirmation_service.py
"""
Confirmation Service

Quote state transitions: confirmation with calendar blocking and cascade
cancellation of competing quotes, manual rejection and payments.
"""

import logging
import uuid
from dataclasses import dataclass, field
from typing import Iterable, List

from django.core.exceptions import ValidationError as DjangoValidationError
from django.db import transaction

from shared.common.utils import clock_to_time
from shared.common.validators import validate_positive_decimal, validate_required

from ..models import CalendarBlock, Quote, Space
from ..notifications import CASCADE_CANCELLATION_REASON, CancellationNotice, QuoteNotifier, get_notifier
from .availability_service import buffered_window, first_conflict

logger = logging.getLogger(__name__)


@dataclass
class ConfirmationResult:
    quote: Quote
    block: CalendarBlock
    cancelled: List[Quote] = field(default_factory=list)


def select_cascade_rejections(confirmed, candidates: Iterable) -> List:
    """
    Pending quotes that must be rejected once `confirmed` is confirmed.

    Works on any objects exposing id, status and window, with no database
    access. Windows are compared without setup or teardown buffers.
    """
    return [
        candidate for candidate in candidates
        if candidate.id != confirmed.id
        and candidate.status == Quote.Status.PENDING
        and confirmed.window.collides_inclusive(candidate.window)
    ]


class ConfirmationService:
    """
    Moves quotes through pending -> confirmed / rejected.

    Every transition runs in one transaction holding a row lock on the
    quote's space, so transitions on the same space never interleave.
    """

    def __init__(self, notifier: QuoteNotifier = None):
        self.notifier = notifier or get_notifier()

    # ==========================================================================
    # Confirmation
    # ==========================================================================

    def confirm(self, quote_id: uuid.UUID, confirmed_by: uuid.UUID = None) -> ConfirmationResult:
        """
        Confirm a pending quote.

        Blocks the space's calendar for the buffered event window and rejects
        every other pending quote of the same space and date whose event
        window collides with this one. Clients of rejected quotes are
        notified after commit.
        """
        from . import QuoteConflictError, QuoteStateError

        with transaction.atomic():
            quote = self._lock_quote(quote_id)
            if not quote.is_pending:
                raise QuoteStateError(f"Cannot confirm: quote status is {quote.status}")

            space = quote.space
            setup, teardown = space.buffer_hours
            event = quote.window
            buffered = buffered_window(space, event)

            conflict = first_conflict(buffered, CalendarBlock.for_space_and_date(space.id, quote.date))
            if conflict:
                raise QuoteConflictError(
                    f"Quote {quote.number} overlaps calendar block {conflict.window} "
                    f"({conflict.reason or 'reserved'})"
                )

            quote.confirm(confirmed_by)
            block = CalendarBlock.objects.create(
                space=space,
                date=quote.date,
                buffered_start=clock_to_time(buffered.start),
                buffered_end=clock_to_time(buffered.end),
                quote=quote,
                block_type=CalendarBlock.BlockType.CONFIRMED_RESERVATION,
                reason=(
                    f"Event: {quote.contact_name} ({event} + {setup}h setup "
                    f"+ {teardown}h teardown)"
                )[:500],
            )

            # Cascade: decide on a snapshot, then apply
            candidates = Quote.objects.select_for_update().filter(
                space_id=space.id,
                date=quote.date,
                status=Quote.Status.PENDING,
            ).exclude(id=quote.id)
            cancelled = select_cascade_rejections(quote, list(candidates))

            note = (
                f"[SYSTEM] Automatically cancelled due to a conflict with "
                f"confirmed reservation {quote.number}"
            )
            for other in cancelled:
                other.reject(note)
                logger.info(f"Cancelled quote {other.number}: conflicts with {quote.number}")

            if cancelled:
                notices = [CancellationNotice(other, CASCADE_CANCELLATION_REASON) for other in cancelled]
                transaction.on_commit(lambda: self.notifier.notify_batch_cancellation(notices))

        logger.info(
            f"Confirmed quote {quote.number}, {len(cancelled)} competing quotes cancelled",
            extra={'space_id': str(space.id), 'block_id': str(block.id)}
        )
        return ConfirmationResult(quote=quote, block=block, cancelled=cancelled)

    # ==========================================================================
    # Rejection
    # ==========================================================================

    def reject(self, quote_id: uuid.UUID, reason: str) -> Quote:
        """Reject a pending quote on the manager's request."""
        from . import QuotationValidationError, QuoteStateError

        try:
            reason = validate_required(reason, 'reason').strip()
        except DjangoValidationError as e:
            raise QuotationValidationError(e.messages[0]) from e

        with transaction.atomic():
            quote = self._lock_quote(quote_id)
            if not quote.is_pending:
                raise QuoteStateError(f"Cannot reject: quote status is {quote.status}")

            quote.reject(f"[MANAGER] {reason}")
            transaction.on_commit(
                lambda: self.notifier.notify_batch_cancellation([CancellationNotice(quote, reason)])
            )

        logger.info(f"Rejected quote {quote.number}")
        return quote

    # ==========================================================================
    # Payments
    # ==========================================================================

    def register_payment(self, quote_id: uuid.UUID, amount) -> Quote:
        """
        Record a payment against a confirmed quote.

        Covering the deposit marks the deposit paid; covering the total marks
        the quote paid. Payments beyond the total are refused.
        """
        from . import QuotationValidationError, QuoteStateError

        try:
            amount = validate_positive_decimal(amount, 'amount')
        except DjangoValidationError as e:
            raise QuotationValidationError(e.messages[0]) from e

        with transaction.atomic():
            quote = self._lock_quote(quote_id)
            if quote.status != Quote.Status.CONFIRMED:
                raise QuoteStateError(f"Cannot register payment: quote status is {quote.status}")

            paid = quote.amount_paid + amount
            if paid > quote.total:
                raise QuotationValidationError(
                    f"Payment of {amount} exceeds the outstanding balance of {quote.balance_due}"
                )

            quote.amount_paid = paid
            if paid >= quote.total:
                quote.payment_status = Quote.PaymentStatus.PAID
            elif paid >= quote.deposit_amount:
                quote.payment_status = Quote.PaymentStatus.DEPOSIT_PAID
            quote.save(update_fields=['amount_paid', 'payment_status', 'updated_at'])

        logger.info(f"Registered payment of {amount} on quote {quote.number}")
        return quote

    # ==========================================================================
    # Helper Methods
    # ==========================================================================

    def _lock_quote(self, quote_id: uuid.UUID) -> Quote:
        """Lock the quote's space, then the quote. Call inside a transaction."""
        from . import QuoteNotFoundError

        try:
            space_id = Quote.objects.filter(id=quote_id).values_list('space_id', flat=True).first()
        except DjangoValidationError:
            space_id = None
        if space_id is None:
            raise QuoteNotFoundError(f"Quote {quote_id} not found")

        Space.objects.select_for_update().get(id=space_id)
        return Quote.objects.select_for_update().select_related('space').get(id=quote_id)
