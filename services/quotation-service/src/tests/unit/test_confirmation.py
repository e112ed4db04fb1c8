# services/quotation-service/src/tests/unit/test_confirmation.py
"""
Unit Tests for ConfirmationService

Confirmation, cascade cancellation, rejection and payments.
"""

import uuid
from datetime import time, timedelta
from decimal import Decimal
from types import SimpleNamespace
from unittest.mock import patch

import pytest

from apps.core.models import CalendarBlock, Quote
from apps.core.notifications import CASCADE_CANCELLATION_REASON
from apps.core.services import (
    ConfirmationService,
    QuotationValidationError,
    QuoteConflictError,
    QuoteNotFoundError,
    QuoteStateError,
    select_cascade_rejections,
)
from apps.core.time_window import TimeWindow


def snapshot(start, hours=4, status='pending'):
    return SimpleNamespace(
        id=uuid.uuid4(),
        status=status,
        window=TimeWindow.for_event(start, hours),
    )


class TestSelectCascadeRejections:
    """The decision phase works on plain objects."""

    def test_selects_colliding_pending_quotes(self):
        confirmed = snapshot('18:00')
        starts_inside = snapshot('19:00')
        ends_inside = snapshot('16:00')
        morning = snapshot('08:00')
        touching = snapshot('22:00')

        result = select_cascade_rejections(
            confirmed, [starts_inside, ends_inside, morning, touching]
        )

        assert result == [starts_inside, ends_inside]

    def test_ignores_itself_and_settled_quotes(self):
        confirmed = snapshot('18:00')
        already_rejected = snapshot('18:00', status='rejected')
        already_confirmed = snapshot('19:00', status='confirmed')

        result = select_cascade_rejections(
            confirmed, [confirmed, already_rejected, already_confirmed]
        )

        assert result == []

    def test_contained_and_containing(self):
        confirmed = snapshot('14:00', 6)
        inside = snapshot('15:00', 4)
        around = SimpleNamespace(id=uuid.uuid4(), status='pending', window=TimeWindow.for_event('12:00', 8))

        assert select_cascade_rejections(confirmed, [inside, around]) == [inside, around]

    def test_across_midnight(self):
        confirmed = snapshot('21:00', 5)
        early = snapshot('01:00', 4)

        assert select_cascade_rejections(confirmed, [early]) == [early]


@pytest.mark.django_db
class TestConfirm:
    """Tests for ConfirmationService.confirm."""

    @pytest.fixture(autouse=True)
    def _service(self, mock_notifier):
        self.notifier = mock_notifier
        self.service = ConfirmationService(notifier=mock_notifier)

    def test_confirm_blocks_calendar(self, create_quote):
        quote = create_quote()
        confirmer = uuid.uuid4()

        result = self.service.confirm(quote.id, confirmed_by=confirmer)

        quote.refresh_from_db()
        assert quote.status == Quote.Status.CONFIRMED
        assert quote.payment_status == Quote.PaymentStatus.DEPOSIT_PENDING
        assert quote.confirmed_by == confirmer
        assert quote.confirmed_at is not None

        block = CalendarBlock.objects.get(quote=quote)
        assert block == result.block
        assert block.block_type == CalendarBlock.BlockType.CONFIRMED_RESERVATION
        assert block.buffered_start == time(16, 0)
        assert block.buffered_end == time(0, 0)
        assert str(block.window) == '16:00-00:00'
        assert block.reason == 'Event: Ana Gómez (18:00-22:00 + 2h setup + 2h teardown)'

    def test_cascade_rejects_colliding_quotes(self, create_quote, event_date):
        quote = create_quote(start_time='18:00')
        later = create_quote(start_time='19:00', contact_email='b@example.com')
        earlier = create_quote(start_time='16:00', contact_email='c@example.com')
        morning = create_quote(start_time='08:00', contact_email='d@example.com')
        touching = create_quote(start_time='22:00', contact_email='e@example.com')
        next_day = create_quote(start_time='18:00', date=event_date + timedelta(days=1))

        result = self.service.confirm(quote.id)

        assert {q.id for q in result.cancelled} == {later.id, earlier.id}
        for other in (later, earlier):
            other.refresh_from_db()
            assert other.status == Quote.Status.REJECTED
            assert other.rejected_at is not None
            assert f"conflict with confirmed reservation {quote.number}" in other.observations
            assert other.observations.startswith('[SYSTEM]')
        for other in (morning, touching, next_day):
            other.refresh_from_db()
            assert other.status == Quote.Status.PENDING

    def test_cascade_preserves_existing_observations(self, create_quote):
        quote = create_quote()
        other = create_quote(start_time='19:00', observations='Vegetarian menu')

        self.service.confirm(quote.id)

        other.refresh_from_db()
        assert other.observations.startswith('Vegetarian menu\n\n[SYSTEM]')

    def test_cascade_notifies_after_commit(self, create_quote, django_capture_on_commit_callbacks):
        quote = create_quote()
        other = create_quote(start_time='19:00')

        with django_capture_on_commit_callbacks(execute=True):
            self.service.confirm(quote.id)

        self.notifier.notify_batch_cancellation.assert_called_once()
        notices = self.notifier.notify_batch_cancellation.call_args[0][0]
        assert [notice.quote.id for notice in notices] == [other.id]
        assert notices[0].reason == CASCADE_CANCELLATION_REASON

    def test_no_notification_without_cascade(self, create_quote, django_capture_on_commit_callbacks):
        quote = create_quote()

        with django_capture_on_commit_callbacks(execute=True):
            result = self.service.confirm(quote.id)

        assert result.cancelled == []
        self.notifier.notify_batch_cancellation.assert_not_called()

    def test_failed_cascade_rolls_back(self, create_quote, django_capture_on_commit_callbacks):
        """A write failure mid-cascade leaves every quote and the calendar as they were."""
        quote = create_quote()
        other = create_quote(start_time='19:00', contact_email='b@example.com')

        with django_capture_on_commit_callbacks(execute=True) as callbacks:
            with patch.object(Quote, 'reject', side_effect=RuntimeError('write failed')):
                with pytest.raises(RuntimeError):
                    self.service.confirm(quote.id)

        quote.refresh_from_db()
        assert quote.status == Quote.Status.PENDING
        assert quote.confirmed_at is None
        assert not CalendarBlock.objects.exists()

        other.refresh_from_db()
        assert other.status == Quote.Status.PENDING
        assert other.rejected_at is None

        assert callbacks == []
        self.notifier.notify_batch_cancellation.assert_not_called()

    def test_second_confirmation_on_free_time(self, create_quote):
        evening = create_quote(start_time='18:00')
        morning = create_quote(start_time='08:00')

        self.service.confirm(evening.id)
        self.service.confirm(morning.id)

        assert CalendarBlock.objects.filter(block_type='confirmed_reservation').count() == 2

    def test_confirmed_quote_cannot_be_confirmed_again(self, create_quote):
        quote = create_quote()
        self.service.confirm(quote.id)

        with pytest.raises(QuoteStateError):
            self.service.confirm(quote.id)

    def test_rejected_quote_cannot_be_confirmed(self, create_quote):
        quote = create_quote(status=Quote.Status.REJECTED)

        with pytest.raises(QuoteStateError):
            self.service.confirm(quote.id)

    def test_conflicting_block_refuses_confirmation(self, create_quote, create_block, event_date):
        """The buffered window 15:00-23:00 overlaps a 14:00-18:00 block."""
        create_block(event_date, '14:00', '18:00')
        quote = create_quote(start_time='17:00')
        other = create_quote(start_time='18:00')

        with pytest.raises(QuoteConflictError):
            self.service.confirm(quote.id)

        quote.refresh_from_db()
        other.refresh_from_db()
        assert quote.status == Quote.Status.PENDING
        assert other.status == Quote.Status.PENDING
        assert CalendarBlock.objects.count() == 1

    def test_buffer_overlap_with_confirmed_neighbour(self, create_quote):
        """Event windows 4h apart still collide once buffers are added."""
        first = create_quote(start_time='08:00')
        second = create_quote(start_time='14:00')
        self.service.confirm(first.id)

        with pytest.raises(QuoteConflictError):
            self.service.confirm(second.id)

    def test_conflict_is_a_state_error(self):
        assert issubclass(QuoteConflictError, QuoteStateError)

    @pytest.mark.parametrize('quote_id', [uuid.uuid4(), 'not-a-uuid'])
    def test_unknown_quote(self, db, quote_id):
        with pytest.raises(QuoteNotFoundError):
            self.service.confirm(quote_id)


@pytest.mark.django_db
class TestReject:
    """Tests for manual rejection."""

    @pytest.fixture(autouse=True)
    def _service(self, mock_notifier):
        self.notifier = mock_notifier
        self.service = ConfirmationService(notifier=mock_notifier)

    def test_reject_pending(self, create_quote, django_capture_on_commit_callbacks):
        quote = create_quote()

        with django_capture_on_commit_callbacks(execute=True):
            rejected = self.service.reject(quote.id, '  Client chose another venue ')

        assert rejected.status == Quote.Status.REJECTED
        assert rejected.observations == '[MANAGER] Client chose another venue'
        notices = self.notifier.notify_batch_cancellation.call_args[0][0]
        assert notices[0].quote.id == quote.id
        assert notices[0].reason == 'Client chose another venue'

    def test_reject_does_not_block_calendar(self, create_quote):
        quote = create_quote()

        self.service.reject(quote.id, 'Duplicate request')

        assert not CalendarBlock.objects.exists()

    @pytest.mark.parametrize('reason', ['', '   ', None])
    def test_reason_required(self, create_quote, reason):
        quote = create_quote()

        with pytest.raises(QuotationValidationError):
            self.service.reject(quote.id, reason)

    def test_confirmed_quote_cannot_be_rejected(self, create_quote):
        quote = create_quote()
        self.service.confirm(quote.id)

        with pytest.raises(QuoteStateError):
            self.service.reject(quote.id, 'Too late')


@pytest.mark.django_db
class TestRegisterPayment:
    """Tests for payments on confirmed quotes."""

    @pytest.fixture(autouse=True)
    def _service(self, mock_notifier):
        self.service = ConfirmationService(notifier=mock_notifier)

    @pytest.fixture
    def confirmed_quote(self, create_quote):
        quote = create_quote()
        self.service.confirm(quote.id)
        return quote

    def test_deposit_then_balance(self, confirmed_quote):
        quote = self.service.register_payment(confirmed_quote.id, '500000.00')

        assert quote.payment_status == Quote.PaymentStatus.DEPOSIT_PAID
        assert quote.balance_due == Decimal('500000.00')

        quote = self.service.register_payment(confirmed_quote.id, Decimal('500000'))

        assert quote.payment_status == Quote.PaymentStatus.PAID
        assert quote.balance_due == Decimal('0')

    def test_partial_deposit_keeps_status(self, confirmed_quote):
        quote = self.service.register_payment(confirmed_quote.id, 100000)

        assert quote.payment_status == Quote.PaymentStatus.DEPOSIT_PENDING
        assert quote.amount_paid == Decimal('100000')

    def test_overpayment_refused(self, confirmed_quote):
        with pytest.raises(QuotationValidationError):
            self.service.register_payment(confirmed_quote.id, '1000000.01')

        confirmed_quote.refresh_from_db()
        assert confirmed_quote.amount_paid == Decimal('0')

    @pytest.mark.parametrize('amount', [0, -10, 'abc', 'NaN', 'Infinity'])
    def test_invalid_amount(self, confirmed_quote, amount):
        with pytest.raises(QuotationValidationError):
            self.service.register_payment(confirmed_quote.id, amount)

    def test_pending_quote_refused(self, create_quote):
        quote = create_quote()

        with pytest.raises(QuoteStateError):
            self.service.register_payment(quote.id, 100)
