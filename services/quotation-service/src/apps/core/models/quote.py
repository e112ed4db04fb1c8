# services/quotation-service/src/apps/core/models/quote.py
"""
Quote Model

Priced booking proposals for an event space.
"""

from decimal import Decimal

from django.conf import settings
from django.db import models
from django.utils import timezone

from shared.common.mixins import TimestampMixin, UUIDPrimaryKeyMixin

from ..time_window import TimeWindow
from .rates import ClientType
from .space import Space, SpaceConfiguration


class Quote(UUIDPrimaryKeyMixin, TimestampMixin):
    """
    A priced, unconfirmed booking proposal.

    Created pending by the pricing flow. Confirmation moves it to confirmed,
    cancellation (automatic or manual) to rejected. Both are terminal.
    """

    class Status(models.TextChoices):
        PENDING = 'pending', 'Pending'
        CONFIRMED = 'confirmed', 'Confirmed'
        REJECTED = 'rejected', 'Rejected'

    class PaymentStatus(models.TextChoices):
        UNPAID = 'unpaid', 'Unpaid'
        DEPOSIT_PENDING = 'deposit_pending', 'Deposit Pending'
        DEPOSIT_PAID = 'deposit_paid', 'Deposit Paid'
        PAID = 'paid', 'Paid'

    number = models.CharField(max_length=30, unique=True, db_index=True)

    # Request
    space = models.ForeignKey(Space, on_delete=models.PROTECT, related_name='quotes')
    configuration = models.ForeignKey(
        SpaceConfiguration,
        on_delete=models.PROTECT,
        related_name='quotes'
    )
    date = models.DateField(db_index=True)
    start_time = models.TimeField()
    duration_hours = models.PositiveSmallIntegerField()
    attendees = models.PositiveIntegerField()
    event_type = models.CharField(max_length=100, blank=True, null=True)
    client_type = models.CharField(
        max_length=20,
        choices=ClientType.choices,
        default=ClientType.NON_MEMBER
    )
    add_on_ids = models.JSONField(default=list, blank=True)

    # Contact
    contact_name = models.CharField(max_length=255)
    contact_email = models.EmailField()
    contact_phone = models.CharField(max_length=50, blank=True, null=True)
    observations = models.TextField(blank=True, null=True)

    # Pricing
    line_items = models.JSONField(default=list, blank=True)
    total = models.DecimalField(max_digits=14, decimal_places=2, default=Decimal('0'))
    deposit_amount = models.DecimalField(max_digits=14, decimal_places=2, default=Decimal('0'))
    amount_paid = models.DecimalField(max_digits=14, decimal_places=2, default=Decimal('0'))
    extra_hours_applied = models.BooleanField(default=False)
    night_surcharge_applied = models.BooleanField(default=False)

    # Status
    status = models.CharField(
        max_length=20,
        choices=Status.choices,
        default=Status.PENDING,
        db_index=True
    )
    payment_status = models.CharField(
        max_length=20,
        choices=PaymentStatus.choices,
        default=PaymentStatus.UNPAID
    )
    confirmed_at = models.DateTimeField(blank=True, null=True)
    confirmed_by = models.UUIDField(blank=True, null=True)
    rejected_at = models.DateTimeField(blank=True, null=True)

    class Meta:
        db_table = 'quotes'
        ordering = ['-created_at']
        indexes = [
            models.Index(fields=['space', 'date', 'status']),
        ]

    def __str__(self):
        return f"{self.number} - {self.contact_name}"

    def save(self, *args, **kwargs):
        if not self.number:
            self.number = self._generate_number()
        super().save(*args, **kwargs)

    def _generate_number(self) -> str:
        """Generate a unique quote number."""
        today = timezone.now()
        count = Quote.objects.filter(created_at__date=today.date()).count() + 1
        return f"{settings.QUOTATION_NUMBER_PREFIX}-{today:%Y%m%d}-{count:04d}"

    # ==========================================================================
    # Properties
    # ==========================================================================

    @property
    def window(self) -> TimeWindow:
        """Event window without setup or teardown."""
        return TimeWindow.for_event(self.start_time, self.duration_hours)

    @property
    def is_pending(self) -> bool:
        return self.status == self.Status.PENDING

    @property
    def balance_due(self) -> Decimal:
        return self.total - self.amount_paid

    # ==========================================================================
    # Status Transitions
    # ==========================================================================

    def confirm(self, confirmed_by=None):
        """Confirm the quote; the deposit becomes due."""
        if not self.is_pending:
            raise ValueError(f"Cannot confirm quote with status {self.status}")

        self.status = self.Status.CONFIRMED
        self.confirmed_at = timezone.now()
        self.confirmed_by = confirmed_by
        self.payment_status = self.PaymentStatus.DEPOSIT_PENDING
        self.save()

    def reject(self, note: str):
        """Reject the quote and record why in its observations."""
        if not self.is_pending:
            raise ValueError(f"Cannot reject quote with status {self.status}")

        self.status = self.Status.REJECTED
        self.rejected_at = timezone.now()
        self.append_observation(note)
        self.save()

    def append_observation(self, note: str):
        if self.observations:
            self.observations = f"{self.observations}\n\n{note}"
        else:
            self.observations = note
