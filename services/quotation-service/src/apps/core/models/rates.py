# services/quotation-service/src/apps/core/models/rates.py
"""
Rate Models

Rental prices per configuration and client type, extra-hour prices and
flat-price add-on services.
"""

from django.db import models

from shared.common.mixins import ActiveMixin, TimestampMixin, UUIDPrimaryKeyMixin

from .space import SpaceConfiguration


class ClientType(models.TextChoices):
    MEMBER = 'member', 'Member'
    NON_MEMBER = 'non_member', 'Non-member'


class RateCard(UUIDPrimaryKeyMixin, TimestampMixin):
    """
    Rental price for a configuration and client type.

    A missing or zero price means that duration tier is not offered.
    """

    configuration = models.ForeignKey(
        SpaceConfiguration,
        on_delete=models.CASCADE,
        related_name='rate_cards'
    )
    client_type = models.CharField(max_length=20, choices=ClientType.choices)

    price_4h = models.DecimalField(max_digits=14, decimal_places=2, blank=True, null=True)
    price_8h = models.DecimalField(max_digits=14, decimal_places=2, blank=True, null=True)

    class Meta:
        db_table = 'rate_cards'
        unique_together = [['configuration', 'client_type']]

    def __str__(self):
        return f"{self.configuration} ({self.get_client_type_display()})"


class AdditionalHourRate(UUIDPrimaryKeyMixin, TimestampMixin, ActiveMixin):
    """Hourly price beyond the base hours, tiered by attendee count."""

    configuration = models.ForeignKey(
        SpaceConfiguration,
        on_delete=models.CASCADE,
        related_name='additional_hour_rates'
    )
    client_type = models.CharField(max_length=20, choices=ClientType.choices)
    base_hours = models.PositiveSmallIntegerField(default=8)

    min_attendees = models.PositiveIntegerField(default=0)
    max_attendees = models.PositiveIntegerField(
        blank=True,
        null=True,
        help_text="Empty means no upper bound"
    )
    price_per_hour = models.DecimalField(max_digits=14, decimal_places=2)

    class Meta:
        db_table = 'additional_hour_rates'
        ordering = ['configuration', 'client_type', 'min_attendees']
        indexes = [
            models.Index(fields=['configuration', 'client_type', 'base_hours']),
        ]

    def __str__(self):
        upper = self.max_attendees if self.max_attendees is not None else '+'
        return f"{self.configuration} {self.min_attendees}-{upper}: {self.price_per_hour}/h"


class AddOnService(UUIDPrimaryKeyMixin, TimestampMixin, ActiveMixin):
    """Optional extra sold at a flat price (sound system, decoration...)."""

    name = models.CharField(max_length=255)
    description = models.TextField(blank=True, null=True)
    client_type = models.CharField(max_length=20, choices=ClientType.choices)
    price = models.DecimalField(max_digits=14, decimal_places=2)

    class Meta:
        db_table = 'add_on_services'
        ordering = ['name']

    def __str__(self):
        return f"{self.name} ({self.get_client_type_display()})"
