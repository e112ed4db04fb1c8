# services/quotation-service/src/apps/core/models/space.py
"""
Space Models

Rentable event spaces and their seating configurations.
"""

from typing import Tuple

from django.conf import settings
from django.db import models

from shared.common.mixins import ActiveMixin, TimestampMixin, UUIDPrimaryKeyMixin


class Space(UUIDPrimaryKeyMixin, TimestampMixin, ActiveMixin):
    """
    A physical event space.

    Setup and teardown hours are mandatory unusable time before and after
    every event held in the space. Null means the service default applies.
    """

    name = models.CharField(max_length=255)
    description = models.TextField(blank=True, null=True)

    setup_hours = models.PositiveSmallIntegerField(
        blank=True,
        null=True,
        help_text="Hours blocked before an event for setup"
    )
    teardown_hours = models.PositiveSmallIntegerField(
        blank=True,
        null=True,
        help_text="Hours blocked after an event for teardown"
    )

    class Meta:
        db_table = 'spaces'
        ordering = ['name']

    def __str__(self):
        return self.name

    @property
    def buffer_hours(self) -> Tuple[int, int]:
        """(setup, teardown) hours with defaults applied."""
        setup = self.setup_hours
        teardown = self.teardown_hours
        if setup is None:
            setup = settings.QUOTATION_DEFAULT_SETUP_HOURS
        if teardown is None:
            teardown = settings.QUOTATION_DEFAULT_TEARDOWN_HOURS
        return setup, teardown


class SpaceConfiguration(UUIDPrimaryKeyMixin, TimestampMixin, ActiveMixin):
    """
    A seating layout of a space (banquet, auditorium, cocktail...).

    Rate cards are keyed on the configuration.
    """

    space = models.ForeignKey(
        Space,
        on_delete=models.CASCADE,
        related_name='configurations'
    )
    name = models.CharField(max_length=100)
    min_capacity = models.PositiveIntegerField(default=1)
    max_capacity = models.PositiveIntegerField(blank=True, null=True)

    class Meta:
        db_table = 'space_configurations'
        ordering = ['space', 'name']
        unique_together = [['space', 'name']]

    def __str__(self):
        return f"{self.space.name} - {self.name}"
