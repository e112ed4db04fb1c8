# services/quotation-service/src/apps/core/signals.py
"""
Django Signals for Quotation Service

Publishes lifecycle events once the surrounding transaction commits.
"""

import logging

from django.db import transaction
from django.db.models.signals import post_save, pre_save
from django.dispatch import receiver

from .events import (
    publish_calendar_blocked,
    publish_quote_confirmed,
    publish_quote_created,
    publish_quote_rejected,
)
from .models import CalendarBlock, Quote

logger = logging.getLogger(__name__)


# ==========================================================================
# Quote Signals
# ==========================================================================

@receiver(pre_save, sender=Quote)
def quote_pre_save(sender, instance, **kwargs):
    """Track status changes before save."""
    instance._old_status = None
    if instance.pk:
        instance._old_status = (
            Quote.objects.filter(pk=instance.pk).values_list('status', flat=True).first()
        )


@receiver(post_save, sender=Quote)
def quote_post_save(sender, instance, created, **kwargs):
    """Publish quote created and status change events."""
    if created:
        transaction.on_commit(lambda: publish_quote_created(instance))
        return

    old_status = getattr(instance, '_old_status', None)
    if old_status == instance.status:
        return

    logger.info(f"Quote {instance.number}: {old_status} -> {instance.status}")

    if instance.status == Quote.Status.CONFIRMED:
        transaction.on_commit(lambda: publish_quote_confirmed(instance))
    elif instance.status == Quote.Status.REJECTED:
        transaction.on_commit(lambda: publish_quote_rejected(instance))


# ==========================================================================
# Calendar Signals
# ==========================================================================

@receiver(post_save, sender=CalendarBlock)
def calendar_block_post_save(sender, instance, created, **kwargs):
    if created:
        transaction.on_commit(lambda: publish_calendar_blocked(instance))
