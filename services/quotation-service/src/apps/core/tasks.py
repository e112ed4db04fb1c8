# services/quotation-service/src/apps/core/tasks.py
"""
Celery Tasks for Quotation Service

Delivers quote e-mails. Every task is a single best-effort attempt with a
bounded runtime; failures are logged and reported in the result.
"""

import logging
from typing import Any, Dict, List
from uuid import UUID

from celery import shared_task
from django.conf import settings
from django.core.mail import EmailMultiAlternatives, get_connection

from shared.common.utils import format_currency

logger = logging.getLogger(__name__)

TASK_LIMITS = {
    'max_retries': 0,
    'soft_time_limit': settings.NOTIFICATION_TASK_SOFT_TIME_LIMIT,
    'time_limit': settings.NOTIFICATION_TASK_TIME_LIMIT,
}


@shared_task(name='quotation.send_quote_ready', **TASK_LIMITS)
def send_quote_ready(quote_id: str) -> Dict[str, Any]:
    """
    E-mail a new quote to the client with the PDF attached.

    The venue manager, when configured, receives a blind copy.
    """
    from .documents import render_quote_pdf
    from .models import Quote

    try:
        quote = Quote.objects.select_related('space', 'configuration').get(id=quote_id)
    except Quote.DoesNotExist:
        logger.error(f"Quote not found: {quote_id}")
        return {'success': False, 'error': 'Quote not found'}

    try:
        total = format_currency(quote.total, settings.QUOTATION_CURRENCY)
        message = EmailMultiAlternatives(
            subject=f"Your quote {quote.number} for {quote.space.name}",
            body=(
                f"Hello {quote.contact_name},\n\n"
                f"Thank you for your request. Your quote {quote.number} for "
                f"{quote.date:%Y-%m-%d} at {quote.start_time:%H:%M} "
                f"({quote.duration_hours}h) totals {total}.\n"
                f"The attached PDF has the full breakdown.\n"
            ),
            from_email=settings.DEFAULT_FROM_EMAIL,
            to=[quote.contact_email],
            bcc=[settings.QUOTATION_MANAGER_EMAIL] if settings.QUOTATION_MANAGER_EMAIL else None,
        )
        message.attach(f"{quote.number}.pdf", render_quote_pdf(quote), 'application/pdf')
        message.send(fail_silently=False)
    except Exception as e:
        logger.error(f"Failed to send quote {quote.number}: {e}")
        return {'success': False, 'error': str(e)}

    logger.info(f"Sent quote {quote.number} to {quote.contact_email}")
    return {'success': True, 'quote_id': quote_id}


@shared_task(name='quotation.send_cancellation_notices', **TASK_LIMITS)
def send_cancellation_notices(notices: List[Dict[str, str]]) -> Dict[str, Any]:
    """
    E-mail each client whose quote was cancelled.

    Args:
        notices: [{'quote_id': ..., 'reason': ...}, ...]
    """
    from .models import Quote

    quotes = Quote.objects.select_related('space').in_bulk(
        [notice['quote_id'] for notice in notices]
    )

    messages = []
    for notice in notices:
        quote = quotes.get(UUID(str(notice['quote_id'])))
        if quote is None:
            logger.error(f"Quote not found: {notice['quote_id']}")
            continue
        messages.append(EmailMultiAlternatives(
            subject=f"Your quote {quote.number} has been cancelled",
            body=(
                f"Hello {quote.contact_name},\n\n"
                f"Your quote {quote.number} for {quote.space.name} on "
                f"{quote.date:%Y-%m-%d} at {quote.start_time:%H:%M} has been cancelled.\n\n"
                f"{notice['reason']}\n"
            ),
            from_email=settings.DEFAULT_FROM_EMAIL,
            to=[quote.contact_email],
        ))

    if not messages:
        return {'success': False, 'sent': 0}

    try:
        with get_connection(fail_silently=False) as connection:
            sent = connection.send_messages(messages)
    except Exception as e:
        logger.error(f"Failed to send {len(messages)} cancellation notices: {e}")
        return {'success': False, 'error': str(e)}

    logger.info(f"Sent {sent} cancellation notices")
    return {'success': True, 'sent': sent}
