# services/quotation-service/src/apps/core/notifications.py
"""
Quote Notifications

Outbound messages about quotes. The services only see the QuoteNotifier
interface; delivery happens in Celery tasks, off the request path.
"""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import List

from django.conf import settings
from django.utils.module_loading import import_string

logger = logging.getLogger(__name__)

CASCADE_CANCELLATION_REASON = (
    "Another reservation was confirmed for the same time before yours. "
    "We are sorry for the inconvenience; please request a new quote for a different time."
)


@dataclass
class CancellationNotice:
    quote: object
    reason: str


class QuoteNotifier(ABC):
    """Notification port. Implementations must never raise."""

    @abstractmethod
    def notify_quote_ready(self, quote) -> bool:
        """Tell the client their quote is ready."""

    @abstractmethod
    def notify_batch_cancellation(self, notices: List[CancellationNotice]) -> bool:
        """Tell each client in the batch that their quote was cancelled."""


class CeleryQuoteNotifier(QuoteNotifier):
    """Queues delivery tasks; a failure to queue is logged and dropped."""

    def notify_quote_ready(self, quote) -> bool:
        from .tasks import send_quote_ready

        try:
            send_quote_ready.delay(str(quote.id))
            return True
        except Exception as e:
            logger.error(f"Failed to queue quote-ready notification for {quote.number}: {e}")
            return False

    def notify_batch_cancellation(self, notices: List[CancellationNotice]) -> bool:
        from .tasks import send_cancellation_notices

        if not notices:
            return True

        payload = [
            {'quote_id': str(notice.quote.id), 'reason': notice.reason}
            for notice in notices
        ]
        try:
            send_cancellation_notices.delay(payload)
            return True
        except Exception as e:
            numbers = ', '.join(notice.quote.number for notice in notices)
            logger.error(f"Failed to queue cancellation notices for {numbers}: {e}")
            return False


def get_notifier() -> QuoteNotifier:
    """Build the notifier named by QUOTATION_NOTIFIER."""
    return import_string(settings.QUOTATION_NOTIFIER)()
