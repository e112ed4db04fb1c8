# services/quotation-service/src/apps/core/events.py
"""
Quotation Service Events

Event definitions and publishing for quote lifecycle changes.
"""

import json
import logging
from datetime import date, datetime, time
from decimal import Decimal
from typing import Any, Dict
from uuid import UUID

import redis
from django.conf import settings
from django.utils import timezone

logger = logging.getLogger(__name__)


class EventType:
    """Event type constants for quotation service."""

    QUOTE_CREATED = 'quote.created'
    QUOTE_CONFIRMED = 'quote.confirmed'
    QUOTE_REJECTED = 'quote.rejected'
    CALENDAR_BLOCKED = 'calendar.blocked'


class JSONEncoder(json.JSONEncoder):
    """Custom JSON encoder for event payloads."""

    def default(self, obj):
        if isinstance(obj, UUID):
            return str(obj)
        if isinstance(obj, (datetime, date, time)):
            return obj.isoformat()
        if isinstance(obj, Decimal):
            return str(obj)
        return super().default(obj)


class EventPublisher:
    """
    Event publisher for quotation service.

    Failures are logged and reported through the return value; publishing
    never breaks the operation that triggered it.
    """

    def __init__(self):
        self.service_name = settings.SERVICE_NAME
        self.enabled = getattr(settings, 'EVENT_PUBLISHING_ENABLED', True)
        self.backend = getattr(settings, 'EVENT_BACKEND', 'log')

    def publish(self, event_type: str, payload: Dict[str, Any], metadata: Dict[str, Any] = None) -> bool:
        """
        Publish an event.

        Args:
            event_type: Type of event (e.g., 'quote.confirmed')
            payload: Event data
            metadata: Additional metadata

        Returns:
            True if published successfully, False otherwise
        """
        if not self.enabled:
            logger.debug(f"Event publishing disabled, skipping: {event_type}")
            return False

        event = {
            'event_type': event_type,
            'service': self.service_name,
            'timestamp': timezone.now().isoformat(),
            'payload': payload,
            'metadata': metadata or {},
        }

        try:
            event_json = json.dumps(event, cls=JSONEncoder)
            logger.info(f"Publishing event: {event_type}", extra={'event_type': event_type})

            if self.backend == 'redis':
                self._publish_redis(event_type, event_json)
            else:
                logger.debug(f"Event payload: {event_json[:500]}")
            return True

        except Exception as e:
            logger.error(f"Failed to publish event {event_type}: {e}")
            return False

    def _publish_redis(self, event_type: str, event_json: str):
        """Publish to Redis pub/sub."""
        client = redis.Redis.from_url(settings.REDIS_URL, socket_timeout=5)
        try:
            client.publish(f"{settings.EVENT_CHANNEL_PREFIX}:{event_type}", event_json)
        finally:
            client.close()


def quote_payload(quote) -> Dict[str, Any]:
    return {
        'quote_id': quote.id,
        'number': quote.number,
        'space_id': quote.space_id,
        'date': quote.date,
        'start_time': quote.start_time,
        'duration_hours': quote.duration_hours,
        'status': quote.status,
        'total': quote.total,
    }


def publish_quote_created(quote) -> bool:
    """Publish quote created event."""
    return EventPublisher().publish(EventType.QUOTE_CREATED, quote_payload(quote))


def publish_quote_confirmed(quote) -> bool:
    """Publish quote confirmed event."""
    payload = quote_payload(quote)
    payload['confirmed_by'] = quote.confirmed_by
    return EventPublisher().publish(EventType.QUOTE_CONFIRMED, payload)


def publish_quote_rejected(quote) -> bool:
    """Publish quote rejected event."""
    return EventPublisher().publish(EventType.QUOTE_REJECTED, quote_payload(quote))


def publish_calendar_blocked(block) -> bool:
    """Publish calendar blocked event."""
    return EventPublisher().publish(
        EventType.CALENDAR_BLOCKED,
        payload={
            'block_id': block.id,
            'space_id': block.space_id,
            'date': block.date,
            'buffered_start': block.buffered_start,
            'buffered_end': block.buffered_end,
            'block_type': block.block_type,
            'quote_id': block.quote_id,
        }
    )
