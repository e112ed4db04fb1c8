# services/quotation-service/src/tests/conftest.py
"""
Pytest Configuration and Fixtures

Provides common fixtures for quotation service tests.
"""

from datetime import date, time, timedelta
from decimal import Decimal
from unittest.mock import MagicMock

import pytest


@pytest.fixture
def event_date():
    """A date comfortably inside the bookable window."""
    return date.today() + timedelta(days=10)


@pytest.fixture
def mock_notifier():
    """Notifier double recording calls instead of queueing tasks."""
    from apps.core.notifications import QuoteNotifier
    return MagicMock(spec=QuoteNotifier)


# =============================================================================
# Venue
# =============================================================================

@pytest.fixture
def create_space(db):
    """Factory for spaces."""
    def _create_space(**kwargs):
        from apps.core.models import Space

        defaults = {
            'name': 'Salón Principal',
        }
        defaults.update(kwargs)
        return Space.objects.create(**defaults)
    return _create_space


@pytest.fixture
def space(create_space):
    """Space with the default 2h setup and 2h teardown."""
    return create_space()


@pytest.fixture
def configuration(space):
    from apps.core.models import SpaceConfiguration

    return SpaceConfiguration.objects.create(
        space=space,
        name='Banquet',
        min_capacity=10,
        max_capacity=200,
    )


@pytest.fixture
def create_schedule(db):
    """Factory for operating schedules."""
    def _create_schedule(weekday, open_time='08:00', close_time='22:00', **kwargs):
        from apps.core.models import OperatingSchedule

        schedule, _ = OperatingSchedule.objects.update_or_create(
            weekday=weekday,
            defaults={
                'open_time': open_time,
                'close_time': close_time,
                'is_active': kwargs.pop('is_active', True),
                **kwargs,
            }
        )
        return schedule
    return _create_schedule


@pytest.fixture
def weekly_schedule(create_schedule):
    """08:00-22:00 every day of the week."""
    return [create_schedule(weekday) for weekday in range(7)]


@pytest.fixture
def set_schedule_for(create_schedule):
    """Set the schedule of the weekday a given date falls on."""
    def _set_schedule_for(target_date, open_time, close_time, **kwargs):
        from apps.core.services import OperatingHoursResolver

        weekday = OperatingHoursResolver().weekday_for(target_date)
        return create_schedule(weekday, open_time, close_time, **kwargs)
    return _set_schedule_for


# =============================================================================
# Rates
# =============================================================================

@pytest.fixture
def rate_card(configuration):
    from apps.core.models import ClientType, RateCard

    return RateCard.objects.create(
        configuration=configuration,
        client_type=ClientType.NON_MEMBER,
        price_4h=Decimal('1000000.00'),
        price_8h=Decimal('1800000.00'),
    )


@pytest.fixture
def create_add_on(db):
    """Factory for add-on services."""
    def _create_add_on(**kwargs):
        from apps.core.models import AddOnService, ClientType

        defaults = {
            'name': 'Sound system',
            'client_type': ClientType.NON_MEMBER,
            'price': Decimal('250000.00'),
        }
        defaults.update(kwargs)
        return AddOnService.objects.create(**defaults)
    return _create_add_on


# =============================================================================
# Calendar and quotes
# =============================================================================

@pytest.fixture
def create_block(space):
    """Factory for calendar blocks on the default space."""
    def _create_block(block_date, start, end, **kwargs):
        from apps.core.models import CalendarBlock

        defaults = {
            'space': space,
            'date': block_date,
            'buffered_start': start,
            'buffered_end': end,
            'reason': 'Private event',
        }
        defaults.update(kwargs)
        return CalendarBlock.objects.create(**defaults)
    return _create_block


@pytest.fixture
def create_quote(space, configuration, event_date):
    """Factory for pending quotes stored directly, without pricing."""
    def _create_quote(**kwargs):
        from apps.core.models import Quote

        start = kwargs.pop('start_time', '18:00')
        if isinstance(start, str):
            hours, minutes = start.split(':')
            start = time(int(hours), int(minutes))

        defaults = {
            'space': space,
            'configuration': configuration,
            'date': event_date,
            'start_time': start,
            'duration_hours': 4,
            'attendees': 80,
            'contact_name': 'Ana Gómez',
            'contact_email': 'ana@example.com',
            'total': Decimal('1000000.00'),
            'deposit_amount': Decimal('500000.00'),
            'line_items': [{
                'description': 'Venue rental (4h)',
                'quantity': 1,
                'unit_price': '1000000.00',
                'line_total': '1000000.00',
            }],
        }
        defaults.update(kwargs)
        return Quote.objects.create(**defaults)
    return _create_quote
