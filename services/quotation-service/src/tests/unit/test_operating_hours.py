# services/quotation-service/src/tests/unit/test_operating_hours.py
"""
Unit Tests for OperatingHoursResolver
"""

from datetime import date

import pytest

from apps.core.services import OperatingHoursResolver


class TestWeekday:
    """Weekday resolution does not depend on the process time zone."""

    def setup_method(self):
        self.resolver = OperatingHoursResolver('America/Bogota')

    @pytest.mark.parametrize('day, expected', [
        (date(2025, 12, 14), 0),  # Sunday
        (date(2025, 12, 15), 1),  # Monday
        (date(2025, 12, 19), 5),  # Friday
        (date(2025, 12, 20), 6),  # Saturday
    ])
    def test_weekday_for(self, day, expected):
        assert self.resolver.weekday_for(day) == expected

    def test_same_weekday_in_any_zone(self):
        day = date(2025, 12, 14)

        assert OperatingHoursResolver('Asia/Tokyo').weekday_for(day) == self.resolver.weekday_for(day)

    def test_weekday_name(self):
        assert self.resolver.weekday_name(0) == 'Sunday'


@pytest.mark.django_db
class TestResolve:
    """Tests for schedule lookup."""

    def setup_method(self):
        self.resolver = OperatingHoursResolver()

    def test_resolve_active(self, create_schedule):
        create_schedule(5, '10:00', '23:00')

        schedule, found = self.resolver.resolve(5)

        assert found
        assert schedule.open_minute == 600
        assert schedule.close_minute == 1380

    def test_missing_day_is_closed(self):
        schedule, found = self.resolver.resolve(3)

        assert schedule is None
        assert not found

    def test_inactive_day_is_closed(self, create_schedule):
        create_schedule(2, is_active=False)

        schedule, found = self.resolver.resolve(2)

        assert schedule is not None
        assert not found

    def test_resolve_for_date(self, create_schedule):
        create_schedule(1, '09:00', '17:00')

        schedule, found = self.resolver.resolve_for_date(date(2025, 12, 15))

        assert found
        assert schedule.weekday == 1

    def test_crosses_midnight(self, create_schedule):
        late = create_schedule(6, '18:00', '02:00')
        day = create_schedule(0, '08:00', '22:00')

        assert self.resolver.crosses_midnight(late)
        assert not self.resolver.crosses_midnight(day)
        assert str(self.resolver.opening_window(late)) == '18:00-02:00'
        assert self.resolver.opening_window(late).end == 26 * 60
