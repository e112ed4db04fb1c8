# services/quotation-service/src/tests/unit/test_common.py
"""
Unit Tests for shared clock, money and validation helpers
"""

from datetime import date, time
from decimal import Decimal

import pytest
from django.core.exceptions import ValidationError

from shared.common.utils import (
    clock_to_time,
    format_clock,
    format_currency,
    from_minor,
    parse_clock,
    parse_date,
    parse_hours,
    percent_of,
    to_minor,
)
from shared.common.validators import (
    validate_booking_date,
    validate_email,
    validate_positive_decimal,
    validate_uuid_list,
)


class TestClock:

    @pytest.mark.parametrize('value, expected', [
        ('00:00', 0),
        ('08:30', 510),
        ('23:59', 1439),
        ('7:05', 425),
        ('18:00:45', 1080),
        (time(22, 15), 1335),
    ])
    def test_parse_clock(self, value, expected):
        assert parse_clock(value) == expected

    @pytest.mark.parametrize('value', ['24:00', '12:60', '1200', '', None])
    def test_parse_clock_invalid(self, value):
        with pytest.raises(ValidationError):
            parse_clock(value)

    def test_format_folds_days(self):
        assert format_clock(1560) == '02:00'
        assert format_clock(-60) == '23:00'
        assert clock_to_time(1440) == time(0, 0)

    @pytest.mark.parametrize('value, expected', [(4, 4), ('8', 8), (Decimal('6'), 6), (5.0, 5)])
    def test_parse_hours(self, value, expected):
        assert parse_hours(value) == expected

    @pytest.mark.parametrize('value', [4.5, '2.25', 0, -1, 'x', None])
    def test_parse_hours_invalid(self, value):
        with pytest.raises(ValidationError):
            parse_hours(value)


class TestMoney:

    def test_minor_units(self):
        assert to_minor(Decimal('1000000.00')) == 100000000
        assert to_minor('0.005') == 1
        assert from_minor(15000045, 2) == Decimal('150000.45')

    def test_percent_rounds_half_up(self):
        assert percent_of(10, 15) == 2      # 1.5
        assert percent_of(9, 15) == 1       # 1.35
        assert percent_of(100000000, 50) == 50000000

    def test_format_currency(self):
        assert format_currency(Decimal('1150000'), 'COP') == '$1,150,000.00'


class TestValidators:

    def test_booking_window(self):
        today = date(2025, 12, 1)

        validate_booking_date(date(2025, 12, 2), today)
        validate_booking_date(today, today, allow_today=True)
        with pytest.raises(ValidationError):
            validate_booking_date(today, today)
        with pytest.raises(ValidationError):
            validate_booking_date(date(2027, 1, 1), today, max_days_ahead=365)

    def test_email_normalized(self):
        assert validate_email('  Ana@Example.COM ') == 'ana@example.com'

    def test_uuid_list(self):
        assert validate_uuid_list(None) == []
        with pytest.raises(ValidationError):
            validate_uuid_list('abc')

    def test_positive_decimal(self):
        assert validate_positive_decimal('250000.50') == Decimal('250000.50')

    @pytest.mark.parametrize('value', ['NaN', 'sNaN', 'Infinity', '-Infinity', '0', 'x', None])
    def test_positive_decimal_invalid(self, value):
        with pytest.raises(ValidationError):
            validate_positive_decimal(value)

    def test_parse_date(self):
        assert parse_date('2025-12-14') == date(2025, 12, 14)
        with pytest.raises(ValidationError):
            parse_date('14/12/2025')
