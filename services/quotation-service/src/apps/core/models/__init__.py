# services/quotation-service/src/apps/core/models/__init__.py
"""
Quotation Service Models
"""

from .space import Space, SpaceConfiguration
from .schedule import OperatingSchedule
from .rates import ClientType, RateCard, AdditionalHourRate, AddOnService
from .calendar import CalendarBlock
from .quote import Quote

__all__ = [
    'Space',
    'SpaceConfiguration',
    'OperatingSchedule',
    'ClientType',
    'RateCard',
    'AdditionalHourRate',
    'AddOnService',
    'CalendarBlock',
    'Quote',
]
