# services/quotation-service/src/apps/core/services/__init__.py
"""
Quotation Service Business Logic
"""

from .operating_hours_service import OperatingHoursResolver
from .availability_service import AvailabilityResult, AvailabilityValidator
from .pricing_service import LineItem, PriceBreakdown, PricingCalculator, PricingRequest
from .slot_service import SlotGenerator
from .confirmation_service import ConfirmationResult, ConfirmationService, select_cascade_rejections
from .quotation_service import QuotationService, QuoteRequest, QuoteResult


# Custom Exceptions
class QuotationServiceError(Exception):
    """Base exception for quotation service errors."""
    pass


class QuotationValidationError(QuotationServiceError):
    """Malformed or incomplete request."""
    pass


class QuotationNotFoundError(QuotationServiceError):
    """A referenced record does not exist."""
    pass


class SpaceNotFoundError(QuotationNotFoundError):
    """Space not found."""
    pass


class ConfigurationNotFoundError(QuotationNotFoundError):
    """Space configuration not found."""
    pass


class QuoteNotFoundError(QuotationNotFoundError):
    """Quote not found."""
    pass


class RateNotFoundError(QuotationNotFoundError):
    """No rate card for the configuration and client type."""
    pass


class NoApplicableRateError(QuotationNotFoundError):
    """Rate card has no price for the requested duration."""
    pass


class QuoteStateError(QuotationServiceError):
    """Invalid quote state transition."""
    pass


class QuoteConflictError(QuoteStateError):
    """Quote overlaps a block already on the calendar."""
    pass


__all__ = [
    # Services
    'OperatingHoursResolver',
    'AvailabilityValidator',
    'PricingCalculator',
    'SlotGenerator',
    'ConfirmationService',
    'QuotationService',

    # Values
    'AvailabilityResult',
    'LineItem',
    'PriceBreakdown',
    'PricingRequest',
    'ConfirmationResult',
    'QuoteRequest',
    'QuoteResult',
    'select_cascade_rejections',

    # Exceptions
    'QuotationServiceError',
    'QuotationValidationError',
    'QuotationNotFoundError',
    'SpaceNotFoundError',
    'ConfigurationNotFoundError',
    'QuoteNotFoundError',
    'RateNotFoundError',
    'NoApplicableRateError',
    'QuoteStateError',
    'QuoteConflictError',
]
