"""Engine subpackage - GST pricing computation and display formatting."""
from .pricing_engine import PricingEngine
from .models import LineItem, Coupon, PricingBreakdown, TraceStep
from .errors import PricingError, InvalidLineItem, InvalidDiscount, InvalidTaxRate
from .formatting import format_currency, summary_rows
from .money import round_money

__all__ = [
    'PricingEngine', 'LineItem', 'Coupon', 'PricingBreakdown', 'TraceStep',
    'PricingError', 'InvalidLineItem', 'InvalidDiscount', 'InvalidTaxRate',
    'format_currency', 'summary_rows', 'round_money',
]
