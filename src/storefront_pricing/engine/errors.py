"""
Pricing errors.

Tax figures have compliance implications, so malformed input is rejected
instead of being clamped or defaulted.
"""


class PricingError(ValueError):
    """Base class for every error raised by the pricing engine."""


class InvalidLineItem(PricingError):
    """A line item has a non-positive quantity or an unusable price."""


class InvalidDiscount(PricingError):
    """A discount percent is not a finite number in [0, 100]."""


class InvalidTaxRate(PricingError):
    """The configured GST rate is negative or not a finite number."""
