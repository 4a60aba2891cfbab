"""
Decimal helpers shared by the engine, the models and the display layer.
"""
from decimal import Decimal, ROUND_HALF_UP
from typing import Any

ZERO = Decimal("0")
CENT = Decimal("0.01")


def to_decimal(value: Any) -> Decimal:
    """
    Convert a JSON-ish number to Decimal without float contamination.

    Floats go through str() so 0.1 becomes Decimal('0.1'), not its binary expansion.
    """
    if isinstance(value, bool):
        raise TypeError("booleans are not monetary values")
    if isinstance(value, Decimal):
        return value
    if isinstance(value, (int, float, str)):
        return Decimal(str(value).strip())
    raise TypeError(f"cannot convert {type(value).__name__} to Decimal")


def round_money(value: Any) -> Decimal:
    """Round half-up to 2 decimals. Presentation only; never feed the result back into the engine."""
    amount = to_decimal(value).quantize(CENT, rounding=ROUND_HALF_UP)
    if amount.is_zero():
        # Decimal keeps the sign of zero; "-0.00" must never reach a screen
        amount = abs(amount)
    return amount
