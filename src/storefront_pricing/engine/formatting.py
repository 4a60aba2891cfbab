"""
Display formatting for pricing breakdowns.

The order-summary panel, checkout, order detail, invoice and quote all render
through these helpers so the same breakdown always prints the same figures.
"""
from decimal import Decimal
from typing import Any

from .money import round_money, to_decimal

DEFAULT_SYMBOL = "₹"


def format_currency(value: Any, symbol: str = DEFAULT_SYMBOL) -> str:
    """Format an amount as e.g. ₹1234.50 (half-up to 2 decimals)."""
    amount = round_money(value)
    if amount < 0:
        return f"-{symbol}{-amount}"
    return f"{symbol}{amount}"


def percent_label(rate: Any) -> str:
    """0.09 -> '9', 0.025 -> '2.5'."""
    percent = (to_decimal(rate) * 100).normalize()
    return f"{percent:f}"


def summary_rows(breakdown, gst_rate: Any, symbol: str = DEFAULT_SYMBOL) -> list[tuple[str, str]]:
    """
    Ordered (label, value) rows for an order summary.

    Every value is read straight off the breakdown; no tax is recomputed here.
    The coupon row only appears when a discount was actually applied.
    """
    half_label = percent_label(to_decimal(gst_rate) / Decimal(2))

    rows = [
        ("Price (Incl. GST)", format_currency(breakdown.grand_total, symbol)),
        ("Taxable Value (Included)", format_currency(breakdown.base_amount, symbol)),
    ]
    if breakdown.discount_amount > 0:
        rows.append(("Coupon Discount", format_currency(-breakdown.discount_amount, symbol)))
    rows.extend([
        (f"CGST @{half_label}% (Included)", format_currency(breakdown.cgst, symbol)),
        (f"SGST @{half_label}% (Included)", format_currency(breakdown.sgst, symbol)),
        ("Total Tax", format_currency(breakdown.total_tax, symbol)),
        ("Amount Payable", format_currency(breakdown.grand_total, symbol)),
    ])
    return rows
