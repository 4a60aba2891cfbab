"""
Pricing Engine - GST breakdown for tax-inclusive carts and lump-sum quotes.

Sticker prices already contain GST. The engine reverses the tax out of the
inclusive total, applies any coupon to the pre-tax base, recomputes tax on
the discounted base and splits it evenly into CGST and SGST.

Two entry points, and only two:
- compute_from_line_items: cart, checkout and order-detail screens
- compute_from_base_amount: government quotes priced as a tax-exclusive lump sum
"""
import logging
from decimal import Context, Decimal, InvalidOperation, ROUND_HALF_EVEN, localcontext
from typing import Iterable, Mapping, Optional, Union

from ..config.settings import Settings, get_settings
from .errors import InvalidDiscount, InvalidLineItem, InvalidTaxRate
from .formatting import format_currency
from .models import Coupon, LineItem, PricingBreakdown, TraceStep
from .money import ZERO, to_decimal

logger = logging.getLogger(__name__)

HUNDRED = Decimal("100")
TWO = Decimal("2")

# Every computation runs in this context regardless of the caller's decimal settings
PRICING_CONTEXT = Context(prec=28, rounding=ROUND_HALF_EVEN)


class PricingEngine:
    """
    Computes a PricingBreakdown with a fixed evaluation order.

    Evaluation order (line items):
    1. inclusive_total = Σ unit price × quantity (empty cart → all zero)
    2. base_amount = inclusive_total / (1 + rate)
    3. tax_before_discount = inclusive_total − base_amount
    4. discount d > 0: discount = base × d / 100, taxable = base − discount,
       tax = taxable × rate
    5. otherwise: discount = 0, taxable = base, tax = tax_before_discount
    6. cgst = sgst = tax / 2
    7. grand_total = taxable + tax
    """

    def __init__(self, gst_rate=None, settings: Optional[Settings] = None):
        if gst_rate is None:
            gst_rate = (settings or get_settings()).gst_rate
        self.gst_rate = self._validate_rate(gst_rate)

    @property
    def split_rate(self) -> Decimal:
        """Rate of each of CGST and SGST."""
        return self.gst_rate / TWO

    # ── Entry points ──────────────────────────────────────────────

    def compute_from_line_items(
        self,
        line_items: Iterable[Union[LineItem, Mapping]],
        discount_percent=None,
    ) -> PricingBreakdown:
        """
        Breakdown for tax-inclusive cart lines.

        Args:
            line_items: LineItem objects, or backend cart item dicts
            discount_percent: coupon percent in [0, 100], or None

        Raises:
            InvalidLineItem, InvalidDiscount
        """
        items = [self._coerce_line_item(item) for item in line_items]
        discount = self._validate_discount(discount_percent)

        with localcontext(PRICING_CONTEXT):
            inclusive_total = ZERO
            for index, item in enumerate(items):
                price, quantity = self._validate_line_item(item, index)
                inclusive_total += price * quantity

            if not items:
                breakdown = PricingBreakdown.zero()
                breakdown.add_trace("Empty Cart", "No line items, all amounts are zero")
                return breakdown

            base_amount = inclusive_total / (1 + self.gst_rate)
            tax_before_discount = inclusive_total - base_amount

            leading = [
                TraceStep("Inclusive Total", f"Σ unit price × quantity over {len(items)} line(s)",
                          format_currency(inclusive_total)),
                TraceStep("Reverse GST", f"Inclusive total ÷ {1 + self.gst_rate}", format_currency(base_amount)),
            ]
            breakdown = self._finalize(base_amount, tax_before_discount, discount, leading)

        logger.debug("Priced %d line(s): grand total %s", len(items), breakdown.grand_total)
        return breakdown

    def compute_from_base_amount(self, base_amount, discount_percent=None) -> PricingBreakdown:
        """
        Breakdown for a tax-exclusive lump sum (government quotation price).

        Tax is added on top: grand_total = base × (1 + rate) when undiscounted.

        Raises:
            InvalidLineItem, InvalidDiscount
        """
        base = self._validate_amount(base_amount, "Base amount")
        discount = self._validate_discount(discount_percent)

        with localcontext(PRICING_CONTEXT):
            tax_before_discount = base * self.gst_rate
            leading = [TraceStep("Base Amount", "Tax-exclusive lump sum", format_currency(base))]
            breakdown = self._finalize(base, tax_before_discount, discount, leading)

        logger.debug("Priced lump sum %s: grand total %s", base, breakdown.grand_total)
        return breakdown

    def compute_for_cart(self, cart: Optional[Mapping], coupon=None) -> PricingBreakdown:
        """
        Breakdown for a backend cart payload.

        cart: {"items": [{"product": {"price": ...}, "quantity": ...}]} or None
        coupon: Coupon, {"discountPercent": ...} or None
        """
        items = (cart or {}).get('items') or []
        if isinstance(coupon, Mapping):
            coupon = Coupon.from_dict(coupon)
        discount = coupon.discount_percent if coupon else None
        return self.compute_from_line_items(items, discount)

    # ── Shared tail (steps 4–7) ───────────────────────────────────

    def _finalize(self, base_amount: Decimal, tax_before_discount: Decimal,
                  discount: Optional[Decimal], trace: list[TraceStep]) -> PricingBreakdown:
        """Apply the discount to the pre-tax base, then split the tax. Caller holds PRICING_CONTEXT."""
        if discount is not None and discount > 0:
            discount_amount = base_amount * discount / HUNDRED
            taxable_amount = base_amount - discount_amount
            # recomputed from the unrounded discounted base, never scaled
            total_tax = taxable_amount * self.gst_rate
            trace.append(TraceStep("Discount", f"{discount}% of pre-tax base", format_currency(discount_amount)))
            trace.append(TraceStep("Tax Recomputed", f"Taxable amount × {self.gst_rate}", format_currency(total_tax)))
        else:
            discount_amount = ZERO
            taxable_amount = base_amount
            total_tax = tax_before_discount
            trace.append(TraceStep("Discount", "No coupon applied"))

        cgst = total_tax / TWO
        sgst = total_tax / TWO
        grand_total = taxable_amount + total_tax

        breakdown = PricingBreakdown(
            base_amount=base_amount,
            discount_amount=discount_amount,
            taxable_amount=taxable_amount,
            cgst=cgst,
            sgst=sgst,
            total_tax=total_tax,
            grand_total=grand_total,
            trace=trace,
        )
        breakdown.add_trace("GST Split", f"CGST and SGST @ {self.split_rate} each", format_currency(cgst))
        breakdown.add_trace("Grand Total", "Taxable amount + total tax", format_currency(grand_total))
        return breakdown

    # ── Validation ────────────────────────────────────────────────

    @staticmethod
    def _coerce_line_item(item) -> LineItem:
        if isinstance(item, LineItem):
            return item
        if isinstance(item, Mapping):
            return LineItem.from_cart_item(item)
        raise InvalidLineItem(f"Unsupported line item type: {type(item).__name__}")

    @staticmethod
    def _validate_line_item(item: LineItem, index: int) -> tuple[Decimal, int]:
        quantity = item.quantity
        if isinstance(quantity, bool) or not isinstance(quantity, int) or quantity < 1:
            raise InvalidLineItem(f"Line {index + 1}: quantity must be a positive integer, got {quantity!r}")

        label = f"Line {index + 1}: unit price"
        try:
            price = to_decimal(item.unit_price_inclusive)
        except (InvalidOperation, TypeError, ValueError):
            raise InvalidLineItem(f"{label} is not a number: {item.unit_price_inclusive!r}")
        if not price.is_finite() or price < 0:
            raise InvalidLineItem(f"{label} must be a finite amount >= 0, got {item.unit_price_inclusive!r}")
        return price, quantity

    @staticmethod
    def _validate_amount(value, label: str) -> Decimal:
        try:
            amount = to_decimal(value)
        except (InvalidOperation, TypeError, ValueError):
            raise InvalidLineItem(f"{label} is not a number: {value!r}")
        if not amount.is_finite() or amount < 0:
            raise InvalidLineItem(f"{label} must be a finite amount >= 0, got {value!r}")
        return amount

    @staticmethod
    def _validate_discount(value) -> Optional[Decimal]:
        if value is None:
            return None
        try:
            discount = to_decimal(value)
        except (InvalidOperation, TypeError, ValueError):
            raise InvalidDiscount(f"Discount percent is not a number: {value!r}")
        if not discount.is_finite() or discount < 0 or discount > HUNDRED:
            raise InvalidDiscount(f"Discount percent must be within [0, 100], got {value!r}")
        return discount

    @staticmethod
    def _validate_rate(value) -> Decimal:
        try:
            rate = to_decimal(value)
        except (InvalidOperation, TypeError, ValueError):
            raise InvalidTaxRate(f"GST rate is not a number: {value!r}")
        if not rate.is_finite() or rate < 0:
            raise InvalidTaxRate(f"GST rate must be a finite rate >= 0, got {value!r}")
        return rate
