"""
Data models for the pricing engine.

Uses dataclasses for structured, type-safe data representation.
All money values are Decimal; nothing here rounds except rounded().
"""
from dataclasses import dataclass, field, fields, replace
from decimal import Decimal
from typing import Optional

from .errors import InvalidLineItem
from .money import ZERO, round_money, to_decimal


@dataclass
class TraceStep:
    """A single step in the pricing computation trace."""
    step: str
    description: str
    value: Optional[str] = None


@dataclass
class LineItem:
    """A cart line: tax-inclusive unit price times quantity."""
    unit_price_inclusive: Decimal
    quantity: int
    product_id: Optional[str] = None
    name: Optional[str] = None

    @property
    def line_total_inclusive(self) -> Decimal:
        return to_decimal(self.unit_price_inclusive) * self.quantity

    @classmethod
    def from_cart_item(cls, item: dict) -> 'LineItem':
        """
        Build a LineItem from the backend cart JSON shape.

        {"product": {"_id": ..., "name": ..., "price": 499}, "quantity": 2}
        """
        product = item.get('product') or {}
        product_id = product.get('_id') or item.get('productId')
        price = product.get('price')
        if price is None:
            raise InvalidLineItem(f"Cart item for product {product_id or '?'} has no price")

        return cls(
            unit_price_inclusive=price,
            quantity=item.get('quantity'),
            product_id=str(product_id) if product_id is not None else None,
            name=product.get('name'),
        )


@dataclass
class Coupon:
    """An applied percentage coupon."""
    discount_percent: Decimal
    code: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Optional[dict]) -> Optional['Coupon']:
        if not data:
            return None
        return cls(discount_percent=data.get('discountPercent'), code=data.get('code'))


@dataclass
class PricingBreakdown:
    """GST breakdown of a cart or a lump-sum quote. Values are unrounded."""
    base_amount: Decimal
    discount_amount: Decimal
    taxable_amount: Decimal
    cgst: Decimal
    sgst: Decimal
    total_tax: Decimal
    grand_total: Decimal
    trace: list[TraceStep] = field(default_factory=list, compare=False, repr=False)

    # camelCase keys used by every UI surface and by the backend's order.pricing
    FIELD_KEYS = {
        'base_amount': 'baseAmount',
        'discount_amount': 'discountAmount',
        'taxable_amount': 'taxableAmount',
        'cgst': 'cgst',
        'sgst': 'sgst',
        'total_tax': 'totalTax',
        'grand_total': 'grandTotal',
    }

    @classmethod
    def zero(cls) -> 'PricingBreakdown':
        return cls(ZERO, ZERO, ZERO, ZERO, ZERO, ZERO, ZERO)

    def is_zero(self) -> bool:
        return all(getattr(self, name) == 0 for name in self.FIELD_KEYS)

    def add_trace(self, step: str, description: str, value: str = None):
        """Add a step to the computation trace."""
        self.trace.append(TraceStep(step=step, description=description, value=value))

    def get_trace_text(self) -> str:
        """Get human-readable trace as formatted text."""
        lines = []
        for t in self.trace:
            if t.value:
                lines.append(f"• {t.step}: {t.description} = {t.value}")
            else:
                lines.append(f"• {t.step}: {t.description}")
        return "\n".join(lines)

    def rounded(self) -> 'PricingBreakdown':
        """Copy with every amount rounded half-up to 2 decimals, for display only."""
        return replace(
            self,
            trace=list(self.trace),
            **{name: round_money(getattr(self, name)) for name in self.FIELD_KEYS},
        )

    def to_dict(self) -> dict[str, float]:
        """Numbers as consumed by the UI and JSON responses."""
        return {key: float(getattr(self, name)) for name, key in self.FIELD_KEYS.items()}

    def amounts(self) -> dict[str, Decimal]:
        return {f.name: getattr(self, f.name) for f in fields(self) if f.name != 'trace'}
