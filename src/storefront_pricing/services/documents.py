"""
Tax documents - order invoices and government quotations.

Both documents get their figures from the shared PricingEngine:
invoices from the order's line items, quotes from the quoted lump sum.
"""
import logging
from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from typing import Optional

from ..config.settings import Settings
from ..engine import LineItem, PricingBreakdown, PricingEngine, summary_rows
from ..engine.money import CENT, to_decimal

logger = logging.getLogger(__name__)

DEFAULT_HSN = "8471"


@dataclass
class Party:
    """Seller or buyer block on a document."""
    name: str
    address: str
    gstin: Optional[str] = None


@dataclass
class DocumentLine:
    name: str
    hsn: str
    quantity: int
    unit_price: Decimal
    total: Decimal


@dataclass
class TaxDocument:
    """A tax invoice or a quotation, ready for rendering."""
    kind: str  # "INVOICE" or "QUOTATION"
    number: str
    issued_on: Optional[date]
    seller: Party
    buyer: Party
    lines: list[DocumentLine]
    pricing: PricingBreakdown
    gst_rate: Decimal
    status: Optional[str] = None
    valid_until: Optional[date] = None
    notes: Optional[str] = None
    warnings: list[str] = field(default_factory=list)

    def summary_rows(self, symbol: str = "₹") -> list[tuple[str, str]]:
        return summary_rows(self.pricing, self.gst_rate, symbol)


def seller_from_settings(settings: Settings) -> Party:
    return Party(name=settings.seller_name, address=settings.seller_address, gstin=settings.seller_gstin)


def _parse_date(value) -> Optional[date]:
    if not value:
        return None
    try:
        return datetime.fromisoformat(str(value).replace('Z', '+00:00')).date()
    except ValueError:
        logger.warning("Unparseable document date %r", value)
        return None


def _coupon_percent(order: dict):
    coupon = order.get('coupon') or {}
    return coupon.get('discountPercent')


def build_order_invoice(order: dict, engine: PricingEngine, seller: Party) -> TaxDocument:
    """
    Build the tax invoice for a placed order.

    Pricing is recomputed from priceAtOrder × quantity so the invoice always
    agrees with the cart and checkout screens. Disagreement with the
    server-sent order.pricing is recorded in warnings.

    Raises:
        InvalidLineItem, InvalidDiscount
    """
    line_items = []
    for item in order.get('items') or []:
        product = item.get('product') or {}
        line_items.append(LineItem(
            unit_price_inclusive=item.get('priceAtOrder'),
            quantity=item.get('quantity'),
            product_id=product.get('_id'),
            name=product.get('name'),
        ))

    pricing = engine.compute_from_line_items(line_items, _coupon_percent(order))

    lines = [
        DocumentLine(
            name=line.name or "Item",
            hsn=(item.get('product') or {}).get('hsn') or DEFAULT_HSN,
            quantity=line.quantity,
            unit_price=to_decimal(line.unit_price_inclusive),
            total=line.line_total_inclusive,
        )
        for line, item in zip(line_items, order.get('items') or [])
    ]

    order_id = str(order.get('_id', ''))
    user = order.get('user') or {}

    document = TaxDocument(
        kind="INVOICE",
        number=f"INV-{order_id[-6:].upper()}",
        issued_on=_parse_date(order.get('createdAt')),
        seller=seller,
        buyer=Party(
            name=user.get('name') or "Customer",
            address=order.get('shippingAddress') or "India",
        ),
        lines=lines,
        pricing=pricing,
        gst_rate=engine.gst_rate,
        status=order.get('status'),
    )

    mismatched = check_server_pricing(order, pricing)
    if mismatched:
        document.warnings.append(f"Server pricing differs on: {', '.join(mismatched)}")
    return document


def build_quote_document(quote: dict, engine: PricingEngine, seller: Party) -> TaxDocument:
    """
    Build a government quotation.

    The quoted price is a tax-exclusive lump sum priced through
    compute_from_base_amount.

    Raises:
        InvalidLineItem: the quote has no usable price
    """
    enquiry = quote.get('enquiry') or {}
    product = enquiry.get('product') or {}

    pricing = engine.compute_from_base_amount(quote.get('price'))

    try:
        quantity = int(enquiry.get('quantity') or 1)
    except (TypeError, ValueError):
        logger.warning("Quote %s has unusable quantity %r", quote.get('_id'), enquiry.get('quantity'))
        quantity = 1
    if quantity < 1:
        quantity = 1
    unit_price = pricing.base_amount / Decimal(quantity)

    quote_id = str(quote.get('_id', ''))

    return TaxDocument(
        kind="QUOTATION",
        number=f"QT-{quote_id[-8:].upper()}",
        issued_on=_parse_date(quote.get('createdAt')),
        seller=seller,
        buyer=Party(
            name=enquiry.get('organizationName') or enquiry.get('name') or "Government Client",
            address=enquiry.get('address') or "Government Office",
        ),
        lines=[DocumentLine(
            name=product.get('name') or "Quoted supply",
            hsn=product.get('hsn') or DEFAULT_HSN,
            quantity=quantity,
            unit_price=unit_price,
            total=pricing.base_amount,
        )],
        pricing=pricing,
        gst_rate=engine.gst_rate,
        status=quote.get('status'),
        valid_until=_parse_date(quote.get('validityDate')),
        notes=quote.get('notes'),
    )


def check_server_pricing(order: dict, breakdown: PricingBreakdown) -> list[str]:
    """
    Compare the backend's order.pricing with the engine's breakdown.

    Returns the camelCase keys that differ by more than 0.01.
    """
    server = order.get('pricing') or {}
    mismatched = []
    for name, key in PricingBreakdown.FIELD_KEYS.items():
        if server.get(key) is None:
            continue
        try:
            server_value = to_decimal(server[key])
        except (InvalidOperation, TypeError, ValueError):
            mismatched.append(key)
            continue
        if not server_value.is_finite() or abs(server_value - getattr(breakdown, name)) > CENT:
            mismatched.append(key)

    if mismatched:
        logger.warning("Order %s pricing mismatch on %s", order.get('_id'), ", ".join(mismatched))
    return mismatched
