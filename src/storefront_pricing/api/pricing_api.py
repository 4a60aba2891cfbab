"""
Pricing API - FastAPI router exposing the shared GST engine.

Cart screens and quote rendering both call these endpoints so every surface
prices through the same formula.
"""
from decimal import Decimal
from typing import Optional

from fastapi import APIRouter
from pydantic import BaseModel, Field, StrictInt

from ..engine import Coupon, LineItem, PricingBreakdown, summary_rows
from .state import engine, settings

router = APIRouter(prefix="/api/pricing", tags=["pricing"])


# Pydantic models for API
class ProductIn(BaseModel):
    """Product as embedded in a backend cart item."""
    price: Optional[Decimal] = None
    name: Optional[str] = None
    id: Optional[str] = Field(default=None, alias="_id")


class CartItemIn(BaseModel):
    product: ProductIn
    # 2.0 and true are rejected, as in the engine
    quantity: StrictInt


class CouponIn(BaseModel):
    discountPercent: Decimal
    code: Optional[str] = None


class CartPricingRequest(BaseModel):
    """Request model for pricing a cart."""
    items: list[CartItemIn] = []
    coupon: Optional[CouponIn] = None


class BaseAmountPricingRequest(BaseModel):
    """Request model for pricing a tax-exclusive lump sum."""
    price: Decimal
    discountPercent: Optional[Decimal] = None


class PricingResponse(BaseModel):
    """Response model for a breakdown."""
    pricing: dict[str, float]
    display: list[tuple[str, str]]
    trace: list[str]


def _respond(breakdown: PricingBreakdown) -> PricingResponse:
    return PricingResponse(
        pricing=breakdown.to_dict(),
        display=summary_rows(breakdown, engine.gst_rate, settings.currency_symbol),
        trace=breakdown.get_trace_text().splitlines(),
    )


# Endpoints

@router.post("/cart", response_model=PricingResponse)
async def price_cart(request: CartPricingRequest):
    """Price tax-inclusive cart lines with an optional coupon."""
    line_items = [
        LineItem(
            unit_price_inclusive=item.product.price,
            quantity=item.quantity,
            product_id=item.product.id,
            name=item.product.name,
        )
        for item in request.items
    ]
    coupon = Coupon(request.coupon.discountPercent, request.coupon.code) if request.coupon else None
    breakdown = engine.compute_from_line_items(line_items, coupon.discount_percent if coupon else None)
    return _respond(breakdown)


@router.post("/base-amount", response_model=PricingResponse)
async def price_base_amount(request: BaseAmountPricingRequest):
    """Price a tax-exclusive lump sum (government quotation)."""
    breakdown = engine.compute_from_base_amount(request.price, request.discountPercent)
    return _respond(breakdown)
