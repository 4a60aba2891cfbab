"""
Cart Store - owns the server cart and its derived pricing.

Construct one per cart session and pass it to whatever needs the cart.
Pricing is always recomputed from the server-confirmed cart after a
mutation's round-trip completes, never from a locally guessed state.
"""
import logging
from typing import Optional

from ..client.api_client import ApiError, StorefrontApiClient
from ..engine import Coupon, PricingBreakdown, PricingEngine, PricingError

logger = logging.getLogger(__name__)

PRICING_UNAVAILABLE = "Unable to compute total"


class CartStore:
    """
    Holds the cart, the active coupon and the PricingBreakdown derived from them.

    Attributes:
        cart: last server cart payload, or None when unknown
        coupon: active Coupon, or None
        pricing: breakdown for cart + coupon (all zero when unavailable)
        error: last network/auth error message, or None
        pricing_error: set when the cart could not be priced
        loading: True while fetch_cart() is in flight
    """

    def __init__(self, api: StorefrontApiClient, engine: PricingEngine):
        self.api = api
        self.engine = engine
        self.cart: Optional[dict] = None
        self.coupon: Optional[Coupon] = None
        self.pricing: PricingBreakdown = PricingBreakdown.zero()
        self.error: Optional[str] = None
        self.pricing_error: Optional[str] = None
        self.loading = False

    @property
    def items(self) -> list[dict]:
        return (self.cart or {}).get('items') or []

    @property
    def has_items(self) -> bool:
        return bool(self.items)

    # ── Pricing ───────────────────────────────────────────────────

    def recalculate_totals(self) -> PricingBreakdown:
        """Recompute pricing from scratch; falls back to all zero if the cart can't be priced."""
        try:
            self.pricing = self.engine.compute_for_cart(self.cart, self.coupon)
            self.pricing_error = None
        except PricingError as e:
            logger.error("Cart pricing failed: %s", e)
            self.pricing = PricingBreakdown.zero()
            self.pricing_error = PRICING_UNAVAILABLE
        return self.pricing

    def apply_coupon(self, discount_percent, code: Optional[str] = None) -> PricingBreakdown:
        """
        Activate a percentage coupon.

        Raises:
            InvalidDiscount: the percent is outside [0, 100]; the coupon is not kept
        """
        coupon = Coupon(discount_percent=discount_percent, code=code)
        # validate before touching state
        self.engine.compute_for_cart(None, coupon)
        self.coupon = coupon
        logger.info("Coupon %s applied (%s%%)", code or '-', discount_percent)
        return self.recalculate_totals()

    def remove_coupon(self) -> PricingBreakdown:
        self.coupon = None
        return self.recalculate_totals()

    # ── Server round-trips ────────────────────────────────────────

    def fetch_cart(self) -> Optional[dict]:
        """Load the cart from the backend. Never raises; failures reset pricing to zero."""
        self.loading = True
        self.error = None
        try:
            self.cart = self.api.get_cart()
        except ApiError as e:
            logger.warning("Cart fetch failed: %s", e.message)
            self.error = e.message or "Failed to fetch cart"
            self.cart = None
        finally:
            self.loading = False

        self.recalculate_totals()
        return self.cart

    def update_quantity(self, product_id: str, delta: int) -> PricingBreakdown:
        """Change a line's quantity by delta (may be negative). Raises ApiError."""
        self._set_cart(self.api.add_to_cart(product_id, delta))
        return self.pricing

    def add_item(self, product_id: str, quantity: int = 1) -> PricingBreakdown:
        return self.update_quantity(product_id, quantity)

    def remove_item(self, product_id: str) -> PricingBreakdown:
        """Drop a product from the cart. Raises ApiError."""
        self._set_cart(self.api.remove_from_cart(product_id))
        return self.pricing

    def clear_cart(self) -> PricingBreakdown:
        """Empty the cart on the server, then locally. Raises ApiError."""
        self.api.clear_cart()
        self._set_cart({'items': []})
        return self.pricing

    def _set_cart(self, cart: Optional[dict]):
        self.cart = cart
        self.error = None
        self.recalculate_totals()
