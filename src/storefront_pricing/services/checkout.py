"""
Checkout - cash-on-delivery order placement from the current cart.

Online payment goes through the payment gateway widget and is not handled here.
"""
import logging
from typing import Optional

from .cart_store import CartStore

logger = logging.getLogger(__name__)

ADDRESS_FIELDS = ('label', 'street', 'city', 'state', 'pincode', 'phone')


class CheckoutError(Exception):
    """The order cannot be placed from the current state."""


def format_shipping_address(address: dict) -> str:
    """'Home: 12 Lake Rd, Srinagar, J&K - 190001, Phone: 9999999999'"""
    missing = [name for name in ADDRESS_FIELDS if not address.get(name)]
    if missing:
        raise CheckoutError(f"Address is missing: {', '.join(missing)}")
    return (
        f"{address['label']}: {address['street']}, {address['city']}, "
        f"{address['state']} - {address['pincode']}, Phone: {address['phone']}"
    )


def place_cod_order(cart_store: CartStore, address: Optional[dict]) -> str:
    """
    Place a cash-on-delivery order for the store's cart and clear the cart.

    Returns:
        The new order id

    Raises:
        CheckoutError: empty cart, no address, or cart could not be priced
        ApiError: the backend refused the order
    """
    if not cart_store.has_items:
        raise CheckoutError("Cart is empty")
    if not address:
        raise CheckoutError("Please select a delivery address")
    if cart_store.pricing_error:
        raise CheckoutError(cart_store.pricing_error)

    shipping_address = format_shipping_address(address)
    data = cart_store.api.place_order("cod", shipping_address)
    order_id = data.get('orderId')

    logger.info("COD order %s placed, payable %s", order_id, cart_store.pricing.grand_total)
    cart_store.clear_cart()
    return order_id
