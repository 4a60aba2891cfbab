import pytest

from storefront_pricing.client import ApiError
from storefront_pricing.services.checkout import CheckoutError, format_shipping_address, place_cod_order

from conftest import cart_payload

ADDRESS = {
    "label": "Home",
    "street": "12 Lake Rd",
    "city": "Srinagar",
    "state": "J&K",
    "pincode": "190001",
    "phone": "9999999999",
}


def load_cart(cart_store, fake_http, *lines):
    fake_http.queue(payload={"cart": cart_payload(*lines)})
    cart_store.fetch_cart()


def test_format_shipping_address():
    assert format_shipping_address(ADDRESS) == "Home: 12 Lake Rd, Srinagar, J&K - 190001, Phone: 9999999999"


def test_format_shipping_address_lists_missing_fields():
    address = dict(ADDRESS, pincode="", phone=None)

    with pytest.raises(CheckoutError, match="pincode, phone"):
        format_shipping_address(address)


def test_empty_cart_cannot_be_ordered(cart_store, fake_http):
    load_cart(cart_store, fake_http)

    with pytest.raises(CheckoutError, match="Cart is empty"):
        place_cod_order(cart_store, ADDRESS)


def test_address_is_required(cart_store, fake_http):
    load_cart(cart_store, fake_http, (118, 1))

    with pytest.raises(CheckoutError, match="delivery address"):
        place_cod_order(cart_store, None)


def test_unpriced_cart_cannot_be_ordered(cart_store, fake_http):
    fake_http.queue(payload={"cart": {"items": [{"product": {"_id": "p1"}, "quantity": 1}]}})
    cart_store.fetch_cart()

    with pytest.raises(CheckoutError, match="Unable to compute total"):
        place_cod_order(cart_store, ADDRESS)
    assert len(fake_http.calls) == 1


def test_cod_order_places_and_clears_cart(cart_store, fake_http):
    load_cart(cart_store, fake_http, (500, 2), (300, 1))
    fake_http.queue(payload={"orderId": "ord-77", "message": "Order placed"})
    fake_http.queue(payload={"message": "Cart cleared"})

    order_id = place_cod_order(cart_store, ADDRESS)

    assert order_id == "ord-77"
    place_call = fake_http.calls[1]
    assert place_call["url"].endswith("/orders/place")
    assert place_call["json"]["paymentMethod"] == "cod"
    assert place_call["json"]["shippingAddress"].startswith("Home: 12 Lake Rd")
    assert fake_http.calls[2]["url"].endswith("/cart/clear")
    assert not cart_store.has_items
    assert cart_store.pricing.is_zero()


def test_rejected_order_keeps_cart(cart_store, fake_http):
    load_cart(cart_store, fake_http, (118, 1))
    fake_http.queue(status_code=400, payload={"message": "Item out of stock"}, reason="Bad Request")

    with pytest.raises(ApiError, match="out of stock"):
        place_cod_order(cart_store, ADDRESS)

    assert cart_store.has_items
    assert not cart_store.pricing.is_zero()
