"""
Cart store: pricing always follows the server-confirmed cart, and failures
reset the breakdown to zero instead of leaving stale figures on screen.
"""
from decimal import Decimal

import pytest

from storefront_pricing.auth import SessionStore, StoreCredentialProvider
from storefront_pricing.client import ApiError, StorefrontApiClient
from storefront_pricing.engine import InvalidDiscount
from storefront_pricing.services.cart_store import CartStore, PRICING_UNAVAILABLE

from conftest import cart_payload


def test_new_store_is_empty(cart_store):
    assert cart_store.cart is None
    assert cart_store.pricing.is_zero()
    assert not cart_store.has_items


def test_fetch_cart_prices_server_cart(cart_store, fake_http):
    fake_http.queue(payload={"cart": cart_payload((500, 2), (300, 1))})

    cart_store.fetch_cart()

    assert cart_store.error is None
    assert cart_store.loading is False
    assert cart_store.pricing.grand_total == Decimal("1300")
    assert cart_store.pricing.rounded().cgst == Decimal("99.15")


def test_fetch_failure_resets_to_zero(cart_store, fake_http):
    fake_http.queue(payload={"cart": cart_payload((118, 1))})
    cart_store.fetch_cart()
    assert not cart_store.pricing.is_zero()

    fake_http.queue(status_code=500, payload={"message": "db down"}, reason="Server Error")
    cart_store.fetch_cart()

    assert cart_store.cart is None
    assert cart_store.error == "db down"
    assert cart_store.pricing.is_zero()
    assert cart_store.loading is False


def test_fetch_without_token_fails_soft(engine, fake_http):
    client = StorefrontApiClient("http://backend.test", StoreCredentialProvider(SessionStore()), session=fake_http)
    store = CartStore(client, engine)

    store.fetch_cart()

    assert store.error == "Authentication required"
    assert store.cart is None
    assert store.pricing.is_zero()
    assert fake_http.calls == []


def test_update_quantity_uses_server_response(cart_store, fake_http):
    fake_http.queue(payload={"cart": cart_payload((118, 1))})
    cart_store.fetch_cart()

    # the server is authoritative: it capped the quantity at 3 rather than 5
    fake_http.queue(payload={"cart": cart_payload((118, 3))})
    cart_store.update_quantity("p1", 4)

    assert cart_store.pricing.grand_total == Decimal("354")
    assert fake_http.calls[-1]["json"] == {"productId": "p1", "quantity": 4}


def test_failed_mutation_leaves_state_untouched(cart_store, fake_http):
    fake_http.queue(payload={"cart": cart_payload((118, 1))})
    cart_store.fetch_cart()
    before = cart_store.pricing

    fake_http.queue(status_code=400, payload={"message": "Out of stock"}, reason="Bad Request")
    with pytest.raises(ApiError, match="Out of stock"):
        cart_store.update_quantity("p1", 1)

    assert cart_store.pricing == before
    assert cart_store.cart == cart_payload((118, 1))


def test_remove_item(cart_store, fake_http):
    fake_http.queue(payload={"cart": cart_payload((118, 1), (236, 1))})
    cart_store.fetch_cart()

    fake_http.queue(payload={"cart": cart_payload((236, 1))})
    cart_store.remove_item("p1")

    assert cart_store.pricing.grand_total == Decimal("236")
    assert fake_http.calls[-1]["url"].endswith("/cart/remove")


def test_clear_cart_zeroes_pricing(cart_store, fake_http):
    fake_http.queue(payload={"cart": cart_payload((118, 1))})
    cart_store.fetch_cart()

    fake_http.queue(payload={"message": "cleared"})
    cart_store.clear_cart()

    assert cart_store.cart == {"items": []}
    assert cart_store.pricing.is_zero()
    assert not cart_store.has_items


def test_coupon_applies_and_removes(cart_store, fake_http):
    fake_http.queue(payload={"cart": cart_payload((118, 1))})
    cart_store.fetch_cart()

    cart_store.apply_coupon(50, code="HALF")
    assert cart_store.coupon.code == "HALF"
    assert cart_store.pricing.discount_amount == Decimal("50")
    assert cart_store.pricing.grand_total == Decimal("59")

    cart_store.remove_coupon()
    assert cart_store.coupon is None
    assert cart_store.pricing.grand_total == Decimal("118")


def test_coupon_survives_cart_changes(cart_store, fake_http):
    fake_http.queue(payload={"cart": cart_payload((118, 1))})
    cart_store.fetch_cart()
    cart_store.apply_coupon(10)

    fake_http.queue(payload={"cart": cart_payload((118, 2))})
    cart_store.update_quantity("p1", 1)

    assert cart_store.pricing.discount_amount == Decimal("20")


def test_invalid_coupon_is_rejected(cart_store, fake_http):
    fake_http.queue(payload={"cart": cart_payload((118, 1))})
    cart_store.fetch_cart()

    with pytest.raises(InvalidDiscount):
        cart_store.apply_coupon(150)

    assert cart_store.coupon is None
    assert cart_store.pricing.grand_total == Decimal("118")


def test_unpriceable_cart_shows_no_breakdown(cart_store, fake_http):
    bad_cart = {"items": [{"product": {"_id": "p1", "price": -10}, "quantity": 1}]}
    fake_http.queue(payload={"cart": bad_cart})

    cart_store.fetch_cart()

    assert cart_store.pricing.is_zero()
    assert cart_store.pricing_error == PRICING_UNAVAILABLE

    fake_http.queue(payload={"cart": cart_payload((118, 1))})
    cart_store.fetch_cart()
    assert cart_store.pricing_error is None
