"""
HTTP pricing service, exercised through FastAPI's TestClient.
"""
import pytest
from fastapi.testclient import TestClient

from storefront_pricing.api.main import app
from storefront_pricing.engine import InvalidLineItem


@pytest.fixture(scope="module")
def client():
    return TestClient(app)


def cart_request(*lines, discount=None):
    body = {
        "items": [
            {"product": {"_id": f"p{i}", "name": f"Product {i}", "price": price}, "quantity": qty}
            for i, (price, qty) in enumerate(lines, start=1)
        ]
    }
    if discount is not None:
        body["coupon"] = {"discountPercent": discount, "code": "SAVE"}
    return body


def test_root(client):
    response = client.get("/")

    assert response.status_code == 200
    assert response.json()["status"] == "online"


def test_system_status(client):
    data = client.get("/system/status").json()

    assert data["engine_active"] is True
    assert data["gst_rate"] == pytest.approx(0.18)
    assert data["cgst_percent"] == "9"
    assert data["sgst_percent"] == "9"


def test_price_cart(client):
    response = client.post("/api/pricing/cart", json=cart_request((500, 2), (300, 1)))

    assert response.status_code == 200
    data = response.json()
    assert data["pricing"]["grandTotal"] == pytest.approx(1300)
    assert data["pricing"]["cgst"] == pytest.approx(99.1525, abs=1e-4)
    assert data["display"][0] == ["Price (Incl. GST)", "₹1300.00"]
    assert data["trace"][0].startswith("• Inclusive Total")


def test_price_cart_with_coupon(client):
    data = client.post("/api/pricing/cart", json=cart_request((118, 1), discount=50)).json()

    assert data["pricing"]["discountAmount"] == pytest.approx(50)
    assert data["pricing"]["grandTotal"] == pytest.approx(59)
    assert ["Coupon Discount", "-₹50.00"] in data["display"]


def test_price_empty_cart(client):
    data = client.post("/api/pricing/cart", json={"items": []}).json()

    assert all(value == 0 for value in data["pricing"].values())


def test_invalid_discount_is_422(client):
    response = client.post("/api/pricing/cart", json=cart_request((118, 1), discount=150))

    assert response.status_code == 422
    assert response.json()["error"] == "InvalidDiscount"


def test_invalid_line_item_is_422(client):
    response = client.post("/api/pricing/cart", json=cart_request((-5, 1)))

    assert response.status_code == 422
    assert response.json()["error"] == "InvalidLineItem"


def test_price_base_amount(client):
    data = client.post("/api/pricing/base-amount", json={"price": 1000, "discountPercent": 10}).json()

    assert data["pricing"]["taxableAmount"] == pytest.approx(900)
    assert data["pricing"]["totalTax"] == pytest.approx(162)
    assert data["pricing"]["grandTotal"] == pytest.approx(1062)
    assert data["trace"][0].startswith("• Base Amount")


@pytest.mark.parametrize("quantity", [2.0, True, "2"])
def test_non_integer_quantity_is_422(client, engine, quantity):
    body = {"items": [{"product": {"price": 118}, "quantity": quantity}]}

    response = client.post("/api/pricing/cart", json=body)

    assert response.status_code == 422
    # the cart screen refuses the same cart
    with pytest.raises(InvalidLineItem):
        engine.compute_for_cart(body)
