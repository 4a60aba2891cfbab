import os
import sys
from decimal import Decimal

import pytest

# Add src to path for internal imports
src_path = os.path.join(os.path.dirname(os.path.dirname(os.path.abspath(__file__))), 'src')
if src_path not in sys.path:
    sys.path.insert(0, src_path)

from storefront_pricing.auth import SessionStore, StoreCredentialProvider
from storefront_pricing.client import StorefrontApiClient
from storefront_pricing.engine import PricingEngine
from storefront_pricing.services.cart_store import CartStore

NO_JSON = object()


class FakeResponse:
    """Just enough of requests.Response for the API client."""

    def __init__(self, status_code=200, payload=None, reason="OK"):
        self.status_code = status_code
        self._payload = payload
        self.reason = reason

    @property
    def ok(self):
        return self.status_code < 400

    def json(self):
        if self._payload is NO_JSON:
            raise ValueError("No JSON body")
        return self._payload


class FakeSession:
    """Records requests and replays queued responses (or raises queued exceptions)."""

    def __init__(self):
        self.calls = []
        self.responses = []

    def queue(self, status_code=200, payload=None, reason="OK"):
        self.responses.append(FakeResponse(status_code, payload, reason))
        return self

    def queue_error(self, exc):
        self.responses.append(exc)
        return self

    def request(self, method, url, json=None, headers=None, timeout=None):
        self.calls.append({"method": method, "url": url, "json": json, "headers": headers or {}})
        response = self.responses.pop(0)
        if isinstance(response, Exception):
            raise response
        return response


def cart_payload(*lines):
    """cart_payload((price, qty), ...) -> backend cart JSON."""
    return {
        "items": [
            {"product": {"_id": f"p{i}", "name": f"Product {i}", "price": price}, "quantity": qty}
            for i, (price, qty) in enumerate(lines, start=1)
        ]
    }


@pytest.fixture
def engine():
    return PricingEngine(gst_rate=Decimal("0.18"))


@pytest.fixture
def session_store():
    store = SessionStore()
    store.set_session(user={"name": "Asha"}, access_token="tok-123", refresh_token="ref-456")
    return store


@pytest.fixture
def fake_http():
    return FakeSession()


@pytest.fixture
def api_client(session_store, fake_http):
    return StorefrontApiClient(
        "http://backend.test",
        StoreCredentialProvider(session_store),
        session=fake_http,
    )


@pytest.fixture
def cart_store(api_client, engine):
    return CartStore(api_client, engine)
