"""
Storefront API client - thin JSON wrapper over the remote backend.

The backend owns carts, orders and government quotes; this client only moves
JSON and turns failures into typed exceptions.
"""
import logging
from typing import Any, Optional

import requests

from ..auth.credentials import CredentialProvider, Token

logger = logging.getLogger(__name__)

QUOTE_DECISIONS = ('ACCEPTED', 'REJECTED')


class ApiError(Exception):
    """The backend rejected a request, or could not be reached."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class AuthenticationRequired(ApiError):
    """No access token is available for an authenticated call."""


class SessionExpired(ApiError):
    """The backend answered 401; the local session has been cleared."""


class StorefrontApiClient:
    """JSON client for the storefront backend."""

    def __init__(
        self,
        base_url: str,
        credentials: CredentialProvider,
        session: Optional[requests.Session] = None,
        timeout: float = 10,
    ):
        self.base_url = base_url.rstrip('/')
        self.credentials = credentials
        self.session = session or requests.Session()
        self.timeout = timeout

    def request(
        self,
        path: str,
        method: str = "GET",
        json: Any = None,
        auth_required: bool = True,
    ) -> Any:
        """
        Send a request and return the decoded JSON payload (None for an empty body).

        Raises:
            AuthenticationRequired: auth_required and no token available
            SessionExpired: HTTP 401
            ApiError: any other failure
        """
        url = f"{self.base_url}{path}"
        headers = {"Content-Type": "application/json"}

        token = self.credentials.current_token()
        if isinstance(token, Token):
            headers.update(token.authorization_header())
        elif auth_required:
            logger.info("No access token for %s %s: %s", method, path, token.reason)
            raise AuthenticationRequired("Authentication required")

        try:
            response = self.session.request(method, url, json=json, headers=headers, timeout=self.timeout)
        except requests.RequestException as e:
            logger.warning("%s %s failed: %s", method, path, e)
            raise ApiError(f"Could not reach the store: {e}") from e

        try:
            payload = response.json()
        except ValueError:
            payload = None

        if response.status_code == 401:
            logger.warning("401 from %s %s - clearing session", method, path)
            self.credentials.clear_session()
            raise SessionExpired("Session expired. Please log in again.", status_code=401)

        if not response.ok:
            message = None
            if isinstance(payload, dict):
                message = payload.get('message') or payload.get('error')
            message = message or response.reason or "Request failed"
            logger.warning("%s %s -> %s: %s", method, path, response.status_code, message)
            raise ApiError(message, status_code=response.status_code)

        return payload

    # ── Cart ──────────────────────────────────────────────────────

    def get_cart(self) -> dict:
        data = self.request("/cart") or {}
        return data['cart'] if 'cart' in data else data

    def add_to_cart(self, product_id: str, quantity: int) -> dict:
        """Add (or, with a negative quantity, subtract) units. Returns the server cart."""
        data = self.request("/cart/add", method="POST", json={"productId": product_id, "quantity": quantity})
        return (data or {}).get('cart')

    def remove_from_cart(self, product_id: str) -> dict:
        data = self.request("/cart/remove", method="POST", json={"productId": product_id})
        return (data or {}).get('cart')

    def clear_cart(self) -> None:
        self.request("/cart/clear", method="POST")

    # ── Orders ────────────────────────────────────────────────────

    def fetch_orders(self) -> list[dict]:
        data = self.request("/orders") or {}
        if isinstance(data, list):
            return data
        return data.get('orders') or []

    def fetch_order(self, order_id: str) -> dict:
        data = self.request(f"/orders/{order_id}") or {}
        return data.get('order') or data

    def place_order(self, payment_method: str, shipping_address: str) -> dict:
        return self.request(
            "/orders/place",
            method="POST",
            json={"paymentMethod": payment_method, "shippingAddress": shipping_address},
        ) or {}

    def cancel_order(self, order_id: str) -> dict:
        return self.request(f"/orders/{order_id}/cancel", method="POST") or {}

    # ── Government quotes ─────────────────────────────────────────

    def fetch_quote_by_enquiry(self, enquiry_id: str) -> dict:
        return self.request(f"/govt/quotes/by-enquiry/{enquiry_id}") or {}

    def decide_quote(self, enquiry_id: str, decision: str) -> dict:
        decision = str(decision).upper()
        if decision not in QUOTE_DECISIONS:
            raise ValueError(f"Quote decision must be one of {QUOTE_DECISIONS}, got {decision!r}")
        return self.request(
            f"/govt/quotes/by-enquiry/{enquiry_id}/decision",
            method="POST",
            json={"decision": decision},
        ) or {}
