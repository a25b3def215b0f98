"""Async client for the storefront REST backend.

Every method returns the decoded JSON body. Errors follow two shapes:

- Domain errors: ``{"error": "msg"}`` (or ``{"error": {"field": "msg"}}``)
- Framework validation errors: ``{"detail": [{"loc": [...], "msg": "..."}]}``

Both become :class:`BackendError` carrying the status code and a readable
message; transport failures become :class:`BackendUnavailable`.
"""

from typing import Any

import httpx
import structlog

from shared.config import Settings, get_settings
from shared.exceptions import BackendError, BackendUnavailable
from shared.session import SessionContext

logger = structlog.get_logger(__name__)


def extract_error_message(response: httpx.Response) -> str:
    """Pull a human-readable message out of an error response."""
    try:
        body = response.json()
    except ValueError:
        return response.text[:300] or "Something went wrong"

    if not isinstance(body, dict):
        return str(body)[:300]

    if isinstance(body.get("detail"), list):
        parts = []
        for err in body["detail"]:
            loc = ".".join(str(p) for p in err.get("loc", []))
            msg = err.get("msg", str(err))
            parts.append(f"{loc}: {msg}" if loc else msg)
        return " | ".join(parts)

    error = body.get("error") or body.get("detail") or body.get("message")
    if isinstance(error, dict):
        return " | ".join(f"{k}: {v}" for k, v in error.items())
    if error:
        return str(error)
    return "Something went wrong"


class BackendClient:
    """Typed access to the backend contract, authenticated from the session context."""

    def __init__(
        self,
        session: SessionContext,
        settings: Settings | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.session = session
        self.settings = settings or get_settings()
        self._http = httpx.AsyncClient(
            base_url=f"{self.settings.backend_base_url}/api",
            timeout=self.settings.request_timeout,
            headers={"Accept": "application/json"},
            transport=transport,
        )

    async def __aenter__(self) -> "BackendClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._http.aclose()

    async def _request(
        self,
        method: str,
        path: str,
        *,
        json: dict[str, Any] | None = None,
        params: dict[str, Any] | None = None,
        authenticated: bool = True,
    ) -> dict[str, Any]:
        headers = self.session.auth_headers() if authenticated else {}
        if params:
            params = {k: v for k, v in params.items() if v not in (None, "")}

        try:
            response = await self._http.request(method, path, json=json, params=params, headers=headers)
        except httpx.TransportError as exc:
            logger.warning("backend_unreachable", method=method, path=path, error=str(exc))
            raise BackendUnavailable("Unable to reach the store. Please try again.") from exc

        if response.is_error:
            message = extract_error_message(response)
            logger.info("backend_error", method=method, path=path, status=response.status_code, error=message)
            raise BackendError(response.status_code, message)

        if not response.content:
            return {}
        return response.json()

    # ------------------------------------------------------------------
    # Auth
    # ------------------------------------------------------------------
    async def register(self, name: str, email: str, password: str, phone: str | None = None) -> dict:
        payload = {"name": name, "email": email, "password": password, "phone": phone}
        return await self._request("POST", "/auth/register", json=payload, authenticated=False)

    async def login(self, email: str, password: str) -> dict:
        data = await self._request(
            "POST", "/auth/login", json={"email": email, "password": password}, authenticated=False
        )
        if data.get("token"):
            self.session.sign_in(data["token"])
        return data

    async def me(self) -> dict:
        return await self._request("GET", "/auth/me")

    async def update_profile(self, **fields: Any) -> dict:
        return await self._request("PUT", "/auth/profile", json=fields)

    # ------------------------------------------------------------------
    # Catalogue
    # ------------------------------------------------------------------
    async def list_products(self, params: dict[str, Any] | None = None) -> dict:
        # Authenticated requests receive member pricing.
        return await self._request("GET", "/products", params=params or {})

    async def get_product(self, product_id: str | int) -> dict:
        return await self._request("GET", f"/products/{product_id}")

    async def get_categories(self) -> dict:
        return await self._request("GET", "/products/categories", authenticated=False)

    # ------------------------------------------------------------------
    # Cart
    # ------------------------------------------------------------------
    async def get_cart(self) -> dict:
        return await self._request("GET", "/cart")

    async def add_to_cart(self, product_id: str | int, quantity: int = 1, variant_id: str | int | None = None) -> dict:
        payload: dict[str, Any] = {"product_id": product_id, "quantity": quantity}
        if variant_id is not None:
            payload["variant_id"] = variant_id
        return await self._request("POST", "/cart/add", json=payload)

    async def update_cart_item(self, item_id: str | int, quantity: int) -> dict:
        return await self._request("PUT", "/cart/update", json={"item_id": item_id, "quantity": quantity})

    async def remove_cart_item(self, item_id: str | int) -> dict:
        return await self._request("DELETE", f"/cart/remove/{item_id}")

    async def clear_cart(self) -> dict:
        return await self._request("DELETE", "/cart/clear")

    # ------------------------------------------------------------------
    # Vouchers
    # ------------------------------------------------------------------
    async def validate_voucher(self, code: str, subtotal: Any, email: str | None = None) -> dict:
        payload = {"code": code, "subtotal": str(subtotal), "email": email}
        return await self._request("POST", "/vouchers/validate", json=payload)

    # ------------------------------------------------------------------
    # Orders
    # ------------------------------------------------------------------
    async def list_orders(self) -> dict:
        return await self._request("GET", "/orders")

    async def get_order(self, order_id: str | int) -> dict:
        return await self._request("GET", f"/orders/{order_id}")

    async def create_order(self, payload: dict[str, Any]) -> dict:
        return await self._request("POST", "/orders", json=payload)

    async def create_guest_order(self, payload: dict[str, Any]) -> dict:
        return await self._request("POST", "/orders/guest", json=payload, authenticated=False)

    async def get_guest_order(self, order_id: str | int, email: str) -> dict:
        return await self._request("GET", f"/orders/guest/{order_id}", params={"email": email}, authenticated=False)

    # ------------------------------------------------------------------
    # Payments
    # ------------------------------------------------------------------
    async def initiate_payment(self, order_id: str | int, guest_email: str | None = None) -> dict:
        payload: dict[str, Any] = {"order_id": order_id}
        if guest_email:
            payload["guest_email"] = guest_email
        return await self._request("POST", "/senangpay/initiate", json=payload)

    async def process_mock_payment(self, gateway_order_id: str, action: str) -> dict:
        return await self._request(
            "POST", "/senangpay/mock-process", json={"order_id": gateway_order_id, "action": action}
        )

    async def payment_status(self, order_id: str | int) -> dict:
        return await self._request("GET", f"/senangpay/status/{order_id}")

    # ------------------------------------------------------------------
    # Addresses
    # ------------------------------------------------------------------
    async def list_addresses(self) -> dict:
        return await self._request("GET", "/addresses")

    async def add_address(self, address: dict[str, Any]) -> dict:
        return await self._request("POST", "/addresses", json=address)

    async def update_address(self, address_id: str | int, address: dict[str, Any]) -> dict:
        return await self._request("PUT", f"/addresses/{address_id}", json=address)

    async def delete_address(self, address_id: str | int) -> dict:
        return await self._request("DELETE", f"/addresses/{address_id}")

    async def set_default_address(self, address_id: str | int) -> dict:
        return await self._request("PUT", f"/addresses/{address_id}/default")

    # ------------------------------------------------------------------
    # Wishlist
    # ------------------------------------------------------------------
    async def get_wishlist(self) -> dict:
        return await self._request("GET", "/wishlist")

    async def add_to_wishlist(self, product_id: str | int) -> dict:
        return await self._request("POST", "/wishlist/add", json={"product_id": product_id})

    async def remove_from_wishlist(self, product_id: str | int) -> dict:
        return await self._request("DELETE", f"/wishlist/remove/{product_id}")

    async def check_wishlist(self, product_id: str | int) -> dict:
        return await self._request("GET", f"/wishlist/check/{product_id}")
