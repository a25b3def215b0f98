"""Payment gateway port.

The backend decides how a payment is taken and answers the initiation call
with a mode, a payment URL and a bag of parameters. An adapter per mode turns
that answer into where the browser goes next.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any
from urllib.parse import urlencode

from shared.session import SessionContext


def store_order_id(gateway_reference: str) -> str:
    """Store order id from a gateway reference shaped ``KC-<orderId>-<timestamp>``."""
    parts = str(gateway_reference).split("-")
    return parts[1] if len(parts) >= 3 else str(gateway_reference)


@dataclass(frozen=True)
class PaymentInitiation:
    mode: str
    payment_url: str
    order_id: str
    params: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_response(cls, data: dict[str, Any]) -> "PaymentInitiation":
        return cls(
            mode=data.get("mode", "mock"),
            payment_url=data["payment_url"],
            order_id=str(data.get("order_id", "")),
            params=dict(data.get("params") or {}),
        )


@dataclass(frozen=True)
class PaymentRedirect:
    """Where to send the customer: a plain navigation, or a form that posts itself."""

    url: str
    method: str = "GET"
    form_html: str | None = None


@dataclass(frozen=True)
class PaymentOutcome:
    success: bool
    order_id: str | None = None
    transaction_id: str | None = None
    message: str = ""
    is_guest: bool = False

    @property
    def next_url(self) -> str:
        if not self.success:
            return "/checkout?" + urlencode({"payment": "failed", "msg": self.message or "Payment failed"})
        if self.is_guest:
            return "/order-success?" + urlencode({"order_id": self.order_id or ""})
        return "/orders?payment=success"


class PaymentGateway(ABC):
    mode: str

    @abstractmethod
    def redirect(self, initiation: PaymentInitiation, session: SessionContext) -> PaymentRedirect:
        """Turn an initiation answer into the customer's next stop."""
        ...
