"""Payment gateway factory.

The initiation answer names the mode; get_gateway() maps it to an adapter:
- MockGateway for the in-app simulator
- SenangPayGateway for the live hosted payment page
"""

from payments.gateway.mock_adapter import MockGateway
from payments.gateway.port import PaymentGateway
from payments.gateway.senangpay_adapter import SenangPayGateway
from shared.exceptions import CheckoutError

_ADAPTERS: dict[str, type[PaymentGateway]] = {
    MockGateway.mode: MockGateway,
    SenangPayGateway.mode: SenangPayGateway,
}
_overrides: dict[str, PaymentGateway] = {}


def get_gateway(mode: str) -> PaymentGateway:
    """Return the adapter for ``mode``."""
    if mode in _overrides:
        return _overrides[mode]
    try:
        return _ADAPTERS[mode]()
    except KeyError:
        raise CheckoutError(f"Unsupported payment method: {mode}") from None


def set_gateway(mode: str, gateway: PaymentGateway) -> None:
    """Override the adapter used for ``mode`` (useful for tests)."""
    _overrides[mode] = gateway


def reset_gateway() -> None:
    _overrides.clear()
