"""Per-visitor session context.

Everything a browser would keep in local or session storage lives here and is
passed explicitly to the code that needs it. Nothing in the storefront reads
auth or guest state from module globals.
"""

from collections.abc import MutableMapping
from dataclasses import dataclass, field
from typing import Any


@dataclass
class SessionContext:
    token: str | None = None
    guest_email: str | None = None
    mock_payment: dict[str, Any] | None = None
    storage: MutableMapping[str, Any] = field(default_factory=dict)

    @property
    def is_authenticated(self) -> bool:
        return bool(self.token)

    def auth_headers(self) -> dict[str, str]:
        if not self.token:
            return {}
        return {"Authorization": f"Bearer {self.token}"}

    def sign_in(self, token: str) -> None:
        self.token = token

    def sign_out(self) -> None:
        self.token = None

    def remember_mock_payment(self, params: dict[str, Any]) -> None:
        self.mock_payment = dict(params)

    def take_mock_payment(self) -> dict[str, Any] | None:
        """Return and forget the stored mock payment parameters."""
        params, self.mock_payment = self.mock_payment, None
        return params
