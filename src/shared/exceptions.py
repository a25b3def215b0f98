"""Storefront error taxonomy.

Every error raised by the storefront layer is terminal to the current attempt
(applying a voucher, placing an order) and never to the session: callers show
the message and leave the page usable.
"""


class StorefrontError(Exception):
    """Base class for all storefront errors."""

    def __init__(self, message: str = "") -> None:
        super().__init__(message)
        self.message = message


class ValidationError(StorefrontError):
    """Local input validation failed. Raised before any network call.

    ``messages`` maps field names to a list of human-readable problems, e.g.
    ``{"shipping_postcode": ["Postcode must be 5 digits"]}``.
    """

    def __init__(self, messages: dict[str, list[str]]) -> None:
        self.messages = messages
        summary = "; ".join(f"{field}: {', '.join(errors)}" for field, errors in messages.items())
        super().__init__(summary)


class VoucherError(StorefrontError):
    """A voucher could not be applied. Recoverable: the user may retry or proceed without it."""


class StockIssue:
    """A single line whose requested quantity cannot be fulfilled."""

    def __init__(self, line_id: str, name: str | None, requested: int, available: int) -> None:
        self.line_id = line_id
        self.name = name
        self.requested = requested
        self.available = available

    def __repr__(self) -> str:
        return f"StockIssue(line_id={self.line_id!r}, requested={self.requested}, available={self.available})"

    def __str__(self) -> str:
        label = self.name or self.line_id
        if self.available <= 0:
            return f"{label} is out of stock"
        return f"Not enough stock for {label}. Available: {self.available}"


class StockError(StorefrontError):
    """One or more selected lines exceed available stock. Blocks checkout."""

    def __init__(self, issues: list[StockIssue]) -> None:
        self.issues = issues
        super().__init__("; ".join(str(issue) for issue in issues))


class CheckoutError(StorefrontError):
    """Checkout cannot proceed (empty selection, order creation failed, ...)."""


class SubmissionInProgress(CheckoutError):
    """An order submission is already outstanding for this checkout."""

    def __init__(self) -> None:
        super().__init__("Your order is already being submitted")


class BackendError(StorefrontError):
    """The backend answered with a non-success status."""

    def __init__(self, status_code: int, message: str) -> None:
        super().__init__(message)
        self.status_code = status_code


class BackendUnavailable(StorefrontError):
    """The backend could not be reached."""


class AuthenticationRequired(StorefrontError):
    """The action needs a signed-in customer."""
