"""Which lines a checkout is for.

The same selection feeds both the displayed summary and the order payload, so
what is priced is always what is ordered.
"""

from collections.abc import Iterable
from dataclasses import dataclass
from enum import Enum

from ordering.pricing.engine import LineItem
from shared.exceptions import CheckoutError


class CheckoutMode(Enum):
    BUY_NOW = "buy_now"
    SELECTED = "selected"
    FULL_CART = "full_cart"


@dataclass(frozen=True)
class CheckoutSelection:
    mode: CheckoutMode
    lines: tuple[LineItem, ...]

    @property
    def item_ids(self) -> list[str]:
        return [line.id for line in self.lines]

    def order_items(self) -> list[dict]:
        """Lines as ``{product_id, quantity, variant_id}`` for orders built from explicit items."""
        return [
            {
                "product_id": line.product_id or line.id,
                "quantity": line.quantity,
                "variant_id": line.variant_id,
            }
            for line in self.lines
        ]

    def order_payload(self, guest: bool) -> dict:
        # Guests have no server cart, and a buy-now item was never in one.
        if guest or self.mode is CheckoutMode.BUY_NOW:
            return {"items": self.order_items()}
        return {"item_ids": self.item_ids}


def resolve_checkout_items(
    cart_lines: Iterable[LineItem],
    *,
    buy_now: LineItem | None = None,
    selected_ids: Iterable | None = None,
) -> CheckoutSelection:
    """Buy-now beats an explicit selection, which beats the whole cart."""
    if buy_now is not None:
        return CheckoutSelection(CheckoutMode.BUY_NOW, (buy_now,))

    cart_lines = tuple(cart_lines)
    if not cart_lines:
        raise CheckoutError("Your cart is empty")

    wanted = {str(i) for i in selected_ids} if selected_ids else set()
    if wanted:
        lines = tuple(line for line in cart_lines if line.id in wanted)
        if not lines:
            raise CheckoutError("No items selected for checkout")
        return CheckoutSelection(CheckoutMode.SELECTED, lines)

    return CheckoutSelection(CheckoutMode.FULL_CART, cart_lines)
