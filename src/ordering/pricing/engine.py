"""Checkout pricing: subtotal, delivery fee, voucher discounts and payable total.

``compute_pricing`` is the only place totals are worked out. The cart summary,
the checkout summary and the mini-cart all call it with the lines they show
and the vouchers held, so the figures can never drift between screens.

Order of operations:

    1. subtotal      = sum(unit price x quantity)
    2. total weight  = sum(weight per unit x quantity)
    3. raw shipping  = 0 at or above the free-shipping threshold, else banded by weight
    4. discounts     = sum of non-shipping voucher discounts, capped at the subtotal
    5. shipping      = raw shipping less the free-shipping voucher, if one is held
    6. grand total   = subtotal - discounts + shipping
"""

from collections.abc import Iterable
from decimal import Decimal

import structlog
from pydantic import BaseModel, ConfigDict, Field, computed_field, field_validator

from ordering.pricing.money import ZERO, to_decimal, to_money
from ordering.pricing.shipping import FREE_SHIPPING_THRESHOLD, delivery_fee
from ordering.pricing.vouchers import AppliedVoucher, free_shipping_voucher

logger = structlog.get_logger(__name__)


class LineItem(BaseModel):
    """An immutable snapshot of one priced line handed to the engine."""

    model_config = ConfigDict(frozen=True)

    id: str
    unit_price: Decimal = Field(ge=0)
    quantity: int = Field(ge=1)
    weight_per_unit: Decimal = Field(default=Decimal("0"), ge=0)
    stock: int | None = None
    name: str | None = None
    product_id: str | None = None
    variant_id: str | None = None

    @field_validator("id", "product_id", "variant_id", mode="before")
    @classmethod
    def _stringify_ids(cls, value):
        return None if value is None else str(value)

    @field_validator("unit_price", mode="before")
    @classmethod
    def _price(cls, value):
        return to_money(value)

    @field_validator("weight_per_unit", mode="before")
    @classmethod
    def _weight(cls, value):
        return to_decimal(value)

    @property
    def line_total(self) -> Decimal:
        return to_money(self.unit_price * self.quantity)

    @property
    def line_weight(self) -> Decimal:
        return self.weight_per_unit * self.quantity


class PricingResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    subtotal: Decimal
    total_weight: Decimal
    raw_shipping_fee: Decimal
    shipping_discount: Decimal
    effective_shipping_fee: Decimal
    discount_total: Decimal
    grand_total: Decimal
    free_shipping_voucher: str | None = None

    @computed_field
    @property
    def amount_to_free_shipping(self) -> Decimal:
        """How much more the customer must spend to ship for free."""
        return max(ZERO, to_money(FREE_SHIPPING_THRESHOLD - self.subtotal))

    @computed_field
    @property
    def savings(self) -> Decimal:
        return self.discount_total + self.shipping_discount


def compute_pricing(lines: Iterable[LineItem], vouchers: Iterable[AppliedVoucher] = ()) -> PricingResult:
    """Price ``lines`` with ``vouchers`` applied.

    The caller picks the lines (whole cart, selected items, or a single
    buy-now item). Pure: the same lines and vouchers, in any order, always
    give the same result.
    """
    lines = tuple(lines)
    vouchers = tuple(vouchers)

    subtotal = to_money(sum((line.line_total for line in lines), ZERO))
    total_weight = sum((line.line_weight for line in lines), Decimal("0"))
    raw_shipping_fee = delivery_fee(total_weight, subtotal)

    discount_total = to_money(sum((v.discount for v in vouchers if not v.is_free_shipping), ZERO))
    if discount_total > subtotal:
        # Discounts never take the total below the delivery fee.
        logger.warning("discount_clamped", discount_total=str(discount_total), subtotal=str(subtotal))
        discount_total = subtotal

    shipping_voucher = free_shipping_voucher(vouchers)
    if shipping_voucher is None:
        effective_shipping_fee = raw_shipping_fee
    elif shipping_voucher.discount_amount == 0:
        # A zero amount on a free-shipping voucher waives delivery outright.
        effective_shipping_fee = ZERO
    else:
        effective_shipping_fee = max(ZERO, raw_shipping_fee - shipping_voucher.discount_amount)

    return PricingResult(
        subtotal=subtotal,
        total_weight=total_weight,
        raw_shipping_fee=raw_shipping_fee,
        shipping_discount=to_money(raw_shipping_fee - effective_shipping_fee),
        effective_shipping_fee=to_money(effective_shipping_fee),
        discount_total=discount_total,
        grand_total=to_money(subtotal - discount_total + effective_shipping_fee),
        free_shipping_voucher=shipping_voucher.code if shipping_voucher else None,
    )
