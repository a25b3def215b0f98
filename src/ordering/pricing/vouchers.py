"""Voucher composition: which validated vouchers may be held together.

Eligibility (minimum spend, expiry, usage limits, per-email restrictions) is
decided by the voucher service. Only two rules are enforced here:

- a code can be applied once (codes compare case-insensitively)
- at most one free-shipping voucher can be held
"""

from collections.abc import Iterable
from decimal import Decimal
from enum import Enum

import structlog
from pydantic import BaseModel, ConfigDict, Field, field_validator

from ordering.pricing.money import ZERO, to_money
from shared.exceptions import VoucherError

logger = structlog.get_logger(__name__)


class DiscountType(Enum):
    FIXED_AMOUNT = "fixed_amount"
    PERCENTAGE = "percentage"
    FREE_SHIPPING = "free_shipping"


# Spellings used by the voucher service.
_DISCOUNT_TYPE_ALIASES = {
    "fixed": DiscountType.FIXED_AMOUNT.value,
    "percent": DiscountType.PERCENTAGE.value,
}


def canonical_code(code: str) -> str:
    return code.strip().upper()


class AppliedVoucher(BaseModel):
    """A voucher accepted by the voucher service and held for this checkout.

    ``discount`` is the service's ``calculated_discount``; it is authoritative
    and never recomputed. For free-shipping vouchers ``discount_amount`` is the
    shipping reduction, where 0 means the delivery fee is waived entirely.
    """

    model_config = ConfigDict(frozen=True)

    code: str = Field(min_length=1, max_length=100)
    discount_type: DiscountType
    discount_amount: Decimal = Field(default=ZERO, ge=0)
    discount: Decimal = Field(default=ZERO, ge=0)

    @field_validator("code")
    @classmethod
    def _canonical_code(cls, value: str) -> str:
        return canonical_code(value)

    @field_validator("discount_type", mode="before")
    @classmethod
    def _accept_service_spelling(cls, value):
        if isinstance(value, str):
            value = value.strip().lower()
            return _DISCOUNT_TYPE_ALIASES.get(value, value)
        return value

    @field_validator("discount_amount", "discount", mode="before")
    @classmethod
    def _money(cls, value):
        return to_money(value)

    @property
    def is_free_shipping(self) -> bool:
        return self.discount_type is DiscountType.FREE_SHIPPING

    def matches(self, code: str) -> bool:
        return self.code == canonical_code(code)

    @classmethod
    def from_validation(cls, payload: dict) -> "AppliedVoucher":
        """Build from ``{voucher: {code, discount_type, discount_amount}, calculated_discount}``."""
        voucher = payload["voucher"]
        return cls(
            code=voucher["code"],
            discount_type=voucher["discount_type"],
            discount_amount=voucher.get("discount_amount"),
            discount=payload.get("calculated_discount"),
        )


def find_voucher(current: Iterable[AppliedVoucher], code: str) -> AppliedVoucher | None:
    return next((v for v in current if v.matches(code)), None)


def free_shipping_voucher(current: Iterable[AppliedVoucher]) -> AppliedVoucher | None:
    """The free-shipping voucher held, if any. Holding two is an error."""
    held = [v for v in current if v.is_free_shipping]
    if len(held) > 1:
        raise VoucherError("Only one free shipping voucher can be applied")
    return held[0] if held else None


def check_can_apply(current: Iterable[AppliedVoucher], code: str, discount_type: DiscountType | None = None) -> None:
    """Raise VoucherError when ``code`` (of ``discount_type``) cannot join ``current``."""
    current = tuple(current)
    if find_voucher(current, code) is not None:
        raise VoucherError(f"Voucher {canonical_code(code)} is already applied")
    if discount_type is DiscountType.FREE_SHIPPING and free_shipping_voucher(current) is not None:
        raise VoucherError("Only one free shipping voucher can be applied")


def apply_voucher(
    current: Iterable[AppliedVoucher],
    candidate: AppliedVoucher,
    subtotal,
) -> tuple[AppliedVoucher, ...]:
    """Return the applied set with ``candidate`` appended.

    ``subtotal`` is the amount the candidate was validated against; the
    service has already checked eligibility, so it is only logged.
    """
    current = tuple(current)
    try:
        check_can_apply(current, candidate.code, candidate.discount_type)
    except VoucherError as exc:
        logger.info("voucher_rejected", code=candidate.code, reason=exc.message)
        raise

    logger.info(
        "voucher_applied",
        code=candidate.code,
        discount_type=candidate.discount_type.value,
        discount=str(candidate.discount),
        subtotal=str(to_money(subtotal)),
    )
    return (*current, candidate)


def remove_voucher(current: Iterable[AppliedVoucher], code: str) -> tuple[AppliedVoucher, ...]:
    """Drop ``code`` from the applied set. Removing an absent code is a no-op."""
    return tuple(v for v in current if not v.matches(code))
