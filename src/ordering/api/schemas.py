"""Pydantic request/response schemas for the pricing API.

These are external contracts, kept apart from the engine's own models.
Money and weights travel as decimal strings.
"""

from decimal import Decimal

from pydantic import BaseModel, Field

from ordering.pricing.engine import LineItem
from ordering.pricing.vouchers import AppliedVoucher, DiscountType

# Request bounds; totals stay well inside Decimal precision.
MAX_AMOUNT = Decimal("1000000000")
MAX_WEIGHT_KG = Decimal("100000")
MAX_QUANTITY = 10_000


# ---------------------------------------------------------------------------
# Shared sub-models
# ---------------------------------------------------------------------------
class LineItemSchema(BaseModel):
    id: str
    unit_price: Decimal = Field(ge=0, le=MAX_AMOUNT)
    quantity: int = Field(ge=1, le=MAX_QUANTITY)
    weight_per_unit: Decimal = Field(default=Decimal("0"), ge=0, le=MAX_WEIGHT_KG)
    stock: int | None = None
    name: str | None = None

    def to_line_item(self) -> LineItem:
        return LineItem(**self.model_dump())


class VoucherSchema(BaseModel):
    code: str = Field(min_length=1, max_length=100)
    discount_type: str
    discount_amount: Decimal = Field(default=Decimal("0"), ge=0, le=MAX_AMOUNT)
    discount: Decimal = Field(default=Decimal("0"), ge=0, le=MAX_AMOUNT)

    def to_applied(self) -> AppliedVoucher:
        return AppliedVoucher(**self.model_dump())

    @classmethod
    def from_applied(cls, voucher: AppliedVoucher) -> "VoucherSchema":
        return cls(
            code=voucher.code,
            discount_type=voucher.discount_type.value,
            discount_amount=voucher.discount_amount,
            discount=voucher.discount,
        )


# ---------------------------------------------------------------------------
# Requests
# ---------------------------------------------------------------------------
class QuoteRequest(BaseModel):
    lines: list[LineItemSchema]
    vouchers: list[VoucherSchema] = Field(default_factory=list)

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "lines": [
                        {"id": "101", "unit_price": "80.00", "quantity": 1, "weight_per_unit": "1"},
                        {"id": "102", "unit_price": "20.00", "quantity": 2, "weight_per_unit": "0.5"},
                    ],
                    "vouchers": [
                        {"code": "PAWS10", "discount_type": DiscountType.FIXED_AMOUNT.value, "discount": "10.00"}
                    ],
                }
            ]
        }
    }


class ApplyVoucherRequest(BaseModel):
    applied: list[VoucherSchema] = Field(default_factory=list)
    candidate: VoucherSchema
    subtotal: Decimal = Field(ge=0, le=MAX_AMOUNT)


class RemoveVoucherRequest(BaseModel):
    applied: list[VoucherSchema] = Field(default_factory=list)
    code: str


# ---------------------------------------------------------------------------
# Responses
# ---------------------------------------------------------------------------
class QuoteResponse(BaseModel):
    subtotal: Decimal
    total_weight: Decimal
    raw_shipping_fee: Decimal
    shipping_discount: Decimal
    effective_shipping_fee: Decimal
    discount_total: Decimal
    grand_total: Decimal
    free_shipping_voucher: str | None = None
    amount_to_free_shipping: Decimal
    savings: Decimal


class AppliedVouchersResponse(BaseModel):
    applied: list[VoucherSchema]


class ShippingFeeResponse(BaseModel):
    fee: Decimal
    billable_weight_kg: int
    free_shipping_threshold: Decimal
