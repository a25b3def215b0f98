"""FastAPI routes for pricing: the one place any screen asks for totals."""

from decimal import Decimal

from fastapi import APIRouter, Query

from ordering.api.schemas import (
    MAX_AMOUNT,
    MAX_WEIGHT_KG,
    AppliedVouchersResponse,
    ApplyVoucherRequest,
    QuoteRequest,
    QuoteResponse,
    RemoveVoucherRequest,
    ShippingFeeResponse,
    VoucherSchema,
)
from ordering.pricing.engine import compute_pricing
from ordering.pricing.shipping import FREE_SHIPPING_THRESHOLD, billable_weight, delivery_fee
from ordering.pricing.vouchers import apply_voucher, remove_voucher

pricing_router = APIRouter(prefix="/pricing", tags=["pricing"])


@pricing_router.post("/quote", response_model=QuoteResponse)
async def quote(body: QuoteRequest) -> QuoteResponse:
    result = compute_pricing(
        [line.to_line_item() for line in body.lines],
        [voucher.to_applied() for voucher in body.vouchers],
    )
    return QuoteResponse(**result.model_dump())


@pricing_router.post("/vouchers", response_model=AppliedVouchersResponse)
async def add_voucher(body: ApplyVoucherRequest) -> AppliedVouchersResponse:
    applied = apply_voucher(
        [voucher.to_applied() for voucher in body.applied],
        body.candidate.to_applied(),
        body.subtotal,
    )
    return AppliedVouchersResponse(applied=[VoucherSchema.from_applied(v) for v in applied])


@pricing_router.post("/vouchers/remove", response_model=AppliedVouchersResponse)
async def drop_voucher(body: RemoveVoucherRequest) -> AppliedVouchersResponse:
    applied = remove_voucher([voucher.to_applied() for voucher in body.applied], body.code)
    return AppliedVouchersResponse(applied=[VoucherSchema.from_applied(v) for v in applied])


@pricing_router.get("/shipping", response_model=ShippingFeeResponse)
async def shipping(
    weight: Decimal = Query(Decimal("0"), ge=0, le=MAX_WEIGHT_KG),
    subtotal: Decimal = Query(Decimal("0"), ge=0, le=MAX_AMOUNT),
) -> ShippingFeeResponse:
    return ShippingFeeResponse(
        fee=delivery_fee(weight, subtotal),
        billable_weight_kg=billable_weight(weight),
        free_shipping_threshold=FREE_SHIPPING_THRESHOLD,
    )
