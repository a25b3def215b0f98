"""Checkout pricing engine: shared by every screen that shows a total."""

from ordering.pricing.engine import LineItem, PricingResult, compute_pricing
from ordering.pricing.shipping import FREE_SHIPPING_THRESHOLD, delivery_fee, shipping_fee
from ordering.pricing.vouchers import AppliedVoucher, DiscountType, apply_voucher, remove_voucher

__all__ = [
    "FREE_SHIPPING_THRESHOLD",
    "AppliedVoucher",
    "DiscountType",
    "LineItem",
    "PricingResult",
    "apply_voucher",
    "compute_pricing",
    "delivery_fee",
    "remove_voucher",
    "shipping_fee",
]
