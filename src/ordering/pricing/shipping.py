"""Courier delivery fees (SPX Express, West Malaysia, SST inclusive).

Rates band on whole kilograms, rounding the parcel weight up:

    up to 2 kg   RM 6.89
    3 kg         RM 9.00
    each kg more RM 1.00

Orders at or above the free-shipping threshold ship for nothing, whatever
they weigh.
"""

from decimal import ROUND_CEILING, Decimal

from ordering.pricing.money import ZERO, to_decimal, to_money

FREE_SHIPPING_THRESHOLD = Decimal("150.00")
BASE_RATE = Decimal("6.89")
HEAVY_BASE_RATE = Decimal("9.00")
PER_EXTRA_KG = Decimal("1.00")
HEAVY_FROM_KG = 3


def billable_weight(total_weight_kg) -> int:
    """Whole kilograms charged for a parcel: the weight rounded up."""
    weight = to_decimal(total_weight_kg)
    if weight <= 0:
        return 0
    return int(weight.to_integral_value(rounding=ROUND_CEILING))


def shipping_fee(total_weight_kg) -> Decimal:
    kg = billable_weight(total_weight_kg)
    # Unknown or zero weight ships at the minimum rate.
    if kg < HEAVY_FROM_KG:
        return BASE_RATE
    return to_money(HEAVY_BASE_RATE + (kg - HEAVY_FROM_KG) * PER_EXTRA_KG)


def qualifies_for_free_shipping(subtotal) -> bool:
    return to_decimal(subtotal) >= FREE_SHIPPING_THRESHOLD


def delivery_fee(total_weight_kg, subtotal) -> Decimal:
    """Shipping charged before any voucher: zero above the threshold, else banded by weight."""
    if qualifies_for_free_shipping(subtotal):
        return ZERO
    return shipping_fee(total_weight_kg)
