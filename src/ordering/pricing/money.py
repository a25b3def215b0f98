"""Decimal helpers for Ringgit amounts and kilogram weights.

Bad or out-of-range values raise ``ValueError`` so pydantic validators report
them as field errors.
"""

from decimal import ROUND_HALF_UP, Decimal, InvalidOperation

CENT = Decimal("0.01")
ZERO = Decimal("0.00")


def to_decimal(value) -> Decimal:
    """Coerce ints, strings and floats to Decimal without float artefacts."""
    if isinstance(value, Decimal):
        number = value
    elif isinstance(value, float):
        number = Decimal(repr(value))
    elif value is None or value == "":
        return Decimal("0")
    else:
        try:
            number = Decimal(str(value))
        except InvalidOperation:
            raise ValueError(f"Not a number: {value!r}") from None

    if not number.is_finite():
        raise ValueError(f"Not a finite number: {value!r}")
    return number


def to_money(value) -> Decimal:
    try:
        return to_decimal(value).quantize(CENT, rounding=ROUND_HALF_UP)
    except InvalidOperation:
        raise ValueError(f"Amount out of range: {value!r}") from None
