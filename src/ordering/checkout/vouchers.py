"""The vouchers held during one checkout visit.

Applying a voucher is a round trip to the voucher service. Only one
validation may be in flight at a time, and a response is dropped if the
voucher was removed, or the checkout left, before it arrived. Nothing here is
persisted: leaving checkout clears the book.
"""

from collections.abc import Awaitable, Callable
from decimal import Decimal

import structlog

from ordering.pricing.vouchers import AppliedVoucher, apply_voucher, canonical_code, check_can_apply, remove_voucher
from shared.exceptions import BackendError, VoucherError

logger = structlog.get_logger(__name__)

VoucherValidator = Callable[[str, Decimal, str | None], Awaitable[dict]]


class VoucherBook:
    def __init__(self, validate: VoucherValidator) -> None:
        self._validate = validate
        self._applied: tuple[AppliedVoucher, ...] = ()
        self._pending: str | None = None
        self._withdrawn: set[str] = set()
        self._generation = 0

    @property
    def applied(self) -> tuple[AppliedVoucher, ...]:
        return self._applied

    @property
    def pending(self) -> str | None:
        """Code currently being validated, if any."""
        return self._pending

    @property
    def codes(self) -> list[str]:
        return [v.code for v in self._applied]

    async def apply(self, code: str, subtotal: Decimal, email: str | None = None) -> AppliedVoucher | None:
        """Validate ``code`` and hold it.

        Returns the applied voucher, or None when the response arrived after the
        voucher was withdrawn. Raises VoucherError for local rule violations and
        with the service's reason, verbatim, when it rejects the code.
        """
        code = canonical_code(code or "")
        if not code:
            raise VoucherError("Please enter a voucher code")
        if self._pending is not None:
            raise VoucherError("A voucher is already being validated")
        check_can_apply(self._applied, code)

        generation = self._generation
        self._pending = code
        try:
            try:
                payload = await self._validate(code, subtotal, email)
            except BackendError as exc:
                logger.info("voucher_declined", code=code, reason=exc.message)
                raise VoucherError(exc.message) from exc

            if generation != self._generation or code in self._withdrawn:
                logger.info("voucher_response_dropped", code=code)
                return None

            candidate = AppliedVoucher.from_validation(payload)
            self._applied = apply_voucher(self._applied, candidate, subtotal)
            return candidate
        finally:
            if generation == self._generation:
                self._pending = None
                self._withdrawn.discard(code)

    def remove(self, code: str) -> None:
        code = canonical_code(code)
        if self._pending == code:
            self._withdrawn.add(code)
        self._applied = remove_voucher(self._applied, code)

    def reset(self) -> None:
        """Forget every voucher and drop any response still in flight."""
        self._generation += 1
        self._applied = ()
        self._pending = None
        self._withdrawn.clear()
