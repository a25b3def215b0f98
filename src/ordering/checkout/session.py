"""Checkout orchestration: one customer's visit to the checkout page.

Flow:
    1. open()           resolve the lines being bought (buy-now, selection or whole cart)
    2. quote()          price them with the vouchers held
    3. apply_voucher()  validate a code with the voucher service and hold it
    4. place_order()    validate the form, check stock, create the order, initiate payment
    5. finish_payment() on success drop the bought lines from the cart; on failure touch nothing

An order is created at most once per visit: if payment initiation fails after
the order exists, retrying only re-initiates payment. From then on the
vouchers are fixed so the total shown stays the total of the order being paid.
"""

import structlog

from ordering.cart.cart import ensure_in_stock
from ordering.cart.stores import CartStore, cart_store_for
from ordering.checkout.form import ShippingDetails
from ordering.checkout.items import CheckoutMode, CheckoutSelection, resolve_checkout_items
from ordering.checkout.vouchers import VoucherBook
from ordering.pricing.engine import LineItem, PricingResult, compute_pricing
from ordering.pricing.vouchers import AppliedVoucher
from payments.gateway import get_gateway
from payments.gateway.port import PaymentInitiation, PaymentOutcome, PaymentRedirect
from shared.client import BackendClient
from shared.exceptions import BackendError, CheckoutError, SubmissionInProgress
from shared.session import SessionContext

logger = structlog.get_logger(__name__)


class CheckoutSession:
    def __init__(
        self,
        client: BackendClient,
        session: SessionContext,
        cart: CartStore,
        selection: CheckoutSelection,
    ) -> None:
        self.client = client
        self.session = session
        self.cart = cart
        self.selection = selection
        self.vouchers = VoucherBook(client.validate_voucher)
        self.order: dict | None = None
        self._submitting = False

    @classmethod
    async def open(
        cls,
        client: BackendClient,
        session: SessionContext,
        *,
        buy_now: LineItem | None = None,
        selected_ids=None,
        cart: CartStore | None = None,
    ) -> "CheckoutSession":
        cart = cart or cart_store_for(session, client)
        lines = () if buy_now is not None else (await cart.get()).line_items()
        selection = resolve_checkout_items(lines, buy_now=buy_now, selected_ids=selected_ids)
        logger.debug("checkout_opened", mode=selection.mode.value, lines=len(selection.lines))
        return cls(client, session, cart, selection)

    @property
    def is_guest(self) -> bool:
        return not self.session.is_authenticated

    @property
    def submitting(self) -> bool:
        return self._submitting

    def quote(self) -> PricingResult:
        return compute_pricing(self.selection.lines, self.vouchers.applied)

    def _ensure_vouchers_open(self) -> None:
        # The order carries the voucher codes it was created with.
        if self.order is not None:
            raise CheckoutError("Vouchers cannot be changed after the order has been placed")

    async def apply_voucher(self, code: str, email: str | None = None) -> AppliedVoucher | None:
        self._ensure_vouchers_open()
        email = email or self.session.guest_email
        return await self.vouchers.apply(code, self.quote().subtotal, email)

    def remove_voucher(self, code: str) -> None:
        self._ensure_vouchers_open()
        self.vouchers.remove(code)

    def _order_payload(self, details: ShippingDetails, pricing: PricingResult) -> dict:
        return {
            **details.to_payload(guest=self.is_guest),
            **self.selection.order_payload(guest=self.is_guest),
            "voucher_codes": self.vouchers.codes,
            # Vouchers are sent by code; the order service applies them to this fee itself.
            "delivery_fee": str(pricing.raw_shipping_fee),
        }

    async def _create_order(self, details: ShippingDetails) -> dict:
        payload = self._order_payload(details, self.quote())
        create = self.client.create_guest_order if self.is_guest else self.client.create_order
        try:
            data = await create(payload)
        except BackendError as exc:
            logger.warning("order_creation_failed", status=exc.status_code, error=exc.message)
            raise CheckoutError(exc.message) from exc

        order = data["order"]
        logger.info("order_created", order_id=order["id"], guest=self.is_guest, vouchers=self.vouchers.codes)
        return order

    async def place_order(self, details: ShippingDetails) -> PaymentRedirect:
        """Create the order (once) and start payment. Returns where to send the customer."""
        if self._submitting:
            raise SubmissionInProgress()

        details = details.validate(guest=self.is_guest)
        ensure_in_stock(self.selection.lines)

        self._submitting = True
        try:
            if self.order is None:
                self.order = await self._create_order(details)
            if self.is_guest:
                self.session.guest_email = details.email

            try:
                data = await self.client.initiate_payment(
                    self.order["id"],
                    guest_email=details.email if self.is_guest else None,
                )
            except BackendError as exc:
                logger.warning("payment_initiation_failed", order_id=self.order["id"], error=exc.message)
                raise CheckoutError(exc.message) from exc

            initiation = PaymentInitiation.from_response(data)
            logger.info("payment_initiated", order_id=self.order["id"], mode=initiation.mode)
            return get_gateway(initiation.mode).redirect(initiation, self.session)
        finally:
            self._submitting = False

    async def finish_payment(self, outcome: PaymentOutcome) -> str:
        """Settle the visit after the gateway reports back and return the next URL."""
        if not outcome.success:
            logger.info("payment_failed", order_id=outcome.order_id, message=outcome.message)
            return outcome.next_url

        if self.selection.mode is not CheckoutMode.BUY_NOW:
            await self.cart.remove_items(self.selection.item_ids)
        self.vouchers.reset()
        logger.info("payment_succeeded", order_id=outcome.order_id)
        return outcome.next_url

    def close(self) -> None:
        """Leaving checkout: vouchers are forgotten and late responses ignored."""
        self.vouchers.reset()
