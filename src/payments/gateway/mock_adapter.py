"""In-app payment simulator, used while the live gateway is not switched on.

Initiation parameters are parked in the session and the customer is sent to
the simulator page, which then reports success or failure back to the
backend.
"""

import structlog

from payments.gateway.port import PaymentGateway, PaymentInitiation, PaymentOutcome, PaymentRedirect, store_order_id
from shared.client import BackendClient
from shared.exceptions import BackendError, CheckoutError
from shared.session import SessionContext

logger = structlog.get_logger(__name__)

SIMULATOR_PATH = "/mock-payment"
ACTIONS = ("success", "fail")


class MockGateway(PaymentGateway):
    mode = "mock"

    def redirect(self, initiation: PaymentInitiation, session: SessionContext) -> PaymentRedirect:
        session.remember_mock_payment(initiation.params)
        return PaymentRedirect(url=SIMULATOR_PATH)

    async def complete(self, client: BackendClient, session: SessionContext, action: str) -> PaymentOutcome:
        """Report the simulated result. The parked parameters are consumed either way."""
        if action not in ACTIONS:
            raise ValueError(f"Unknown mock payment action: {action!r}")

        params = session.take_mock_payment()
        if not params:
            raise CheckoutError("No payment in progress")

        reference = params["order_id"]
        try:
            data = await client.process_mock_payment(reference, action)
        except BackendError as exc:
            logger.warning("mock_payment_error", reference=reference, error=exc.message)
            return PaymentOutcome(success=False, order_id=store_order_id(reference), message=exc.message)

        outcome = PaymentOutcome(
            success=bool(data.get("success")),
            order_id=store_order_id(data.get("order_id", reference)),
            transaction_id=data.get("transaction_id"),
            message=data.get("msg", ""),
            is_guest=bool(data.get("is_guest")) or not session.is_authenticated,
        )
        logger.info("mock_payment_completed", reference=reference, success=outcome.success)
        return outcome
