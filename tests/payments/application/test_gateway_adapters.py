"""Tests for turning payment initiation answers into redirects and outcomes."""

import pytest
from payments.gateway import get_gateway, reset_gateway, set_gateway
from payments.gateway.mock_adapter import MockGateway
from payments.gateway.port import PaymentInitiation, PaymentOutcome, PaymentRedirect, store_order_id
from payments.gateway.senangpay_adapter import SenangPayGateway, auto_post_form
from shared.exceptions import CheckoutError


@pytest.fixture(autouse=True)
def _clean_overrides():
    yield
    reset_gateway()


@pytest.fixture
def mock_initiation():
    return PaymentInitiation.from_response(
        {
            "payment_url": "http://backend.test/api/senangpay/mock",
            "order_id": "KC-501-1718000000",
            "params": {"order_id": "KC-501-1718000000", "amount": "126.89"},
        }
    )


class TestPort:
    @pytest.mark.parametrize(
        "reference, expected",
        [("KC-501-1718000000", "501"), ("501", "501"), ("KC-501", "KC-501")],
    )
    def test_store_order_id(self, reference, expected):
        assert store_order_id(reference) == expected

    def test_initiation_defaults_to_mock_mode(self, mock_initiation):
        assert mock_initiation.mode == "mock"
        assert mock_initiation.order_id == "KC-501-1718000000"

    def test_failure_goes_back_to_checkout(self):
        assert PaymentOutcome(success=False).next_url == "/checkout?payment=failed&msg=Payment+failed"

    def test_guest_success_goes_to_confirmation(self):
        assert PaymentOutcome(success=True, order_id="501", is_guest=True).next_url == "/order-success?order_id=501"


class TestFactory:
    def test_known_modes(self):
        assert isinstance(get_gateway("mock"), MockGateway)
        assert isinstance(get_gateway("senangpay"), SenangPayGateway)

    def test_unknown_mode(self):
        with pytest.raises(CheckoutError, match="Unsupported payment method: paypal"):
            get_gateway("paypal")

    def test_override(self):
        class Recorder(MockGateway):
            pass

        recorder = Recorder()
        set_gateway("mock", recorder)
        assert get_gateway("mock") is recorder

        reset_gateway()
        assert get_gateway("mock") is not recorder


class TestSenangPay:
    def test_form_posts_every_parameter_escaped(self):
        html = auto_post_form("https://pay.test/p?a=1&b=2", {"detail": 'Order "501" <cat>', "hash": None})

        assert 'action="https://pay.test/p?a=1&amp;b=2"' in html
        assert 'name="detail" value="Order &quot;501&quot; &lt;cat&gt;"' in html
        assert 'name="hash" value=""' in html
        assert "document.forms[0].submit()" in html

    def test_redirect_is_a_post(self, session):
        initiation = PaymentInitiation(mode="senangpay", payment_url="https://pay.test/p", order_id="1", params={"x": 1})

        redirect = SenangPayGateway().redirect(initiation, session)

        assert redirect.method == "POST"
        assert redirect.url == "https://pay.test/p"
        assert 'name="x" value="1"' in redirect.form_html


class TestMockGateway:
    def test_redirect_parks_params_in_session(self, session, mock_initiation):
        redirect = MockGateway().redirect(mock_initiation, session)

        assert redirect == PaymentRedirect(url="/mock-payment")
        assert session.mock_payment == {"order_id": "KC-501-1718000000", "amount": "126.89"}

    @pytest.mark.asyncio
    async def test_complete_success(self, client, session, backend, mock_initiation):
        backend.on(
            "POST",
            "/api/senangpay/mock-process",
            {"success": True, "order_id": "KC-501-1718000000", "transaction_id": "MOCK-9", "msg": "Payment successful"},
        )
        gateway = MockGateway()
        gateway.redirect(mock_initiation, session)

        outcome = await gateway.complete(client, session, "success")

        assert outcome.success
        assert outcome.order_id == "501"
        assert outcome.transaction_id == "MOCK-9"
        assert outcome.is_guest
        assert session.mock_payment is None
        assert backend.calls_to("POST", "/api/senangpay/mock-process")[0]["json"] == {
            "order_id": "KC-501-1718000000",
            "action": "success",
        }

    @pytest.mark.asyncio
    async def test_member_failure(self, member_client, member_session, backend, mock_initiation):
        backend.on("POST", "/api/senangpay/mock-process", {"success": False, "msg": "Payment declined"})
        gateway = MockGateway()
        gateway.redirect(mock_initiation, member_session)

        outcome = await gateway.complete(member_client, member_session, "fail")

        assert not outcome.success
        assert not outcome.is_guest
        assert outcome.next_url == "/checkout?payment=failed&msg=Payment+declined"

    @pytest.mark.asyncio
    async def test_backend_error_is_a_failed_outcome(self, client, session, backend, mock_initiation):
        backend.on("POST", "/api/senangpay/mock-process", {"error": "Order already paid"}, status=400)
        gateway = MockGateway()
        gateway.redirect(mock_initiation, session)

        outcome = await gateway.complete(client, session, "success")

        assert not outcome.success
        assert outcome.message == "Order already paid"
        assert outcome.order_id == "501"

    @pytest.mark.asyncio
    async def test_nothing_to_complete(self, client, session):
        with pytest.raises(CheckoutError, match="No payment in progress"):
            await MockGateway().complete(client, session, "success")

    @pytest.mark.asyncio
    async def test_unknown_action(self, client, session):
        with pytest.raises(ValueError):
            await MockGateway().complete(client, session, "refund")
