"""Tests for the backend REST client."""

import httpx
import pytest
from shared.client import BackendClient, extract_error_message
from shared.exceptions import BackendError, BackendUnavailable


class TestExtractErrorMessage:
    def test_error_string(self):
        assert extract_error_message(httpx.Response(400, json={"error": "Invalid voucher code"})) == "Invalid voucher code"

    def test_error_dict(self):
        response = httpx.Response(400, json={"error": {"email": "already registered"}})
        assert extract_error_message(response) == "email: already registered"

    def test_framework_detail_list(self):
        response = httpx.Response(
            422,
            json={"detail": [{"loc": ["body", "quantity"], "msg": "must be positive"}, {"msg": "bad"}]},
        )
        assert extract_error_message(response) == "body.quantity: must be positive | bad"

    def test_plain_text(self):
        assert extract_error_message(httpx.Response(502, text="Bad gateway")) == "Bad gateway"

    def test_empty_body(self):
        assert extract_error_message(httpx.Response(500, json={})) == "Something went wrong"


class TestRequests:
    @pytest.mark.asyncio
    async def test_member_requests_carry_bearer_token(self, member_client, backend):
        backend.on("GET", "/api/cart", {"items": [], "total": 0, "item_count": 0})

        await member_client.get_cart()

        assert backend.calls[0]["headers"]["authorization"] == "Bearer member-token"

    @pytest.mark.asyncio
    async def test_guest_order_lookup_is_unauthenticated(self, member_client, backend):
        backend.on("GET", "/api/orders/guest/77", {"order": {"id": 77}})

        data = await member_client.get_guest_order(77, "cat@example.com")

        assert data == {"order": {"id": 77}}
        assert "authorization" not in backend.calls[0]["headers"]
        assert backend.calls[0]["params"] == {"email": "cat@example.com"}

    @pytest.mark.asyncio
    async def test_blank_params_are_dropped(self, client, backend):
        backend.on("GET", "/api/products", {"products": []})

        await client.list_products({"category": "food", "petType": None, "search": ""})

        assert backend.calls[0]["params"] == {"category": "food"}

    @pytest.mark.asyncio
    async def test_login_signs_session_in(self, client, session, backend):
        backend.on("POST", "/api/auth/login", {"token": "fresh-token", "user": {"id": 1}})

        await client.login("cat@example.com", "whiskers")

        assert session.is_authenticated
        assert session.auth_headers() == {"Authorization": "Bearer fresh-token"}

    @pytest.mark.asyncio
    async def test_voucher_subtotal_is_sent_as_decimal_string(self, client, backend):
        backend.on("POST", "/api/vouchers/validate", {"voucher": {}})

        await client.validate_voucher("PAWS10", "120.00", "cat@example.com")

        assert backend.calls[0]["json"] == {"code": "PAWS10", "subtotal": "120.00", "email": "cat@example.com"}


class TestFailures:
    @pytest.mark.asyncio
    async def test_error_status_raises_backend_error(self, client, backend):
        backend.on("POST", "/api/vouchers/validate", {"error": "Voucher has expired"}, status=400)

        with pytest.raises(BackendError) as exc_info:
            await client.validate_voucher("OLD", "50")

        assert exc_info.value.status_code == 400
        assert exc_info.value.message == "Voucher has expired"

    @pytest.mark.asyncio
    async def test_unreachable_backend(self, session, settings):
        def refuse(request):
            raise httpx.ConnectError("connection refused", request=request)

        client = BackendClient(session, settings=settings, transport=httpx.MockTransport(refuse))

        with pytest.raises(BackendUnavailable, match="Unable to reach the store"):
            await client.get_categories()

    @pytest.mark.asyncio
    async def test_empty_body_is_an_empty_dict(self, member_session, settings):
        transport = httpx.MockTransport(lambda request: httpx.Response(204))

        async with BackendClient(member_session, settings=settings, transport=transport) as client:
            assert await client.delete_address(3) == {}
