"""Order confirmation lookup after a successful payment."""

from shared.client import BackendClient
from shared.exceptions import AuthenticationRequired
from shared.session import SessionContext


async def fetch_confirmed_order(client: BackendClient, session: SessionContext, order_id, email: str | None = None) -> dict:
    """Members read their own order; guests prove ownership with the email they checked out with."""
    if session.is_authenticated:
        data = await client.get_order(order_id)
        return data["order"]

    email = email or session.guest_email
    if not email:
        raise AuthenticationRequired("Enter the email used for this order to view it")
    data = await client.get_guest_order(order_id, email)
    return data["order"]
