"""Wishlist membership for signed-in customers."""

import structlog

from shared.client import BackendClient
from shared.exceptions import AuthenticationRequired
from shared.session import SessionContext

logger = structlog.get_logger(__name__)


async def wishlist_product_ids(client: BackendClient) -> set[str]:
    data = await client.get_wishlist()
    return {str(entry.get("product_id", entry.get("id"))) for entry in data.get("wishlist", [])}


async def toggle_wishlist(client: BackendClient, session: SessionContext, product_id) -> bool:
    """Flip ``product_id`` in the wishlist. Returns True when it is now wishlisted."""
    if not session.is_authenticated:
        raise AuthenticationRequired("Please log in to use your wishlist")

    data = await client.check_wishlist(product_id)
    if data.get("inWishlist"):
        await client.remove_from_wishlist(product_id)
        logger.debug("wishlist_removed", product_id=product_id)
        return False

    await client.add_to_wishlist(product_id)
    logger.debug("wishlist_added", product_id=product_id)
    return True
