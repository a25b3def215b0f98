"""Cart stores: where the visitor's cart lives.

Members keep their cart on the server; every mutation returns the full
updated cart. Guests keep theirs in the session's local storage and totals are
worked out here.
"""

from abc import ABC, abstractmethod
from uuid import uuid4

import structlog

from catalogue.products import get_product
from ordering.cart.cart import CartLine, CartSnapshot
from shared.client import BackendClient
from shared.session import SessionContext

logger = structlog.get_logger(__name__)

GUEST_CART_KEY = "guest_cart"


class CartStore(ABC):
    @abstractmethod
    async def get(self) -> CartSnapshot: ...

    @abstractmethod
    async def add(self, product_id, quantity: int = 1, variant_id=None) -> CartSnapshot: ...

    @abstractmethod
    async def update_quantity(self, item_id, quantity: int) -> CartSnapshot: ...

    @abstractmethod
    async def remove(self, item_id) -> CartSnapshot: ...

    @abstractmethod
    async def clear(self) -> CartSnapshot: ...

    @abstractmethod
    async def remove_items(self, item_ids) -> CartSnapshot:
        """Drop lines that were just ordered (partial checkout)."""


class MemberCart(CartStore):
    def __init__(self, client: BackendClient) -> None:
        self.client = client

    async def get(self) -> CartSnapshot:
        return CartSnapshot.model_validate(await self.client.get_cart())

    async def add(self, product_id, quantity: int = 1, variant_id=None) -> CartSnapshot:
        return CartSnapshot.model_validate(await self.client.add_to_cart(product_id, quantity, variant_id))

    async def update_quantity(self, item_id, quantity: int) -> CartSnapshot:
        return CartSnapshot.model_validate(await self.client.update_cart_item(item_id, quantity))

    async def remove(self, item_id) -> CartSnapshot:
        return CartSnapshot.model_validate(await self.client.remove_cart_item(item_id))

    async def clear(self) -> CartSnapshot:
        return CartSnapshot.model_validate(await self.client.clear_cart())

    async def remove_items(self, item_ids) -> CartSnapshot:
        # The backend drops ordered lines itself when the order is created.
        return await self.get()


class GuestCart(CartStore):
    def __init__(self, session: SessionContext, client: BackendClient) -> None:
        self.session = session
        self.client = client

    def _load(self) -> CartSnapshot:
        stored = self.session.storage.get(GUEST_CART_KEY)
        if not stored:
            return CartSnapshot()
        return CartSnapshot.model_validate(stored)

    def _save(self, items: list[CartLine]) -> CartSnapshot:
        cart = CartSnapshot.of(items)
        self.session.storage[GUEST_CART_KEY] = cart.to_storage()
        return cart

    async def get(self) -> CartSnapshot:
        return self._load()

    async def add(self, product_id, quantity: int = 1, variant_id=None) -> CartSnapshot:
        product = await get_product(self.client, product_id)
        variant = product.variant(variant_id)
        items = list(self._load().items)

        wanted_variant = None if variant_id is None else str(variant_id)
        for index, line in enumerate(items):
            if line.product_id == product.id and line.variant_id == wanted_variant:
                items[index] = line.model_copy(update={"quantity": line.quantity + quantity})
                break
        else:
            items.append(
                CartLine(
                    id=f"local-{uuid4().hex[:12]}",
                    product_id=product.id,
                    variant_id=wanted_variant,
                    name=product.name,
                    variant_name=variant.variant_name if variant else None,
                    price=product.unit_price(variant_id, member=False),
                    quantity=quantity,
                    stock=product.stock_for(variant_id),
                    weight=product.weight,
                    image_url=product.image_url,
                )
            )

        logger.debug("guest_cart_add", product_id=product.id, variant_id=wanted_variant, quantity=quantity)
        return self._save(items)

    async def update_quantity(self, item_id, quantity: int) -> CartSnapshot:
        items = list(self._load().items)
        for index, line in enumerate(items):
            if line.id == str(item_id):
                if quantity <= 0:
                    del items[index]
                else:
                    items[index] = line.model_copy(update={"quantity": quantity})
                break
        return self._save(items)

    async def remove(self, item_id) -> CartSnapshot:
        return self._save([line for line in self._load().items if line.id != str(item_id)])

    async def clear(self) -> CartSnapshot:
        self.session.storage.pop(GUEST_CART_KEY, None)
        return CartSnapshot()

    async def remove_items(self, item_ids) -> CartSnapshot:
        drop = {str(i) for i in item_ids}
        return self._save([line for line in self._load().items if line.id not in drop])


def cart_store_for(session: SessionContext, client: BackendClient) -> CartStore:
    if session.is_authenticated:
        return MemberCart(client)
    return GuestCart(session, client)
