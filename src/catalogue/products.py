"""Product browsing: catalogue models, listing queries and unit prices.

Guests pay the listed price; signed-in members pay the member price where one
is configured. A variant with its own price overrides the product's prices.
"""

from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field, field_validator

from ordering.pricing.engine import LineItem
from ordering.pricing.money import to_decimal, to_money
from shared.client import BackendClient


def _optional_money(value):
    if value in (None, ""):
        return None
    return to_money(value)


class Variant(BaseModel):
    model_config = ConfigDict(extra="ignore")

    id: str
    variant_name: str
    price: Decimal | None = None
    member_price: Decimal | None = None
    stock: int | None = None

    @field_validator("id", mode="before")
    @classmethod
    def _stringify_id(cls, value):
        return str(value)

    @field_validator("price", "member_price", mode="before")
    @classmethod
    def _money(cls, value):
        return _optional_money(value)


class Product(BaseModel):
    model_config = ConfigDict(extra="ignore")

    id: str
    name: str
    description: str | None = None
    price: Decimal
    member_price: Decimal | None = None
    category: str | None = None
    pet_type: str | None = None
    stock: int | None = None
    weight: Decimal = Decimal("0")
    image_url: str | None = None
    variants: list[Variant] = Field(default_factory=list)

    @field_validator("id", mode="before")
    @classmethod
    def _stringify_id(cls, value):
        return str(value)

    @field_validator("price", mode="before")
    @classmethod
    def _price(cls, value):
        return to_money(value)

    @field_validator("member_price", mode="before")
    @classmethod
    def _member_price(cls, value):
        return _optional_money(value)

    @field_validator("weight", mode="before")
    @classmethod
    def _weight(cls, value):
        return to_decimal(value)

    @field_validator("variants", mode="before")
    @classmethod
    def _no_variants(cls, value):
        return value or []

    def variant(self, variant_id) -> Variant | None:
        if variant_id is None:
            return None
        return next((v for v in self.variants if v.id == str(variant_id)), None)

    def unit_price(self, variant_id=None, member: bool = False) -> Decimal:
        variant = self.variant(variant_id)
        if variant is not None and variant.price is not None:
            price, member_price = variant.price, variant.member_price
        else:
            price, member_price = self.price, self.member_price
        if member and member_price is not None:
            return member_price
        return price

    def stock_for(self, variant_id=None) -> int | None:
        variant = self.variant(variant_id)
        if variant is not None:
            return variant.stock
        return self.stock

    def display_name(self, variant_id=None) -> str:
        variant = self.variant(variant_id)
        if variant is None:
            return self.name
        return f"{self.name} - {variant.variant_name}"

    def to_line_item(self, quantity: int = 1, variant_id=None, member: bool = False, line_id: str | None = None) -> LineItem:
        """A transient line for this product, as used by buy-now checkout."""
        return LineItem(
            id=line_id or (f"{self.id}:{variant_id}" if variant_id is not None else self.id),
            unit_price=self.unit_price(variant_id, member=member),
            quantity=quantity,
            weight_per_unit=self.weight,
            stock=self.stock_for(variant_id),
            name=self.display_name(variant_id),
            product_id=self.id,
            variant_id=None if variant_id is None else str(variant_id),
        )


class ProductQuery(BaseModel):
    """Listing filters, as the backend names them."""

    category: str | None = None
    pet_type: str | None = None
    search: str | None = None

    def to_params(self) -> dict[str, str]:
        params = {"category": self.category, "petType": self.pet_type, "search": self.search}
        return {k: v.strip() for k, v in params.items() if v and v.strip()}


async def list_products(client: BackendClient, query: ProductQuery | None = None) -> list[Product]:
    data = await client.list_products((query or ProductQuery()).to_params())
    return [Product.model_validate(p) for p in data.get("products", [])]


async def get_product(client: BackendClient, product_id) -> Product:
    data = await client.get_product(product_id)
    return Product.model_validate(data.get("product", data))


async def list_categories(client: BackendClient) -> list[str]:
    data = await client.get_categories()
    return list(data.get("categories", []))
