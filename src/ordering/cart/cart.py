"""Cart snapshots as returned by the backend (or kept locally for guests).

A snapshot is ``{items[], total, item_count}``. Lines become immutable
:class:`LineItem` snapshots before they reach the pricing engine.
"""

from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field, field_validator

from ordering.pricing.engine import LineItem
from ordering.pricing.money import ZERO, to_decimal, to_money
from shared.exceptions import StockError, StockIssue


class CartLine(BaseModel):
    model_config = ConfigDict(extra="ignore")

    id: str
    product_id: str
    variant_id: str | None = None
    name: str = ""
    variant_name: str | None = None
    price: Decimal
    original_price: Decimal | None = None
    quantity: int = Field(ge=1)
    stock: int | None = None
    weight: Decimal = Decimal("0")
    image_url: str | None = None

    @field_validator("id", "product_id", "variant_id", mode="before")
    @classmethod
    def _stringify_ids(cls, value):
        return None if value is None else str(value)

    @field_validator("price", mode="before")
    @classmethod
    def _price(cls, value):
        return to_money(value)

    @field_validator("original_price", mode="before")
    @classmethod
    def _original_price(cls, value):
        return None if value in (None, "") else to_money(value)

    @field_validator("weight", mode="before")
    @classmethod
    def _weight(cls, value):
        return to_decimal(value)

    @property
    def display_name(self) -> str:
        if self.variant_name:
            return f"{self.name} - {self.variant_name}"
        return self.name

    def to_line_item(self) -> LineItem:
        return LineItem(
            id=self.id,
            unit_price=self.price,
            quantity=self.quantity,
            weight_per_unit=self.weight,
            stock=self.stock,
            name=self.display_name,
            product_id=self.product_id,
            variant_id=self.variant_id,
        )


class CartSnapshot(BaseModel):
    model_config = ConfigDict(extra="ignore")

    items: list[CartLine] = Field(default_factory=list)
    total: Decimal = ZERO
    item_count: int = 0

    @field_validator("total", mode="before")
    @classmethod
    def _total(cls, value):
        return to_money(value)

    @classmethod
    def of(cls, items: list[CartLine]) -> "CartSnapshot":
        """Snapshot with totals recomputed from ``items``."""
        return cls(
            items=items,
            total=sum((line.price * line.quantity for line in items), ZERO),
            item_count=sum(line.quantity for line in items),
        )

    @property
    def is_empty(self) -> bool:
        return not self.items

    def line_items(self) -> tuple[LineItem, ...]:
        return tuple(line.to_line_item() for line in self.items)

    def to_storage(self) -> dict:
        return self.model_dump(mode="json")


def stock_issues(lines) -> list[StockIssue]:
    """Lines asking for more than is known to be available. Unknown stock is not checked."""
    issues = []
    for line in lines:
        if line.stock is None:
            continue
        if line.quantity > line.stock:
            issues.append(StockIssue(line.id, line.name, line.quantity, line.stock))
    return issues


def ensure_in_stock(lines) -> None:
    issues = stock_issues(lines)
    if issues:
        raise StockError(issues)
