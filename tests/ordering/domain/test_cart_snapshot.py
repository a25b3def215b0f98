"""Tests for cart snapshots and stock checks."""

from decimal import Decimal

import pytest
from ordering.cart.cart import CartLine, CartSnapshot, ensure_in_stock, stock_issues
from ordering.pricing.engine import LineItem
from shared.exceptions import StockError


@pytest.fixture
def backend_cart():
    return {
        "items": [
            {
                "id": 11,
                "product_id": 3,
                "name": "Salmon Kibble",
                "variant_id": 7,
                "variant_name": "2kg",
                "price": "45.50",
                "quantity": 2,
                "stock": 10,
                "weight": "2",
                "image_url": "/img/kibble.png",
                "category": "food",
            },
            {"id": 12, "product_id": 4, "name": "Rope Toy", "price": 9.9, "quantity": 1, "stock": None},
        ],
        "total": "100.90",
        "item_count": 3,
    }


class TestCartSnapshot:
    def test_parses_backend_cart(self, backend_cart):
        cart = CartSnapshot.model_validate(backend_cart)
        assert [line.id for line in cart.items] == ["11", "12"]
        assert cart.items[0].variant_id == "7"
        assert cart.items[1].price == Decimal("9.90")
        assert cart.total == Decimal("100.90")

    def test_line_items_carry_pricing_inputs(self, backend_cart):
        first, second = CartSnapshot.model_validate(backend_cart).line_items()
        assert isinstance(first, LineItem)
        assert first.name == "Salmon Kibble - 2kg"
        assert first.weight_per_unit == Decimal("2")
        assert first.line_total == Decimal("91.00")
        assert second.weight_per_unit == Decimal("0")
        assert second.stock is None

    def test_of_recomputes_totals(self):
        lines = [
            CartLine(id="a", product_id="1", price="12.50", quantity=2),
            CartLine(id="b", product_id="2", price="5", quantity=1),
        ]
        cart = CartSnapshot.of(lines)
        assert cart.total == Decimal("30.00")
        assert cart.item_count == 3

    def test_empty_snapshot(self):
        assert CartSnapshot().is_empty
        assert CartSnapshot().line_items() == ()

    def test_storage_round_trip(self, backend_cart):
        cart = CartSnapshot.model_validate(backend_cart)
        assert CartSnapshot.model_validate(cart.to_storage()) == cart


class TestStock:
    def test_unknown_stock_is_never_an_issue(self):
        assert stock_issues([LineItem(id="1", unit_price="1", quantity=50, stock=None)]) == []

    def test_quantity_within_stock_passes(self):
        ensure_in_stock([LineItem(id="1", unit_price="1", quantity=3, stock=3)])

    def test_reports_every_short_line(self):
        lines = [
            LineItem(id="1", unit_price="1", quantity=2, stock=0, name="Catnip"),
            LineItem(id="2", unit_price="1", quantity=5, stock=3, name="Leash"),
            LineItem(id="3", unit_price="1", quantity=1, stock=9, name="Bowl"),
        ]
        with pytest.raises(StockError) as exc_info:
            ensure_in_stock(lines)

        assert [issue.line_id for issue in exc_info.value.issues] == ["1", "2"]
        assert exc_info.value.message == "Catnip is out of stock; Not enough stock for Leash. Available: 3"
