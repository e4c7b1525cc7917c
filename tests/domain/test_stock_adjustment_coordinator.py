"""Tests for the Stock Adjustment Coordinator.

Covers strategy dispatch, lock ordering, the all-or-nothing guarantee
and the symmetry between consuming and restoring.
"""

from decimal import Decimal

import pytest

from rpos.domain.exceptions import (
    CorruptedRecipeDataError,
    EntityNotFoundError,
    InsufficientStockError,
)
from rpos.domain.model.ingredient import Ingredient, UnitOfMeasure
from rpos.domain.model.order import Order, OrderItem
from rpos.domain.model.product import Product
from rpos.domain.model.recipe import Recipe, RecipeItem
from rpos.domain.model.stock import StockDirection
from rpos.domain.model.value_objects import Money, Quantity
from rpos.domain.service.stock_adjustment_coordinator import StockAdjustmentCoordinator
from tests.fakes import FakeUnitOfWork


def _line(product: Product, qty: int) -> OrderItem:
    return OrderItem(
        product_id=product.id,
        product_name=product.name,
        quantity=Quantity(qty),
        price=product.price,
    )


def _setup(flour_stock: str = "1000", cheese_stock: str = "500"):
    pizza = Product(id=2, name="Pizza", price=Money.of("12.50"), manage_stock=False)
    soda = Product(id=1, name="Soda", price=Money.of("2.00"), manage_stock=True, stock=10)
    water = Product(id=3, name="Water", price=Money.of("1.00"), manage_stock=False)
    flour = Ingredient(id=5, name="Flour", stock=Decimal(flour_stock), unit_of_measure=UnitOfMeasure.GRAM)
    cheese = Ingredient(id=3, name="Cheese", stock=Decimal(cheese_stock), unit_of_measure=UnitOfMeasure.GRAM)
    oil = Ingredient(id=9, name="Oil", stock=Decimal("100"), unit_of_measure=UnitOfMeasure.MILLILITER)
    recipe = Recipe(
        id=1,
        product_id=2,
        items=[
            RecipeItem(ingredient_id=5, quantity=Decimal("250")),
            RecipeItem(ingredient_id=3, quantity=Decimal("100")),
        ],
    )
    uow = FakeUnitOfWork(
        products=[pizza, soda, water],
        ingredients=[flour, cheese, oil],
        recipes=[recipe],
    )
    return uow, pizza, soda, water


def _order(*lines: OrderItem) -> Order:
    order = Order.create("Alice", list(lines), created_by_id=1)
    order.id = 7
    return order


class TestConsume:

    def test_recipe_product_consumes_each_ingredient(self):
        uow, pizza, _, _ = _setup()
        with uow:
            outcome = StockAdjustmentCoordinator().consume(uow, _order(_line(pizza, 2)))
            uow.commit()

        assert outcome.succeeded
        assert outcome.direction == StockDirection.CONSUME
        assert uow.stores["ingredients"][5].stock == Decimal("500")
        assert uow.stores["ingredients"][3].stock == Decimal("300")
        assert [a.item_name for a in outcome.adjustments] == ["Flour", "Cheese"]

    def test_direct_product_consumes_own_counter(self):
        uow, _, soda, _ = _setup()
        with uow:
            outcome = StockAdjustmentCoordinator().consume(uow, _order(_line(soda, 3)))
            uow.commit()
        assert outcome.succeeded
        assert uow.stores["products"][1].stock == 7

    def test_unmanaged_product_has_no_effect(self):
        uow, _, _, water = _setup()
        before = {i: ing.stock for i, ing in uow.stores["ingredients"].items()}
        with uow:
            outcome = StockAdjustmentCoordinator().consume(uow, _order(_line(water, 50)))
            uow.commit()
        assert outcome.succeeded
        assert outcome.adjustments == []
        assert {i: ing.stock for i, ing in uow.stores["ingredients"].items()} == before

    def test_product_with_empty_recipe_is_unmanaged(self):
        uow, _, _, water = _setup()
        uow.stores["recipes"][3] = Recipe(id=2, product_id=3, items=[])
        with uow:
            outcome = StockAdjustmentCoordinator().consume(uow, _order(_line(water, 1)))
            uow.commit()
        assert outcome.succeeded
        assert outcome.adjustments == []

    def test_manage_stock_ignores_recipe(self):
        uow, _, soda, _ = _setup()
        uow.stores["recipes"][1] = Recipe(
            id=3, product_id=1, items=[RecipeItem(ingredient_id=9, quantity=Decimal("10"))]
        )
        with uow:
            StockAdjustmentCoordinator().consume(uow, _order(_line(soda, 1)))
            uow.commit()
        assert uow.stores["products"][1].stock == 9
        assert uow.stores["ingredients"][9].stock == Decimal("100")

    def test_same_ingredient_across_lines_accumulates(self):
        uow, pizza, _, _ = _setup(flour_stock="600")
        with uow:
            outcome = StockAdjustmentCoordinator().consume(
                uow, _order(_line(pizza, 1), _line(pizza, 1))
            )
            uow.commit()
        assert outcome.succeeded
        assert uow.stores["ingredients"][5].stock == Decimal("100")

    def test_fractional_quantities(self):
        uow, pizza, _, _ = _setup()
        uow.stores["recipes"][2].items[0].quantity = Decimal("0.125")
        with uow:
            StockAdjustmentCoordinator().consume(uow, _order(_line(pizza, 3)))
            uow.commit()
        assert uow.stores["ingredients"][5].stock == Decimal("999.625")


class TestLockOrder:

    def test_products_then_ingredients_ascending(self):
        uow, pizza, soda, water = _setup()
        order = _order(_line(water, 1), _line(pizza, 1), _line(soda, 1))
        with uow:
            StockAdjustmentCoordinator().consume(uow, order)

        # plan phase locks, then the row locks the adjustments take again
        assert uow.locks == [
            ("product", 1),
            ("product", 2),
            ("product", 3),
            ("ingredient", 3),
            ("ingredient", 5),
            ("ingredient", 5),
            ("ingredient", 3),
            ("product", 1),
        ]


class TestAtomicity:

    def test_insufficient_ingredient_rolls_back_everything(self):
        # Flour is adjusted first and succeeds, cheese fails.
        uow, pizza, soda, _ = _setup(cheese_stock="150")
        order = _order(_line(soda, 2), _line(pizza, 2))
        with uow:
            outcome = StockAdjustmentCoordinator().consume(uow, order)

        assert not outcome.succeeded
        assert isinstance(outcome.failure, InsufficientStockError)
        assert outcome.failure.item_name == "Cheese"
        assert outcome.adjustments == []
        assert uow.stores["products"][1].stock == 10
        assert uow.stores["ingredients"][5].stock == Decimal("1000")
        assert uow.stores["ingredients"][3].stock == Decimal("150")

    def test_raise_for_failure(self):
        uow, pizza, _, _ = _setup(flour_stock="100")
        with uow:
            outcome = StockAdjustmentCoordinator().consume(uow, _order(_line(pizza, 1)))
        with pytest.raises(InsufficientStockError, match="Flour"):
            outcome.raise_for_failure()

    def test_missing_recipe_ingredient_is_corrupted_data(self):
        uow, pizza, soda, _ = _setup()
        del uow.stores["ingredients"][3]
        with uow:
            outcome = StockAdjustmentCoordinator().consume(
                uow, _order(_line(soda, 1), _line(pizza, 1))
            )
        assert isinstance(outcome.failure, CorruptedRecipeDataError)
        assert "[3]" in str(outcome.failure)
        assert uow.stores["products"][1].stock == 10

    def test_missing_product_aborts(self):
        uow, pizza, _, _ = _setup()
        ghost = Product(id=99, name="Ghost", price=Money.of("1.00"))
        with uow:
            outcome = StockAdjustmentCoordinator().consume(
                uow, _order(_line(pizza, 1), _line(ghost, 1))
            )
        assert isinstance(outcome.failure, EntityNotFoundError)
        assert uow.stores["ingredients"][5].stock == Decimal("1000")


class TestRestore:

    def test_restore_reverses_consume(self):
        uow, pizza, soda, water = _setup()
        order = _order(_line(pizza, 2), _line(soda, 3), _line(water, 1))
        coordinator = StockAdjustmentCoordinator()
        with uow:
            coordinator.consume(uow, order)
            uow.commit()
        assert uow.stores["ingredients"][5].stock == Decimal("500")
        assert uow.stores["products"][1].stock == 7

        with uow:
            outcome = coordinator.restore(uow, order)
            uow.commit()

        assert outcome.direction == StockDirection.RESTORE
        assert all(a.delta > 0 for a in outcome.adjustments)
        assert uow.stores["ingredients"][5].stock == Decimal("1000")
        assert uow.stores["ingredients"][3].stock == Decimal("500")
        assert uow.stores["products"][1].stock == 10

    def test_restore_never_fails_on_low_stock(self):
        uow, pizza, _, _ = _setup(flour_stock="0", cheese_stock="0")
        with uow:
            outcome = StockAdjustmentCoordinator().apply(
                uow, _order(_line(pizza, 1)), StockDirection.RESTORE
            )
            uow.commit()
        assert outcome.succeeded
        assert uow.stores["ingredients"][5].stock == Decimal("250")


def test_uncommitted_consumption_is_discarded_on_exit():
    uow, pizza, soda, _ = _setup()
    with uow:
        outcome = StockAdjustmentCoordinator().consume(uow, _order(_line(pizza, 1), _line(soda, 1)))
        assert outcome.succeeded
        assert uow.stores["ingredients"][5].stock == Decimal("750")

    assert uow.stores["ingredients"][5].stock == Decimal("1000")
    assert uow.stores["products"][1].stock == 10
