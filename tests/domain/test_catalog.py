"""Unit tests for Product, Ingredient and Recipe."""

from decimal import Decimal

import pytest

from rpos.domain.exceptions import CorruptedRecipeDataError, InsufficientStockError, ValidationError
from rpos.domain.model.ingredient import Ingredient, UnitOfMeasure
from rpos.domain.model.product import (
    DirectManaged,
    Product,
    RecipeBased,
    Unmanaged,
    resolve_stock_strategy,
)
from rpos.domain.model.recipe import Recipe, RecipeItem
from rpos.domain.model.value_objects import Money


def _flour(stock: str = "1000", cost: str | None = "0.004") -> Ingredient:
    return Ingredient(
        id=1,
        name="Flour",
        stock=Decimal(stock),
        unit_of_measure=UnitOfMeasure.GRAM,
        cost_price=Money.of(cost) if cost is not None else None,
    )


class TestProductStock:

    def test_adjust_stock(self):
        soda = Product(id=1, name="Soda", price=Money.of("2.00"), stock=10)
        assert soda.adjust_stock(-3) == 7
        assert soda.adjust_stock(3) == 10

    def test_adjust_below_zero_leaves_stock_untouched(self):
        soda = Product(id=1, name="Soda", price=Money.of("2.00"), stock=2)
        with pytest.raises(InsufficientStockError) as info:
            soda.adjust_stock(-3)
        assert soda.stock == 2
        assert info.value.item_kind == "product"
        assert info.value.available == 2
        assert info.value.requested == 3


class TestIngredient:

    def test_adjust_stock_with_decimals(self):
        flour = _flour("100.5")
        flour.adjust_stock(Decimal("-0.5"))
        assert flour.stock == Decimal("100.0")

    def test_adjust_below_zero_rejected(self):
        flour = _flour("100")
        with pytest.raises(InsufficientStockError, match="Flour"):
            flour.adjust_stock(Decimal("-150"))
        assert flour.stock == Decimal("100")

    def test_low_stock_flag(self):
        flour = _flour("5")
        assert not flour.is_low_stock
        flour.low_stock_threshold = Decimal("5")
        assert flour.is_low_stock


class TestStockStrategy:

    def _recipe(self, *items: RecipeItem) -> Recipe:
        return Recipe(id=1, product_id=1, items=list(items))

    def test_manage_stock_wins_over_recipe(self):
        product = Product(id=1, name="Pizza", price=Money.of("9"), manage_stock=True)
        recipe = self._recipe(RecipeItem(ingredient_id=1, quantity=Decimal("250")))
        assert isinstance(resolve_stock_strategy(product, recipe), DirectManaged)

    def test_recipe_based(self):
        product = Product(id=1, name="Pizza", price=Money.of("9"), manage_stock=False)
        recipe = self._recipe(RecipeItem(ingredient_id=1, quantity=Decimal("250")))
        strategy = resolve_stock_strategy(product, recipe)
        assert isinstance(strategy, RecipeBased)
        assert strategy.recipe is recipe

    def test_empty_recipe_is_unmanaged(self):
        product = Product(id=1, name="Water", price=Money.of("1"), manage_stock=False)
        assert isinstance(resolve_stock_strategy(product, self._recipe()), Unmanaged)

    def test_no_recipe_is_unmanaged(self):
        product = Product(id=1, name="Water", price=Money.of("1"), manage_stock=False)
        assert isinstance(resolve_stock_strategy(product, None), Unmanaged)


class TestRecipeEstimatedCost:

    def test_cost_is_sum_of_lines(self):
        cheese = Ingredient(id=2, name="Cheese", stock=Decimal("500"), cost_price=Money.of("0.02"))
        recipe = Recipe(
            id=1,
            product_id=1,
            items=[
                RecipeItem(ingredient_id=1, quantity=Decimal("250"), ingredient=_flour()),
                RecipeItem(ingredient_id=2, quantity=Decimal("100"), ingredient=cheese),
            ],
        )
        # 250 * 0.004 + 100 * 0.02
        assert recipe.estimated_cost() == Money.of("3.00")

    def test_unpriced_ingredient_rejected(self):
        recipe = Recipe(
            id=1,
            product_id=1,
            items=[RecipeItem(ingredient_id=1, quantity=Decimal("1"), ingredient=_flour(cost=None))],
        )
        with pytest.raises(ValidationError, match="Cost not defined for ingredient Flour"):
            recipe.estimated_cost()

    def test_missing_ingredients_listed(self):
        recipe = Recipe(
            id=1,
            product_id=1,
            items=[
                RecipeItem(ingredient_id=1, quantity=Decimal("1"), ingredient=_flour()),
                RecipeItem(ingredient_id=9, quantity=Decimal("1"), ingredient=None),
            ],
        )
        assert [item.ingredient_id for item in recipe.missing_ingredients] == [9]

    def test_missing_ingredient_is_corrupted_data(self):
        recipe = Recipe(
            id=1,
            product_id=1,
            items=[RecipeItem(id=4, ingredient_id=9, quantity=Decimal("1"), ingredient=None)],
        )
        with pytest.raises(CorruptedRecipeDataError, match="missing ingredient #9"):
            recipe.estimated_cost()

    def test_cost_follows_ingredient_currency(self):
        flour = Ingredient(
            id=1, name="Flour", stock=Decimal("1000"), cost_price=Money.of("0.01", "EUR")
        )
        recipe = Recipe(
            id=1,
            product_id=1,
            items=[RecipeItem(ingredient_id=1, quantity=Decimal("250"), ingredient=flour)],
        )
        assert recipe.estimated_cost() == Money.of("2.50", "EUR")
