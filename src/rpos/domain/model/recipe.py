"""Recipe aggregate — the ingredient bill of one product.

A product has zero or one recipe. Each RecipeItem quantity is expressed
in the referenced ingredient's own unit of measure.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal

from rpos.domain.exceptions import CorruptedRecipeDataError, ValidationError
from rpos.domain.model.ingredient import Ingredient
from rpos.domain.model.value_objects import Money

DEFAULT_RECIPE_NAME = "Standard recipe"


@dataclass
class RecipeItem:
    ingredient_id: int
    quantity: Decimal
    id: int | None = None
    notes: str | None = None
    # Attached by the repository; None means the referenced row is gone.
    ingredient: Ingredient | None = None


@dataclass
class Recipe:
    id: int | None
    product_id: int
    items: list[RecipeItem] = field(default_factory=list)
    name: str = DEFAULT_RECIPE_NAME
    description: str | None = None
    notes: str | None = None

    @property
    def missing_ingredients(self) -> list[RecipeItem]:
        return [item for item in self.items if item.ingredient is None]

    def estimated_cost(self, currency: str | None = None) -> Money:
        """Sum of ingredient unit cost times quantity, rounded to cents.

        The currency defaults to that of the ingredient costs.
        """
        total: Money | None = None if currency is None else Money.zero(currency)
        for item in self.items:
            if item.ingredient is None:
                raise CorruptedRecipeDataError(
                    f"Recipe line {item.id} references missing ingredient #{item.ingredient_id}"
                )
            if item.ingredient.cost_price is None:
                raise ValidationError(
                    f"Cost not defined for ingredient {item.ingredient.name}; "
                    f"cannot calculate recipe cost"
                )
            line_cost = item.ingredient.cost_price * item.quantity
            total = line_cost if total is None else total + line_cost
        return (total or Money.zero()).rounded()
