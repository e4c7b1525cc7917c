"""Ingredient aggregate — raw material consumed through recipes.

Stock is tracked in the ingredient's own base unit; recipe lines are
expressed in that same unit so no conversion ever happens.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from enum import Enum

from rpos.domain.exceptions import InsufficientStockError
from rpos.domain.model.value_objects import Money


class UnitOfMeasure(Enum):
    GRAM = "g"
    KILOGRAM = "kg"
    MILLILITER = "ml"
    LITER = "l"
    UNIT = "unit"
    TEASPOON = "tsp"
    TABLESPOON = "tbsp"
    CUP = "cup"
    PINCH = "pinch"
    OTHER = "other"


@dataclass
class Ingredient:
    """Aggregate root for ingredient stock.

    Invariant: ``stock`` never goes negative through ``adjust_stock``.
    """

    id: int | None
    name: str
    stock: Decimal
    unit_of_measure: UnitOfMeasure = UnitOfMeasure.UNIT
    low_stock_threshold: Decimal | None = None
    cost_price: Money | None = None
    supplier: str | None = None
    description: str | None = None

    @property
    def is_low_stock(self) -> bool:
        if self.low_stock_threshold is None:
            return False
        return self.stock <= self.low_stock_threshold

    def adjust_stock(self, delta: Decimal) -> Decimal:
        """Apply a signed change and return the new stock level.

        Raises InsufficientStockError (leaving ``stock`` untouched) if the
        result would be negative.
        """
        new_stock = self.stock + delta
        if new_stock < 0:
            raise InsufficientStockError(
                item_kind="ingredient",
                item_id=self.id,  # type: ignore[arg-type]
                item_name=self.name,
                available=self.stock,
                requested=-delta,
            )
        self.stock = new_stock
        return new_stock
