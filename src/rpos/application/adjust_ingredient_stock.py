"""Application service: manual ingredient stock corrections.

Runs the Inventory Ledger standalone, in its own unit of work.
"""

from __future__ import annotations

import logging
from decimal import Decimal

from rpos.application.dto import IngredientDTO, ingredient_to_dto
from rpos.domain.exceptions import EntityNotFoundError, ValidationError
from rpos.domain.model.stock import StockAdjustmentFailed
from rpos.domain.model.value_objects import to_decimal
from rpos.domain.repository.unit_of_work import UnitOfWork
from rpos.domain.service.inventory_ledger import InventoryLedger

logger = logging.getLogger(__name__)


class AdjustIngredientStockHandler:

    def __init__(self, uow: UnitOfWork, ledger: InventoryLedger | None = None) -> None:
        self._uow = uow
        self._ledger = ledger or InventoryLedger()

    def handle(self, ingredient_id: int, delta: str | int | Decimal) -> IngredientDTO:
        """Add (positive) or remove (negative) stock from an ingredient."""
        change = to_decimal(delta)
        with self._uow as uow:
            result = self._ledger.adjust(uow, ingredient_id, change)
            if isinstance(result, StockAdjustmentFailed):
                raise result.error
            uow.commit()
            ingredient = uow.ingredients.get_by_id(ingredient_id)

        logger.info(
            "Ingredient #%s manually adjusted by %s (now %s)",
            ingredient_id, change, result.current,
        )
        return ingredient_to_dto(ingredient)  # type: ignore[arg-type]


class SetIngredientStockHandler:

    def __init__(self, uow: UnitOfWork) -> None:
        self._uow = uow

    def handle(self, ingredient_id: int, quantity: str | int | Decimal) -> IngredientDTO:
        """Set an ingredient's stock to an absolute level."""
        new_stock = to_decimal(quantity)
        if new_stock < 0:
            raise ValidationError("Stock quantity cannot be negative")

        with self._uow as uow:
            ingredient = uow.ingredients.get_for_update(ingredient_id)
            if ingredient is None:
                raise EntityNotFoundError(f"Ingredient #{ingredient_id} not found")
            ingredient.stock = new_stock
            uow.ingredients.save(ingredient)
            uow.commit()

        return ingredient_to_dto(ingredient)
