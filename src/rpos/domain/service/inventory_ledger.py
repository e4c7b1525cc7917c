"""Domain service: Inventory Ledger.

Owns every change to ingredient stock. ``adjust`` runs inside whatever
unit of work the caller passes in, so it can serve a manual correction
on its own or one line of an order completion.
"""

from __future__ import annotations

import logging
from decimal import Decimal

from rpos.domain.exceptions import EntityNotFoundError, InsufficientStockError
from rpos.domain.model.stock import AdjustmentResult, StockAdjusted, StockAdjustmentFailed
from rpos.domain.repository.unit_of_work import UnitOfWork

logger = logging.getLogger(__name__)


class InventoryLedger:

    def adjust(self, uow: UnitOfWork, ingredient_id: int, delta: Decimal) -> AdjustmentResult:
        """Apply ``delta`` to an ingredient's stock.

        Returns StockAdjustmentFailed without writing when the ingredient
        is missing or the new stock would be negative.
        """
        ingredient = uow.ingredients.get_for_update(ingredient_id)
        if ingredient is None:
            return StockAdjustmentFailed(
                EntityNotFoundError(f"Ingredient #{ingredient_id} not found")
            )

        previous = ingredient.stock
        try:
            ingredient.adjust_stock(delta)
        except InsufficientStockError as exc:
            return StockAdjustmentFailed(exc)

        uow.ingredients.save(ingredient)
        logger.debug(
            "Ingredient %s (#%s) stock %s -> %s %s",
            ingredient.name, ingredient.id, previous, ingredient.stock,
            ingredient.unit_of_measure.value,
        )
        return StockAdjusted(
            item_kind="ingredient",
            item_id=ingredient_id,
            item_name=ingredient.name,
            previous=previous,
            current=ingredient.stock,
        )
