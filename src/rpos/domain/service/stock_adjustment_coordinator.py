"""Domain service: Stock Adjustment Coordinator.

Turns an order's line items into stock changes, in one direction:
CONSUME when an order completes, RESTORE when a completed order is
cancelled.  Both directions run through the same routine so they can
never drift apart.

The work happens in two phases inside the caller's unit of work:

  Phase 1 — plan and lock: lock every product row the order references,
            resolve each product's stock strategy, then lock every
            ingredient row reached through a recipe.  Locks are taken in
            ascending id (products first, then ingredients) so concurrent
            completions with overlapping rows cannot deadlock.
  Phase 2 — apply: walk the items in order and adjust stock through the
            Product Stock Store or the Inventory Ledger.

The first failed adjustment rolls the unit of work back and is returned
in the outcome; nothing from that order is left half-applied.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator

from rpos.domain.exceptions import CorruptedRecipeDataError, DomainException, EntityNotFoundError
from rpos.domain.model.order import Order, OrderItem
from rpos.domain.model.product import DirectManaged, RecipeBased, StockStrategy, Unmanaged
from rpos.domain.model.stock import (
    AdjustmentResult,
    StockAdjustmentFailed,
    StockDirection,
    StockOutcome,
)
from rpos.domain.repository.unit_of_work import UnitOfWork
from rpos.domain.service.inventory_ledger import InventoryLedger
from rpos.domain.service.product_stock_store import ProductStockStore
from rpos.domain.service.recipe_resolver import RecipeResolver

logger = logging.getLogger(__name__)


class StockAdjustmentCoordinator:

    def __init__(
        self,
        ledger: InventoryLedger | None = None,
        store: ProductStockStore | None = None,
        resolver: RecipeResolver | None = None,
    ) -> None:
        self._ledger = ledger or InventoryLedger()
        self._store = store or ProductStockStore()
        self._resolver = resolver or RecipeResolver()

    def consume(self, uow: UnitOfWork, order: Order) -> StockOutcome:
        return self.apply(uow, order, StockDirection.CONSUME)

    def restore(self, uow: UnitOfWork, order: Order) -> StockOutcome:
        return self.apply(uow, order, StockDirection.RESTORE)

    def apply(self, uow: UnitOfWork, order: Order, direction: StockDirection) -> StockOutcome:
        outcome = StockOutcome(direction=direction)

        planned = self._plan_and_lock(uow, order)
        if isinstance(planned, StockAdjustmentFailed):
            return self._abort(uow, order, outcome, planned.error)

        for item, strategy in planned:
            for result in self._adjust_item(uow, item, strategy, direction):
                if isinstance(result, StockAdjustmentFailed):
                    return self._abort(uow, order, outcome, result.error)
                outcome.adjustments.append(result)

        logger.info(
            "Order #%s: %d stock adjustment(s) applied (%s)",
            order.id, len(outcome.adjustments), direction.name.lower(),
        )
        return outcome

    # --- Phase 1 --------------------------------------------------------------

    def _plan_and_lock(
        self, uow: UnitOfWork, order: Order
    ) -> list[tuple[OrderItem, StockStrategy]] | StockAdjustmentFailed:
        strategies: dict[int, StockStrategy] = {}

        for product_id in sorted({item.product_id for item in order.items}):
            product = uow.products.get_for_update(product_id)
            if product is None:
                return StockAdjustmentFailed(
                    EntityNotFoundError(f"Product #{product_id} not found")
                )
            strategies[product_id] = self._resolver.strategy_for(uow, product)

        ingredient_ids: set[int] = set()
        for strategy in strategies.values():
            if not isinstance(strategy, RecipeBased):
                continue
            missing = strategy.recipe.missing_ingredients
            if missing:
                return StockAdjustmentFailed(
                    CorruptedRecipeDataError(
                        f"Recipe for product {strategy.product.name} "
                        f"(#{strategy.product.id}) references missing ingredient(s) "
                        f"{sorted(line.ingredient_id for line in missing)}"
                    )
                )
            ingredient_ids.update(line.ingredient_id for line in strategy.recipe.items)

        for ingredient_id in sorted(ingredient_ids):
            uow.ingredients.get_for_update(ingredient_id)

        return [(item, strategies[item.product_id]) for item in order.items]

    # --- Phase 2 --------------------------------------------------------------

    def _adjust_item(
        self,
        uow: UnitOfWork,
        item: OrderItem,
        strategy: StockStrategy,
        direction: StockDirection,
    ) -> Iterator[AdjustmentResult]:
        sign = int(direction)
        if isinstance(strategy, DirectManaged):
            yield self._store.adjust(uow, item.product_id, sign * item.quantity.value)
        elif isinstance(strategy, RecipeBased):
            for line in strategy.recipe.items:
                delta = sign * (line.quantity * item.quantity.value)
                yield self._ledger.adjust(uow, line.ingredient_id, delta)
        elif isinstance(strategy, Unmanaged):
            logger.debug(
                "Product %s (#%s) has no stock tracking; nothing to adjust",
                item.product_name, item.product_id,
            )
        else:
            raise TypeError(f"Unknown stock strategy: {strategy!r}")

    # --- Abort ----------------------------------------------------------------

    @staticmethod
    def _abort(
        uow: UnitOfWork, order: Order, outcome: StockOutcome, error: DomainException
    ) -> StockOutcome:
        uow.rollback()
        logger.warning(
            "Order #%s: stock %s rolled back: %s",
            order.id, outcome.direction.name.lower(), error,
        )
        outcome.adjustments.clear()
        outcome.failure = error
        return outcome
