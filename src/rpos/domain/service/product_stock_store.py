"""Domain service: Product Stock Store.

Same contract as the Inventory Ledger, scoped to the direct stock
counter of products with ``manage_stock`` enabled.
"""

from __future__ import annotations

import logging

from rpos.domain.exceptions import EntityNotFoundError, InsufficientStockError
from rpos.domain.model.stock import AdjustmentResult, StockAdjusted, StockAdjustmentFailed
from rpos.domain.repository.unit_of_work import UnitOfWork

logger = logging.getLogger(__name__)


class ProductStockStore:

    def adjust(self, uow: UnitOfWork, product_id: int, delta: int) -> AdjustmentResult:
        product = uow.products.get_for_update(product_id)
        if product is None:
            return StockAdjustmentFailed(
                EntityNotFoundError(f"Product #{product_id} not found")
            )

        previous = product.stock
        try:
            product.adjust_stock(delta)
        except InsufficientStockError as exc:
            return StockAdjustmentFailed(exc)

        uow.products.save(product)
        logger.debug(
            "Product %s (#%s) stock %s -> %s", product.name, product.id, previous, product.stock
        )
        return StockAdjusted(
            item_kind="product",
            item_id=product_id,
            item_name=product.name,
            previous=previous,
            current=product.stock,
        )
