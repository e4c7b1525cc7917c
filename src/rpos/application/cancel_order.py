"""Application service: Cancel Order use case.

If the order was COMPLETED, its stock is restored (through the same
coordinator routine that consumed it) before cancelling.  PENDING and
IN_PROGRESS orders never consumed anything and are cancelled without
touching stock.
"""

from __future__ import annotations

import logging

from rpos.application.dto import OrderDTO, order_to_dto
from rpos.domain.exceptions import EntityNotFoundError
from rpos.domain.repository.unit_of_work import UnitOfWork
from rpos.domain.service.stock_adjustment_coordinator import StockAdjustmentCoordinator

logger = logging.getLogger(__name__)


class CancelOrderHandler:

    def __init__(
        self,
        uow: UnitOfWork,
        coordinator: StockAdjustmentCoordinator | None = None,
    ) -> None:
        self._uow = uow
        self._coordinator = coordinator or StockAdjustmentCoordinator()

    def handle(self, order_id: int) -> OrderDTO:
        with self._uow as uow:
            order = uow.orders.get_for_update(order_id)
            if order is None:
                raise EntityNotFoundError(f"Order #{order_id} not found")

            was_completed = order.is_completed
            if was_completed:
                outcome = self._coordinator.restore(uow, order)
                outcome.raise_for_failure()

            order.cancel()
            uow.orders.save(order)
            uow.commit()

        logger.info(
            "Order #%s cancelled%s", order_id, " and stock restored" if was_completed else ""
        )
        return order_to_dto(order)
