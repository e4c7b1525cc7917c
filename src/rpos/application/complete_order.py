"""Application service: Complete Order use case.

Consumes stock for every line item (through the coordinator) and only
then marks the order completed, all in one unit of work.  Completing an
order that is already completed is a no-op: stock is never deducted
twice.
"""

from __future__ import annotations

import logging

from rpos.application.dto import OrderDTO, order_to_dto
from rpos.domain.exceptions import EntityNotFoundError, InvalidTransitionError
from rpos.domain.model.order import OrderStatus
from rpos.domain.repository.unit_of_work import UnitOfWork
from rpos.domain.service.stock_adjustment_coordinator import StockAdjustmentCoordinator

logger = logging.getLogger(__name__)


class CompleteOrderHandler:

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

            if order.status == OrderStatus.CANCELLED:
                raise InvalidTransitionError(
                    f"Order #{order_id} is cancelled and cannot be completed"
                )
            if order.is_completed:
                logger.warning("Order #%s is already completed; nothing to do", order_id)
                return order_to_dto(order)

            outcome = self._coordinator.consume(uow, order)
            outcome.raise_for_failure()

            order.complete()
            uow.orders.save(order)
            uow.commit()

        logger.info("Order #%s completed and stock deducted", order_id)
        return order_to_dto(order)
