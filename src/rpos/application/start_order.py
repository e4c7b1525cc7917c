"""Application service: Start Order use case (pending -> in progress)."""

from __future__ import annotations

from rpos.application.dto import OrderDTO, order_to_dto
from rpos.domain.exceptions import EntityNotFoundError
from rpos.domain.repository.unit_of_work import UnitOfWork


class StartOrderHandler:

    def __init__(self, uow: UnitOfWork) -> None:
        self._uow = uow

    def handle(self, order_id: int) -> OrderDTO:
        with self._uow as uow:
            order = uow.orders.get_for_update(order_id)
            if order is None:
                raise EntityNotFoundError(f"Order #{order_id} not found")

            order.start()
            uow.orders.save(order)
            uow.commit()

        return order_to_dto(order)
