"""Application service: Show Order use case (query)."""

from __future__ import annotations

from rpos.application.dto import OrderDTO, order_to_dto
from rpos.domain.exceptions import EntityNotFoundError
from rpos.domain.repository.unit_of_work import UnitOfWork


class ShowOrderHandler:

    def __init__(self, uow: UnitOfWork) -> None:
        self._uow = uow

    def handle(self, order_id: int) -> OrderDTO:
        with self._uow as uow:
            order = uow.orders.get_by_id(order_id)
        if order is None:
            raise EntityNotFoundError(f"Order #{order_id} not found")
        return order_to_dto(order)


class ListActiveOrdersHandler:

    def __init__(self, uow: UnitOfWork) -> None:
        self._uow = uow

    def handle(self) -> list[OrderDTO]:
        with self._uow as uow:
            orders = uow.orders.list_active()
        return [order_to_dto(order) for order in orders]
