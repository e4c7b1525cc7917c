"""Tests for starting, showing and listing orders."""

from datetime import datetime, timedelta, timezone

import pytest

from rpos.application.show_order import ListActiveOrdersHandler, ShowOrderHandler
from rpos.application.start_order import StartOrderHandler
from rpos.domain.exceptions import EntityNotFoundError, InvalidTransitionError
from rpos.domain.model.order import Order, OrderItem, OrderStatus
from rpos.domain.model.value_objects import Money, Quantity
from tests.fakes import FakeUnitOfWork


def _order(order_id: int, status: OrderStatus, minutes_ago: int) -> Order:
    order = Order.create(
        f"Customer {order_id}",
        [OrderItem(product_id=1, product_name="Pizza", quantity=Quantity(1), price=Money.of("12.50"))],
        created_by_id=1,
    )
    order.id = order_id
    order.status = status
    order.created_at = datetime(2024, 1, 1, 12, 0, tzinfo=timezone.utc) - timedelta(minutes=minutes_ago)
    return order


def _setup() -> FakeUnitOfWork:
    return FakeUnitOfWork(
        orders=[
            _order(1, OrderStatus.PENDING, minutes_ago=5),
            _order(2, OrderStatus.IN_PROGRESS, minutes_ago=30),
            _order(3, OrderStatus.COMPLETED, minutes_ago=60),
            _order(4, OrderStatus.CANCELLED, minutes_ago=90),
        ]
    )


class TestStartOrder:

    def test_pending_to_in_progress(self):
        uow = _setup()
        dto = StartOrderHandler(uow).handle(1)
        assert dto.status == "in_progress"
        assert uow.stores["orders"][1].status == OrderStatus.IN_PROGRESS
        assert uow.commits == 1

    def test_already_started_rejected(self):
        uow = _setup()
        with pytest.raises(InvalidTransitionError):
            StartOrderHandler(uow).handle(2)

    def test_unknown_order(self):
        with pytest.raises(EntityNotFoundError):
            StartOrderHandler(_setup()).handle(9)


class TestShowOrder:

    def test_show(self):
        dto = ShowOrderHandler(_setup()).handle(3)
        assert dto.id == 3
        assert dto.status == "completed"
        assert dto.items[0].line_total == "$12.50"
        assert dto.created_at == "2024-01-01 11:00 UTC"

    def test_show_unknown(self):
        with pytest.raises(EntityNotFoundError, match="Order #9"):
            ShowOrderHandler(_setup()).handle(9)


class TestListActiveOrders:

    def test_only_pending_and_in_progress_oldest_first(self):
        dtos = ListActiveOrdersHandler(_setup()).handle()
        assert [d.id for d in dtos] == [2, 1]

    def test_empty(self):
        assert ListActiveOrdersHandler(FakeUnitOfWork()).handle() == []
