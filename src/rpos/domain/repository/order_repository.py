"""Abstract repository for Order aggregate."""

from __future__ import annotations

from abc import ABC, abstractmethod

from rpos.domain.model.order import Order


class OrderRepository(ABC):

    @abstractmethod
    def get_by_id(self, order_id: int) -> Order | None:
        """Return an order by its ID, or None if not found."""

    @abstractmethod
    def get_for_update(self, order_id: int) -> Order | None:
        """Return an order by its ID, locking its row until the unit of work ends."""

    @abstractmethod
    def list_active(self) -> list[Order]:
        """Return pending and in-progress orders, oldest first."""

    @abstractmethod
    def save(self, order: Order) -> None:
        """Persist a new or updated order.

        New orders get their ID (and their items' IDs) assigned here.
        """
