"""Abstract repository for Product aggregate.

Defined in the domain layer so the domain never depends on
infrastructure. Concrete implementations (SQL, in-memory) live in the
infrastructure layer and in the test fakes.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from rpos.domain.model.product import Product


class ProductRepository(ABC):

    @abstractmethod
    def get_by_id(self, product_id: int) -> Product | None:
        """Return a product by its ID, or None if not found."""

    @abstractmethod
    def get_for_update(self, product_id: int) -> Product | None:
        """Return a product by its ID, locking its row until the unit of work ends."""

    @abstractmethod
    def list_all(self) -> list[Product]:
        """Return every product on the menu."""

    @abstractmethod
    def save(self, product: Product) -> None:
        """Persist a new or updated product."""
