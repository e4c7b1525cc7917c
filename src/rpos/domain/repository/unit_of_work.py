"""Abstract unit of work.

One instance spans one transaction. Every repository handed out by it
shares that transaction, so the coordinator, the ledger and the resolver
see the same snapshot and commit (or roll back) together.

Usage::

    with uow:
        ...
        uow.commit()

Leaving the block without ``commit()`` rolls everything back.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from rpos.domain.repository.ingredient_repository import IngredientRepository
from rpos.domain.repository.order_repository import OrderRepository
from rpos.domain.repository.product_repository import ProductRepository
from rpos.domain.repository.recipe_repository import RecipeRepository


class UnitOfWork(ABC):

    products: ProductRepository
    ingredients: IngredientRepository
    recipes: RecipeRepository
    orders: OrderRepository

    def __enter__(self) -> UnitOfWork:
        return self

    def __exit__(self, *args) -> None:
        self.rollback()

    @abstractmethod
    def commit(self) -> None:
        """Make every change since the last commit durable."""

    @abstractmethod
    def rollback(self) -> None:
        """Discard every change since the last commit."""
