"""Abstract repository for the Recipe aggregate."""

from __future__ import annotations

from abc import ABC, abstractmethod

from rpos.domain.model.recipe import Recipe


class RecipeRepository(ABC):

    @abstractmethod
    def get_by_product_id(self, product_id: int) -> Recipe | None:
        """Return the product's recipe with every item's ingredient attached.

        An item whose ingredient row no longer exists is returned with
        ``ingredient=None`` rather than dropped.
        """

    @abstractmethod
    def save(self, recipe: Recipe) -> None:
        """Persist a new or updated recipe together with its items."""
