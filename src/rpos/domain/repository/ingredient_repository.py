"""Abstract repository for Ingredient aggregate."""

from __future__ import annotations

from abc import ABC, abstractmethod
from decimal import Decimal

from rpos.domain.model.ingredient import Ingredient


class IngredientRepository(ABC):

    @abstractmethod
    def get_by_id(self, ingredient_id: int) -> Ingredient | None:
        """Return an ingredient by its ID, or None if not found."""

    @abstractmethod
    def get_for_update(self, ingredient_id: int) -> Ingredient | None:
        """Return an ingredient by its ID, locking its row until the unit of work ends."""

    @abstractmethod
    def list_at_or_below(self, threshold: Decimal) -> list[Ingredient]:
        """Return ingredients with stock <= threshold, lowest stock first."""

    @abstractmethod
    def save(self, ingredient: Ingredient) -> None:
        """Persist a new or updated ingredient."""
