"""Application service: Low Stock Ingredients use case (query)."""

from __future__ import annotations

from decimal import Decimal

from rpos.application.dto import IngredientDTO, ingredient_to_dto
from rpos.domain.repository.unit_of_work import UnitOfWork

DEFAULT_LOW_STOCK_THRESHOLD = Decimal("10")


class ShowLowStockHandler:

    def __init__(self, uow: UnitOfWork, default_threshold: Decimal = DEFAULT_LOW_STOCK_THRESHOLD) -> None:
        self._uow = uow
        self._default_threshold = default_threshold

    def handle(self, threshold: Decimal | None = None) -> list[IngredientDTO]:
        limit = self._default_threshold if threshold is None else threshold
        with self._uow as uow:
            ingredients = uow.ingredients.list_at_or_below(limit)
        return [ingredient_to_dto(i) for i in ingredients]
