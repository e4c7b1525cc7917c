"""Application service: Show Recipe use case (query)."""

from __future__ import annotations

import logging

from rpos.application.dto import RecipeDTO
from rpos.domain.exceptions import EntityNotFoundError, ValidationError
from rpos.domain.repository.unit_of_work import UnitOfWork
from rpos.domain.service.recipe_resolver import RecipeResolver

logger = logging.getLogger(__name__)


class ShowRecipeHandler:

    def __init__(self, uow: UnitOfWork, resolver: RecipeResolver | None = None) -> None:
        self._uow = uow
        self._resolver = resolver or RecipeResolver()

    def handle(self, product_id: int) -> RecipeDTO:
        with self._uow as uow:
            recipe = self._resolver.resolve(uow, product_id)
        if recipe is None:
            raise EntityNotFoundError(f"Product #{product_id} has no recipe")

        missing = sorted(item.ingredient_id for item in recipe.missing_ingredients)
        cost: str | None = None
        if missing:
            logger.warning(
                "Recipe for product #%s references missing ingredient(s) %s",
                product_id, missing,
            )
        else:
            try:
                cost = str(recipe.estimated_cost())
            except ValidationError:
                # An unpriced ingredient only hides the estimate.
                cost = None

        return RecipeDTO(
            product_id=product_id,
            name=recipe.name,
            lines=[
                (
                    item.ingredient.name if item.ingredient else f"<missing #{item.ingredient_id}>",
                    str(item.quantity),
                    item.ingredient.unit_of_measure.value if item.ingredient else "?",
                )
                for item in recipe.items
            ],
            estimated_cost=cost,
            missing_ingredient_ids=missing,
        )
