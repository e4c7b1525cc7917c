"""Domain service: Recipe Resolver (read-only)."""

from __future__ import annotations

from rpos.domain.model.product import Product, StockStrategy, resolve_stock_strategy
from rpos.domain.model.recipe import Recipe
from rpos.domain.repository.unit_of_work import UnitOfWork


class RecipeResolver:

    def resolve(self, uow: UnitOfWork, product_id: int) -> Recipe | None:
        """Return the product's recipe with ingredients attached, or None."""
        return uow.recipes.get_by_product_id(product_id)

    def strategy_for(self, uow: UnitOfWork, product: Product) -> StockStrategy:
        """Resolve once how selling ``product`` affects stock."""
        # A directly managed product never explodes through its recipe.
        recipe = None if product.manage_stock else self.resolve(uow, product.id)  # type: ignore[arg-type]
        return resolve_stock_strategy(product, recipe)
