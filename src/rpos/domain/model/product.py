"""Product aggregate.

Products live independently of orders. A product is sold in one of
three ways, decided once per product by ``resolve_stock_strategy``:

- ``DirectManaged``: its own ``stock`` counter is decremented.
- ``RecipeBased``: its recipe's ingredients are consumed.
- ``Unmanaged``: unlimited, no stock effect.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Union

from rpos.domain.exceptions import InsufficientStockError
from rpos.domain.model.recipe import Recipe
from rpos.domain.model.value_objects import Money


class ProductCategory(Enum):
    DRINKS = "drinks"
    MAINS = "mains"
    STARTERS = "starters"
    DESSERTS = "desserts"
    SNACKS = "snacks"
    OTHER = "other"


@dataclass
class Product:
    """A product on the menu.

    ``stock`` is meaningful only when ``manage_stock`` is true.
    """

    id: int | None
    name: str
    price: Money
    manage_stock: bool = True
    stock: int = 0
    is_active: bool = True
    cost: Money | None = None
    category: ProductCategory = ProductCategory.OTHER
    description: str | None = None

    def adjust_stock(self, delta: int) -> int:
        """Apply a signed change to the direct stock counter."""
        new_stock = self.stock + delta
        if new_stock < 0:
            raise InsufficientStockError(
                item_kind="product",
                item_id=self.id,  # type: ignore[arg-type]
                item_name=self.name,
                available=self.stock,
                requested=-delta,
            )
        self.stock = new_stock
        return new_stock


# --- Stock strategy ----------------------------------------------------------


@dataclass(frozen=True)
class DirectManaged:
    product: Product


@dataclass(frozen=True)
class RecipeBased:
    product: Product
    recipe: Recipe


@dataclass(frozen=True)
class Unmanaged:
    product: Product


StockStrategy = Union[DirectManaged, RecipeBased, Unmanaged]


def resolve_stock_strategy(product: Product, recipe: Recipe | None) -> StockStrategy:
    """Decide how selling ``product`` affects stock.

    ``manage_stock`` wins over a recipe; a recipe with no lines counts
    as no recipe at all.
    """
    if product.manage_stock:
        return DirectManaged(product)
    if recipe is not None and recipe.items:
        return RecipeBased(product, recipe)
    return Unmanaged(product)
