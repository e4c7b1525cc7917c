"""Data Transfer Objects — plain containers that cross layer boundaries.

DTOs carry data between the CLI and application layers without
exposing domain internals to the outside world.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from rpos.domain.model.ingredient import Ingredient
from rpos.domain.model.order import Order, OrderType, PaymentMethod


@dataclass(frozen=True)
class OrderItemSpec:
    """Input: what the customer asked for (product id + quantity)."""

    product_id: int
    quantity: int


@dataclass(frozen=True)
class OrderMetadata:
    """Input: everything about a new order except its items."""

    customer_name: str
    created_by_id: int
    type: OrderType = OrderType.DINE_IN
    payment_method: PaymentMethod = PaymentMethod.CASH
    customer_phone: str | None = None
    address: str | None = None
    notes: str | None = None


@dataclass(frozen=True)
class OrderItemDTO:
    """Output: a single line item as displayed to the user."""

    product_id: int
    product_name: str
    quantity: int
    price: str  # formatted, e.g. "$15.00"
    line_total: str


@dataclass(frozen=True)
class OrderDTO:
    """Output: a complete order as displayed to the user."""

    id: int
    customer_name: str
    status: str
    type: str
    payment_method: str
    items: list[OrderItemDTO]
    total: str
    created_at: str


@dataclass(frozen=True)
class IngredientDTO:
    id: int
    name: str
    stock: str
    unit: str
    low_stock_threshold: str | None
    is_low_stock: bool


@dataclass(frozen=True)
class RecipeDTO:
    product_id: int
    name: str
    lines: list[tuple[str, str, str]] = field(default_factory=list)  # (ingredient, qty, unit)
    estimated_cost: str | None = None
    missing_ingredient_ids: list[int] = field(default_factory=list)


def order_to_dto(order: Order) -> OrderDTO:
    return OrderDTO(
        id=order.id,  # type: ignore[arg-type]
        customer_name=order.customer_name,
        status=order.status.value,
        type=order.type.value,
        payment_method=order.payment_method.value,
        items=[
            OrderItemDTO(
                product_id=item.product_id,
                product_name=item.product_name,
                quantity=item.quantity.value,
                price=str(item.price),
                line_total=str(item.line_total),
            )
            for item in order.items
        ],
        total=str(order.total),
        created_at=order.created_at.strftime("%Y-%m-%d %H:%M UTC"),
    )


def ingredient_to_dto(ingredient: Ingredient) -> IngredientDTO:
    threshold = ingredient.low_stock_threshold
    return IngredientDTO(
        id=ingredient.id,  # type: ignore[arg-type]
        name=ingredient.name,
        stock=str(ingredient.stock),
        unit=ingredient.unit_of_measure.value,
        low_stock_threshold=None if threshold is None else str(threshold),
        is_low_stock=ingredient.is_low_stock,
    )
