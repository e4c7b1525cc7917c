"""SQLAlchemy-backed repositories.

Each repository works on the Session owned by its unit of work and
never commits on its own.  ``get_for_update`` issues
``SELECT ... FOR UPDATE`` and refreshes any row already in the
identity map, so a value validated under the lock is the committed one.
"""

from __future__ import annotations

from dataclasses import replace
from datetime import timezone
from decimal import Decimal

from sqlalchemy import select
from sqlalchemy.orm import Session

from rpos.domain.model.ingredient import Ingredient, UnitOfMeasure
from rpos.domain.model.order import (
    ACTIVE_STATUSES,
    Order,
    OrderItem,
    OrderStatus,
    OrderType,
    PaymentMethod,
)
from rpos.domain.model.product import Product, ProductCategory
from rpos.domain.model.recipe import Recipe, RecipeItem
from rpos.domain.model.value_objects import Money, Quantity
from rpos.domain.repository.ingredient_repository import IngredientRepository
from rpos.domain.repository.order_repository import OrderRepository
from rpos.domain.repository.product_repository import ProductRepository
from rpos.domain.repository.recipe_repository import RecipeRepository
from rpos.infrastructure.persistence.orm import (
    IngredientRow,
    OrderItemRow,
    OrderRow,
    ProductRow,
    RecipeItemRow,
    RecipeRow,
)


def _locked(stmt):
    return stmt.with_for_update().execution_options(populate_existing=True)


def _money(amount: Decimal | None, currency: str = "USD") -> Money | None:
    return None if amount is None else Money(Decimal(amount), currency)


def _aware(value):
    # SQLite hands back naive datetimes; everything stored is UTC.
    if value is not None and value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


class SqlAlchemyProductRepository(ProductRepository):

    def __init__(self, session: Session, currency: str = "USD") -> None:
        self._session = session
        self._currency = currency

    # --- ProductRepository interface ------------------------------------------

    def get_by_id(self, product_id: int) -> Product | None:
        row = self._session.get(ProductRow, product_id)
        return None if row is None else self._to_domain(row)

    def get_for_update(self, product_id: int) -> Product | None:
        row = self._session.execute(
            _locked(select(ProductRow).where(ProductRow.id == product_id))
        ).scalar_one_or_none()
        return None if row is None else self._to_domain(row)

    def list_all(self) -> list[Product]:
        rows = self._session.execute(select(ProductRow).order_by(ProductRow.id)).scalars()
        return [self._to_domain(row) for row in rows]

    def save(self, product: Product) -> None:
        row = self._session.get(ProductRow, product.id) if product.id is not None else None
        if row is None:
            row = ProductRow(id=product.id)
            self._session.add(row)
        row.name = product.name
        row.description = product.description
        row.price = product.price.amount
        row.cost = product.cost.amount if product.cost is not None else None
        row.stock = product.stock
        row.manage_stock = product.manage_stock
        row.is_active = product.is_active
        row.category = product.category.value
        self._session.flush()
        product.id = row.id

    # --- Mapping --------------------------------------------------------------

    def _to_domain(self, row: ProductRow) -> Product:
        return Product(
            id=row.id,
            name=row.name,
            price=_money(row.price, self._currency),  # type: ignore[arg-type]
            manage_stock=row.manage_stock,
            stock=row.stock,
            is_active=row.is_active,
            cost=_money(row.cost, self._currency),
            category=ProductCategory(row.category),
            description=row.description,
        )


class SqlAlchemyIngredientRepository(IngredientRepository):

    def __init__(self, session: Session, currency: str = "USD") -> None:
        self._session = session
        self._currency = currency

    # --- IngredientRepository interface ---------------------------------------

    def get_by_id(self, ingredient_id: int) -> Ingredient | None:
        row = self._session.get(IngredientRow, ingredient_id)
        return None if row is None else ingredient_to_domain(row, self._currency)

    def get_for_update(self, ingredient_id: int) -> Ingredient | None:
        row = self._session.execute(
            _locked(select(IngredientRow).where(IngredientRow.id == ingredient_id))
        ).scalar_one_or_none()
        return None if row is None else ingredient_to_domain(row, self._currency)

    def list_at_or_below(self, threshold: Decimal) -> list[Ingredient]:
        rows = self._session.execute(
            select(IngredientRow)
            .where(IngredientRow.stock <= threshold)
            .order_by(IngredientRow.stock, IngredientRow.id)
        ).scalars()
        return [ingredient_to_domain(row, self._currency) for row in rows]

    def save(self, ingredient: Ingredient) -> None:
        row = (
            self._session.get(IngredientRow, ingredient.id)
            if ingredient.id is not None
            else None
        )
        if row is None:
            row = IngredientRow(id=ingredient.id)
            self._session.add(row)
        row.name = ingredient.name
        row.description = ingredient.description
        row.unit_of_measure = ingredient.unit_of_measure.value
        row.stock = ingredient.stock
        row.low_stock_threshold = ingredient.low_stock_threshold
        row.cost_price = ingredient.cost_price.amount if ingredient.cost_price else None
        row.supplier = ingredient.supplier
        self._session.flush()
        ingredient.id = row.id


def ingredient_to_domain(row: IngredientRow, currency: str = "USD") -> Ingredient:
    return Ingredient(
        id=row.id,
        name=row.name,
        stock=Decimal(row.stock),
        unit_of_measure=UnitOfMeasure(row.unit_of_measure),
        low_stock_threshold=(
            None if row.low_stock_threshold is None else Decimal(row.low_stock_threshold)
        ),
        cost_price=_money(row.cost_price, currency),
        supplier=row.supplier,
        description=row.description,
    )


class SqlAlchemyRecipeRepository(RecipeRepository):

    def __init__(self, session: Session, currency: str = "USD") -> None:
        self._session = session
        self._currency = currency

    def get_by_product_id(self, product_id: int) -> Recipe | None:
        row = self._session.execute(
            select(RecipeRow).where(RecipeRow.product_id == product_id)
        ).scalar_one_or_none()
        if row is None:
            return None
        return Recipe(
            id=row.id,
            product_id=row.product_id,
            name=row.name,
            description=row.description,
            notes=row.notes,
            items=[
                RecipeItem(
                    id=item.id,
                    ingredient_id=item.ingredient_id,
                    quantity=Decimal(item.quantity),
                    notes=item.notes,
                    ingredient=(
                        None
                        if item.ingredient is None
                        else ingredient_to_domain(item.ingredient, self._currency)
                    ),
                )
                for item in row.items
            ],
        )

    def save(self, recipe: Recipe) -> None:
        row = self._session.get(RecipeRow, recipe.id) if recipe.id is not None else None
        if row is None:
            row = RecipeRow(id=recipe.id, product_id=recipe.product_id)
            self._session.add(row)
        row.name = recipe.name
        row.description = recipe.description
        row.notes = recipe.notes
        row.items = [
            RecipeItemRow(
                ingredient_id=item.ingredient_id,
                quantity=item.quantity,
                notes=item.notes,
            )
            for item in recipe.items
        ]
        self._session.flush()
        recipe.id = row.id
        for item, item_row in zip(recipe.items, row.items):
            item.id = item_row.id


class SqlAlchemyOrderRepository(OrderRepository):

    def __init__(self, session: Session) -> None:
        self._session = session

    # --- OrderRepository interface --------------------------------------------

    def get_by_id(self, order_id: int) -> Order | None:
        row = self._session.get(OrderRow, order_id)
        return None if row is None else self._to_domain(row)

    def get_for_update(self, order_id: int) -> Order | None:
        row = self._session.execute(
            _locked(select(OrderRow).where(OrderRow.id == order_id))
        ).scalar_one_or_none()
        return None if row is None else self._to_domain(row)

    def list_active(self) -> list[Order]:
        rows = self._session.execute(
            select(OrderRow)
            .where(OrderRow.status.in_([s.value for s in ACTIVE_STATUSES]))
            .order_by(OrderRow.created_at, OrderRow.id)
        ).scalars()
        return [self._to_domain(row) for row in rows]

    def save(self, order: Order) -> None:
        row = self._session.get(OrderRow, order.id) if order.id is not None else None
        if row is None:
            row = OrderRow(
                created_by_id=order.created_by_id,
                created_at=order.created_at,
                items=[
                    OrderItemRow(
                        product_id=item.product_id,
                        product_name=item.product_name,
                        quantity=item.quantity.value,
                        price=item.price.amount,
                    )
                    for item in order.items
                ],
            )
            self._session.add(row)

        row.type = order.type.value
        row.status = order.status.value
        row.payment_method = order.payment_method.value
        row.customer_name = order.customer_name
        row.customer_phone = order.customer_phone
        row.address = order.address
        row.notes = order.notes
        row.total = order.total.amount
        row.currency = order.total.currency
        row.updated_at = order.updated_at
        self._session.flush()

        order.id = row.id
        order.items = [
            replace(item, id=item_row.id) for item, item_row in zip(order.items, row.items)
        ]

    # --- Mapping --------------------------------------------------------------

    @staticmethod
    def _to_domain(row: OrderRow) -> Order:
        return Order(
            id=row.id,
            customer_name=row.customer_name,
            items=[
                OrderItem(
                    id=item.id,
                    product_id=item.product_id,
                    product_name=item.product_name,
                    quantity=Quantity(item.quantity),
                    price=Money(Decimal(item.price), row.currency),
                )
                for item in row.items
            ],
            created_by_id=row.created_by_id,
            type=OrderType(row.type),
            payment_method=PaymentMethod(row.payment_method),
            status=OrderStatus(row.status),
            customer_phone=row.customer_phone,
            address=row.address,
            notes=row.notes,
            total=Money(Decimal(row.total), row.currency),
            created_at=_aware(row.created_at),
            updated_at=_aware(row.updated_at),
        )
