"""Order aggregate — the core of the domain.

The Order is an aggregate root that owns its line items. Items are
fixed at creation; only the status moves afterwards:

    PENDING -> IN_PROGRESS -> COMPLETED
    PENDING | IN_PROGRESS -> CANCELLED
    COMPLETED -> CANCELLED   (stock is restored by the caller)
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum

from rpos.domain.exceptions import InvalidTransitionError, ValidationError
from rpos.domain.model.value_objects import Money, Quantity


class OrderStatus(Enum):
    PENDING = "pending"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class OrderType(Enum):
    DINE_IN = "dine_in"
    TAKEAWAY = "takeaway"
    DELIVERY = "delivery"


class PaymentMethod(Enum):
    CASH = "cash"
    CREDIT_CARD = "credit_card"
    DEBIT_CARD = "debit_card"
    TRANSFER = "transfer"
    OTHER = "other"


ACTIVE_STATUSES = (OrderStatus.PENDING, OrderStatus.IN_PROGRESS)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class OrderItem:
    """Captures the price snapshot of a product at order-creation time."""

    product_id: int
    product_name: str
    quantity: Quantity
    price: Money  # locked at order-creation time
    id: int | None = None

    @property
    def line_total(self) -> Money:
        return self.price * self.quantity.value


@dataclass
class Order:
    """Aggregate root for restaurant orders.

    Use the ``Order.create()`` factory for new orders — it enforces all
    business rules.  The ``__init__`` is intentionally simple so the
    repository can reconstitute persisted orders without re-validating.
    """

    id: int | None
    customer_name: str
    items: list[OrderItem]
    created_by_id: int
    type: OrderType = OrderType.DINE_IN
    payment_method: PaymentMethod = PaymentMethod.CASH
    status: OrderStatus = OrderStatus.PENDING
    customer_phone: str | None = None
    address: str | None = None
    notes: str | None = None
    total: Money = field(default_factory=Money.zero)
    created_at: datetime = field(default_factory=_utcnow)
    updated_at: datetime = field(default_factory=_utcnow)

    # --- Factory (used for NEW orders only) -----------------------------------

    @staticmethod
    def create(
        customer_name: str,
        items: list[OrderItem],
        created_by_id: int,
        type: OrderType = OrderType.DINE_IN,
        payment_method: PaymentMethod = PaymentMethod.CASH,
        customer_phone: str | None = None,
        address: str | None = None,
        notes: str | None = None,
    ) -> Order:
        """Create a new order, enforcing all invariants."""
        if not customer_name or not customer_name.strip():
            raise ValidationError("Customer name is required")

        if not items:
            raise ValidationError("Order must contain at least one item")

        order = Order(
            id=None,
            customer_name=customer_name.strip(),
            items=list(items),
            created_by_id=created_by_id,
            type=type,
            payment_method=payment_method,
            customer_phone=customer_phone,
            address=address,
            notes=notes,
        )
        order.total = order.computed_total()
        return order

    # --- State transitions ----------------------------------------------------

    def start(self) -> None:
        """Transition PENDING -> IN_PROGRESS."""
        if self.status != OrderStatus.PENDING:
            raise InvalidTransitionError(
                f"Cannot start order #{self.id}: current status is "
                f"{self.status.value}, expected pending"
            )
        self._move_to(OrderStatus.IN_PROGRESS)

    def complete(self) -> None:
        """Transition PENDING|IN_PROGRESS -> COMPLETED.

        Stock consumption must happen *before* calling this (coordinated
        by the application handler).
        """
        if self.status == OrderStatus.CANCELLED:
            raise InvalidTransitionError(
                f"Order #{self.id} is cancelled and cannot be completed"
            )
        if self.status == OrderStatus.COMPLETED:
            raise InvalidTransitionError(f"Order #{self.id} is already completed")
        self._move_to(OrderStatus.COMPLETED)

    def cancel(self) -> None:
        """Transition any non-cancelled status -> CANCELLED.

        If the order was COMPLETED, stock restoration must happen
        *before* calling this.
        """
        if self.status == OrderStatus.CANCELLED:
            raise InvalidTransitionError(f"Order #{self.id} is already cancelled")
        self._move_to(OrderStatus.CANCELLED)

    # --- Computed properties --------------------------------------------------

    @property
    def is_completed(self) -> bool:
        return self.status == OrderStatus.COMPLETED

    @property
    def is_active(self) -> bool:
        return self.status in ACTIVE_STATUSES

    def computed_total(self) -> Money:
        if not self.items:
            return Money.zero()
        result = Money.zero(self.items[0].price.currency)
        for item in self.items:
            result = result + item.line_total
        return result.rounded()

    # --- Internal helpers -----------------------------------------------------

    def _move_to(self, status: OrderStatus) -> None:
        self.status = status
        self.updated_at = _utcnow()
