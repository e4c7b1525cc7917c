"""Application service: Create Order use case.

Resolves each requested product, snapshots its *current* price onto the
line item and lets the Order aggregate validate the rest.  Creation
never touches stock; only completion does.
"""

from __future__ import annotations

import logging

from rpos.application.dto import OrderDTO, OrderItemSpec, OrderMetadata, order_to_dto
from rpos.domain.exceptions import EntityNotFoundError, InvalidProductError
from rpos.domain.model.order import Order, OrderItem
from rpos.domain.model.value_objects import Quantity
from rpos.domain.repository.unit_of_work import UnitOfWork

logger = logging.getLogger(__name__)


class CreateOrderHandler:

    def __init__(self, uow: UnitOfWork) -> None:
        self._uow = uow

    def handle(self, metadata: OrderMetadata, item_specs: list[OrderItemSpec]) -> OrderDTO:
        """Create a new pending order.

        Steps:
        1. Resolve each product id to an active Product.
        2. Build OrderItems with *current* prices (snapshot).
        3. Let the Order aggregate validate and compute the total.
        4. Persist and return a DTO.
        """
        with self._uow as uow:
            items: list[OrderItem] = []
            for spec in item_specs:
                product = uow.products.get_by_id(spec.product_id)
                if product is None:
                    raise EntityNotFoundError(f"Product #{spec.product_id} not found")
                if not product.is_active:
                    raise InvalidProductError(
                        f"Product {product.name} (#{product.id}) is not active"
                    )
                items.append(
                    OrderItem(
                        product_id=product.id,  # type: ignore[arg-type]
                        product_name=product.name,
                        quantity=Quantity(spec.quantity),
                        price=product.price,  # <-- price snapshot
                    )
                )

            order = Order.create(
                customer_name=metadata.customer_name,
                items=items,
                created_by_id=metadata.created_by_id,
                type=metadata.type,
                payment_method=metadata.payment_method,
                customer_phone=metadata.customer_phone,
                address=metadata.address,
                notes=metadata.notes,
            )
            uow.orders.save(order)
            uow.commit()

        logger.info("Order #%s created for %s, total %s", order.id, order.customer_name, order.total)
        return order_to_dto(order)
