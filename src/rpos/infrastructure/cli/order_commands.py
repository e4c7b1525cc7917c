"""CLI commands for the Order aggregate."""

from __future__ import annotations

import click

from rpos.application.cancel_order import CancelOrderHandler
from rpos.application.complete_order import CompleteOrderHandler
from rpos.application.create_order import CreateOrderHandler
from rpos.application.dto import OrderDTO, OrderItemSpec, OrderMetadata
from rpos.application.show_order import ListActiveOrdersHandler, ShowOrderHandler
from rpos.application.start_order import StartOrderHandler
from rpos.domain.exceptions import DomainException
from rpos.domain.model.order import OrderType, PaymentMethod
from rpos.infrastructure import bootstrap
from rpos.infrastructure.cli.errors import to_click_error


def _parse_items(raw: str) -> list[OrderItemSpec]:
    """Parse '3:2,7:1' (productId:quantity) into OrderItemSpec list."""
    specs: list[OrderItemSpec] = []
    for pair in raw.split(","):
        pair = pair.strip()
        if ":" not in pair:
            raise click.BadParameter(
                f"Invalid item format '{pair}'. Expected 'ProductId:Quantity'."
            )
        pid_str, qty_str = pair.rsplit(":", 1)
        try:
            specs.append(OrderItemSpec(product_id=int(pid_str), quantity=int(qty_str)))
        except ValueError:
            raise click.BadParameter(f"Invalid item '{pair}'. Both parts must be integers.")
    return specs


def _display_order(dto: OrderDTO) -> None:
    """Shared formatting for displaying an order."""
    click.echo(f"Order #{dto.id}  (status={dto.status}, type={dto.type})")
    click.echo(f"Customer: {dto.customer_name}")
    click.echo(f"Payment:  {dto.payment_method}")
    click.echo(f"Created:  {dto.created_at}")
    click.echo()
    click.echo(f"  {'Product':<20} {'Qty':>5} {'Price':>10} {'Total':>10}")
    click.echo(f"  {'-'*47}")
    for item in dto.items:
        click.echo(
            f"  {item.product_name:<20} {item.quantity:>5} {item.price:>10} {item.line_total:>10}"
        )
    click.echo(f"  {'-'*47}")
    click.echo(f"  {'Order Total':<27} {dto.total:>20}")


@click.command("create")
@click.option("--customer", required=True, help="Customer name.")
@click.option("--items", required=True, help="Items as 'ProductId:Qty,ProductId:Qty'.")
@click.option(
    "--type", "order_type",
    type=click.Choice([t.value for t in OrderType]), default=OrderType.DINE_IN.value,
    show_default=True, help="Order type.",
)
@click.option(
    "--payment",
    type=click.Choice([p.value for p in PaymentMethod]), default=PaymentMethod.CASH.value,
    show_default=True, help="Payment method.",
)
@click.option("--user", "user_id", type=int, default=1, show_default=True, help="Creating user ID.")
@click.option("--phone", default=None, help="Customer phone.")
@click.option("--address", default=None, help="Delivery address.")
@click.option("--notes", default=None, help="Free-form notes.")
def order_create(
    customer: str,
    items: str,
    order_type: str,
    payment: str,
    user_id: int,
    phone: str | None,
    address: str | None,
    notes: str | None,
) -> None:
    """Create a new pending order."""
    specs = _parse_items(items)
    metadata = OrderMetadata(
        customer_name=customer,
        created_by_id=user_id,
        type=OrderType(order_type),
        payment_method=PaymentMethod(payment),
        customer_phone=phone,
        address=address,
        notes=notes,
    )

    handler = CreateOrderHandler(bootstrap.unit_of_work())

    try:
        dto = handler.handle(metadata, specs)
    except DomainException as exc:
        raise to_click_error(exc)

    _display_order(dto)


@click.command("show")
@click.option("--id", "order_id", required=True, type=int, help="Order ID to display.")
def order_show(order_id: int) -> None:
    """Show details of an existing order."""
    handler = ShowOrderHandler(bootstrap.unit_of_work())

    try:
        dto = handler.handle(order_id)
    except DomainException as exc:
        raise to_click_error(exc)

    _display_order(dto)


@click.command("active")
def order_active() -> None:
    """List pending and in-progress orders, oldest first."""
    orders = ListActiveOrdersHandler(bootstrap.unit_of_work()).handle()

    if not orders:
        click.echo("No active orders.")
        return

    click.echo(f"{'ID':<6} {'Status':<12} {'Customer':<20} {'Total':>10}")
    click.echo("-" * 51)
    for dto in orders:
        click.echo(f"{dto.id:<6} {dto.status:<12} {dto.customer_name:<20} {dto.total:>10}")


@click.command("start")
@click.option("--id", "order_id", required=True, type=int, help="Order ID to start.")
def order_start(order_id: int) -> None:
    """Move a pending order into preparation."""
    handler = StartOrderHandler(bootstrap.unit_of_work())

    try:
        handler.handle(order_id)
    except DomainException as exc:
        raise to_click_error(exc)

    click.echo(f"Order #{order_id} in progress.")


@click.command("complete")
@click.option("--id", "order_id", required=True, type=int, help="Order ID to complete.")
def order_complete(order_id: int) -> None:
    """Complete an order (deducts product and ingredient stock)."""
    handler = CompleteOrderHandler(bootstrap.unit_of_work())

    try:
        handler.handle(order_id)
    except DomainException as exc:
        raise to_click_error(exc)

    click.echo(f"Order #{order_id} completed, stock deducted.")


@click.command("cancel")
@click.option("--id", "order_id", required=True, type=int, help="Order ID to cancel.")
def order_cancel(order_id: int) -> None:
    """Cancel an order (restores stock if it was completed)."""
    handler = CancelOrderHandler(bootstrap.unit_of_work())

    try:
        handler.handle(order_id)
    except DomainException as exc:
        raise to_click_error(exc)

    click.echo(f"Order #{order_id} cancelled.")
