"""CLI commands for products and their recipes (read-only)."""

from __future__ import annotations

import click

from rpos.application.show_recipe import ShowRecipeHandler
from rpos.domain.exceptions import DomainException
from rpos.infrastructure import bootstrap
from rpos.infrastructure.cli.errors import to_click_error


@click.command("list")
def product_list() -> None:
    """List all products on the menu."""
    with bootstrap.unit_of_work() as uow:
        products = uow.products.list_all()

    if not products:
        click.echo("No products found.")
        return

    click.echo(f"{'ID':<6} {'Name':<20} {'Price':>10} {'Stock':>8}")
    click.echo("-" * 47)
    for p in products:
        stock = str(p.stock) if p.manage_stock else "-"
        click.echo(f"{p.id:<6} {p.name:<20} {str(p.price):>10} {stock:>8}")


@click.command("show")
@click.option("--product", "product_id", required=True, type=int, help="Product ID.")
def recipe_show(product_id: int) -> None:
    """Show the recipe a product consumes."""
    handler = ShowRecipeHandler(bootstrap.unit_of_work())

    try:
        dto = handler.handle(product_id)
    except DomainException as exc:
        raise to_click_error(exc)

    click.echo(f"Recipe '{dto.name}' for product #{dto.product_id}")
    for ingredient, qty, unit in dto.lines:
        click.echo(f"  {ingredient:<20} {qty:>10} {unit}")
    if dto.missing_ingredient_ids:
        click.echo(
            f"Warning: recipe references missing ingredient(s) {dto.missing_ingredient_ids}",
            err=True,
        )
    click.echo(f"Estimated cost: {dto.estimated_cost or 'n/a'}")
