"""CLI commands for ingredient stock management."""

from __future__ import annotations

import click

from rpos.application.adjust_ingredient_stock import (
    AdjustIngredientStockHandler,
    SetIngredientStockHandler,
)
from rpos.application.dto import IngredientDTO
from rpos.application.show_low_stock import ShowLowStockHandler
from rpos.domain.exceptions import DomainException
from rpos.domain.model.value_objects import to_decimal
from rpos.infrastructure import bootstrap
from rpos.infrastructure.cli.errors import to_click_error
from rpos.infrastructure.config import get_settings


def _echo_ingredient(dto: IngredientDTO) -> None:
    flag = "  (low stock)" if dto.is_low_stock else ""
    click.echo(f"Ingredient #{dto.id} '{dto.name}' stock: {dto.stock} {dto.unit}{flag}")


@click.command("adjust")
@click.option("--id", "ingredient_id", required=True, type=int, help="Ingredient ID.")
@click.option("--delta", required=True, help="Signed change, e.g. 250 or -12.5.")
def ingredient_adjust(ingredient_id: int, delta: str) -> None:
    """Add or remove ingredient stock."""
    handler = AdjustIngredientStockHandler(bootstrap.unit_of_work())

    try:
        dto = handler.handle(ingredient_id, delta)
    except DomainException as exc:
        raise to_click_error(exc)

    _echo_ingredient(dto)


@click.command("set")
@click.option("--id", "ingredient_id", required=True, type=int, help="Ingredient ID.")
@click.option("--quantity", required=True, help="New absolute stock level.")
def ingredient_set(ingredient_id: int, quantity: str) -> None:
    """Set an ingredient's stock level."""
    handler = SetIngredientStockHandler(bootstrap.unit_of_work())

    try:
        dto = handler.handle(ingredient_id, quantity)
    except DomainException as exc:
        raise to_click_error(exc)

    _echo_ingredient(dto)


@click.command("low-stock")
@click.option("--threshold", default=None, help="Stock level to report at or below.")
def ingredient_low_stock(threshold: str | None) -> None:
    """Show ingredients running low, lowest first."""
    handler = ShowLowStockHandler(
        bootstrap.unit_of_work(),
        default_threshold=get_settings().LOW_STOCK_DEFAULT_THRESHOLD,
    )

    try:
        limit = to_decimal(threshold) if threshold is not None else None
        lines = handler.handle(limit)
    except DomainException as exc:
        raise to_click_error(exc)

    if not lines:
        click.echo("No ingredients at or below the threshold.")
        return

    click.echo(f"{'ID':<6} {'Ingredient':<20} {'Stock':>10} {'Unit':<6} {'Threshold':>10}")
    click.echo("-" * 56)
    for line in lines:
        click.echo(
            f"{line.id:<6} {line.name:<20} {line.stock:>10} {line.unit:<6} "
            f"{line.low_stock_threshold or '-':>10}"
        )
