import click

from rpos.infrastructure import bootstrap
from rpos.infrastructure.cli.inventory_commands import (
    ingredient_adjust,
    ingredient_low_stock,
    ingredient_set,
)
from rpos.infrastructure.cli.order_commands import (
    order_active,
    order_cancel,
    order_complete,
    order_create,
    order_show,
    order_start,
)
from rpos.infrastructure.cli.product_commands import product_list, recipe_show
from rpos.infrastructure.config import get_settings
from rpos.infrastructure.logging_config import configure_logging
from rpos.infrastructure.persistence.sqlalchemy_unit_of_work import create_tables


@click.group()
def cli() -> None:
    """RPOS — Restaurant point of sale back office"""
    configure_logging(get_settings())


@cli.group()
def order() -> None:
    """Manage orders."""


@cli.group()
def ingredient() -> None:
    """Manage ingredient stock."""


@cli.group()
def product() -> None:
    """Browse products."""


@cli.group()
def recipe() -> None:
    """Browse recipes."""


@cli.group()
def db() -> None:
    """Database maintenance."""


@db.command("init")
def db_init() -> None:
    """Create all tables."""
    create_tables(bootstrap.engine())
    click.echo("Database initialised.")


# Register subcommands
order.add_command(order_active)
order.add_command(order_cancel)
order.add_command(order_complete)
order.add_command(order_create)
order.add_command(order_show)
order.add_command(order_start)
ingredient.add_command(ingredient_adjust)
ingredient.add_command(ingredient_low_stock)
ingredient.add_command(ingredient_set)
product.add_command(product_list)
recipe.add_command(recipe_show)
