import click

from itrack.infrastructure.bootstrap import settings
from itrack.infrastructure.cli.alert_commands import alerts_check
from itrack.infrastructure.cli.product_commands import (
    product_add,
    product_list,
    product_low,
    product_set_stock,
)
from itrack.infrastructure.cli.production_commands import (
    production_create,
    production_day,
    production_list,
    production_stats,
)
from itrack.logging_config import configure_logging


@click.group()
def cli() -> None:
    """itrack: Inventory Tracker"""
    configure_logging(level=settings().log_level)


@cli.group()
def product() -> None:
    """Manage products and stock levels."""


@cli.group()
def production() -> None:
    """Record and review production runs."""


@cli.group()
def alerts() -> None:
    """Low-stock alerting."""


# Register subcommands
product.add_command(product_add)
product.add_command(product_list)
product.add_command(product_low)
product.add_command(product_set_stock)
production.add_command(production_create)
production.add_command(production_day)
production.add_command(production_list)
production.add_command(production_stats)
alerts.add_command(alerts_check)
