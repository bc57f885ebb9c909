"""CLI commands for the Product aggregate."""

from __future__ import annotations

import click

from itrack.application.add_product import AddProductHandler
from itrack.application.set_stock import SetStockHandler
from itrack.application.show_products import ShowProductsHandler
from itrack.domain.exceptions import DomainException
from itrack.infrastructure.bootstrap import (
    alert_tracker,
    product_repository,
    settings,
    unit_of_work,
)


def _print_products(products) -> None:
    click.echo(f"{'ID':<6} {'Name':<20} {'Type':<8} {'Stock':>8} {'Price':>10}")
    click.echo("-" * 56)
    for p in products:
        click.echo(f"{p.id:<6} {p.name:<20} {p.type:<8} {str(p.stock):>8} {p.price:>10}")


@click.command("add")
@click.option("--name", required=True, help="Product name.")
@click.option("--price", default="0", show_default=True, help="Price (e.g. 15.00).")
@click.option(
    "--type", "product_type",
    type=click.Choice(["raw", "selling"]), default="selling", show_default=True,
)
@click.option("--stock", default="0", show_default=True, help="Initial stock.")
@click.option("--category", default=None, help="Optional category.")
@click.option("--supplier", "supplier_id", default=None, help="Supplier reference.")
@click.option("--seller", "seller_id", default=None, help="Seller reference.")
def product_add(
    name: str,
    price: str,
    product_type: str,
    stock: str,
    category: str | None,
    supplier_id: str | None,
    seller_id: str | None,
) -> None:
    """Add a new product to the catalog."""
    handler = AddProductHandler(product_repo=product_repository(), alert_tracker=alert_tracker())

    try:
        product = handler.handle(
            name=name,
            price=price,
            type=product_type,
            stock=stock,
            category=category,
            supplier_id=supplier_id,
            seller_id=seller_id,
        )
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(
        f"Product #{product.id} '{product.name}' ({product.type}) added "
        f"at {product.price}, stock {product.stock}"
    )


@click.command("list")
def product_list() -> None:
    """List all products in the catalog."""
    products = ShowProductsHandler(product_repository()).handle()

    if not products:
        click.echo("No products found.")
        return

    _print_products(products)


@click.command("low")
@click.option("--threshold", type=int, default=None, help="Defaults to LOW_STOCK_THRESHOLD.")
def product_low(threshold: int | None) -> None:
    """List products below the low-stock threshold."""
    if threshold is None:
        threshold = settings().low_stock_threshold
    products = ShowProductsHandler(product_repository()).low_stock(threshold)

    if not products:
        click.echo(f"All products have at least {threshold} units in stock.")
        return

    _print_products(products)


@click.command("set-stock")
@click.option("--id", "product_id", required=True, help="Product ID.")
@click.option("--stock", required=True, help="New stock level.")
def product_set_stock(product_id: str, stock: str) -> None:
    """Overwrite a product's stock level."""
    handler = SetStockHandler(uow=unit_of_work(), alert_tracker=alert_tracker())

    try:
        product = handler.handle(product_id=product_id, stock=stock)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Stock for '{product.name}' set to {product.stock}")
