"""CLI commands for production runs."""

from __future__ import annotations

from datetime import datetime, timezone

import click

from itrack.application.create_production import CreateProductionHandler
from itrack.application.dto import ProductionDTO
from itrack.application.list_productions import ListProductionsHandler
from itrack.application.production_stats import ProductionStatsHandler
from itrack.domain.exceptions import DomainException
from itrack.domain.model.product import ProductType
from itrack.domain.model.production_request import (
    ExistingOutput,
    NewOutput,
    ProducedSpec,
    ProductionRequest,
    RawMaterialSpec,
)
from itrack.domain.model.value_objects import Money, Quantity
from itrack.infrastructure.bootstrap import (
    alert_tracker,
    product_repository,
    production_repository,
    unit_of_work,
)

_DATE_FORMATS = ["%Y-%m-%d", "%Y-%m-%dT%H:%M:%S", "%Y-%m-%d %H:%M:%S"]


def _as_utc(value: datetime | None) -> datetime | None:
    if value is None:
        return None
    return value.replace(tzinfo=timezone.utc)


def _parse_pairs(raw: str) -> list[tuple[str, Quantity]]:
    """Parse '1:30,2:12.5' into (product_id, Quantity) pairs."""
    pairs: list[tuple[str, Quantity]] = []
    for pair in raw.split(","):
        pair = pair.strip()
        if not pair:
            continue
        if ":" not in pair:
            raise click.BadParameter(
                f"Invalid item format '{pair}'. Expected 'ProductID:Quantity'."
            )
        product_id, qty_str = pair.rsplit(":", 1)
        try:
            qty = Quantity.of(qty_str)
        except DomainException:
            raise click.BadParameter(
                f"Invalid quantity '{qty_str}' for product '{product_id}'."
            )
        pairs.append((product_id.strip(), qty))
    return pairs


def _parse_new(raw: str) -> NewOutput:
    """Parse 'Name:Qty[:Price[:Category[:Type]]]' into a NewOutput.

    Empty optional fields are skipped, e.g. 'Bran:5:::raw'.
    """
    parts = [p.strip() for p in raw.split(":")]
    if len(parts) < 2 or len(parts) > 5:
        raise click.BadParameter(
            f"Invalid new product '{raw}'. "
            "Expected 'Name:Quantity[:Price[:Category[:Type]]]'."
        )
    name, qty_str, *rest = parts
    rest += [""] * (3 - len(rest))
    price_str, category, type_str = rest
    try:
        quantity = Quantity.of(qty_str)
        price = Money.of(price_str) if price_str else None
    except DomainException as exc:
        raise click.BadParameter(f"Invalid new product '{raw}': {exc}")
    try:
        product_type = ProductType(type_str) if type_str else None
    except ValueError:
        raise click.BadParameter(
            f"Invalid product type '{type_str}' in '{raw}'. Expected 'raw' or 'selling'."
        )
    return NewOutput(
        name=name,
        quantity=quantity,
        price=price,
        category=category or None,
        type=product_type,
    )


def _display_production(dto: ProductionDTO) -> None:
    click.echo(f"Production #{dto.id}  (status={dto.status})")
    click.echo(f"Date:     {dto.date:%Y-%m-%d %H:%M UTC}")
    if dto.notes:
        click.echo(f"Notes:    {dto.notes}")
    click.echo()
    click.echo(f"  {'Consumed':<20} {'Qty':>8}   {'Produced':<20} {'Qty':>8}")
    click.echo(f"  {'-'*62}")
    rows = max(len(dto.raw_materials), len(dto.produced_products))
    for i in range(rows):
        rm = dto.raw_materials[i] if i < len(dto.raw_materials) else None
        pp = dto.produced_products[i] if i < len(dto.produced_products) else None
        left = f"{rm.product_name:<20} {str(rm.quantity):>8}" if rm else " " * 29
        right = f"{pp.product_name:<20} {str(pp.quantity):>8}" if pp else ""
        click.echo(f"  {left}   {right}")
    click.echo()
    click.echo("  Ratios (produced per unit consumed):")
    for r in dto.ratios:
        click.echo(
            f"    {r.raw_material_name} -> {r.produced_product_name}: {r.ratio:.4f}"
        )


@click.command("create")
@click.option("--raw", "raw_str", required=True, help="Raw materials as 'ID:Qty,ID:Qty'.")
@click.option("--produced", "produced_str", default=None, help="Existing products as 'ID:Qty,ID:Qty'.")
@click.option(
    "--new", "new_items", multiple=True,
    help="New product as 'Name:Qty[:Price[:Category[:Type]]]'. Repeatable.",
)
@click.option("--date", type=click.DateTime(formats=_DATE_FORMATS), default=None, help="Production date (UTC).")
@click.option("--notes", default=None, help="Free-form notes.")
def production_create(
    raw_str: str,
    produced_str: str | None,
    new_items: tuple[str, ...],
    date: datetime | None,
    notes: str | None,
) -> None:
    """Convert raw materials into produced products."""
    raw_materials = [RawMaterialSpec(pid, qty) for pid, qty in _parse_pairs(raw_str)]
    produced: list[ProducedSpec] = []
    if produced_str:
        produced += [ExistingOutput(pid, qty) for pid, qty in _parse_pairs(produced_str)]
    produced += [_parse_new(item) for item in new_items]

    handler = CreateProductionHandler(uow=unit_of_work(), alert_tracker=alert_tracker())

    try:
        dto = handler.handle(
            ProductionRequest(
                raw_materials=raw_materials,
                produced_products=produced,
                date=_as_utc(date),
                notes=notes,
            )
        )
    except DomainException as exc:
        raise click.ClickException(str(exc))

    _display_production(dto)


@click.command("list")
@click.option("--from", "start", type=click.DateTime(formats=_DATE_FORMATS), default=None)
@click.option("--to", "end", type=click.DateTime(formats=_DATE_FORMATS), default=None)
def production_list(start: datetime | None, end: datetime | None) -> None:
    """List productions, newest first."""
    handler = ListProductionsHandler(production_repository(), product_repository())

    try:
        productions = handler.handle(_as_utc(start), _as_utc(end))
    except DomainException as exc:
        raise click.ClickException(str(exc))

    if not productions:
        click.echo("No productions found.")
        return

    for dto in productions:
        _display_production(dto)
        click.echo()


@click.command("day")
@click.argument("day", type=click.DateTime(formats=["%Y-%m-%d"]))
def production_day(day: datetime) -> None:
    """List the productions of one calendar day (UTC)."""
    handler = ListProductionsHandler(production_repository(), product_repository())
    productions = handler.for_date(day.date())

    if not productions:
        click.echo(f"No productions on {day:%Y-%m-%d}.")
        return

    for dto in productions:
        _display_production(dto)
        click.echo()


@click.command("stats")
@click.option("--from", "start", type=click.DateTime(formats=_DATE_FORMATS), default=None)
@click.option("--to", "end", type=click.DateTime(formats=_DATE_FORMATS), default=None)
def production_stats(start: datetime | None, end: datetime | None) -> None:
    """Show totals of raw materials used and products produced."""
    handler = ProductionStatsHandler(production_repository())

    try:
        stats = handler.handle(_as_utc(start), _as_utc(end))
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Productions:          {stats.total_productions}")
    click.echo(f"Raw materials used:   {stats.total_raw_materials_used}")
    click.echo(f"Products produced:    {stats.total_products_produced}")
    click.echo()
    click.echo("Raw materials:")
    for name, qty in sorted(stats.raw_materials_breakdown.items()):
        click.echo(f"  {name:<20} {str(qty):>10}")
    click.echo("Products:")
    for name, qty in sorted(stats.products_breakdown.items()):
        click.echo(f"  {name:<20} {str(qty):>10}")
