"""CLI commands for low-stock alerting."""

from __future__ import annotations

import click

from itrack.application.check_low_stock import CheckLowStockHandler
from itrack.domain.service.low_stock_alert_tracker import AlertDecision
from itrack.infrastructure.bootstrap import alert_tracker


@click.command("check")
def alerts_check() -> None:
    """Send one alert listing every low-stock product (ignores cooldowns)."""
    outcome = CheckLowStockHandler(alert_tracker()).handle()

    if outcome.decision == AlertDecision.NOTHING_LOW:
        click.echo("All products are well stocked.")
    elif outcome.decision == AlertDecision.NOT_CONFIGURED:
        raise click.ClickException("ADMIN_EMAIL is not set; no alert sent.")
    elif outcome.success:
        click.echo(f"Low stock alert sent for {len(outcome.product_ids)} product(s).")
    else:
        raise click.ClickException(f"Low stock alert failed: {outcome.error}")
