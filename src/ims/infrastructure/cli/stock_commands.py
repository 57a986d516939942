"""CLI commands for stock alerts and reorder points."""

from __future__ import annotations

import click

from ims.application.show_low_stock import ShowLowStockHandler
from ims.application.update_reorder_point import (
    BulkUpdateReorderPointsHandler,
    UpdateReorderPointHandler,
)
from ims.domain.exceptions import DomainException
from ims.domain.service.stock_threshold_monitor import ReorderPointUpdate
from ims.infrastructure.bootstrap import unit_of_work


def _parse_reorder_items(raw: str) -> list[ReorderPointUpdate]:
    """Parse 'P1:10,P2:5' into ReorderPointUpdate list."""
    updates: list[ReorderPointUpdate] = []
    for pair in raw.split(","):
        pair = pair.strip()
        if ":" not in pair:
            raise click.BadParameter(
                f"Invalid item format '{pair}'. Expected 'ProductId:ReorderPoint'."
            )
        product_id, value_str = pair.rsplit(":", 1)
        try:
            value = int(value_str)
        except ValueError:
            raise click.BadParameter(
                f"Invalid reorder point '{value_str}' for product '{product_id}'."
            )
        updates.append(ReorderPointUpdate(product_id.strip(), value))
    return updates


@click.command("alerts")
def stock_alerts() -> None:
    """List products at or below their reorder point."""
    dto = ShowLowStockHandler(unit_of_work()).handle()

    if not dto.products:
        click.echo("No low-stock products.")
        return

    click.echo(f"{'Severity':<10} {'SKU':<12} {'Name':<24} {'Stock':>6} {'Reorder':>8}")
    click.echo("-" * 64)
    for alert in dto.products:
        click.echo(
            f"{alert.severity:<10} {alert.sku:<12} {alert.name:<24} "
            f"{alert.current_stock:>6} {alert.reorder_point:>8}"
        )
    click.echo(
        f"{dto.total_count} alert(s): {dto.critical_count} critical, {dto.high_count} high"
    )


@click.command("set-reorder")
@click.option("--product", "product_id", required=True, help="Product ID.")
@click.option("--value", required=True, type=int, help="New reorder point (>= 0).")
def stock_set_reorder(product_id: str, value: int) -> None:
    """Set the reorder point of one product."""
    handler = UpdateReorderPointHandler(unit_of_work())

    try:
        handler.handle(product_id, value)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Reorder point of '{product_id}' set to {value}")


@click.command("bulk-reorder")
@click.option("--items", required=True, help="Items as 'ProductId:ReorderPoint,...'.")
def stock_bulk_reorder(items: str) -> None:
    """Set several reorder points as one all-or-nothing batch."""
    handler = BulkUpdateReorderPointsHandler(unit_of_work())

    try:
        dto = handler.handle(_parse_reorder_items(items))
    except DomainException as exc:
        for problem in exc.problems:
            click.echo(f"  {problem}", err=True)
        raise click.ClickException(str(exc))

    click.echo(f"Updated {dto.updated_count} reorder point(s).")
