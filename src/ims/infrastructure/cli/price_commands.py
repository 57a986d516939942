"""CLI commands for price history and analytics."""

from __future__ import annotations

import json
from pathlib import Path

import click

from ims.application.bulk_update_prices import BulkUpdatePricesHandler
from ims.application.dto import PriceMovementDTO
from ims.application.results import Failure
from ims.application.show_price_history import ShowPriceHistoryHandler
from ims.application.suggest_price import SuggestPriceHandler
from ims.domain.exceptions import DomainException
from ims.domain.model.outcomes import NoData
from ims.domain.service.bulk_price_update import DEFAULT_ACTOR, DEFAULT_REASON, PriceUpdate
from ims.infrastructure.bootstrap import Settings, operations, unit_of_work


def _parse_price_items(raw: str) -> list[PriceUpdate]:
    """Parse 'P1:10.00:15.00,P2:4:6' into PriceUpdate list."""
    updates: list[PriceUpdate] = []
    for chunk in raw.split(","):
        chunk = chunk.strip()
        parts = chunk.split(":")
        if len(parts) != 3:
            raise click.BadParameter(
                f"Invalid item format '{chunk}'. Expected 'ProductId:Purchase:Selling'."
            )
        product_id, purchase, selling = (p.strip() for p in parts)
        updates.append(PriceUpdate(product_id, purchase, selling))
    return updates


def _movement_text(movement: PriceMovementDTO | NoData) -> str:
    if isinstance(movement, NoData):
        return f"no data ({movement})"
    return (
        f"{movement.earlier_mean} -> {movement.later_mean} "
        f"({movement.percent_change}, {movement.direction})"
    )


@click.command("history")
@click.option("--product", "product_id", required=True, help="Product ID.")
@click.option("--start", "start_date", default=None, help="Start date (YYYY-MM-DD or ISO).")
@click.option("--end", "end_date", default=None, help="End date (YYYY-MM-DD or ISO).")
@click.option("--page", default=1, type=int, show_default=True)
@click.option("--limit", default=50, type=int, show_default=True)
def price_history(
    product_id: str, start_date: str | None, end_date: str | None, page: int, limit: int
) -> None:
    """Show the price history of a product, oldest first."""
    handler = ShowPriceHistoryHandler(unit_of_work())

    try:
        dto = handler.handle(product_id, start_date, end_date, page=page, limit=limit)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    if not dto.records:
        click.echo(f"No price history for '{product_id}'.")
        return

    click.echo(f"{'#':>5} {'Recorded (UTC)':<26} {'Purchase':>12} {'Selling':>12}  Reason")
    click.echo("-" * 80)
    for r in dto.records:
        click.echo(
            f"{r.sequence:>5} {r.recorded_at:<26} {r.purchase_price:>12} "
            f"{r.selling_price:>12}  {r.reason} ({r.actor})"
        )
    click.echo(f"Page {dto.page}/{dto.total_pages}, {dto.total_count} record(s) in range")


@click.command("trend")
@click.option("--product", "product_ids", required=True, multiple=True, help="Product ID (repeatable).")
@click.option("--days", default=30, type=int, show_default=True, help="Window in days.")
def price_trend(product_ids: tuple[str, ...], days: int) -> None:
    """Classify price direction over a trailing window."""
    results = operations().trends_for(list(product_ids), days)
    if isinstance(results, Failure):
        raise click.ClickException(results.message)

    for product_id, result in results.items():
        if isinstance(result, Failure):
            click.echo(f"{product_id}: error ({result.kind.value}) {result.message}")
            continue
        trend = result.value
        if isinstance(trend, NoData):
            click.echo(f"{product_id}: {trend}")
            continue
        click.echo(f"{product_id}: {trend.direction or 'no data'} over {trend.data_points} record(s)")
        click.echo(f"  purchase  {_movement_text(trend.purchase)}")
        click.echo(f"  selling   {_movement_text(trend.selling)}")


@click.command("average")
@click.option("--product", "product_ids", required=True, multiple=True, help="Product ID (repeatable).")
@click.option("--days", default=30, type=int, show_default=True, help="Window in days.")
def price_average(product_ids: tuple[str, ...], days: int) -> None:
    """Show average purchase and selling prices over a trailing window."""
    results = operations().averages_for(list(product_ids), days)
    if isinstance(results, Failure):
        raise click.ClickException(results.message)

    for product_id, result in results.items():
        if isinstance(result, Failure):
            click.echo(f"{product_id}: error ({result.kind.value}) {result.message}")
            continue
        avg = result.value
        if isinstance(avg, NoData):
            click.echo(f"{product_id}: {avg}")
            continue
        click.echo(
            f"{product_id}: purchase {avg.avg_purchase}, selling {avg.avg_selling}, "
            f"margin {avg.avg_margin} ({avg.avg_margin_percent}) over {avg.data_points} record(s)"
        )


@click.command("suggest")
@click.option("--product", "product_id", required=True, help="Product ID.")
def price_suggest(product_id: str) -> None:
    """Suggest a selling price from the historical margin."""
    settings = Settings.from_env()
    handler = SuggestPriceHandler(unit_of_work(settings), window_days=settings.trend_window_days)

    try:
        dto = handler.handle(product_id)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    if isinstance(dto, NoData):
        click.echo(f"No suggestion for '{product_id}': {dto}")
        return

    click.echo(f"Suggested selling price: {dto.suggested_selling_price}  (confidence {dto.confidence})")
    click.echo(f"Latest purchase price:   {dto.latest_purchase_price}")
    click.echo(f"Target margin:           {dto.target_margin_percent} over {dto.data_points} record(s)")
    click.echo(dto.signal)


@click.command("bulk-update")
@click.option("--items", default=None, help="Items as 'ProductId:Purchase:Selling,...'.")
@click.option(
    "--file", "file_path", default=None, type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="JSON file with a list of {product_id, purchase_price, selling_price}.",
)
@click.option("--reason", default=DEFAULT_REASON, show_default=True)
@click.option("--actor", default=DEFAULT_ACTOR, show_default=True)
def price_bulk_update(items: str | None, file_path: Path | None, reason: str, actor: str) -> None:
    """Update prices of several products as one all-or-nothing batch."""
    if bool(items) == bool(file_path):
        raise click.ClickException("Provide exactly one of --items or --file")

    if items:
        updates: list = _parse_price_items(items)
    else:
        try:
            updates = json.loads(file_path.read_text(encoding="utf-8"))
        except ValueError as exc:
            raise click.ClickException(f"Invalid JSON in {file_path}: {exc}")

    handler = BulkUpdatePricesHandler(unit_of_work())

    try:
        dto = handler.handle(updates, reason=reason, actor=actor)
    except DomainException as exc:
        for problem in exc.problems:
            click.echo(f"  {problem}", err=True)
        raise click.ClickException(str(exc))

    click.echo(f"Updated {dto.updated_count} product price(s).")
