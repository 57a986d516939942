"""CLI commands for profit analysis."""

from __future__ import annotations

import click

from ims.application.show_profit_analysis import (
    DEFAULT_TREND_MONTHS,
    ShowMonthlyProfitTrendHandler,
    ShowProfitAnalysisHandler,
    ShowProfitByCategoryHandler,
)
from ims.domain.exceptions import DomainException
from ims.domain.service.profit_analyzer import SORT_FIELDS, SORT_ORDERS
from ims.infrastructure.bootstrap import unit_of_work


@click.command("products")
@click.option("--search", default=None, help="Match name, brand or SKU.")
@click.option("--category", default=None, help="Exact category.")
@click.option(
    "--sort-by", default="profit_amount", show_default=True,
    type=click.Choice(sorted(SORT_FIELDS)),
)
@click.option("--order", default="desc", show_default=True, type=click.Choice(SORT_ORDERS))
def profit_products(search: str | None, category: str | None, sort_by: str, order: str) -> None:
    """Show per-product profit and margin."""
    handler = ShowProfitAnalysisHandler(unit_of_work())

    try:
        dto = handler.handle(search=search, category=category, sort_by=sort_by, order=order)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    if not dto.rows:
        click.echo("No products found.")
        return

    click.echo(f"{'SKU':<12} {'Name':<24} {'Purchase':>12} {'Selling':>12} {'Profit':>12} {'Margin':>9}")
    click.echo("-" * 86)
    for row in dto.rows:
        click.echo(
            f"{row.sku:<12} {row.name:<24} {row.purchase_price:>12} {row.selling_price:>12} "
            f"{row.profit_amount:>12} {row.margin_percent:>9}"
        )
    click.echo("-" * 86)
    summary = dto.summary
    click.echo(
        f"{summary.total_products} product(s), unit profit {summary.total_profit_amount}, "
        f"average margin {summary.average_margin_percent}"
    )


@click.command("categories")
def profit_categories() -> None:
    """Show profit grouped by category."""
    rows = ShowProfitByCategoryHandler(unit_of_work()).handle()

    if not rows:
        click.echo("No products found.")
        return

    click.echo(f"{'Category':<20} {'Products':>9} {'Total':>14} {'Average':>12} {'Margin':>9}")
    click.echo("-" * 68)
    for c in rows:
        click.echo(
            f"{c.category:<20} {c.product_count:>9} {c.total_profit:>14} "
            f"{c.average_profit:>12} {c.average_margin_percent:>9}"
        )


@click.command("monthly")
@click.option("--months", default=DEFAULT_TREND_MONTHS, type=int, show_default=True)
def profit_monthly(months: int) -> None:
    """Show the monthly profit trend from price history."""
    handler = ShowMonthlyProfitTrendHandler(unit_of_work())

    try:
        points = handler.handle(months)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"{'Month':<16} {'Records':>8} {'Profit':>14} {'Margin':>9}")
    click.echo("-" * 50)
    for p in points:
        click.echo(f"{p.label:<16} {p.record_count:>8} {p.total_profit:>14} {p.margin_percent:>9}")
