import click

from ims.domain.exceptions import DomainException
from ims.infrastructure.bootstrap import configure_logging
from ims.infrastructure.cli.price_commands import (
    price_average,
    price_bulk_update,
    price_history,
    price_suggest,
    price_trend,
)
from ims.infrastructure.cli.product_commands import product_list
from ims.infrastructure.cli.profit_commands import (
    profit_categories,
    profit_monthly,
    profit_products,
)
from ims.infrastructure.cli.stock_commands import (
    stock_alerts,
    stock_bulk_reorder,
    stock_set_reorder,
)


@click.group()
def cli() -> None:
    """IMS — Inventory Management System: prices, stock alerts and profit"""
    try:
        configure_logging()
    except DomainException as exc:
        raise click.ClickException(str(exc))


@cli.group()
def price() -> None:
    """Price history and analytics."""


@cli.group()
def stock() -> None:
    """Stock alerts and reorder points."""


@cli.group()
def profit() -> None:
    """Profit analysis."""


@cli.group()
def product() -> None:
    """Browse products."""


# Register subcommands
price.add_command(price_history)
price.add_command(price_trend)
price.add_command(price_average)
price.add_command(price_suggest)
price.add_command(price_bulk_update)
stock.add_command(stock_alerts)
stock.add_command(stock_set_reorder)
stock.add_command(stock_bulk_reorder)
profit.add_command(profit_products)
profit.add_command(profit_categories)
profit.add_command(profit_monthly)
product.add_command(product_list)
