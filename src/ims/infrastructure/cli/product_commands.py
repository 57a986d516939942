"""CLI commands for the Product aggregate."""

from __future__ import annotations

import click

from ims.infrastructure.bootstrap import unit_of_work


@click.command("list")
def product_list() -> None:
    """List all products with current prices and stock."""
    products = unit_of_work().products.list_all()

    if not products:
        click.echo("No products found.")
        return

    click.echo(f"{'ID':<10} {'SKU':<12} {'Name':<24} {'Purchase':>10} {'Selling':>10} {'Stock':>6}")
    click.echo("-" * 77)
    for p in products:
        click.echo(
            f"{p.id:<10} {p.sku:<12} {p.name:<24} {str(p.purchase_price):>10} "
            f"{str(p.selling_price):>10} {p.current_stock:>6}"
        )
