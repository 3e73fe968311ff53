"""CLI commands for inventory management."""

from __future__ import annotations

import click

from storefront.application.dto import InventoryLineDTO
from storefront.application.set_inventory import SetInventoryHandler
from storefront.application.show_inventory import ShowInventoryHandler
from storefront.domain.exceptions import DomainException, TransactionConflictError
from storefront.infrastructure.bootstrap import settings, unit_of_work
from storefront.infrastructure.cli.errors import store_busy


@click.command("set")
@click.option("--product", required=True, help="Product ID or name.")
@click.option("--quantity", required=True, type=int, help="Sellable quantity in stock.")
@click.option("--low-stock", type=int, default=None, help="Low stock threshold.")
def inventory_set(product: str, quantity: int, low_stock: int | None) -> None:
    """Set inventory level for a product."""
    handler = SetInventoryHandler(uow=unit_of_work(), retry_policy=settings().retry_policy())

    try:
        handler.handle(product_ref=product, quantity=quantity, low_stock_threshold=low_stock)
    except DomainException as exc:
        raise click.ClickException(str(exc))
    except TransactionConflictError:
        raise store_busy()

    click.echo(f"Inventory for '{product}' set to {quantity}")


def _print_lines(lines: list[InventoryLineDTO]) -> None:
    click.echo(f"{'Product':<20} {'Quantity':>9} {'Reserved':>10} {'Threshold':>10}")
    click.echo("-" * 52)
    for line in lines:
        flag = "  LOW" if line.low_stock else ""
        click.echo(
            f"{line.product_name:<20} {line.quantity:>9} {line.reserved:>10} "
            f"{line.low_stock_threshold:>10}{flag}"
        )


@click.command("show")
def inventory_show() -> None:
    """Show current inventory levels."""
    try:
        lines = ShowInventoryHandler(uow=unit_of_work()).handle()
    except TransactionConflictError:
        raise store_busy()

    if not lines:
        click.echo("No inventory records found.")
        return
    _print_lines(lines)


@click.command("low-stock")
def inventory_low_stock() -> None:
    """Show products at or below their low stock threshold."""
    try:
        lines = ShowInventoryHandler(uow=unit_of_work()).handle(low_stock_only=True)
    except TransactionConflictError:
        raise store_busy()

    if not lines:
        click.echo("No products are low on stock.")
        return
    _print_lines(lines)
