"""CLI commands for the Product aggregate."""

from __future__ import annotations

import click

from storefront.application.add_product import AddProductHandler
from storefront.application.update_product import UpdateProductHandler
from storefront.domain.exceptions import DomainException, TransactionConflictError
from storefront.infrastructure.bootstrap import settings, unit_of_work
from storefront.infrastructure.cli.errors import store_busy


@click.command("add")
@click.option("--name", required=True, help="Product name.")
@click.option("--price", required=True, help="Price (e.g. 15.00).")
@click.option("--quantity", type=int, default=0, show_default=True, help="Starting stock.")
@click.option("--low-stock", type=int, default=10, show_default=True, help="Low stock threshold.")
def product_add(name: str, price: str, quantity: int, low_stock: int) -> None:
    """Add a new product to the catalog."""
    handler = AddProductHandler(uow=unit_of_work(), currency=settings().currency)

    try:
        product = handler.handle(
            name=name, price=price, quantity=quantity, low_stock_threshold=low_stock
        )
    except DomainException as exc:
        raise click.ClickException(str(exc))
    except TransactionConflictError:
        raise store_busy()

    click.echo(f"Product #{product.id} '{product.name}' added at {product.price}")


@click.command("list")
def product_list() -> None:
    """List all products in the catalog."""
    try:
        with unit_of_work() as uow:
            products = uow.products.list_all()
    except TransactionConflictError:
        raise store_busy()

    if not products:
        click.echo("No products found.")
        return

    click.echo(f"{'ID':<6} {'Name':<20} {'Price':>10}  {'State':<10}")
    click.echo("-" * 50)
    for p in products:
        if p.deleted_at is not None:
            state = "deleted"
        else:
            state = "active" if p.is_active else "inactive"
        click.echo(f"{p.id:<6} {p.name:<20} {str(p.price):>10}  {state:<10}")


@click.command("update")
@click.option("--id", "product_id", required=True, help="Product ID.")
@click.option("--price", default=None, help="New price (e.g. 29.99).")
@click.option("--active/--inactive", "is_active", default=None, help="Toggle availability.")
@click.option("--delete", is_flag=True, help="Soft-delete the product.")
def product_update(product_id: str, price: str | None, is_active: bool | None, delete: bool) -> None:
    """Update a product's price or availability."""
    handler = UpdateProductHandler(uow=unit_of_work())

    try:
        handler.handle(product_id=product_id, new_price=price, is_active=is_active, delete=delete)
    except DomainException as exc:
        raise click.ClickException(str(exc))
    except TransactionConflictError:
        raise store_busy()

    click.echo(f"Product #{product_id} updated.")
