import click

from storefront.infrastructure.bootstrap import settings
from storefront.infrastructure.cli.inventory_commands import (
    inventory_low_stock,
    inventory_set,
    inventory_show,
)
from storefront.infrastructure.cli.order_commands import (
    order_archive,
    order_create,
    order_edit,
    order_list,
    order_purge,
    order_show,
    order_status,
)
from storefront.infrastructure.cli.payment_commands import payment_confirm
from storefront.infrastructure.cli.product_commands import (
    product_add,
    product_list,
    product_update,
)
from storefront.infrastructure.logging import configure_logging


@click.group()
@click.option("-v", "--verbose", is_flag=True, help="Log at INFO level.")
def cli(verbose: bool) -> None:
    """Storefront — orders, inventory and products"""
    configure_logging("INFO" if verbose else settings().log_level)


@cli.group()
def order() -> None:
    """Manage orders."""


@cli.group()
def product() -> None:
    """Manage products."""


@cli.group()
def inventory() -> None:
    """Manage inventory."""


@cli.group()
def payment() -> None:
    """Payment gateway signals."""


# Register subcommands
order.add_command(order_archive)
order.add_command(order_create)
order.add_command(order_edit)
order.add_command(order_list)
order.add_command(order_purge)
order.add_command(order_show)
order.add_command(order_status)
product.add_command(product_add)
product.add_command(product_list)
product.add_command(product_update)
inventory.add_command(inventory_low_stock)
inventory.add_command(inventory_set)
inventory.add_command(inventory_show)
payment.add_command(payment_confirm)
