"""CLI commands for the Order aggregate."""

from __future__ import annotations

import click

from storefront.application.archive_order import ArchiveOrderHandler
from storefront.application.create_order import CreateOrderHandler
from storefront.application.dto import OrderDTO, OrderItemSpec
from storefront.application.edit_order_items import EditOrderItemsHandler
from storefront.application.list_orders import ListOrdersHandler
from storefront.application.purge_orders import PurgeStaleOrdersHandler
from storefront.application.show_order import ShowOrderHandler
from storefront.application.transition_status import TransitionOrderStatusHandler
from storefront.domain.exceptions import DomainException, TransactionConflictError
from storefront.domain.model.order import OrderStatus, PaymentMethod, ShippingAddress
from storefront.infrastructure.bootstrap import (
    notification_dispatcher,
    settings,
    unit_of_work,
)
from storefront.infrastructure.cli.errors import store_busy

ADMIN_TARGETS = [
    status.value
    for status in OrderStatus
    if status not in (OrderStatus.AWAITING_PAYMENT, OrderStatus.PENDING)
]


def _parse_items(raw: str) -> list[OrderItemSpec]:
    """Parse 'Widget:3,Gadget:5' (names or IDs) into OrderItemSpec list."""
    specs: list[OrderItemSpec] = []
    for pair in raw.split(","):
        pair = pair.strip()
        if ":" not in pair:
            raise click.BadParameter(
                f"Invalid item format '{pair}'. Expected 'Product:Quantity'."
            )
        name, qty_str = pair.rsplit(":", 1)
        try:
            qty = int(qty_str)
        except ValueError:
            raise click.BadParameter(
                f"Invalid quantity '{qty_str}' for product '{name}'."
            )
        specs.append(OrderItemSpec(product=name.strip(), quantity=qty))
    return specs


def _display_order(dto: OrderDTO) -> None:
    """Shared formatting for displaying an order."""
    click.echo(f"Order #{dto.id}  {dto.order_number}  (status={dto.status})")
    click.echo(f"Customer: {dto.customer_name}  {dto.phone}  {dto.city}")
    click.echo(f"Payment:  {dto.payment_method}")
    click.echo(f"Created:  {dto.created_at}")
    click.echo()
    click.echo(f"  {'Product':<20} {'Qty':>5} {'Price':>10} {'Total':>10}")
    click.echo(f"  {'-'*47}")
    for item in dto.items:
        click.echo(
            f"  {item.product_name:<20} {item.quantity:>5} {item.price:>10} {item.total:>10}"
        )
    click.echo(f"  {'-'*47}")
    click.echo(f"  {'Subtotal':<27} {dto.subtotal:>20}")
    click.echo(f"  {'VAT':<27} {dto.tax:>20}")
    click.echo(f"  {'Shipping':<27} {dto.shipping:>20}")
    click.echo(f"  {'Discount':<27} {'-' + dto.discount:>20}")
    click.echo(f"  {'Order Total':<27} {dto.total:>20}")


@click.command("create")
@click.option("--items", required=True, help="Items as 'Product:Qty,Product:Qty'.")
@click.option("--name", required=True, help="Recipient name.")
@click.option("--address", required=True, help="Address line 1.")
@click.option("--address2", default=None, help="Address line 2.")
@click.option("--city", required=True)
@click.option("--province", default=None)
@click.option("--postal-code", required=True)
@click.option("--phone", required=True)
@click.option("--email", default=None)
@click.option("--user", "user_id", default=None, help="Customer account ID (omit for guests).")
@click.option(
    "--payment",
    type=click.Choice([m.value for m in PaymentMethod]),
    default=PaymentMethod.CASH_ON_DELIVERY.value,
    show_default=True,
)
def order_create(
    items: str,
    name: str,
    address: str,
    address2: str | None,
    city: str,
    province: str | None,
    postal_code: str,
    phone: str,
    email: str | None,
    user_id: str | None,
    payment: str,
) -> None:
    """Place a new order."""
    specs = _parse_items(items)
    cfg = settings()

    handler = CreateOrderHandler(
        uow=unit_of_work(),
        policy=cfg.order_policy(),
        dispatcher=notification_dispatcher(),
        retry_policy=cfg.retry_policy(),
    )

    try:
        shipping_address = ShippingAddress(
            name=name,
            address_line1=address,
            address_line2=address2,
            city=city,
            province=province,
            postal_code=postal_code,
            phone=phone,
            email=email,
        )
        dto = handler.handle(
            specs,
            shipping_address,
            user_id=user_id,
            payment_method=PaymentMethod(payment),
        )
    except DomainException as exc:
        raise click.ClickException(str(exc))
    except TransactionConflictError:
        raise store_busy()

    click.echo(f"Order #{dto.id} created")
    _display_order(dto)


@click.command("show")
@click.option("--id", "order_ref", required=True, help="Order ID or order number.")
def order_show(order_ref: str) -> None:
    """Show details of an existing order."""
    handler = ShowOrderHandler(uow=unit_of_work())

    try:
        dto = handler.handle(order_ref)
    except DomainException as exc:
        raise click.ClickException(str(exc))
    except TransactionConflictError:
        raise store_busy()

    _display_order(dto)


@click.command("list")
@click.option("--status", type=click.Choice([s.value for s in OrderStatus]), default=None)
@click.option("--search", default=None, help="Match order number, name or phone.")
@click.option("--all", "include_archived", is_flag=True, help="Include archived orders.")
@click.option("--user", "user_id", default=None, help="Only orders placed by this customer account.")
def order_list(
    status: str | None, search: str | None, include_archived: bool, user_id: str | None
) -> None:
    """List orders, newest first."""
    handler = ListOrdersHandler(uow=unit_of_work())

    try:
        orders = handler.handle(
            status=OrderStatus(status) if status else None,
            search=search,
            include_archived=include_archived,
            user_id=user_id,
        )
    except TransactionConflictError:
        raise store_busy()

    if not orders:
        click.echo("No orders found.")
        return

    click.echo(f"{'ID':<6} {'Number':<34} {'Status':<18} {'Customer':<20} {'Total':>12}")
    click.echo("-" * 94)
    for dto in orders:
        marker = " (archived)" if dto.archived else ""
        click.echo(
            f"{dto.id:<6} {dto.order_number:<34} {dto.status:<18} "
            f"{dto.customer_name:<20} {dto.total:>12}{marker}"
        )


@click.command("status")
@click.option("--id", "order_id", required=True, type=int, help="Order ID.")
@click.option("--to", "target", required=True, type=click.Choice(ADMIN_TARGETS), help="New status.")
def order_status(order_id: int, target: str) -> None:
    """Move an order to a new status (adjusts inventory)."""
    cfg = settings()
    handler = TransitionOrderStatusHandler(
        uow=unit_of_work(),
        dispatcher=notification_dispatcher(),
        retry_policy=cfg.retry_policy(),
    )

    try:
        dto = handler.handle(order_id, OrderStatus(target))
    except DomainException as exc:
        raise click.ClickException(str(exc))
    except TransactionConflictError:
        raise store_busy()

    click.echo(f"Order #{order_id} is now {dto.status}.")


@click.command("edit")
@click.option("--id", "order_id", required=True, type=int, help="Order ID.")
@click.option("--items", required=True, help="New item set as 'Product:Qty,Product:Qty'.")
def order_edit(order_id: int, items: str) -> None:
    """Replace the items of an active order (re-reserves inventory)."""
    specs = _parse_items(items)
    cfg = settings()
    handler = EditOrderItemsHandler(
        uow=unit_of_work(),
        policy=cfg.order_policy(),
        retry_policy=cfg.retry_policy(),
    )

    try:
        dto = handler.handle(order_id, specs)
    except DomainException as exc:
        raise click.ClickException(str(exc))
    except TransactionConflictError:
        raise store_busy()

    click.echo(f"Order #{order_id} items updated.")
    _display_order(dto)


@click.command("archive")
@click.option("--id", "order_id", required=True, type=int, help="Order ID.")
def order_archive(order_id: int) -> None:
    """Archive a completed, declined or cancelled order."""
    handler = ArchiveOrderHandler(uow=unit_of_work(), retry_policy=settings().retry_policy())

    try:
        handler.handle(order_id)
    except DomainException as exc:
        raise click.ClickException(str(exc))
    except TransactionConflictError:
        raise store_busy()

    click.echo(f"Order #{order_id} archived.")


@click.command("purge")
@click.option("--days", type=int, default=None, help="Retention in days (default from settings).")
def order_purge(days: int | None) -> None:
    """Delete terminal orders not touched for the retention period."""
    cfg = settings()
    if days is None:
        days = cfg.order_policy().archive_retention_days

    try:
        handler = PurgeStaleOrdersHandler(
            uow=unit_of_work(),
            retention_days=days,
            retry_policy=cfg.retry_policy(),
        )
        purged = handler.handle()
    except DomainException as exc:
        raise click.ClickException(str(exc))
    except TransactionConflictError:
        raise store_busy()

    click.echo(f"Purged {purged} order(s).")
