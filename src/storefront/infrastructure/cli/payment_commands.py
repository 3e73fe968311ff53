"""CLI command that feeds a verified payment outcome into the order engine."""

from __future__ import annotations

import click

from storefront.application.confirm_payment import ConfirmPaymentHandler, PaymentOutcome
from storefront.domain.exceptions import DomainException, TransactionConflictError
from storefront.infrastructure.bootstrap import (
    notification_dispatcher,
    settings,
    unit_of_work,
)
from storefront.infrastructure.cli.errors import store_busy


@click.command("confirm")
@click.option("--id", "order_id", required=True, type=int, help="Order ID.")
@click.option(
    "--outcome",
    required=True,
    type=click.Choice([o.value for o in PaymentOutcome], case_sensitive=False),
)
def payment_confirm(order_id: int, outcome: str) -> None:
    """Apply a payment gateway outcome to an online order."""
    handler = ConfirmPaymentHandler(
        uow=unit_of_work(),
        dispatcher=notification_dispatcher(),
        retry_policy=settings().retry_policy(),
    )

    try:
        dto = handler.handle(order_id, PaymentOutcome(outcome.upper()))
    except DomainException as exc:
        raise click.ClickException(str(exc))
    except TransactionConflictError:
        raise store_busy()

    if dto is None:
        click.echo(f"Payment failed - order #{order_id} deleted.")
    else:
        click.echo(f"Order #{order_id} is {dto.status}.")
