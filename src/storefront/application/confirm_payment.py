"""Application service: Payment Confirmation use case.

Consumes the (already signature-verified) outcome signal of the payment
gateway for an online order:

- SUCCESS: AWAITING_PAYMENT -> PENDING; from here on the order is
  handled exactly like a cash-on-delivery order awaiting admin review.
- FAILURE: the unpaid order and its items are deleted.  Nothing was ever
  reserved for it (reservation only happens at ACCEPTED), so there is
  nothing to release.

Signals for orders that are no longer awaiting payment are ignored, which
makes gateway redeliveries harmless.
"""

from __future__ import annotations

import logging
from enum import Enum

from storefront.application.dto import OrderDTO
from storefront.application.notifications import (
    NotificationDispatcher,
    publish_after_commit,
)
from storefront.application.retry import RetryPolicy, run_in_transaction
from storefront.domain.events import OrderStatusChanged
from storefront.domain.exceptions import OrderNotFoundError
from storefront.domain.model.order import Order, OrderStatus
from storefront.domain.repository.unit_of_work import UnitOfWork

logger = logging.getLogger(__name__)


class PaymentOutcome(Enum):
    SUCCESS = "SUCCESS"
    FAILURE = "FAILURE"


class ConfirmPaymentHandler:

    def __init__(
        self,
        uow: UnitOfWork,
        dispatcher: NotificationDispatcher | None = None,
        retry_policy: RetryPolicy | None = None,
    ) -> None:
        self._uow = uow
        self._dispatcher = dispatcher
        self._retry_policy = retry_policy

    def handle(self, order_id: int, outcome: PaymentOutcome) -> OrderDTO | None:
        """Apply the payment outcome.

        Returns the updated order, or None when the order was deleted.
        """

        def operation(uow: UnitOfWork) -> tuple[Order, bool]:
            order = uow.orders.get_for_update(order_id)
            if order is None:
                raise OrderNotFoundError(f"Order #{order_id} not found")

            if order.status != OrderStatus.AWAITING_PAYMENT:
                logger.info(
                    "Ignoring payment %s for order %s in status %s",
                    outcome.value,
                    order.order_number,
                    order.status.value,
                )
                return order, False

            if outcome is PaymentOutcome.SUCCESS:
                order.confirm_payment()
                uow.orders.save(order)
            else:
                uow.orders.delete(order)
            return order, True

        order, changed = run_in_transaction(self._uow, operation, self._retry_policy)

        if not changed:
            return OrderDTO.from_order(order)

        if outcome is PaymentOutcome.FAILURE:
            logger.info("Payment failed, unpaid order %s deleted", order.order_number)
            return None

        logger.info("Payment confirmed for order %s", order.order_number)
        publish_after_commit(
            self._dispatcher,
            OrderStatusChanged.from_order(order, OrderStatus.AWAITING_PAYMENT),
        )
        return OrderDTO.from_order(order)
