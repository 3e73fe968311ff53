"""Application service: Create Order use case.

Resolves products, snapshots their prices, checks sellable stock and
stores the order with its items in one transaction.  No inventory is
reserved here: the reservation happens when an admin accepts the order.
"""

from __future__ import annotations

import logging

from storefront.application.dto import OrderDTO, OrderItemSpec
from storefront.application.line_items import build_order_items
from storefront.application.notifications import (
    NotificationDispatcher,
    publish_after_commit,
)
from storefront.application.order_number import generate_order_number
from storefront.application.policy import OrderPolicy
from storefront.application.retry import RetryPolicy, run_in_transaction
from storefront.domain.events import OrderPlaced
from storefront.domain.exceptions import InsufficientStockError, ValidationError
from storefront.domain.model.order import Order, PaymentMethod, ShippingAddress
from storefront.domain.repository.unit_of_work import UnitOfWork
from storefront.domain.service.order_totals import calculate_totals

logger = logging.getLogger(__name__)


class CreateOrderHandler:

    def __init__(
        self,
        uow: UnitOfWork,
        policy: OrderPolicy | None = None,
        dispatcher: NotificationDispatcher | None = None,
        retry_policy: RetryPolicy | None = None,
    ) -> None:
        self._uow = uow
        self._policy = policy or OrderPolicy()
        self._dispatcher = dispatcher
        self._retry_policy = retry_policy

    def handle(
        self,
        item_specs: list[OrderItemSpec],
        shipping_address: ShippingAddress,
        user_id: str | None = None,
        payment_method: PaymentMethod = PaymentMethod.CASH_ON_DELIVERY,
    ) -> OrderDTO:
        """Place a new order.

        Steps:
        1. Resolve each product (must exist, be active and not deleted).
        2. Build OrderItems with *current* prices (snapshot).
        3. Check every product has enough sellable ``quantity``.
        4. Compute totals, let the Order aggregate validate, persist.
        5. After commit, notify (best effort).
        """
        if payment_method is PaymentMethod.ONLINE and not self._policy.online_payments_enabled:
            raise ValidationError("Online payments are not configured")

        def operation(uow: UnitOfWork) -> Order:
            items = build_order_items(uow.products, item_specs, require_active=True)

            for item in items:
                inv = uow.inventory.get_by_product_id(item.product_id)
                available = inv.quantity if inv is not None else 0
                if item.quantity.value > available:
                    raise InsufficientStockError(
                        item.product_name, item.quantity.value, available
                    )

            totals = calculate_totals(
                items,
                shipping=self._policy.shipping,
                tax_rate=self._policy.tax_rate,
                currency=self._policy.currency,
            )
            order = Order.create(
                order_number=generate_order_number(self._policy.order_number_prefix),
                items=items,
                shipping_address=shipping_address,
                totals=totals,
                user_id=user_id,
                payment_method=payment_method,
            )
            uow.orders.add(order)
            return order

        order = run_in_transaction(self._uow, operation, self._retry_policy)
        logger.info(
            "Order %s created (status=%s, total=%s, user=%s)",
            order.order_number,
            order.status.value,
            order.total,
            order.user_id or "guest",
        )

        publish_after_commit(self._dispatcher, OrderPlaced.from_order(order))
        return OrderDTO.from_order(order)
