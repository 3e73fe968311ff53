"""Application service: Edit Order Items use case.

Replaces the full item set of a non-terminal order.  Prices are taken
from the catalog at edit time; shipping and discount of the order are
kept.  The reconciler swaps the inventory hold inside the same
transaction that rewrites the items and totals, so a failed reservation
leaves the old items and hold untouched.
"""

from __future__ import annotations

from storefront.application.dto import OrderDTO, OrderItemSpec
from storefront.application.line_items import build_order_items
from storefront.application.policy import OrderPolicy
from storefront.application.retry import RetryPolicy, run_in_transaction
from storefront.domain.exceptions import OrderNotEditableError, OrderNotFoundError
from storefront.domain.model.order import Order
from storefront.domain.repository.unit_of_work import UnitOfWork
from storefront.domain.service.inventory_ledger import InventoryLedger
from storefront.domain.service.order_items_reconciler import OrderItemsReconciler
from storefront.domain.service.order_totals import calculate_totals


class EditOrderItemsHandler:

    def __init__(
        self,
        uow: UnitOfWork,
        policy: OrderPolicy | None = None,
        retry_policy: RetryPolicy | None = None,
    ) -> None:
        self._uow = uow
        self._policy = policy or OrderPolicy()
        self._retry_policy = retry_policy

    def handle(self, order_id: int, item_specs: list[OrderItemSpec]) -> OrderDTO:
        def operation(uow: UnitOfWork) -> Order:
            order = uow.orders.get_for_update(order_id)
            if order is None:
                raise OrderNotFoundError(f"Order #{order_id} not found")
            if order.is_terminal:
                raise OrderNotEditableError(
                    f"Cannot edit completed, declined or cancelled orders "
                    f"(order {order.order_number} is {order.status.value})"
                )

            items = build_order_items(uow.products, item_specs, require_active=False)
            totals = calculate_totals(
                items,
                shipping=order.shipping,
                discount=order.discount,
                tax_rate=self._policy.tax_rate,
                currency=self._policy.currency,
            )

            reconciler = OrderItemsReconciler(InventoryLedger(uow.inventory))
            reconciler.reconcile(order, items, totals)

            uow.orders.replace_items(order)
            uow.orders.save(order)
            return order

        order = run_in_transaction(self._uow, operation, self._retry_policy)
        return OrderDTO.from_order(order)
