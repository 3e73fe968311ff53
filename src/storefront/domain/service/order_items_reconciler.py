"""Domain service: Order Items Reconciler.

Lets an admin replace the whole item set of a still-mutable order and
re-derives the inventory hold without double-counting it.

For availability the reconciler credits back what the order itself holds:
``effective = quantity + held_by_this_order``.  Only when every new line
fits does it release the old hold and take the new one.  Orders that hold
nothing yet (AWAITING_PAYMENT, PENDING) only get the availability check;
their reservation is taken later, on ACCEPTED.
"""

from __future__ import annotations

import logging
from datetime import datetime

from storefront.domain.exceptions import InsufficientStockError, OrderNotEditableError
from storefront.domain.model.order import Order, OrderItem
from storefront.domain.service.inventory_ledger import InventoryLedger
from storefront.domain.service.order_totals import OrderTotals

logger = logging.getLogger(__name__)


class OrderItemsReconciler:

    def __init__(self, ledger: InventoryLedger) -> None:
        self._ledger = ledger

    def reconcile(
        self,
        order: Order,
        new_items: list[OrderItem],
        totals: OrderTotals,
        now: datetime | None = None,
    ) -> None:
        if order.is_terminal:
            raise OrderNotEditableError(
                f"Cannot edit order {order.order_number} in {order.status.value} status"
            )

        held = order.reserved_quantities()
        requested = _quantities(new_items)

        # Step 1-2: lock everything either set touches, then validate.
        inventory = self._ledger.lock(set(held) | set(requested))
        for product_id, qty in requested.items():
            inv = inventory[product_id]
            effective = inv.quantity + held.get(product_id, 0)
            if qty > effective:
                raise InsufficientStockError(inv.product_name, qty, effective)

        # Step 3-4: swap the hold.  Releasing for an order with no hold is a no-op.
        if order.holds_reservation:
            self._ledger.release_all(held)
            self._ledger.reserve_all(requested)

        # Step 5-6: replace items and totals on the aggregate.
        order.replace_items(new_items, totals, now)
        logger.info(
            "Order %s items replaced: %s -> %s",
            order.order_number,
            held or "no hold",
            requested,
        )


def _quantities(items: list[OrderItem]) -> dict[str, int]:
    quantities: dict[str, int] = {}
    for item in items:
        quantities[item.product_id] = quantities.get(item.product_id, 0) + item.quantity.value
    return quantities
