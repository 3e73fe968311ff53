"""Domain service: Order State Machine.

Every admin-driven status change is looked up in ``TRANSITIONS``, keyed by
``(current, target)``.  A pair that is not in the table is illegal, full
stop: there is no "closest legal status" fallback, and nothing leaves a
terminal status.

Each edge carries the inventory effect that must be applied in the same
transaction as the status write:

- RESERVE  — accepting takes the units out of sellable stock
- RELEASE  — declining / cancelling an accepted order gives them back
- CONSUME  — completing drops the hold; sellable stock is NOT restored
"""

from __future__ import annotations

import logging
from datetime import datetime
from enum import Enum

from storefront.domain.exceptions import InvalidTransitionError
from storefront.domain.model.order import Order, OrderStatus
from storefront.domain.service.inventory_ledger import InventoryLedger

logger = logging.getLogger(__name__)


class InventoryEffect(Enum):
    NONE = "NONE"
    RESERVE = "RESERVE"
    RELEASE = "RELEASE"
    CONSUME = "CONSUME"


S = OrderStatus

TRANSITIONS: dict[tuple[OrderStatus, OrderStatus], InventoryEffect] = {
    (S.PENDING, S.ACCEPTED): InventoryEffect.RESERVE,
    (S.PENDING, S.DECLINED): InventoryEffect.NONE,
    (S.ACCEPTED, S.DECLINED): InventoryEffect.RELEASE,
    (S.ACCEPTED, S.CANCELLED): InventoryEffect.RELEASE,
    (S.ACCEPTED, S.PENDING_DELIVERY): InventoryEffect.NONE,
    (S.PENDING_DELIVERY, S.OUT_FOR_DELIVERY): InventoryEffect.NONE,
    (S.ACCEPTED, S.COMPLETED): InventoryEffect.CONSUME,
    (S.PENDING_DELIVERY, S.COMPLETED): InventoryEffect.CONSUME,
    (S.OUT_FOR_DELIVERY, S.COMPLETED): InventoryEffect.CONSUME,
}

del S


def allowed_targets(current: OrderStatus) -> list[OrderStatus]:
    """Statuses an admin may move an order to from *current*."""
    return [target for (source, target) in TRANSITIONS if source == current]


class OrderStateMachine:

    def __init__(self, ledger: InventoryLedger) -> None:
        self._ledger = ledger

    def effect_of(self, order: Order, target: OrderStatus) -> InventoryEffect:
        """Return the inventory effect of moving *order* to *target*.

        Raises InvalidTransitionError if the edge is not in the table.
        """
        effect = TRANSITIONS.get((order.status, target))
        if effect is None:
            legal = ", ".join(s.value for s in allowed_targets(order.status)) or "none"
            raise InvalidTransitionError(
                f"Cannot move order {order.order_number} from "
                f"{order.status.value} to {target.value} (allowed: {legal})"
            )
        return effect

    def transition(
        self,
        order: Order,
        target: OrderStatus,
        now: datetime | None = None,
    ) -> InventoryEffect:
        """Validate the edge, apply its inventory effect, then write the status.

        The caller owns the transaction: if the ledger raises (e.g.
        InsufficientStockError on accept) nothing must be committed.
        """
        effect = self.effect_of(order, target)
        quantities = order.item_quantities()

        if effect is InventoryEffect.RESERVE:
            self._ledger.reserve_all(quantities)
        elif effect is InventoryEffect.RELEASE:
            self._ledger.release_all(quantities)
        elif effect is InventoryEffect.CONSUME:
            self._ledger.consume_all(quantities)

        previous = order.status
        order.change_status(target, now)
        logger.info(
            "Order %s: %s -> %s (inventory effect %s)",
            order.order_number,
            previous.value,
            target.value,
            effect.value,
        )
        return effect
