"""Application service: Transition Order Status use case.

Loads and locks the order, lets the state machine validate the edge and
apply its inventory effect, writes the new status, all in one
transaction.  The customer notification is emitted only after commit.
"""

from __future__ import annotations

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
from storefront.domain.service.inventory_ledger import InventoryLedger
from storefront.domain.service.order_state_machine import OrderStateMachine


class TransitionOrderStatusHandler:

    def __init__(
        self,
        uow: UnitOfWork,
        dispatcher: NotificationDispatcher | None = None,
        retry_policy: RetryPolicy | None = None,
    ) -> None:
        self._uow = uow
        self._dispatcher = dispatcher
        self._retry_policy = retry_policy

    def handle(self, order_id: int, target: OrderStatus) -> OrderDTO:
        def operation(uow: UnitOfWork) -> tuple[Order, OrderStatus]:
            order = uow.orders.get_for_update(order_id)
            if order is None:
                raise OrderNotFoundError(f"Order #{order_id} not found")

            previous = order.status
            machine = OrderStateMachine(InventoryLedger(uow.inventory))
            machine.transition(order, target)
            uow.orders.save(order)
            return order, previous

        order, previous = run_in_transaction(self._uow, operation, self._retry_policy)

        publish_after_commit(
            self._dispatcher, OrderStatusChanged.from_order(order, previous)
        )
        return OrderDTO.from_order(order)
