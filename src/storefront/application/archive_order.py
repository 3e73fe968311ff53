"""Application service: Archive Order use case.

Soft-deletes a terminal order.  Archived orders disappear from listings
but stay in storage until the purge job removes them.
"""

from __future__ import annotations

import logging

from storefront.application.retry import RetryPolicy, run_in_transaction
from storefront.domain.exceptions import OrderNotFoundError
from storefront.domain.repository.unit_of_work import UnitOfWork

logger = logging.getLogger(__name__)


class ArchiveOrderHandler:

    def __init__(self, uow: UnitOfWork, retry_policy: RetryPolicy | None = None) -> None:
        self._uow = uow
        self._retry_policy = retry_policy

    def handle(self, order_id: int) -> None:
        def operation(uow: UnitOfWork) -> str:
            order = uow.orders.get_for_update(order_id)
            if order is None:
                raise OrderNotFoundError(f"Order #{order_id} not found")
            order.archive()
            uow.orders.save(order)
            return order.order_number

        order_number = run_in_transaction(self._uow, operation, self._retry_policy)
        logger.info("Order %s archived", order_number)
