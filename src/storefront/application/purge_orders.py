"""Application service: Purge Stale Orders use case (batch job).

Hard-deletes completed, declined and cancelled orders that have not been
touched for the retention period.  Meant to be run daily by a scheduler;
it is not part of the order state machine.
"""

from __future__ import annotations

import logging
from datetime import datetime, timedelta, timezone

from storefront.application.retry import RetryPolicy, run_in_transaction
from storefront.domain.exceptions import ValidationError
from storefront.domain.model.order import TERMINAL_STATUSES
from storefront.domain.repository.unit_of_work import UnitOfWork

logger = logging.getLogger(__name__)


class PurgeStaleOrdersHandler:

    def __init__(
        self,
        uow: UnitOfWork,
        retention_days: int = 14,
        retry_policy: RetryPolicy | None = None,
    ) -> None:
        if retention_days < 1:
            raise ValidationError(
                f"Retention must be at least one day, got {retention_days}"
            )
        self._uow = uow
        self._retention = timedelta(days=retention_days)
        self._retry_policy = retry_policy

    def handle(self, now: datetime | None = None) -> int:
        """Delete stale terminal orders and return how many were removed."""
        cutoff = (now or datetime.now(timezone.utc)) - self._retention

        def operation(uow: UnitOfWork) -> list[str]:
            stale = uow.orders.list_stale(TERMINAL_STATUSES, before=cutoff)
            for order in stale:
                uow.orders.delete(order)
            return [order.order_number for order in stale]

        purged = run_in_transaction(self._uow, operation, self._retry_policy)
        if purged:
            logger.info("Purged %d orders older than %s", len(purged), cutoff.date())
        else:
            logger.info("No stale orders to purge")
        return len(purged)
