"""Notification dispatcher contract.

Handlers call ``publish_after_commit`` once their unit of work committed.
Whatever the dispatcher does (email, SMS, a background queue) it can
never turn a committed transition into a reported failure: errors are
logged and dropped here.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod

from storefront.domain.events import OrderEvent

logger = logging.getLogger(__name__)


class NotificationDispatcher(ABC):

    @abstractmethod
    def dispatch(self, event: OrderEvent) -> None:
        """Hand the event to the delivery channel (fire-and-forget)."""


def publish_after_commit(dispatcher: NotificationDispatcher | None, event: OrderEvent) -> None:
    if dispatcher is None:
        return
    try:
        dispatcher.dispatch(event)
    except Exception:
        logger.exception(
            "Failed to dispatch %s for order %s",
            type(event).__name__,
            event.order_number,
        )
