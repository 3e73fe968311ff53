"""Fire-and-forget wrapper around another dispatcher.

``dispatch`` only queues the event on a thread pool and returns at once;
the wrapped dispatcher runs on a worker thread.  Delivery errors are
logged there and never reach the caller.
"""

from __future__ import annotations

import logging
from concurrent.futures import Future, ThreadPoolExecutor

from storefront.application.notifications import NotificationDispatcher
from storefront.domain.events import OrderEvent

logger = logging.getLogger(__name__)


class BackgroundNotificationDispatcher(NotificationDispatcher):

    def __init__(self, inner: NotificationDispatcher, max_workers: int = 2) -> None:
        self._inner = inner
        self._executor = ThreadPoolExecutor(
            max_workers=max_workers, thread_name_prefix="notify"
        )

    def dispatch(self, event: OrderEvent) -> None:
        future = self._executor.submit(self._inner.dispatch, event)
        future.add_done_callback(lambda f: self._log_failure(f, event))

    def shutdown(self, wait: bool = True) -> None:
        """Stop accepting events; with ``wait`` drain the queue first."""
        self._executor.shutdown(wait=wait)

    @staticmethod
    def _log_failure(future: Future, event: OrderEvent) -> None:
        exc = future.exception()
        if exc is not None:
            logger.error(
                "Notification %s for order %s failed: %s",
                type(event).__name__,
                event.order_number,
                exc,
                exc_info=exc,
            )
