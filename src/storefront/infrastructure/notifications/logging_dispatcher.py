"""Notification dispatcher that writes customer notifications to the log.

Stands in for the email / SMS channel; useful for local runs and demos.
"""

from __future__ import annotations

import logging

from storefront.application.notifications import NotificationDispatcher
from storefront.domain.events import OrderEvent, OrderPlaced, OrderStatusChanged

logger = logging.getLogger(__name__)

_STATUS_MESSAGES = {
    "PENDING": "Your order has been received and is awaiting review.",
    "ACCEPTED": "Your order has been accepted and is being prepared.",
    "DECLINED": "Unfortunately your order has been declined.",
    "PENDING_DELIVERY": "Your order is packed and waiting for the courier.",
    "OUT_FOR_DELIVERY": "Your order is out for delivery.",
    "COMPLETED": "Your order has been delivered. Thank you!",
    "CANCELLED": "Your order has been cancelled.",
}


class LoggingNotificationDispatcher(NotificationDispatcher):

    def dispatch(self, event: OrderEvent) -> None:
        recipient = event.customer_email or event.customer_phone
        if isinstance(event, OrderStatusChanged):
            message = _STATUS_MESSAGES.get(
                event.new_status.value, f"Order status: {event.new_status.value}"
            )
            logger.info(
                "Notify %s <%s>: order %s %s -> %s. %s",
                event.customer_name,
                recipient,
                event.order_number,
                event.previous_status.value,
                event.new_status.value,
                message,
            )
        elif isinstance(event, OrderPlaced):
            logger.info(
                "Notify %s <%s>: order %s placed (%s, total %s)",
                event.customer_name,
                recipient,
                event.order_number,
                event.payment_method.value,
                event.total,
            )
        else:
            logger.info("Unhandled notification %s for %s", type(event).__name__, event.order_number)
