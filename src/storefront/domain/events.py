"""Domain events emitted after an order transaction commits.

Events are plain immutable records.  They are only handed to the
notification dispatcher once the unit of work committed, so a failed
delivery can never be confused with a failed transition.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone

from storefront.domain.model.order import Order, OrderStatus, PaymentMethod


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class OrderEvent:
    order_id: int
    order_number: str
    customer_name: str
    customer_email: str | None
    customer_phone: str
    total: str
    occurred_at: datetime = field(default_factory=_utcnow, kw_only=True)


@dataclass(frozen=True)
class OrderPlaced(OrderEvent):
    payment_method: PaymentMethod

    @classmethod
    def from_order(cls, order: Order) -> OrderPlaced:
        return cls(
            payment_method=order.payment_method,
            **_snapshot(order),
        )


@dataclass(frozen=True)
class OrderStatusChanged(OrderEvent):
    previous_status: OrderStatus
    new_status: OrderStatus

    @classmethod
    def from_order(cls, order: Order, previous_status: OrderStatus) -> OrderStatusChanged:
        return cls(
            previous_status=previous_status,
            new_status=order.status,
            **_snapshot(order),
        )


def _snapshot(order: Order) -> dict:
    address = order.shipping_address
    return {
        "order_id": order.id,
        "order_number": order.order_number,
        "customer_name": address.name,
        "customer_email": address.email,
        "customer_phone": address.phone,
        "total": str(order.total),
    }
