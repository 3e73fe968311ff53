"""Data Transfer Objects — plain containers that cross layer boundaries.

DTOs carry data between the CLI and application layers without
exposing domain internals to the outside world.
"""

from __future__ import annotations

from dataclasses import dataclass

from storefront.domain.model.order import Order


@dataclass(frozen=True)
class OrderItemSpec:
    """Input: what was asked for (product ID or name + quantity)."""

    product: str
    quantity: int


@dataclass(frozen=True)
class OrderItemDTO:
    """Output: a single line item as displayed to the user."""

    product_id: str
    product_name: str
    quantity: int
    price: str  # formatted, e.g. "R15.00"
    total: str


@dataclass(frozen=True)
class OrderDTO:
    """Output: a complete order as displayed to the user."""

    id: int
    order_number: str
    status: str
    payment_method: str
    customer_name: str
    phone: str
    city: str
    items: list[OrderItemDTO]
    subtotal: str
    tax: str
    shipping: str
    discount: str
    total: str
    created_at: str
    archived: bool

    @staticmethod
    def from_order(order: Order) -> OrderDTO:
        return OrderDTO(
            id=order.id,  # type: ignore[arg-type]
            order_number=order.order_number,
            status=order.status.value,
            payment_method=order.payment_method.value,
            customer_name=order.shipping_address.name,
            phone=order.shipping_address.phone,
            city=order.shipping_address.city,
            items=[
                OrderItemDTO(
                    product_id=item.product_id,
                    product_name=item.product_name,
                    quantity=item.quantity.value,
                    price=str(item.price),
                    total=str(item.total),
                )
                for item in order.items
            ],
            subtotal=str(order.subtotal),
            tax=str(order.tax),
            shipping=str(order.shipping),
            discount=str(order.discount),
            total=str(order.total),
            created_at=order.created_at.strftime("%Y-%m-%d %H:%M UTC"),
            archived=order.is_archived,
        )


@dataclass(frozen=True)
class InventoryLineDTO:
    product_id: str
    product_name: str
    quantity: int
    reserved: int
    low_stock_threshold: int
    low_stock: bool
