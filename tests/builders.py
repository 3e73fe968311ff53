"""Small factories for domain objects used across the test suite."""

from __future__ import annotations

from storefront.domain.model.inventory import InventoryItem
from storefront.domain.model.order import (
    Order,
    OrderItem,
    OrderStatus,
    ShippingAddress,
)
from storefront.domain.model.product import Product
from storefront.domain.model.value_objects import Money, Quantity
from storefront.domain.service.order_totals import calculate_totals


def make_address(name: str = "Thandi Nkosi", phone: str = "0821234567") -> ShippingAddress:
    return ShippingAddress(
        name=name,
        address_line1="12 Long Street",
        city="Cape Town",
        postal_code="8001",
        phone=phone,
        email="thandi@example.com",
    )


def make_item(
    product_id: str = "1",
    name: str = "Widget",
    qty: int = 1,
    price: str = "15.00",
) -> OrderItem:
    return OrderItem(
        product_id=product_id,
        product_name=name,
        quantity=Quantity(qty),
        price=Money.of(price),
    )


def make_order(
    items: list[OrderItem] | None = None,
    status: OrderStatus = OrderStatus.PENDING,
    order_number: str = "FUS-1-TEST",
) -> Order:
    items = items or [make_item()]
    order = Order.create(order_number, items, make_address(), calculate_totals(items))
    order.status = status
    return order


def catalog() -> tuple[list[Product], list[InventoryItem]]:
    """Widget (R15, 100 in stock) and Gadget (R25, 50 in stock)."""
    products = [
        Product(id="1", name="Widget", price=Money.of("15.00")),
        Product(id="2", name="Gadget", price=Money.of("25.00")),
    ]
    inventory = [
        InventoryItem(product_id="1", product_name="Widget", quantity=100),
        InventoryItem(product_id="2", product_name="Gadget", quantity=50),
    ]
    return products, inventory
