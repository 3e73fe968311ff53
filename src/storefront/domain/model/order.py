"""Order aggregate — the core of the domain.

The Order is an aggregate root that owns its line items and its money
totals.  Line items are immutable snapshots: editing an order replaces the
whole set, it never mutates a single item in place.

Status changes that touch inventory are driven by the OrderStateMachine
domain service; the aggregate only guards what it can decide on its own
(terminal-status rules, payment confirmation, archiving).
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from decimal import Decimal
from enum import Enum
from typing import TYPE_CHECKING

from storefront.domain.exceptions import (
    InvalidTransitionError,
    OrderNotArchivableError,
    OrderNotEditableError,
    ValidationError,
)
from storefront.domain.model.value_objects import Money, Quantity

if TYPE_CHECKING:
    from storefront.domain.service.order_totals import OrderTotals


class OrderStatus(Enum):
    AWAITING_PAYMENT = "AWAITING_PAYMENT"
    PENDING = "PENDING"
    ACCEPTED = "ACCEPTED"
    DECLINED = "DECLINED"
    PENDING_DELIVERY = "PENDING_DELIVERY"
    OUT_FOR_DELIVERY = "OUT_FOR_DELIVERY"
    COMPLETED = "COMPLETED"
    CANCELLED = "CANCELLED"


TERMINAL_STATUSES = frozenset(
    {OrderStatus.DECLINED, OrderStatus.COMPLETED, OrderStatus.CANCELLED}
)

# Statuses in which the order's items are held in ``InventoryItem.reserved``.
RESERVATION_STATUSES = frozenset(
    {OrderStatus.ACCEPTED, OrderStatus.PENDING_DELIVERY, OrderStatus.OUT_FOR_DELIVERY}
)


class PaymentMethod(Enum):
    CASH_ON_DELIVERY = "cod"
    ONLINE = "online"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class ShippingAddress:
    """Snapshot of where the order goes, copied onto the order at checkout."""

    name: str
    address_line1: str
    city: str
    postal_code: str
    phone: str
    address_line2: str | None = None
    province: str | None = None
    country: str = "ZA"
    email: str | None = None

    def __post_init__(self) -> None:
        for label, value in (
            ("name", self.name),
            ("address line 1", self.address_line1),
            ("city", self.city),
            ("postal code", self.postal_code),
            ("phone", self.phone),
        ):
            if not value or not value.strip():
                raise ValidationError(f"Shipping {label} is required")


@dataclass(frozen=True)
class OrderItem:
    """Captures the price snapshot of a product at order (or edit) time."""

    product_id: str
    product_name: str
    quantity: Quantity
    price: Money  # unit price, locked when the item was created

    @property
    def total(self) -> Money:
        return self.price * self.quantity.value


# ---------------------------------------------------------------------------
# Constants for business rules
# ---------------------------------------------------------------------------
MAX_LINE_ITEMS = 50


@dataclass
class Order:
    """Aggregate root for customer orders.

    Use the ``Order.create()`` factory for new orders — it enforces all
    business rules.  The ``__init__`` is intentionally simple so the
    repository can reconstitute persisted orders without re-validating.
    """

    id: int | None
    order_number: str
    items: list[OrderItem]
    shipping_address: ShippingAddress
    status: OrderStatus = OrderStatus.PENDING
    user_id: str | None = None
    payment_method: PaymentMethod = PaymentMethod.CASH_ON_DELIVERY
    subtotal: Money = field(default_factory=Money.zero)
    tax: Money = field(default_factory=Money.zero)
    shipping: Money = field(default_factory=Money.zero)
    discount: Money = field(default_factory=Money.zero)
    total: Money = field(default_factory=Money.zero)
    created_at: datetime = field(default_factory=_utcnow)
    updated_at: datetime = field(default_factory=_utcnow)
    deleted_at: datetime | None = None

    # --- Factory (used for NEW orders only) -----------------------------------

    @staticmethod
    def create(
        order_number: str,
        items: list[OrderItem],
        shipping_address: ShippingAddress,
        totals: OrderTotals,
        user_id: str | None = None,
        payment_method: PaymentMethod = PaymentMethod.CASH_ON_DELIVERY,
    ) -> Order:
        """Create a new order, enforcing all invariants.

        Cash-on-delivery orders go straight to PENDING (awaiting admin
        review); online orders wait in AWAITING_PAYMENT until the payment
        gateway confirms them.
        """
        if not order_number:
            raise ValidationError("Order number is required")
        _validate_items(items)

        status = (
            OrderStatus.AWAITING_PAYMENT
            if payment_method is PaymentMethod.ONLINE
            else OrderStatus.PENDING
        )
        order = Order(
            id=None,
            order_number=order_number,
            items=list(items),
            shipping_address=shipping_address,
            status=status,
            user_id=user_id,
            payment_method=payment_method,
        )
        order._apply_totals(totals)
        return order

    # --- Queries --------------------------------------------------------------

    @property
    def is_terminal(self) -> bool:
        return self.status in TERMINAL_STATUSES

    @property
    def holds_reservation(self) -> bool:
        return self.status in RESERVATION_STATUSES

    @property
    def is_archived(self) -> bool:
        return self.deleted_at is not None

    @property
    def totals_are_consistent(self) -> bool:
        items_subtotal = sum((item.total.amount for item in self.items), Decimal("0"))
        expected = (
            self.subtotal.amount
            + self.tax.amount
            + self.shipping.amount
            - self.discount.amount
        )
        return items_subtotal == self.subtotal.amount and expected == self.total.amount

    def item_quantities(self) -> dict[str, int]:
        """Units per product across all lines."""
        quantities: dict[str, int] = {}
        for item in self.items:
            quantities[item.product_id] = (
                quantities.get(item.product_id, 0) + item.quantity.value
            )
        return quantities

    def reserved_quantities(self) -> dict[str, int]:
        """Units this order currently holds in inventory (empty if none)."""
        return self.item_quantities() if self.holds_reservation else {}

    # --- State transitions ----------------------------------------------------

    def change_status(self, target: OrderStatus, now: datetime | None = None) -> None:
        """Write the new status.

        Only the OrderStateMachine calls this, after it validated the edge
        and applied the matching inventory effect.
        """
        self.status = target
        self.updated_at = now or _utcnow()

    def confirm_payment(self, now: datetime | None = None) -> None:
        """Transition AWAITING_PAYMENT -> PENDING once payment is captured."""
        if self.status != OrderStatus.AWAITING_PAYMENT:
            raise InvalidTransitionError(
                f"Cannot confirm payment for order {self.order_number} "
                f"- current status is {self.status.value}, expected AWAITING_PAYMENT"
            )
        self.change_status(OrderStatus.PENDING, now)

    def replace_items(
        self,
        items: list[OrderItem],
        totals: OrderTotals,
        now: datetime | None = None,
    ) -> None:
        """Swap the whole item set and the totals derived from it.

        Inventory reconciliation must happen *before* calling this
        (coordinated by the OrderItemsReconciler).
        """
        if self.is_terminal:
            raise OrderNotEditableError(
                f"Cannot edit order {self.order_number} in {self.status.value} status"
            )
        _validate_items(items)
        self.items = list(items)
        self._apply_totals(totals)
        self.updated_at = now or _utcnow()

    def archive(self, now: datetime | None = None) -> None:
        """Soft-delete the order.  Only terminal orders can be archived."""
        if not self.is_terminal:
            raise OrderNotArchivableError(
                f"Only completed, declined or cancelled orders can be archived "
                f"(order {self.order_number} is {self.status.value})"
            )
        if self.is_archived:
            raise OrderNotArchivableError(
                f"Order {self.order_number} is already archived"
            )
        self.deleted_at = now or _utcnow()
        self.updated_at = self.deleted_at

    # --- Internal helpers -----------------------------------------------------

    def _apply_totals(self, totals: OrderTotals) -> None:
        self.subtotal = totals.subtotal
        self.tax = totals.tax
        self.shipping = totals.shipping
        self.discount = totals.discount
        self.total = totals.total


def _validate_items(items: list[OrderItem]) -> None:
    if not items:
        raise ValidationError("Order must contain at least one item")
    if len(items) > MAX_LINE_ITEMS:
        raise ValidationError(f"Maximum {MAX_LINE_ITEMS} items per order")
