"""InventoryItem aggregate — tracks sellable stock and reservations per product.

Each product has exactly one InventoryItem.  ``quantity`` is what can still
be sold; ``reserved`` is what accepted-but-undelivered orders are holding.
Accepting an order moves units from ``quantity`` to ``reserved``; completing
it drops them from ``reserved`` for good.
"""

from __future__ import annotations

from dataclasses import dataclass

from storefront.domain.exceptions import (
    InsufficientStockError,
    InventoryContractError,
    ValidationError,
)

DEFAULT_LOW_STOCK_THRESHOLD = 10


@dataclass
class InventoryItem:
    """Aggregate root for inventory tracking.

    Invariants:
    - ``quantity`` is always >= 0
    - ``reserved`` is always >= 0

    Operations that would break an invariant are rejected, never clamped.
    """

    product_id: str
    product_name: str
    quantity: int
    reserved: int = 0
    low_stock_threshold: int = DEFAULT_LOW_STOCK_THRESHOLD

    def __post_init__(self) -> None:
        if self.quantity < 0 or self.reserved < 0:
            raise ValidationError(
                f"Inventory for {self.product_name} cannot be negative "
                f"(quantity={self.quantity}, reserved={self.reserved})"
            )
        if self.low_stock_threshold < 0:
            raise ValidationError("Low stock threshold cannot be negative")

    @property
    def is_low_stock(self) -> bool:
        return self.quantity <= self.low_stock_threshold

    def reserve(self, qty: int) -> None:
        """Hold *qty* sellable units for an accepted order.

        Raises InsufficientStockError if fewer than *qty* units are sellable.
        """
        _require_positive(qty, "Reservation")
        if qty > self.quantity:
            raise InsufficientStockError(self.product_name, qty, self.quantity)
        self.quantity -= qty
        self.reserved += qty

    def release(self, qty: int) -> None:
        """Return a held reservation to sellable stock (decline / cancel)."""
        _require_positive(qty, "Release")
        self._require_reserved(qty, "release")
        self.quantity += qty
        self.reserved -= qty

    def consume(self, qty: int) -> None:
        """Drop a held reservation permanently (the goods were delivered).

        ``quantity`` was already decremented when the reservation was taken
        and is not touched here.
        """
        _require_positive(qty, "Consume")
        self._require_reserved(qty, "consume")
        self.reserved -= qty

    def set_stock(self, quantity: int, low_stock_threshold: int | None = None) -> None:
        """Admin override of the sellable quantity (restock, stock take)."""
        if quantity < 0:
            raise ValidationError("Inventory quantity cannot be negative")
        if low_stock_threshold is not None:
            if low_stock_threshold < 0:
                raise ValidationError("Low stock threshold cannot be negative")
            self.low_stock_threshold = low_stock_threshold
        self.quantity = quantity

    def _require_reserved(self, qty: int, action: str) -> None:
        if qty > self.reserved:
            raise InventoryContractError(
                f"Cannot {action} {qty} of {self.product_name} "
                f"- only {self.reserved} currently reserved"
            )


def _require_positive(qty: int, label: str) -> None:
    if qty <= 0:
        raise ValidationError(f"{label} quantity must be positive")
