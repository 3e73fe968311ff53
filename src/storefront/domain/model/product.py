"""Product aggregate.

Products live independently of orders. They have their own lifecycle:
prices change, products are deactivated and soft-deleted from the catalog.
Orders only ever read them to take a price snapshot.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from storefront.domain.exceptions import ValidationError
from storefront.domain.model.value_objects import Money


@dataclass
class Product:
    """A product in the catalog.

    Kept as a mutable dataclass because price updates and deactivation are
    legitimate mutations on the aggregate.
    """

    id: str
    name: str
    price: Money
    is_active: bool = True
    deleted_at: datetime | None = None

    @property
    def is_orderable(self) -> bool:
        """Customers can only order active, non-deleted products."""
        return self.is_active and self.deleted_at is None

    def update_price(self, new_price: Money) -> None:
        """Change the product price.

        This does NOT affect any existing orders because orders
        capture a price snapshot at creation time.
        """
        if new_price.amount <= 0:
            raise ValidationError("Product price must be greater than zero")
        self.price = new_price
