"""Application service: Update Product use case."""

from __future__ import annotations

from datetime import datetime, timezone

from storefront.application.retry import run_in_transaction
from storefront.domain.exceptions import ProductNotFoundError
from storefront.domain.model.value_objects import Money
from storefront.domain.repository.unit_of_work import UnitOfWork


class UpdateProductHandler:

    def __init__(self, uow: UnitOfWork) -> None:
        self._uow = uow

    def handle(
        self,
        product_id: str,
        new_price: str | None = None,
        is_active: bool | None = None,
        delete: bool = False,
    ) -> None:
        """Update a product's price, availability or soft-delete it.

        This does NOT affect any existing orders — they captured a
        price snapshot at creation time.
        """

        def operation(uow: UnitOfWork) -> None:
            product = uow.products.get_by_id(product_id)
            if product is None or product.deleted_at is not None:
                raise ProductNotFoundError(f"Product with ID '{product_id}' not found")

            if new_price is not None:
                product.update_price(Money.of(new_price, product.price.currency))
            if is_active is not None:
                product.is_active = is_active
            if delete:
                product.deleted_at = datetime.now(timezone.utc)
            uow.products.save(product)

        run_in_transaction(self._uow, operation)
