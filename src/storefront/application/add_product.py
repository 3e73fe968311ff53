"""Application service: Add Product use case.

A product and its inventory record are created together.
"""

from __future__ import annotations

from storefront.application.retry import run_in_transaction
from storefront.domain.exceptions import ValidationError
from storefront.domain.model.inventory import DEFAULT_LOW_STOCK_THRESHOLD, InventoryItem
from storefront.domain.model.product import Product
from storefront.domain.model.value_objects import DEFAULT_CURRENCY, Money
from storefront.domain.repository.unit_of_work import UnitOfWork


class AddProductHandler:

    def __init__(self, uow: UnitOfWork, currency: str = DEFAULT_CURRENCY) -> None:
        self._uow = uow
        self._currency = currency

    def handle(
        self,
        name: str,
        price: str,
        quantity: int = 0,
        low_stock_threshold: int = DEFAULT_LOW_STOCK_THRESHOLD,
    ) -> Product:
        """Add a new product to the catalog with its starting stock."""
        if not name or not name.strip():
            raise ValidationError("Product name is required")

        money = Money.of(price, self._currency)
        if money.amount <= 0:
            raise ValidationError("Product price must be greater than zero")

        def operation(uow: UnitOfWork) -> Product:
            if uow.products.get_by_name(name.strip()) is not None:
                raise ValidationError(f"Product '{name.strip()}' already exists")

            product = Product(id=uow.products.next_id(), name=name.strip(), price=money)
            uow.products.save(product)
            uow.inventory.save(
                InventoryItem(
                    product_id=product.id,
                    product_name=product.name,
                    quantity=quantity,
                    low_stock_threshold=low_stock_threshold,
                )
            )
            return product

        return run_in_transaction(self._uow, operation)
