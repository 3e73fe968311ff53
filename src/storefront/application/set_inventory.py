"""Application service: Set Inventory use case.

Admin stock take / restock.  Only the sellable ``quantity`` (and the
low-stock threshold) is overwritten; ``reserved`` belongs to the ledger.
"""

from __future__ import annotations

from storefront.application.line_items import resolve_product
from storefront.application.retry import RetryPolicy, run_in_transaction
from storefront.domain.model.inventory import InventoryItem
from storefront.domain.repository.unit_of_work import UnitOfWork


class SetInventoryHandler:

    def __init__(self, uow: UnitOfWork, retry_policy: RetryPolicy | None = None) -> None:
        self._uow = uow
        self._retry_policy = retry_policy

    def handle(
        self,
        product_ref: str,
        quantity: int,
        low_stock_threshold: int | None = None,
    ) -> InventoryItem:
        def operation(uow: UnitOfWork) -> InventoryItem:
            product = resolve_product(uow.products, product_ref)
            existing = uow.inventory.get_for_update(product.id)
            if existing is None:
                existing = InventoryItem(
                    product_id=product.id,
                    product_name=product.name,
                    quantity=0,
                )
            existing.set_stock(quantity, low_stock_threshold)
            uow.inventory.save(existing)
            return existing

        return run_in_transaction(self._uow, operation, self._retry_policy)
