"""Application service: Show Inventory use case (query)."""

from __future__ import annotations

from storefront.application.dto import InventoryLineDTO
from storefront.domain.repository.unit_of_work import UnitOfWork


class ShowInventoryHandler:

    def __init__(self, uow: UnitOfWork) -> None:
        self._uow = uow

    def handle(self, low_stock_only: bool = False) -> list[InventoryLineDTO]:
        with self._uow as uow:
            if low_stock_only:
                items = uow.inventory.list_low_stock()
            else:
                items = uow.inventory.list_all()
            return [
                InventoryLineDTO(
                    product_id=item.product_id,
                    product_name=item.product_name,
                    quantity=item.quantity,
                    reserved=item.reserved,
                    low_stock_threshold=item.low_stock_threshold,
                    low_stock=item.is_low_stock,
                )
                for item in items
            ]
