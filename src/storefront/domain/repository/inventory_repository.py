"""Abstract repository for InventoryItem aggregate."""

from __future__ import annotations

from abc import ABC, abstractmethod

from storefront.domain.model.inventory import InventoryItem


class InventoryRepository(ABC):

    @abstractmethod
    def get_by_product_id(self, product_id: str) -> InventoryItem | None:
        """Return the inventory record for a product, or None."""

    @abstractmethod
    def get_for_update(self, product_id: str) -> InventoryItem | None:
        """Return the inventory record and lock it until the transaction ends.

        Every read-check-write on ``quantity`` / ``reserved`` must go through
        this method so concurrent reservations for one product serialize.
        """

    @abstractmethod
    def list_all(self) -> list[InventoryItem]:
        """Return every inventory record."""

    @abstractmethod
    def list_low_stock(self) -> list[InventoryItem]:
        """Return records whose quantity is at or below their threshold."""

    @abstractmethod
    def save(self, item: InventoryItem) -> None:
        """Persist a new or updated inventory record."""
