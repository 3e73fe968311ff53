"""Abstract unit of work: one durable transaction over the repositories.

Usage::

    with uow:
        order = uow.orders.get_for_update(order_id)
        ...
        uow.commit()

Leaving the block without ``commit()`` (or through an exception) rolls
everything back.  Entering the same unit of work again starts a fresh
transaction, which is what the retry helper relies on.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from storefront.domain.repository.inventory_repository import InventoryRepository
from storefront.domain.repository.order_repository import OrderRepository
from storefront.domain.repository.product_repository import ProductRepository


class UnitOfWork(ABC):
    orders: OrderRepository
    products: ProductRepository
    inventory: InventoryRepository

    def __enter__(self) -> UnitOfWork:
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.rollback()

    @abstractmethod
    def commit(self) -> None:
        """Make every change in this transaction durable."""

    @abstractmethod
    def rollback(self) -> None:
        """Discard uncommitted changes (no-op after a commit)."""
