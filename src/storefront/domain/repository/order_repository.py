"""Abstract repository for Order aggregate."""

from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import datetime

from storefront.domain.model.order import Order, OrderStatus


class OrderRepository(ABC):

    @abstractmethod
    def get_by_id(self, order_id: int) -> Order | None:
        """Return an order with its items, or None if not found."""

    @abstractmethod
    def get_for_update(self, order_id: int) -> Order | None:
        """Return an order with its items and lock its row for the transaction."""

    @abstractmethod
    def get_by_number(self, order_number: str) -> Order | None:
        """Return an order by its human-readable number, or None."""

    @abstractmethod
    def list_orders(
        self,
        status: OrderStatus | None = None,
        search: str | None = None,
        include_archived: bool = False,
        user_id: str | None = None,
    ) -> list[Order]:
        """Return orders, newest first.

        ``search`` matches order number, shipping name or phone
        (case-insensitive substring).  Archived orders are skipped unless
        ``include_archived`` is set.  ``user_id`` narrows the list to one
        customer's order history (guest orders never match).
        """

    @abstractmethod
    def list_stale(self, statuses: frozenset[OrderStatus], before: datetime) -> list[Order]:
        """Return orders in *statuses* last updated before *before*."""

    @abstractmethod
    def add(self, order: Order) -> None:
        """Persist a new order and its items; assigns ``order.id``."""

    @abstractmethod
    def save(self, order: Order) -> None:
        """Persist header fields (status, totals, timestamps) of an existing order."""

    @abstractmethod
    def replace_items(self, order: Order) -> None:
        """Delete the stored items of *order* and insert ``order.items``."""

    @abstractmethod
    def delete(self, order: Order) -> None:
        """Remove the order and its items outright."""
