"""Application service: Show Order use case (query)."""

from __future__ import annotations

from storefront.application.dto import OrderDTO
from storefront.domain.exceptions import OrderNotFoundError
from storefront.domain.repository.unit_of_work import UnitOfWork


class ShowOrderHandler:

    def __init__(self, uow: UnitOfWork) -> None:
        self._uow = uow

    def handle(self, order_ref: int | str) -> OrderDTO:
        """Find an order by numeric ID or by order number.

        Archived orders are treated as not found.
        """
        with self._uow as uow:
            order = None
            if isinstance(order_ref, int) or str(order_ref).isdigit():
                order = uow.orders.get_by_id(int(order_ref))
            if order is None:
                order = uow.orders.get_by_number(str(order_ref))
            if order is None or order.is_archived:
                raise OrderNotFoundError(f"Order {order_ref} not found")
            return OrderDTO.from_order(order)
