"""Application service: List Orders use case (query)."""

from __future__ import annotations

from storefront.application.dto import OrderDTO
from storefront.domain.model.order import OrderStatus
from storefront.domain.repository.unit_of_work import UnitOfWork


class ListOrdersHandler:

    def __init__(self, uow: UnitOfWork) -> None:
        self._uow = uow

    def handle(
        self,
        status: OrderStatus | None = None,
        search: str | None = None,
        include_archived: bool = False,
        user_id: str | None = None,
    ) -> list[OrderDTO]:
        with self._uow as uow:
            orders = uow.orders.list_orders(
                status=status,
                search=search,
                include_archived=include_archived,
                user_id=user_id,
            )
            return [OrderDTO.from_order(order) for order in orders]
