"""Integration tests for the EditOrderItems use case."""

import pytest

from storefront.application.create_order import CreateOrderHandler
from storefront.application.dto import OrderItemSpec
from storefront.application.edit_order_items import EditOrderItemsHandler
from storefront.application.transition_status import TransitionOrderStatusHandler
from storefront.domain.exceptions import (
    InsufficientStockError,
    OrderNotEditableError,
    OrderNotFoundError,
)
from storefront.domain.model.order import OrderStatus
from storefront.domain.model.value_objects import Money
from tests.builders import catalog, make_address
from tests.fakes import FakeUnitOfWork


def _setup(widget_stock=5, widget_qty=3, accept=True):
    products, inventory = catalog()
    inventory[0].quantity = widget_stock
    uow = FakeUnitOfWork(products, inventory)
    order_id = CreateOrderHandler(uow).handle(
        [OrderItemSpec("Widget", widget_qty)], make_address()
    ).id
    if accept:
        TransitionOrderStatusHandler(uow).handle(order_id, OrderStatus.ACCEPTED)
    return EditOrderItemsHandler(uow), uow, order_id


class TestEditAcceptedOrder:

    def test_edit_up_to_own_hold_plus_stock(self):
        handler, uow, order_id = _setup(widget_stock=5, widget_qty=3)
        dto = handler.handle(order_id, [OrderItemSpec("Widget", 5)])
        widget = uow.inventory_of("1")
        assert (widget.quantity, widget.reserved) == (0, 5)
        assert dto.items[0].quantity == 5
        assert dto.subtotal == "R75.00"
        assert uow.order(order_id).item_quantities() == {"1": 5}

    def test_edit_beyond_availability_leaves_order_untouched(self):
        handler, uow, order_id = _setup(widget_stock=5, widget_qty=3)
        with pytest.raises(InsufficientStockError, match="requested 10, available 5"):
            handler.handle(order_id, [OrderItemSpec("Widget", 10)])
        widget = uow.inventory_of("1")
        assert (widget.quantity, widget.reserved) == (2, 3)
        assert uow.order(order_id).item_quantities() == {"1": 3}

    def test_totals_are_recomputed_and_consistent(self):
        handler, uow, order_id = _setup()
        handler.handle(order_id, [OrderItemSpec("Widget", 1), OrderItemSpec("Gadget", 2)])
        order = uow.order(order_id)
        assert order.subtotal == Money.of("65.00")
        assert order.tax == Money.of("9.75")
        assert order.totals_are_consistent

    def test_edit_uses_current_catalog_price(self):
        handler, uow, order_id = _setup()
        with uow:
            widget = uow.products.get_by_id("1")
            widget.update_price(Money.of("20.00"))
            uow.products.save(widget)
            uow.commit()
        dto = handler.handle(order_id, [OrderItemSpec("Widget", 2)])
        assert dto.items[0].price == "R20.00"


class TestEditOtherStatuses:

    def test_pending_order_edit_reserves_nothing(self):
        handler, uow, order_id = _setup(widget_stock=5, accept=False)
        handler.handle(order_id, [OrderItemSpec("Widget", 5)])
        widget = uow.inventory_of("1")
        assert (widget.quantity, widget.reserved) == (5, 0)

    def test_completed_order_is_not_editable(self):
        handler, uow, order_id = _setup()
        TransitionOrderStatusHandler(uow).handle(order_id, OrderStatus.COMPLETED)
        with pytest.raises(OrderNotEditableError):
            handler.handle(order_id, [OrderItemSpec("Widget", 1)])

    def test_missing_order(self):
        handler, _, _ = _setup()
        with pytest.raises(OrderNotFoundError):
            handler.handle(42, [OrderItemSpec("Widget", 1)])
