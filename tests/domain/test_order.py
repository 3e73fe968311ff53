"""Unit tests for the Order aggregate and its business rules."""

from datetime import datetime, timezone

import pytest

from storefront.domain.exceptions import (
    InvalidTransitionError,
    OrderNotArchivableError,
    OrderNotEditableError,
    ValidationError,
)
from storefront.domain.model.order import (
    Order,
    OrderStatus,
    PaymentMethod,
    ShippingAddress,
)
from storefront.domain.model.value_objects import Money
from storefront.domain.service.order_totals import calculate_totals
from tests.builders import make_address, make_item, make_order


class TestOrderCreation:

    def test_cash_on_delivery_starts_pending(self):
        items = [make_item(qty=2, price="10.00")]
        order = Order.create("FUS-1", items, make_address(), calculate_totals(items))
        assert order.status == OrderStatus.PENDING
        assert order.id is None  # assigned by repository
        assert order.subtotal == Money.of("20.00")
        assert order.total == Money.of("23.00")

    def test_online_payment_starts_awaiting_payment(self):
        items = [make_item()]
        order = Order.create(
            "FUS-1",
            items,
            make_address(),
            calculate_totals(items),
            payment_method=PaymentMethod.ONLINE,
        )
        assert order.status == OrderStatus.AWAITING_PAYMENT

    def test_empty_items_rejected(self):
        with pytest.raises(ValidationError, match="at least one item"):
            Order.create("FUS-1", [], make_address(), calculate_totals([]))

    def test_51_items_rejected(self):
        items = [make_item(product_id=str(n)) for n in range(51)]
        with pytest.raises(ValidationError, match="Maximum 50 items"):
            Order.create("FUS-1", items, make_address(), calculate_totals(items))

    def test_totals_are_consistent(self):
        order = make_order([make_item(qty=3), make_item("2", "Gadget", 2, "25.00")])
        assert order.totals_are_consistent


class TestShippingAddress:

    def test_missing_city_rejected(self):
        with pytest.raises(ValidationError, match="Shipping city is required"):
            ShippingAddress(
                name="A", address_line1="1 Road", city=" ", postal_code="8001", phone="1"
            )

    def test_country_defaults_to_south_africa(self):
        assert make_address().country == "ZA"


class TestItemQuantities:

    def test_sums_lines_per_product(self):
        order = make_order([make_item(qty=2), make_item(qty=3), make_item("2", "Gadget")])
        assert order.item_quantities() == {"1": 5, "2": 1}

    def test_reserved_quantities_empty_while_pending(self):
        assert make_order().reserved_quantities() == {}

    def test_reserved_quantities_while_accepted(self):
        order = make_order([make_item(qty=4)], status=OrderStatus.ACCEPTED)
        assert order.reserved_quantities() == {"1": 4}


class TestConfirmPayment:

    def test_awaiting_payment_becomes_pending(self):
        order = make_order(status=OrderStatus.AWAITING_PAYMENT)
        order.confirm_payment()
        assert order.status == OrderStatus.PENDING

    def test_rejected_in_other_statuses(self):
        order = make_order(status=OrderStatus.PENDING)
        with pytest.raises(InvalidTransitionError, match="expected AWAITING_PAYMENT"):
            order.confirm_payment()


class TestReplaceItems:

    def test_swaps_items_and_totals(self):
        order = make_order()
        new_items = [make_item(qty=4)]
        now = datetime(2024, 5, 1, tzinfo=timezone.utc)
        order.replace_items(new_items, calculate_totals(new_items), now)
        assert order.items == new_items
        assert order.subtotal == Money.of("60.00")
        assert order.updated_at == now

    @pytest.mark.parametrize(
        "status", [OrderStatus.COMPLETED, OrderStatus.DECLINED, OrderStatus.CANCELLED]
    )
    def test_terminal_orders_are_not_editable(self, status):
        order = make_order(status=status)
        with pytest.raises(OrderNotEditableError):
            order.replace_items([make_item()], calculate_totals([make_item()]))


class TestArchive:

    def test_terminal_order_is_archived(self):
        order = make_order(status=OrderStatus.COMPLETED)
        order.archive()
        assert order.is_archived

    def test_active_order_cannot_be_archived(self):
        with pytest.raises(OrderNotArchivableError, match="can be archived"):
            make_order(status=OrderStatus.ACCEPTED).archive()

    def test_archiving_twice_rejected(self):
        order = make_order(status=OrderStatus.CANCELLED)
        order.archive()
        with pytest.raises(OrderNotArchivableError, match="already archived"):
            order.archive()
