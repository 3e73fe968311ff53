"""Integration tests for the SQLAlchemy repositories and unit of work.

Each test runs against its own SQLite file so that separate connections
(and threads) see the same database.
"""

import threading
from datetime import datetime, timedelta, timezone

import pytest
from sqlalchemy.exc import OperationalError

from storefront.application.add_product import AddProductHandler
from storefront.application.create_order import CreateOrderHandler
from storefront.application.dto import OrderItemSpec
from storefront.application.edit_order_items import EditOrderItemsHandler
from storefront.application.list_orders import ListOrdersHandler
from storefront.application.transition_status import TransitionOrderStatusHandler
from storefront.domain.exceptions import (
    InsufficientStockError,
    TransactionConflictError,
)
from storefront.domain.model.order import TERMINAL_STATUSES, OrderStatus
from storefront.domain.model.value_objects import Money
from storefront.infrastructure.persistence.database import (
    create_db_engine,
    create_session_factory,
    init_schema,
)
from storefront.infrastructure.persistence.unit_of_work import SqlAlchemyUnitOfWork
from tests.builders import make_address


@pytest.fixture
def session_factory(tmp_path):
    engine = create_db_engine(f"sqlite:///{tmp_path / 'storefront.db'}")
    init_schema(engine)
    yield create_session_factory(engine)
    engine.dispose()


@pytest.fixture
def uow(session_factory):
    uow = SqlAlchemyUnitOfWork(session_factory)
    AddProductHandler(uow).handle("Widget", "15.00", quantity=5)
    AddProductHandler(uow).handle("Gadget", "25.00", quantity=50)
    return uow


def _inventory(uow, product_id):
    with uow:
        return uow.inventory.get_by_product_id(product_id)


class TestRepositories:

    def test_products_get_sequential_ids(self, uow):
        with uow:
            products = uow.products.list_all()
            assert [(p.id, p.name) for p in products] == [("2", "Gadget"), ("1", "Widget")]
            assert uow.products.get_by_name("WIDGET").price == Money.of("15.00")

    def test_order_round_trip(self, uow):
        dto = CreateOrderHandler(uow).handle(
            [OrderItemSpec("Widget", 2), OrderItemSpec("Gadget", 1)], make_address()
        )
        with uow:
            order = uow.orders.get_by_number(dto.order_number)
        assert order.id == dto.id
        assert order.item_quantities() == {"1": 2, "2": 1}
        assert order.total == Money.of("63.25")
        assert order.created_at.tzinfo is not None
        assert order.shipping_address == make_address()
        assert order.totals_are_consistent

    def test_uncommitted_changes_are_rolled_back(self, uow):
        with uow:
            widget = uow.inventory.get_for_update("1")
            widget.set_stock(99)
            uow.inventory.save(widget)
        assert _inventory(uow, "1").quantity == 5

    def test_list_stale_and_delete(self, uow):
        dto = CreateOrderHandler(uow).handle([OrderItemSpec("Widget", 1)], make_address())
        old = datetime.now(timezone.utc) - timedelta(days=30)
        with uow:
            order = uow.orders.get_for_update(dto.id)
            order.change_status(OrderStatus.DECLINED, now=old)
            uow.orders.save(order)
            uow.commit()

        cutoff = datetime.now(timezone.utc) - timedelta(days=14)
        with uow:
            stale = uow.orders.list_stale(TERMINAL_STATUSES, before=cutoff)
            assert [o.id for o in stale] == [dto.id]
            uow.orders.delete(stale[0])
            uow.commit()
        with uow:
            assert uow.orders.get_by_id(dto.id) is None

    def test_list_orders_by_customer(self, uow):
        create = CreateOrderHandler(uow)
        mine = create.handle([OrderItemSpec("Widget", 1)], make_address(), user_id="user-1")
        create.handle([OrderItemSpec("Widget", 1)], make_address())
        create.handle([OrderItemSpec("Gadget", 1)], make_address(), user_id="user-2")
        with uow:
            history = uow.orders.list_orders(user_id="user-1")
        assert [o.id for o in history] == [mine.id]
        assert history[0].user_id == "user-1"

    def test_low_stock_listing(self, uow):
        with uow:
            assert [i.product_name for i in uow.inventory.list_low_stock()] == ["Widget"]


class TestOrderLifecycle:

    def test_accept_then_edit_then_complete(self, uow):
        order_id = CreateOrderHandler(uow).handle(
            [OrderItemSpec("Widget", 3)], make_address()
        ).id
        transition = TransitionOrderStatusHandler(uow)

        transition.handle(order_id, OrderStatus.ACCEPTED)
        widget = _inventory(uow, "1")
        assert (widget.quantity, widget.reserved) == (2, 3)

        EditOrderItemsHandler(uow).handle(order_id, [OrderItemSpec("Widget", 5)])
        widget = _inventory(uow, "1")
        assert (widget.quantity, widget.reserved) == (0, 5)

        transition.handle(order_id, OrderStatus.COMPLETED)
        widget = _inventory(uow, "1")
        assert (widget.quantity, widget.reserved) == (0, 0)

        [listed] = ListOrdersHandler(uow).handle(status=OrderStatus.COMPLETED)
        assert [i.quantity for i in listed.items] == [5]

    def test_failed_accept_commits_nothing(self, uow):
        order_id = CreateOrderHandler(uow).handle(
            [OrderItemSpec("Widget", 2), OrderItemSpec("Gadget", 2)], make_address()
        ).id
        with uow:
            gadget = uow.inventory.get_for_update("2")
            gadget.set_stock(1)
            uow.inventory.save(gadget)
            uow.commit()

        with pytest.raises(InsufficientStockError):
            TransitionOrderStatusHandler(uow).handle(order_id, OrderStatus.ACCEPTED)

        widget = _inventory(uow, "1")
        assert (widget.quantity, widget.reserved) == (5, 0)
        with uow:
            assert uow.orders.get_by_id(order_id).status == OrderStatus.PENDING


class TestConcurrency:

    def test_last_unit_is_reserved_exactly_once(self, session_factory):
        seed = SqlAlchemyUnitOfWork(session_factory)
        AddProductHandler(seed).handle("Widget", "15.00", quantity=1)
        create = CreateOrderHandler(seed)
        order_ids = [
            create.handle([OrderItemSpec("Widget", 1)], make_address()).id
            for _ in range(2)
        ]

        barrier = threading.Barrier(2)
        outcomes = []

        def accept(order_id):
            handler = TransitionOrderStatusHandler(SqlAlchemyUnitOfWork(session_factory))
            barrier.wait()
            try:
                handler.handle(order_id, OrderStatus.ACCEPTED)
                outcomes.append("accepted")
            except InsufficientStockError:
                outcomes.append("insufficient")

        threads = [threading.Thread(target=accept, args=(oid,)) for oid in order_ids]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert sorted(outcomes) == ["accepted", "insufficient"]
        widget = _inventory(seed, "1")
        assert (widget.quantity, widget.reserved) == (0, 1)

    def test_operational_error_surfaces_as_conflict(self, uow):
        with pytest.raises(TransactionConflictError, match="database is locked"):
            with uow:
                raise OperationalError("BEGIN IMMEDIATE", {}, Exception("database is locked"))
