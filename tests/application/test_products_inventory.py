"""Integration tests for the product catalog and inventory use cases."""

import pytest

from storefront.application.add_product import AddProductHandler
from storefront.application.set_inventory import SetInventoryHandler
from storefront.application.show_inventory import ShowInventoryHandler
from storefront.application.update_product import UpdateProductHandler
from storefront.domain.exceptions import ProductNotFoundError, ValidationError
from storefront.domain.model.value_objects import Money
from tests.builders import catalog
from tests.fakes import FakeUnitOfWork


def _setup():
    products, inventory = catalog()
    return FakeUnitOfWork(products, inventory)


class TestAddProduct:

    def test_creates_product_with_inventory(self):
        uow = _setup()
        product = AddProductHandler(uow).handle("Gizmo", "9.99", quantity=12)
        assert product.id == "3"
        assert uow.product("3").price == Money.of("9.99")
        assert uow.inventory_of("3").quantity == 12

    def test_duplicate_name_rejected(self):
        with pytest.raises(ValidationError, match="already exists"):
            AddProductHandler(_setup()).handle("widget", "1.00")

    def test_zero_price_rejected(self):
        with pytest.raises(ValidationError, match="greater than zero"):
            AddProductHandler(_setup()).handle("Gizmo", "0")


class TestUpdateProduct:

    def test_price_change(self):
        uow = _setup()
        UpdateProductHandler(uow).handle("1", new_price="19.50")
        assert uow.product("1").price == Money.of("19.50")

    def test_deactivate_and_delete(self):
        uow = _setup()
        UpdateProductHandler(uow).handle("2", is_active=False)
        assert not uow.product("2").is_orderable
        UpdateProductHandler(uow).handle("2", delete=True)
        assert uow.product("2").deleted_at is not None
        with pytest.raises(ProductNotFoundError):
            UpdateProductHandler(uow).handle("2", new_price="1.00")


class TestInventory:

    def test_set_inventory_by_name_keeps_reserved(self):
        uow = _setup()
        with uow:
            widget = uow.inventory.get_for_update("1")
            widget.reserve(4)
            uow.inventory.save(widget)
            uow.commit()

        SetInventoryHandler(uow).handle("Widget", 8, low_stock_threshold=2)

        widget = uow.inventory_of("1")
        assert (widget.quantity, widget.reserved, widget.low_stock_threshold) == (8, 4, 2)

    def test_negative_stock_rejected(self):
        with pytest.raises(ValidationError):
            SetInventoryHandler(_setup()).handle("1", -3)

    def test_low_stock_report(self):
        uow = _setup()
        SetInventoryHandler(uow).handle("Gadget", 4)
        lines = ShowInventoryHandler(uow).handle(low_stock_only=True)
        assert [line.product_name for line in lines] == ["Gadget"]
        assert lines[0].low_stock

    def test_full_listing(self):
        lines = ShowInventoryHandler(_setup()).handle()
        assert [line.product_name for line in lines] == ["Gadget", "Widget"]
