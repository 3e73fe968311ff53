"""End-to-end tests for the click CLI against a temporary SQLite database."""

import logging

import pytest
from click.testing import CliRunner

from storefront.application.list_orders import ListOrdersHandler
from storefront.application.transition_status import TransitionOrderStatusHandler
from storefront.domain.exceptions import TransactionConflictError
from storefront.infrastructure import bootstrap
from storefront.infrastructure.cli.main import cli
from storefront.infrastructure.config import get_settings


@pytest.fixture
def run(tmp_path, monkeypatch):
    monkeypatch.setenv("STOREFRONT_DATABASE_URL", f"sqlite:///{tmp_path / 'cli.db'}")
    monkeypatch.setenv("STOREFRONT_PAYMENT_GATEWAY__ENABLED", "false")
    get_settings.cache_clear()
    bootstrap.engine.cache_clear()
    bootstrap.notification_dispatcher.cache_clear()

    runner = CliRunner()

    def invoke(*args):
        return runner.invoke(cli, list(args))

    yield invoke

    bootstrap.engine().dispose()
    logging.getLogger("storefront").handlers.clear()
    get_settings.cache_clear()
    bootstrap.engine.cache_clear()
    bootstrap.notification_dispatcher.cache_clear()


ADDRESS = [
    "--name", "Thandi Nkosi",
    "--address", "12 Long Street",
    "--city", "Cape Town",
    "--postal-code", "8001",
    "--phone", "0821234567",
]


def _seed(run):
    assert run("product", "add", "--name", "Widget", "--price", "15.00", "--quantity", "5").exit_code == 0
    assert run("product", "add", "--name", "Gadget", "--price", "25.00", "--quantity", "50").exit_code == 0


class TestProductCommands:

    def test_add_and_list(self, run):
        result = run("product", "add", "--name", "Widget", "--price", "15.00")
        assert result.exit_code == 0, result.output
        assert "Product #1 'Widget' added at R15.00" in result.output

        listing = run("product", "list")
        assert "Widget" in listing.output
        assert "active" in listing.output

    def test_duplicate_product_fails(self, run):
        _seed(run)
        result = run("product", "add", "--name", "widget", "--price", "1.00")
        assert result.exit_code == 1
        assert "already exists" in result.output


class TestOrderCommands:

    def test_create_accept_and_show(self, run):
        _seed(run)
        created = run("order", "create", "--items", "Widget:3,Gadget:1", *ADDRESS)
        assert created.exit_code == 0, created.output
        assert "Order #1 created" in created.output
        assert "R70.00" in created.output  # subtotal
        assert "R80.50" in created.output  # total incl. VAT

        accepted = run("order", "status", "--id", "1", "--to", "ACCEPTED")
        assert accepted.exit_code == 0, accepted.output
        assert "Order #1 is now ACCEPTED." in accepted.output

        inventory = run("inventory", "show")
        widget_line = next(line for line in inventory.output.splitlines() if "Widget" in line)
        assert widget_line.split()[1:3] == ["2", "3"]

        shown = run("order", "show", "--id", "1")
        assert "status=ACCEPTED" in shown.output

    def test_illegal_transition_is_reported(self, run):
        _seed(run)
        run("order", "create", "--items", "Widget:1", *ADDRESS)
        result = run("order", "status", "--id", "1", "--to", "COMPLETED")
        assert result.exit_code == 1
        assert "Cannot move order" in result.output

    def test_pending_is_not_an_admin_target(self, run):
        result = run("order", "status", "--id", "1", "--to", "PENDING")
        assert result.exit_code == 2

    def test_insufficient_stock(self, run):
        _seed(run)
        result = run("order", "create", "--items", "Widget:6", *ADDRESS)
        assert result.exit_code == 1
        assert "Insufficient inventory for Widget" in result.output

    def test_bad_item_format(self, run):
        result = run("order", "create", "--items", "Widget", *ADDRESS)
        assert result.exit_code == 2
        assert "Expected 'Product:Quantity'" in result.output

    def test_edit_archive_and_list(self, run):
        _seed(run)
        run("order", "create", "--items", "Widget:1", *ADDRESS)
        edited = run("order", "edit", "--id", "1", "--items", "Widget:2,Gadget:2")
        assert edited.exit_code == 0, edited.output
        assert "Order #1 items updated." in edited.output

        assert run("order", "archive", "--id", "1").exit_code == 1
        run("order", "status", "--id", "1", "--to", "DECLINED")
        assert run("order", "archive", "--id", "1").exit_code == 0

        assert "No orders found." in run("order", "list").output
        assert "(archived)" in run("order", "list", "--all").output

    def test_online_payment_disabled(self, run):
        _seed(run)
        result = run("order", "create", "--items", "Widget:1", "--payment", "online", *ADDRESS)
        assert result.exit_code == 1
        assert "Online payments are not configured" in result.output

    def test_purge_with_nothing_stale(self, run):
        result = run("order", "purge")
        assert result.exit_code == 0
        assert "Purged 0 order(s)." in result.output

    def test_purge_rejects_zero_day_retention(self, run):
        result = run("order", "purge", "--days", "0")
        assert result.exit_code == 1
        assert "at least one day" in result.output

    def test_list_by_customer(self, run):
        _seed(run)
        run("order", "create", "--items", "Widget:1", "--user", "user-1", *ADDRESS)
        run("order", "create", "--items", "Widget:1", *ADDRESS)
        result = run("order", "list", "--user", "user-1")
        assert result.exit_code == 0, result.output
        lines = [line for line in result.output.splitlines() if "Thandi" in line]
        assert [line.split()[0] for line in lines] == ["1"]


class TestInventoryAndPaymentCommands:

    def test_set_and_low_stock(self, run):
        _seed(run)
        assert run("inventory", "set", "--product", "Gadget", "--quantity", "3").exit_code == 0
        result = run("inventory", "low-stock")
        assert "Gadget" in result.output
        assert "LOW" in result.output

    def test_confirm_payment_for_unknown_order(self, run):
        result = run("payment", "confirm", "--id", "9", "--outcome", "success")
        assert result.exit_code == 1
        assert "Order #9 not found" in result.output


def _conflict(*args, **kwargs):
    raise TransactionConflictError("database is locked")


class TestBusyDatabase:

    def test_read_that_cannot_get_the_lock(self, run, monkeypatch):
        monkeypatch.setattr(ListOrdersHandler, "handle", _conflict)
        result = run("order", "list")
        assert result.exit_code == 1
        assert "store is busy" in result.output
        assert "Traceback" not in result.output

    def test_write_that_keeps_conflicting(self, run, monkeypatch):
        monkeypatch.setattr(TransitionOrderStatusHandler, "handle", _conflict)
        result = run("order", "status", "--id", "1", "--to", "ACCEPTED")
        assert result.exit_code == 1
        assert "store is busy" in result.output
