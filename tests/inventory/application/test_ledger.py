"""Application tests for the Inventory Ledger."""

import pytest
from commerce.errors import InsufficientStock, NotFound
from commerce.inventory import ledger
from commerce.inventory.record import InventoryRecord
from commerce.inventory.stock import ReserveStock
from protean import current_domain
from protean.exceptions import InvalidDataError


class TestSetQuantity:
    def test_creates_record_when_absent(self, stock):
        stock("prod-001", 12)
        record = current_domain.repository_for(InventoryRecord).get("prod-001")
        assert record.quantity == 12

    def test_overwrites_existing_level(self, stock):
        stock("prod-001", 12)
        stock("prod-001", 3)
        assert ledger.available("prod-001") == 3

    def test_zero_is_allowed(self, stock):
        stock("prod-001", 0)
        assert ledger.get_record("prod-001").quantity == 0

    def test_unknown_product_rejected(self, catalogue):
        with pytest.raises(NotFound):
            ledger.set_quantity("prod-missing", 5)

    def test_negative_quantity_rejected(self, catalogue):
        with pytest.raises(InvalidDataError):
            ledger.set_quantity("prod-001", -2)


class TestReserve:
    def test_reserve_returns_remaining(self, stock):
        stock("prod-001", 10)
        assert ledger.reserve("prod-001", 4) == 6
        assert ledger.available("prod-001") == 6

    def test_insufficient_stock_leaves_quantity_untouched(self, stock):
        stock("prod-001", 2)
        with pytest.raises(InsufficientStock) as exc:
            ledger.reserve("prod-001", 5)
        assert exc.value.available == 2
        assert ledger.available("prod-001") == 2

    def test_missing_record_is_out_of_stock(self, catalogue):
        with pytest.raises(InsufficientStock) as exc:
            ledger.reserve("prod-002", 1)
        assert exc.value.available == 0

    def test_missing_record_is_not_created(self, catalogue):
        with pytest.raises(InsufficientStock):
            ledger.reserve("prod-002", 1)
        with pytest.raises(NotFound):
            ledger.get_record("prod-002")

    def test_zero_quantity_command_rejected(self):
        with pytest.raises(InvalidDataError):
            ReserveStock(product_id="prod-001", quantity=0)


class TestRelease:
    def test_release_adds_back(self, stock):
        stock("prod-001", 1)
        assert ledger.release("prod-001", 3) == 4

    def test_release_creates_missing_record(self, catalogue):
        ledger.release("prod-002", 2)
        assert ledger.available("prod-002") == 2


class TestReads:
    def test_available_is_zero_without_record(self):
        assert ledger.available("prod-unknown") == 0

    def test_get_record_missing_raises_not_found(self):
        with pytest.raises(NotFound):
            ledger.get_record("prod-unknown")
