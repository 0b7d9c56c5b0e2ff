"""Application tests for the Cart Store."""

import pytest
from commerce.cart import store
from commerce.cart.cart import Cart
from commerce.errors import Forbidden, InsufficientStock, InvalidState, NotFound
from protean import current_domain


class TestGetOrCreate:
    def test_creates_empty_cart(self):
        cart = store.get_or_create("cust-001")
        assert str(cart.customer_id) == "cust-001"
        assert len(cart.items) == 0

    def test_returns_the_same_cart(self, stock):
        stock("prod-001", 5)
        store.add_item("cust-001", "prod-001", 1)
        cart = store.get_or_create("cust-001")
        assert len(cart.items) == 1


class TestAddItem:
    def test_snapshots_name_and_price(self, stock):
        stock("prod-001", 5)
        cart = store.add_item("cust-001", "prod-001", 2)
        item = cart.items[0]
        assert item.product_name == "Mechanical Keyboard"
        assert item.unit_price == 10.0

    def test_price_snapshot_survives_catalogue_change(self, catalogue, stock):
        stock("prod-001", 5)
        store.add_item("cust-001", "prod-001", 1)
        catalogue.add_product("prod-001", "Mechanical Keyboard", 99.0)
        cart = current_domain.repository_for(Cart).get("cust-001")
        assert cart.items[0].unit_price == 10.0

    def test_checks_live_inventory(self, stock):
        stock("prod-001", 2)
        with pytest.raises(InsufficientStock) as exc:
            store.add_item("cust-001", "prod-001", 3)
        assert exc.value.available == 2

    def test_merge_revalidates_against_inventory(self, stock):
        stock("prod-001", 3)
        store.add_item("cust-001", "prod-001", 2)
        with pytest.raises(InsufficientStock):
            store.add_item("cust-001", "prod-001", 2)
        assert store.get_or_create("cust-001").items[0].quantity == 2

    def test_product_without_inventory_is_out_of_stock(self, catalogue):
        with pytest.raises(InsufficientStock) as exc:
            store.add_item("cust-001", "prod-002", 1)
        assert exc.value.available == 0

    def test_unknown_product_rejected(self, catalogue):
        with pytest.raises(NotFound):
            store.add_item("cust-001", "prod-missing", 1)

    def test_inactive_product_rejected(self, stock):
        stock("prod-retired", 5)
        with pytest.raises(InvalidState):
            store.add_item("cust-001", "prod-retired", 1)


class TestUpdateAndRemove:
    def test_update_quantity(self, stock):
        stock("prod-001", 5)
        cart = store.add_item("cust-001", "prod-001", 1)
        cart = store.update_item("cust-001", str(cart.items[0].id), 4)
        assert cart.items[0].quantity == 4

    def test_update_checks_current_inventory(self, stock):
        stock("prod-001", 5)
        cart = store.add_item("cust-001", "prod-001", 1)
        stock("prod-001", 2)
        with pytest.raises(InsufficientStock) as exc:
            store.update_item("cust-001", str(cart.items[0].id), 3)
        assert exc.value.available == 2

    def test_update_other_customers_item_is_forbidden(self, stock):
        stock("prod-001", 5)
        alice_cart = store.add_item("cust-001", "prod-001", 1)
        store.get_or_create("cust-002")
        with pytest.raises(Forbidden):
            store.update_item("cust-002", str(alice_cart.items[0].id), 2)

    def test_remove_item(self, stock):
        stock("prod-001", 5)
        cart = store.add_item("cust-001", "prod-001", 1)
        cart = store.remove_item("cust-001", str(cart.items[0].id))
        assert len(cart.items) == 0

    def test_remove_other_customers_item_is_forbidden(self, stock):
        stock("prod-001", 5)
        alice_cart = store.add_item("cust-001", "prod-001", 1)
        with pytest.raises(Forbidden):
            store.remove_item("cust-002", str(alice_cart.items[0].id))
        assert len(store.get_or_create("cust-001").items) == 1


class TestClear:
    def test_clear_empties_cart(self, stock):
        stock("prod-001", 5)
        stock("prod-002", 5)
        store.add_item("cust-001", "prod-001", 1)
        store.add_item("cust-001", "prod-002", 1)
        store.clear("cust-001")
        assert len(store.get_or_create("cust-001").items) == 0

    def test_clear_without_cart_is_a_no_op(self):
        store.clear("cust-009")
