"""Application tests for order cancellation."""

from datetime import UTC, datetime, timedelta

import pytest
from commerce.cart import store
from commerce.errors import Forbidden, InvalidState, NotFound
from commerce.inventory import ledger
from commerce.order import engine
from commerce.order.lookup import load_order
from protean import current_domain


@pytest.fixture()
def placed_order(directory, stock):
    stock("prod-001", 5)
    stock("prod-002", 5)
    store.add_item("cust-001", "prod-001", 2)
    store.add_item("cust-001", "prod-002", 1)
    return engine.place_order("cust-001").result


def _force_status(order_id, status):
    order = load_order(order_id)
    order.status = status
    current_domain.repository_for(type(order)).add(order)


def _backdate(order_id, seconds):
    order = load_order(order_id)
    order.created_at = datetime.now(UTC) - timedelta(seconds=seconds)
    current_domain.repository_for(type(order)).add(order)


class TestCancelOrder:
    def test_cancel_pending_order(self, placed_order):
        outcome = engine.cancel_order(placed_order.id, "cust-001")
        assert outcome.result.status == "Cancelled"
        assert load_order(placed_order.id).status == "Cancelled"

    def test_cancel_returns_stock(self, placed_order):
        engine.cancel_order(placed_order.id, "cust-001")
        assert ledger.available("prod-001") == 5
        assert ledger.available("prod-002") == 5

    def test_cancel_confirmed_order(self, placed_order):
        _force_status(placed_order.id, "Confirmed")
        outcome = engine.cancel_order(placed_order.id, "cust-001")
        assert outcome.result.status == "Cancelled"

    @pytest.mark.parametrize("status", ["Paid", "Shipped", "Delivered", "Cancelled"])
    def test_cannot_cancel_after_payment_or_shipping(self, placed_order, status):
        _force_status(placed_order.id, status)

        with pytest.raises(InvalidState):
            engine.cancel_order(placed_order.id, "cust-001")

        assert ledger.available("prod-001") == 3

    def test_stale_pending_order_cannot_be_cancelled(self, placed_order):
        _backdate(placed_order.id, 120)

        with pytest.raises(InvalidState) as exc:
            engine.cancel_order(placed_order.id, "cust-001")

        assert exc.value.details["status"] == "Delivered"
        assert ledger.available("prod-001") == 3
        assert ledger.available("prod-002") == 4
        assert engine.get_order_by_id(placed_order.id, "cust-001").status == "Delivered"

    def test_cancelling_twice_does_not_release_twice(self, placed_order):
        engine.cancel_order(placed_order.id, "cust-001")
        with pytest.raises(InvalidState):
            engine.cancel_order(placed_order.id, "cust-001")
        assert ledger.available("prod-001") == 5

    def test_other_customer_cannot_cancel(self, placed_order):
        with pytest.raises(Forbidden):
            engine.cancel_order(placed_order.id, "cust-002")
        assert load_order(placed_order.id).status == "Pending"

    def test_unknown_order(self, directory):
        with pytest.raises(NotFound):
            engine.cancel_order("no-such-order", "cust-001")


class TestCancellationEmail:
    def test_status_update_sent(self, placed_order, emails):
        emails.reset()
        outcome = engine.cancel_order(placed_order.id, "cust-001")

        assert outcome.side_effects_ok
        email = emails.sent_emails[0]
        assert email["subject"] == f"Order #{placed_order.id} status updated"
        assert email["body"] == "Your order status is now: CANCELLED"

    def test_email_failure_keeps_the_cancellation(self, placed_order, emails):
        emails.configure(should_succeed=False)
        outcome = engine.cancel_order(placed_order.id, "cust-001")

        assert not outcome.side_effects_ok
        assert load_order(placed_order.id).status == "Cancelled"
