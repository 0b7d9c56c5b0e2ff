"""Application tests for the Payment Engine."""

from datetime import UTC, datetime, timedelta

import pytest
from commerce.errors import InvalidState, NotFound
from commerce.order import engine as orders
from commerce.order.lookup import load_order
from commerce.payment import engine as payments
from commerce.payment.gateway import get_provider
from protean import current_domain


def _backdate(order_id, seconds):
    order = load_order(order_id)
    order.created_at = datetime.now(UTC) - timedelta(seconds=seconds)
    current_domain.repository_for(type(order)).add(order)


class TestInitiatePayment:
    def test_initiate_for_pending_order(self, pending_order):
        payment = payments.initiate_payment(pending_order.id)

        assert payment.status == "Pending"
        assert payment.amount == 25.0
        assert payment.provider == "STRIPE"

    def test_explicit_provider(self, pending_order):
        assert payments.initiate_payment(pending_order.id, "PAYPAL").provider == "PAYPAL"

    def test_unknown_order(self, directory):
        with pytest.raises(NotFound):
            payments.initiate_payment("no-such-order")

    def test_order_must_be_pending(self, pending_order):
        orders.cancel_order(pending_order.id, "cust-001")
        with pytest.raises(InvalidState) as exc:
            payments.initiate_payment(pending_order.id)
        assert exc.value.message == "Order is not in PENDING status"

    def test_stale_order_has_already_shipped(self, pending_order):
        _backdate(pending_order.id, 20)

        with pytest.raises(InvalidState) as exc:
            payments.initiate_payment(pending_order.id)

        assert exc.value.message == "Order is not in PENDING status"
        assert exc.value.details["status"] == "Shipped"
        assert payments.find_payment(pending_order.id) is None

    def test_second_initiation_rejected(self, pending_order):
        payments.initiate_payment(pending_order.id)
        with pytest.raises(InvalidState) as exc:
            payments.initiate_payment(pending_order.id)
        assert exc.value.message == "Payment already initiated for this order"

    def test_retry_after_failure_reuses_the_record(self, pending_order):
        payments.initiate_payment(pending_order.id)
        payments.fail_payment(pending_order.id)

        payment = payments.initiate_payment(pending_order.id)

        assert payment.status == "Pending"
        assert payment.attempt_count == 2


class TestPaymentSession:
    def test_session_initiates_when_missing(self, pending_order):
        session = payments.create_payment_session(pending_order.id, "STRIPE")

        assert session.status == "Pending"
        assert session.amount == 25.0
        assert session.checkout_url == f"https://checkout.cartflow.local/stripe/{pending_order.id}"

    def test_session_reuses_existing_payment(self, pending_order):
        payments.initiate_payment(pending_order.id, "STRIPE")

        first = payments.create_payment_session(pending_order.id, "STRIPE")
        second = payments.create_payment_session(pending_order.id, "STRIPE")

        assert first == second
        assert payments.find_payment(pending_order.id).attempt_count == 1

    def test_session_reports_the_recorded_provider(self, pending_order):
        payments.initiate_payment(pending_order.id, "PAYPAL")
        session = payments.create_payment_session(pending_order.id, "STRIPE")
        assert session.provider == "PAYPAL"
        assert session.checkout_url.endswith(f"/paypal/{pending_order.id}")

    def test_session_is_requested_from_provider(self, pending_order):
        payments.create_payment_session(pending_order.id, "STRIPE")
        assert get_provider().calls == [{"order_id": pending_order.id, "amount": 25.0, "provider": "STRIPE"}]


class TestConfirmPayment:
    def test_confirm_cascades_order_to_paid(self, pending_order):
        payments.initiate_payment(pending_order.id)

        outcome = payments.confirm_payment(pending_order.id, "pi_123")

        assert outcome.result.status == "Success"
        assert outcome.result.provider_payment_id == "pi_123"
        assert load_order(pending_order.id).status == "Paid"

    def test_confirm_after_order_shipped_keeps_shipped(self, pending_order):
        payments.initiate_payment(pending_order.id)
        _backdate(pending_order.id, 20)

        outcome = payments.confirm_payment(pending_order.id, "pi_late")

        assert outcome.result.status == "Success"
        assert load_order(pending_order.id).status == "Shipped"

    def test_paid_order_shows_delivery_estimate(self, pending_order):
        payments.initiate_payment(pending_order.id)
        payments.confirm_payment(pending_order.id)

        view = orders.get_order_by_id(pending_order.id, "cust-001")

        assert view.status == "Paid"
        assert view.estimated_delivery_date is not None

    def test_confirm_without_payment_is_not_found(self, pending_order):
        with pytest.raises(NotFound) as exc:
            payments.confirm_payment(pending_order.id)
        assert exc.value.message == "Payment not found"
        assert load_order(pending_order.id).status == "Pending"

    def test_second_confirm_is_rejected_and_order_stays_paid(self, pending_order):
        payments.initiate_payment(pending_order.id)
        payments.confirm_payment(pending_order.id)

        with pytest.raises(InvalidState):
            payments.confirm_payment(pending_order.id)

        assert load_order(pending_order.id).status == "Paid"

    def test_confirm_for_cancelled_order_is_rejected(self, pending_order):
        payments.initiate_payment(pending_order.id)
        orders.cancel_order(pending_order.id, "cust-001")

        with pytest.raises(InvalidState):
            payments.confirm_payment(pending_order.id)

        assert payments.find_payment(pending_order.id).status == "Pending"
        assert load_order(pending_order.id).status == "Cancelled"

    def test_status_update_email(self, pending_order, emails):
        payments.initiate_payment(pending_order.id)
        emails.reset()

        outcome = payments.confirm_payment(pending_order.id)

        assert outcome.side_effects_ok
        assert emails.sent_emails[0]["body"] == "Your order status is now: PAID"


class TestFailPayment:
    def test_fail_leaves_order_pending(self, pending_order):
        payments.initiate_payment(pending_order.id)

        payment = payments.fail_payment(pending_order.id)

        assert payment.status == "Failed"
        assert load_order(pending_order.id).status == "Pending"

    def test_fail_without_payment_is_not_found(self, pending_order):
        with pytest.raises(NotFound):
            payments.fail_payment(pending_order.id)

    def test_fail_after_success_is_rejected(self, pending_order):
        payments.initiate_payment(pending_order.id)
        payments.confirm_payment(pending_order.id)
        with pytest.raises(InvalidState):
            payments.fail_payment(pending_order.id)
