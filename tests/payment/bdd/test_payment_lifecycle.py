"""BDD tests for the payment lifecycle."""

from commerce.cart import store
from commerce.order import engine as orders
from commerce.order.lookup import load_order
from commerce.payment import engine as payments
from pytest_bdd import given, parsers, scenarios, then, when

scenarios("features/payment_lifecycle.feature")


@given(parsers.cfparse('a pending order for customer "{customer_id}"'), target_fixture="order_id")
def pending_order_for(directory, stock, customer_id):
    stock("prod-001", 5)
    store.add_item(customer_id, "prod-001", 1)
    return orders.place_order(customer_id).result.id


@when(parsers.cfparse('a payment is initiated with "{provider}"'))
def initiate(order_id, provider):
    payments.initiate_payment(order_id, provider)


@when("the payment is confirmed")
def confirm(order_id):
    payments.confirm_payment(order_id)


@when("the payment fails")
def fail(order_id):
    payments.fail_payment(order_id)


@then(parsers.cfparse('the payment is "{status}"'))
def payment_status(order_id, status):
    assert payments.find_payment(order_id).status == status


@then(parsers.cfparse("the payment is on attempt {attempt:d}"))
def payment_attempt(order_id, attempt):
    assert payments.find_payment(order_id).attempt_count == attempt


@then(parsers.cfparse('the order is "{status}"'))
def order_status(order_id, status):
    assert load_order(order_id).status == status
