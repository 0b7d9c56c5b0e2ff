"""Payment lifecycle — commands and handler.

``ConfirmPayment`` is the one place where the payment and order state
machines meet: both aggregates are changed in the same Unit of Work, and
the order is checked before either of them is touched.
"""

from protean import handle
from protean.exceptions import ObjectNotFoundError
from protean.fields import Identifier, String
from protean.utils.globals import current_domain

from commerce.domain import commerce
from commerce.errors import InvalidState, NotFound
from commerce.order.advancement import catch_up
from commerce.order.lookup import load_order
from commerce.order.order import PAYABLE_STATUSES, Order, OrderStatus
from commerce.payment.payment import PROVIDER_REFERENCE_MAX_LENGTH, Payment, PaymentStatus


@commerce.command(part_of="Payment")
class InitiatePayment:
    order_id = Identifier(required=True)
    provider = String(max_length=50, required=True)


@commerce.command(part_of="Payment")
class ConfirmPayment:
    order_id = Identifier(required=True)
    provider_payment_id = String(max_length=PROVIDER_REFERENCE_MAX_LENGTH)


@commerce.command(part_of="Payment")
class FailPayment:
    order_id = Identifier(required=True)


def find_payment(order_id):
    try:
        return current_domain.repository_for(Payment).get(str(order_id))
    except ObjectNotFoundError:
        return None


def load_payment(order_id) -> Payment:
    payment = find_payment(order_id)
    if payment is None:
        raise NotFound("Payment not found", {"order_id": str(order_id)})
    return payment


@commerce.command_handler(part_of=Payment)
class PaymentLifecycleHandler:
    @handle(InitiatePayment)
    def initiate_payment(self, command):
        order = load_order(command.order_id)
        catch_up(order)
        if OrderStatus(order.status) != OrderStatus.PENDING:
            raise InvalidState(
                "Order is not in PENDING status",
                {"order_id": str(order.id), "status": order.status},
            )

        payment = find_payment(command.order_id)
        if payment is None:
            payment = Payment.initiate(order_id=str(order.id), amount=order.total_amount, provider=command.provider)
        elif PaymentStatus(payment.status) == PaymentStatus.FAILED:
            payment.reinitiate(amount=order.total_amount, provider=command.provider)
        else:
            raise InvalidState(
                "Payment already initiated for this order",
                {"order_id": str(order.id), "status": payment.status},
            )

        current_domain.repository_for(Payment).add(payment)
        return payment.status

    @handle(ConfirmPayment)
    def confirm_payment(self, command):
        payment = load_payment(command.order_id)
        order = load_order(command.order_id)
        catch_up(order)
        if OrderStatus(order.status) == OrderStatus.CANCELLED:
            raise InvalidState(
                "Cannot confirm payment for a cancelled order",
                {"order_id": str(order.id)},
            )

        payment.confirm(command.provider_payment_id)
        current_domain.repository_for(Payment).add(payment)

        # Orders that already moved past payment keep their status
        if OrderStatus(order.status) in PAYABLE_STATUSES:
            order.mark_paid()
            current_domain.repository_for(Order).add(order)

        return order.status

    @handle(FailPayment)
    def fail_payment(self, command):
        payment = load_payment(command.order_id)
        payment.fail()
        current_domain.repository_for(Payment).add(payment)
        return payment.status
