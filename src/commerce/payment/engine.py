"""Payment Engine — payment lifecycle entry points and webhook ingestion.

All writes for an order's payment hold that order's lock, the same lock
order auto-advance and cancellation take, so a confirmation never races a
status change of the order it cascades into.
"""

from dataclasses import dataclass

import structlog
from protean.exceptions import InvalidDataError, ValidationError
from protean.utils.globals import current_domain

from commerce.config import get_settings
from commerce.errors import CommerceError
from commerce.locks import locks, order_key
from commerce.notification.notifier import notify_status_update
from commerce.order.lookup import load_order
from commerce.outcome import Outcome
from commerce.payment.gateway import get_provider
from commerce.payment.lifecycle import (
    ConfirmPayment,
    FailPayment,
    InitiatePayment,
    find_payment,
    load_payment,
)
from commerce.payment.payment import PROVIDER_REFERENCE_MAX_LENGTH, Payment

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class PaymentSession:
    """Session descriptor handed to the client. Reading it changes nothing."""

    order_id: str
    amount: float
    provider: str
    status: str
    checkout_url: str


@dataclass(frozen=True)
class WebhookOutcome:
    handled: bool
    order_id: str | None = None
    detail: str | None = None


def initiate_payment(order_id: str, provider: str | None = None) -> Payment:
    """Open a PENDING payment for a PENDING order.

    A FAILED payment is re-initiated in place. Any other existing payment
    makes this an InvalidState.
    """
    provider = provider or get_settings().default_payment_provider
    with locks.hold(order_key(order_id)):
        current_domain.process(
            InitiatePayment(order_id=str(order_id), provider=provider),
            asynchronous=False,
        )
        payment = load_payment(order_id)

    logger.info("payment_initiated", order_id=str(order_id), provider=provider, attempt=payment.attempt_count)
    return payment


def create_payment_session(order_id: str, provider: str | None = None) -> PaymentSession:
    """Reuse the order's payment, or initiate one, and describe its checkout session."""
    provider = provider or get_settings().default_payment_provider
    with locks.hold(order_key(order_id)):
        payment = find_payment(order_id)
        if payment is None:
            payment = initiate_payment(order_id, provider)

    session = get_provider().create_checkout_session(str(order_id), payment.amount, payment.provider)
    return PaymentSession(
        order_id=str(payment.order_id),
        amount=payment.amount,
        provider=payment.provider,
        status=payment.status,
        checkout_url=session.checkout_url,
    )


def confirm_payment(order_id: str, provider_payment_id: str | None = None) -> Outcome:
    """Mark the payment SUCCESS and cascade the order to PAID.

    Only a PENDING payment can be confirmed; confirming twice raises
    InvalidState and leaves the order PAID.
    """
    with locks.hold(order_key(order_id)):
        order_status = current_domain.process(
            ConfirmPayment(order_id=str(order_id), provider_payment_id=provider_payment_id),
            asynchronous=False,
        )
        payment = load_payment(order_id)

    logger.info("payment_confirmed", order_id=str(order_id), order_status=order_status)
    order = load_order(order_id)
    effect = notify_status_update(str(order.customer_id), str(order_id), order_status)
    return Outcome(result=payment, side_effects=[effect])


def fail_payment(order_id: str) -> Payment:
    """Mark the payment FAILED. The order stays as it is and can be paid again."""
    with locks.hold(order_key(order_id)):
        current_domain.process(FailPayment(order_id=str(order_id)), asynchronous=False)
        payment = load_payment(order_id)

    logger.info("payment_failed", order_id=str(order_id), attempt=payment.attempt_count)
    return payment


def _order_reference(payload) -> str | None:
    if not isinstance(payload, dict):
        return None
    reference = payload.get("orderId")
    if isinstance(reference, bool) or not isinstance(reference, (str, int)):
        return None
    reference = str(reference).strip()
    return reference or None


def _provider_reference(payload) -> tuple[bool, str | None]:
    reference = payload.get("providerPaymentId")
    if reference is None:
        return True, None
    if isinstance(reference, bool) or not isinstance(reference, (str, int)):
        return False, None
    reference = str(reference)
    if len(reference) > PROVIDER_REFERENCE_MAX_LENGTH:
        return False, None
    return True, reference


def handle_webhook(provider: str, payload, headers: dict | None = None) -> WebhookOutcome:
    """Treat any provider event that names an order as a successful payment.

    Payloads without a usable ``orderId``, or with a ``providerPaymentId``
    that is not a short string or number, are ignored. The signature headers
    are not verified; a production deployment must check them and dispatch
    on the event type before calling this.
    """
    order_id = _order_reference(payload)
    if order_id is None:
        logger.info("webhook_ignored", provider=provider)
        return WebhookOutcome(handled=False, detail="No order reference in payload")

    usable, provider_payment_id = _provider_reference(payload)
    if not usable:
        logger.info("webhook_ignored", provider=provider, order_id=order_id)
        return WebhookOutcome(handled=False, order_id=order_id, detail="Invalid provider payment reference")

    try:
        confirm_payment(order_id, provider_payment_id)
    except CommerceError as exc:
        logger.warning("webhook_rejected", provider=provider, order_id=order_id, error=exc.message)
        return WebhookOutcome(handled=False, order_id=order_id, detail=exc.message)
    except (ValidationError, InvalidDataError) as exc:
        logger.warning("webhook_rejected", provider=provider, order_id=order_id, error=exc.messages)
        return WebhookOutcome(handled=False, order_id=order_id, detail="Invalid webhook payload")

    return WebhookOutcome(handled=True, order_id=order_id)
