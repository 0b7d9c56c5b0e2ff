"""Order notifications.

``send_order_confirmation`` and ``send_status_update`` render a template and
hand it to the email channel, raising ``NotificationError`` when the channel
reports a failure. The ``notify_*`` wrappers are what the engines call after
a commit: they resolve the recipient, never raise, and report a ``SideEffect``.
"""

import structlog

from commerce.config import get_settings
from commerce.directory import get_directory
from commerce.errors import NotFound
from commerce.notification import get_email_channel
from commerce.notification.templates import OrderConfirmationTemplate, StatusUpdateTemplate
from commerce.outcome import SideEffect

logger = structlog.get_logger(__name__)


class NotificationError(Exception):
    """The email channel refused or failed to deliver a message."""


def _deliver(to_address: str, rendered: dict) -> str:
    result = get_email_channel().send(to=to_address, subject=rendered["subject"], body=rendered["body"])
    if result.get("status") != "sent":
        raise NotificationError(result.get("error") or "Email delivery failed")
    return result["message_id"]


def send_order_confirmation(to_address: str, order_id: str, amount: float) -> str:
    rendered = OrderConfirmationTemplate.render({"order_id": order_id, "amount": amount})
    return _deliver(to_address, rendered)


def send_status_update(to_address: str, order_id: str, new_status: str) -> str:
    rendered = StatusUpdateTemplate.render({"order_id": order_id, "status": new_status})
    return _deliver(to_address, rendered)


def recipient_for(customer_id: str) -> str:
    """Customer's email address, or the configured fallback mailbox."""
    try:
        customer = get_directory().find_user_by_id(customer_id)
    except NotFound:
        return get_settings().notification_fallback_address
    return customer.email or get_settings().notification_fallback_address


def notify_order_confirmation(customer_id: str, order_id: str, amount: float) -> SideEffect:
    try:
        message_id = send_order_confirmation(recipient_for(customer_id), order_id, amount)
    except Exception as exc:  # noqa: BLE001
        logger.warning("order_confirmation_failed", order_id=order_id, error=str(exc))
        return SideEffect(name="order_confirmation", delivered=False, detail=str(exc))
    return SideEffect(name="order_confirmation", delivered=True, detail=message_id)


def notify_status_update(customer_id: str, order_id: str, new_status: str) -> SideEffect:
    try:
        message_id = send_status_update(recipient_for(customer_id), order_id, new_status)
    except Exception as exc:  # noqa: BLE001
        logger.warning("status_update_failed", order_id=order_id, status=new_status, error=str(exc))
        return SideEffect(name="status_update", delivered=False, detail=str(exc))
    return SideEffect(name="status_update", delivered=True, detail=message_id)
