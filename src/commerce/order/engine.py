"""Order Engine — checkout, order reads with auto-advance, and cancellation.

Lock order for checkout: the customer's cart lock first, then the stock
lock of every product in the cart. Cancellation takes the order lock, then
stock locks. Keys sort as cart < order < stock, so no two operations can
wait on each other in a cycle.
"""

from datetime import UTC, datetime

import structlog
from protean.utils.globals import current_domain

from commerce.cart.items import find_cart
from commerce.config import get_settings
from commerce.locks import cart_key, locks, order_key, stock_key
from commerce.notification.notifier import notify_order_confirmation, notify_status_update
from commerce.order.advancement import AdvanceOrderStatus
from commerce.order.cancellation import CancelOrder
from commerce.order.lookup import load_order, load_owned_order, orders_of
from commerce.order.order import advance_status
from commerce.order.placement import PlaceOrder
from commerce.order.views import OrderView, order_view
from commerce.outcome import Outcome

logger = structlog.get_logger(__name__)


def place_order(customer_id: str) -> Outcome:
    """Convert the customer's cart into a PENDING order.

    Returns an Outcome whose result is the OrderView and whose side effects
    report the confirmation email. The order is committed before the email
    is attempted and is never undone by it.
    """
    with locks.hold(cart_key(customer_id)):
        cart = find_cart(customer_id)
        product_ids = {str(item.product_id) for item in cart.items} if cart is not None else set()

        with locks.hold(*(stock_key(product_id) for product_id in product_ids)):
            order_id = current_domain.process(
                PlaceOrder(customer_id=str(customer_id)),
                asynchronous=False,
            )

    order = load_order(order_id)
    logger.info(
        "order_placed",
        order_id=order_id,
        customer_id=str(customer_id),
        total_amount=order.total_amount,
    )

    view = order_view(order, delivery_days=get_settings().delivery_estimate_days)
    effect = notify_order_confirmation(str(customer_id), order_id, order.total_amount)
    return Outcome(result=view, side_effects=[effect])


def _persist_advance(order_id: str, now: datetime) -> str | None:
    """Store the advanced status under the order lock.

    Returns the status the handler left in the repository, or None when
    persisting failed.
    """
    settings = get_settings()
    try:
        with locks.hold(order_key(order_id)):
            stored_status = current_domain.process(
                AdvanceOrderStatus(
                    order_id=order_id,
                    as_of=now,
                    ship_after=settings.ship_after_seconds,
                    deliver_after=settings.deliver_after_seconds,
                ),
                asynchronous=False,
            )
    except Exception as exc:  # noqa: BLE001
        logger.warning("order_advance_not_persisted", order_id=order_id, error=str(exc))
        return None
    return stored_status


def _view_with_advance(order, now: datetime) -> OrderView:
    settings = get_settings()
    target = advance_status(
        order.status,
        order.created_at,
        now,
        settings.ship_after_seconds,
        settings.deliver_after_seconds,
    )
    status = target.value
    if status != order.status:
        logger.info("order_auto_advanced", order_id=str(order.id), previous=order.status, new=status)
        stored_status = _persist_advance(str(order.id), now)
        # A write that committed after this order was loaded wins over the computed target
        status = stored_status or status
    return order_view(order, status=status, delivery_days=settings.delivery_estimate_days)


def get_user_orders(customer_id: str, now: datetime | None = None) -> list[OrderView]:
    """The customer's orders, newest first, with auto-advance applied."""
    now = now or datetime.now(UTC)
    return [_view_with_advance(order, now) for order in orders_of(customer_id)]


def get_order_by_id(order_id: str, customer_id: str, now: datetime | None = None) -> OrderView:
    now = now or datetime.now(UTC)
    order = load_owned_order(order_id, customer_id)
    return _view_with_advance(order, now)


def cancel_order(order_id: str, customer_id: str) -> Outcome:
    """Cancel a PENDING or CONFIRMED order and return its stock to the ledger."""
    order = load_owned_order(order_id, customer_id)
    product_ids = {str(item.product_id) for item in order.items if item.product_id}

    with locks.hold(order_key(order_id), *(stock_key(product_id) for product_id in product_ids)):
        status = current_domain.process(
            CancelOrder(order_id=str(order_id), customer_id=str(customer_id)),
            asynchronous=False,
        )

    logger.info("order_cancelled", order_id=str(order_id), customer_id=str(customer_id))
    order = load_order(order_id)
    effect = notify_status_update(str(customer_id), str(order_id), status)
    return Outcome(
        result=order_view(order, delivery_days=get_settings().delivery_estimate_days),
        side_effects=[effect],
    )
