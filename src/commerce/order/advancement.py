"""Persisting time-based status advancement."""

from datetime import UTC, datetime

from protean import handle
from protean.fields import DateTime, Identifier, Integer
from protean.utils.globals import current_domain

from commerce.config import get_settings
from commerce.domain import commerce
from commerce.order.lookup import load_order
from commerce.order.order import DELIVER_AFTER_SECONDS, SHIP_AFTER_SECONDS, Order


@commerce.command(part_of="Order")
class AdvanceOrderStatus:
    """Re-evaluate an order's status as of ``as_of`` and store the result."""

    order_id = Identifier(required=True)
    as_of = DateTime(required=True)
    ship_after = Integer(default=SHIP_AFTER_SECONDS)
    deliver_after = Integer(default=DELIVER_AFTER_SECONDS)


def catch_up(order: Order, now: datetime | None = None) -> bool:
    """Advance a freshly loaded order to its time-based status before a write checks it.

    The advance is staged on the current Unit of Work, so a handler that
    goes on to reject the write rolls it back along with everything else.
    """
    settings = get_settings()
    changed = order.advance(
        now or datetime.now(UTC),
        settings.ship_after_seconds,
        settings.deliver_after_seconds,
    )
    if changed:
        current_domain.repository_for(Order).add(order)
    return changed


@commerce.command_handler(part_of=Order)
class AdvanceOrderStatusHandler:
    @handle(AdvanceOrderStatus)
    def advance_order_status(self, command):
        # Reload and recompute from created_at; a concurrent advance leaves nothing to do
        order = load_order(command.order_id)
        if order.advance(command.as_of, command.ship_after, command.deliver_after):
            current_domain.repository_for(Order).add(order)
        return order.status
