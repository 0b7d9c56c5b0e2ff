"""Order aggregate — an immutable snapshot of a cart with a forward-only status.

State Machine:
    PENDING → CONFIRMED → PAID → SHIPPED → DELIVERED
    PENDING → PAID | SHIPPED (auto-advance) | CANCELLED
    CONFIRMED → CANCELLED
    DELIVERED, CANCELLED are terminal

Items and the total are fixed when the order is placed. Only ``status``
changes afterwards.

Auto-advance is computed from ``created_at`` and the evaluation time, never
from the previous evaluation, so repeated or concurrent evaluations land on
the same status.
"""

from datetime import UTC, datetime, timedelta
from enum import Enum

from protean.fields import DateTime, Float, HasMany, Identifier, Integer, String

from commerce.domain import commerce
from commerce.errors import InvalidState
from commerce.order.events import OrderCancelled, OrderPaid, OrderPlaced, OrderStatusAdvanced

SHIP_AFTER_SECONDS = 15
DELIVER_AFTER_SECONDS = 60
DELIVERY_ESTIMATE_DAYS = 3


class OrderStatus(Enum):
    PENDING = "Pending"
    CONFIRMED = "Confirmed"
    PAID = "Paid"
    SHIPPED = "Shipped"
    DELIVERED = "Delivered"
    CANCELLED = "Cancelled"


_VALID_TRANSITIONS = {
    OrderStatus.PENDING: {OrderStatus.CONFIRMED, OrderStatus.PAID, OrderStatus.SHIPPED, OrderStatus.CANCELLED},
    OrderStatus.CONFIRMED: {OrderStatus.PAID, OrderStatus.SHIPPED, OrderStatus.CANCELLED},
    OrderStatus.PAID: {OrderStatus.SHIPPED},
    OrderStatus.SHIPPED: {OrderStatus.DELIVERED},
    OrderStatus.DELIVERED: set(),  # Terminal
    OrderStatus.CANCELLED: set(),  # Terminal
}

TERMINAL_STATUSES = {OrderStatus.DELIVERED, OrderStatus.CANCELLED}
PAYABLE_STATUSES = {OrderStatus.PENDING, OrderStatus.CONFIRMED}
CANCELLABLE_STATUSES = {OrderStatus.PENDING, OrderStatus.CONFIRMED}


def _aware(moment):
    if moment.tzinfo is None:
        return moment.replace(tzinfo=UTC)
    return moment


def advance_status(
    status,
    created_at,
    now,
    ship_after=SHIP_AFTER_SECONDS,
    deliver_after=DELIVER_AFTER_SECONDS,
):
    """Status an order should have at ``now`` given its current status and placement time.

    PENDING becomes SHIPPED once ``ship_after`` seconds have elapsed, and
    SHIPPED becomes DELIVERED once ``deliver_after`` seconds have elapsed.
    Both checks run in sequence, so a stale PENDING order goes straight to
    DELIVERED. Every other status is returned unchanged.
    """
    status = OrderStatus(status)
    if status in TERMINAL_STATUSES:
        return status

    elapsed = (_aware(now) - _aware(created_at)).total_seconds()
    if status == OrderStatus.PENDING and elapsed >= ship_after:
        status = OrderStatus.SHIPPED
    if status == OrderStatus.SHIPPED and elapsed >= deliver_after:
        status = OrderStatus.DELIVERED
    return status


def estimated_delivery_date(status, created_at, days=DELIVERY_ESTIMATE_DAYS):
    """``created_at + days`` once an order is past PENDING, None while PENDING or CANCELLED."""
    status = OrderStatus(status)
    if status in (OrderStatus.PENDING, OrderStatus.CANCELLED) or created_at is None:
        return None
    return created_at + timedelta(days=days)


@commerce.entity(part_of="Order")
class OrderItem:
    # Optional so that rows whose product reference was lost still load
    product_id = Identifier()
    product_name = String(max_length=255)
    quantity = Integer(required=True, min_value=1)
    unit_price = Float(required=True, min_value=0.0)

    @property
    def subtotal(self):
        return round(self.unit_price * self.quantity, 2)


@commerce.aggregate
class Order:
    customer_id = Identifier(required=True)
    items = HasMany(OrderItem)
    total_amount = Float(required=True, min_value=0.0)
    status = String(
        max_length=50,
        choices=OrderStatus,
        default=OrderStatus.PENDING.value,
    )
    created_at = DateTime(required=True)
    updated_at = DateTime()

    # -------------------------------------------------------------------
    # Factory
    # -------------------------------------------------------------------
    @classmethod
    def place(cls, customer_id, lines, created_at=None):
        """Build a PENDING order from cart lines.

        Args:
            lines: iterable of objects with product_id, product_name,
                quantity and unit_price (cart items).
        """
        now = created_at or datetime.now(UTC)
        items = [
            OrderItem(
                product_id=str(line.product_id),
                product_name=line.product_name,
                quantity=line.quantity,
                unit_price=line.unit_price,
            )
            for line in lines
        ]
        total_amount = round(sum(item.subtotal for item in items), 2)

        order = cls(
            customer_id=str(customer_id),
            total_amount=total_amount,
            status=OrderStatus.PENDING.value,
            created_at=now,
            updated_at=now,
        )
        for item in items:
            order.add_items(item)

        order.raise_(
            OrderPlaced(
                order_id=str(order.id),
                customer_id=str(customer_id),
                total_amount=total_amount,
                item_count=sum(item.quantity for item in items),
                placed_at=now,
            )
        )
        return order

    # -------------------------------------------------------------------
    # State machine helpers
    # -------------------------------------------------------------------
    def _assert_can_transition(self, target_status):
        current = OrderStatus(self.status)
        if target_status not in _VALID_TRANSITIONS.get(current, set()):
            raise InvalidState(
                f"Cannot transition from {current.value} to {target_status.value}",
                {"order_id": str(self.id), "status": current.value},
            )

    def is_owned_by(self, customer_id):
        return str(self.customer_id) == str(customer_id)

    def delivery_estimate(self, days=DELIVERY_ESTIMATE_DAYS):
        return estimated_delivery_date(self.status, self.created_at, days)

    # -------------------------------------------------------------------
    # Transitions
    # -------------------------------------------------------------------
    def mark_paid(self):
        self._assert_can_transition(OrderStatus.PAID)
        previous = self.status
        now = datetime.now(UTC)
        self.status = OrderStatus.PAID.value
        self.updated_at = now

        self.raise_(OrderPaid(order_id=str(self.id), previous_status=previous, paid_at=now))

    def cancel(self):
        current = OrderStatus(self.status)
        if current not in CANCELLABLE_STATUSES:
            raise InvalidState(
                f"Order cannot be cancelled in {current.value} status",
                {"order_id": str(self.id), "status": current.value},
            )

        now = datetime.now(UTC)
        self.status = OrderStatus.CANCELLED.value
        self.updated_at = now

        self.raise_(
            OrderCancelled(
                order_id=str(self.id),
                customer_id=str(self.customer_id),
                previous_status=current.value,
                cancelled_at=now,
            )
        )

    def advance(self, now, ship_after=SHIP_AFTER_SECONDS, deliver_after=DELIVER_AFTER_SECONDS):
        """Apply time-based advancement. Returns True when the status changed."""
        previous = OrderStatus(self.status)
        target = advance_status(previous, self.created_at, now, ship_after, deliver_after)
        if target == previous:
            return False

        self.status = target.value
        self.updated_at = now

        self.raise_(
            OrderStatusAdvanced(
                order_id=str(self.id),
                previous_status=previous.value,
                new_status=target.value,
                advanced_at=now,
            )
        )
        return True
