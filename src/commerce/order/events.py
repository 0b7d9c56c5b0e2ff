"""Domain events for the Order aggregate."""

from protean.fields import DateTime, Float, Identifier, Integer, String

from commerce.domain import commerce


@commerce.event(part_of="Order")
class OrderPlaced:
    """A cart was converted into an order and its stock reserved."""

    __version__ = "v1"

    order_id = Identifier(required=True)
    customer_id = Identifier(required=True)
    total_amount = Float(required=True)
    item_count = Integer(required=True)
    placed_at = DateTime(required=True)


@commerce.event(part_of="Order")
class OrderPaid:
    __version__ = "v1"

    order_id = Identifier(required=True)
    previous_status = String(required=True)
    paid_at = DateTime(required=True)


@commerce.event(part_of="Order")
class OrderStatusAdvanced:
    """Elapsed time since placement moved the order forward."""

    __version__ = "v1"

    order_id = Identifier(required=True)
    previous_status = String(required=True)
    new_status = String(required=True)
    advanced_at = DateTime(required=True)


@commerce.event(part_of="Order")
class OrderCancelled:
    __version__ = "v1"

    order_id = Identifier(required=True)
    customer_id = Identifier(required=True)
    previous_status = String(required=True)
    cancelled_at = DateTime(required=True)
