"""Read models returned by the Order Engine."""

from dataclasses import dataclass, field
from datetime import datetime

import structlog

from commerce.order.order import DELIVERY_ESTIMATE_DAYS, estimated_delivery_date

logger = structlog.get_logger(__name__)

CORRUPTED_ITEM_NAME = "Corrupted Item Data"


@dataclass(frozen=True)
class OrderItemView:
    id: str | None
    product_id: str | None
    product_name: str
    quantity: int
    unit_price: float
    subtotal: float


@dataclass(frozen=True)
class OrderView:
    id: str
    customer_id: str
    status: str
    total_amount: float
    created_at: datetime
    estimated_delivery_date: datetime | None
    items: list[OrderItemView] = field(default_factory=list)


def item_view(item) -> OrderItemView:
    """Map one line; a line without a usable product reference becomes a placeholder."""
    if not getattr(item, "product_id", None) or item.unit_price is None or item.quantity is None:
        logger.warning("corrupted_order_item", item_id=str(getattr(item, "id", None)))
        return OrderItemView(
            id=str(item.id) if getattr(item, "id", None) else None,
            product_id=None,
            product_name=CORRUPTED_ITEM_NAME,
            quantity=item.quantity or 0,
            unit_price=0.0,
            subtotal=0.0,
        )

    return OrderItemView(
        id=str(item.id),
        product_id=str(item.product_id),
        product_name=item.product_name or "",
        quantity=item.quantity,
        unit_price=item.unit_price,
        subtotal=round(item.unit_price * item.quantity, 2),
    )


def order_view(order, status=None, delivery_days=DELIVERY_ESTIMATE_DAYS) -> OrderView:
    """Map an Order. ``status`` overrides the stored status (auto-advance on read)."""
    status = status or order.status
    return OrderView(
        id=str(order.id),
        customer_id=str(order.customer_id),
        status=status,
        total_amount=order.total_amount,
        created_at=order.created_at,
        estimated_delivery_date=estimated_delivery_date(status, order.created_at, delivery_days),
        items=[item_view(item) for item in order.items],
    )
