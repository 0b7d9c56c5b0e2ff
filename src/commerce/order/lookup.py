"""Order repository helpers shared by handlers and the engine."""

from protean.exceptions import ObjectNotFoundError
from protean.utils.globals import current_domain

from commerce.errors import Forbidden, NotFound
from commerce.order.order import Order

ORDER_PAGE_SIZE = 50


def load_order(order_id) -> Order:
    try:
        return current_domain.repository_for(Order).get(str(order_id))
    except ObjectNotFoundError:
        raise NotFound("Order not found", {"order_id": str(order_id)}) from None


def load_owned_order(order_id, customer_id) -> Order:
    order = load_order(order_id)
    if not order.is_owned_by(customer_id):
        raise Forbidden("Order does not belong to user", {"order_id": str(order_id)})
    return order


def orders_of(customer_id, page_size: int = ORDER_PAGE_SIZE) -> list[Order]:
    """A customer's orders, newest first.

    Reads page by page so a customer with more orders than the repository's
    default query limit still gets all of them.
    """
    query = (
        current_domain.repository_for(Order)
        ._dao.query.filter(customer_id=str(customer_id))
        .order_by("-created_at")
        .limit(page_size)
    )
    orders: list[Order] = []
    offset = 0
    while True:
        page = query.offset(offset).all()
        orders.extend(page.items)
        if not page.has_next or not page.items:
            return orders
        offset += page_size
