"""Cart Store — public entry points for a customer's cart.

Writes for one customer are serialised on that customer's cart lock, which
also makes get-or-create atomic.
"""

import structlog
from protean.utils.globals import current_domain

from commerce.cart.cart import Cart
from commerce.cart.items import AddToCart, ClearCart, CreateCart, RemoveFromCart, UpdateCartItem, find_cart
from commerce.catalogue import get_catalogue
from commerce.errors import InvalidState
from commerce.locks import cart_key, locks

logger = structlog.get_logger(__name__)


def get_or_create(customer_id: str) -> Cart:
    cart = find_cart(customer_id)
    if cart is not None:
        return cart

    with locks.hold(cart_key(customer_id)):
        current_domain.process(CreateCart(customer_id=str(customer_id)), asynchronous=False)
        return find_cart(customer_id)


def add_item(customer_id: str, product_id: str, quantity: int) -> Cart:
    """Add ``quantity`` of a catalogue product, snapshotting its name and price."""
    product = get_catalogue().get_product(str(product_id))
    if not product.active:
        raise InvalidState("Product is not available for purchase", {"product_id": product.id})

    with locks.hold(cart_key(customer_id)):
        current_domain.process(
            AddToCart(
                customer_id=str(customer_id),
                product_id=product.id,
                product_name=product.name,
                unit_price=product.price,
                quantity=quantity,
            ),
            asynchronous=False,
        )
        cart = find_cart(customer_id)
    logger.debug("cart_item_added", customer_id=str(customer_id), product_id=product.id, quantity=quantity)
    return cart


def update_item(customer_id: str, item_id: str, quantity: int) -> Cart:
    with locks.hold(cart_key(customer_id)):
        current_domain.process(
            UpdateCartItem(customer_id=str(customer_id), item_id=str(item_id), quantity=quantity),
            asynchronous=False,
        )
        return find_cart(customer_id)


def remove_item(customer_id: str, item_id: str) -> Cart:
    with locks.hold(cart_key(customer_id)):
        current_domain.process(
            RemoveFromCart(customer_id=str(customer_id), item_id=str(item_id)),
            asynchronous=False,
        )
        return get_or_create(customer_id)


def clear(customer_id: str) -> None:
    with locks.hold(cart_key(customer_id)):
        current_domain.process(ClearCart(customer_id=str(customer_id)), asynchronous=False)
