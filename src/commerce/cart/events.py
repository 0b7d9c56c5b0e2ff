"""Domain events for the Cart aggregate."""

from protean.fields import Identifier, Integer

from commerce.domain import commerce


@commerce.event(part_of="Cart")
class CartItemAdded:
    """A product was added to the cart, or merged into an existing line."""

    __version__ = "v1"

    customer_id = Identifier(required=True)
    item_id = Identifier(required=True)
    product_id = Identifier(required=True)
    quantity = Integer(required=True)
    line_quantity = Integer(required=True)


@commerce.event(part_of="Cart")
class CartItemQuantityUpdated:
    __version__ = "v1"

    customer_id = Identifier(required=True)
    item_id = Identifier(required=True)
    previous_quantity = Integer(required=True)
    new_quantity = Integer(required=True)


@commerce.event(part_of="Cart")
class CartItemRemoved:
    __version__ = "v1"

    customer_id = Identifier(required=True)
    item_id = Identifier(required=True)


@commerce.event(part_of="Cart")
class CartCleared:
    """Every line was dropped, either on request or because an order was placed."""

    __version__ = "v1"

    customer_id = Identifier(required=True)
    items_removed = Integer(required=True)
