"""Order placement — converts a customer's cart into an order.

The handler runs inside one Unit of Work: every line is checked against
the ledger before any record is touched, then stock is decremented, the
order is written and the cart is cleared. A shortfall on any line raises
InsufficientStock before the first decrement, and the Unit of Work
discards everything on error.
"""

from collections import defaultdict

from protean import handle
from protean.fields import Identifier
from protean.utils.globals import current_domain

from commerce.cart.cart import Cart
from commerce.cart.items import find_cart
from commerce.domain import commerce
from commerce.errors import InsufficientStock, InvalidState
from commerce.inventory.record import InventoryRecord
from commerce.inventory.stock import find_record
from commerce.order.order import Order


@commerce.command(part_of="Order")
class PlaceOrder:
    customer_id = Identifier(required=True)


@commerce.command_handler(part_of=Order)
class PlaceOrderHandler:
    @handle(PlaceOrder)
    def place_order(self, command):
        cart = find_cart(command.customer_id)
        if cart is None or not cart.items:
            raise InvalidState("Cannot place order with empty cart", {"customer_id": str(command.customer_id)})

        requested = defaultdict(int)
        for item in cart.items:
            requested[str(item.product_id)] += item.quantity

        # Check every line first so that a failure never follows a decrement
        records = {}
        for product_id, quantity in requested.items():
            record = find_record(product_id)
            available = record.quantity if record is not None else 0
            if record is None or not record.can_supply(quantity):
                raise InsufficientStock(product_id, available=available, requested=quantity)
            records[product_id] = record

        inventory_repo = current_domain.repository_for(InventoryRecord)
        for product_id, quantity in requested.items():
            record = records[product_id]
            record.reserve(quantity)
            inventory_repo.add(record)

        order = Order.place(customer_id=command.customer_id, lines=cart.items)
        current_domain.repository_for(Order).add(order)

        cart.clear()
        current_domain.repository_for(Cart).add(cart)

        return str(order.id)
