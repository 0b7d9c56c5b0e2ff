"""Cart management — commands and handler."""

from protean import handle
from protean.exceptions import ObjectNotFoundError
from protean.fields import Float, Identifier, Integer, String
from protean.utils.globals import current_domain

from commerce.cart.cart import Cart
from commerce.domain import commerce
from commerce.inventory.stock import find_record


@commerce.command(part_of="Cart")
class CreateCart:
    customer_id = Identifier(required=True)


@commerce.command(part_of="Cart")
class AddToCart:
    customer_id = Identifier(required=True)
    product_id = Identifier(required=True)
    product_name = String(max_length=255)
    unit_price = Float(required=True)
    quantity = Integer(required=True, min_value=1)


@commerce.command(part_of="Cart")
class UpdateCartItem:
    customer_id = Identifier(required=True)
    item_id = Identifier(required=True)
    quantity = Integer(required=True, min_value=1)


@commerce.command(part_of="Cart")
class RemoveFromCart:
    customer_id = Identifier(required=True)
    item_id = Identifier(required=True)


@commerce.command(part_of="Cart")
class ClearCart:
    customer_id = Identifier(required=True)


def find_cart(customer_id):
    try:
        return current_domain.repository_for(Cart).get(str(customer_id))
    except ObjectNotFoundError:
        return None


def _available(product_id):
    record = find_record(product_id)
    return record.quantity if record is not None else 0


@commerce.command_handler(part_of=Cart)
class CartHandler:
    @handle(CreateCart)
    def create_cart(self, command):
        cart = find_cart(command.customer_id)
        if cart is None:
            cart = Cart.create(command.customer_id)
            current_domain.repository_for(Cart).add(cart)
        return str(cart.customer_id)

    @handle(AddToCart)
    def add_to_cart(self, command):
        cart = find_cart(command.customer_id) or Cart.create(command.customer_id)
        item_id = cart.add_item(
            product_id=command.product_id,
            product_name=command.product_name,
            unit_price=command.unit_price,
            quantity=command.quantity,
            available=_available(command.product_id),
        )
        current_domain.repository_for(Cart).add(cart)
        return item_id

    @handle(UpdateCartItem)
    def update_cart_item(self, command):
        cart = find_cart(command.customer_id) or Cart.create(command.customer_id)
        item = cart.owned_item(command.item_id)
        cart.update_item(
            item_id=command.item_id,
            quantity=command.quantity,
            available=_available(item.product_id),
        )
        current_domain.repository_for(Cart).add(cart)

    @handle(RemoveFromCart)
    def remove_from_cart(self, command):
        cart = find_cart(command.customer_id) or Cart.create(command.customer_id)
        cart.remove_item(command.item_id)
        current_domain.repository_for(Cart).add(cart)

    @handle(ClearCart)
    def clear_cart(self, command):
        cart = find_cart(command.customer_id)
        if cart is None:
            return
        cart.clear()
        current_domain.repository_for(Cart).add(cart)
