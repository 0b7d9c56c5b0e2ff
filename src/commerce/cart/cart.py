"""Cart aggregate — the mutable pre-order line list, one per customer.

The cart is keyed by the customer id, so a customer can never own two
carts. Lines are merged per product. Each line snapshots the product name
and unit price at the moment it was added.

Quantity checks take the live available stock as an argument. The check
holds at write time only: stock can move afterwards, and checkout
re-validates.
"""

from datetime import UTC, datetime

from protean.fields import DateTime, Float, HasMany, Identifier, Integer, String

from commerce.cart.events import CartCleared, CartItemAdded, CartItemQuantityUpdated, CartItemRemoved
from commerce.domain import commerce
from commerce.errors import Forbidden, InsufficientStock


@commerce.entity(part_of="Cart")
class CartItem:
    product_id = Identifier(required=True)
    product_name = String(max_length=255)
    quantity = Integer(required=True, min_value=1)
    unit_price = Float(required=True, min_value=0.0)
    added_at = DateTime()

    @property
    def subtotal(self):
        return round(self.unit_price * self.quantity, 2)


@commerce.aggregate
class Cart:
    customer_id = Identifier(identifier=True)
    items = HasMany(CartItem)
    created_at = DateTime()
    updated_at = DateTime()

    # -------------------------------------------------------------------
    # Factory
    # -------------------------------------------------------------------
    @classmethod
    def create(cls, customer_id):
        now = datetime.now(UTC)
        return cls(customer_id=str(customer_id), created_at=now, updated_at=now)

    # -------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------
    @property
    def total_amount(self):
        return round(sum(item.subtotal for item in self.items), 2)

    @property
    def item_count(self):
        return sum(item.quantity for item in self.items)

    def line_for(self, product_id):
        return next((i for i in self.items if str(i.product_id) == str(product_id)), None)

    def owned_item(self, item_id):
        """Return the line with ``item_id``; anything else is not the caller's to touch."""
        item = next((i for i in self.items if str(i.id) == str(item_id)), None)
        if item is None:
            raise Forbidden("Cart item does not belong to your cart", {"item_id": str(item_id)})
        return item

    # -------------------------------------------------------------------
    # Item management
    # -------------------------------------------------------------------
    def add_item(self, product_id, product_name, unit_price, quantity, available):
        """Add a product, merging into the existing line for that product.

        The merged line quantity, not just the increment, must fit in ``available``.
        """
        existing = self.line_for(product_id)
        line_quantity = quantity + (existing.quantity if existing else 0)
        if line_quantity > available:
            raise InsufficientStock(product_id, available=available, requested=line_quantity)

        now = datetime.now(UTC)
        if existing:
            existing.quantity = line_quantity
            item_id = str(existing.id)
        else:
            item = CartItem(
                product_id=str(product_id),
                product_name=product_name,
                quantity=quantity,
                unit_price=unit_price,
                added_at=now,
            )
            self.add_items(item)
            item_id = str(item.id)

        self.updated_at = now

        self.raise_(
            CartItemAdded(
                customer_id=str(self.customer_id),
                item_id=item_id,
                product_id=str(product_id),
                quantity=quantity,
                line_quantity=line_quantity,
            )
        )
        return item_id

    def update_item(self, item_id, quantity, available):
        item = self.owned_item(item_id)
        if quantity > available:
            raise InsufficientStock(item.product_id, available=available, requested=quantity)

        previous_quantity = item.quantity
        item.quantity = quantity
        self.updated_at = datetime.now(UTC)

        self.raise_(
            CartItemQuantityUpdated(
                customer_id=str(self.customer_id),
                item_id=str(item_id),
                previous_quantity=previous_quantity,
                new_quantity=quantity,
            )
        )

    def remove_item(self, item_id):
        item = self.owned_item(item_id)
        self.remove_items(item)
        self.updated_at = datetime.now(UTC)

        self.raise_(CartItemRemoved(customer_id=str(self.customer_id), item_id=str(item_id)))

    def clear(self):
        removed = len(self.items)
        for item in list(self.items):
            self.remove_items(item)
        self.updated_at = datetime.now(UTC)

        self.raise_(CartCleared(customer_id=str(self.customer_id), items_removed=removed))
