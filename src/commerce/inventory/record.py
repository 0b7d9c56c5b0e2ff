"""InventoryRecord aggregate — available quantity for one product.

One record per product, keyed by the product id. ``quantity`` is the stock
that can still be sold and is never allowed below zero: ``reserve`` refuses
to decrement past what is available, and the field itself carries a
``min_value`` of zero as a backstop.

Records are created explicitly by inventory management (``set_quantity``).
A product without a record is out of stock.
"""

from datetime import UTC, datetime

from protean.exceptions import ValidationError
from protean.fields import DateTime, Identifier, Integer

from commerce.domain import commerce
from commerce.errors import InsufficientStock
from commerce.inventory.events import StockLevelSet, StockReleased, StockReserved


@commerce.aggregate
class InventoryRecord:
    product_id = Identifier(identifier=True)
    quantity = Integer(required=True, min_value=0, default=0)
    updated_at = DateTime()

    @classmethod
    def create(cls, product_id, quantity=0):
        return cls(product_id=str(product_id), quantity=quantity, updated_at=datetime.now(UTC))

    def can_supply(self, quantity) -> bool:
        return quantity <= self.quantity

    def reserve(self, quantity):
        """Decrement available stock, or raise InsufficientStock leaving it untouched."""
        if quantity <= 0:
            raise ValidationError({"quantity": ["Quantity must be positive"]})
        if not self.can_supply(quantity):
            raise InsufficientStock(self.product_id, available=self.quantity, requested=quantity)

        self.quantity -= quantity
        now = datetime.now(UTC)
        self.updated_at = now

        self.raise_(
            StockReserved(
                product_id=str(self.product_id),
                quantity=quantity,
                remaining=self.quantity,
                reserved_at=now,
            )
        )

    def release(self, quantity):
        """Return stock to the available pool (cancellations)."""
        if quantity <= 0:
            raise ValidationError({"quantity": ["Quantity must be positive"]})

        self.quantity += quantity
        now = datetime.now(UTC)
        self.updated_at = now

        self.raise_(
            StockReleased(
                product_id=str(self.product_id),
                quantity=quantity,
                new_quantity=self.quantity,
                released_at=now,
            )
        )

    def set_quantity(self, quantity):
        if quantity < 0:
            raise ValidationError({"quantity": ["Quantity cannot be negative"]})

        previous = self.quantity
        self.quantity = quantity
        now = datetime.now(UTC)
        self.updated_at = now

        self.raise_(
            StockLevelSet(
                product_id=str(self.product_id),
                previous_quantity=previous,
                new_quantity=quantity,
                set_at=now,
            )
        )
