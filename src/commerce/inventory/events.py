"""Domain events for the InventoryRecord aggregate."""

from protean.fields import DateTime, Identifier, Integer

from commerce.domain import commerce


@commerce.event(part_of="InventoryRecord")
class StockReserved:
    """Stock was taken out of the available quantity."""

    __version__ = "v1"

    product_id = Identifier(required=True)
    quantity = Integer(required=True)
    remaining = Integer(required=True)
    reserved_at = DateTime(required=True)


@commerce.event(part_of="InventoryRecord")
class StockReleased:
    """Previously reserved stock was put back."""

    __version__ = "v1"

    product_id = Identifier(required=True)
    quantity = Integer(required=True)
    new_quantity = Integer(required=True)
    released_at = DateTime(required=True)


@commerce.event(part_of="InventoryRecord")
class StockLevelSet:
    """An absolute stock level was recorded by inventory management."""

    __version__ = "v1"

    product_id = Identifier(required=True)
    previous_quantity = Integer(required=True)
    new_quantity = Integer(required=True)
    set_at = DateTime(required=True)
