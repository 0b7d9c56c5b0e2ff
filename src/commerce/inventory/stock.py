"""Stock movements — commands and handler."""

from protean import handle
from protean.exceptions import ObjectNotFoundError
from protean.fields import Identifier, Integer
from protean.utils.globals import current_domain

from commerce.domain import commerce
from commerce.errors import InsufficientStock
from commerce.inventory.record import InventoryRecord


@commerce.command(part_of="InventoryRecord")
class ReserveStock:
    product_id = Identifier(required=True)
    quantity = Integer(required=True, min_value=1)


@commerce.command(part_of="InventoryRecord")
class ReleaseStock:
    product_id = Identifier(required=True)
    quantity = Integer(required=True, min_value=1)


@commerce.command(part_of="InventoryRecord")
class SetStockLevel:
    """Absolute stock level from inventory management. Creates the record when absent."""

    product_id = Identifier(required=True)
    quantity = Integer(required=True, min_value=0)


def find_record(product_id):
    """Return the InventoryRecord for a product, or None when none exists."""
    try:
        return current_domain.repository_for(InventoryRecord).get(str(product_id))
    except ObjectNotFoundError:
        return None


@commerce.command_handler(part_of=InventoryRecord)
class StockHandler:
    @handle(ReserveStock)
    def reserve_stock(self, command):
        record = find_record(command.product_id)
        if record is None:
            raise InsufficientStock(command.product_id, available=0, requested=command.quantity)

        record.reserve(command.quantity)
        current_domain.repository_for(InventoryRecord).add(record)
        return record.quantity

    @handle(ReleaseStock)
    def release_stock(self, command):
        record = find_record(command.product_id)
        if record is None:
            record = InventoryRecord.create(command.product_id)

        record.release(command.quantity)
        current_domain.repository_for(InventoryRecord).add(record)
        return record.quantity

    @handle(SetStockLevel)
    def set_stock_level(self, command):
        record = find_record(command.product_id)
        if record is None:
            record = InventoryRecord.create(command.product_id)

        record.set_quantity(command.quantity)
        current_domain.repository_for(InventoryRecord).add(record)
        return record.quantity
