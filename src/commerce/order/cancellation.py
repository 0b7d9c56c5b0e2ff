"""Order cancellation — commands and handler.

Cancelling puts every line's quantity back into the ledger in the same
Unit of Work as the status change.
"""

from protean import handle
from protean.fields import Identifier
from protean.utils.globals import current_domain

from commerce.domain import commerce
from commerce.inventory.record import InventoryRecord
from commerce.inventory.stock import find_record
from commerce.order.advancement import catch_up
from commerce.order.lookup import load_owned_order
from commerce.order.order import Order


@commerce.command(part_of="Order")
class CancelOrder:
    order_id = Identifier(required=True)
    customer_id = Identifier(required=True)


@commerce.command_handler(part_of=Order)
class CancelOrderHandler:
    @handle(CancelOrder)
    def cancel_order(self, command):
        order = load_owned_order(command.order_id, command.customer_id)
        catch_up(order)
        order.cancel()

        inventory_repo = current_domain.repository_for(InventoryRecord)
        for item in order.items:
            if not item.product_id:
                continue
            record = find_record(item.product_id) or InventoryRecord.create(item.product_id)
            record.release(item.quantity)
            inventory_repo.add(record)

        current_domain.repository_for(Order).add(order)
        return order.status
