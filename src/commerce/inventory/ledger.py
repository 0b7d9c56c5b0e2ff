"""Inventory Ledger — the public entry points for stock changes.

Every write holds the product's stock lock for the whole command, so the
read-check-decrement performed by the handler and the commit of its Unit
of Work happen as one step with respect to other writers of that product.
"""

import structlog
from protean.utils.globals import current_domain

from commerce.catalogue import get_catalogue
from commerce.errors import NotFound
from commerce.inventory.record import InventoryRecord
from commerce.inventory.stock import ReleaseStock, ReserveStock, SetStockLevel, find_record
from commerce.locks import locks, stock_key

logger = structlog.get_logger(__name__)


def reserve(product_id: str, quantity: int) -> int:
    """Atomically take ``quantity`` units. Returns the remaining quantity.

    Raises InsufficientStock (carrying the available count) when the product
    has fewer units than requested or no inventory record at all.
    """
    with locks.hold(stock_key(product_id)):
        remaining = current_domain.process(
            ReserveStock(product_id=str(product_id), quantity=quantity),
            asynchronous=False,
        )
    logger.info("stock_reserved", product_id=str(product_id), quantity=quantity, remaining=remaining)
    return remaining


def release(product_id: str, quantity: int) -> int:
    with locks.hold(stock_key(product_id)):
        new_quantity = current_domain.process(
            ReleaseStock(product_id=str(product_id), quantity=quantity),
            asynchronous=False,
        )
    logger.info("stock_released", product_id=str(product_id), quantity=quantity, new_quantity=new_quantity)
    return new_quantity


def set_quantity(product_id: str, quantity: int) -> InventoryRecord:
    """Record an absolute stock level for a catalogue product."""
    get_catalogue().get_product(str(product_id))

    with locks.hold(stock_key(product_id)):
        current_domain.process(
            SetStockLevel(product_id=str(product_id), quantity=quantity),
            asynchronous=False,
        )
        record = get_record(product_id)
    logger.info("stock_level_set", product_id=str(product_id), quantity=quantity)
    return record


def get_record(product_id: str) -> InventoryRecord:
    record = find_record(product_id)
    if record is None:
        raise NotFound("Inventory not found for product", {"product_id": str(product_id)})
    return record


def available(product_id: str) -> int:
    """Current sellable quantity, zero when the product has no record."""
    record = find_record(product_id)
    return record.quantity if record is not None else 0
