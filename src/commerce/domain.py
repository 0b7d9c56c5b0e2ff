"""Commerce bounded context — inventory, carts, orders and payments.

All four aggregates live in one domain so that a single Unit of Work can
span the inventory decrement, the order write and the cart clear performed
at checkout.
"""

import structlog
from protean.domain import Domain

commerce = Domain(name="commerce")

logger = structlog.get_logger(__name__)
