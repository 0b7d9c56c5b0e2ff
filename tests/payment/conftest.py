import pytest
from commerce.cart import store
from commerce.order import engine


@pytest.fixture()
def pending_order(directory, stock):
    """Alice's PENDING order for 25.00."""
    stock("prod-001", 5)
    stock("prod-002", 5)
    store.add_item("cust-001", "prod-001", 2)
    store.add_item("cust-001", "prod-002", 1)
    return engine.place_order("cust-001").result
