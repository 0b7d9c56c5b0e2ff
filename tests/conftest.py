import os
from pathlib import Path

import pytest


def pytest_addoption(parser):
    parser.addoption(
        "--env",
        action="store",
        default="test",
        help="Config environment to run tests on",
    )


def pytest_sessionstart(session):
    """Pytest hook to run before collecting tests.

    Fetch and activate the domain by pushing the associated domain_context. The activated domain can then be referred to elsewhere as `current_domain`
    """
    os.environ["PROTEAN_ENV"] = session.config.option.env

    from commerce.domain import commerce

    commerce.init()
    commerce.domain_context().push()


def pytest_collection_modifyitems(config, items):
    """Automatically mark tests based on their directory location."""
    for item in items:
        test_path = Path(item.fspath)

        if "/domain/" in str(test_path):
            item.add_marker(pytest.mark.domain)
        elif "/application/" in str(test_path):
            item.add_marker(pytest.mark.application)
        elif "/integration/" in str(test_path):
            item.add_marker(pytest.mark.integration)
            if not any(m.name == "fast" for m in item.iter_markers()):
                item.add_marker(pytest.mark.slow)


@pytest.fixture(autouse=True)
def run_around_tests():
    """Fixture to automatically cleanup infrastructure after every test"""
    yield

    from commerce.catalogue import reset_catalogue
    from commerce.config import get_settings
    from commerce.directory import reset_directory
    from commerce.notification import reset_email_channel
    from commerce.payment.gateway import reset_provider
    from protean import current_domain

    # Clear all databases
    for _, provider in current_domain.providers.items():
        provider._data_reset()

    # Drain event stores
    current_domain.event_store.store._data_reset()

    reset_catalogue()
    reset_directory()
    reset_email_channel()
    reset_provider()
    get_settings.cache_clear()


# ---------------------------------------------------------------------------
# Collaborator fixtures
# ---------------------------------------------------------------------------
@pytest.fixture()
def catalogue():
    from commerce.catalogue import get_catalogue

    catalogue = get_catalogue()
    catalogue.add_product("prod-001", "Mechanical Keyboard", 10.0)
    catalogue.add_product("prod-002", "USB Cable", 5.0)
    catalogue.add_product("prod-003", "Monitor Arm", 42.5)
    catalogue.add_product("prod-retired", "Discontinued Mouse", 15.0, active=False)
    return catalogue


@pytest.fixture()
def directory():
    from commerce.directory import get_directory

    directory = get_directory()
    directory.register("cust-001", "alice", "alice@example.com")
    directory.register("cust-002", "bob", "bob@example.com")
    directory.register("cust-003", "carol")
    return directory


@pytest.fixture()
def emails():
    from commerce.notification import get_email_channel

    return get_email_channel()


@pytest.fixture()
def stock(catalogue):
    """Set the available quantity for a catalogue product."""
    from commerce.inventory import ledger

    def _stock(product_id, quantity):
        return ledger.set_quantity(product_id, quantity)

    return _stock
