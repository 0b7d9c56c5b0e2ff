"""Catalogue reader factory.

Provides get_catalogue() / set_catalogue() to swap implementations.
Defaults to the in-memory catalogue.
"""

from commerce.catalogue.fake_adapter import InMemoryCatalogue
from commerce.catalogue.port import CatalogueReader

_current_catalogue: CatalogueReader | None = None


def get_catalogue() -> CatalogueReader:
    """Return the active catalogue reader. Defaults to InMemoryCatalogue."""
    global _current_catalogue
    if _current_catalogue is None:
        _current_catalogue = InMemoryCatalogue()
    return _current_catalogue


def set_catalogue(catalogue: CatalogueReader) -> None:
    """Override the active catalogue reader (useful for tests)."""
    global _current_catalogue
    _current_catalogue = catalogue


def reset_catalogue() -> None:
    """Reset to the default catalogue."""
    global _current_catalogue
    _current_catalogue = None
