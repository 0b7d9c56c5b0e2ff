"""Customer directory factory.

Provides get_directory() / set_directory() to swap implementations.
"""

from commerce.directory.fake_adapter import InMemoryDirectory
from commerce.directory.port import CustomerDirectory

_current_directory: CustomerDirectory | None = None


def get_directory() -> CustomerDirectory:
    """Return the active customer directory. Defaults to InMemoryDirectory."""
    global _current_directory
    if _current_directory is None:
        _current_directory = InMemoryDirectory()
    return _current_directory


def set_directory(directory: CustomerDirectory) -> None:
    global _current_directory
    _current_directory = directory


def reset_directory() -> None:
    global _current_directory
    _current_directory = None
