"""Email channel registry.

Uses the fake adapter by default; a real SMTP/API adapter can be installed
with set_email_channel() at startup.
"""

from commerce.notification.email_port import EmailPort
from commerce.notification.fake_email import FakeEmailAdapter

_current_channel: EmailPort | None = None


def get_email_channel() -> EmailPort:
    """Return the active email adapter (singleton)."""
    global _current_channel
    if _current_channel is None:
        _current_channel = FakeEmailAdapter()
    return _current_channel


def set_email_channel(channel: EmailPort) -> None:
    global _current_channel
    _current_channel = channel


def reset_email_channel() -> None:
    """Reset the channel singleton (useful for testing)."""
    global _current_channel
    _current_channel = None
