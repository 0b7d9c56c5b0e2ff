"""Payment provider factory.

Provides get_provider() / set_provider() to swap implementations:
- FakeCheckoutProvider for development and testing
- a real hosted-checkout adapter in production
"""

from commerce.payment.gateway.fake_adapter import FakeCheckoutProvider
from commerce.payment.gateway.port import PaymentProvider

_current_provider: PaymentProvider | None = None


def get_provider() -> PaymentProvider:
    """Return the current payment provider. Defaults to FakeCheckoutProvider."""
    global _current_provider
    if _current_provider is None:
        _current_provider = FakeCheckoutProvider()
    return _current_provider


def set_provider(provider: PaymentProvider) -> None:
    """Override the active payment provider (useful for tests)."""
    global _current_provider
    _current_provider = provider


def reset_provider() -> None:
    """Reset to default provider."""
    global _current_provider
    _current_provider = None
