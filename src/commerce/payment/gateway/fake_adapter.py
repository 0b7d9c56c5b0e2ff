"""Simulated hosted-checkout provider for development and testing.

Builds deterministic checkout URLs under the configured base URL instead of
calling a provider API.
"""

from commerce.config import get_settings
from commerce.payment.gateway.port import CheckoutSession, PaymentProvider


class FakeCheckoutProvider(PaymentProvider):
    """Deterministic checkout provider. Records every session it hands out."""

    def __init__(self, base_url: str | None = None) -> None:
        self.base_url = base_url
        self.calls: list[dict] = []

    def create_checkout_session(self, order_id: str, amount: float, provider: str) -> CheckoutSession:
        self.calls.append({"order_id": order_id, "amount": amount, "provider": provider})

        base_url = (self.base_url or get_settings().checkout_base_url).rstrip("/")
        slug = provider.lower()
        return CheckoutSession(
            provider=provider,
            checkout_url=f"{base_url}/{slug}/{order_id}",
            session_ref=f"{slug}_{order_id}",
        )
