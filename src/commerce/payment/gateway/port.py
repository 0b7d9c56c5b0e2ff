"""Payment provider port (abstract interface).

Hosted-checkout providers (Stripe, Razorpay, ...) hand back a URL the
customer is redirected to. Adapters only describe a session; they never
change payment state.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass


@dataclass(frozen=True)
class CheckoutSession:
    """Opaque checkout reference returned by a provider."""

    provider: str
    checkout_url: str
    session_ref: str


class PaymentProvider(ABC):
    """Abstract hosted-checkout provider."""

    @abstractmethod
    def create_checkout_session(self, order_id: str, amount: float, provider: str) -> CheckoutSession:
        """Describe the hosted checkout page for an order."""
        ...
