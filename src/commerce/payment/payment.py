"""Payment aggregate — one payment record per order.

State Machine:
    PENDING → SUCCESS
    PENDING → FAILED → PENDING (re-initiation)
    SUCCESS is terminal

The record is keyed by the order id, so an order can never carry two
payments. Re-initiating after a failure reuses the same record and bumps
``attempt_count``.
"""

from datetime import UTC, datetime
from enum import Enum

from protean.fields import DateTime, Float, Identifier, Integer, String

from commerce.domain import commerce
from commerce.errors import InvalidState
from commerce.payment.events import PaymentConfirmed, PaymentFailed, PaymentInitiated

PROVIDER_REFERENCE_MAX_LENGTH = 255


class PaymentStatus(Enum):
    PENDING = "Pending"
    SUCCESS = "Success"
    FAILED = "Failed"


_VALID_TRANSITIONS = {
    PaymentStatus.PENDING: {PaymentStatus.SUCCESS, PaymentStatus.FAILED},
    PaymentStatus.FAILED: {PaymentStatus.PENDING},  # re-initiation
    PaymentStatus.SUCCESS: set(),  # Terminal
}


@commerce.aggregate
class Payment:
    order_id = Identifier(identifier=True)
    amount = Float(required=True, min_value=0.0)
    status = String(
        max_length=50,
        choices=PaymentStatus,
        default=PaymentStatus.PENDING.value,
    )
    provider = String(max_length=50, required=True)
    provider_payment_id = String(max_length=PROVIDER_REFERENCE_MAX_LENGTH)
    attempt_count = Integer(default=1)
    created_at = DateTime()
    updated_at = DateTime()

    # -------------------------------------------------------------------
    # Factory
    # -------------------------------------------------------------------
    @classmethod
    def initiate(cls, order_id, amount, provider):
        now = datetime.now(UTC)
        payment = cls(
            order_id=str(order_id),
            amount=amount,
            provider=provider,
            status=PaymentStatus.PENDING.value,
            attempt_count=1,
            created_at=now,
            updated_at=now,
        )
        payment.raise_(
            PaymentInitiated(
                order_id=str(order_id),
                amount=amount,
                provider=provider,
                attempt=1,
                initiated_at=now,
            )
        )
        return payment

    # -------------------------------------------------------------------
    # State machine helpers
    # -------------------------------------------------------------------
    def _assert_can_transition(self, target_status):
        current = PaymentStatus(self.status)
        if target_status not in _VALID_TRANSITIONS.get(current, set()):
            raise InvalidState(
                f"Payment cannot move from {current.value} to {target_status.value}",
                {"order_id": str(self.order_id), "status": current.value},
            )

    # -------------------------------------------------------------------
    # Transitions
    # -------------------------------------------------------------------
    def reinitiate(self, amount, provider):
        """Start a new attempt on a FAILED payment."""
        self._assert_can_transition(PaymentStatus.PENDING)

        now = datetime.now(UTC)
        self.status = PaymentStatus.PENDING.value
        self.amount = amount
        self.provider = provider
        self.provider_payment_id = None
        self.attempt_count = (self.attempt_count or 0) + 1
        self.updated_at = now

        self.raise_(
            PaymentInitiated(
                order_id=str(self.order_id),
                amount=amount,
                provider=provider,
                attempt=self.attempt_count,
                initiated_at=now,
            )
        )

    def confirm(self, provider_payment_id=None):
        self._assert_can_transition(PaymentStatus.SUCCESS)

        now = datetime.now(UTC)
        self.status = PaymentStatus.SUCCESS.value
        self.provider_payment_id = provider_payment_id
        self.updated_at = now

        self.raise_(
            PaymentConfirmed(
                order_id=str(self.order_id),
                provider_payment_id=provider_payment_id,
                amount=self.amount,
                confirmed_at=now,
            )
        )

    def fail(self):
        self._assert_can_transition(PaymentStatus.FAILED)

        now = datetime.now(UTC)
        self.status = PaymentStatus.FAILED.value
        self.updated_at = now

        self.raise_(PaymentFailed(order_id=str(self.order_id), attempt=self.attempt_count, failed_at=now))
