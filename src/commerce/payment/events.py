"""Domain events for the Payment aggregate."""

from protean.fields import DateTime, Float, Identifier, Integer, String

from commerce.domain import commerce


@commerce.event(part_of="Payment")
class PaymentInitiated:
    __version__ = "v1"

    order_id = Identifier(required=True)
    amount = Float(required=True)
    provider = String(required=True)
    attempt = Integer(required=True)
    initiated_at = DateTime(required=True)


@commerce.event(part_of="Payment")
class PaymentConfirmed:
    __version__ = "v1"

    order_id = Identifier(required=True)
    provider_payment_id = String()
    amount = Float(required=True)
    confirmed_at = DateTime(required=True)


@commerce.event(part_of="Payment")
class PaymentFailed:
    __version__ = "v1"

    order_id = Identifier(required=True)
    attempt = Integer(required=True)
    failed_at = DateTime(required=True)
