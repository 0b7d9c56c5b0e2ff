"""Error taxonomy shared by the commerce engines and the HTTP layer.

Field-level validation still uses Protean's ``ValidationError``. These
exceptions describe business outcomes the caller has to react to.
"""


class CommerceError(Exception):
    """Base class for all business errors raised by the engines."""

    def __init__(self, message: str, details: dict | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details or {}


class NotFound(CommerceError):
    """The referenced entity does not exist."""


class Forbidden(CommerceError):
    """The caller does not own the entity it tried to touch."""


class Unauthenticated(CommerceError):
    """No acting principal could be resolved for the request."""


class InvalidState(CommerceError):
    """The operation is not valid for the entity's current status."""


class InsufficientStock(CommerceError):
    """Requested quantity exceeds what the ledger currently holds."""

    def __init__(self, product_id: str, available: int, requested: int) -> None:
        super().__init__(
            f"Insufficient stock. Available: {available}",
            details={"product_id": str(product_id), "available": available, "requested": requested},
        )
        self.product_id = str(product_id)
        self.available = available
        self.requested = requested


class RateLimited(CommerceError):
    """Admission denied for the current window."""

    def __init__(self, key: str) -> None:
        super().__init__("Too many requests. Please try again later.", details={"key": key})
        self.key = key
