"""Pydantic request/response schemas for the commerce API.

These are external contracts, kept separate from the internal Protean
commands and aggregates.
"""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field


# ---------------------------------------------------------------------------
# Cart
# ---------------------------------------------------------------------------
class AddCartItemRequest(BaseModel):
    product_id: str
    quantity: int = Field(ge=1)


class UpdateCartItemRequest(BaseModel):
    quantity: int = Field(ge=1)


class CartItemResponse(BaseModel):
    id: str
    product_id: str
    product_name: str | None = None
    quantity: int
    unit_price: float
    subtotal: float


class CartResponse(BaseModel):
    customer_id: str
    items: list[CartItemResponse] = []
    total_amount: float = 0.0
    item_count: int = 0

    @classmethod
    def from_cart(cls, cart) -> "CartResponse":
        return cls(
            customer_id=str(cart.customer_id),
            items=[
                CartItemResponse(
                    id=str(item.id),
                    product_id=str(item.product_id),
                    product_name=item.product_name,
                    quantity=item.quantity,
                    unit_price=item.unit_price,
                    subtotal=item.subtotal,
                )
                for item in cart.items
            ],
            total_amount=cart.total_amount,
            item_count=cart.item_count,
        )


# ---------------------------------------------------------------------------
# Orders
# ---------------------------------------------------------------------------
class OrderItemResponse(BaseModel):
    id: str | None = None
    product_id: str | None = None
    product_name: str
    quantity: int
    unit_price: float
    subtotal: float


class OrderResponse(BaseModel):
    id: str
    customer_id: str
    items: list[OrderItemResponse] = []
    total_amount: float
    status: str
    created_at: datetime
    estimated_delivery_date: datetime | None = None

    @classmethod
    def from_view(cls, view) -> "OrderResponse":
        return cls(
            id=view.id,
            customer_id=view.customer_id,
            items=[OrderItemResponse(**item.__dict__) for item in view.items],
            total_amount=view.total_amount,
            status=view.status,
            created_at=view.created_at,
            estimated_delivery_date=view.estimated_delivery_date,
        )


# ---------------------------------------------------------------------------
# Payments
# ---------------------------------------------------------------------------
class InitiatePaymentRequest(BaseModel):
    order_id: str
    provider: str | None = None


class PaymentSessionRequest(BaseModel):
    order_id: str


class ConfirmPaymentRequest(BaseModel):
    order_id: str
    provider_payment_id: str | None = None


class FailPaymentRequest(BaseModel):
    order_id: str


class PaymentResponse(BaseModel):
    order_id: str
    amount: float
    status: str
    provider: str
    provider_payment_id: str | None = None
    attempt_count: int = 1

    @classmethod
    def from_payment(cls, payment) -> "PaymentResponse":
        return cls(
            order_id=str(payment.order_id),
            amount=payment.amount,
            status=payment.status,
            provider=payment.provider,
            provider_payment_id=payment.provider_payment_id,
            attempt_count=payment.attempt_count or 1,
        )


class PaymentSessionResponse(BaseModel):
    order_id: str
    amount: float
    provider: str
    status: str
    checkout_url: str


# ---------------------------------------------------------------------------
# Inventory & catalogue
# ---------------------------------------------------------------------------
class SetInventoryRequest(BaseModel):
    product_id: str
    quantity: int = Field(ge=0)


class InventoryResponse(BaseModel):
    product_id: str
    quantity: int
    updated_at: datetime | None = None


class ProductResponse(BaseModel):
    id: str
    name: str
    price: float
    active: bool
    category_id: str | None = None
    category_name: str | None = None
    brand_id: str | None = None
    brand_name: str | None = None
    available_quantity: int = 0


# ---------------------------------------------------------------------------
# Shared
# ---------------------------------------------------------------------------
class StatusResponse(BaseModel):
    status: str = "ok"


class ErrorResponse(BaseModel):
    status: int
    message: str
    errors: dict[str, Any] = {}
    timestamp: datetime
