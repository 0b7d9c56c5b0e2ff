"""FastAPI routes for the commerce API — cart, orders, payments, inventory."""

import json

import structlog
from fastapi import APIRouter, Depends, Request, Response

from commerce.api.principal import current_customer
from commerce.api.schemas import (
    AddCartItemRequest,
    CartResponse,
    ConfirmPaymentRequest,
    FailPaymentRequest,
    InitiatePaymentRequest,
    InventoryResponse,
    OrderResponse,
    PaymentResponse,
    PaymentSessionRequest,
    PaymentSessionResponse,
    ProductResponse,
    SetInventoryRequest,
    StatusResponse,
    UpdateCartItemRequest,
)
from commerce.cart import store
from commerce.catalogue import get_catalogue
from commerce.directory.port import Customer
from commerce.errors import NotFound
from commerce.inventory import ledger
from commerce.order import engine as orders
from commerce.payment import engine as payments

logger = structlog.get_logger(__name__)

# ---------------------------------------------------------------------------
# Cart Router
# ---------------------------------------------------------------------------
cart_router = APIRouter(prefix="/api/cart", tags=["cart"])


@cart_router.get("", response_model=CartResponse)
async def get_cart(customer: Customer = Depends(current_customer)) -> CartResponse:
    return CartResponse.from_cart(store.get_or_create(customer.id))


@cart_router.post("/items", response_model=CartResponse)
async def add_cart_item(body: AddCartItemRequest, customer: Customer = Depends(current_customer)) -> CartResponse:
    cart = store.add_item(customer.id, body.product_id, body.quantity)
    return CartResponse.from_cart(cart)


@cart_router.put("/items/{item_id}", response_model=CartResponse)
async def update_cart_item(
    item_id: str,
    body: UpdateCartItemRequest,
    customer: Customer = Depends(current_customer),
) -> CartResponse:
    cart = store.update_item(customer.id, item_id, body.quantity)
    return CartResponse.from_cart(cart)


@cart_router.delete("/items/{item_id}", response_model=CartResponse)
async def remove_cart_item(item_id: str, customer: Customer = Depends(current_customer)) -> CartResponse:
    cart = store.remove_item(customer.id, item_id)
    return CartResponse.from_cart(cart)


@cart_router.delete("", status_code=204)
async def clear_cart(customer: Customer = Depends(current_customer)) -> Response:
    store.clear(customer.id)
    return Response(status_code=204)


# ---------------------------------------------------------------------------
# Order Router
# ---------------------------------------------------------------------------
order_router = APIRouter(prefix="/api/orders", tags=["orders"])


@order_router.post("", status_code=201, response_model=OrderResponse)
async def place_order(customer: Customer = Depends(current_customer)) -> OrderResponse:
    outcome = orders.place_order(customer.id)
    return OrderResponse.from_view(outcome.result)


@order_router.get("", response_model=list[OrderResponse])
async def list_orders(customer: Customer = Depends(current_customer)) -> list[OrderResponse]:
    return [OrderResponse.from_view(view) for view in orders.get_user_orders(customer.id)]


@order_router.get("/{order_id}", response_model=OrderResponse)
async def get_order(order_id: str, customer: Customer = Depends(current_customer)) -> OrderResponse:
    return OrderResponse.from_view(orders.get_order_by_id(order_id, customer.id))


@order_router.post("/{order_id}/cancel", response_model=OrderResponse)
async def cancel_order(order_id: str, customer: Customer = Depends(current_customer)) -> OrderResponse:
    outcome = orders.cancel_order(order_id, customer.id)
    return OrderResponse.from_view(outcome.result)


# ---------------------------------------------------------------------------
# Payment Router
# ---------------------------------------------------------------------------
payment_router = APIRouter(prefix="/api/payments", tags=["payments"])


@payment_router.post("/initiate", response_model=PaymentResponse)
async def initiate_payment(body: InitiatePaymentRequest) -> PaymentResponse:
    payment = payments.initiate_payment(body.order_id, body.provider)
    return PaymentResponse.from_payment(payment)


@payment_router.post("/provider/{provider}/session", response_model=PaymentSessionResponse)
async def create_payment_session(provider: str, body: PaymentSessionRequest) -> PaymentSessionResponse:
    session = payments.create_payment_session(body.order_id, provider.upper())
    return PaymentSessionResponse(**session.__dict__)


@payment_router.post("/confirm", response_model=PaymentResponse)
async def confirm_payment(body: ConfirmPaymentRequest) -> PaymentResponse:
    outcome = payments.confirm_payment(body.order_id, body.provider_payment_id)
    return PaymentResponse.from_payment(outcome.result)


@payment_router.post("/fail", response_model=PaymentResponse)
async def fail_payment(body: FailPaymentRequest) -> PaymentResponse:
    payment = payments.fail_payment(body.order_id)
    return PaymentResponse.from_payment(payment)


@payment_router.post("/provider/{provider}/webhook", response_model=StatusResponse)
async def payment_webhook(provider: str, request: Request) -> StatusResponse:
    """Provider callback. Always acknowledged so the provider stops retrying."""
    raw = await request.body()
    try:
        payload = json.loads(raw) if raw else None
    except ValueError:
        payload = None

    outcome = payments.handle_webhook(provider.upper(), payload, dict(request.headers))
    return StatusResponse(status="processed" if outcome.handled else "ignored")


# ---------------------------------------------------------------------------
# Inventory Router
# ---------------------------------------------------------------------------
inventory_router = APIRouter(prefix="/api/inventory", tags=["inventory"])


@inventory_router.get("/product/{product_id}", response_model=InventoryResponse)
async def get_inventory(product_id: str) -> InventoryResponse:
    record = ledger.get_record(product_id)
    return InventoryResponse(product_id=str(record.product_id), quantity=record.quantity, updated_at=record.updated_at)


@inventory_router.put("", response_model=InventoryResponse)
async def set_inventory(body: SetInventoryRequest) -> InventoryResponse:
    record = ledger.set_quantity(body.product_id, body.quantity)
    return InventoryResponse(product_id=str(record.product_id), quantity=record.quantity, updated_at=record.updated_at)


# ---------------------------------------------------------------------------
# Product Router (catalogue reads with live availability)
# ---------------------------------------------------------------------------
product_router = APIRouter(prefix="/api/products", tags=["products"])


def _reference_name(lookup, reference_id: str | None) -> str | None:
    # Dangling category or brand references still render the product
    if reference_id is None:
        return None
    try:
        return lookup(reference_id).name
    except NotFound:
        return None


@product_router.get("/{product_id}", response_model=ProductResponse)
async def get_product(product_id: str) -> ProductResponse:
    catalogue = get_catalogue()
    product = catalogue.get_product(product_id)
    return ProductResponse(
        id=product.id,
        name=product.name,
        price=product.price,
        active=product.active,
        category_id=product.category_id,
        category_name=_reference_name(catalogue.get_category, product.category_id),
        brand_id=product.brand_id,
        brand_name=_reference_name(catalogue.get_brand, product.brand_id),
        available_quantity=ledger.available(product.id),
    )
