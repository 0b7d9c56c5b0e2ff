"""Cartflow FastAPI application.

Web server for the commerce core. Commands are processed synchronously
inside the commerce domain context.

Usage:
    uvicorn app:app --app-dir src --host 0.0.0.0 --port 8000
"""

# ---------------------------------------------------------------------------
# Domain initialization
# ---------------------------------------------------------------------------
# The domain is initialized at module level so uvicorn workers share it.
# PROTEAN_ENV selects the Protean config overlay.
from commerce.domain import commerce  # noqa: E402
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from admission.limiter import FixedWindowLimiter
from admission.middleware import AdmissionMiddleware
from commerce.config import get_settings
from commerce.utils.logging import bind_request_context, clear_request_context, configure_logging

configure_logging()
commerce.init()

settings = get_settings()

# ---------------------------------------------------------------------------
# FastAPI app
# ---------------------------------------------------------------------------
app = FastAPI(
    title=settings.app_name,
    description="Cart, order, payment and inventory core",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def domain_context_middleware(request: Request, call_next):
    """Push the commerce domain context and a request-scoped log context for API requests."""
    if request.url.path.startswith("/api/"):
        request_id = bind_request_context(request.headers.get("X-Request-ID"), path=request.url.path)
        try:
            with commerce.domain_context():
                response = await call_next(request)
        finally:
            clear_request_context()
        response.headers["X-Request-ID"] = request_id
        return response
    # Health check, docs, etc.
    return await call_next(request)


# Added last so it runs first: rejected requests never reach the domain
limiter = FixedWindowLimiter(
    limit=settings.rate_limit_requests,
    window_seconds=settings.rate_limit_window_seconds,
)
app.add_middleware(AdmissionMiddleware, limiter=limiter, prefixes=settings.rate_limited_prefixes)

# ---------------------------------------------------------------------------
# Routers
# ---------------------------------------------------------------------------
from commerce.api.errors import register_error_handlers  # noqa: E402
from commerce.api.routes import (  # noqa: E402
    cart_router,
    inventory_router,
    order_router,
    payment_router,
    product_router,
)

register_error_handlers(app)
app.include_router(cart_router)
app.include_router(order_router)
app.include_router(payment_router)
app.include_router(inventory_router)
app.include_router(product_router)


# ---------------------------------------------------------------------------
# Health / root
# ---------------------------------------------------------------------------
@app.get("/health")
async def health():
    return JSONResponse(content={"status": "ok", "domain": commerce.name})
