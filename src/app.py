"""Storefront FastAPI application.

Processes commands synchronously over HTTP inside the storefront domain
context.

Usage:
    uvicorn src.app:app --host 0.0.0.0 --port 8000 --reload
"""

# ---------------------------------------------------------------------------
# Domain initialization
# ---------------------------------------------------------------------------
# PROTEAN_ENV selects the config overlay:
#   - default      -> event_processing = "sync"  (notifications fire in the UoW)
#   - "production" -> event_processing = "async" (notifications fire via Engine)
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from protean.integrations.fastapi import register_exception_handlers

from storefront.domain import storefront

storefront.init()

# ---------------------------------------------------------------------------
# FastAPI app
# ---------------------------------------------------------------------------
app = FastAPI(
    title="Storefront API",
    description="Silver jewelry storefront: catalogue, cart, coupons, orders and payments",
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
    """Push the storefront domain context for each request."""
    with storefront.domain_context():
        response = await call_next(request)
    return response


# ---------------------------------------------------------------------------
# Routers and error rendering
# ---------------------------------------------------------------------------
from storefront.api.coupons import coupon_router  # noqa: E402
from storefront.api.customers import customer_router  # noqa: E402
from storefront.api.errors import register_error_handlers  # noqa: E402
from storefront.api.orders import order_router  # noqa: E402
from storefront.api.payments import payment_router  # noqa: E402
from storefront.api.products import product_router  # noqa: E402
from storefront.api.rates import rate_router  # noqa: E402

for router in (product_router, rate_router, customer_router, coupon_router, order_router, payment_router):
    app.include_router(router)

register_exception_handlers(app)
register_error_handlers(app)


# ---------------------------------------------------------------------------
# Health / root
# ---------------------------------------------------------------------------
@app.get("/health")
async def health():
    return JSONResponse(content={"status": "ok", "domain": storefront.name})
