"""Storefront FastAPI application.

Serves checkout, order history, order confirmation and store settings.
Each request is wrapped in the ordering domain context.

Usage:
    uvicorn src.app:app --host 0.0.0.0 --port 8000 --reload
"""

from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

# ---------------------------------------------------------------------------
# Domain initialization
# ---------------------------------------------------------------------------
# The domain is initialized at module level so uvicorn workers share it.
# PROTEAN_ENV controls which config overlay is applied.
from ordering.domain import ordering  # noqa: E402
from ordering.utils.logging import add_context, clear_context, configure_logging

configure_logging()
ordering.init()

# ---------------------------------------------------------------------------
# Routers
# ---------------------------------------------------------------------------
from ordering.api.routes import (  # noqa: E402
    checkout_router,
    get_sessions,
    order_router,
    settings_router,
)
from payments.api.routes import payment_router  # noqa: E402


@asynccontextmanager
async def lifespan(app: FastAPI):
    yield
    # Let fire-and-forget emails finish before the loop goes away
    await get_sessions().dispatcher.drain()


# ---------------------------------------------------------------------------
# FastAPI app
# ---------------------------------------------------------------------------
app = FastAPI(
    title="Storefront API",
    description="Checkout, order history and order confirmation",
    lifespan=lifespan,
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
    """Push the ordering domain context and bind request details for logging."""
    add_context(method=request.method, path=request.url.path)
    try:
        with ordering.domain_context():
            return await call_next(request)
    finally:
        clear_context()


app.include_router(checkout_router)
app.include_router(order_router)
app.include_router(settings_router)
app.include_router(payment_router)


# ---------------------------------------------------------------------------
# Health / root
# ---------------------------------------------------------------------------
@app.get("/health")
async def health():
    return JSONResponse(
        content={
            "status": "ok",
            "domains": {"ordering": {"name": ordering.name}},
            "accepting_orders": get_sessions().gate.is_accepting_orders(),
        }
    )
