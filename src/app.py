"""TeffMarket FastAPI application.

Processes commands synchronously per HTTP request inside the marketplace
domain context.

Usage:
    uvicorn app:app --app-dir src --host 0.0.0.0 --port 8000 --reload
"""

# ---------------------------------------------------------------------------
# Domain initialization
# ---------------------------------------------------------------------------
# The domain is initialized at module level so uvicorn workers share it.
# PROTEAN_ENV selects the config overlay and the log level.
import uuid

import structlog
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from teffmarket.domain import teffmarket
from teffmarket.utils.logging import bind_request_context, clear_request_context

teffmarket.init()

logger = structlog.get_logger(__name__)

# ---------------------------------------------------------------------------
# FastAPI app
# ---------------------------------------------------------------------------
app = FastAPI(
    title="TeffMarket API",
    description="Multi-merchant teff marketplace: catalog, checkout, order routing and fulfillment",
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
    """Push the marketplace domain context and tag log lines with the request."""
    clear_request_context()
    bind_request_context(
        request_id=request.headers.get("X-Request-Id") or str(uuid.uuid4()),
        account_id=request.headers.get("X-Account-Id"),
    )
    with teffmarket.domain_context():
        response = await call_next(request)
    return response


# ---------------------------------------------------------------------------
# Routers
# ---------------------------------------------------------------------------
from teffmarket.api.backoffice import admin_router, merchant_router  # noqa: E402
from teffmarket.api.errors import register_error_handlers  # noqa: E402
from teffmarket.api.routes import (  # noqa: E402
    account_router,
    cart_router,
    order_router,
    product_router,
)

app.include_router(account_router)
app.include_router(product_router)
app.include_router(cart_router)
app.include_router(order_router)
app.include_router(admin_router)
app.include_router(merchant_router)

register_error_handlers(app)


# ---------------------------------------------------------------------------
# Health / root
# ---------------------------------------------------------------------------
@app.get("/health")
async def health():
    return JSONResponse(content={"status": "ok", "domain": teffmarket.name})
