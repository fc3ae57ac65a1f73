"""Stockroom FastAPI application.

Serves the kiosk, receiving, inventory and replenishment routes over a
single stock ledger. Commands are processed synchronously via HTTP inside
the stockroom domain context.

Usage:
    uvicorn stockroom.app:app --host 0.0.0.0 --port 8000 --reload
"""

from uuid import uuid4

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from stockroom.api import (
    domain_context_middleware,
    inventory_router,
    kiosk_router,
    receiving_router,
    register_exception_handlers,
    replenishment_router,
)
from stockroom.domain import initialize, settings, stockroom
from stockroom.exceptions import UpstreamUnavailable
from stockroom.ledger import queries
from stockroom.utils.db import setup_db
from stockroom.utils.logging import bind_request, clear_request, configure_logging

# ---------------------------------------------------------------------------
# Domain initialization
# ---------------------------------------------------------------------------
# Initialized at module level so uvicorn workers share it. A caller that
# already initialized the domain (e.g. the test suite) keeps its settings.
initialize()
configure_logging(settings())
setup_db(stockroom)


# ---------------------------------------------------------------------------
# FastAPI app
# ---------------------------------------------------------------------------
app = FastAPI(
    title="Stockroom API",
    description="Retail stock consistency engine: checkout, receiving and replenishment",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.middleware("http")(domain_context_middleware)


@app.middleware("http")
async def request_context_middleware(request: Request, call_next):
    """Bind a request id and path to every log line emitted while serving the request."""
    request_id = request.headers.get("x-request-id") or uuid4().hex[:12]
    bind_request(request_id, request.url.path)
    try:
        response = await call_next(request)
    finally:
        clear_request()
    response.headers["x-request-id"] = request_id
    return response


register_exception_handlers(app)

# ---------------------------------------------------------------------------
# Routers
# ---------------------------------------------------------------------------
app.include_router(kiosk_router)
app.include_router(receiving_router)
app.include_router(inventory_router)
app.include_router(replenishment_router)


# ---------------------------------------------------------------------------
# Health
# ---------------------------------------------------------------------------
@app.get("/health")
async def health():
    try:
        queries.ping()
    except UpstreamUnavailable as exc:
        return JSONResponse(
            status_code=503,
            content={"status": "degraded", "service": stockroom.name, "reason": exc.message},
        )
    return JSONResponse(content={"status": "ok", "service": stockroom.name, "env": settings().env})
