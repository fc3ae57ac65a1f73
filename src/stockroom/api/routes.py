"""FastAPI routes for the Stockroom: kiosk, receiving, inventory and replenishment.

Each route translates between Pydantic schemas (external contract) and
stockroom commands, processed synchronously through the domain.
"""

import json
from typing import Any

from fastapi import APIRouter, Body, Depends, Query
from protean.utils.globals import current_domain

from stockroom.api.auth import require_manager
from stockroom.api.schemas import (
    AdjustStockRequest,
    ApproveRequest,
    CheckoutRequest,
    InventoryRowResponse,
    OrderResponse,
    ReceiptResponse,
    ReceivingEventResponse,
    SkuResponse,
    WorklistResponse,
)
from stockroom.auth.port import Principal
from stockroom.checkout.cart import CartLine, checkout_command
from stockroom.checkout.engine import get_order
from stockroom.ledger import queries
from stockroom.ledger.adjustment import AdjustStock
from stockroom.receiving.reconciler import ReceiveScan, receiving_history
from stockroom.replenishment import get_worklist
from stockroom.replenishment.request import OrderRequest

# ---------------------------------------------------------------------------
# Kiosk Router
# ---------------------------------------------------------------------------
kiosk_router = APIRouter(prefix="/kiosk", tags=["kiosk"])


@kiosk_router.post("/checkout", status_code=201, response_model=OrderResponse)
async def checkout(body: CheckoutRequest) -> OrderResponse:
    command = checkout_command(
        [
            CartLine(
                sku_ref=item.sku_id,
                external_code=item.external_code,
                name=item.name,
                unit_price=item.unit_price,
                quantity=item.quantity,
            )
            for item in body.items
        ],
        total_amount=body.total_amount,
        payment_method=body.payment_method,
    )
    order = current_domain.process(command, asynchronous=False)
    return OrderResponse.from_order(order)


@kiosk_router.get("/orders/{order_number}", response_model=OrderResponse)
async def fetch_order(order_number: str) -> OrderResponse:
    return OrderResponse.from_order(get_order(order_number))


@kiosk_router.get("/scan/{code}", response_model=SkuResponse)
async def scan(code: str) -> SkuResponse:
    return SkuResponse.model_validate(queries.scan(code))


@kiosk_router.get("/products/quick", response_model=list[SkuResponse])
async def quick_menu() -> list[SkuResponse]:
    return [SkuResponse.model_validate(sku) for sku in queries.quick_menu()]


# ---------------------------------------------------------------------------
# Receiving Router
# ---------------------------------------------------------------------------
receiving_router = APIRouter(prefix="/receiving", tags=["receiving"])


@receiving_router.post("/scans", status_code=201, response_model=ReceiptResponse)
async def receive_scan(body: Any = Body(...)) -> ReceiptResponse:
    result = current_domain.process(ReceiveScan(payload=json.dumps(body)), asynchronous=False)
    return ReceiptResponse(
        outcome=result.outcome,
        event=ReceivingEventResponse.model_validate(result.event),
        sku=SkuResponse.model_validate(result.sku) if result.sku is not None else None,
    )


@receiving_router.get("/scans", response_model=list[ReceivingEventResponse])
async def list_scans(limit: int | None = Query(default=None, ge=1)) -> list[ReceivingEventResponse]:
    return [ReceivingEventResponse.model_validate(event) for event in receiving_history(limit)]


# ---------------------------------------------------------------------------
# Inventory Router
# ---------------------------------------------------------------------------
inventory_router = APIRouter(prefix="/inventory", tags=["inventory"])


@inventory_router.get("", response_model=list[InventoryRowResponse])
async def list_inventory(
    q: str | None = None,
    category: str | None = None,
    sort: str = "recent",
) -> list[InventoryRowResponse]:
    rows = queries.list_inventory(query=q, category=category, sort=sort)
    return [InventoryRowResponse.model_validate(row) for row in rows]


@inventory_router.get("/expiring", response_model=list[InventoryRowResponse])
async def list_expiring() -> list[InventoryRowResponse]:
    return [InventoryRowResponse.model_validate(row) for row in queries.expiring_inventory()]


@inventory_router.get("/{sku_id}", response_model=InventoryRowResponse)
async def get_item(sku_id: str) -> InventoryRowResponse:
    return InventoryRowResponse.model_validate(queries.inventory_view(queries.get_sku(sku_id)))


@inventory_router.patch("/{sku_id}/stock", response_model=SkuResponse)
async def adjust_stock(
    sku_id: str,
    body: AdjustStockRequest,
    principal: Principal = Depends(require_manager),
) -> SkuResponse:
    command = AdjustStock(sku_id=sku_id, quantity=body.quantity, reason=body.reason, adjusted_by=principal.id)
    return SkuResponse.model_validate(current_domain.process(command, asynchronous=False))


# ---------------------------------------------------------------------------
# Replenishment Router
# ---------------------------------------------------------------------------
replenishment_router = APIRouter(prefix="/replenishment", tags=["replenishment"])


@replenishment_router.get("/worklist", response_model=WorklistResponse)
async def worklist(_principal: Principal = Depends(require_manager)) -> WorklistResponse:
    view = get_worklist().refresh()
    return WorklistResponse(
        requests=view.requests,
        inventory=[InventoryRowResponse.model_validate(row) for row in view.inventory],
        degraded=view.degraded,
        warning=view.warning,
    )


@replenishment_router.post("/worklist/{sku_id}/approve", response_model=OrderRequest)
async def approve(
    sku_id: str,
    body: ApproveRequest,
    principal: Principal = Depends(require_manager),
) -> OrderRequest:
    return get_worklist().approve(sku_id, body.quantity, decided_by=principal.id)


@replenishment_router.post("/worklist/{sku_id}/reject", response_model=OrderRequest)
async def reject(sku_id: str, principal: Principal = Depends(require_manager)) -> OrderRequest:
    return get_worklist().reject(sku_id, decided_by=principal.id)
