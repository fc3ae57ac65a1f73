"""Pydantic request/response schemas for the Stockroom API.

These are external contracts (anti-corruption layer), kept separate from
internal commands. Request fields also accept the camelCase names the
kiosk and scanner clients send.
"""

from datetime import date, datetime

from pydantic import AliasChoices, BaseModel, ConfigDict, Field

from stockroom.replenishment.request import OrderRequest


# ---------------------------------------------------------------------------
# Kiosk Request Schemas
# ---------------------------------------------------------------------------
class CartItemSchema(BaseModel):
    sku_id: str | None = Field(default=None, validation_alias=AliasChoices("sku_id", "productId"))
    external_code: str | None = Field(default=None, validation_alias=AliasChoices("external_code", "barcode"))
    name: str | None = None
    unit_price: int | None = Field(default=None, validation_alias=AliasChoices("unit_price", "price"))
    quantity: int


class CheckoutRequest(BaseModel):
    items: list[CartItemSchema] = Field(default_factory=list)
    total_amount: int | None = Field(default=None, validation_alias=AliasChoices("total_amount", "totalAmount"))
    payment_method: str = Field(default="card", validation_alias=AliasChoices("payment_method", "paymentMethod"))


# ---------------------------------------------------------------------------
# Inventory / Replenishment Request Schemas
# ---------------------------------------------------------------------------
class AdjustStockRequest(BaseModel):
    quantity: int
    reason: str = "manual"


class ApproveRequest(BaseModel):
    # Validated by the worklist so that non-numeric input is a 400, not a schema error
    quantity: int | str | None = None


# ---------------------------------------------------------------------------
# Response Schemas
# ---------------------------------------------------------------------------
class StatusResponse(BaseModel):
    status: str = "ok"


class SkuResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    category: str
    stock: int
    min_stock: int
    price: int
    expiry_date: date | None = None
    external_code: str | None = None
    created_at: datetime


class InventoryRowResponse(SkuResponse):
    display_stock: int
    days_until_expiry: int | None = None
    is_expired: bool
    is_shortage: bool
    is_expiring: bool


class OrderLineResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    sku_id: str | None = None
    external_code: str | None = None
    name: str
    unit_price: int
    quantity: int
    line_total: int


class OrderResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    order_number: str
    total_amount: int
    payment_method: str
    created_at: datetime
    lines: list[OrderLineResponse]

    @classmethod
    def from_order(cls, order) -> "OrderResponse":
        return cls(
            order_number=order.order_number,
            total_amount=order.total_amount,
            payment_method=order.payment_method,
            created_at=order.created_at,
            lines=[OrderLineResponse.model_validate(line) for line in order.ordered_lines],
        )


class ReceivingEventResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    product_name: str
    external_code: str
    unit_price: int
    quantity: int
    entry_date: date | None = None
    expire_date: date | None = None
    sku_id: str | None = None
    outcome: str
    scanned_at: datetime


class ReceiptResponse(BaseModel):
    outcome: str
    event: ReceivingEventResponse
    sku: SkuResponse | None = None


class WorklistResponse(BaseModel):
    requests: list[OrderRequest]
    inventory: list[InventoryRowResponse]
    degraded: bool = False
    warning: str | None = None
