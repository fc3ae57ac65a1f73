"""Checkout command and the cart lines it carries."""

import json
from enum import Enum

from protean.fields import Integer, String, Text
from pydantic import BaseModel
from pydantic import ValidationError as LineError

from stockroom.domain import stockroom
from stockroom.exceptions import ValidationError


class PaymentMethod(Enum):
    CARD = "card"
    CASH = "cash"


class CartLine(BaseModel):
    """One line as the kiosk submitted it.

    Either `sku_ref` or `external_code` must identify the item. The name and
    unit price are snapshots; when the price is omitted the SKU's current
    price is used.
    """

    sku_ref: str | None = None
    external_code: str | None = None
    name: str | None = None
    unit_price: int | None = None
    quantity: int


@stockroom.command(part_of="Order")
class Checkout:
    items = Text(required=True)  # JSON: list of cart lines
    total_amount = Integer()  # Client-side total; the order records the computed one
    payment_method = String(max_length=20, default=PaymentMethod.CARD.value)


def checkout_command(lines: list[CartLine], **kwargs) -> Checkout:
    return Checkout(items=json.dumps([line.model_dump() for line in lines]), **kwargs)


def parse_cart(items: str) -> list[CartLine]:
    try:
        payload = json.loads(items)
        if not isinstance(payload, list):
            raise ValidationError({"items": ["Cart items must be a list"]})
        return [CartLine.model_validate(item) for item in payload]
    except (LineError, json.JSONDecodeError) as exc:
        raise ValidationError({"items": [str(exc)]}) from exc
