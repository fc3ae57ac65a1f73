"""Normalisation of QR scan payloads.

Scanner apps post either the scan itself or an envelope whose `data` field
holds the scan as an object or as a JSON-encoded string. The envelope is
unwrapped exactly once, here, and the loosely typed fields are coerced into
a `ScanPayload`.
"""

import json
from dataclasses import dataclass
from datetime import date
from typing import Any

from stockroom.exceptions import MissingField, ValidationError
from stockroom.shared.dates import parse_date
from stockroom.shared.validation import coerce_int, coerce_price, is_blank

NO_CODE = "NO-CODE"

_ALIASES = {
    "product_name": ("productName", "product_name", "name"),
    "external_code": ("externalCode", "external_code", "barcode", "code"),
    "unit_price": ("unitPrice", "unit_price", "price"),
    "quantity": ("quantity", "qty"),
    "entry_date": ("entryDate", "entry_date"),
    "expire_date": ("expireDate", "expire_date", "expiryDate", "expiry_date"),
}


@dataclass(frozen=True)
class ScanPayload:
    product_name: str
    external_code: str
    quantity: int
    unit_price: int
    entry_date: date | None
    expire_date: date | None
    no_code_sentinel: str = NO_CODE

    @property
    def tracked(self) -> bool:
        """Untracked scans (no external code) are audited but never touch the ledger."""
        return self.external_code != self.no_code_sentinel


def unwrap_envelope(body: Any) -> dict:
    if not isinstance(body, dict):
        raise ValidationError({"body": ["Scan payload must be a JSON object"]})

    data = body.get("data")
    if isinstance(data, str) and data:
        try:
            parsed = json.loads(data)
        except ValueError:
            return body
        return parsed if isinstance(parsed, dict) else body
    if isinstance(data, dict) and data:
        return data
    return body


def _pick(payload: dict, field: str) -> Any:
    for key in _ALIASES[field]:
        value = payload.get(key)
        if not is_blank(value):
            return value
    return None


def normalize_scan_payload(body: Any, no_code_sentinel: str = NO_CODE) -> ScanPayload:
    payload = unwrap_envelope(body)

    product_name = _pick(payload, "product_name")
    if is_blank(product_name):
        raise MissingField("productName")

    raw_quantity = _pick(payload, "quantity")
    quantity = coerce_int(raw_quantity)
    if quantity is not None and quantity < 0:
        raise ValidationError({"quantity": [f"Quantity cannot be negative, got {raw_quantity}"]})
    if not quantity:
        quantity = 1

    external_code = _pick(payload, "external_code")

    return ScanPayload(
        product_name=str(product_name).strip(),
        external_code=str(external_code).strip() if external_code is not None else no_code_sentinel,
        quantity=quantity,
        unit_price=coerce_price(_pick(payload, "unit_price")),
        entry_date=parse_date(_pick(payload, "entry_date")),
        expire_date=parse_date(_pick(payload, "expire_date")),
        no_code_sentinel=no_code_sentinel,
    )
