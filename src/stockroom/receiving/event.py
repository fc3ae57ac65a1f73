"""ReceivingEvent aggregate: append-only audit record of one receiving scan."""

from enum import Enum

from protean.fields import Date, DateTime, Identifier, Integer, String

from stockroom.domain import stockroom
from stockroom.shared.dates import utcnow


class ReceivingOutcome(Enum):
    MERGED = "merged"
    CREATED = "created"
    UNTRACKED = "untracked"


@stockroom.aggregate
class ReceivingEvent:
    product_name = String(required=True, max_length=200)
    external_code = String(required=True, max_length=100)
    unit_price = Integer(default=0, min_value=0)
    quantity = Integer(required=True, min_value=1)
    entry_date = Date()
    expire_date = Date()
    sku_id = Identifier()
    outcome = String(required=True, max_length=20, choices=ReceivingOutcome)
    scanned_at = DateTime(default=utcnow)

    @classmethod
    def record(cls, scan, outcome: ReceivingOutcome, sku_id: str | None = None) -> "ReceivingEvent":
        return cls(
            product_name=scan.product_name,
            external_code=scan.external_code,
            unit_price=scan.unit_price,
            quantity=scan.quantity,
            entry_date=scan.entry_date,
            expire_date=scan.expire_date,
            sku_id=sku_id,
            outcome=outcome.value,
            scanned_at=utcnow(),
        )
