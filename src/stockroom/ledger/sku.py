"""SKU aggregate: the authoritative record of a sellable item's stock.

Stock is only ever changed by checkout, receiving and explicit adjustment,
and never drops below zero. The merge rules applied when a receiving scan
meets an existing SKU live here as plain methods so they can be tested
without a database.
"""

from datetime import date

from protean import invariant
from protean.fields import Date, DateTime, Integer, String

from stockroom.domain import stockroom
from stockroom.exceptions import ValidationError
from stockroom.shared.dates import days_until, earliest, is_expired, utcnow

DEFAULT_CATEGORY = "Uncategorized"
PLACEHOLDER_NAMES = frozenset({"", "unnamed"})


@stockroom.aggregate
class SKU:
    name = String(required=True, max_length=200)
    category = String(max_length=100, default=DEFAULT_CATEGORY)
    stock = Integer(default=0)
    min_stock = Integer(default=0, min_value=0)
    price = Integer(default=0, min_value=0)
    expiry_date = Date()
    external_code = String(max_length=100, unique=True)
    created_at = DateTime(default=utcnow)
    updated_at = DateTime(default=utcnow)

    @invariant.post
    def stock_is_never_negative(self):
        if self.stock is not None and self.stock < 0:
            raise ValidationError({"stock": ["Stock cannot be negative"]})

    # -------------------------------------------------------------------
    # Factory method
    # -------------------------------------------------------------------
    @classmethod
    def create(
        cls,
        name,
        stock=0,
        price=0,
        min_stock=0,
        category=None,
        expiry_date=None,
        external_code=None,
        created_at=None,
    ):
        if not name or not str(name).strip():
            raise ValidationError({"name": ["Name is required"]})
        if stock < 0:
            raise ValidationError({"stock": ["Stock cannot be negative"]})
        if min_stock < 0:
            raise ValidationError({"min_stock": ["Minimum stock cannot be negative"]})
        if price < 0:
            raise ValidationError({"price": ["Price cannot be negative"]})

        now = created_at or utcnow()
        return cls(
            name=str(name).strip(),
            category=category or DEFAULT_CATEGORY,
            stock=stock,
            min_stock=min_stock,
            price=price,
            expiry_date=expiry_date,
            external_code=external_code,
            created_at=now,
            updated_at=now,
        )

    # -------------------------------------------------------------------
    # Receiving merge rules
    # -------------------------------------------------------------------
    def apply_receipt_terms(self, price: int, expiry_date: date | None) -> None:
        """Price is last-write-wins when the scan carries one; expiry keeps the soonest."""
        if price > 0:
            self.price = price
        self.expiry_date = earliest(self.expiry_date, expiry_date)

    # -------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------
    def can_fulfil(self, quantity: int) -> bool:
        return self.stock >= quantity

    @property
    def is_shortage(self) -> bool:
        return self.stock < self.min_stock

    @property
    def has_display_name(self) -> bool:
        return bool(self.name) and self.name.strip().lower() not in PLACEHOLDER_NAMES

    def days_until_expiry(self, today: date | None = None) -> int | None:
        return days_until(self.expiry_date, today=today)

    def is_expired(self, today: date | None = None) -> bool:
        return is_expired(self.expiry_date, today=today)
