"""Replenishment advisor: derives candidates from the current ledger state."""

from datetime import UTC, date, datetime

from stockroom.ledger.sku import SKU
from stockroom.replenishment.request import SYSTEM_REQUESTER, OrderRequest

DEFAULT_LOW_STOCK_THRESHOLD = 2
DEFAULT_EXPIRY_WINDOW_DAYS = 7


def is_low_stock(sku: SKU, threshold: int = DEFAULT_LOW_STOCK_THRESHOLD) -> bool:
    """Low stock is an absolute threshold, independent of the SKU's min stock."""
    return sku.stock <= threshold


def is_expiring(sku: SKU, today: date | None = None, window_days: int = DEFAULT_EXPIRY_WINDOW_DAYS) -> bool:
    """In stock and due within the window; past expiry dates count as zero days away."""
    days = sku.days_until_expiry(today)
    return sku.stock > 0 and days is not None and days <= window_days


def low_stock_candidates(
    skus: list[SKU],
    threshold: int = DEFAULT_LOW_STOCK_THRESHOLD,
    now: datetime | None = None,
) -> list[OrderRequest]:
    """One pending request per low-stock SKU, in ledger order."""
    now = now or datetime.now(UTC)
    return [
        OrderRequest(
            id=sku.id,
            item=sku.name,
            quantity=sku.stock,
            requested_by=SYSTEM_REQUESTER,
            detected_at=now,
        )
        for sku in skus
        if is_low_stock(sku, threshold)
    ]

