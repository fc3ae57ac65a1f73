"""Read-side queries over the ledger: scanning, listing and sorting inventory."""

from dataclasses import dataclass
from datetime import UTC, date, datetime

from protean.exceptions import ObjectNotFoundError
from protean.utils.globals import current_domain

from stockroom.domain import guard_ledger, settings
from stockroom.exceptions import SkuNotFound, ValidationError
from stockroom.ledger.sku import SKU
from stockroom.replenishment.advisor import is_expiring

SORT_MODES = ("recent", "low_stock", "expiry")
ALL_CATEGORIES = "all"


@dataclass(frozen=True)
class InventoryRow:
    """A SKU as the inventory screens see it on a given day.

    Expired stock cannot be sold, so `display_stock` reports 0 for it while
    `stock` keeps the ledger figure.
    """

    id: str
    name: str
    category: str
    stock: int
    display_stock: int
    min_stock: int
    price: int
    expiry_date: date | None
    external_code: str | None
    created_at: datetime
    days_until_expiry: int | None
    is_expired: bool
    is_shortage: bool
    is_expiring: bool


def inventory_view(sku: SKU, today: date | None = None, window_days: int | None = None) -> InventoryRow:
    window_days = settings().expiry_window_days if window_days is None else window_days
    days = sku.days_until_expiry(today)
    expired = sku.is_expired(today)
    display_stock = 0 if expired else sku.stock

    return InventoryRow(
        id=sku.id,
        name=sku.name,
        category=sku.category,
        stock=sku.stock,
        display_stock=display_stock,
        min_stock=sku.min_stock,
        price=sku.price,
        expiry_date=sku.expiry_date,
        external_code=sku.external_code,
        created_at=sku.created_at,
        days_until_expiry=days,
        is_expired=expired,
        is_shortage=display_stock < sku.min_stock,
        is_expiring=not expired and is_expiring(sku, today, window_days),
    )


def _utc_key(moment: datetime | None) -> datetime:
    # SQLite hands back naive datetimes; they were written as UTC.
    if moment is None:
        return datetime.min
    if moment.tzinfo is not None:
        return moment.astimezone(UTC).replace(tzinfo=None)
    return moment


def sort_inventory(rows: list[InventoryRow], mode: str = "recent") -> list[InventoryRow]:
    """Order rows for display.

    recent:     newest first.
    low_stock:  shortages (worst first), then expiring (soonest first), then by name.
    expiry:     in-stock before out-of-stock, soonest expiry first, undated last.
    """
    if mode not in SORT_MODES:
        raise ValidationError({"sort": [f"Unknown sort mode '{mode}'. Use one of: {', '.join(SORT_MODES)}"]})

    if mode == "recent":
        return sorted(rows, key=lambda row: _utc_key(row.created_at), reverse=True)

    if mode == "low_stock":

        def low_stock_key(row):
            if row.is_shortage:
                return (0, row.display_stock - row.min_stock, "")
            if row.is_expiring:
                return (1, row.days_until_expiry, "")
            return (2, 0, row.name.casefold())

        return sorted(rows, key=low_stock_key)

    def expiry_key(row):
        rank = 0 if row.display_stock > 0 else 1
        if row.days_until_expiry is None:
            return (rank, 1, 0, "")
        return (rank, 0, row.days_until_expiry, row.name.casefold())

    return sorted(rows, key=expiry_key)


# ---------------------------------------------------------------------------
# Queries
# ---------------------------------------------------------------------------
def scan(code: str) -> SKU:
    """Look up a SKU by its scanned external code."""
    sku = current_domain.repository_for(SKU).find_by_external_code(code)
    if sku is None:
        raise SkuNotFound(code)
    return sku


def get_sku(sku_id: str) -> SKU:
    try:
        return current_domain.repository_for(SKU).get(sku_id)
    except ObjectNotFoundError:
        raise SkuNotFound(sku_id) from None


def all_skus() -> list[SKU]:
    with guard_ledger():
        return current_domain.repository_for(SKU).listing()


def ping() -> None:
    """Round-trip to the ledger database."""
    with guard_ledger():
        current_domain.repository_for(SKU)._dao.query.limit(1).all()


def list_inventory(
    query: str | None = None,
    category: str | None = None,
    sort: str = "recent",
    today: date | None = None,
) -> list[InventoryRow]:
    """Named SKUs matching `query` (case-insensitive substring) and `category`."""
    needle = query.strip().casefold() if query else ""
    wanted = None if not category or category.lower() == ALL_CATEGORIES else category

    rows = [
        inventory_view(sku, today)
        for sku in all_skus()
        if sku.has_display_name
        and needle in sku.name.casefold()
        and (wanted is None or sku.category == wanted)
    ]
    return sort_inventory(rows, sort)


def expiring_inventory(today: date | None = None) -> list[InventoryRow]:
    """In-stock items expiring within the configured window, soonest first."""
    rows = [row for row in list_inventory(today=today) if row.is_expiring]
    return sorted(rows, key=lambda row: (row.days_until_expiry, row.name.casefold()))


def quick_menu() -> list[SKU]:
    """Sellable items (named and priced) for the kiosk quick-pick list, best stocked first."""
    return sorted(
        (sku for sku in all_skus() if sku.has_display_name and sku.price > 0),
        key=lambda sku: sku.stock,
        reverse=True,
    )
