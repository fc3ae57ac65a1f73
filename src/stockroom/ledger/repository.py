"""Repository for the SKU aggregate.

Stock mutations never save a whole aggregate back. Each one is a single
conditional UPDATE matching the stock level the caller read, so a write
based on a stale read changes nothing and is reported instead of
overwriting a concurrent change.
"""

from datetime import date

import structlog

from stockroom.domain import stockroom
from stockroom.exceptions import ConflictError, SkuNotFound, ValidationError
from stockroom.ledger.sku import SKU
from stockroom.shared.dates import utcnow

logger = structlog.get_logger(__name__)

# Query sets page results by default; ledger listings read every row.
LISTING_LIMIT = 100_000


@stockroom.repository(part_of=SKU)
class SKURepository:
    # -------------------------------------------------------------------
    # Lookups
    # -------------------------------------------------------------------
    def find(self, sku_id: str | None) -> SKU | None:
        if not sku_id:
            return None
        return self._dao.query.filter(id=sku_id).all().first

    def find_by_external_code(self, code: str | None) -> SKU | None:
        if not code:
            return None
        return self._dao.query.filter(external_code=code).all().first

    def resolve(self, sku_ref: str | None = None, external_code: str | None = None) -> SKU | None:
        """Find a SKU by id, falling back to its external code.

        The reference itself is tried as a code last, since kiosks sometimes
        send the scanned barcode in the id slot.
        """
        return self.find(sku_ref) or self.find_by_external_code(external_code) or self.find_by_external_code(sku_ref)

    def listing(self) -> list[SKU]:
        """Every SKU, newest first."""
        return self._dao.query.order_by("-created_at").limit(LISTING_LIMIT).all().items

    def remove_all(self) -> int:
        return self._dao.query.delete_all()

    # -------------------------------------------------------------------
    # Stock mutations
    # -------------------------------------------------------------------
    def _write_stock(self, sku: SKU, new_stock: int, **changes) -> SKU:
        matched = self._dao.query.filter(id=sku.id, stock=sku.stock).update_all(
            stock=new_stock, updated_at=utcnow(), **changes
        )
        if matched != 1:
            current = self.find(sku.id)
            if current is None:
                raise SkuNotFound(sku.id)
            logger.warning("stock_write_conflict", sku_id=sku.id, expected=sku.stock, found=current.stock)
            raise ConflictError(
                f"Stock for {sku.name} changed while it was being updated",
                details={"sku_id": sku.id, "expected": sku.stock, "found": current.stock},
            )
        return self.find(sku.id)

    def decrement_if_available(self, sku: SKU, quantity: int) -> SKU | None:
        """Subtract `quantity` only while enough stock remains; None when it does not."""
        if quantity <= 0:
            raise ValidationError({"quantity": ["Quantity must be positive"]})
        if not sku.can_fulfil(quantity):
            return None
        return self._write_stock(sku, sku.stock - quantity)

    def increment(self, sku: SKU, quantity: int, **changes) -> SKU:
        if quantity <= 0:
            raise ValidationError({"quantity": ["Quantity must be positive"]})
        return self._write_stock(sku, sku.stock + quantity, **changes)

    def adjust_stock(self, sku: SKU, delta: int) -> SKU:
        """Apply a signed delta, floor-clamped at zero.

        Callers validate before getting here; a clamp means a check was
        skipped and is logged as a warning.
        """
        if sku.stock + delta < 0:
            logger.warning("stock_clamped", sku_id=sku.id, stock=sku.stock, delta=delta)
        return self._write_stock(sku, max(sku.stock + delta, 0))

    def receive(
        self,
        code: str,
        *,
        name: str,
        quantity: int,
        price: int,
        expiry_date: date | None,
        min_stock: int = 0,
        category: str | None = None,
    ) -> tuple[SKU, bool]:
        """Merge a received quantity into the SKU carrying `code`, creating it if absent.

        Returns the SKU and whether it was created.
        """
        existing = self.find_by_external_code(code)
        if existing is None:
            sku = SKU.create(
                name=name,
                stock=quantity,
                price=price,
                min_stock=min_stock,
                category=category,
                expiry_date=expiry_date,
                external_code=code,
            )
            self.add(sku)
            return sku, True

        existing.apply_receipt_terms(price, expiry_date)
        sku = self.increment(existing, quantity, price=existing.price, expiry_date=existing.expiry_date)
        return sku, False
