"""Replenishment worklist: merges fresh candidates with persisted decisions.

The worklist is a read-modify-write over the decision store, driven by a
single operator. Operator decisions are never lost to a recomputation:
approved and rejected requests survive even after their SKU stops
qualifying, while pending requests disappear once the SKU recovers.
"""

from dataclasses import dataclass
from datetime import UTC, date, datetime
from typing import Callable

import structlog
from protean.utils.globals import current_domain

from stockroom.domain import settings
from stockroom.exceptions import ConflictError, NotFoundError, UpstreamUnavailable, ValidationError
from stockroom.ledger.adjustment import AdjustStock
from stockroom.ledger.queries import InventoryRow, all_skus, inventory_view
from stockroom.ledger.seed import demo_catalogue
from stockroom.ledger.sku import SKU
from stockroom.replenishment.advisor import low_stock_candidates
from stockroom.replenishment.request import OrderRequest, RequestStatus
from stockroom.replenishment.store.port import DecisionStorePort
from stockroom.shared.validation import coerce_int

logger = structlog.get_logger(__name__)


def merge(fresh: list[OrderRequest], persisted: list[OrderRequest]) -> list[OrderRequest]:
    """Combine freshly detected candidates with persisted requests.

    - A persisted request is kept when it has been decided, or when its SKU
      is still a candidate; the persisted fields win.
    - Persisted pending requests whose SKU no longer qualifies are dropped.
    - Fresh candidates not already represented are appended as pending.

    Kept persisted requests come first, in stored order.
    """
    candidates = {request.id for request in fresh}

    merged = []
    seen = set()
    for request in persisted:
        if request.id in seen:
            continue
        if request.status != RequestStatus.PENDING or request.id in candidates:
            merged.append(request)
            seen.add(request.id)

    for request in fresh:
        if request.id in seen:
            continue
        merged.append(request)
        seen.add(request.id)

    return merged


@dataclass(frozen=True)
class WorklistView:
    requests: list[OrderRequest]
    inventory: list[InventoryRow]
    degraded: bool = False
    warning: str | None = None


class ReplenishmentWorklist:
    def __init__(
        self,
        store: DecisionStorePort,
        inventory_source: Callable[[], list[SKU]] = all_skus,
        threshold: int | None = None,
    ):
        self.store = store
        self.inventory_source = inventory_source
        self._threshold = threshold
        self._snapshot: list[SKU] | None = None

    @property
    def threshold(self) -> int:
        if self._threshold is not None:
            return self._threshold
        return settings().low_stock_threshold

    def requests(self) -> list[OrderRequest]:
        return self.store.load()

    def refresh(self, today: date | None = None, now: datetime | None = None) -> WorklistView:
        """Recompute candidates from the ledger and merge them into the stored worklist.

        When the ledger cannot be read, the stored worklist is returned
        untouched alongside the last inventory snapshot (or the demo
        catalogue), flagged as degraded.
        """
        persisted = self.store.load()

        try:
            skus = self.inventory_source()
        except UpstreamUnavailable as exc:
            fallback = "cached snapshot" if self._snapshot is not None else "demo catalogue"
            inventory = self._snapshot if self._snapshot is not None else demo_catalogue()
            warning = f"Stock ledger unavailable; showing {fallback}. Figures may be out of date."
            logger.warning("worklist_degraded", reason=exc.message, fallback=fallback)
            return WorklistView(
                requests=persisted,
                inventory=[inventory_view(sku, today) for sku in inventory],
                degraded=True,
                warning=warning,
            )

        self._snapshot = list(skus)
        fresh = low_stock_candidates(skus, threshold=self.threshold, now=now)
        merged = merge(fresh, persisted)
        self.store.save(merged)

        logger.debug("worklist_refreshed", candidates=len(fresh), requests=len(merged))
        return WorklistView(requests=merged, inventory=[inventory_view(sku, today) for sku in skus])

    # -------------------------------------------------------------------
    # Decisions
    # -------------------------------------------------------------------
    def _pending(self, requests: list[OrderRequest], sku_id: str) -> OrderRequest:
        request = next((request for request in requests if request.id == sku_id), None)
        if request is None:
            raise NotFoundError(f"No order request for item {sku_id}", details={"sku_id": sku_id})
        if not request.is_pending:
            raise ConflictError(
                f"Order request for item {sku_id} is already {request.status.value}",
                details={"sku_id": sku_id, "status": request.status.value},
            )
        return request

    def _replace(self, requests: list[OrderRequest], updated: OrderRequest) -> None:
        self.store.save([updated if request.id == updated.id else request for request in requests])

    def approve(self, sku_id: str, quantity, decided_by: str | None = None) -> OrderRequest:
        """Record the approval, then receive `quantity` into the ledger.

        The decision is saved first so a failed save never leaves stock
        received against a request that still reads as pending. If the
        ledger then refuses the increment, the request is put back to
        pending and the error propagates.
        """
        amount = coerce_int(quantity)
        if amount is None or amount <= 0:
            raise ValidationError({"quantity": ["Order quantity must be a positive whole number"]})

        requests = self.store.load()
        request = self._pending(requests, sku_id)

        updated = request.model_copy(
            update={
                "status": RequestStatus.APPROVED,
                "approved_quantity": amount,
                "approved_at": datetime.now(UTC),
                "decided_by": decided_by,
            }
        )
        self._replace(requests, updated)

        try:
            current_domain.process(
                AdjustStock(sku_id=sku_id, quantity=amount, reason="replenishment approval", adjusted_by=decided_by),
                asynchronous=False,
            )
        except Exception:
            logger.warning("order_request_approval_reverted", sku_id=sku_id, quantity=amount)
            self._replace(requests, request)
            raise

        logger.info("order_request_approved", sku_id=sku_id, quantity=amount, decided_by=decided_by)
        return updated

    def reject(self, sku_id: str, decided_by: str | None = None) -> OrderRequest:
        requests = self.store.load()
        request = self._pending(requests, sku_id)

        updated = request.model_copy(update={"status": RequestStatus.REJECTED, "decided_by": decided_by})
        self._replace(requests, updated)

        logger.info("order_request_rejected", sku_id=sku_id, decided_by=decided_by)
        return updated
