"""Receiving reconciler: turns QR scans into ledger increments.

Every scan is audited. Scans carrying an external code are merged into the
SKU holding that code (stock added, price last-write-wins, soonest expiry
kept) or create it. Scans without a code are recorded only.
"""

import json
from dataclasses import dataclass

import structlog
from protean import handle
from protean.core.unit_of_work import UnitOfWork
from protean.exceptions import ValidationError as ProteanValidationError
from protean.fields import Text
from protean.utils.globals import current_domain
from sqlalchemy.exc import IntegrityError

from stockroom.domain import guard_ledger, settings, stockroom
from stockroom.exceptions import ConflictError
from stockroom.ledger.locks import sku_locks
from stockroom.ledger.repository import LISTING_LIMIT
from stockroom.ledger.sku import SKU
from stockroom.receiving.event import ReceivingEvent, ReceivingOutcome
from stockroom.receiving.payload import ScanPayload, normalize_scan_payload

logger = structlog.get_logger(__name__)


@stockroom.command(part_of="ReceivingEvent")
class ReceiveScan:
    payload = Text(required=True)  # JSON: scan body, possibly wrapped in a `data` envelope


@dataclass(frozen=True)
class ReceiptResult:
    event: ReceivingEvent
    sku: SKU | None

    @property
    def outcome(self) -> str:
        return self.event.outcome


def _is_duplicate_code(exc: Exception) -> bool:
    """True when a create lost the race for an external code."""
    if isinstance(exc, IntegrityError) or isinstance(exc.__cause__, IntegrityError):
        return True
    return isinstance(exc, ProteanValidationError) and "external_code" in (exc.messages or {})


def _record_untracked(scan: ScanPayload) -> ReceiptResult:
    with guard_ledger(), UnitOfWork():
        event = ReceivingEvent.record(scan, ReceivingOutcome.UNTRACKED)
        current_domain.repository_for(ReceivingEvent).add(event)
    return ReceiptResult(event=event, sku=None)


def _reconcile(scan: ScanPayload) -> ReceiptResult:
    config = settings()

    with sku_locks.hold([f"code:{scan.external_code}"]):
        existing = current_domain.repository_for(SKU).find_by_external_code(scan.external_code)
        sku_keys = [existing.id] if existing is not None else []

        with sku_locks.hold(sku_keys), guard_ledger(), UnitOfWork():
            sku, created = current_domain.repository_for(SKU).receive(
                scan.external_code,
                name=scan.product_name,
                quantity=scan.quantity,
                price=scan.unit_price,
                expiry_date=scan.expire_date,
                min_stock=config.default_min_stock,
                category=config.default_category,
            )
            outcome = ReceivingOutcome.CREATED if created else ReceivingOutcome.MERGED
            event = ReceivingEvent.record(scan, outcome, sku_id=sku.id)
            current_domain.repository_for(ReceivingEvent).add(event)

    return ReceiptResult(event=event, sku=sku)


@stockroom.command_handler(part_of=ReceivingEvent)
class ReceiveScanHandler:
    @handle(ReceiveScan)
    def receive_scan(self, command):
        scan = normalize_scan_payload(json.loads(command.payload), no_code_sentinel=settings().no_code_sentinel)

        if not scan.tracked:
            result = _record_untracked(scan)
        else:
            try:
                result = _reconcile(scan)
            except (IntegrityError, ProteanValidationError) as exc:
                if not _is_duplicate_code(exc):
                    raise
                # Another writer created the code between our lookup and insert
                logger.warning("receiving_create_conflict", external_code=scan.external_code)
                try:
                    result = _reconcile(scan)
                except (IntegrityError, ProteanValidationError) as retry_exc:
                    if not _is_duplicate_code(retry_exc):
                        raise
                    raise ConflictError(
                        f"Could not reconcile scan for code {scan.external_code}",
                        details={"external_code": scan.external_code},
                    ) from retry_exc

        logger.info(
            "scan_received",
            outcome=result.outcome,
            external_code=scan.external_code,
            quantity=scan.quantity,
            sku_id=result.sku.id if result.sku else None,
            stock=result.sku.stock if result.sku else None,
        )
        return result


# ---------------------------------------------------------------------------
# History
# ---------------------------------------------------------------------------
def receiving_history(limit: int | None = None) -> list[ReceivingEvent]:
    """Receiving events, newest first."""
    query = current_domain.repository_for(ReceivingEvent)._dao.query.order_by("-scanned_at")
    return query.limit(limit or LISTING_LIMIT).all().items
