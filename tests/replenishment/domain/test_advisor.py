"""Domain tests for replenishment candidate detection."""

from datetime import UTC, date, datetime, timedelta

from stockroom.ledger.sku import SKU
from stockroom.replenishment.advisor import is_expiring, is_low_stock, low_stock_candidates
from stockroom.replenishment.request import SYSTEM_REQUESTER, RequestStatus

TODAY = date(2025, 3, 10)


def _sku(name, stock, min_stock=0, expiry_days=None):
    return SKU.create(
        name=name,
        stock=stock,
        min_stock=min_stock,
        expiry_date=TODAY + timedelta(days=expiry_days) if expiry_days is not None else None,
    )


class TestLowStock:
    def test_threshold_is_inclusive(self):
        assert is_low_stock(_sku("A", 2))
        assert not is_low_stock(_sku("A", 3))

    def test_independent_of_min_stock(self):
        assert not is_low_stock(_sku("A", 4, min_stock=10))
        assert is_low_stock(_sku("A", 0, min_stock=0))

    def test_custom_threshold(self):
        assert is_low_stock(_sku("A", 5), threshold=5)

    def test_candidates_are_pending_system_requests(self):
        now = datetime(2025, 3, 10, 8, 0, tzinfo=UTC)
        low = _sku("Eggs", 1)
        candidates = low_stock_candidates([low, _sku("Rice", 40)], now=now)

        assert len(candidates) == 1
        request = candidates[0]
        assert request.id == low.id
        assert request.item == "Eggs"
        assert request.quantity == 1
        assert request.requested_by == SYSTEM_REQUESTER
        assert request.status == RequestStatus.PENDING
        assert request.detected_at == now


class TestExpiring:
    def test_within_window_and_in_stock(self):
        assert is_expiring(_sku("Milk", 3, expiry_days=7), today=TODAY)
        assert not is_expiring(_sku("Milk", 3, expiry_days=8), today=TODAY)
        assert not is_expiring(_sku("Milk", 0, expiry_days=1), today=TODAY)
        assert not is_expiring(_sku("Milk", 3), today=TODAY)

    def test_already_expired_counts_as_zero_days(self):
        assert is_expiring(_sku("Milk", 3, expiry_days=-2), today=TODAY)

