"""Tests for the expiry date helpers."""

from datetime import date, datetime

from stockroom.shared.dates import days_until, earliest, is_expired, parse_date

TODAY = date(2025, 3, 10)


class TestParseDate:
    def test_iso_date_string(self):
        assert parse_date("2025-03-15") == date(2025, 3, 15)

    def test_iso_datetime_string(self):
        assert parse_date("2025-03-15T08:30:00") == date(2025, 3, 15)

    def test_date_passthrough(self):
        assert parse_date(date(2025, 1, 1)) == date(2025, 1, 1)

    def test_datetime_is_truncated(self):
        assert parse_date(datetime(2025, 1, 1, 23, 59)) == date(2025, 1, 1)

    def test_garbage_is_none(self):
        assert parse_date("not-a-date") is None
        assert parse_date("") is None
        assert parse_date(None) is None
        assert parse_date(12345) is None


class TestDaysUntil:
    def test_future_date(self):
        assert days_until(date(2025, 3, 15), today=TODAY) == 5

    def test_today_is_zero(self):
        assert days_until(TODAY, today=TODAY) == 0

    def test_past_date_clamps_to_zero(self):
        assert days_until(date(2025, 3, 1), today=TODAY) == 0

    def test_partial_day_rounds_up(self):
        assert days_until(datetime(2025, 3, 11, 6, 0), today=TODAY) == 2

    def test_missing_or_invalid_is_none(self):
        assert days_until(None, today=TODAY) is None
        assert days_until("garbage", today=TODAY) is None

    def test_accepts_strings(self):
        assert days_until("2025-03-17", today=TODAY) == 7


class TestIsExpired:
    def test_yesterday_is_expired(self):
        assert is_expired(date(2025, 3, 9), today=TODAY) is True

    def test_today_is_not_expired(self):
        assert is_expired(TODAY, today=TODAY) is False

    def test_missing_is_not_expired(self):
        assert is_expired(None, today=TODAY) is False
        assert is_expired("bogus", today=TODAY) is False


class TestEarliest:
    def test_keeps_soonest(self):
        assert earliest(date(2025, 5, 1), date(2025, 4, 1)) == date(2025, 4, 1)
        assert earliest(date(2025, 4, 1), date(2025, 5, 1)) == date(2025, 4, 1)

    def test_missing_never_wins(self):
        assert earliest(None, date(2025, 4, 1)) == date(2025, 4, 1)
        assert earliest(date(2025, 4, 1), None) == date(2025, 4, 1)
        assert earliest(None, None) is None
