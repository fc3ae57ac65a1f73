"""Date helpers for expiry handling.

All comparisons are made against the start of the local day, so an item
expiring today is neither expired nor negative days away.
"""

import math
from datetime import UTC, date, datetime, time


def today() -> date:
    return date.today()


def utcnow() -> datetime:
    return datetime.now(UTC)


def parse_date(value) -> date | None:
    """Parse a date-ish value leniently; anything unparseable becomes None."""
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return _to_local_naive(value).date()
    if isinstance(value, date):
        return value
    if not isinstance(value, str):
        return None

    text = value.strip()
    try:
        return date.fromisoformat(text)
    except ValueError:
        pass
    try:
        return _to_local_naive(datetime.fromisoformat(text)).date()
    except ValueError:
        return None


def parse_datetime(value) -> datetime | None:
    """Like parse_date but keeps the time of day (midnight for plain dates)."""
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return _to_local_naive(value)
    if isinstance(value, date):
        return datetime.combine(value, time.min)
    if not isinstance(value, str):
        return None
    try:
        return _to_local_naive(datetime.fromisoformat(value.strip()))
    except ValueError:
        return None


def _to_local_naive(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value
    return value.astimezone().replace(tzinfo=None)


def days_until(target, today: date | None = None) -> int | None:
    """Whole days from the start of `today` to `target`, rounded up.

    Past dates clamp to 0. Missing or invalid targets give None.
    """
    moment = parse_datetime(target)
    if moment is None:
        return None

    start = datetime.combine(today or date.today(), time.min)
    diff = math.ceil((moment - start).total_seconds() / 86400)
    return max(diff, 0)


def is_expired(target, today: date | None = None) -> bool:
    """True when `target` falls before the start of `today`."""
    moment = parse_datetime(target)
    if moment is None:
        return False
    return moment < datetime.combine(today or date.today(), time.min)


def earliest(current: date | None, candidate: date | None) -> date | None:
    """Keep-soonest merge of two optional dates; a missing date never wins."""
    if current is None:
        return candidate
    if candidate is None:
        return current
    return min(current, candidate)
