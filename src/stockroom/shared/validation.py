"""Lenient coercion of loosely typed input (scanner payloads, form fields)."""

import math


def coerce_int(value) -> int | None:
    """Best-effort integer conversion. Returns None for non-numeric input.

    Booleans are rejected, and float-like strings are truncated only when
    they represent a whole number.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        if math.isnan(value) or math.isinf(value) or not value.is_integer():
            return None
        return int(value)
    if isinstance(value, str):
        text = value.strip()
        if not text:
            return None
        try:
            return int(text)
        except ValueError:
            pass
        try:
            number = float(text)
        except ValueError:
            return None
        if math.isnan(number) or math.isinf(number) or not number.is_integer():
            return None
        return int(number)
    return None


def coerce_price(value) -> int:
    """Unit price in minor units; non-numeric or negative input becomes 0."""
    number = coerce_int(value)
    if number is None or number < 0:
        return 0
    return number


def is_blank(value) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())
