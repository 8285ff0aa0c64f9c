"""
Numeric and timestamp normalization for untyped boundary fields.

Payload fields may arrive as numbers, numeric strings, null or garbage.
Everything here maps them to a strict value or None (the absent case)
without raising.
"""

import math
import re
from datetime import datetime, timezone
from typing import Any

# fromisoformat() before 3.11 only accepts 3 or 6 fractional digits
_FRACTION_RE = re.compile(r"(\d{2}:\d{2}:\d{2})\.(\d+)")


def _pad_fraction(match: re.Match) -> str:
    return f"{match.group(1)}.{match.group(2)[:6].ljust(6, '0')}"


def to_number(value: Any) -> float | None:
    """
    Coerce a number-or-string field to float.

    None, booleans, unparseable strings, NaN and infinities all map to None.

    Args:
        value: Raw field value

    Returns:
        Finite float, or None if the value is absent or malformed
    """
    if value is None or isinstance(value, bool):
        return None

    if isinstance(value, (int, float)):
        try:
            number = float(value)
        except OverflowError:
            return None
    elif isinstance(value, str):
        text = value.strip()
        if not text:
            return None
        try:
            number = float(text)
        except ValueError:
            return None
    else:
        return None

    if not math.isfinite(number):
        return None
    return number


def to_number_or(value: Any, default: float) -> float:
    """Like to_number() but substitutes default for the absent case."""
    number = to_number(value)
    return default if number is None else number


def to_int(value: Any) -> int | None:
    """Normalize to a number and truncate toward zero."""
    number = to_number(value)
    return None if number is None else int(number)


def to_timestamp(value: Any) -> datetime | None:
    """
    Parse an ISO-8601 timestamp into an aware UTC datetime.

    A trailing "Z" is accepted. Naive values are taken to be UTC.

    Args:
        value: ISO-8601 string or datetime

    Returns:
        Aware datetime in UTC, or None if absent or unparseable
    """
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, str) and value.strip():
        text = value.strip()
        if text.endswith(("Z", "z")):
            text = text[:-1] + "+00:00"
        text = _FRACTION_RE.sub(_pad_fraction, text, count=1)
        try:
            parsed = datetime.fromisoformat(text)
        except ValueError:
            return None
    else:
        return None

    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    try:
        return parsed.astimezone(timezone.utc)
    except OverflowError:
        return None


def parse_rest_time(text: str | None) -> int:
    """
    Parse a manually entered rest time into seconds.

    Formats:
        "90"    -> 90 seconds
        "2.5"   -> 2.5 minutes = 150 seconds
        "1:30"  -> 1 min 30 s = 90 seconds

    Empty or unparseable input yields 0.
    """
    if text is None or not text.strip():
        return 0
    text = text.strip()

    if ":" in text:
        minutes_part, _, seconds_part = text.partition(":")
        minutes = to_number(minutes_part) or 0.0
        seconds = to_number(seconds_part) or 0.0
        return max(0, int(minutes) * 60 + int(seconds))

    if "." in text:
        minutes = to_number(text)
        if minutes is None:
            return 0
        return max(0, round(minutes * 60))

    seconds = to_number(text)
    if seconds is None:
        return 0
    return max(0, int(seconds))
