"""Wire value helpers: calendar days, shift timestamps and clock strings."""

from __future__ import annotations

import re
from datetime import date, datetime, time
from typing import Optional

import pandas as pd


_CLOCK_RE = re.compile(r"^(\d{1,2}):(\d{2})(?::(\d{2}))?$")


def parse_day(value) -> Optional[date]:
    """
    Truncate a date or date-time value to its calendar day.

    Args:
        value: ``date``, ``datetime`` or an ISO string such as
            ``"2024-01-01"`` or ``"2024-01-01T00:00:00.000Z"``

    Returns:
        The calendar day, or None when the value is missing or unparseable
    """
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    text = str(value).strip()
    if len(text) < 10:
        return None
    try:
        return date.fromisoformat(text[:10])
    except ValueError:
        return None


def parse_clock(value) -> Optional[time]:
    """Parse an ``HH:MM`` (or ``HH:MM:SS``) clock string."""
    if value is None:
        return None
    match = _CLOCK_RE.match(str(value).strip())
    if not match:
        return None
    hour, minute, second = int(match.group(1)), int(match.group(2)), int(match.group(3) or 0)
    if hour > 23 or minute > 59 or second > 59:
        return None
    return time(hour, minute, second)


def parse_timestamp(value, day: Optional[date] = None) -> Optional[datetime]:
    """
    Parse a shift start/end value into a naive datetime.

    Clock strings (``"09:00"``) are combined with ``day``. ISO date-times are
    parsed with pandas; timezone-aware values are converted to naive UTC so
    that every timestamp in a window compares on the same scale.

    Args:
        value: ``datetime``, clock string or ISO date-time string
        day: Calendar day used to anchor clock strings

    Returns:
        Naive datetime, or None when missing/unparseable
    """
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        ts = pd.Timestamp(value)
    else:
        clock = parse_clock(value)
        if clock is not None:
            if day is None:
                return None
            return datetime.combine(day, clock)
        ts = pd.to_datetime(str(value), errors="coerce")
    if ts is pd.NaT or pd.isna(ts):
        return None
    if ts.tzinfo is not None:
        ts = ts.tz_convert("UTC").tz_localize(None)
    return ts.to_pydatetime()


def clock_string(value: Optional[datetime]) -> Optional[str]:
    """Format a datetime as ``HH:MM``."""
    if value is None:
        return None
    return value.strftime("%H:%M")


def day_string(value: Optional[date]) -> Optional[str]:
    """Format a calendar day as ``YYYY-MM-DD``."""
    if value is None:
        return None
    return value.isoformat()


def iso_timestamp(value: datetime) -> str:
    """Format a naive UTC datetime the way the backend expects query bounds."""
    return pd.Timestamp(value).tz_localize("UTC").isoformat().replace("+00:00", "Z")
