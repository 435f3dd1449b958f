#utils/dates.py
from __future__ import annotations

from datetime import date, datetime, timezone
from typing import Optional

DATE_FORMAT = "%Y-%m-%d"
TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"


def _fromisoformat_utc_aware(ts: str) -> datetime:
    """
    Parse an ISO-8601 string into an aware datetime.

    - Accepts 'Z' suffix by translating to '+00:00'
    - Accepts offsets like '+07:00'
    - If the string is naive (no tz info), assume UTC
    """

    s = ts.strip()
    # normalize 'z' -> '+00:00' for fromisoformat()
    if s.endswith("Z"):
        s = s[:-1] + "+00:00"

    dt = datetime.fromisoformat(s)

    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt


def parse_timestamp(ts: Optional[str]) -> Optional[datetime]:
    """
    Parse a host timestamp, keeping the offset it was recorded with.

    >>> parse_timestamp("2024-09-03T14:05:09-04:00").hour
    14
    >>> parse_timestamp("") is None
    True
    """
    if not ts:
        return None
    return _fromisoformat_utc_aware(ts)


def parse_date(value: Optional[str]) -> Optional[date]:
    """
    Parse a due date. Accepts a bare date or a full timestamp (date part kept).
    """
    if not value:
        return None
    s = value.strip()
    if len(s) == 10:
        return date.fromisoformat(s)
    return _fromisoformat_utc_aware(s).date()


def format_date(value: Optional[date]) -> str:
    """YYYY-MM-DD, or "" when absent."""
    if value is None:
        return ""
    return value.strftime(DATE_FORMAT)


def format_timestamp(value: Optional[datetime]) -> str:
    """YYYY-MM-DD HH:MM:SS in the timestamp's own zone, or "" when absent."""
    if value is None:
        return ""
    return value.strftime(TIMESTAMP_FORMAT)
