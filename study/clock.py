"""UTC clock helpers for review scheduling.

Every scheduling function takes an optional ``now``; when omitted it falls back
to :func:`utc_now`. Tests pass fixed datetimes instead of patching the clock.
"""

from datetime import datetime, timezone
from typing import Optional


def utc_now() -> datetime:
    """Return timezone-aware UTC 'now'."""
    return datetime.now(timezone.utc)


def ensure_utc(dt: datetime) -> datetime:
    """Treat naive datetimes as UTC (SQLite drops tzinfo) and normalise aware ones."""
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def resolve_now(now: Optional[datetime] = None) -> datetime:
    return utc_now() if now is None else ensure_utc(now)
