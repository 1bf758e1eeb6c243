"""UTC helpers. Columns may come back naive (SQLite), so compare via ensure_utc."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Optional


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def ensure_utc(value: Optional[datetime]) -> Optional[datetime]:
    """Treat naive datetimes as UTC; convert aware ones to UTC."""
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def minute_bucket(value: datetime) -> datetime:
    """Truncate to the start of the minute (rate-limit window key)."""
    return ensure_utc(value).replace(second=0, microsecond=0)
