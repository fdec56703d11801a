"""Time helpers.

All timestamps are stored and compared as timezone-aware UTC datetimes.
SQLite drops the offset on round-trip, so values read back from the store
go through ``ensure_tz_aware``.
"""

from datetime import datetime, timezone

TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"


def utc_now() -> datetime:
    """Return current UTC datetime (timezone-aware)."""
    return datetime.now(tz=timezone.utc)


def ensure_tz_aware(dt: datetime) -> datetime:
    """Treat a naive datetime as UTC."""
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt


def format_timestamp(dt: datetime | None = None) -> str:
    """Format ``dt`` (default: now) as ``YYYY-MM-DD HH:MM:SS``."""
    return (dt or utc_now()).strftime(TIMESTAMP_FORMAT)
