"""Shared domain components."""

from stockpile.domain.shared.time import ensure_tz_aware, format_timestamp, utc_now

__all__ = [
    "ensure_tz_aware",
    "format_timestamp",
    "utc_now",
]
