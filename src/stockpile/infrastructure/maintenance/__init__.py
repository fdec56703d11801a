"""Maintenance jobs run outside the request path."""

from stockpile.infrastructure.maintenance.log_cleanup import (
    CLEANUP_HISTORY_FILE,
    CleanupResult,
    DeletedFile,
    append_cleanup_history,
    cleanup_logs,
)

__all__ = [
    "CLEANUP_HISTORY_FILE",
    "CleanupResult",
    "DeletedFile",
    "append_cleanup_history",
    "cleanup_logs",
]
