"""Log file cleanup.

Deletes application log files from a log directory and keeps a one-line
summary per run in ``cleanup_history.log`` inside that directory.
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path

from stockpile.domain.shared.time import format_timestamp

logger = logging.getLogger(__name__)

CLEANUP_HISTORY_FILE = "cleanup_history.log"
LOG_SUFFIX = ".log"


@dataclass(frozen=True)
class DeletedFile:
    path: Path
    size: int


@dataclass
class CleanupResult:
    """Outcome of a single cleanup run."""

    log_dir: Path
    directory_missing: bool = False
    deleted: list[DeletedFile] = field(default_factory=list)
    errors: list[tuple[Path, str]] = field(default_factory=list)

    @property
    def files_deleted(self) -> int:
        return len(self.deleted)

    @property
    def bytes_freed(self) -> int:
        return sum(f.size for f in self.deleted)


def _is_log_file(path: Path) -> bool:
    return path.name.lower().endswith(LOG_SUFFIX) and path.name != CLEANUP_HISTORY_FILE


def cleanup_logs(log_dir: Path) -> CleanupResult:
    """Delete every ``*.log`` file below ``log_dir``.

    The suffix match is case-insensitive and recursive. The cleanup
    history file is kept. Files that cannot be read or removed are
    recorded in ``CleanupResult.errors`` and skipped.

    Parameters
    ----------
    log_dir
        Directory to clean

    Returns
    -------
    CleanupResult with the deleted files and per-file errors. A missing
    directory is reported via ``directory_missing``, not raised.
    """
    log_dir = log_dir.resolve()
    result = CleanupResult(log_dir=log_dir)

    if not log_dir.is_dir():
        logger.info("Log directory does not exist: %s", log_dir)
        result.directory_missing = True
        return result

    for path in sorted(log_dir.rglob("*")):
        if not _is_log_file(path):
            continue
        try:
            if not path.is_file():
                continue
            size = path.stat().st_size
            path.unlink()
        except OSError as e:
            logger.warning("Error deleting file %s: %s", path, e)
            result.errors.append((path, str(e)))
            continue

        logger.debug("Deleted %s (%d bytes)", path, size)
        result.deleted.append(DeletedFile(path=path, size=size))

    logger.info(
        "Log cleanup in %s: %d files deleted, %d bytes freed",
        log_dir,
        result.files_deleted,
        result.bytes_freed,
    )
    return result


def format_history_entry(
    result: CleanupResult,
    when: datetime | None = None,
) -> str:
    megabytes = result.bytes_freed / (1024 * 1024)
    return (
        f"[{format_timestamp(when)}] Log cleanup executed - "
        f"Files deleted: {result.files_deleted}, Space freed: {megabytes:.2f} MB\n"
    )


def append_cleanup_history(
    result: CleanupResult,
    when: datetime | None = None,
) -> Path:
    """Append a summary line for ``result`` to the cleanup history file.

    Raises
    ------
    OSError
        If the history file cannot be opened or written
    """
    history_path = result.log_dir / CLEANUP_HISTORY_FILE
    entry = format_history_entry(result, when)
    with history_path.open("a", encoding="utf-8") as f:
        f.write(entry)
    return history_path
