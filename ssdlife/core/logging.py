"""JSONL logging for ssdlife runs."""

import json
from datetime import date, datetime, timezone
from pathlib import Path
from typing import Any


# Log level ordering
LOG_LEVELS = {"debug": 0, "info": 1, "warning": 2, "error": 3}

LOG_NAME = "ssdlife"


def get_log_path(base_path: Path, name: str = LOG_NAME) -> Path:
    """
    Get the log file path for a run.

    Args:
        base_path: Base directory for logs
        name: Log name (without extension)

    Returns:
        Path to the log file: {base}/{date}/{name}.jsonl
    """
    today = date.today().isoformat()
    return base_path / today / f"{name}.jsonl"


class RunLogger:
    """
    JSONL logger for one run.

    Writes structured log entries to a JSONL file.
    """

    def __init__(self, name: str = LOG_NAME, log_path: Path | None = None,
                 base_path: Path | None = None):
        """
        Initialize logger.

        Args:
            name: Name recorded in every entry
            log_path: Path to log file
            base_path: Log directory, used when log_path is not given
        """
        if log_path is None:
            if base_path is None:
                raise ValueError("RunLogger needs log_path or base_path")
            log_path = get_log_path(base_path, name)
        self.name = name
        self.log_path = log_path
        self._file = None

    def _ensure_file(self) -> None:
        """Ensure log file is open."""
        if self._file is None:
            self.log_path.parent.mkdir(parents=True, exist_ok=True)
            self._file = open(self.log_path, "a")

    def _log(self, level: str, message: str, **extra: Any) -> None:
        """Write a log entry."""
        self._ensure_file()
        entry = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": level,
            "script": self.name,
            "message": message,
            **extra,
        }
        self._file.write(json.dumps(entry, default=str) + "\n")
        self._file.flush()

    def debug(self, message: str, **extra: Any) -> None:
        """Log debug message."""
        self._log("debug", message, **extra)

    def info(self, message: str, **extra: Any) -> None:
        """Log info message."""
        self._log("info", message, **extra)

    def warning(self, message: str, **extra: Any) -> None:
        """Log warning message."""
        self._log("warning", message, **extra)

    def error(self, message: str, **extra: Any) -> None:
        """Log error message."""
        self._log("error", message, **extra)

    def close(self) -> None:
        """Close the log file."""
        if self._file is not None:
            self._file.close()
            self._file = None

    def __enter__(self) -> "RunLogger":
        """Context manager entry."""
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        """Context manager exit."""
        self.close()


class NullLogger(RunLogger):
    """Logger that discards every entry."""

    def __init__(self, name: str = LOG_NAME):
        self.name = name
        self.log_path = None
        self._file = None

    def _log(self, level: str, message: str, **extra: Any) -> None:
        pass


def open_logger(log_dir: Path | None) -> RunLogger:
    """Return a file logger under ``log_dir``, or a NullLogger if unset."""
    if log_dir is None:
        return NullLogger()
    return RunLogger(base_path=log_dir)


def query_logs(
    base_path: Path,
    name: str = LOG_NAME,
    log_date: date | None = None,
    min_level: str = "debug",
    limit: int | None = None,
) -> list[dict[str, Any]]:
    """
    Query log entries.

    Args:
        base_path: Base directory for logs
        name: Log name to query
        log_date: Date to query (default: today)
        min_level: Minimum log level to include
        limit: Maximum number of entries to return

    Returns:
        List of log entries matching criteria
    """
    if log_date is None:
        log_date = date.today()

    log_file = base_path / log_date.isoformat() / f"{name}.jsonl"

    if not log_file.exists():
        return []

    min_level_num = LOG_LEVELS.get(min_level, 0)
    results = []

    with open(log_file) as f:
        for line in f:
            if not line.strip():
                continue
            try:
                entry = json.loads(line)
            except json.JSONDecodeError:
                continue
            entry_level = LOG_LEVELS.get(entry.get("level", "debug"), 0)
            if entry_level >= min_level_num:
                results.append(entry)
                if limit and len(results) >= limit:
                    break

    return results
