# SPDX-License-Identifier: MIT
# Copyright (c) 2025 vault-sync contributors

"""Silent logger implementation for testing."""

import threading
from typing import Any

from .logger import Logger


class SilentLogger(Logger):
    """Logger that stores log entries in memory without output.

    Useful in tests to assert on logging behavior. Entries are not filtered by
    level. Appends are locked because the agent logs from worker threads.
    """

    def __init__(self, level: str = "INFO", name: str | None = None):
        self.level = level.upper()
        self.name = name or "vault_sync"
        self.logs: list[dict[str, Any]] = []
        self._lock = threading.Lock()

    def _log(self, level: str, message: str, **kwargs: Any) -> None:
        log_entry: dict[str, Any] = {
            "level": level,
            "message": message,
        }
        if kwargs:
            log_entry["extra"] = kwargs

        with self._lock:
            self.logs.append(log_entry)

    def info(self, message: str, **kwargs: Any) -> None:
        self._log("INFO", message, **kwargs)

    def warning(self, message: str, **kwargs: Any) -> None:
        self._log("WARNING", message, **kwargs)

    def error(self, message: str, **kwargs: Any) -> None:
        self._log("ERROR", message, **kwargs)

    def exception(self, message: str, **kwargs: Any) -> None:
        kwargs.setdefault("exc_info", True)
        self._log("ERROR", message, **kwargs)

    def debug(self, message: str, **kwargs: Any) -> None:
        self._log("DEBUG", message, **kwargs)

    def clear_logs(self) -> None:
        """Clear all stored log entries."""
        with self._lock:
            self.logs.clear()

    def get_logs(self, level: str | None = None) -> list[dict[str, Any]]:
        """Get a copy of stored log entries, optionally filtered by level.

        Args:
            level: Optional log level to filter by (DEBUG, INFO, WARNING, ERROR)

        Returns:
            List of log entries
        """
        with self._lock:
            logs = list(self.logs)
        if level is None:
            return logs
        return [log for log in logs if log["level"] == level]

    def has_log(self, message: str, level: str | None = None) -> bool:
        """Check if a log message exists (substring match).

        Args:
            message: Message to search for
            level: Optional log level to filter by

        Returns:
            True if message is found, False otherwise
        """
        return any(message in log["message"] for log in self.get_logs(level))
