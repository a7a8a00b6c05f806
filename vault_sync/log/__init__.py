# SPDX-License-Identifier: MIT
# Copyright (c) 2025 vault-sync contributors

"""Structured logging for the vault sync agent.

Example:
    >>> from vault_sync.log import create_logger
    >>> logger = create_logger(logger_type="stdout", level="INFO", name="vault_sync")
    >>> logger.info("Secrets refreshed", locations=2)
    >>>
    >>> # Capture log entries in memory for tests
    >>> test_logger = create_logger(logger_type="silent")
    >>> test_logger.info("Test message")
"""

from .factory import create_logger, normalize_level
from .logger import Logger
from .silent_logger import SilentLogger
from .stdout_logger import StdoutLogger

__all__ = [
    "Logger",
    "SilentLogger",
    "StdoutLogger",
    "create_logger",
    "normalize_level",
]
