# SPDX-License-Identifier: MIT
# Copyright (c) 2025 vault-sync contributors

"""Log sink used by the agent and its loops."""

from abc import ABC, abstractmethod
from typing import Any


class Logger(ABC):
    """Structured log sink for the vault sync agent.

    Messages are short constant strings ("Secret refreshed", "Auth token
    renewed"); the variable parts go in keyword fields so entries can be
    filtered. Fields used across the agent:

    - secret_path: location of the secret being read or dispatched
    - auth_method: configured login method
    - remaining_duration: token lease left after a renewal, in seconds
    - error: str() of the exception being reported

    Secret field values, tokens and passwords are never passed as fields.
    The refresh and renewal loops call a logger from worker threads, so
    implementations must be thread-safe.
    """

    @abstractmethod
    def info(self, message: str, **kwargs: Any) -> None:
        """Record normal progress such as a completed refresh or renewal."""

    @abstractmethod
    def warning(self, message: str, **kwargs: Any) -> None:
        """Record a recoverable failure, such as one unreadable secret location."""

    @abstractmethod
    def error(self, message: str, **kwargs: Any) -> None:
        """Record a failure that ends a loop or agent startup."""

    @abstractmethod
    def debug(self, message: str, **kwargs: Any) -> None:
        pass

    @abstractmethod
    def exception(self, message: str, **kwargs: Any) -> None:
        """Record an error with the traceback of the exception being handled.

        Only meaningful inside an ``except`` block.
        """
