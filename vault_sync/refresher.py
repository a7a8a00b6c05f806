# SPDX-License-Identifier: MIT
# Copyright (c) 2025 vault-sync contributors

"""Periodic refresh of registered secret locations."""

import threading
from collections.abc import Callable

from .exceptions import VaultSyncError
from .lifecycle import CancellationToken
from .log import Logger
from .registry import ReceiverRegistry
from .store import SecretStore

ReadErrorHook = Callable[[str, VaultSyncError], None]


class SecretRefresher:
    """Re-reads every registered location and dispatches its fields.

    A pass never aborts because one location failed: read errors are
    logged and handed to on_read_error, and the pass moves on. There is no
    retry; the location is read again on the next pass.

    Passes are serialized, so a pass started by run() never overlaps one
    started directly with refresh_all().
    """

    def __init__(
        self,
        store: SecretStore,
        registry: ReceiverRegistry,
        period: float,
        logger: Logger,
        on_read_error: ReadErrorHook | None = None,
    ):
        """Initialize the refresher.

        Args:
            store: Store to read secrets from
            registry: Registry receiving the dispatches
            period: Seconds to wait after a pass completes before the next one
            logger: Logger for the agent
            on_read_error: Called with (location, error) for every failed read
        """
        if period <= 0:
            raise ValueError(f"period must be greater than 0, got {period}")
        self.store = store
        self.registry = registry
        self.period = period
        self.logger = logger
        self.on_read_error = on_read_error
        self._pass_lock = threading.Lock()

    def refresh_all(self, token: CancellationToken | None = None) -> int:
        """Run one refresh pass over every registered location.

        Args:
            token: Optional token; a cancelled token stops the pass before the next location

        Returns:
            Number of locations dispatched
        """
        with self._pass_lock:
            dispatched = 0
            for location in self.registry.locations():
                if token is not None and token.cancelled:
                    break
                if self._refresh(location):
                    dispatched += 1
            return dispatched

    def _refresh(self, location: str) -> bool:
        try:
            fields = self.store.read_secret(location)
        except VaultSyncError as e:
            self.logger.warning("Failed to read secret", secret_path=location, error=str(e))
            if self.on_read_error is not None:
                try:
                    self.on_read_error(location, e)
                except Exception:
                    self.logger.exception("Read error hook failed", secret_path=location)
            return False

        try:
            self.registry.dispatch(location, fields)
        except Exception:
            self.logger.exception("Secret receiver failed", secret_path=location)
            return False

        self.logger.info(
            "Secret refreshed",
            secret_path=location,
            fields=len(fields),
            next_renew_seconds=self.period,
        )
        return True

    def run(self, token: CancellationToken) -> None:
        """Refresh every period until cancelled.

        The timer is rearmed only after a pass completes, so passes are at
        least one period apart even when a pass is slow.
        """
        while not token.wait(self.period):
            self.refresh_all(token)
        self.logger.info("Secret renewal cancelled")
