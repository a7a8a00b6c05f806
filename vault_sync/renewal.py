# SPDX-License-Identifier: MIT
# Copyright (c) 2025 vault-sync contributors

"""Lease renewal loop for the authentication token."""

import queue
from collections.abc import Callable

from .exceptions import VaultSyncError
from .lifecycle import CancellationToken
from .log import Logger
from .session import AuthSession
from .store import SecretStore
from .watcher import LeaseDone, LeaseRenewal, LifetimeWatcher

LeaseExpiredHook = Callable[[VaultSyncError | None], None]

_CANCELLED = object()


class LeaseRenewalLoop:
    """Keeps the agent's token alive for the agent's lifetime.

    run() blocks on a single event queue fed by the lifetime watcher and by
    the cancellation token. It returns on cancellation or when the watcher
    reports the lease is done; a failed lease is raised as
    LeaseRenewalError. Losing the lease does not re-authenticate and does
    not stop the secret refresh loop; on_lease_expired is the place to react.
    """

    def __init__(
        self,
        store: SecretStore,
        session: AuthSession,
        logger: Logger,
        increment: int | None = None,
        on_lease_expired: LeaseExpiredHook | None = None,
        watcher_factory: Callable[..., LifetimeWatcher] = LifetimeWatcher,
    ):
        self.store = store
        self.session = session
        self.logger = logger
        self.increment = increment
        self.on_lease_expired = on_lease_expired
        self._watcher_factory = watcher_factory

    def run(self, token: CancellationToken) -> None:
        """Watch the lease until cancelled or the lease ends.

        Raises:
            LeaseRenewalError: If the lease could not be renewed
        """
        events: queue.Queue = queue.Queue()
        watcher = self._watcher_factory(self.store, self.session, events, increment=self.increment)
        remove_callback = token.add_callback(lambda: events.put(_CANCELLED))
        watcher.start()
        try:
            while True:
                event = events.get()

                if event is _CANCELLED:
                    self.logger.info("Auth token renewal cancelled")
                    return

                if isinstance(event, LeaseDone):
                    self._lease_done(event)
                    return

                if isinstance(event, LeaseRenewal):
                    self.session = event.session
                    self.logger.info(
                        "Auth token renewed",
                        remaining_duration=event.session.lease_duration,
                        renewed_at=event.renewed_at.isoformat(),
                    )
        finally:
            watcher.stop()
            remove_callback()

    def _lease_done(self, event: LeaseDone) -> None:
        if event.error is not None:
            self.logger.error("Renewal of auth token failed", error=str(event.error))
        else:
            self.logger.warning("Auth token lease can no longer be extended")

        if self.on_lease_expired is not None:
            try:
                self.on_lease_expired(event.error)
            except Exception:
                self.logger.exception("Lease expired hook failed")

        if event.error is not None:
            raise event.error
