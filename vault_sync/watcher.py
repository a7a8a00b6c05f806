# SPDX-License-Identifier: MIT
# Copyright (c) 2025 vault-sync contributors

"""Background renewal of the authentication token lease."""

import queue
import random
import threading
import time
from dataclasses import dataclass
from datetime import datetime, timezone

from .exceptions import LeaseRejectedError, LeaseRenewalError, VaultSyncError
from .session import AuthSession
from .store import SecretStore


@dataclass(frozen=True)
class LeaseRenewal:
    """Emitted after each successful renewal."""

    session: AuthSession
    renewed_at: datetime


@dataclass(frozen=True)
class LeaseDone:
    """Emitted once when the watcher stops on its own.

    error is None when the lease simply cannot be extended any further.
    """

    error: VaultSyncError | None = None


class LifetimeWatcher:
    """Keeps a token lease alive by renewing it before it expires.

    The watcher renews immediately on start, then sleeps for two thirds of
    the lease plus a third of a random grace period and renews again. A
    failed renewal is retried with capped exponential backoff for as long
    as the remaining lease stays outside the grace period. It emits a
    LeaseRenewal for every renewal and a single LeaseDone when:

    - the session is not renewable,
    - Vault rejects the renewal (LeaseRejectedError),
    - renewals keep failing until the remaining lease is inside the grace period,
    - the remaining lease falls inside the grace period, meaning renewals
      no longer extend it (for example the token hit its max TTL).

    Events are put on the queue handed in by the caller. Nothing is emitted
    after stop() returns.
    """

    def __init__(
        self,
        store: SecretStore,
        session: AuthSession,
        events: "queue.Queue[LeaseRenewal | LeaseDone]",
        increment: int | None = None,
        rng: random.Random | None = None,
        base_delay: float = 0.25,
        max_delay: float = 30.0,
        backoff_factor: float = 2.0,
    ):
        """Initialize the watcher.

        Args:
            store: Store the token is bound to
            session: Session whose lease is watched
            events: Queue receiving LeaseRenewal and LeaseDone events
            increment: Lease extension requested on each renewal, in seconds
            rng: Random source for the grace period and retry jitter
            base_delay: Delay before the first retry of a failed renewal, in seconds
            max_delay: Cap on the retry delay, in seconds
            backoff_factor: Multiplier applied to the delay after each failure
        """
        self.session = session
        self.increment = increment
        self.grace = 0.0
        self.base_delay = base_delay
        self.max_delay = max_delay
        self.backoff_factor = backoff_factor
        self._store = store
        self._events = events
        self._random = rng or random.Random()
        self._stop = threading.Event()
        self._thread: threading.Thread | None = None

    def start(self) -> None:
        """Start renewing in a background thread."""
        if self._thread is not None:
            raise RuntimeError("Watcher already started")
        self._thread = threading.Thread(target=self._watch, name="lifetime-watcher", daemon=True)
        self._thread.start()

    def stop(self, timeout: float | None = 5.0) -> None:
        """Stop renewing and wait for the background thread to exit."""
        self._stop.set()
        thread = self._thread
        if thread is not None and thread is not threading.current_thread():
            thread.join(timeout)

    def _emit(self, event: "LeaseRenewal | LeaseDone") -> None:
        if not self._stop.is_set():
            self._events.put(event)

    def calculate_grace(self, lease_duration: float) -> None:
        """Pick a new grace period of 10-20% of the lease."""
        lease = lease_duration
        if self.increment:
            lease = min(lease, self.increment)
        if lease <= 0:
            self.grace = 0.0
            return
        jitter_max = 0.1 * lease
        self.grace = jitter_max + self._random.uniform(0, jitter_max)

    def sleep_duration(self, lease_duration: float, prior_duration: float) -> float:
        """Time to wait before the next renewal.

        The grace period is recomputed only while the lease keeps growing;
        once it stops, the existing grace decides when the watcher gives up.
        """
        if lease_duration > prior_duration:
            self.calculate_grace(lease_duration)
        return lease_duration * 2 / 3 + self.grace / 3

    def retry_delay(self, failures: int) -> float:
        """Delay before retrying after the given number of consecutive failures.

        Exponential backoff capped at max_delay, jittered between half and
        the full delay.
        """
        delay = min(self.base_delay * (self.backoff_factor ** (failures - 1)), self.max_delay)
        return delay / 2 + self._random.uniform(0, delay / 2)

    @staticmethod
    def _as_lease_error(error: VaultSyncError) -> LeaseRenewalError:
        if isinstance(error, LeaseRenewalError):
            return error
        wrapped = LeaseRenewalError(str(error))
        wrapped.__cause__ = error
        return wrapped

    def _watch(self) -> None:
        if not self.session.renewable:
            self._emit(LeaseDone(LeaseRenewalError("Lease is not renewable")))
            return

        prior_duration = 0.0
        lease = float(self.session.lease_duration)
        lease_started = time.monotonic()
        failures = 0
        self.calculate_grace(lease)

        while not self._stop.is_set():
            try:
                renewed = self._store.renew_token(self.increment)
            except VaultSyncError as e:
                error = self._as_lease_error(e)
                if isinstance(error, LeaseRejectedError):
                    self._emit(LeaseDone(error))
                    return

                failures += 1
                remaining = lease - (time.monotonic() - lease_started)
                if remaining <= self.grace:
                    self._emit(LeaseDone(error))
                    return

                # Never sleep past the start of the grace period
                delay = min(self.retry_delay(failures), remaining - self.grace)
                if self._stop.wait(delay):
                    return
                continue

            failures = 0
            self.session = renewed
            self._emit(LeaseRenewal(session=renewed, renewed_at=datetime.now(timezone.utc)))

            lease = float(renewed.lease_duration)
            lease_started = time.monotonic()
            sleep = self.sleep_duration(lease, prior_duration)
            prior_duration = lease

            if not renewed.renewable:
                self._emit(LeaseDone(LeaseRenewalError("Lease is no longer renewable")))
                return
            if lease <= self.grace or lease - sleep <= self.grace:
                self._emit(LeaseDone(None))
                return

            if self._stop.wait(sleep):
                return
