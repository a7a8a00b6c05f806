# SPDX-License-Identifier: MIT
# Copyright (c) 2025 vault-sync contributors

"""Cancellation and completion tracking for the agent's worker threads."""

import threading
import time
from collections.abc import Callable
from typing import Any


class CancellationToken:
    """Cancellation signal shared by a set of workers.

    Workers either wait on the token with a timeout, or register a callback
    that fires once when cancel() is called.

    Example:
        >>> token = CancellationToken()
        >>> token.wait(5.0)   # sleeps up to 5s, returns True early if cancelled
        >>> token.cancel()
    """

    def __init__(self) -> None:
        self._event = threading.Event()
        self._lock = threading.Lock()
        self._callbacks: list[Callable[[], None]] = []

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()

    def cancel(self) -> None:
        """Raise the signal and run registered callbacks (only the first call does)."""
        with self._lock:
            if self._event.is_set():
                return
            self._event.set()
            callbacks, self._callbacks = self._callbacks, []
        for callback in callbacks:
            callback()

    def wait(self, timeout: float | None = None) -> bool:
        """Block until cancelled or timeout elapses.

        Returns:
            True if the token is cancelled
        """
        return self._event.wait(timeout)

    def add_callback(self, callback: Callable[[], None]) -> Callable[[], None]:
        """Run callback on cancellation, immediately if already cancelled.

        Returns:
            Function that unregisters the callback
        """
        with self._lock:
            if not self._event.is_set():
                self._callbacks.append(callback)
                registered = True
            else:
                registered = False
        if not registered:
            callback()

        def remove() -> None:
            with self._lock:
                if callback in self._callbacks:
                    self._callbacks.remove(callback)

        return remove


class LifecycleGroup:
    """Tracks a group of worker threads until they complete.

    Each task runs in its own daemon thread. When a task raises, the
    exception is recorded under the task name instead of being lost with
    the thread.

    Example:
        >>> group = LifecycleGroup()
        >>> group.go("worker", run_worker, token)
        >>> token.cancel()
        >>> group.wait(timeout=10)
        True
        >>> group.errors
        {}
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._threads: dict[str, threading.Thread] = {}
        self._errors: dict[str, BaseException] = {}
        self._results: dict[str, Any] = {}

    def go(self, name: str, target: Callable[..., Any], *args: Any) -> threading.Thread:
        """Start target(*args) in a new tracked thread.

        Raises:
            ValueError: If a task with the same name was already started
        """
        with self._lock:
            if name in self._threads:
                raise ValueError(f"Task already started: {name}")
            thread = threading.Thread(
                target=self._run, args=(name, target, args), name=name, daemon=True
            )
            self._threads[name] = thread
        thread.start()
        return thread

    def _run(self, name: str, target: Callable[..., Any], args: tuple[Any, ...]) -> None:
        try:
            result = target(*args)
        except Exception as e:
            with self._lock:
                self._errors[name] = e
        else:
            with self._lock:
                self._results[name] = result

    def wait(self, timeout: float | None = None) -> bool:
        """Wait for every started task to finish.

        Args:
            timeout: Overall limit in seconds (None waits forever)

        Returns:
            True if all tasks finished
        """
        with self._lock:
            threads = list(self._threads.values())

        if timeout is None:
            for thread in threads:
                thread.join()
            return True

        deadline = time.monotonic() + timeout
        for thread in threads:
            thread.join(max(deadline - time.monotonic(), 0))
        return not any(thread.is_alive() for thread in threads)

    def __contains__(self, name: object) -> bool:
        with self._lock:
            return name in self._threads

    @property
    def running(self) -> list[str]:
        """Names of tasks still running."""
        with self._lock:
            return [name for name, thread in self._threads.items() if thread.is_alive()]

    @property
    def errors(self) -> dict[str, BaseException]:
        """Exceptions raised by finished tasks, keyed by task name."""
        with self._lock:
            return dict(self._errors)

    @property
    def results(self) -> dict[str, Any]:
        """Return values of tasks that finished without raising."""
        with self._lock:
            return dict(self._results)
