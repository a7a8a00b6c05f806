# SPDX-License-Identifier: MIT
# Copyright (c) 2025 vault-sync contributors

"""Registry mapping secret locations to their receivers."""

import threading
from collections.abc import Mapping
from typing import Any

from .receiver import SecretReceiver
from .values import SecretValue


class ReceiverRegistry:
    """Thread-safe mapping of secret location to an ordered list of receivers.

    Registration order is dispatch order. The same receiver may be registered
    more than once, for one or several locations; every registration yields
    its own callbacks.
    """

    def __init__(self) -> None:
        self._receivers: dict[str, list[SecretReceiver]] = {}
        self._lock = threading.Lock()

    def __len__(self) -> int:
        with self._lock:
            return len(self._receivers)

    def register(self, location: str, receiver: SecretReceiver) -> None:
        """Append a receiver to the list for a location.

        Args:
            location: Secret location the receiver is interested in
            receiver: Object with an update_secret(location, field_name, value) method

        Raises:
            TypeError: If receiver has no callable update_secret
        """
        if not callable(getattr(receiver, "update_secret", None)):
            raise TypeError(
                f"Receiver {type(receiver).__name__} must provide update_secret(location, field_name, value)"
            )
        with self._lock:
            self._receivers.setdefault(location, []).append(receiver)

    def locations(self) -> list[str]:
        """Snapshot of registered locations in first-registration order."""
        with self._lock:
            return list(self._receivers)

    def receivers(self, location: str) -> list[SecretReceiver]:
        """Snapshot of the receivers registered for a location."""
        with self._lock:
            return list(self._receivers.get(location, ()))

    def dispatch(self, location: str, fields: Mapping[str, Any]) -> int:
        """Push every field of a secret to the receivers of its location.

        The receiver list is copied before iterating, so receivers registered
        while a dispatch is in flight are picked up by the next one.

        Args:
            location: Secret location the fields were read from
            fields: Field name to raw value mapping

        Returns:
            Number of update_secret calls made

        Raises:
            SecretValueTypeError: If a field value has an unsupported type
        """
        receivers = self.receivers(location)
        if not receivers:
            return 0

        values = [(name, SecretValue.of(raw)) for name, raw in fields.items()]
        calls = 0
        for receiver in receivers:
            for name, value in values:
                receiver.update_secret(location, name, value)
                calls += 1
        return calls
