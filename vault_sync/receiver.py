# SPDX-License-Identifier: MIT
# Copyright (c) 2025 vault-sync contributors

"""Secret receiver interface."""

from abc import ABC, abstractmethod

from .values import SecretValue


class SecretReceiver(ABC):
    """Consumer of secret field updates.

    The agent calls update_secret once per field of a location on every
    refresh pass, from the refresh worker thread. Implementations must
    protect their own state and must not block for long, since a slow
    receiver delays every other location in the pass.

    Example:
        >>> class Redis(SecretReceiver):
        ...     def __init__(self):
        ...         self.lock = threading.Lock()
        ...         self.user = None
        ...
        ...     def update_secret(self, location, field_name, value):
        ...         if field_name == "user":
        ...             with self.lock:
        ...                 self.user = value.as_str()
    """

    @abstractmethod
    def update_secret(self, location: str, field_name: str, value: SecretValue) -> None:
        """Receive the current value of one field.

        Args:
            location: Secret location the field was read from
            field_name: Name of the field inside the secret
            value: Field value
        """
        pass
