# SPDX-License-Identifier: MIT
# Copyright (c) 2025 vault-sync contributors

"""In-memory secret store for testing."""

import copy
import threading
import uuid
from typing import Any

from .config import AuthMethod
from .exceptions import (
    AuthenticationError,
    LeaseRejectedError,
    SecretNotFoundError,
    SecretReadError,
)
from .session import AuthSession
from .store import SecretStore


class InMemorySecretStore(SecretStore):
    """Secret store that keeps secrets and credentials in memory.

    Lets consumers exercise an agent without a Vault server. Failures can
    be injected per location or for token renewal, and every call is
    recorded for assertions.

    Example:
        >>> store = InMemorySecretStore()
        >>> store.add_user("go", "secret")
        >>> store.put_secret("secrets/data/app/redis", {"user": "redis"})
    """

    def __init__(self, lease_duration: int = 3600, renewable: bool = True):
        """Initialize the store.

        Args:
            lease_duration: Lease in seconds granted at login and on renewal
            renewable: Whether issued tokens are renewable
        """
        self.lease_duration = lease_duration
        self.renewable = renewable
        self.token: str | None = None
        self.logins: list[tuple[AuthMethod, str, str | None]] = []
        self.reads: list[str] = []
        self.renewals = 0
        self._users: dict[str, str] = {}
        self._secrets: dict[str, dict[str, Any]] = {}
        self._read_errors: dict[str, Exception] = {}
        self._renew_error: Exception | None = None
        self._lock = threading.Lock()

    def add_user(self, username: str, password: str) -> None:
        """Accept the given credentials at login (for any auth method)."""
        with self._lock:
            self._users[username] = password

    def put_secret(self, location: str, fields: dict[str, Any]) -> None:
        """Create or replace the fields stored at location."""
        with self._lock:
            self._secrets[location] = copy.deepcopy(fields)

    def delete_secret(self, location: str) -> None:
        with self._lock:
            self._secrets.pop(location, None)

    def fail_reads(self, location: str, error: Exception | None = None) -> None:
        """Make reads of location raise error (SecretReadError by default)."""
        with self._lock:
            self._read_errors[location] = error or SecretReadError(
                f"Failed to read secret {location}", location=location
            )

    def clear_failures(self) -> None:
        with self._lock:
            self._read_errors.clear()
            self._renew_error = None

    def fail_renewals(self, error: Exception | None = None) -> None:
        """Make token renewal raise error (LeaseRejectedError by default)."""
        with self._lock:
            self._renew_error = error or LeaseRejectedError("Token renewal rejected")

    def _issue(self) -> AuthSession:
        return AuthSession(
            token=f"mem.{uuid.uuid4().hex}",
            lease_duration=self.lease_duration,
            renewable=self.renewable,
            accessor=uuid.uuid4().hex,
        )

    def login(
        self,
        method: AuthMethod,
        username: str,
        password: str,
        mount_point: str | None = None,
    ) -> AuthSession:
        with self._lock:
            self.logins.append((method, username, mount_point))
            if self._users.get(username) != password:
                raise AuthenticationError(f"Vault {method.value} login failed: invalid credentials")
            return self._issue()

    def set_token(self, token: str) -> None:
        with self._lock:
            self.token = token

    def renew_token(self, increment: int | None = None) -> AuthSession:
        with self._lock:
            self.renewals += 1
            if self._renew_error is not None:
                raise self._renew_error
            if self.token is None:
                raise LeaseRejectedError("No token bound to the store")
            session = AuthSession(
                token=self.token,
                lease_duration=increment or self.lease_duration,
                renewable=self.renewable,
            )
        return session

    def read_secret(self, location: str) -> dict[str, Any]:
        with self._lock:
            self.reads.append(location)
            if location in self._read_errors:
                raise self._read_errors[location]
            if location not in self._secrets:
                raise SecretNotFoundError(f"Secret not found: {location}", location=location)
            return copy.deepcopy(self._secrets[location])
