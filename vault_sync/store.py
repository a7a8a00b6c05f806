# SPDX-License-Identifier: MIT
# Copyright (c) 2025 vault-sync contributors

"""Base secret store interface."""

from abc import ABC, abstractmethod
from typing import Any

from .config import AuthMethod
from .session import AuthSession


class SecretStore(ABC):
    """Abstract client of a remote secret store.

    Implementations must be safe to call from several threads at once:
    the renewal worker renews the token while the refresh worker reads.
    """

    @abstractmethod
    def login(
        self,
        method: AuthMethod,
        username: str,
        password: str,
        mount_point: str | None = None,
    ) -> AuthSession:
        """Authenticate and return the resulting session.

        The token is not bound to the client; call set_token for that.

        Raises:
            AuthenticationError: If the credentials are rejected or the store is unreachable
        """
        pass

    @abstractmethod
    def set_token(self, token: str) -> None:
        """Use token as the credential for all subsequent calls."""
        pass

    @abstractmethod
    def renew_token(self, increment: int | None = None) -> AuthSession:
        """Renew the bound token.

        Args:
            increment: Requested lease extension in seconds (store default if None)

        Returns:
            Session describing the renewed lease

        Raises:
            LeaseRejectedError: If Vault refuses to renew the token
            LeaseRenewalError: If the renewal fails for any other reason
        """
        pass

    @abstractmethod
    def read_secret(self, location: str) -> dict[str, Any]:
        """Read the fields of a secret location.

        Args:
            location: Secret location, e.g. "secrets/data/app/redis"

        Returns:
            Mapping of field name to raw value

        Raises:
            SecretNotFoundError: If nothing exists at location
            SecretReadError: If the read fails
        """
        pass

    def close(self) -> None:
        """Release resources held by the client."""
        pass
