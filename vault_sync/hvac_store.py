# SPDX-License-Identifier: MIT
# Copyright (c) 2025 vault-sync contributors

"""HashiCorp Vault secret store backed by hvac."""

import logging
from typing import Any

import hvac
import requests

from .config import AuthMethod
from .exceptions import (
    AuthenticationError,
    ConfigurationError,
    LeaseRejectedError,
    LeaseRenewalError,
    SecretNotFoundError,
    SecretReadError,
)
from .session import AuthSession
from .store import SecretStore

logger = logging.getLogger(__name__)


def extract_fields(data: dict[str, Any] | None) -> dict[str, Any]:
    """Return the secret fields of a logical read response body.

    KV version 2 nests the fields under ``data`` next to ``metadata``;
    KV version 1 returns them directly.
    """
    if not data:
        return {}
    nested = data.get("data")
    if isinstance(nested, dict) and "metadata" in data:
        return nested
    return data


class HvacSecretStore(SecretStore):
    """Secret store talking to a Vault server through hvac.

    Example:
        >>> store = HvacSecretStore(url="http://localhost:8200")
        >>> session = store.login(AuthMethod.USERPASS, "go", "secret")
        >>> store.set_token(session.token)
        >>> store.read_secret("secrets/data/netpush/redis")
        {'user': 'redis', 'password': '...'}

    Attributes:
        url: Vault server address
        client: hvac.Client instance
    """

    def __init__(
        self,
        url: str,
        verify: bool | str = True,
        timeout: int = 30,
        client: hvac.Client | None = None,
    ):
        """Initialize the store client.

        Args:
            url: Vault server address
            verify: TLS verification flag or CA bundle path
            timeout: Request timeout in seconds
            client: Preconfigured hvac client (used as-is when given)
        """
        self.url = url
        self.client = client if client is not None else hvac.Client(url=url, verify=verify, timeout=timeout)
        logger.debug("Initialized hvac secret store for %s", url)

    def login(
        self,
        method: AuthMethod,
        username: str,
        password: str,
        mount_point: str | None = None,
    ) -> AuthSession:
        mount = mount_point or method.value
        auth = self.client.auth
        try:
            if method is AuthMethod.APPROLE:
                response = auth.approle.login(
                    role_id=username, secret_id=password, use_token=False, mount_point=mount
                )
            elif method is AuthMethod.LDAP:
                response = auth.ldap.login(
                    username=username, password=password, use_token=False, mount_point=mount
                )
            elif method is AuthMethod.USERPASS:
                response = auth.userpass.login(
                    username=username, password=password, use_token=False, mount_point=mount
                )
            else:
                raise ConfigurationError(f"Undefined vault authentication method: {method!r}")
        except hvac.exceptions.VaultError as e:
            raise AuthenticationError(f"Vault {method.value} login failed: {e}") from e
        except requests.exceptions.RequestException as e:
            raise AuthenticationError(f"Unable to reach vault at {self.url}: {e}") from e

        return AuthSession.from_response(response)

    def set_token(self, token: str) -> None:
        self.client.token = token

    def renew_token(self, increment: int | None = None) -> AuthSession:
        try:
            response = self.client.auth.token.renew_self(increment=increment)
        except (hvac.exceptions.Forbidden, hvac.exceptions.InvalidRequest) as e:
            raise LeaseRejectedError(f"Token renewal rejected: {e}") from e
        except hvac.exceptions.VaultError as e:
            raise LeaseRenewalError(f"Token renewal failed: {e}") from e
        except requests.exceptions.RequestException as e:
            raise LeaseRenewalError(f"Unable to reach vault at {self.url}: {e}") from e

        try:
            return AuthSession.from_response(response)
        except AuthenticationError as e:
            raise LeaseRejectedError(f"Token renewal returned no token: {e}") from e

    def read_secret(self, location: str) -> dict[str, Any]:
        try:
            response = self.client.read(location)
        except hvac.exceptions.InvalidPath as e:
            raise SecretNotFoundError(f"Secret not found: {location}", location=location) from e
        except hvac.exceptions.VaultError as e:
            raise SecretReadError(f"Failed to read secret {location}: {e}", location=location) from e
        except requests.exceptions.RequestException as e:
            raise SecretReadError(f"Unable to reach vault reading {location}: {e}", location=location) from e

        # hvac returns None for a 404
        if response is None:
            raise SecretNotFoundError(f"Secret not found: {location}", location=location)

        return extract_fields(response.get("data"))

    def close(self) -> None:
        adapter = getattr(self.client, "adapter", None)
        close_method = getattr(adapter, "close", None)
        if callable(close_method):
            close_method()
