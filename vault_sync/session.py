# SPDX-License-Identifier: MIT
# Copyright (c) 2025 vault-sync contributors

"""Authentication session and login bootstrap."""

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from .config import VaultConfig
from .exceptions import AuthenticationError
from .log import Logger

if TYPE_CHECKING:
    from .store import SecretStore


@dataclass(frozen=True)
class AuthSession:
    """Token lease obtained from a Vault login or token renewal.

    Sessions are replaced, never mutated. The token is excluded from repr.

    Attributes:
        token: Client token used for every subsequent call
        lease_duration: Remaining lease in seconds at issue time
        renewable: Whether Vault allows renewing the token
        accessor: Token accessor, safe to log
        policies: Policies attached to the token
    """

    token: str = field(repr=False)
    lease_duration: int
    renewable: bool
    accessor: str | None = None
    policies: tuple[str, ...] = ()

    @classmethod
    def from_response(cls, response: Mapping[str, Any] | None) -> "AuthSession":
        """Build a session from the ``auth`` section of a Vault response.

        Raises:
            AuthenticationError: If the response carries no client token
        """
        auth = (response or {}).get("auth") or {}
        token = auth.get("client_token")
        if not token:
            raise AuthenticationError("Vault response did not contain a client token")

        return cls(
            token=token,
            lease_duration=int(auth.get("lease_duration") or 0),
            renewable=bool(auth.get("renewable", False)),
            accessor=auth.get("accessor"),
            policies=tuple(auth.get("policies") or ()),
        )


def authenticate(store: "SecretStore", config: VaultConfig, logger: Logger) -> AuthSession:
    """Log in with the configured method and bind the token to the store.

    Args:
        store: Store client bound to the configured server
        config: Agent configuration
        logger: Logger for the agent

    Returns:
        The new AuthSession

    Raises:
        AuthenticationError: If login fails
    """
    session = store.login(
        config.auth_method,
        config.username,
        config.password,
        mount_point=config.auth_mount_point,
    )
    store.set_token(session.token)

    logger.info(
        "Authenticated against vault",
        auth_method=config.auth_method.value,
        lease_duration=session.lease_duration,
        renewable=session.renewable,
    )
    return session
