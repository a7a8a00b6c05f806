# SPDX-License-Identifier: MIT
# Copyright (c) 2025 vault-sync contributors

"""Factory for creating secret stores."""

from typing import Any, cast

from .config import VaultConfig
from .exceptions import ConfigurationError
from .hvac_store import HvacSecretStore
from .memory_store import InMemorySecretStore
from .store import SecretStore


def create_secret_store(store_type: str, **kwargs: Any) -> SecretStore:
    """Factory function to create secret stores.

    Args:
        store_type: Type of store to create ("vault" or "memory")
        **kwargs: Store-specific configuration

    Returns:
        SecretStore instance

    Raises:
        ConfigurationError: If store_type is unknown

    Example:
        >>> store = create_secret_store("vault", url="http://localhost:8200")
    """
    stores: dict[str, type] = {
        "vault": HvacSecretStore,
        "memory": InMemorySecretStore,
    }

    if store_type not in stores:
        raise ConfigurationError(
            f"Unknown store type: {store_type}. "
            f"Available: {', '.join(stores.keys())}"
        )

    store_class = stores[store_type]
    return cast(SecretStore, store_class(**kwargs))


def vault_store_from_config(config: VaultConfig) -> SecretStore:
    """Create the hvac store bound to the configured server."""
    verify: bool | str = config.ca_cert or True
    return create_secret_store("vault", url=config.server, verify=verify)
