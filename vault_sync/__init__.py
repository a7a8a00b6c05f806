# SPDX-License-Identifier: MIT
# Copyright (c) 2025 vault-sync contributors

"""Vault sync agent.

Keeps in-process receivers supplied with secrets read from HashiCorp Vault.
The agent authenticates once, keeps its token lease alive, re-reads every
registered secret location on a fixed period and pushes each field to the
receivers registered for that location.

Example:
    >>> from vault_sync import AgentOptions, CancellationToken, LifecycleGroup, create_agent
    >>> agent = create_agent(AgentOptions(config_file="vault-config.hcl"))
    >>> agent.register("secrets/data/netpush/redis", redis_receiver)
    >>> agent.run(CancellationToken(), LifecycleGroup())
"""

from .agent import Agent, AgentOptions, create_agent
from .config import AuthMethod, VaultConfig, load_config
from .exceptions import (
    AuthenticationError,
    ConfigurationError,
    LeaseRejectedError,
    LeaseRenewalError,
    SecretNotFoundError,
    SecretReadError,
    SecretValueTypeError,
    VaultSyncError,
)
from .factory import create_secret_store
from .hvac_store import HvacSecretStore
from .lifecycle import CancellationToken, LifecycleGroup
from .memory_store import InMemorySecretStore
from .receiver import SecretReceiver
from .registry import ReceiverRegistry
from .session import AuthSession
from .store import SecretStore
from .values import SecretValue, ValueKind

__all__ = [
    "Agent",
    "AgentOptions",
    "create_agent",
    "AuthMethod",
    "VaultConfig",
    "load_config",
    "AuthSession",
    "SecretStore",
    "HvacSecretStore",
    "InMemorySecretStore",
    "create_secret_store",
    "SecretReceiver",
    "ReceiverRegistry",
    "SecretValue",
    "ValueKind",
    "CancellationToken",
    "LifecycleGroup",
    "VaultSyncError",
    "ConfigurationError",
    "AuthenticationError",
    "LeaseRenewalError",
    "LeaseRejectedError",
    "SecretReadError",
    "SecretNotFoundError",
    "SecretValueTypeError",
]

__version__ = "0.1.0"
