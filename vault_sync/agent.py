# SPDX-License-Identifier: MIT
# Copyright (c) 2025 vault-sync contributors

"""Vault sync agent: keeps registered receivers supplied with fresh secrets.

Example:
    >>> from vault_sync import AgentOptions, CancellationToken, LifecycleGroup, create_agent
    >>> agent = create_agent(AgentOptions(config_file="config.hcl", log_level="info"))
    >>> agent.register("secrets/data/netpush/redis", redis)
    >>> token, group = CancellationToken(), LifecycleGroup()
    >>> agent.run(token, group)   # redis has received its fields here
    >>> ...
    >>> token.cancel()
    >>> group.wait(timeout=10)
"""

import os
from collections.abc import Callable
from dataclasses import dataclass
from typing import cast

from .config import VaultConfig, load_config
from .exceptions import ConfigurationError, VaultSyncError
from .factory import vault_store_from_config
from .lifecycle import CancellationToken, LifecycleGroup
from .log import Logger, create_logger, normalize_level
from .receiver import SecretReceiver
from .refresher import ReadErrorHook, SecretRefresher
from .registry import ReceiverRegistry
from .renewal import LeaseExpiredHook, LeaseRenewalLoop
from .session import AuthSession, authenticate
from .store import SecretStore

DEFAULT_CONFIG_FILE = "vault-config.hcl"
DEFAULT_LOG_LEVEL = "DEBUG"
CONFIG_FILE_ENV = "VAULT_SYNC_CONFIG"

LEASE_RENEWAL_TASK = "lease-renewal"
SECRET_REFRESH_TASK = "secret-refresh"


@dataclass
class AgentOptions:
    """Overrides applied on top of the agent defaults.

    Attributes:
        config_file: Configuration file path. Defaults to $VAULT_SYNC_CONFIG,
            then "vault-config.hcl".
        logger: Log sink. Defaults to a JSON stdout logger named "vault_sync".
        log_level: Level of the default logger. Defaults to $LOG_LEVEL, then DEBUG.
        config: Ready-made configuration; config_file is not read when set.
        store_factory: Builds the store client from the configuration.
            Defaults to an hvac client bound to config.server.
        on_read_error: Called with (location, error) when a refresh read fails.
        on_lease_expired: Called with the error (or None) when the token lease ends.
        renew_increment: Lease extension requested on each token renewal, in seconds.
    """

    config_file: str | None = None
    logger: Logger | None = None
    log_level: str | None = None
    config: VaultConfig | None = None
    store_factory: Callable[[VaultConfig], SecretStore] | None = None
    on_read_error: ReadErrorHook | None = None
    on_lease_expired: LeaseExpiredHook | None = None
    renew_increment: int | None = None

    def resolve(self) -> "AgentOptions":
        """Return a copy with every default filled in."""
        log_level = normalize_level(self.log_level or os.getenv("LOG_LEVEL") or DEFAULT_LOG_LEVEL)
        return AgentOptions(
            config_file=self.config_file or os.getenv(CONFIG_FILE_ENV) or DEFAULT_CONFIG_FILE,
            logger=self.logger or create_logger(logger_type="stdout", level=log_level, name="vault_sync"),
            log_level=log_level,
            config=self.config,
            store_factory=self.store_factory or vault_store_from_config,
            on_read_error=self.on_read_error,
            on_lease_expired=self.on_lease_expired,
            renew_increment=self.renew_increment,
        )


class Agent:
    """Owns the vault session, the receiver registry and both renewal loops.

    Use create_agent() to build one; the constructor expects an already
    authenticated store.
    """

    def __init__(
        self,
        config: VaultConfig,
        store: SecretStore,
        session: AuthSession,
        logger: Logger,
        options: AgentOptions | None = None,
    ):
        options = options or AgentOptions()
        self.config = config
        self.logger = logger
        self._store = store
        self._session = session
        self._registry = ReceiverRegistry()
        self._renewal = LeaseRenewalLoop(
            store,
            session,
            logger,
            increment=options.renew_increment,
            on_lease_expired=options.on_lease_expired,
        )
        self._refresher = SecretRefresher(
            store,
            self._registry,
            period=config.renew_secrets_period,
            logger=logger,
            on_read_error=options.on_read_error,
        )
        self._started = False

    @property
    def registry(self) -> ReceiverRegistry:
        return self._registry

    def register(self, location: str, receiver: SecretReceiver) -> None:
        """Register receiver for updates of the secret at location.

        Safe to call before or after run(); a receiver registered after
        run() gets its first values on the next refresh pass.
        """
        self._registry.register(location, receiver)
        self.logger.debug("Registered secret receiver", secret_path=location)

    def run(self, token: CancellationToken, group: LifecycleGroup) -> None:
        """Start the renewal loops and refresh every registered secret once.

        Both loops run on group until token is cancelled. When run() returns,
        every receiver registered beforehand has received its fields, unless
        the read of its location failed. Wait on group after cancelling for a
        clean shutdown.

        Raises:
            RuntimeError: If the agent was already started
            ValueError: If group already has a task named like one of the loops
        """
        if self._started:
            raise RuntimeError("Agent already started")
        for name in (LEASE_RENEWAL_TASK, SECRET_REFRESH_TASK):
            if name in group:
                raise ValueError(f"Task already started: {name}")
        self._started = True

        group.go(LEASE_RENEWAL_TASK, self._renewal.run, token)
        group.go(SECRET_REFRESH_TASK, self._refresher.run, token)

        dispatched = self._refresher.refresh_all(token)
        self.logger.info(
            "Initial secret refresh complete",
            locations=len(self._registry),
            dispatched=dispatched,
        )

    def refresh(self) -> int:
        """Run a refresh pass now; returns the number of locations dispatched."""
        return self._refresher.refresh_all()

    def close(self) -> None:
        """Release the store client. Does not cancel running loops."""
        self._store.close()


def create_agent(options: AgentOptions | None = None) -> Agent:
    """Load configuration, authenticate and return a ready agent.

    Args:
        options: Overrides for config file, logger, log level and hooks

    Returns:
        Authenticated Agent

    Raises:
        ConfigurationError: If the configuration cannot be loaded
        AuthenticationError: If login fails
    """
    opts = (options or AgentOptions()).resolve()
    logger = cast(Logger, opts.logger)
    store_factory = cast(Callable[[VaultConfig], SecretStore], opts.store_factory)

    if opts.config is not None:
        config = opts.config
    else:
        logger.info("Creating vault sync agent", config_file=opts.config_file)
        try:
            config = load_config(opts.config_file)
        except ConfigurationError as e:
            logger.error("Failed to load configuration file", config_file=opts.config_file, error=str(e))
            raise ConfigurationError(f"Failed to load configuration file {opts.config_file}: {e}") from e

    logger.debug("Loaded configuration", config=repr(config))

    store = store_factory(config)
    try:
        session = authenticate(store, config, logger)
    except VaultSyncError as e:
        logger.error("Authentication failed", auth_method=config.auth_method.value, error=str(e))
        store.close()
        raise

    return Agent(config, store, session, logger, opts)
