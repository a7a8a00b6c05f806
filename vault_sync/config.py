# SPDX-License-Identifier: MIT
# Copyright (c) 2025 vault-sync contributors

"""Agent configuration model and file loader.

The configuration lives in a single ``config`` block, either in HCL:

    config {
      server               = "http://localhost:8200"
      authmethod           = "userpass"
      username             = "go"
      password             = "secret"
      renew_secrets_period = 30
    }

or in JSON with the same keys: ``{"config": {"server": ..., ...}}``.
"""

import json
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any

import hcl2

from .exceptions import ConfigurationError

REQUIRED_KEYS = ("server", "authmethod", "username", "password", "renew_secrets_period")
OPTIONAL_KEYS = ("mount_point", "ca_cert")


class AuthMethod(str, Enum):
    """Supported Vault authentication methods.

    For APPROLE the configured username is the role id and the password
    is the secret id.
    """

    APPROLE = "approle"
    LDAP = "ldap"
    USERPASS = "userpass"

    @classmethod
    def parse(cls, value: Any) -> "AuthMethod":
        """Convert a configuration value into an AuthMethod.

        Raises:
            ConfigurationError: If the value is not a supported method
        """
        try:
            return cls(value)
        except ValueError:
            supported = ", ".join(method.value for method in cls)
            raise ConfigurationError(
                f"Undefined vault authentication method: {value!r}. Supported: {supported}"
            ) from None


@dataclass(frozen=True)
class VaultConfig:
    """Connection and authentication settings for the agent.

    Attributes:
        server: Vault address, e.g. "http://localhost:8200"
        auth_method: Authentication method used at login
        username: Username, or role id for approle
        password: Password, or secret id for approle
        renew_secrets_period: Seconds between secret refresh passes
        mount_point: Auth method mount point (defaults to the method name)
        ca_cert: Optional CA bundle used to verify the server certificate
    """

    server: str
    auth_method: AuthMethod
    username: str
    password: str = field(repr=False)
    renew_secrets_period: int
    mount_point: str | None = None
    ca_cert: str | None = None

    def __post_init__(self) -> None:
        if not isinstance(self.server, str) or not self.server.strip():
            raise ConfigurationError("server must be a non-empty string")
        if not isinstance(self.auth_method, AuthMethod):
            object.__setattr__(self, "auth_method", AuthMethod.parse(self.auth_method))
        for name in ("username", "password"):
            if not isinstance(getattr(self, name), str):
                raise ConfigurationError(f"{name} must be a string")
        period = self.renew_secrets_period
        if isinstance(period, bool) or not isinstance(period, int):
            raise ConfigurationError(
                f"renew_secrets_period must be an integer number of seconds, got {period!r}"
            )
        if period <= 0:
            raise ConfigurationError(f"renew_secrets_period must be greater than 0, got {period}")

    @property
    def auth_mount_point(self) -> str:
        """Mount point of the configured auth method."""
        return self.mount_point or self.auth_method.value

    @classmethod
    def from_dict(cls, values: dict[str, Any]) -> "VaultConfig":
        """Build a configuration from the keys of a ``config`` block.

        Raises:
            ConfigurationError: If a required key is missing or a value is invalid
        """
        missing = [key for key in REQUIRED_KEYS if key not in values]
        if missing:
            raise ConfigurationError(f"Missing configuration keys: {', '.join(missing)}")

        unknown = sorted(set(values) - set(REQUIRED_KEYS) - set(OPTIONAL_KEYS))
        if unknown:
            raise ConfigurationError(f"Unknown configuration keys: {', '.join(unknown)}")

        return cls(
            server=values["server"],
            auth_method=AuthMethod.parse(values["authmethod"]),
            username=values["username"],
            password=values["password"],
            renew_secrets_period=values["renew_secrets_period"],
            mount_point=values.get("mount_point"),
            ca_cert=values.get("ca_cert"),
        )


def _unquote(value: Any) -> Any:
    # Newer python-hcl2 releases keep the quotes around string literals
    if isinstance(value, str) and len(value) >= 2 and value[0] == value[-1] == '"':
        return value[1:-1]
    return value


def _read_document(path: Path) -> dict[str, Any]:
    """Parse the configuration file as JSON or HCL depending on its suffix."""
    try:
        with open(path, encoding="utf-8") as f:
            if path.suffix.lower() == ".json":
                return json.load(f)
            return hcl2.load(f)
    except OSError as e:
        raise ConfigurationError(f"Failed to read configuration file {path}: {e}") from e
    except json.JSONDecodeError as e:
        raise ConfigurationError(f"Invalid JSON in configuration file {path}: {e}") from e
    except Exception as e:
        # hcl2 surfaces lark parser exceptions which share no common base with ours
        raise ConfigurationError(f"Invalid HCL in configuration file {path}: {e}") from e


def _config_block(document: Any) -> dict[str, Any]:
    if not isinstance(document, dict) or "config" not in document:
        raise ConfigurationError("Configuration file must contain a 'config' block")

    block = document["config"]
    # hcl2 represents every block as a list of bodies
    if isinstance(block, list):
        if len(block) != 1:
            raise ConfigurationError(f"Expected exactly one 'config' block, found {len(block)}")
        block = block[0]
    if not isinstance(block, dict):
        raise ConfigurationError("The 'config' block must be a mapping")

    return {key: _unquote(value) for key, value in block.items() if not key.startswith("__")}


def load_config(path: str | Path) -> VaultConfig:
    """Load the agent configuration from a file.

    Files ending in ``.json`` are parsed as JSON, everything else as HCL.

    Args:
        path: Path to the configuration file

    Returns:
        Validated VaultConfig

    Raises:
        ConfigurationError: If the file is missing, unparsable or invalid
    """
    config_path = Path(path)
    if not config_path.is_file():
        raise ConfigurationError(f"Configuration file not found: {config_path}")

    return VaultConfig.from_dict(_config_block(_read_document(config_path)))
