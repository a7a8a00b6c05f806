# SPDX-License-Identifier: MIT
# Copyright (c) 2025 vault-sync contributors

"""Exceptions for the vault sync agent."""


class VaultSyncError(Exception):
    """Base exception for vault sync errors."""
    pass


class ConfigurationError(VaultSyncError):
    """Raised when the agent configuration is missing or invalid."""
    pass


class AuthenticationError(VaultSyncError):
    """Raised when logging in to Vault fails."""
    pass


class LeaseRenewalError(VaultSyncError):
    """Raised when the authentication lease can no longer be renewed."""
    pass


class LeaseRejectedError(LeaseRenewalError):
    """Raised when Vault refuses a renewal outright (revoked or invalid token)."""
    pass


class SecretReadError(VaultSyncError):
    """Raised when reading a secret location fails."""

    def __init__(self, message: str, location: str | None = None):
        super().__init__(message)
        self.location = location


class SecretNotFoundError(SecretReadError):
    """Raised when a secret location does not exist."""
    pass


class SecretValueTypeError(VaultSyncError, TypeError):
    """Raised when a secret field value does not have the requested type."""
    pass
