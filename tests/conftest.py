# SPDX-License-Identifier: MIT
# Copyright (c) 2025 vault-sync contributors

"""Test fixtures for vault_sync."""

from __future__ import annotations

import json
import threading
from pathlib import Path

import pytest

from vault_sync import AuthMethod, InMemorySecretStore, SecretReceiver, VaultConfig
from vault_sync.log import SilentLogger


class RecordingReceiver(SecretReceiver):
    """Receiver that records every update it gets."""

    def __init__(self, name: str = "receiver", calls: list | None = None):
        self.name = name
        self.updates: list[tuple[str, str, object]] = []
        # Shared call log lets tests check ordering across receivers
        self.calls = calls if calls is not None else []
        self.lock = threading.Lock()

    def update_secret(self, location, field_name, value):
        with self.lock:
            self.updates.append((location, field_name, value.raw))
            self.calls.append((self.name, location, field_name))

    def snapshot(self) -> list[tuple[str, str, object]]:
        with self.lock:
            return list(self.updates)


@pytest.fixture
def silent_logger() -> SilentLogger:
    return SilentLogger(level="DEBUG")


@pytest.fixture
def memory_store() -> InMemorySecretStore:
    store = InMemorySecretStore()
    store.add_user("go", "secret")
    return store


@pytest.fixture
def vault_config() -> VaultConfig:
    return VaultConfig(
        server="http://localhost:8200",
        auth_method=AuthMethod.USERPASS,
        username="go",
        password="secret",
        renew_secrets_period=30,
    )


@pytest.fixture
def write_json_config(tmp_path: Path):
    """Write a JSON config file and return its path."""

    def _write(**overrides) -> Path:
        values = {
            "server": "http://localhost:8200",
            "authmethod": "userpass",
            "username": "go",
            "password": "secret",
            "renew_secrets_period": 30,
        }
        values.update(overrides)
        path = tmp_path / "vault-config.json"
        path.write_text(json.dumps({"config": values}), encoding="utf-8")
        return path

    return _write


@pytest.fixture
def make_receiver():
    """Return the RecordingReceiver class for building receivers in tests."""
    return RecordingReceiver
