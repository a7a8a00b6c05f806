# SPDX-License-Identifier: MIT
# Copyright (c) 2025 vault-sync contributors

"""Typed wrapper for secret field values.

Vault returns secret data as JSON, so a field can hold a string, a number,
a boolean, null, a list or a nested mapping. Receivers get a SecretValue and
ask for the type they expect; a mismatch raises SecretValueTypeError instead
of being silently ignored.
"""

from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from .exceptions import SecretValueTypeError


class ValueKind(str, Enum):
    """Kind of a secret field value."""

    STRING = "string"
    INTEGER = "integer"
    FLOAT = "float"
    BOOLEAN = "boolean"
    NULL = "null"
    LIST = "list"
    MAPPING = "mapping"


def _kind_of(raw: Any) -> ValueKind:
    # bool is a subclass of int, so it has to be checked first
    if isinstance(raw, bool):
        return ValueKind.BOOLEAN
    if isinstance(raw, str):
        return ValueKind.STRING
    if isinstance(raw, int):
        return ValueKind.INTEGER
    if isinstance(raw, float):
        return ValueKind.FLOAT
    if raw is None:
        return ValueKind.NULL
    if isinstance(raw, (list, tuple)):
        return ValueKind.LIST
    if isinstance(raw, Mapping):
        return ValueKind.MAPPING
    raise SecretValueTypeError(f"Unsupported secret value type: {type(raw).__name__}")


@dataclass(frozen=True)
class SecretValue:
    """A single secret field value tagged with its kind.

    The raw value is excluded from repr so secrets do not leak into logs.

    Example:
        >>> value = SecretValue.of("alice")
        >>> value.kind
        <ValueKind.STRING: 'string'>
        >>> value.as_str()
        'alice'
        >>> value.as_int()
        Traceback (most recent call last):
        ...
        vault_sync.exceptions.SecretValueTypeError: expected integer, got string
    """

    kind: ValueKind
    raw: Any = field(repr=False)

    @classmethod
    def of(cls, raw: Any) -> "SecretValue":
        """Wrap a raw decoded JSON value.

        Raises:
            SecretValueTypeError: If the value is not a JSON-compatible type
        """
        if isinstance(raw, SecretValue):
            return raw
        return cls(kind=_kind_of(raw), raw=raw)

    def is_kind(self, kind: ValueKind) -> bool:
        """Return True if this value has the given kind."""
        return self.kind is kind

    def _expect(self, *kinds: ValueKind) -> Any:
        if self.kind not in kinds:
            raise SecretValueTypeError(f"expected {kinds[0].value}, got {self.kind.value}")
        return self.raw

    def as_str(self) -> str:
        return self._expect(ValueKind.STRING)

    def as_int(self) -> int:
        return self._expect(ValueKind.INTEGER)

    def as_float(self) -> float:
        """Return the value as a float; integers are widened."""
        return float(self._expect(ValueKind.FLOAT, ValueKind.INTEGER))

    def as_bool(self) -> bool:
        return self._expect(ValueKind.BOOLEAN)

    def as_list(self) -> list[Any]:
        return list(self._expect(ValueKind.LIST))

    def as_mapping(self) -> dict[str, Any]:
        return dict(self._expect(ValueKind.MAPPING))
