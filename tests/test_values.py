# SPDX-License-Identifier: MIT
# Copyright (c) 2025 vault-sync contributors

"""Tests for typed secret values."""

import pytest

from vault_sync import SecretValue, SecretValueTypeError, ValueKind


class TestSecretValue:
    """Test suite for SecretValue."""

    @pytest.mark.parametrize(
        "raw, kind",
        [
            ("alice", ValueKind.STRING),
            (42, ValueKind.INTEGER),
            (1.5, ValueKind.FLOAT),
            (True, ValueKind.BOOLEAN),
            (None, ValueKind.NULL),
            (["a", "b"], ValueKind.LIST),
            ({"nested": 1}, ValueKind.MAPPING),
        ],
    )
    def test_kind_detection(self, raw, kind):
        """Test that each JSON type maps to its kind."""
        assert SecretValue.of(raw).kind is kind

    def test_bool_is_not_integer(self):
        """Test that booleans are not treated as integers."""
        value = SecretValue.of(False)
        assert value.is_kind(ValueKind.BOOLEAN)
        with pytest.raises(SecretValueTypeError):
            value.as_int()

    def test_as_str_success(self):
        assert SecretValue.of("p1").as_str() == "p1"

    def test_as_str_mismatch_raises(self):
        """Test that a type mismatch is reported instead of ignored."""
        with pytest.raises(SecretValueTypeError, match="expected string, got integer"):
            SecretValue.of(5).as_str()

    def test_as_float_widens_integer(self):
        assert SecretValue.of(3).as_float() == 3.0

    def test_as_list_and_mapping_return_copies(self):
        raw_list = ["a"]
        raw_map = {"k": "v"}
        as_list = SecretValue.of(raw_list).as_list()
        as_map = SecretValue.of(raw_map).as_mapping()
        as_list.append("b")
        as_map["x"] = "y"
        assert raw_list == ["a"]
        assert raw_map == {"k": "v"}

    def test_unsupported_type_raises(self):
        with pytest.raises(SecretValueTypeError, match="Unsupported secret value type"):
            SecretValue.of(object())

    def test_of_is_idempotent(self):
        value = SecretValue.of("x")
        assert SecretValue.of(value) is value

    def test_repr_hides_raw_value(self):
        """Test that secret contents never appear in repr."""
        assert "hunter2" not in repr(SecretValue.of("hunter2"))
