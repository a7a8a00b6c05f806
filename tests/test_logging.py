# SPDX-License-Identifier: MIT
# Copyright (c) 2025 vault-sync contributors

"""Tests for logging abstraction."""

import io
import json
import os
from unittest.mock import patch

import pytest

from vault_sync.log import Logger, SilentLogger, StdoutLogger, create_logger, normalize_level


class TestLoggerInterface:
    """Test suite for the Logger base class."""

    def test_cannot_instantiate_base(self):
        with pytest.raises(TypeError):
            Logger()

    def test_subclass_must_implement_exception(self):
        class Partial(Logger):
            def info(self, message, **kwargs):
                pass

            def warning(self, message, **kwargs):
                pass

            def error(self, message, **kwargs):
                pass

            def debug(self, message, **kwargs):
                pass

        with pytest.raises(TypeError):
            Partial()


class TestLoggerFactory:
    """Tests for create_logger factory function."""

    def test_create_stdout_logger(self):
        logger = create_logger(logger_type="stdout", level="INFO")

        assert isinstance(logger, StdoutLogger)
        assert isinstance(logger, Logger)
        assert logger.level == "INFO"

    def test_create_silent_logger(self):
        logger = create_logger(logger_type="silent")

        assert isinstance(logger, SilentLogger)

    def test_create_unknown_logger_type(self):
        with pytest.raises(ValueError, match="Unknown logger_type"):
            create_logger(logger_type="invalid")

    def test_create_logger_from_env(self):
        """Test creating logger from environment variables."""
        with patch.dict(os.environ, {"LOG_TYPE": "stdout", "LOG_LEVEL": "WARNING", "LOG_NAME": "env-agent"}):
            logger = create_logger()

            assert isinstance(logger, StdoutLogger)
            assert logger.level == "WARNING"
            assert logger.name == "env-agent"

    def test_create_logger_defaults(self):
        with patch.dict(os.environ, {}, clear=True):
            logger = create_logger()

            assert isinstance(logger, StdoutLogger)
            assert logger.name == "vault_sync"


class TestNormalizeLevel:
    """Tests for normalize_level."""

    @pytest.mark.parametrize(
        "given, expected",
        [
            ("debug", "DEBUG"),
            ("WARN", "WARNING"),
            ("warning", "WARNING"),
            ("Error", "ERROR"),
            ("info", "INFO"),
            ("verbose", "INFO"),
            (None, "INFO"),
        ],
    )
    def test_levels(self, given, expected):
        assert normalize_level(given) == expected


class TestStdoutLogger:
    """Tests for StdoutLogger."""

    def test_writes_json_lines(self):
        stream = io.StringIO()
        logger = StdoutLogger(level="INFO", name="test", stream=stream)

        logger.info("Secret refreshed", secret_path="secrets/data/x/y")

        entry = json.loads(stream.getvalue().strip())
        assert entry["level"] == "INFO"
        assert entry["logger"] == "test"
        assert entry["message"] == "Secret refreshed"
        assert entry["extra"] == {"secret_path": "secrets/data/x/y"}

    def test_filters_below_level(self):
        stream = io.StringIO()
        logger = StdoutLogger(level="WARNING", stream=stream)

        logger.info("hidden")
        logger.debug("hidden")
        logger.warning("shown")

        lines = stream.getvalue().strip().splitlines()
        assert len(lines) == 1
        assert json.loads(lines[0])["message"] == "shown"

    def test_invalid_level(self):
        with pytest.raises(ValueError, match="Invalid log level"):
            StdoutLogger(level="LOUD")

    def test_mirrors_to_stdlib_logging(self, caplog):
        logger = StdoutLogger(level="DEBUG", name="vault_sync.test", stream=io.StringIO())

        with caplog.at_level("DEBUG", logger="vault_sync.test"):
            logger.error("Renewal of auth token failed")

        assert "Renewal of auth token failed" in caplog.text


class TestSilentLogger:
    """Tests for SilentLogger."""

    def test_stores_entries(self):
        logger = SilentLogger()

        logger.info("one", key="value")
        logger.error("two")

        assert logger.has_log("one")
        assert logger.has_log("two", level="ERROR")
        assert not logger.has_log("one", level="ERROR")
        assert logger.get_logs("INFO")[0]["extra"] == {"key": "value"}

    def test_exception_sets_exc_info(self):
        logger = SilentLogger()

        logger.exception("boom")

        assert logger.get_logs("ERROR")[0]["extra"]["exc_info"] is True

    def test_clear_logs(self):
        logger = SilentLogger()
        logger.debug("x")

        logger.clear_logs()

        assert logger.get_logs() == []
