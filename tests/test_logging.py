"""Tests for structured logging configuration."""

from __future__ import annotations

import json
from typing import TYPE_CHECKING

import structlog

from core.logging import REDACTED, configure_logging, get_logger, redact_secrets

if TYPE_CHECKING:
    import pytest


class TestConfigureLogging:
    """Tests for configure_logging function."""

    def test_configure_logging_default(self) -> None:
        """configure_logging should work with defaults."""
        configure_logging()

        assert structlog.get_logger() is not None

    def test_configure_logging_json_format(self) -> None:
        """configure_logging should configure JSON format."""
        configure_logging(json_format=True)

        assert structlog.get_logger() is not None

    def test_configure_logging_with_warning_level(self) -> None:
        """configure_logging should accept a level name in any case."""
        configure_logging(log_level="warning")

        assert structlog.get_logger() is not None


class TestGetLogger:
    """Tests for get_logger function."""

    def test_logger_can_log(self) -> None:
        """Logger should log info and error messages."""
        configure_logging(log_level="DEBUG")
        logger = get_logger("test.module")

        # Should not raise
        logger.info("Calling tax service", method="GET", path="/1.0/tax/get")
        logger.error("Tax service request error", error="boom")


class TestRedactSecrets:
    """Tests for the redact_secrets processor."""

    def test_masks_credential_keys(self) -> None:
        """Credential values should be replaced with a mask."""
        event = {
            "event": "Calling tax service",
            "license_key": "abc",
            "Authorization": "Basic MTAwMTphYmM=",
            "db_password": "pw",
            "client_secret": "s",
        }

        result = redact_secrets(None, "info", event)

        assert result["license_key"] == REDACTED
        assert result["Authorization"] == REDACTED
        assert result["db_password"] == REDACTED
        assert result["client_secret"] == REDACTED

    def test_keeps_other_keys(self) -> None:
        """Non-credential values should pass through."""
        event = {"event": "Tax service returned an error status", "status_code": 500}

        result = redact_secrets(None, "warning", event)

        assert result == {"event": "Tax service returned an error status", "status_code": 500}

    def test_json_output_is_redacted(self, capsys: pytest.CaptureFixture[str]) -> None:
        """Rendered JSON logs should not contain the license key."""
        configure_logging(json_format=True)
        logger = get_logger("test.redact")

        logger.info("settings loaded", license_key="super-secret-key")

        captured = capsys.readouterr()
        assert "super-secret-key" not in captured.out
        assert '"license_key": "***"' in captured.out


class TestConfigureLoggingFromSettings:
    """configure_logging falls back to the application settings."""

    def test_uses_level_and_format_from_settings(
        self,
        monkeypatch: pytest.MonkeyPatch,
        capsys: pytest.CaptureFixture[str],
    ) -> None:
        """LOG_LEVEL and a production environment drive the defaults."""
        monkeypatch.setenv("ENVIRONMENT", "production")
        monkeypatch.setenv("LOG_LEVEL", "WARNING")
        monkeypatch.delenv("JSON_LOGS", raising=False)

        configure_logging()
        logger = get_logger("test.settings")
        logger.info("filtered out")
        logger.warning("Tax service returned an error status", status_code=500)

        lines = capsys.readouterr().out.strip().splitlines()
        assert len(lines) == 1
        event = json.loads(lines[0])
        assert event["event"] == "Tax service returned an error status"
        assert event["level"] == "warning"
        assert event["status_code"] == 500

    def test_json_logs_setting_turns_off_json(
        self,
        monkeypatch: pytest.MonkeyPatch,
        capsys: pytest.CaptureFixture[str],
    ) -> None:
        """JSON_LOGS=false gives console output even in production."""
        monkeypatch.setenv("ENVIRONMENT", "production")
        monkeypatch.setenv("JSON_LOGS", "false")
        monkeypatch.delenv("LOG_LEVEL", raising=False)

        configure_logging()
        get_logger("test.settings").info("console message")

        out = capsys.readouterr().out
        assert "console message" in out
        assert not out.lstrip().startswith("{")

    def test_explicit_arguments_win(
        self,
        monkeypatch: pytest.MonkeyPatch,
        capsys: pytest.CaptureFixture[str],
    ) -> None:
        """Arguments override the settings."""
        monkeypatch.setenv("LOG_LEVEL", "ERROR")
        monkeypatch.setenv("JSON_LOGS", "false")

        configure_logging(json_format=True, log_level="INFO")
        get_logger("test.settings").info("explicit")

        event = json.loads(capsys.readouterr().out.strip().splitlines()[-1])
        assert event["event"] == "explicit"
