"""Unit tests for logging configuration."""

from __future__ import annotations

import logging
import os
from datetime import datetime, timedelta
from logging.handlers import RotatingFileHandler
from pathlib import Path
from unittest.mock import patch

import pytest

from kubectl_rancher.logging.config import (
    REDACTED,
    RETENTION_DAYS,
    _cleanup_old_logs,
    _setup_file_logging,
    _state_dir,
    configure_logging,
    console_level,
    get_logger,
    redact_secrets,
)

_CONFIG = "kubectl_rancher.logging.config"


def _age(path: Path, days: int) -> None:
    old_time = (datetime.now() - timedelta(days=days)).timestamp()
    os.utime(path, (old_time, old_time))


@pytest.mark.unit
class TestCleanupOldLogs:
    """Tests for _cleanup_old_logs function."""

    def test_returns_early_when_log_dir_missing(self, tmp_path: Path) -> None:
        """_cleanup_old_logs should return early if LOG_DIR doesn't exist."""
        with patch(f"{_CONFIG}.LOG_DIR", tmp_path / "nonexistent"):
            _cleanup_old_logs()

    def test_deletes_old_log_files(self, tmp_path: Path) -> None:
        """Rotated logs older than RETENTION_DAYS are deleted."""
        log_file = tmp_path / "kubectl-rancher.log.1"
        log_file.write_text("old log data")
        _age(log_file, RETENTION_DAYS + 5)

        with patch(f"{_CONFIG}.LOG_DIR", tmp_path):
            _cleanup_old_logs()

        assert not log_file.exists()

    def test_keeps_recent_and_unrelated_files(self, tmp_path: Path) -> None:
        """Recent logs and files that are not ours are kept."""
        recent = tmp_path / "kubectl-rancher.log"
        recent.write_text("recent log data")
        unrelated = tmp_path / "other.log"
        unrelated.write_text("not ours")
        _age(unrelated, RETENTION_DAYS + 5)

        with patch(f"{_CONFIG}.LOG_DIR", tmp_path):
            _cleanup_old_logs()

        assert recent.exists()
        assert unrelated.exists()

    def test_ignores_os_errors(self, tmp_path: Path) -> None:
        """_cleanup_old_logs should handle OSError gracefully."""
        log_file = tmp_path / "kubectl-rancher.log.1"
        log_file.write_text("data")
        _age(log_file, RETENTION_DAYS + 5)

        with (
            patch(f"{_CONFIG}.LOG_DIR", tmp_path),
            patch.object(Path, "unlink", side_effect=OSError("permission denied")),
        ):
            _cleanup_old_logs()


@pytest.mark.unit
class TestSetupFileLogging:
    """Tests for _setup_file_logging function."""

    def test_creates_log_directory_and_handler(self, tmp_path: Path) -> None:
        """A rotating file handler is attached under LOG_DIR."""
        log_dir = tmp_path / "logs"

        with (
            patch(f"{_CONFIG}.LOG_DIR", log_dir),
            patch(f"{_CONFIG}.LOG_FILE", log_dir / "kubectl-rancher.log"),
        ):
            _setup_file_logging()

        assert log_dir.exists()
        handlers = [h for h in logging.getLogger().handlers if isinstance(h, RotatingFileHandler)]
        assert any(h.baseFilename == str(log_dir / "kubectl-rancher.log") for h in handlers)


@pytest.mark.unit
class TestConfigureLogging:
    """Tests for configure_logging function."""

    @staticmethod
    def _console_handler() -> logging.Handler:
        return next(
            h
            for h in logging.getLogger().handlers
            if type(h) is logging.StreamHandler
        )

    def test_default_sets_warning_level(self) -> None:
        """The console shows warnings and above by default."""
        with patch(f"{_CONFIG}._setup_file_logging"):
            configure_logging()

        assert self._console_handler().level == logging.WARNING

    def test_verbose_sets_info_level(self) -> None:
        """--verbose lowers the console level to INFO."""
        with patch(f"{_CONFIG}._setup_file_logging"):
            configure_logging(verbose=True)

        assert self._console_handler().level == logging.INFO

    def test_debug_sets_debug_level(self) -> None:
        """--debug lowers the console level to DEBUG."""
        with patch(f"{_CONFIG}._setup_file_logging"):
            configure_logging(debug=True, verbose=True)

        assert self._console_handler().level == logging.DEBUG

    def test_json_output(self) -> None:
        """JSON console output can be selected."""
        with patch(f"{_CONFIG}._setup_file_logging"):
            configure_logging(json_output=True)

        assert self._console_handler().formatter is not None

    def test_writes_log_file(self, tmp_path: Path) -> None:
        """Configured logging writes JSON lines to the log file."""
        configure_logging()
        get_logger("test").warning("something happened", cluster="prod")

        for handler in logging.getLogger().handlers:
            handler.flush()
        log_file = tmp_path / "state" / "kubectl-rancher.log"
        assert "something happened" in log_file.read_text()


@pytest.mark.unit
class TestGetLogger:
    """Tests for get_logger function."""

    def test_returns_logger(self) -> None:
        """get_logger should return a structlog logger."""
        assert get_logger("test") is not None

    def test_binds_initial_context(self) -> None:
        """get_logger should bind initial context when provided."""
        logger = get_logger("test", component="api")
        assert logger is not None


@pytest.mark.unit
class TestConsoleLevel:
    """Tests for console_level function."""

    @pytest.mark.parametrize(
        ("verbose", "debug", "expected"),
        [
            (False, False, logging.WARNING),
            (True, False, logging.INFO),
            (False, True, logging.DEBUG),
            (True, True, logging.DEBUG),
        ],
    )
    def test_levels(self, verbose: bool, debug: bool, expected: int) -> None:
        """--debug wins over --verbose."""
        assert console_level(verbose=verbose, debug=debug) == expected


@pytest.mark.unit
class TestRedactSecrets:
    """Tests for redact_secrets processor."""

    def test_masks_credentials(self) -> None:
        """password, token and authorization values are replaced."""
        event = redact_secrets(
            None,
            "info",
            {"event": "login", "password": "hunter2", "token": "a:b", "authorization": "Basic x"},
        )

        assert event["password"] == REDACTED
        assert event["token"] == REDACTED
        assert event["authorization"] == REDACTED
        assert event["event"] == "login"

    def test_keeps_other_and_empty_fields(self) -> None:
        """Non-secret fields and empty secrets are left alone."""
        event = redact_secrets(None, "info", {"event": "x", "username": "admin", "token": ""})

        assert event == {"event": "x", "username": "admin", "token": ""}

    def test_log_file_never_contains_password(self, tmp_path: Path) -> None:
        """Secrets logged as fields do not reach the log file."""
        configure_logging()
        get_logger("test").warning("login attempt", username="admin", password="hunter2")

        for handler in logging.getLogger().handlers:
            handler.flush()
        text = (tmp_path / "state" / "kubectl-rancher.log").read_text()
        assert "login attempt" in text
        assert "hunter2" not in text


@pytest.mark.unit
class TestStateDir:
    """Tests for _state_dir function."""

    def test_honours_xdg_state_home(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        """XDG_STATE_HOME relocates the log directory."""
        monkeypatch.setenv("XDG_STATE_HOME", str(tmp_path))
        assert _state_dir() == tmp_path / "kubectl-rancher"

    def test_defaults_to_local_state(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Without XDG_STATE_HOME logs live under ~/.local/state."""
        monkeypatch.delenv("XDG_STATE_HOME", raising=False)
        assert _state_dir() == Path.home() / ".local" / "state" / "kubectl-rancher"
