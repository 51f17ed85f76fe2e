"""
Tests for logging setup and platform probes.
"""

import logging

import pytest

from lsp_installer.core.observability.logging_config import (
    _parse_level,
    resolve_level,
    setup_logging,
)
from lsp_installer.core.platform import is_headless


@pytest.fixture(autouse=True)
def _restore_logging():
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    for handler in root.handlers:
        if handler not in handlers:
            handler.close()
    root.handlers[:] = handlers
    root.setLevel(level)


class TestResolveLevel:
    def test_flags_win(self, monkeypatch):
        monkeypatch.setenv("LSPI_LOG_LEVEL", "ERROR")
        assert resolve_level(debug=True) == "DEBUG"
        assert resolve_level(verbose=True) == "INFO"
        assert resolve_level(quiet=True) == "ERROR"

    def test_env_beats_settings(self, monkeypatch):
        monkeypatch.setenv("LSPI_LOG_LEVEL", "DEBUG")
        assert resolve_level(configured="INFO") == "DEBUG"

    def test_settings_then_default(self, monkeypatch):
        monkeypatch.delenv("LSPI_LOG_LEVEL", raising=False)
        assert resolve_level(configured="INFO") == "INFO"
        assert resolve_level() == "WARNING"


class TestSetupLogging:
    def test_console_level(self):
        setup_logging("INFO")
        root = logging.getLogger()
        assert root.level == logging.INFO
        assert len(root.handlers) == 1

    def test_file_handler(self, tmp_path):
        log_file = tmp_path / "lsp.log"
        setup_logging("WARNING", log_file=str(log_file), log_file_level="DEBUG")

        logging.getLogger("lsp_installer.test").debug("written to file")
        for handler in logging.getLogger().handlers:
            handler.flush()

        assert logging.getLogger().level == logging.DEBUG
        assert "written to file" in log_file.read_text()

    def test_bad_level_falls_back(self):
        assert _parse_level("LOUD") == logging.WARNING
        assert _parse_level(None) == logging.WARNING
        assert _parse_level("debug") == logging.DEBUG


class TestIsHeadless:
    @pytest.mark.parametrize("value,expected", [("1", True), ("yes", True), ("0", False), ("", False)])
    def test_env_override(self, monkeypatch, value, expected):
        monkeypatch.setenv("LSPI_HEADLESS", value)
        assert is_headless() is expected

    def test_no_tty_is_headless(self, monkeypatch):
        monkeypatch.delenv("LSPI_HEADLESS", raising=False)

        class NotATty:
            def isatty(self):
                return False

        monkeypatch.setattr("sys.stdin", NotATty())
        assert is_headless() is True
