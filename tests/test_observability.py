"""
Tests for logging setup.
"""

import logging
from pathlib import Path

import pytest

from paygen.core.observability.logging_config import resolve_level, setup_logging


@pytest.fixture(autouse=True)
def _restore_root_logger(monkeypatch):
    monkeypatch.delenv("PAYGEN_LOG_LEVEL", raising=False)
    monkeypatch.delenv("PAYGEN_LOG_FILE", raising=False)
    monkeypatch.delenv("PAYGEN_LOG_FILE_LEVEL", raising=False)
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield
    for handler in root.handlers:
        if handler not in handlers:
            handler.close()
    root.handlers[:] = handlers
    root.setLevel(level)


class TestResolveLevel:
    def test_cli_wins(self, monkeypatch):
        monkeypatch.setenv("PAYGEN_LOG_LEVEL", "DEBUG")
        assert resolve_level("ERROR") == "ERROR"

    def test_env(self, monkeypatch):
        monkeypatch.setenv("PAYGEN_LOG_LEVEL", "INFO")
        assert resolve_level() == "INFO"

    def test_default(self):
        assert resolve_level() == "WARNING"


class TestSetupLogging:
    def test_console_level(self):
        setup_logging("INFO")
        root = logging.getLogger()
        assert root.level == logging.INFO
        assert len(root.handlers) == 1

    def test_unknown_level_falls_back(self):
        setup_logging("LOUD")
        assert logging.getLogger().level == logging.WARNING

    def test_third_party_quieted(self):
        setup_logging("INFO")
        assert logging.getLogger("werkzeug").level == logging.WARNING

    def test_log_file(self, tmp_path: Path):
        log_file = tmp_path / "paygen.log"
        setup_logging("WARNING", log_file=str(log_file), log_file_level="DEBUG")
        root = logging.getLogger()
        assert root.level == logging.DEBUG
        logging.getLogger("paygen.test").debug("hello file")
        for handler in root.handlers:
            handler.flush()
        assert "hello file" in log_file.read_text(encoding="utf-8")

    def test_log_file_from_env(self, tmp_path: Path, monkeypatch):
        log_file = tmp_path / "env.log"
        monkeypatch.setenv("PAYGEN_LOG_FILE", str(log_file))
        setup_logging("ERROR")
        assert len(logging.getLogger().handlers) == 2
