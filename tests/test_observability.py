"""
Tests for logging setup.
"""

import logging

import pytest

from suiup.core.observability.logging_config import resolve_level, setup_logging


@pytest.fixture(autouse=True)
def restore_root_logger():
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    for h in root.handlers:
        if h not in handlers:
            h.close()
    root.handlers[:] = handlers
    root.setLevel(level)


class TestResolveLevel:
    def test_flag_precedence(self, monkeypatch):
        monkeypatch.setenv("SUIUP_LOG_LEVEL", "ERROR")
        assert resolve_level(debug=True, verbose=True, quiet=True) == "DEBUG"
        assert resolve_level(verbose=True, quiet=True) == "INFO"
        assert resolve_level(quiet=True) == "ERROR"
        assert resolve_level() == "ERROR"

    def test_default_warning(self):
        assert resolve_level() == "WARNING"


class TestSetupLogging:
    def test_console_level(self):
        setup_logging("INFO")
        root = logging.getLogger()
        assert root.level == logging.INFO
        assert len(root.handlers) == 1

    def test_unknown_level_falls_back(self):
        setup_logging("chatty")
        assert logging.getLogger().level == logging.WARNING

    def test_file_handler(self, tmp_path):
        log_file = tmp_path / "suiup.log"
        setup_logging("WARNING", log_file=str(log_file), log_file_level="DEBUG")
        root = logging.getLogger()
        assert root.level == logging.DEBUG

        logging.getLogger("suiup.test").debug("hello file")
        for h in root.handlers:
            h.flush()
        assert "hello file" in log_file.read_text()

    def test_quiet_third_party(self):
        setup_logging("INFO")
        assert logging.getLogger("urllib3").level == logging.WARNING

    def test_console_format_by_level(self):
        setup_logging("WARNING")
        plain = logging.getLogger().handlers[0].formatter._fmt
        assert plain == "%(message)s"

        setup_logging("DEBUG")
        detailed = logging.getLogger().handlers[0].formatter._fmt
        assert "%(lineno)d" in detailed
