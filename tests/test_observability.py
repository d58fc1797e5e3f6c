"""
Tests for logging setup.
"""

import logging

import pytest

from projgen.core.observability.logging_config import resolve_level, setup_logging


@pytest.fixture(autouse=True)
def _restore_root_logger():
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield
    for handler in root.handlers:
        if handler not in handlers:
            handler.close()
    root.handlers[:] = handlers
    root.setLevel(level)


class TestResolveLevel:
    def test_flag_precedence(self):
        assert resolve_level(debug=True, verbose=True, quiet=True) == "DEBUG"
        assert resolve_level(verbose=True, quiet=True) == "INFO"
        assert resolve_level(quiet=True) == "ERROR"

    def test_env_fallback(self, monkeypatch):
        monkeypatch.setenv("PROJGEN_LOG_LEVEL", "INFO")
        assert resolve_level() == "INFO"

    def test_default(self, monkeypatch):
        monkeypatch.delenv("PROJGEN_LOG_LEVEL", raising=False)
        assert resolve_level() == "WARNING"


class TestSetupLogging:
    def test_console_level(self, monkeypatch):
        monkeypatch.delenv("PROJGEN_LOG_FILE", raising=False)
        setup_logging("INFO")
        root = logging.getLogger()
        assert root.level == logging.INFO
        assert len(root.handlers) == 1

    def test_unknown_level_is_warning(self, monkeypatch):
        monkeypatch.delenv("PROJGEN_LOG_FILE", raising=False)
        setup_logging("CHATTY")
        assert logging.getLogger().level == logging.WARNING

    def test_log_file(self, tmp_path, monkeypatch):
        log_file = tmp_path / "projgen.log"
        monkeypatch.setenv("PROJGEN_LOG_FILE", str(log_file))
        monkeypatch.setenv("PROJGEN_LOG_FILE_LEVEL", "DEBUG")
        setup_logging("WARNING")
        root = logging.getLogger()
        assert root.level == logging.DEBUG
        logging.getLogger("projgen.test").debug("written to file")
        for handler in root.handlers:
            handler.flush()
        assert "written to file" in log_file.read_text()

    def test_other_loggers_left_alone(self, monkeypatch):
        monkeypatch.delenv("PROJGEN_LOG_FILE", raising=False)
        library = logging.getLogger("some.library")
        library.setLevel(logging.DEBUG)
        try:
            setup_logging("ERROR")
            assert library.level == logging.DEBUG
        finally:
            library.setLevel(logging.NOTSET)
