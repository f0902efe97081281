"""Unit tests for the logging setup."""

import logging

import pytest

from utils import logger as log_module
from utils.logger import configure_logging, get_logger, resolve_level


@pytest.fixture
def root_logger():
    root = logging.getLogger()
    level = root.level
    yield root
    root.setLevel(level)


class TestResolveLevel:
    """Turning LOG_LEVEL values into logging constants."""

    @pytest.mark.parametrize("name, level", [
        ("DEBUG", logging.DEBUG),
        ("warning", logging.WARNING),
        ("Error", logging.ERROR),
    ])
    def test_known_names(self, name, level):
        assert resolve_level(name) == level

    def test_unknown_name_falls_back_to_info(self):
        assert resolve_level("chatty") == logging.INFO


class TestConfigureLogging:
    """The root handler is installed once and the level follows the argument."""

    def test_sets_root_level(self, root_logger):
        configure_logging("DEBUG")
        assert root_logger.level == logging.DEBUG
        configure_logging("WARNING")
        assert root_logger.level == logging.WARNING

    def test_handler_installed_once(self, root_logger):
        first = configure_logging("INFO")
        second = configure_logging("INFO")
        assert first is second
        assert root_logger.handlers.count(first) == 1

    def test_format_includes_thread_name(self, root_logger):
        handler = configure_logging("INFO")
        record = logging.LogRecord("pos.test", logging.INFO, __file__, 1, "hello", None, None)
        record.threadName = "worker-1"
        line = handler.formatter.format(record)
        assert "| worker-1 |" in line
        assert line.endswith("| pos.test | hello")


class TestGetLogger:
    """Named loggers share the configured root handler."""

    def test_returns_named_logger(self):
        named = get_logger("services.cash_service")
        assert named.name == "services.cash_service"
        assert log_module._handler in logging.getLogger().handlers
