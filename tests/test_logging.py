"""Tests for logging configuration."""

import logging

from rich.logging import RichHandler

from trinity.logging_config import get_logger, resolve_level, setup_logging


class TestLevels:
    def test_resolve_level(self):
        assert resolve_level() == logging.WARNING
        assert resolve_level(verbose=True) == logging.DEBUG
        assert resolve_level(quiet=True) == logging.ERROR
        assert resolve_level(verbose=True, quiet=True) == logging.ERROR


class TestSetupLogging:
    def test_replaces_handlers(self):
        setup_logging()
        logger = setup_logging(verbose=True)
        assert logger.name == "trinity"
        assert len(logger.handlers) == 1
        assert isinstance(logger.handlers[0], RichHandler)
        assert logger.level == logging.DEBUG
        assert not logger.propagate

    def test_log_file_keeps_info_when_quiet(self, tmp_path):
        log_file = tmp_path / "trinity.log"
        logger = setup_logging(quiet=True, log_file=str(log_file))
        get_logger("trinity.validation.validator").info("Starting Trinity validation")
        for handler in logger.handlers:
            handler.flush()
        assert "Starting Trinity validation" in log_file.read_text()
        setup_logging()

    def test_get_logger_namespace(self):
        assert get_logger().name == "trinity"
        assert get_logger("scoring").name == "trinity.scoring"
        assert get_logger("trinity.config").name == "trinity.config"
