"""Unit tests for logging infrastructure."""

import logging
import threading

import pytest

from kerneleig.utils.logging import (
    LOG_LEVEL_ENV_VAR,
    setup_logger,
    get_logger,
    shutdown_logging,
)


class TestSetupLogger:
    """Test setup_logger function."""

    def test_basic_logger_creation(self, monkeypatch):
        """Test basic logger creation with default settings."""
        monkeypatch.delenv(LOG_LEVEL_ENV_VAR, raising=False)
        logger = setup_logger("test_logger")

        assert logger.name == "test_logger"
        assert logger.level == logging.INFO
        assert len(logger.handlers) >= 1
        assert not logger.propagate

    def test_logger_level_configuration(self):
        """Test logger level configuration."""
        levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]

        for level in levels:
            logger = setup_logger(f"test_{level}", level=level)
            assert logger.level == getattr(logging, level)

    def test_level_from_environment(self, monkeypatch):
        """Test that the default level is read from the environment."""
        monkeypatch.setenv(LOG_LEVEL_ENV_VAR, "warning")
        logger = setup_logger("test_env_level")

        assert logger.level == logging.WARNING

    def test_invalid_log_level(self):
        """Test error handling for invalid log levels."""
        with pytest.raises(ValueError, match="Invalid log level"):
            setup_logger("test", level="INVALID")

    def test_file_logging(self, temp_dir):
        """Test file logging functionality."""
        log_file = temp_dir / "test.log"
        logger = setup_logger("test_file", log_file=log_file)

        test_message = "Test file logging message"
        logger.info(test_message)

        assert log_file.exists()
        assert test_message in log_file.read_text()

    def test_file_logging_directory_creation(self, temp_dir):
        """Test that log directory is created if it doesn't exist."""
        log_file = temp_dir / "subdir" / "test.log"
        logger = setup_logger("test_subdir", log_file=log_file)

        logger.info("Test message")

        assert log_file.exists()
        assert log_file.parent.is_dir()

    def test_no_duplicate_handlers(self):
        """Test that repeated setup returns the registered logger."""
        logger1 = setup_logger("test_duplicate")
        logger2 = setup_logger("test_duplicate")

        assert logger1 is logger2
        assert len(logger2.handlers) == 1

    def test_format_types(self):
        """Test the available formatters."""
        for format_type in ["standard", "detailed", "simple", "unknown"]:
            logger = setup_logger(f"test_format_{format_type}", format_type=format_type)
            assert logger.handlers[0].formatter is not None


class TestGetLogger:
    """Test get_logger function."""

    def test_get_existing_logger(self):
        logger = setup_logger("test_existing", level="DEBUG")
        assert get_logger("test_existing") is logger

    def test_get_new_logger(self):
        logger = get_logger("test_new")
        assert logger.name == "test_new"
        assert len(logger.handlers) >= 1


class TestShutdownLogging:
    """Test shutdown_logging function."""

    def test_shutdown_clears_registry(self):
        logger = setup_logger("test_shutdown")
        assert len(logger.handlers) >= 1

        shutdown_logging()

        assert len(logger.handlers) == 0
        assert get_logger("test_shutdown").handlers


class TestThreadSafety:
    """Test concurrent logger setup."""

    def test_concurrent_setup(self):
        loggers = []

        def create():
            loggers.append(setup_logger("test_concurrent"))

        threads = [threading.Thread(target=create) for _ in range(10)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert len(loggers) == 10
        assert all(logger is loggers[0] for logger in loggers)
        assert len(loggers[0].handlers) == 1
