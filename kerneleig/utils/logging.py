"""Logging infrastructure for kerneleig.

This module provides the logging setup shared by every kerneleig module.
Loggers write to stdout and, optionally, to a log file.

Key features:
- Configurable log levels (DEBUG, INFO, WARNING, ERROR, CRITICAL)
- Default level taken from the KERNELEIG_LOG_LEVEL environment variable
- Console and file output support
- Thread-safe logger registry (no duplicate handlers)
"""

import logging
import os
import sys
import threading
from pathlib import Path
from typing import Optional, Dict

# Global logger registry to prevent duplicate handlers
_loggers: Dict[str, logging.Logger] = {}
_lock = threading.Lock()

LOG_LEVEL_ENV_VAR = "KERNELEIG_LOG_LEVEL"


def setup_logger(
    name: str,
    level: Optional[str] = None,
    log_file: Optional[Path] = None,
    format_type: str = "standard"
) -> logging.Logger:
    """Configure logger with console and optional file output.

    Args:
        name: Logger name (typically module name)
        level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL).
            Defaults to $KERNELEIG_LOG_LEVEL, or INFO when unset.
        log_file: Optional path to log file
        format_type: Format type ('standard', 'detailed', 'simple')

    Returns:
        Configured logger instance

    Raises:
        ValueError: If level is invalid

    Example:
        >>> logger = setup_logger('kerneleig.nystrom', level='DEBUG')
        >>> logger.info('Sampling landmarks')
    """
    with _lock:
        if name in _loggers:
            return _loggers[name]

        if level is None:
            level = os.environ.get(LOG_LEVEL_ENV_VAR, "INFO")

        numeric_level = getattr(logging, level.upper(), None)
        if not isinstance(numeric_level, int):
            raise ValueError(f"Invalid log level: {level}")

        logger = logging.getLogger(name)
        logger.setLevel(numeric_level)

        if logger.handlers:
            logger.handlers.clear()

        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setFormatter(_get_formatter(format_type))
        console_handler.setLevel(numeric_level)
        logger.addHandler(console_handler)

        if log_file:
            try:
                log_file.parent.mkdir(parents=True, exist_ok=True)
                file_handler = logging.FileHandler(log_file, mode='a')
                file_handler.setFormatter(_get_formatter('detailed'))
                file_handler.setLevel(numeric_level)
                logger.addHandler(file_handler)
            except (OSError, PermissionError) as e:
                logger.warning(f"Could not create file handler for {log_file}: {e}")

        logger.propagate = False
        _loggers[name] = logger

        return logger


def _get_formatter(format_type: str) -> logging.Formatter:
    """Get formatter based on type."""
    formats = {
        'standard': '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        'detailed': '%(asctime)s - %(name)s - %(levelname)s - %(funcName)s:%(lineno)d - %(message)s',
        'simple': '%(levelname)s - %(message)s'
    }

    format_string = formats.get(format_type, formats['standard'])
    return logging.Formatter(format_string)


def get_logger(name: str) -> logging.Logger:
    """Get existing logger or create new one with default settings."""
    if name in _loggers:
        return _loggers[name]
    return setup_logger(name)


def shutdown_logging() -> None:
    """Shutdown all loggers and clean up handlers."""
    with _lock:
        for logger in _loggers.values():
            for handler in logger.handlers:
                handler.close()
            logger.handlers.clear()
        _loggers.clear()
