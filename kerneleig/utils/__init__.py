"""Utilities for the kerneleig package.

This module contains common utilities used throughout kerneleig:
- Logging infrastructure
- Custom exception hierarchy
- Configuration constants
- Device selection
- Performance profiling tools
- Validation helpers
"""

from .logging import setup_logger, get_logger, shutdown_logging
from .exceptions import (
    KernelEigError,
    ValidationError,
    ConfigurationError,
    ComputationError,
    ContractError,
)
from .config import Config
from .profiling import profile_memory, profile_time, get_profile_manager

__all__ = [
    "setup_logger",
    "get_logger",
    "shutdown_logging",
    "KernelEigError",
    "ValidationError",
    "ConfigurationError",
    "ComputationError",
    "ContractError",
    "Config",
    "profile_memory",
    "profile_time",
    "get_profile_manager",
]
