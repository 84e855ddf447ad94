"""Performance profiling utilities for kerneleig.

Decorators for measuring execution time and resident memory of the
construction stages (landmark sampling, Gram assembly, decomposition).
Results are collected by a process-wide ProfileManager.
"""

import functools
import threading
import time
from dataclasses import dataclass, field
from collections import deque
from typing import Callable, Any, Deque, Dict, Optional, List

import psutil

from .config import Config
from .logging import get_logger


@dataclass
class ProfileResult:
    """Container for one profiled call."""

    function_name: str
    execution_time: float
    memory_delta_mb: float = 0.0
    peak_rss_mb: float = 0.0
    context: Dict[str, Any] = field(default_factory=dict)
    timestamp: float = field(default_factory=time.time)

    def to_dict(self) -> Dict[str, Any]:
        """Convert result to dictionary for serialization."""
        return {
            "function_name": self.function_name,
            "execution_time": self.execution_time,
            "memory_delta_mb": self.memory_delta_mb,
            "peak_rss_mb": self.peak_rss_mb,
            "context": self.context,
            "timestamp": self.timestamp,
        }


class ProfileManager:
    """Keeps the most recent profiling results.

    Older results are dropped once max_results is reached.
    """

    def __init__(self, max_results: int = Config.performance.MAX_PROFILE_RESULTS):
        self.results: Deque[ProfileResult] = deque(maxlen=max_results)
        self.lock = threading.Lock()

    def add_result(self, result: ProfileResult):
        with self.lock:
            self.results.append(result)

    def get_results(self, function_name: Optional[str] = None) -> List[ProfileResult]:
        """Get profiling results, optionally filtered by function name."""
        with self.lock:
            if function_name:
                return [r for r in self.results if r.function_name == function_name]
            return list(self.results)

    def clear_results(self):
        with self.lock:
            self.results.clear()


_profile_manager = None
_profile_manager_lock = threading.Lock()


def get_profile_manager() -> ProfileManager:
    """Get the global profile manager with thread-safe initialization."""
    global _profile_manager

    if _profile_manager is None:
        with _profile_manager_lock:
            if _profile_manager is None:
                _profile_manager = ProfileManager()

    return _profile_manager


def _rss_mb() -> float:
    return psutil.Process().memory_info().rss / (1024 * 1024)


def profile_memory(
    memory_threshold_mb: float = 1000.0,
    log_results: bool = True
) -> Callable:
    """Decorator to profile resident memory growth of a function.

    Memory is measured as the change in process RSS (via psutil) across the
    call, which covers allocations made by torch as well as Python.

    Args:
        memory_threshold_mb: Threshold for memory usage warnings
        log_results: Whether to log profiling results

    Returns:
        Decorated function with memory profiling
    """
    def decorator(func: Callable) -> Callable:
        @functools.wraps(func)
        def wrapper(*args, **kwargs):
            logger = get_logger(f"kerneleig.profiling.{func.__name__}")

            rss_before = _rss_mb()
            start_time = time.time()
            try:
                result = func(*args, **kwargs)
            except Exception as e:
                logger.error(f"Error in {func.__name__}: {e}")
                raise

            execution_time = time.time() - start_time
            rss_after = _rss_mb()
            delta = max(0.0, rss_after - rss_before)

            get_profile_manager().add_result(ProfileResult(
                function_name=func.__name__,
                execution_time=execution_time,
                memory_delta_mb=delta,
                peak_rss_mb=rss_after,
            ))

            if log_results:
                logger.debug(f"{func.__name__}: {execution_time:.4f}s, memory delta {delta:.2f}MB")

            if delta > memory_threshold_mb:
                logger.warning(
                    f"{func.__name__} exceeded memory threshold: "
                    f"{delta:.2f}MB > {memory_threshold_mb:.2f}MB"
                )

            return result

        return wrapper
    return decorator


def profile_time(
    time_threshold_seconds: float = 60.0,
    log_results: bool = True
) -> Callable:
    """Decorator to profile execution time of a function.

    Args:
        time_threshold_seconds: Threshold for execution time warnings
        log_results: Whether to log profiling results

    Returns:
        Decorated function with time profiling
    """
    def decorator(func: Callable) -> Callable:
        @functools.wraps(func)
        def wrapper(*args, **kwargs):
            logger = get_logger(f"kerneleig.profiling.{func.__name__}")

            start_time = time.time()
            try:
                result = func(*args, **kwargs)
            except Exception as e:
                execution_time = time.time() - start_time
                logger.error(f"Error in {func.__name__} after {execution_time:.2f}s: {e}")
                raise

            execution_time = time.time() - start_time
            get_profile_manager().add_result(ProfileResult(
                function_name=func.__name__,
                execution_time=execution_time,
            ))

            if log_results:
                logger.debug(f"{func.__name__} execution time: {execution_time:.4f}s")

            if execution_time > time_threshold_seconds:
                logger.warning(
                    f"{func.__name__} exceeded time threshold: "
                    f"{execution_time:.2f}s > {time_threshold_seconds:.2f}s"
                )

            return result

        return wrapper
    return decorator
