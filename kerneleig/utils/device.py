"""Device detection and management utilities.

Centralizes device selection so that the sampler, the Gram builder and the
approximation agree on where tensors live.
"""

import platform
from typing import Optional, Union

import torch

from .logging import setup_logger

logger = setup_logger(__name__)


def detect_optimal_device(device: Optional[Union[str, torch.device]] = None) -> torch.device:
    """Detect optimal device for computation across all platforms.

    Args:
        device: Optional explicit device. If None, auto-detects optimal device.

    Returns:
        torch.device: The optimal device for computation

    Device Selection Priority:
        1. Explicit device (if provided)
        2. MPS (Mac Metal Performance Shaders) if available on Darwin
        3. CUDA if available on other platforms
        4. CPU as fallback
    """
    if device is not None:
        return torch.device(device)

    if platform.system() == "Darwin":
        if hasattr(torch.backends, 'mps') and torch.backends.mps.is_available():
            logger.debug("Using MPS device for Mac acceleration")
            return torch.device("mps")
        logger.debug("MPS not available, using CPU on Mac")
        return torch.device("cpu")

    if torch.cuda.is_available():
        logger.debug("Using CUDA device")
        return torch.device("cuda")

    logger.debug("Using CPU device (fallback)")
    return torch.device("cpu")


def should_use_cpu_fallback(device: torch.device, operation: str = "svd") -> bool:
    """Determine if CPU fallback should be used for specific operations.

    Args:
        device: The current device
        operation: The operation being performed (e.g., 'svd', 'qr', 'eigh', 'float64')

    Returns:
        bool: Whether to use CPU fallback for the operation

    Known Issues:
        - MPS has no float64 support, so double-precision Gram matrices cannot live there
        - SVD / QR / eigh on MPS have documented stability issues (PyTorch #78099)
    """
    if device.type == 'mps':
        cpu_fallback_operations = {'svd', 'qr', 'eigh', 'float64'}
        return operation.lower() in cpu_fallback_operations

    return False


def compute_device_for(device: torch.device, operation: str) -> torch.device:
    """Return the device an operation should actually run on."""
    if should_use_cpu_fallback(device, operation):
        log_device_warning_once(device, operation)
        return torch.device("cpu")
    return device


def log_device_warning_once(device: torch.device, operation: str, warning_key: Optional[str] = None) -> None:
    """Log device-specific warnings only once to avoid spam.

    Args:
        device: Device being used
        operation: Operation being performed
        warning_key: Optional key for the warning (defaults to f"{device.type}_{operation}")
    """
    if warning_key is None:
        warning_key = f"{device.type}_{operation}"

    warning_attr = f"_warned_{warning_key}"

    if not hasattr(log_device_warning_once, warning_attr):
        if device.type == 'mps':
            logger.warning(
                f"Using CPU fallback for {operation} on MPS device. MPS lacks float64 "
                f"and has known linear algebra stability issues (PyTorch GitHub #78099)."
            )
        setattr(log_device_warning_once, warning_attr, True)
