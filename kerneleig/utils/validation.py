"""Validation utilities for counts, points and matrices.

This module provides the input checks shared by the sampler, the
eigensolvers and the Nyström approximation.
"""

from typing import Any, Optional, Union

import numpy as np
import torch

from .config import Config
from .exceptions import ValidationError


def validate_count(name: str, value: Any, minimum: int = 0) -> int:
    """Validate an integer count parameter.

    Args:
        name: Parameter name for error messages
        value: Value to validate
        minimum: Smallest accepted value

    Returns:
        The value as a Python int

    Raises:
        ValidationError: If value is not an integer or is below minimum
    """
    if isinstance(value, bool) or not isinstance(value, (int, np.integer)):
        raise ValidationError(
            f"{name} must be an integer, got {type(value).__name__}",
            parameter=name,
            expected="int",
            actual=type(value).__name__
        )

    value = int(value)
    if value < minimum:
        raise ValidationError(
            f"{name} must be >= {minimum}, got {value}",
            parameter=name,
            expected=f">= {minimum}",
            actual=value
        )
    return value


def resolve_dtype(dtype: Union[str, torch.dtype]) -> torch.dtype:
    """Turn a dtype name such as "float32" into a torch floating dtype."""
    if isinstance(dtype, str):
        resolved = getattr(torch, dtype, None)
        if not isinstance(resolved, torch.dtype):
            raise ValidationError(f"Unknown dtype: {dtype}", parameter="dtype", actual=dtype)
        dtype = resolved

    if not dtype.is_floating_point:
        raise ValidationError(
            f"dtype must be a floating point type, got {dtype}",
            parameter="dtype",
            expected="floating point dtype",
            actual=dtype
        )
    return dtype


def as_tensor(
    value: Any,
    dtype: Optional[torch.dtype] = None,
    device: Optional[torch.device] = None
) -> torch.Tensor:
    """Convert a point, array or tensor to a torch tensor.

    NumPy arrays and Python sequences are converted; tensors are moved only
    when dtype or device differ.
    """
    if isinstance(value, torch.Tensor):
        return value.to(dtype=dtype or value.dtype, device=device or value.device)
    if isinstance(value, np.ndarray):
        tensor = torch.from_numpy(value)
        return tensor.to(dtype=dtype or tensor.dtype, device=device or tensor.device)
    return torch.as_tensor(value, dtype=dtype, device=device)


def validate_square_matrix(matrix: torch.Tensor, name: str = "matrix") -> int:
    """Validate a 2-D square tensor and return its size.

    Raises:
        ValidationError: If matrix is not a square 2-D tensor
    """
    if not isinstance(matrix, torch.Tensor):
        raise ValidationError(
            f"{name} must be torch.Tensor, got {type(matrix).__name__}",
            parameter=name
        )

    if matrix.dim() != 2:
        raise ValidationError(f"{name} must be 2D tensor, got {matrix.dim()}D", parameter=name)

    if matrix.shape[0] != matrix.shape[1]:
        raise ValidationError(
            f"{name} must be square matrix, got shape {tuple(matrix.shape)}",
            parameter=name
        )
    return matrix.shape[0]


def validate_symmetric(
    matrix: torch.Tensor,
    name: str = "matrix",
    atol: float = Config.numerical.SYMMETRY_TOLERANCE
) -> None:
    """Validate that a square matrix is symmetric within tolerance.

    Raises:
        ValidationError: If matrix is not square or not symmetric
    """
    validate_square_matrix(matrix, name)

    if not torch.allclose(matrix, matrix.T, atol=atol, rtol=0.0):
        max_asymmetry = (matrix - matrix.T).abs().max().item()
        raise ValidationError(
            f"{name} must be symmetric",
            parameter=name,
            expected=f"|A - A^T| <= {atol}",
            actual=f"max asymmetry {max_asymmetry:.3e}"
        )


def validate_eigenpairs(
    eigenvectors: torch.Tensor,
    eigenvalues: torch.Tensor,
    target_rank: int,
    atol: float = Config.numerical.ORTHONORMALITY_TOLERANCE
) -> None:
    """Check that an eigensolver honoured its output contract.

    Raises:
        ValidationError: If shapes disagree, fewer than target_rank pairs were
            returned, eigenvalues are negative or unsorted, or the
            eigenvectors are not orthonormal
    """
    if eigenvectors.dim() != 2 or eigenvalues.dim() != 1:
        raise ValidationError("Eigenvectors must be 2D and eigenvalues 1D")

    n_pairs = eigenvalues.shape[0]
    if eigenvectors.shape[1] != n_pairs:
        raise ValidationError(
            "Eigenvector and eigenvalue counts differ",
            expected=n_pairs,
            actual=eigenvectors.shape[1]
        )

    if n_pairs < target_rank:
        raise ValidationError(
            f"Eigensolver returned {n_pairs} pairs, fewer than requested rank {target_rank}",
            expected=target_rank,
            actual=n_pairs
        )

    if torch.any(eigenvalues < 0):
        raise ValidationError("Eigenvalues must be non-negative")

    if n_pairs > 1 and torch.any(eigenvalues[1:] > eigenvalues[:-1]):
        raise ValidationError("Eigenvalues must be sorted in descending order")

    gram = eigenvectors.T @ eigenvectors
    identity = torch.eye(n_pairs, dtype=gram.dtype, device=gram.device)
    if not torch.allclose(gram, identity, atol=atol):
        raise ValidationError("Eigenvectors must be orthonormal")
