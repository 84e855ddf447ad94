"""Nyström extension operator.

Given the leading eigenpairs (U, D) of the landmark Gram matrix, the
approximate eigenfunctions of the kernel operator over a domain of N points
are

    phi_j(x) = sqrt(M / N) / D_j · sum_i k(x, l_i) U_ij

and the operator's eigenvalues are D_j · N / M. Everything that does not
depend on x is folded into the extension matrix computed here.
"""

import math
from typing import NamedTuple

import torch

from ..utils.config import Config
from ..utils.exceptions import ConfigurationError, ValidationError
from ..utils.logging import setup_logger
from ..utils.validation import validate_count


logger = setup_logger(__name__)


class NystromExtension(NamedTuple):
    """Point-independent part of the Nyström approximation."""
    matrix: torch.Tensor        # [(M·d), k]
    eigenvalues: torch.Tensor   # [k], renormalised to the full domain
    norm_factor: float          # M / N


def eigenvalue_threshold(
    eigenvalues: torch.Tensor,
    min_eigenvalue: float = Config.numerical.MIN_EIGENVALUE,
    relative_tolerance: float = Config.numerical.RELATIVE_EIGENVALUE_TOLERANCE
) -> float:
    """Smallest eigenvalue that may be inverted: max(abs, rel · largest)."""
    largest = eigenvalues[0].item() if eigenvalues.numel() > 0 else 0.0
    return max(min_eigenvalue, relative_tolerance * largest)


def build_extension(
    eigenvectors: torch.Tensor,
    eigenvalues: torch.Tensor,
    n_eigenfunctions: int,
    n_landmarks: int,
    domain_size: int,
    min_eigenvalue: float = Config.numerical.MIN_EIGENVALUE,
    relative_tolerance: float = Config.numerical.RELATIVE_EIGENVALUE_TOLERANCE
) -> NystromExtension:
    """Precompute the extension matrix and renormalised eigenvalues.

    Args:
        eigenvectors: U [(M·d), r], orthonormal columns, r >= n_eigenfunctions
        eigenvalues: D [r], non-negative, descending
        n_eigenfunctions: Number k of eigenfunctions to keep
        n_landmarks: Number M of landmarks the Gram matrix was built from
        domain_size: Number N of points in the full domain
        min_eigenvalue: Absolute floor for D[:k]
        relative_tolerance: Relative floor for D[:k] (times D[0])

    Returns:
        NystromExtension(matrix, eigenvalues, norm_factor)

    Raises:
        ValidationError: If counts are inconsistent with the inputs
        ConfigurationError: If any of D[:k] is not safely positive, i.e. k
            exceeds the numerical rank of the sampled Gram matrix
    """
    k = validate_count("n_eigenfunctions", n_eigenfunctions, minimum=1)
    n_landmarks = validate_count("n_landmarks", n_landmarks, minimum=1)
    domain_size = validate_count("domain_size", domain_size, minimum=n_landmarks)

    if eigenvalues.shape[0] < k or eigenvectors.shape[1] < k:
        raise ValidationError(
            f"Need at least {k} eigenpairs, got {eigenvalues.shape[0]}",
            parameter="eigenvalues",
            expected=k,
            actual=eigenvalues.shape[0]
        )

    leading = eigenvalues[:k]
    threshold = eigenvalue_threshold(eigenvalues, min_eigenvalue, relative_tolerance)
    below = torch.nonzero(leading <= threshold).flatten()
    if below.numel() > 0:
        first = below[0].item()
        logger.error(
            f"Eigenvalue {first} ({leading[first].item():.3e}) is below threshold {threshold:.3e}"
        )
        raise ConfigurationError(
            f"Requested {k} eigenfunctions but the sampled Gram matrix has numerical rank "
            f"{first}; reduce the eigenfunction count or use more landmarks",
            config_key="n_eigenfunctions",
            config_value=k,
            context={'eigenvalue_index': first,
                     'eigenvalue': leading[first].item(),
                     'threshold': threshold}
        )

    norm_factor = n_landmarks / domain_size
    matrix = math.sqrt(norm_factor) * (eigenvectors[:, :k] / leading.unsqueeze(0))
    renormalised = leading / norm_factor

    return NystromExtension(matrix=matrix, eigenvalues=renormalised, norm_factor=norm_factor)
