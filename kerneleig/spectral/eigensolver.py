"""Truncated eigen-decomposition strategies for symmetric PSD matrices.

Every strategy implements one operation,

    decompose(matrix, target_rank, generator=None) -> (U, D)

returning at least ``target_rank`` orthonormal eigenvector columns ``U`` and
the matching non-negative eigenvalues ``D`` in descending order. Strategies
that draw random numbers take them from ``generator`` only, so the result is
reproducible for a fixed seed.

Available strategies:
- RandomizedEigensolver: randomized range finder with power iteration
  (Halko, Martinsson & Tropp, 2011). Default.
- ExactEigensolver: dense ``torch.linalg.eigh``.
- LanczosEigensolver: ``scipy.sparse.linalg.eigsh``.
"""

from typing import Optional, Protocol, Tuple, runtime_checkable

import numpy as np
import torch
from scipy.sparse.linalg import ArpackError, ArpackNoConvergence, eigsh

from ..utils.config import Config
from ..utils.exceptions import ComputationError, ConfigurationError, ValidationError
from ..utils.logging import setup_logger
from ..utils.validation import validate_count, validate_square_matrix, validate_symmetric


logger = setup_logger(__name__)


@runtime_checkable
class Eigensolver(Protocol):
    """Protocol for truncated symmetric eigen-decomposition strategies."""

    def decompose(
        self,
        matrix: torch.Tensor,
        target_rank: int,
        generator: Optional[torch.Generator] = None
    ) -> Tuple[torch.Tensor, torch.Tensor]:
        ...


def _check_request(matrix: torch.Tensor, target_rank: int) -> int:
    n = validate_square_matrix(matrix, "matrix")
    scale = max(1.0, matrix.abs().max().item()) if n else 1.0
    validate_symmetric(matrix, "matrix", atol=Config.numerical.SYMMETRY_TOLERANCE * scale)
    target_rank = validate_count("target_rank", target_rank, minimum=1)
    if target_rank > n:
        raise ValidationError(
            f"target_rank {target_rank} exceeds matrix size {n}",
            parameter="target_rank",
            expected=f"<= {n}",
            actual=target_rank
        )
    return n


class RandomizedEigensolver:
    """Randomized eigen-decomposition of a symmetric PSD matrix.

    A Gaussian sketch of ``l = oversampling_factor * target_rank`` columns
    (capped at the matrix size) is pushed through ``power_iterations`` rounds
    of ``A Aᵀ``, orthonormalised, and the small projected matrix ``Qᵀ A`` is
    decomposed exactly. For a symmetric PSD matrix the singular values of the
    projection are the eigenvalues.

    All ``l`` approximate pairs are returned; callers truncate.

    Attributes:
        oversampling_factor: Sketch size as a multiple of the target rank
        power_iterations: Number of power iterations (q)
    """

    def __init__(
        self,
        oversampling_factor: int = Config.eigensolver.OVERSAMPLING_FACTOR,
        power_iterations: int = Config.eigensolver.POWER_ITERATIONS
    ):
        self.oversampling_factor = validate_count("oversampling_factor", oversampling_factor, minimum=1)
        self.power_iterations = validate_count("power_iterations", power_iterations, minimum=0)

    def decompose(
        self,
        matrix: torch.Tensor,
        target_rank: int,
        generator: Optional[torch.Generator] = None
    ) -> Tuple[torch.Tensor, torch.Tensor]:
        """Compute approximate leading eigenpairs.

        Args:
            matrix: Symmetric PSD matrix [n, n]
            target_rank: Number of eigenpairs required (<= n)
            generator: Random source for the Gaussian sketch

        Returns:
            Tuple (U [n, l], D [l]) with l >= target_rank, D descending
        """
        n = _check_request(matrix, target_rank)
        A = matrix.to(torch.float64)
        sketch_size = min(n, self.oversampling_factor * target_rank)

        # Sketch drawn on CPU so that a CPU generator can drive any device
        omega = torch.randn(n, sketch_size, generator=generator, dtype=torch.float64)
        Y = A @ omega.to(A.device)

        for _ in range(self.power_iterations):
            Q, _ = torch.linalg.qr(Y, mode='reduced')
            Z, _ = torch.linalg.qr(A.T @ Q, mode='reduced')
            Y = A @ Z

        Q, _ = torch.linalg.qr(Y, mode='reduced')
        B = Q.T @ A

        U_small, singular_values, _ = torch.linalg.svd(B, full_matrices=False)
        U = Q @ U_small

        logger.debug(
            f"Randomized decomposition: n={n}, rank={target_rank}, sketch={sketch_size}, "
            f"q={self.power_iterations}, top eigenvalue={singular_values[0].item():.4e}"
        )
        return U, singular_values


class ExactEigensolver:
    """Dense symmetric eigen-decomposition via ``torch.linalg.eigh``.

    Suitable for small matrices and as a reference for the approximate
    strategies. Tiny negative eigenvalues produced by round-off are clipped
    to zero.
    """

    def decompose(
        self,
        matrix: torch.Tensor,
        target_rank: int,
        generator: Optional[torch.Generator] = None
    ) -> Tuple[torch.Tensor, torch.Tensor]:
        _check_request(matrix, target_rank)
        A = matrix.to(torch.float64)

        eigenvalues, eigenvectors = torch.linalg.eigh(A)
        eigenvalues = torch.flip(eigenvalues, dims=[0])[:target_rank]
        eigenvectors = torch.flip(eigenvectors, dims=[1])[:, :target_rank]

        return eigenvectors, torch.clamp(eigenvalues, min=0.0)


class LanczosEigensolver:
    """Implicitly restarted Lanczos via ``scipy.sparse.linalg.eigsh``.

    eigsh requires ``target_rank < n - 1`` in practice; larger requests are
    delegated to ExactEigensolver. The starting vector is drawn from the
    generator so runs are reproducible.
    """

    def __init__(self, tol: float = Config.eigensolver.LANCZOS_TOLERANCE):
        self.tol = tol

    def decompose(
        self,
        matrix: torch.Tensor,
        target_rank: int,
        generator: Optional[torch.Generator] = None
    ) -> Tuple[torch.Tensor, torch.Tensor]:
        n = _check_request(matrix, target_rank)
        if target_rank >= n - 1:
            logger.debug(f"Lanczos rank {target_rank} too close to n={n}, using dense eigh")
            return ExactEigensolver().decompose(matrix, target_rank)

        A = matrix.detach().to(device="cpu", dtype=torch.float64).numpy()
        v0 = torch.rand(n, generator=generator, dtype=torch.float64).numpy() + 0.5

        try:
            eigenvalues, eigenvectors = eigsh(A, k=target_rank, which='LA', tol=self.tol, v0=v0)
        except (ArpackError, ArpackNoConvergence) as e:
            raise ComputationError(
                f"Lanczos eigen-decomposition failed: {e}",
                operation="eigsh",
                values={'n': n, 'target_rank': target_rank}
            ) from e

        order = np.argsort(eigenvalues)[::-1]
        eigenvalues = np.clip(eigenvalues[order], 0.0, None)
        eigenvectors = eigenvectors[:, order]

        return (
            torch.from_numpy(np.ascontiguousarray(eigenvectors)).to(matrix.device),
            torch.from_numpy(np.ascontiguousarray(eigenvalues)).to(matrix.device),
        )


_SOLVERS = {
    'randomized': RandomizedEigensolver,
    'exact': ExactEigensolver,
    'lanczos': LanczosEigensolver,
}


def get_eigensolver(name: str = Config.eigensolver.DEFAULT_SOLVER, **kwargs) -> Eigensolver:
    """Create an eigensolver by name.

    Args:
        name: One of 'randomized', 'exact', 'lanczos'
        **kwargs: Passed to the solver constructor

    Returns:
        Eigensolver instance

    Raises:
        ConfigurationError: If name is unknown
    """
    try:
        solver_cls = _SOLVERS[name.lower()]
    except KeyError:
        raise ConfigurationError(
            f"Unknown eigensolver: {name}",
            config_key="eigensolver",
            config_value=name,
            context={'available': sorted(_SOLVERS)}
        ) from None
    return solver_cls(**kwargs)
