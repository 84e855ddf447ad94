"""Nyström approximation of the eigenfunctions of a matrix-valued kernel.

The kernel operator over a domain of N points is approximated from M
randomly chosen landmarks:

1. sample M landmarks from the domain,
2. assemble the (M·d) x (M·d) block Gram matrix in double precision,
3. decompose it into its leading min(k·d, M·d) eigenpairs,
4. fold the point-independent factors into an (M·d) x k extension matrix.

After construction the object is immutable. Evaluating the eigenfunctions at
a point costs M kernel evaluations and one (d x M·d) @ (M·d x k) product, and
is safe to call from several threads as long as the kernel is.

Example:
    >>> kernel = UncorrelatedMatrixValuedKernel(GaussianKernel(sigma=0.3), dimension=2)
    >>> representer = PointSetRepresenter(torch.rand(1000, 3))
    >>> approx = NystromApproximation(representer, kernel, n_eigenfunctions=5,
    ...                               n_landmarks=100, generator=torch.Generator().manual_seed(0))
    >>> approx.compute_eigenfunctions_at_point(torch.rand(3)).shape
    torch.Size([2, 5])
"""

from typing import Any, Iterable, Optional, Tuple, Union

import torch

from .extension import build_extension
from .gram import build_gram_matrix, kernel_row_block
from .sampling import sample_landmarks
from ..domain import DomainLike, Representer
from ..kernels.base import MatrixValuedKernel
from ..spectral.eigensolver import Eigensolver, get_eigensolver
from ..utils.config import Config
from ..utils.device import compute_device_for, detect_optimal_device
from ..utils.exceptions import ConfigurationError, ContractError, ValidationError, validate_tensor_values
from ..utils.logging import setup_logger
from ..utils.profiling import profile_memory, profile_time
from ..utils.validation import resolve_dtype, validate_count, validate_eigenpairs


logger = setup_logger(__name__)


class NystromApproximation:
    """Low-rank eigenfunction approximation of a matrix-valued kernel.

    Holds references to the representer and the kernel; both must outlive
    this object. Cached tensors are returned without copying and must be
    treated as read-only.

    Attributes:
        landmarks: Sampled landmark points, in block order
        extension_matrix: Precomputed extension matrix [(M·d), k]
        n_eigenfunctions: Number k of eigenfunctions
        n_landmarks: Number M of landmarks actually used
        domain_size: Number N of domain points
        kernel_dimension: Kernel output dimension d
        norm_factor: M / N
    """

    def __init__(
        self,
        representer: Representer,
        kernel: MatrixValuedKernel,
        n_eigenfunctions: int,
        n_landmarks: int = Config.nystrom.DEFAULT_LANDMARKS,
        eigensolver: Optional[Union[str, Eigensolver]] = None,
        generator: Optional[torch.Generator] = None,
        dtype: Union[str, torch.dtype] = Config.nystrom.WORKING_DTYPE,
        device: Optional[Union[str, torch.device]] = None
    ):
        """Build the approximation.

        Args:
            representer: Provides the domain via get_domain()
            kernel: Matrix-valued kernel with get_dimension()
            n_eigenfunctions: Number k of eigenfunctions to approximate (>= 1)
            n_landmarks: Requested landmark count, clamped to the domain size
            eigensolver: Strategy instance or name; randomized by default
            generator: Random source for landmark sampling and the eigensolver.
                Pass a seeded generator for reproducible results.
            dtype: Working precision of the cached results
            device: Device for the cached results (auto-detected if None)

        Raises:
            ValidationError: If counts or the kernel dimension are invalid
            ConfigurationError: If no landmarks are available, more than M·d
                eigenfunctions are requested, or an eigenvalue at the cutoff
                is not safely positive
            ContractError: If the kernel, domain or eigensolver break their
                contracts
        """
        self._representer = representer
        self._kernel = kernel
        self._n_eigenfunctions = validate_count("n_eigenfunctions", n_eigenfunctions, minimum=1)
        requested_landmarks = validate_count("n_landmarks", n_landmarks, minimum=0)
        self._kernel_dimension = validate_count("kernel dimension", kernel.get_dimension(), minimum=1)
        self._dtype = resolve_dtype(dtype)
        self._device = detect_optimal_device(device)

        if eigensolver is None or isinstance(eigensolver, str):
            eigensolver = get_eigensolver(eigensolver or Config.eigensolver.DEFAULT_SOLVER)
        self._eigensolver = eigensolver

        domain = representer.get_domain()
        self._domain_size = domain.get_number_of_points()

        self._landmarks = self._sample_landmarks(domain, requested_landmarks, generator)
        self._check_achievable()

        gram = self._build_gram()
        eigenvectors, eigenvalues = self._decompose(gram, generator)

        extension = build_extension(
            eigenvectors,
            eigenvalues,
            self._n_eigenfunctions,
            self.n_landmarks,
            self._domain_size
        )
        self._extension_matrix = extension.matrix
        self._eigenvalues = extension.eigenvalues
        self._norm_factor = extension.norm_factor

        logger.info(
            f"Nyström approximation ready: {self._n_eigenfunctions} eigenfunctions, "
            f"{self.n_landmarks}/{self._domain_size} landmarks, kernel dimension "
            f"{self._kernel_dimension}, leading eigenvalue {self._eigenvalues[0].item():.4e}"
        )

    @classmethod
    def create(
        cls,
        representer: Representer,
        kernel: MatrixValuedKernel,
        n_eigenfunctions: int,
        n_landmarks: int = Config.nystrom.DEFAULT_LANDMARKS,
        **kwargs
    ) -> "NystromApproximation":
        """Factory mirroring the constructor."""
        return cls(representer, kernel, n_eigenfunctions, n_landmarks, **kwargs)

    # Construction stages

    @profile_time(time_threshold_seconds=Config.performance.DEFAULT_TIME_THRESHOLD)
    def _sample_landmarks(
        self,
        domain: DomainLike,
        n_landmarks: int,
        generator: Optional[torch.Generator]
    ) -> Tuple[Any, ...]:
        landmarks = tuple(sample_landmarks(domain, n_landmarks, generator=generator))
        logger.debug(f"Using {len(landmarks)} of {n_landmarks} requested landmarks")
        return landmarks

    def _check_achievable(self) -> None:
        m, d, k = self.n_landmarks, self._kernel_dimension, self._n_eigenfunctions

        if m == 0:
            raise ConfigurationError(
                f"No landmarks available to approximate {k} eigenfunctions",
                config_key="n_landmarks",
                config_value=m,
                context={'domain_size': self._domain_size}
            )

        if k > m * d:
            raise ConfigurationError(
                f"Cannot approximate {k} eigenfunctions from {m} landmarks of dimension {d}: "
                f"at most {m * d} are available",
                config_key="n_eigenfunctions",
                config_value=k,
                context={'n_landmarks': m, 'kernel_dimension': d}
            )

    @profile_memory(memory_threshold_mb=Config.performance.DEFAULT_MEMORY_THRESHOLD_MB)
    @profile_time(time_threshold_seconds=Config.performance.GRAM_TIME_THRESHOLD)
    def _build_gram(self) -> torch.Tensor:
        gram_device = compute_device_for(self._device, 'float64')
        gram_dtype = resolve_dtype(Config.nystrom.GRAM_DTYPE)
        return build_gram_matrix(self._kernel, self._landmarks, device=gram_device, dtype=gram_dtype)

    @profile_time(time_threshold_seconds=Config.performance.DEFAULT_TIME_THRESHOLD)
    def _decompose(
        self,
        gram: torch.Tensor,
        generator: Optional[torch.Generator]
    ) -> Tuple[torch.Tensor, torch.Tensor]:
        target_rank = min(self._n_eigenfunctions * self._kernel_dimension, gram.shape[0])
        logger.debug(f"Decomposing {gram.shape[0]}x{gram.shape[0]} Gram matrix to rank {target_rank}")

        eigenvectors, eigenvalues = self._eigensolver.decompose(gram, target_rank, generator=generator)

        try:
            validate_eigenpairs(eigenvectors, eigenvalues, target_rank)
        except ValidationError as e:
            raise ContractError(
                f"Eigensolver output violates its contract: {e.message}",
                collaborator=type(self._eigensolver).__name__,
                context=dict(e.context)
            ) from e

        eigenvectors = eigenvectors.to(dtype=self._dtype, device=self._device)
        eigenvalues = eigenvalues.to(dtype=self._dtype, device=self._device)
        validate_tensor_values(eigenvectors, name="eigenvectors", operation="decompose")
        return eigenvectors, eigenvalues

    # Queries

    def compute_eigenfunctions_at_point(self, point: Any) -> torch.Tensor:
        """Evaluate all approximate eigenfunctions at one point.

        Args:
            point: Any point the kernel accepts (landmark or not)

        Returns:
            Tensor [d, k]; column j is the d-dimensional value of
            eigenfunction j at the point
        """
        row_block = kernel_row_block(
            self._kernel, point, self._landmarks, dtype=self._dtype, device=self._device
        )
        return row_block @ self._extension_matrix

    def compute_eigenfunctions_at_points(self, points: Union[Iterable[Any], torch.Tensor]) -> torch.Tensor:
        """Evaluate all approximate eigenfunctions at several points.

        A 1-D tensor is read as a batch of scalar points when the domain points
        have shape [1], and as one point when it has the domain point shape.

        Args:
            points: Iterable of points, or a 2-D tensor whose rows are points

        Returns:
            Tensor [n_points, d, k]

        Raises:
            ValidationError: If a 1-D tensor matches neither reading
        """
        if isinstance(points, torch.Tensor):
            points = self._split_points(points)

        values = [self.compute_eigenfunctions_at_point(point) for point in points]
        if not values:
            return torch.empty(
                0, self._kernel_dimension, self._n_eigenfunctions,
                dtype=self._dtype, device=self._device
            )
        return torch.stack(values)

    def _split_points(self, points: torch.Tensor) -> Tuple[torch.Tensor, ...]:
        if points.dim() != 1:
            return points.unbind(0)

        point_shape = getattr(self._landmarks[0], 'shape', None)
        if point_shape is not None and tuple(point_shape) == (1,):
            return points.unsqueeze(1).unbind(0)
        if point_shape is not None and tuple(point_shape) == tuple(points.shape):
            return (points,)

        raise ValidationError(
            "1-D point tensor matches neither a batch of scalar points nor one domain point",
            parameter="points",
            expected=tuple(point_shape) if point_shape is not None else None,
            actual=tuple(points.shape)
        )

    def get_eigenvalues(self) -> torch.Tensor:
        """Eigenvalues of the kernel operator over the full domain [k]."""
        return self._eigenvalues

    @property
    def landmarks(self) -> Tuple[Any, ...]:
        return self._landmarks

    @property
    def extension_matrix(self) -> torch.Tensor:
        return self._extension_matrix

    @property
    def n_eigenfunctions(self) -> int:
        return self._n_eigenfunctions

    @property
    def n_landmarks(self) -> int:
        return len(self._landmarks)

    @property
    def domain_size(self) -> int:
        return self._domain_size

    @property
    def kernel_dimension(self) -> int:
        return self._kernel_dimension

    @property
    def norm_factor(self) -> float:
        return self._norm_factor

    @property
    def representer(self) -> Representer:
        return self._representer

    @property
    def kernel(self) -> MatrixValuedKernel:
        return self._kernel

    def __repr__(self) -> str:
        return (
            f"NystromApproximation(n_eigenfunctions={self._n_eigenfunctions}, "
            f"n_landmarks={self.n_landmarks}, domain_size={self._domain_size}, "
            f"kernel_dimension={self._kernel_dimension})"
        )
