"""kerneleig: Nyström eigenfunction approximation for matrix-valued kernels

This package approximates the leading eigenfunctions and eigenvalues of a
symmetric positive semi-definite, matrix-valued kernel operator over a large
domain without forming the full kernel matrix. It includes:

- Random landmark subsampling with an explicit, seedable random source
- Exactly symmetric block Gram matrix assembly
- Pluggable truncated eigensolvers (randomized, dense, Lanczos)
- Nyström extension to arbitrary domain points
- Scalar and matrix-valued reference kernels
"""

__version__ = "0.1.0"

from .domain import Domain, PointSetRepresenter
from .kernels import (
    GaussianKernel,
    DeltaKernel,
    UncorrelatedMatrixValuedKernel,
    SumKernel,
    ProductKernel,
    ScaledKernel,
)
from .spectral import (
    RandomizedEigensolver,
    ExactEigensolver,
    LanczosEigensolver,
    get_eigensolver,
)
from .nystrom import NystromApproximation, sample_landmarks, build_gram_matrix, build_extension

from .utils.logging import setup_logger
from .utils.exceptions import (
    KernelEigError,
    ValidationError,
    ConfigurationError,
    ComputationError,
    ContractError,
)

__all__ = [
    "__version__",
    # Collaborators
    "Domain",
    "PointSetRepresenter",
    "GaussianKernel",
    "DeltaKernel",
    "UncorrelatedMatrixValuedKernel",
    "SumKernel",
    "ProductKernel",
    "ScaledKernel",
    # Eigensolvers
    "RandomizedEigensolver",
    "ExactEigensolver",
    "LanczosEigensolver",
    "get_eigensolver",
    # Nyström
    "NystromApproximation",
    "sample_landmarks",
    "build_gram_matrix",
    "build_extension",
    # Utilities
    "setup_logger",
    # Exceptions
    "KernelEigError",
    "ValidationError",
    "ConfigurationError",
    "ComputationError",
    "ContractError",
]
