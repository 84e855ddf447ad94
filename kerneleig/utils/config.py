"""Configuration constants for kerneleig.

This module centralizes the numerical tolerances and defaults used by the
sampler, the eigensolvers and the Nyström approximation.
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class NumericalConstants:
    """Numerical stability and tolerance constants."""

    # Eigenvalues at the truncation boundary must exceed
    # max(MIN_EIGENVALUE, RELATIVE_EIGENVALUE_TOLERANCE * largest eigenvalue)
    MIN_EIGENVALUE: float = 1e-10
    RELATIVE_EIGENVALUE_TOLERANCE: float = 1e-7

    # Symmetry check for externally supplied matrices
    SYMMETRY_TOLERANCE: float = 1e-8

    # Orthonormality check for eigensolver output
    ORTHONORMALITY_TOLERANCE: float = 1e-6


@dataclass(frozen=True)
class NystromConstants:
    """Nyström approximation constants."""

    DEFAULT_LANDMARKS: int = 500

    # Gram matrix and decomposition precision; results are cast to WORKING_DTYPE
    GRAM_DTYPE: str = "float64"
    WORKING_DTYPE: str = "float32"


@dataclass(frozen=True)
class EigensolverConstants:
    """Eigensolver defaults."""

    DEFAULT_SOLVER: str = "randomized"

    # Randomized range finder: sketch size = OVERSAMPLING_FACTOR * target rank
    OVERSAMPLING_FACTOR: int = 2
    POWER_ITERATIONS: int = 1

    # scipy eigsh tolerance (0 = machine precision)
    LANCZOS_TOLERANCE: float = 0.0


@dataclass(frozen=True)
class PerformanceConstants:
    """Performance and timing constants."""

    DEFAULT_TIME_THRESHOLD: float = 60.0
    GRAM_TIME_THRESHOLD: float = 300.0
    DEFAULT_MEMORY_THRESHOLD_MB: float = 1000.0

    # Most recent profiling results kept by the global ProfileManager
    MAX_PROFILE_RESULTS: int = 1000


class Config:
    """Global configuration object containing all constants."""

    numerical = NumericalConstants()
    nystrom = NystromConstants()
    eigensolver = EigensolverConstants()
    performance = PerformanceConstants()
