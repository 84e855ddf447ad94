"""Eigen-decomposition strategies used by the Nyström approximation."""

from .eigensolver import (
    Eigensolver,
    RandomizedEigensolver,
    ExactEigensolver,
    LanczosEigensolver,
    get_eigensolver,
)

__all__ = [
    "Eigensolver",
    "RandomizedEigensolver",
    "ExactEigensolver",
    "LanczosEigensolver",
    "get_eigensolver",
]
