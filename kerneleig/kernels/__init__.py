"""Kernel implementations for kerneleig."""

from .base import ScalarValuedKernel, MatrixValuedKernel
from .scalar import GaussianKernel, DeltaKernel
from .matrix import (
    UncorrelatedMatrixValuedKernel,
    SumKernel,
    ProductKernel,
    ScaledKernel,
)

__all__ = [
    "ScalarValuedKernel",
    "MatrixValuedKernel",
    "GaussianKernel",
    "DeltaKernel",
    "UncorrelatedMatrixValuedKernel",
    "SumKernel",
    "ProductKernel",
    "ScaledKernel",
]
