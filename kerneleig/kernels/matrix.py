"""Matrix-valued kernels built from scalar kernels and from each other."""

from typing import Any

import torch

from .base import MatrixValuedKernel, ScalarValuedKernel
from ..utils.exceptions import ValidationError
from ..utils.validation import validate_count


class UncorrelatedMatrixValuedKernel:
    """
    Matrix-valued kernel with independent, identically distributed outputs.

    K(x, y) = k(x, y) · I_d

    Parameters:
        scalar_kernel: Scalar kernel k
        dimension: Output dimension d
    """

    def __init__(self, scalar_kernel: ScalarValuedKernel, dimension: int):
        self._scalar_kernel = scalar_kernel
        self._dimension = validate_count("dimension", dimension, minimum=1)
        self._identity = torch.eye(self._dimension, dtype=torch.float64)

    def __call__(self, x: Any, y: Any) -> torch.Tensor:
        return self._scalar_kernel(x, y) * self._identity

    def get_dimension(self) -> int:
        return self._dimension

    def __repr__(self) -> str:
        return f"UncorrelatedMatrixValuedKernel({self._scalar_kernel!r}, dimension={self._dimension})"


def _check_same_dimension(k1: MatrixValuedKernel, k2: MatrixValuedKernel) -> int:
    if k1.get_dimension() != k2.get_dimension():
        raise ValidationError(
            "Kernels must have the same dimension",
            parameter="kernel",
            expected=k1.get_dimension(),
            actual=k2.get_dimension()
        )
    return k1.get_dimension()


class SumKernel:
    """K(x, y) = K1(x, y) + K2(x, y)"""

    def __init__(self, k1: MatrixValuedKernel, k2: MatrixValuedKernel):
        self._dimension = _check_same_dimension(k1, k2)
        self._k1 = k1
        self._k2 = k2

    def __call__(self, x: Any, y: Any) -> torch.Tensor:
        return self._k1(x, y) + self._k2(x, y)

    def get_dimension(self) -> int:
        return self._dimension


class ProductKernel:
    """
    K(x, y) = K1(x, y) @ K2(x, y)

    The block product is only symmetric (K(x, y) = K(y, x)ᵀ) when the two
    blocks commute, e.g. when either kernel is uncorrelated.
    """

    def __init__(self, k1: MatrixValuedKernel, k2: MatrixValuedKernel):
        self._dimension = _check_same_dimension(k1, k2)
        self._k1 = k1
        self._k2 = k2

    def __call__(self, x: Any, y: Any) -> torch.Tensor:
        return self._k1(x, y) @ self._k2(x, y)

    def get_dimension(self) -> int:
        return self._dimension


class ScaledKernel:
    """K(x, y) = scale · K1(x, y), scale >= 0"""

    def __init__(self, kernel: MatrixValuedKernel, scale: float):
        if scale < 0:
            raise ValidationError("scale must be non-negative", parameter="scale", actual=scale)
        self._kernel = kernel
        self._scale = float(scale)

    def __call__(self, x: Any, y: Any) -> torch.Tensor:
        return self._scale * self._kernel(x, y)

    def get_dimension(self) -> int:
        return self._kernel.get_dimension()
