"""Scalar-valued kernels."""

from typing import Any

import torch

from ..utils.exceptions import ValidationError
from ..utils.validation import as_tensor


class GaussianKernel:
    """
    Gaussian (squared exponential) kernel.

    k(x, y) = exp(-||x - y||² / σ²)

    Parameters:
        sigma: Bandwidth parameter (length scale)
    """

    def __init__(self, sigma: float = 1.0):
        if sigma <= 0:
            raise ValidationError("sigma must be positive", parameter="sigma", actual=sigma)
        self._sigma = float(sigma)
        self._sigma2 = self._sigma ** 2

    @property
    def sigma(self) -> float:
        return self._sigma

    def __call__(self, x: Any, y: Any) -> float:
        x = as_tensor(x, dtype=torch.float64)
        y = as_tensor(y, dtype=torch.float64, device=x.device)
        if x.shape != y.shape:
            raise ValidationError(
                "Gaussian kernel points must have the same shape",
                parameter="y",
                expected=tuple(x.shape),
                actual=tuple(y.shape)
            )
        sq_distance = torch.sum((x - y) ** 2)
        return float(torch.exp(-sq_distance / self._sigma2))

    def __repr__(self) -> str:
        return f"GaussianKernel(sigma={self._sigma})"


class DeltaKernel:
    """
    Kronecker delta kernel.

    k(x, y) = 1 if x == y (elementwise) else 0

    Its Gram matrix over distinct points is the identity, which makes it a
    convenient reference kernel with a known spectrum.
    """

    def __call__(self, x: Any, y: Any) -> float:
        if x is y:
            return 1.0
        x = as_tensor(x)
        y = as_tensor(y, device=x.device)
        if x.shape != y.shape:
            return 0.0
        return 1.0 if bool(torch.all(x == y)) else 0.0

    def __repr__(self) -> str:
        return "DeltaKernel()"
