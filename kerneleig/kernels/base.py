"""Base kernel protocols and interfaces."""

from typing import Any, Protocol, runtime_checkable

import torch


@runtime_checkable
class ScalarValuedKernel(Protocol):
    """Protocol for symmetric scalar kernels k(x, y) -> float."""

    def __call__(self, x: Any, y: Any) -> float:
        ...


@runtime_checkable
class MatrixValuedKernel(Protocol):
    """Protocol for matrix-valued kernels.

    ``kernel(x, y)`` returns a ``d x d`` tensor with
    ``kernel(x, y) == kernel(y, x).T``, where ``d = kernel.get_dimension()``.
    """

    def __call__(self, x: Any, y: Any) -> torch.Tensor:
        ...

    def get_dimension(self) -> int:
        ...
