"""Block Gram matrix assembly for matrix-valued kernels.

For M landmarks and a kernel of dimension d, the Gram matrix is the dense
(M·d) x (M·d) matrix whose (i, j) block of size d x d is
k(landmark_i, landmark_j). Only blocks with i <= j are evaluated; block (j, i)
is written as the transpose of block (i, j), so the result is exactly
symmetric.
"""

from typing import Any, Optional, Sequence

import torch

from ..kernels.base import MatrixValuedKernel
from ..utils.config import Config
from ..utils.exceptions import ContractError, validate_tensor_values
from ..utils.logging import setup_logger
from ..utils.validation import as_tensor


logger = setup_logger(__name__)


def evaluate_kernel_block(
    kernel: MatrixValuedKernel,
    x: Any,
    y: Any,
    dimension: int,
    dtype: torch.dtype,
    device: Optional[torch.device] = None
) -> torch.Tensor:
    """Evaluate k(x, y) and check it is a d x d block.

    Raises:
        ContractError: If the kernel result is not a dimension x dimension matrix
    """
    block = as_tensor(kernel(x, y), dtype=dtype, device=device)
    if tuple(block.shape) != (dimension, dimension):
        raise ContractError(
            "Kernel returned a block of the wrong shape",
            collaborator="kernel",
            expected=(dimension, dimension),
            actual=tuple(block.shape)
        )
    return block


def _check_diagonal_block(block: torch.Tensor, index: int) -> None:
    """k(x, x) must equal its own transpose."""
    scale = max(1.0, block.abs().nan_to_num().max().item())
    atol = Config.numerical.SYMMETRY_TOLERANCE * scale
    if not torch.allclose(block, block.T, rtol=0.0, atol=atol, equal_nan=True):
        raise ContractError(
            "Kernel returned a non-symmetric block k(x, x)",
            collaborator="kernel",
            context={'landmark_index': index,
                     'max_asymmetry': (block - block.T).abs().max().item()}
        )


def build_gram_matrix(
    kernel: MatrixValuedKernel,
    landmarks: Sequence[Any],
    device: Optional[torch.device] = None,
    dtype: torch.dtype = torch.float64
) -> torch.Tensor:
    """Assemble the symmetric block Gram matrix over the landmarks.

    Args:
        kernel: Matrix-valued kernel of dimension d
        landmarks: Ordered landmark points (block j <-> landmarks[j])
        device: Device for the result
        dtype: Precision of the result (double by default)

    Returns:
        Gram matrix [(M·d), (M·d)]

    Raises:
        ContractError: If any kernel block has the wrong shape, or a diagonal
            block k(l_i, l_i) is not symmetric
        ComputationError: If the kernel produced NaN or infinite values
    """
    d = kernel.get_dimension()
    m = len(landmarks)
    gram = torch.zeros(m * d, m * d, dtype=dtype, device=device)

    for i in range(m):
        rows = slice(i * d, (i + 1) * d)
        for j in range(i, m):
            cols = slice(j * d, (j + 1) * d)
            block = evaluate_kernel_block(kernel, landmarks[i], landmarks[j], d, dtype, device)
            if i == j:
                _check_diagonal_block(block, i)
            gram[rows, cols] = block
            if i != j:
                gram[cols, rows] = block.T

    validate_tensor_values(gram, name="gram", operation="build_gram_matrix")
    logger.debug(f"Assembled {m * d}x{m * d} Gram matrix from {m * (m + 1) // 2} kernel evaluations")
    return gram


def kernel_row_block(
    kernel: MatrixValuedKernel,
    point: Any,
    landmarks: Sequence[Any],
    dtype: torch.dtype,
    device: Optional[torch.device] = None
) -> torch.Tensor:
    """Build [k(x, l_0) | k(x, l_1) | ... | k(x, l_{M-1})] for a query point.

    Args:
        kernel: Matrix-valued kernel of dimension d
        point: Query point x
        landmarks: Ordered landmark points
        dtype: Precision of the result
        device: Device for the result

    Returns:
        Row block [d, (M·d)]
    """
    d = kernel.get_dimension()
    blocks = [
        evaluate_kernel_block(kernel, point, landmark, d, dtype, device)
        for landmark in landmarks
    ]
    return torch.cat(blocks, dim=1)
