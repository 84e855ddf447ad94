"""Nyström approximation of kernel eigenfunctions.

This module contains the landmark sampler, the block Gram matrix builder,
the extension builder and the NystromApproximation that ties them together.
"""

from .sampling import sample_landmarks, LandmarkSampler
from .gram import build_gram_matrix, kernel_row_block
from .extension import build_extension, NystromExtension
from .approximation import NystromApproximation

__all__ = [
    "sample_landmarks",
    "LandmarkSampler",
    "build_gram_matrix",
    "kernel_row_block",
    "build_extension",
    "NystromExtension",
    "NystromApproximation",
]
