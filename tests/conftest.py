"""Shared test fixtures for the kerneleig test suite.

This module provides common fixtures and reference kernels used across all tests.
"""

import os
import shutil
import sys
import tempfile
from pathlib import Path

import pytest
import torch

# Add the project root to the Python path
sys.path.insert(0, str(Path(__file__).parent.parent))

from kerneleig.domain import Domain, PointSetRepresenter
from kerneleig.kernels import DeltaKernel, GaussianKernel, UncorrelatedMatrixValuedKernel
from kerneleig.utils.logging import shutdown_logging
from kerneleig.utils.profiling import get_profile_manager


@pytest.fixture(scope="session", autouse=True)
def test_environment():
    """Set up test environment."""
    os.environ["KERNELEIG_TEST_MODE"] = "true"

    # Keep tests on CPU unless explicitly requested
    if "KERNELEIG_TEST_GPU" not in os.environ:
        os.environ["CUDA_VISIBLE_DEVICES"] = ""

    yield

    if "KERNELEIG_TEST_MODE" in os.environ:
        del os.environ["KERNELEIG_TEST_MODE"]


@pytest.fixture(scope="function", autouse=True)
def cleanup_logging():
    """Clean up logging after each test."""
    yield
    shutdown_logging()


@pytest.fixture(scope="function", autouse=True)
def cleanup_profiling():
    """Clean up profiling after each test."""
    yield
    get_profile_manager().clear_results()


@pytest.fixture
def temp_dir():
    """Create a temporary directory for test files."""
    temp_dir = tempfile.mkdtemp()
    yield Path(temp_dir)
    shutil.rmtree(temp_dir)


class FeatureKernel:
    """Matrix-valued PSD kernel k(x, y) = F(x) F(y)ᵀ with non-symmetric blocks.

    F(x) is a d x p matrix of smooth features of a scalar point, so
    k(x, y) = k(y, x)ᵀ holds but k(x, y) itself is not symmetric.
    """

    def __init__(self, dimension: int = 2, n_features: int = 6):
        self.dimension = dimension
        self.frequencies = torch.arange(1, dimension * n_features + 1, dtype=torch.float64).reshape(
            dimension, n_features
        )

    def features(self, x):
        x = torch.as_tensor(x, dtype=torch.float64).reshape(-1)[0]
        return torch.cos(self.frequencies * x) / self.frequencies

    def __call__(self, x, y):
        return self.features(x) @ self.features(y).T

    def get_dimension(self):
        return self.dimension


class CountingKernel:
    """Wraps a matrix-valued kernel and counts evaluations."""

    def __init__(self, kernel):
        self.kernel = kernel
        self.calls = 0

    def __call__(self, x, y):
        self.calls += 1
        return self.kernel(x, y)

    def get_dimension(self):
        return self.kernel.get_dimension()


@pytest.fixture
def generator():
    """Seeded random source."""
    return torch.Generator().manual_seed(1234)


@pytest.fixture
def line_points():
    """100 scalar points 0, 1, ..., 99 as a [100, 1] tensor."""
    return torch.arange(100, dtype=torch.float32).unsqueeze(1)


@pytest.fixture
def line_domain(line_points):
    return Domain(line_points)


@pytest.fixture
def line_representer(line_points):
    return PointSetRepresenter(line_points)


@pytest.fixture
def unit_interval_representer():
    """200 equally spaced scalar points on [0, 1]."""
    return PointSetRepresenter(torch.linspace(0.0, 1.0, 200).unsqueeze(1))


@pytest.fixture
def delta_kernel():
    """Scalar identity kernel wrapped as a 1 x 1 matrix-valued kernel."""
    return UncorrelatedMatrixValuedKernel(DeltaKernel(), dimension=1)


@pytest.fixture
def gaussian_kernel():
    """Gaussian kernel on scalar points, d = 1."""
    return UncorrelatedMatrixValuedKernel(GaussianKernel(sigma=0.3), dimension=1)


@pytest.fixture
def vector_gaussian_kernel():
    """Gaussian kernel with uncorrelated 3-dimensional output."""
    return UncorrelatedMatrixValuedKernel(GaussianKernel(sigma=0.3), dimension=3)


@pytest.fixture
def feature_kernel():
    return FeatureKernel(dimension=2, n_features=6)


def assert_tensor_equal(tensor1, tensor2, rtol=1e-5, atol=1e-8):
    """Assert tensors are equal within tolerance."""
    assert torch.allclose(tensor1, tensor2, rtol=rtol, atol=atol)


pytest.assert_tensor_equal = assert_tensor_equal
