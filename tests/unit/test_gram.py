"""Unit tests for block Gram matrix assembly."""

import pytest
import torch

from kerneleig.nystrom.gram import build_gram_matrix, evaluate_kernel_block, kernel_row_block
from kerneleig.utils.exceptions import ComputationError, ContractError

from tests.conftest import CountingKernel


class BadShapeKernel:

    def __call__(self, x, y):
        return torch.eye(3)

    def get_dimension(self):
        return 2


class SkewKernel:

    def __call__(self, x, y):
        return torch.tensor([[1.0, 0.5], [0.0, 1.0]])

    def get_dimension(self):
        return 2


class NaNKernel:

    def __call__(self, x, y):
        return torch.full((1, 1), float("nan"))

    def get_dimension(self):
        return 1


@pytest.fixture
def landmarks():
    return list(torch.linspace(0.0, 1.0, 6).unsqueeze(1).unbind(0))


class TestBuildGramMatrix:

    def test_shape_and_dtype(self, feature_kernel, landmarks):
        gram = build_gram_matrix(feature_kernel, landmarks)

        assert gram.shape == (12, 12)
        assert gram.dtype == torch.float64

    def test_exactly_symmetric(self, vector_gaussian_kernel, landmarks):
        gram = build_gram_matrix(vector_gaussian_kernel, landmarks)
        assert torch.equal(gram, gram.T)

    def test_off_diagonal_blocks_transposed(self, feature_kernel, landmarks):
        gram = build_gram_matrix(feature_kernel, landmarks)
        assert torch.equal(gram[0:2, 4:6], gram[4:6, 0:2].T)
        assert not torch.equal(gram[0:2, 4:6], gram[0:2, 4:6].T)

    def test_blocks_match_kernel(self, feature_kernel, landmarks):
        gram = build_gram_matrix(feature_kernel, landmarks)

        assert torch.allclose(gram[0:2, 4:6], feature_kernel(landmarks[0], landmarks[2]))
        assert torch.allclose(gram[4:6, 0:2], feature_kernel(landmarks[0], landmarks[2]).T)
        assert torch.allclose(gram[6:8, 6:8], feature_kernel(landmarks[3], landmarks[3]))

    def test_upper_triangle_evaluations(self, feature_kernel, landmarks):
        kernel = CountingKernel(feature_kernel)
        build_gram_matrix(kernel, landmarks)

        m = len(landmarks)
        assert kernel.calls == m * (m + 1) // 2

    def test_positive_semidefinite(self, feature_kernel, landmarks):
        gram = build_gram_matrix(feature_kernel, landmarks)
        assert torch.linalg.eigvalsh(gram).min() > -1e-10

    def test_delta_kernel_identity(self, delta_kernel, landmarks):
        gram = build_gram_matrix(delta_kernel, landmarks)
        assert torch.equal(gram, torch.eye(6, dtype=torch.float64))

    def test_float32(self, gaussian_kernel, landmarks):
        gram = build_gram_matrix(gaussian_kernel, landmarks, dtype=torch.float32)
        assert gram.dtype == torch.float32

    def test_empty_landmarks(self, gaussian_kernel):
        assert build_gram_matrix(gaussian_kernel, []).shape == (0, 0)

    def test_bad_block_shape(self, landmarks):
        with pytest.raises(ContractError, match="wrong shape") as exc_info:
            build_gram_matrix(BadShapeKernel(), landmarks)

        assert exc_info.value.context["collaborator"] == "kernel"
        assert exc_info.value.context["actual"] == (3, 3)

    def test_non_symmetric_diagonal_block(self, landmarks):
        with pytest.raises(ContractError, match="non-symmetric") as exc_info:
            build_gram_matrix(SkewKernel(), landmarks)

        assert exc_info.value.context["landmark_index"] == 0

    def test_nan_values(self, landmarks):
        with pytest.raises(ComputationError, match="NaN"):
            build_gram_matrix(NaNKernel(), landmarks)


class TestKernelRowBlock:

    def test_shape(self, feature_kernel, landmarks):
        row = kernel_row_block(feature_kernel, torch.tensor([0.25]), landmarks, dtype=torch.float64)
        assert row.shape == (2, 12)

    def test_matches_gram_row(self, feature_kernel, landmarks):
        gram = build_gram_matrix(feature_kernel, landmarks)
        row = kernel_row_block(feature_kernel, landmarks[1], landmarks, dtype=torch.float64)

        assert torch.allclose(row, gram[2:4, :])

    def test_scalar_point_object(self, delta_kernel, landmarks):
        row = kernel_row_block(delta_kernel, landmarks[4], landmarks, dtype=torch.float32)

        assert row.dtype == torch.float32
        assert torch.equal(row, torch.eye(6)[4:5])


class TestEvaluateKernelBlock:

    def test_converts_dtype(self, gaussian_kernel):
        block = evaluate_kernel_block(
            gaussian_kernel, torch.tensor([0.0]), torch.tensor([0.1]), 1, torch.float32
        )
        assert block.dtype == torch.float32
        assert block.shape == (1, 1)
