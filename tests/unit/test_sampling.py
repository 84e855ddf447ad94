"""Unit tests for landmark sampling."""

import pytest
import torch

from kerneleig.domain import Domain
from kerneleig.nystrom.sampling import LandmarkSampler, sample_landmarks
from kerneleig.utils.exceptions import ContractError, ValidationError


class ShortDomain:
    """Domain that reports more points than it lists."""

    def get_number_of_points(self):
        return 10

    def get_domain_points(self):
        return [torch.tensor([float(i)]) for i in range(4)]


def _ids(points):
    return sorted(int(p.item()) for p in points)


class TestSampleLandmarks:

    def test_count_and_membership(self, line_domain, generator):
        landmarks = sample_landmarks(line_domain, 20, generator=generator)

        assert len(landmarks) == 20
        domain_ids = {id(p) for p in line_domain.get_domain_points()}
        assert all(id(p) in domain_ids for p in landmarks)

    def test_without_replacement(self, line_domain, generator):
        landmarks = sample_landmarks(line_domain, 50, generator=generator)
        assert len(set(_ids(landmarks))) == 50

    def test_clamped_to_domain_size(self, generator):
        domain = Domain(torch.arange(10.0))
        landmarks = sample_landmarks(domain, 25, generator=generator)

        assert len(landmarks) == 10
        assert _ids(landmarks) == list(range(10))

    def test_zero_landmarks(self, line_domain, generator):
        assert sample_landmarks(line_domain, 0, generator=generator) == []

    def test_empty_domain(self, generator):
        assert sample_landmarks(Domain([]), 5, generator=generator) == []

    def test_negative_count(self, line_domain):
        with pytest.raises(ValidationError, match="n_landmarks"):
            sample_landmarks(line_domain, -1)

    def test_non_integer_count(self, line_domain):
        with pytest.raises(ValidationError):
            sample_landmarks(line_domain, 2.5)

    def test_short_domain_contract(self):
        with pytest.raises(ContractError, match="fewer points"):
            sample_landmarks(ShortDomain(), 3)

    def test_same_seed_same_landmarks(self, line_domain):
        first = sample_landmarks(line_domain, 15, generator=torch.Generator().manual_seed(7))
        second = sample_landmarks(line_domain, 15, generator=torch.Generator().manual_seed(7))

        assert [p.item() for p in first] == [p.item() for p in second]

    def test_different_seed_different_landmarks(self, line_domain):
        first = sample_landmarks(line_domain, 15, generator=torch.Generator().manual_seed(7))
        second = sample_landmarks(line_domain, 15, generator=torch.Generator().manual_seed(8))

        assert [p.item() for p in first] != [p.item() for p in second]

    def test_global_stream_reproducible(self, line_domain):
        torch.manual_seed(3)
        first = sample_landmarks(line_domain, 10)
        torch.manual_seed(3)
        second = sample_landmarks(line_domain, 10)

        assert [p.item() for p in first] == [p.item() for p in second]

    def test_domain_not_mutated(self, line_domain, generator):
        before = [p.item() for p in line_domain.get_domain_points()]
        sample_landmarks(line_domain, 30, generator=generator)
        assert [p.item() for p in line_domain.get_domain_points()] == before


class TestLandmarkSampler:

    def test_seeded_sampler(self, line_domain):
        first = LandmarkSampler(seed=11).sample(line_domain, 12)
        second = LandmarkSampler(seed=11).sample(line_domain, 12)

        assert [p.item() for p in first] == [p.item() for p in second]

    def test_generator_takes_precedence(self, line_domain):
        generator = torch.Generator().manual_seed(5)
        sampler = LandmarkSampler(generator=generator, seed=99)
        assert sampler.generator is generator

    def test_successive_draws_advance_stream(self, line_domain):
        sampler = LandmarkSampler(seed=2)
        first = sampler.sample(line_domain, 20)
        second = sampler.sample(line_domain, 20)

        assert [p.item() for p in first] != [p.item() for p in second]
