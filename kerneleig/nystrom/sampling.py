"""Landmark sampling for the Nyström approximation.

Landmarks are a uniformly random subset of the domain, drawn without
replacement by shuffling the full point list and keeping a prefix. The random
source is an explicit ``torch.Generator`` owned by the caller; without one the
global torch stream is used and results are only reproducible if the caller
seeded it with ``torch.manual_seed``.
"""

from typing import Any, List, Optional

import torch

from ..domain import DomainLike
from ..utils.exceptions import ContractError
from ..utils.logging import setup_logger
from ..utils.validation import validate_count


logger = setup_logger(__name__)


def sample_landmarks(
    domain: DomainLike,
    n_landmarks: int,
    generator: Optional[torch.Generator] = None
) -> List[Any]:
    """Draw a random subset of domain points without replacement.

    Args:
        domain: Domain providing get_number_of_points() and get_domain_points()
        n_landmarks: Requested number of landmarks, clamped to the domain size
        generator: Random source for the permutation

    Returns:
        List of min(n_landmarks, N) points in sampled order

    Raises:
        ValidationError: If n_landmarks is negative
        ContractError: If the domain lists fewer points than it claims
    """
    n_landmarks = validate_count("n_landmarks", n_landmarks, minimum=0)
    n_total = domain.get_number_of_points()

    if n_landmarks > n_total:
        logger.debug(f"Clamping landmark count from {n_landmarks} to domain size {n_total}")
        n_landmarks = n_total

    points = domain.get_domain_points()
    if len(points) < n_total:
        raise ContractError(
            "Domain returned fewer points than it reports",
            collaborator="domain",
            expected=n_total,
            actual=len(points)
        )

    permutation = torch.randperm(len(points), generator=generator)
    landmarks = [points[i] for i in permutation[:n_landmarks].tolist()]

    logger.debug(f"Sampled {len(landmarks)} landmarks from {n_total} domain points")
    return landmarks


class LandmarkSampler:
    """Holds a random source and draws landmark sets from domains.

    Args:
        generator: Generator to draw from. Takes precedence over seed.
        seed: Seed for a private generator when no generator is given
    """

    def __init__(self, generator: Optional[torch.Generator] = None, seed: Optional[int] = None):
        if generator is None and seed is not None:
            generator = torch.Generator().manual_seed(seed)
        self.generator = generator

    def sample(self, domain: DomainLike, n_landmarks: int) -> List[Any]:
        return sample_landmarks(domain, n_landmarks, generator=self.generator)
