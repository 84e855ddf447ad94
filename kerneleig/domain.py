"""Domain and representer collaborators.

The Nyström approximation only needs three things from the data it is built
over: a domain, the number of points in it and the list of those points.
Anything providing ``get_domain()`` (a representer) whose result provides
``get_number_of_points()`` and ``get_domain_points()`` can be used; the
classes here are a minimal in-memory implementation.
"""

from typing import Any, Iterator, List, Protocol, Sequence, Union, runtime_checkable

import numpy as np
import torch

from .utils.exceptions import ValidationError


@runtime_checkable
class DomainLike(Protocol):
    """Protocol for an ordered collection of points."""

    def get_number_of_points(self) -> int:
        ...

    def get_domain_points(self) -> List[Any]:
        ...


@runtime_checkable
class Representer(Protocol):
    """Protocol for objects that expose a domain."""

    def get_domain(self) -> DomainLike:
        ...


class Domain:
    """Ordered, read-only collection of points.

    Points can be given as a list of tensors (or arbitrary point objects),
    as a 2-D tensor whose rows are points, or as a 2-D NumPy array.

    Example:
        >>> domain = Domain(torch.linspace(0, 1, 100).unsqueeze(1))
        >>> domain.get_number_of_points()
        100
    """

    def __init__(self, points: Union[Sequence[Any], torch.Tensor, np.ndarray]):
        if isinstance(points, np.ndarray):
            points = torch.from_numpy(points)

        if isinstance(points, torch.Tensor):
            if points.dim() == 1:
                points = points.unsqueeze(1)
            if points.dim() != 2:
                raise ValidationError(
                    f"Point tensor must be 2D [n_points, point_dim], got {points.dim()}D",
                    parameter="points"
                )
            self._points = tuple(points.unbind(0))
        else:
            self._points = tuple(points)

    def get_number_of_points(self) -> int:
        return len(self._points)

    def get_domain_points(self) -> List[Any]:
        """Return a fresh list of the domain points (safe to reorder)."""
        return list(self._points)

    def __len__(self) -> int:
        return len(self._points)

    def __iter__(self) -> Iterator[Any]:
        return iter(self._points)

    def __repr__(self) -> str:
        return f"Domain(n_points={len(self._points)})"


class PointSetRepresenter:
    """Representer for a plain set of points."""

    def __init__(self, points: Union[Sequence[Any], torch.Tensor, np.ndarray, Domain]):
        self._domain = points if isinstance(points, Domain) else Domain(points)

    def get_domain(self) -> Domain:
        return self._domain
