"""
Object Contract - THE critical piece
====================================

Cone, Polyhedron and Fan form a closed family of geometric objects.
All of them expose the same small interface so that analysis code never
dispatches on argument types by hand:

    ambient_dim          - dimension of the surrounding space
    generators()         - (rays, lineality) as object matrices, columns = vectors
    facet_description()  - (facets, hyperplanes) as object matrices, rows = normals
    cache                - write-once memo table for derived results

Objects are immutable after construction. Only the cache is filled, lazily,
and nothing in it is ever invalidated.
"""

import numpy as np
from typing import Callable, Iterable, List, Tuple


def canonical_rays(rays: Iterable[Tuple[int, ...]]) -> Tuple[Tuple[int, ...], ...]:
    """
    Return the canonical form of a set of primitive rays.

    The canonical form is the sorted tuple of distinct rays. Two cones with
    the same canonical rays and the same canonical lineality basis are
    equal as point sets, which is what set / dict membership relies on.

    Args:
        rays: iterable of primitive integer tuples (already projected off
              the lineality space)

    Returns:
        sorted tuple of distinct ray tuples

    Example:
        canonical_rays([(0, 1), (1, 0), (0, 1)]) -> ((0, 1), (1, 0))
    """
    out = sorted(set(tuple(int(x) for x in r) for r in rays))
    for r in out:
        if not any(r):
            raise ValueError("Canonical ray set must not contain the zero vector")
    return tuple(out)


def columns_matrix(vectors: List[Tuple], n: int) -> np.ndarray:
    """Stack vectors as the columns of an (n, len(vectors)) object matrix."""
    M = np.empty((n, len(vectors)), dtype=object)
    for j, v in enumerate(vectors):
        for i in range(n):
            M[i, j] = v[i]
    return M


def rows_matrix(vectors: List[Tuple], n: int) -> np.ndarray:
    """Stack vectors as the rows of a (len(vectors), n) object matrix."""
    M = np.empty((len(vectors), n), dtype=object)
    for i, v in enumerate(vectors):
        for j in range(n):
            M[i, j] = v[j]
    return M


class PolyhedralObject:
    """
    Base of the Cone | Polyhedron | Fan family.

    Subclasses set self._ambient_dim in __init__ and implement
    generators() and facet_description().

    Required interface:
        ambient_dim : int
        generators() -> (rays, lineality)
        facet_description() -> (facets, hyperplanes)

    Cache:
        self.cache is a plain dict. Use _cached(key, compute) to fill it;
        the value is computed once and returned from the cache afterwards.
    """

    def __init__(self, ambient_dim: int):
        if ambient_dim < 0:
            raise ValueError(f"Ambient dimension must be >= 0, got {ambient_dim}")
        self._ambient_dim = ambient_dim
        self.cache = {}

    @property
    def ambient_dim(self) -> int:
        return self._ambient_dim

    def generators(self):
        raise NotImplementedError

    def facet_description(self):
        raise NotImplementedError

    def _cached(self, key: str, compute: Callable):
        if key not in self.cache:
            self.cache[key] = compute()
        return self.cache[key]
