"""
Fans
====

A fan is a finite collection of cones in one ambient space such that any
two of them meet in a common face.

STORAGE:
    max_cones - the inclusion-maximal distinct generating cones, sorted
                by canonical key
    rays      - union of the rays of the maximal cones
    cache     - derived results (is_complete, is_polytopal, polytope, ...)

The fan condition is NOT verified on construction; it is a precondition
of the constructors and an output guarantee of cc_refinement. Call
is_fan() to check it explicitly.

COMPLETENESS:
    A fan is complete iff it is pure, full-dimensional, and every facet of
    a maximal cone lies in exactly two maximal cones.
"""

import logging
from collections import Counter
from itertools import combinations
from typing import Iterable, List, Tuple

import numpy as np

from .cone import Cone, common_face
from ..spec.constants import WALLS_PER_CODIM1_FACE
from ..spec.errors import DimensionMismatch, InputError
from ..spec.structures import PolyhedralObject, columns_matrix

_logger = logging.getLogger(__name__)


class Fan(PolyhedralObject):
    """
    Fan generated by a collection of cones.

    Duplicates and cones contained in another generating cone are dropped,
    so only the maximal cones are stored.

    Args:
        cones: iterable of Cone, all in the same ambient dimension

    Raises:
        InputError: if no cone is given
        DimensionMismatch: if the cones live in different dimensions
    """

    def __init__(self, cones: Iterable[Cone]):
        cones = list(cones)
        if not cones:
            raise InputError("A fan needs at least one cone")
        dims = {c.ambient_dim for c in cones}
        if len(dims) != 1:
            raise DimensionMismatch(f"Cones live in different dimensions: {sorted(dims)}")
        super().__init__(dims.pop())

        unique = list(dict.fromkeys(cones))
        maximal = [c for c in unique
                   if not any(d != c and d.dim >= c.dim and d.contains(c) for d in unique)]
        maximal.sort(key=lambda c: c.key())
        self._max_cones = tuple(maximal)

    def generators(self) -> Tuple[np.ndarray, np.ndarray]:
        return self.rays, self.lineality

    def facet_description(self) -> List[Tuple[np.ndarray, np.ndarray]]:
        """Per maximal cone, its (facets, hyperplanes)."""
        return [c.facet_description() for c in self._max_cones]

    @property
    def max_cones(self) -> List[Cone]:
        return list(self._max_cones)

    @property
    def ray_list(self) -> List[Tuple[int, ...]]:
        return self._cached('ray_list', lambda: sorted(
            {r for c in self._max_cones for r in c.ray_list}))

    @property
    def rays(self) -> np.ndarray:
        return columns_matrix(self.ray_list, self.ambient_dim)

    @property
    def lineality(self) -> np.ndarray:
        """Common lineality space (that of the smallest face, shared by all cones)."""
        return self._max_cones[0].lineality

    @property
    def lineality_dim(self) -> int:
        return self._max_cones[0].lineality_dim

    @property
    def dim(self) -> int:
        return max(c.dim for c in self._max_cones)

    @property
    def is_pure(self) -> bool:
        return len({c.dim for c in self._max_cones}) == 1

    @property
    def is_simplicial(self) -> bool:
        return all(c.is_simplicial for c in self._max_cones)

    @property
    def is_smooth(self) -> bool:
        return all(c.is_smooth for c in self._max_cones)

    @property
    def is_complete(self) -> bool:
        def compute():
            if not self.is_pure or self.dim != self.ambient_dim:
                return False
            counts = Counter(f for c in self._max_cones for f in c.faces(1))
            bad = [f for f, k in counts.items() if k != WALLS_PER_CODIM1_FACE]
            if bad:
                _logger.debug("Fan not complete: %d walls not shared by exactly 2 cones", len(bad))
            return not bad
        return self._cached('is_complete', compute)

    def __eq__(self, other):
        if not isinstance(other, Fan):
            return NotImplemented
        return self.ambient_dim == other.ambient_dim and self._max_cones == other._max_cones

    def __hash__(self):
        return hash(('Fan', self._max_cones))

    def __len__(self):
        return len(self._max_cones)

    def __repr__(self):
        return (f"Fan(ambient_dim={self.ambient_dim}, dim={self.dim}, "
                f"n_max_cones={len(self._max_cones)}, n_rays={len(self.ray_list)})")

    def faces(self, k: int) -> List[Cone]:
        """
        All cones of the fan of codimension k, relative to the fan dimension.

        k = 0 gives the maximal cones of top dimension, k = 1 the walls, ...
        """
        if k < 0:
            raise InputError(f"Codimension must be >= 0, got {k}")

        def compute():
            target = self.dim - k
            out = set()
            for c in self._max_cones:
                codim = c.dim - target
                if codim >= 0:
                    out.update(c.faces(codim))
            return sorted(out, key=lambda c: c.key())
        return self._cached(f'faces_{k}', compute)

    def f_vector(self) -> List[int]:
        """Number of cones of each dimension lineality_dim..dim."""
        return [len(self.faces(self.dim - i)) for i in range(self.lineality_dim, self.dim + 1)]

    def contains(self, cone: Cone) -> bool:
        """True if the cone is a face of some maximal cone of the fan."""
        if cone.ambient_dim != self.ambient_dim:
            raise DimensionMismatch(
                f"Cone lives in dimension {cone.ambient_dim}, fan in {self.ambient_dim}")
        return any(cone.is_face_of(c) for c in self._max_cones)

    def is_fan(self) -> bool:
        """Check the fan condition: every pair of maximal cones meets in a common face."""
        def compute():
            for A, B in combinations(self._max_cones, 2):
                if not common_face(A, B):
                    _logger.debug("Fan condition fails for %r and %r", A, B)
                    return False
            return True
        return self._cached('is_fan', compute)

    def is_polytopal(self) -> bool:
        """True if the fan is the normal fan of a polytope (result cached)."""
        from ..analysis.projectivity import is_polytopal
        return is_polytopal(self)

    def polytope(self):
        """A polytope whose normal fan is this fan."""
        from ..analysis.projectivity import polytope
        return polytope(self)
