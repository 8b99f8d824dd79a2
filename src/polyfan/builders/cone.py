"""
Polyhedral Cones
================

A cone is stored in BOTH descriptions:

    V:  C = pos(rays) + lin(lineality)         (always present, canonical)
    H:  C = {x : F x >= 0, H x = 0}             (computed on demand, cached)

CANONICAL FORM:
    lineality  - canonical integer basis (scaled RREF rows)
    rays       - extreme rays projected onto lineality^perp, made primitive,
                 sorted and deduplicated
    Two cones are equal iff their canonical forms are equal. This is what
    __eq__ / __hash__ use, so cones can live in sets and dict keys.

FACE LATTICE:
    Faces are identified by the set of ray indices they contain (plus the
    whole lineality space). A facet of a face F is F & tight(a) for some
    facet normal a of the cone, kept when the rank drops by exactly one.
    faces(k) descends k levels from the cone itself.

TESTABLE PROPERTY:
    A.contains(B) and B.contains(A)  <=>  A == B
"""

import logging
from typing import Iterable, List, Sequence, Tuple

import numpy as np

from ..operators.double_description import dual_description, extreme_rays
from ..operators.exact import (
    IntVector,
    as_exact_matrix,
    as_exact_vector,
    dot,
    is_zero,
    matrix_columns,
    matrix_rows,
    primitive,
    project_out,
    rank,
    row_basis,
    smith_normal_form,
)
from ..spec.errors import DimensionMismatch, InputError
from ..spec.structures import PolyhedralObject, canonical_rays, columns_matrix, rows_matrix

_logger = logging.getLogger(__name__)


class Cone(PolyhedralObject):
    """
    Exact polyhedral cone in Q^n.

    Build cones with pos_hull() or cone_from_inequalities(); the constructor
    itself expects generators that are already extreme modulo lineality.

    Args:
        rays: iterable of integer/rational vectors (extreme rays)
        lineality: iterable of vectors spanning the lineality space
        n: ambient dimension
        dual: optional (facets, hyperplanes) known to be irredundant
    """

    def __init__(self, rays: Iterable[Sequence], lineality: Iterable[Sequence], n: int,
                 dual: Tuple[List[IntVector], List[IntVector]] = None):
        super().__init__(n)
        lin = row_basis(list(lineality), n)
        canon = []
        for r in rays:
            if len(r) != n:
                raise DimensionMismatch(f"Ray {tuple(r)} has length {len(r)}, expected {n}")
            p = project_out(r, lin)
            if not is_zero(p):
                canon.append(primitive(p))
        self._rays = canonical_rays(canon)
        self._lineality = tuple(lin)
        if dual is not None:
            self.cache['dual'] = (list(dual[0]), list(dual[1]))

    # ------------------------------------------------------------------
    # Object contract
    # ------------------------------------------------------------------

    def generators(self) -> Tuple[np.ndarray, np.ndarray]:
        return self.rays, self.lineality

    def facet_description(self) -> Tuple[np.ndarray, np.ndarray]:
        return self.facets, self.hyperplanes

    # ------------------------------------------------------------------
    # Descriptions
    # ------------------------------------------------------------------

    @property
    def ray_list(self) -> Tuple[IntVector, ...]:
        """Canonical rays as integer tuples."""
        return self._rays

    @property
    def lineality_list(self) -> Tuple[IntVector, ...]:
        """Canonical lineality basis as integer tuples."""
        return self._lineality

    @property
    def rays(self) -> np.ndarray:
        """(n, r) object matrix, columns are the extreme rays."""
        return columns_matrix(list(self._rays), self.ambient_dim)

    @property
    def lineality(self) -> np.ndarray:
        """(n, l) object matrix, columns span the lineality space."""
        return columns_matrix(list(self._lineality), self.ambient_dim)

    def _dual(self) -> Tuple[List[IntVector], List[IntVector]]:
        return self._cached('dual', lambda: dual_description(
            list(self._rays), list(self._lineality), self.ambient_dim))

    @property
    def facet_list(self) -> List[IntVector]:
        """Inner facet normals as integer tuples (a . x >= 0 on the cone)."""
        return self._dual()[0]

    @property
    def hyperplane_list(self) -> List[IntVector]:
        """Equations of the linear span as integer tuples (h . x = 0)."""
        return self._dual()[1]

    @property
    def facets(self) -> np.ndarray:
        """(f, n) object matrix of inner facet normals."""
        return rows_matrix(self.facet_list, self.ambient_dim)

    @property
    def hyperplanes(self) -> np.ndarray:
        """(h, n) object matrix of equations."""
        return rows_matrix(self.hyperplane_list, self.ambient_dim)

    # ------------------------------------------------------------------
    # Invariants
    # ------------------------------------------------------------------

    @property
    def dim(self) -> int:
        return self._cached('dim', lambda: rank(list(self._rays) + list(self._lineality),
                                                self.ambient_dim))

    @property
    def lineality_dim(self) -> int:
        return len(self._lineality)

    @property
    def is_pointed(self) -> bool:
        return self.lineality_dim == 0

    @property
    def is_full_dim(self) -> bool:
        return self.dim == self.ambient_dim

    @property
    def is_simplicial(self) -> bool:
        """Extreme rays are linearly independent modulo lineality."""
        return len(self._rays) == self.dim - self.lineality_dim

    @property
    def is_smooth(self) -> bool:
        """
        Simplicial, and rays plus lineality extend to a lattice basis of Z^n.

        Checked with the Smith normal form: all invariants must be 1.
        """
        def compute():
            if not self.is_simplicial:
                return False
            gens = list(self._rays) + list(self._lineality)
            if not gens:
                return True
            invariants = smith_normal_form(gens, self.ambient_dim)
            return len(invariants) == len(gens) and all(d == 1 for d in invariants)
        return self._cached('is_smooth', compute)

    def key(self) -> tuple:
        """Canonical key: (ambient_dim, rays, lineality)."""
        return (self.ambient_dim, self._rays, self._lineality)

    def __eq__(self, other):
        if not isinstance(other, Cone):
            return NotImplemented
        return self.key() == other.key()

    def __hash__(self):
        return hash(self.key())

    def __repr__(self):
        return (f"Cone(ambient_dim={self.ambient_dim}, dim={self.dim}, "
                f"rays={list(self._rays)}, lineality_dim={self.lineality_dim})")

    def interior_vector(self) -> IntVector:
        """
        A point in the relative interior: the sum of the extreme rays.

        For a linear space (no rays) this is the origin, which lies in its
        relative interior.
        """
        n = self.ambient_dim
        return tuple(sum((r[i] for r in self._rays), 0) for i in range(n))

    # ------------------------------------------------------------------
    # Containment, intersection, faces
    # ------------------------------------------------------------------

    def contains(self, other) -> bool:
        """
        Containment of a vector or of a cone, via the H-description.

        Args:
            other: Cone, or a vector of length ambient_dim

        Raises:
            DimensionMismatch: if the ambient dimensions differ
        """
        if isinstance(other, Cone):
            if other.ambient_dim != self.ambient_dim:
                raise DimensionMismatch(
                    f"Cones live in dimensions {self.ambient_dim} and {other.ambient_dim}")
            if other.dim > self.dim:
                return False
            for l in other._lineality:
                if not self._contains_vector(l) or not self._contains_vector(tuple(-x for x in l)):
                    return False
            return all(self._contains_vector(r) for r in other._rays)
        v = as_exact_vector(other, self.ambient_dim, name="point")
        return self._contains_vector(v)

    def _contains_vector(self, v: Sequence) -> bool:
        if any(dot(h, v) != 0 for h in self.hyperplane_list):
            return False
        return all(dot(a, v) >= 0 for a in self.facet_list)

    def _incidence(self) -> List[frozenset]:
        """For each facet, the indices of the rays on it."""
        def compute():
            return [frozenset(i for i, r in enumerate(self._rays) if dot(a, r) == 0)
                    for a in self.facet_list]
        return self._cached('incidence', compute)

    def faces(self, k: int) -> List["Cone"]:
        """
        All faces of codimension k.

        Args:
            k: codimension (0 = the cone itself)

        Returns:
            list of Cone, sorted by canonical key

        EDGE CASES:
            k > dim - lineality_dim gives []; the smallest face is the
            lineality space itself.
        """
        if k < 0:
            raise InputError(f"Codimension must be >= 0, got {k}")
        cache_key = f'faces_{k}'
        if cache_key in self.cache:
            return self.cache[cache_key]
        if k == 0:
            return self._cached(cache_key, lambda: [self])
        if k > self.dim - self.lineality_dim:
            return self._cached(cache_key, lambda: [])

        incidence = self._incidence()
        lin = list(self._lineality)
        n = self.ambient_dim
        level = {frozenset(range(len(self._rays))): self.dim}
        for _ in range(k):
            nxt = {}
            for face, d in level.items():
                for tight in incidence:
                    sub = face & tight
                    if sub == face or sub in nxt:
                        continue
                    if rank([self._rays[i] for i in sub] + lin, n) == d - 1:
                        nxt[sub] = d - 1
            level = nxt

        out = [Cone([self._rays[i] for i in sorted(face)], lin, n) for face in level]
        out.sort(key=lambda c: c.key())
        _logger.debug("faces(%d) of %d-dim cone: %d faces", k, self.dim, len(out))
        self.cache[cache_key] = out
        return out

    def is_face_of(self, other: "Cone") -> bool:
        """True if self is a face of other (the empty intersection never occurs for cones)."""
        if not other.contains(self):
            return False
        supporting = []
        for a in other.facet_list:
            if all(dot(a, r) == 0 for r in self._rays) and \
               all(dot(a, l) == 0 for l in self._lineality):
                supporting.append(a)
        face_rays = [r for r in other._rays if all(dot(a, r) == 0 for a in supporting)]
        return Cone(face_rays, other._lineality, other.ambient_dim) == self


# ======================================================================
# Constructors
# ======================================================================

def _generators_of(obj, n: int = None) -> Tuple[List, List, int]:
    """(rays, lineality, n) of a Cone or of a ray matrix (columns are rays)."""
    if isinstance(obj, Cone):
        return list(obj.ray_list), list(obj.lineality_list), obj.ambient_dim
    M = as_exact_matrix(obj, name="rays", allow_vector=True)
    return matrix_columns(M), [], M.shape[0]


def pos_hull(rays, lineality=None) -> Cone:
    """
    Conic hull of generators.

    Accepted forms:
        pos_hull(R)            R: (n, m) matrix, columns are rays
        pos_hull(R, L)         L: (n, l) matrix, columns span lineality
        pos_hull(C)            a cone (returns an equal cone)
        pos_hull([C, R, ...])  hull of the union of cones and ray matrices

    Returns:
        Cone with cached irredundant H-description

    FAIL-FAST:
        DimensionMismatch if the pieces live in different dimensions or
        if there is nothing to take the hull of in a positive dimension.
    """
    if isinstance(rays, list) and any(isinstance(c, Cone) for c in rays):
        pieces = list(rays)
    else:
        pieces = [rays]

    all_rays, all_lin, dims = [], [], set()
    for piece in pieces:
        r, l, n = _generators_of(piece)
        all_rays.extend(r)
        all_lin.extend(l)
        dims.add(n)

    if lineality is not None:
        L = as_exact_matrix(lineality, name="lineality", allow_vector=True)
        all_lin.extend(matrix_columns(L))
        dims.add(L.shape[0])

    if len(dims) != 1:
        raise DimensionMismatch(f"Generators live in different dimensions: {sorted(dims)}")
    n = dims.pop()

    all_rays = [r for r in all_rays if not is_zero(r)]
    if not all_rays and not [l for l in all_lin if not is_zero(l)] and n > 0:
        raise DimensionMismatch(
            f"Cannot build a cone in dimension {n} from an empty ray set; "
            f"use cone_from_inequalities for the origin")

    facets, hyperplanes = dual_description(all_rays, all_lin, n)
    ext, lin = extreme_rays(facets, hyperplanes, n)
    return Cone(ext, lin, n, dual=(facets, hyperplanes))


def cone_from_inequalities(facets, hyperplanes=None) -> Cone:
    """
    Cone {x : F x >= 0, H x = 0} from an H-description (rows are normals).

    Redundant rows are fine; the cached facet description is recomputed
    irredundantly on demand.
    """
    F = as_exact_matrix(facets, name="facets")
    n = F.shape[1]
    eqs = []
    if hyperplanes is not None:
        H = as_exact_matrix(hyperplanes, name="hyperplanes")
        if H.shape[0] > 0 and H.shape[1] != n:
            raise DimensionMismatch(f"Facets have {n} columns, hyperplanes {H.shape[1]}")
        eqs = matrix_rows(H)
    rays, lin = extreme_rays(matrix_rows(F), eqs, n)
    return Cone(rays, lin, n)


def intersection(A: Cone, B: Cone) -> Cone:
    """
    Intersection of two cones: stack the H-descriptions, recompute rays.

    Raises:
        DimensionMismatch: if the ambient dimensions differ
    """
    if A.ambient_dim != B.ambient_dim:
        raise DimensionMismatch(f"Cones live in dimensions {A.ambient_dim} and {B.ambient_dim}")
    n = A.ambient_dim
    rays, lin = extreme_rays(A.facet_list + B.facet_list,
                             A.hyperplane_list + B.hyperplane_list, n)
    return Cone(rays, lin, n)


def contains(A: Cone, other) -> bool:
    """A contains a vector or a cone."""
    return A.contains(other)


def faces(k: int, C: Cone) -> List[Cone]:
    """All codimension-k faces of C."""
    return C.faces(k)


def common_face(A: Cone, B: Cone) -> bool:
    """True if A and B intersect in a face of both (the fan condition for a pair)."""
    I = intersection(A, B)
    return I.is_face_of(A) and I.is_face_of(B)
