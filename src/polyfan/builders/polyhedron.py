"""
Polyhedra by Homogenization
===========================

A polyhedron P in Q^n is stored as a cone C in Q^(n+1):

    P = {x : (1, x) in C}        C = pos({(1, v)}, {(0, r)}) + lin({(0, l)})

so every question about P is a question about C:

    vertices  - rays of C with x0 > 0, scaled to x0 = 1
    rays      - rays of C with x0 = 0
    lineality - lineality of C (always inside x0 = 0)
    facets    - facets of C except x0 >= 0
    faces     - faces of C that are not contained in x0 = 0

P is empty iff C has no ray with x0 > 0.

FACET CONVENTION:
    facets() returns (A, b) with P = {x : A x <= b, C x = d}.
"""

from fractions import Fraction
from typing import List, Tuple

import numpy as np

from .cone import Cone, cone_from_inequalities, intersection as cone_intersection, pos_hull
from ..operators.exact import (
    as_exact_matrix,
    as_exact_vector,
    matrix_columns,
    matrix_rows,
)
from ..spec.constants import HOMOGENIZING_COORD
from ..spec.errors import DimensionMismatch, InputError
from ..spec.structures import PolyhedralObject, columns_matrix, rows_matrix


def _dehomogenize(v) -> Tuple[Fraction, ...]:
    x0 = v[HOMOGENIZING_COORD]
    return tuple(Fraction(x) / x0 for x in v[1:])


class Polyhedron(PolyhedralObject):
    """
    Exact polyhedron, the slice x0 = 1 of a homogenized cone.

    Build with convex_hull() or polyhedron_from_inequalities().

    Args:
        cone: Cone in dimension n + 1 contained in {x0 >= 0}
    """

    def __init__(self, cone: Cone):
        if cone.ambient_dim < 1:
            raise InputError("Homogenized cone must have ambient dimension >= 1")
        super().__init__(cone.ambient_dim - 1)
        self._cone = cone

    @property
    def homogenized_cone(self) -> Cone:
        return self._cone

    def generators(self):
        """Homogenized generators (rays, lineality) of the underlying cone."""
        return self._cone.generators()

    def facet_description(self):
        return self.facets()

    # ------------------------------------------------------------------
    # V-description
    # ------------------------------------------------------------------

    @property
    def vertex_list(self) -> List[Tuple[Fraction, ...]]:
        return self._cached('vertex_list', lambda: [
            _dehomogenize(r) for r in self._cone.ray_list if r[HOMOGENIZING_COORD] > 0])

    @property
    def ray_list(self) -> List[Tuple[int, ...]]:
        return self._cached('ray_list', lambda: [
            tuple(r[1:]) for r in self._cone.ray_list if r[HOMOGENIZING_COORD] == 0])

    @property
    def lineality_list(self) -> List[Tuple[int, ...]]:
        return [tuple(l[1:]) for l in self._cone.lineality_list]

    @property
    def vertices(self) -> np.ndarray:
        """(n, v) object matrix of Fractions, columns are vertices."""
        return columns_matrix(self.vertex_list, self.ambient_dim)

    @property
    def rays(self) -> np.ndarray:
        """(n, r) object matrix, columns are the extreme rays of the recession cone."""
        return columns_matrix(self.ray_list, self.ambient_dim)

    @property
    def lineality(self) -> np.ndarray:
        return columns_matrix(self.lineality_list, self.ambient_dim)

    # ------------------------------------------------------------------
    # H-description
    # ------------------------------------------------------------------

    def facets(self) -> Tuple[np.ndarray, np.ndarray]:
        """
        (A, b) with P = {x : A x <= b} intersected with the hyperplanes.

        The homogenizing inequality x0 >= 0 is not reported.
        """
        def compute():
            A, b = [], []
            for a in self._cone.facet_list:
                rest = a[1:]
                if not any(rest):
                    continue
                A.append(tuple(-x for x in rest))
                b.append(a[HOMOGENIZING_COORD])
            return A, b
        A, b = self._cached('facets', compute)
        return rows_matrix(A, self.ambient_dim), np.array(b, dtype=object)

    def hyperplanes(self) -> Tuple[np.ndarray, np.ndarray]:
        """(C, d) with C x = d on the affine hull of P."""
        C, d = [], []
        for h in self._cone.hyperplane_list:
            rest = h[1:]
            if not any(rest):
                continue
            C.append(tuple(rest))
            d.append(-h[HOMOGENIZING_COORD])
        return rows_matrix(C, self.ambient_dim), np.array(d, dtype=object)

    # ------------------------------------------------------------------
    # Invariants
    # ------------------------------------------------------------------

    @property
    def is_empty(self) -> bool:
        return len(self.vertex_list) == 0

    @property
    def dim(self) -> int:
        """Dimension; -1 for the empty polyhedron."""
        if self.is_empty:
            return -1
        return self._cone.dim - 1

    @property
    def is_compact(self) -> bool:
        return not self.ray_list and not self.lineality_list

    @property
    def is_full_dim(self) -> bool:
        return self.dim == self.ambient_dim

    def __eq__(self, other):
        if not isinstance(other, Polyhedron):
            return NotImplemented
        return self._cone == other._cone

    def __hash__(self):
        return hash(('Polyhedron', self._cone.key()))

    def __repr__(self):
        return (f"Polyhedron(ambient_dim={self.ambient_dim}, dim={self.dim}, "
                f"n_vertices={len(self.vertex_list)}, n_rays={len(self.ray_list)})")

    def interior_point(self) -> Tuple[Fraction, ...]:
        """
        A point in the relative interior: barycenter of the vertices plus
        the sum of the rays.

        Raises:
            InputError: for the empty polyhedron
        """
        verts = self.vertex_list
        if not verts:
            raise InputError("The empty polyhedron has no interior point")
        n = self.ambient_dim
        k = len(verts)
        return tuple(sum((v[i] for v in verts), Fraction(0)) / k +
                     sum((r[i] for r in self.ray_list), 0) for i in range(n))

    # ------------------------------------------------------------------
    # Containment, intersection, faces
    # ------------------------------------------------------------------

    def contains(self, other) -> bool:
        """Containment of a point (vector of length n) or of a polyhedron."""
        if isinstance(other, Polyhedron):
            if other.ambient_dim != self.ambient_dim:
                raise DimensionMismatch(
                    f"Polyhedra live in dimensions {self.ambient_dim} and {other.ambient_dim}")
            return self._cone.contains(other._cone)
        p = as_exact_vector(other, self.ambient_dim, name="point")
        return self._cone.contains((Fraction(1),) + p)

    def faces(self, k: int) -> List["Polyhedron"]:
        """All faces of codimension k (k = dim gives the vertices)."""
        if k < 0:
            raise InputError(f"Codimension must be >= 0, got {k}")

        def compute():
            out = []
            for face in self._cone.faces(k):
                if any(r[HOMOGENIZING_COORD] > 0 for r in face.ray_list):
                    out.append(Polyhedron(face))
            return out
        return self._cached(f'faces_{k}', compute)

    def f_vector(self) -> List[int]:
        """Number of proper faces of each dimension 0..dim-1."""
        d = self.dim
        return [len(self.faces(d - i)) for i in range(d)]

    def edges(self) -> List[Tuple[int, int]]:
        """
        Bounded edges as pairs (i, j), i < j, of indices into vertex_list.

        Unbounded one-dimensional faces (a vertex plus a ray) are skipped.
        """
        def compute():
            if self.dim < 1:
                return []
            index = {v: i for i, v in enumerate(self.vertex_list)}
            out = []
            for face in self.faces(self.dim - 1):
                verts = face.vertex_list
                if len(verts) == 2:
                    i, j = sorted(index[v] for v in verts)
                    out.append((i, j))
            return sorted(out)
        return self._cached('edges', compute)

    def normal_fan(self):
        """
        Outer normal fan of a polytope.

        The maximal cone of vertex v is {w : w.(v - u) >= 0 for all vertices u}.

        Raises:
            InputError: if the polyhedron is empty or not compact
        """
        from .fan import Fan

        def compute():
            if self.is_empty or not self.is_compact:
                raise InputError("The normal fan is only defined for nonempty polytopes")
            verts = self.vertex_list
            n = self.ambient_dim
            cones = []
            for v in verts:
                rows = [tuple(a - b for a, b in zip(v, u)) for u in verts if u != v]
                cones.append(cone_from_inequalities(rows_matrix(rows, n)))
            return Fan(cones)
        return self._cached('normal_fan', compute)


# ======================================================================
# Constructors
# ======================================================================

def _homogenize(cols, x0) -> List[Tuple]:
    return [(Fraction(x0),) + tuple(c) for c in cols]


def convex_hull(points, rays=None, lineality=None) -> Polyhedron:
    """
    Convex hull of points plus the cone of rays plus a linear space.

    Accepted forms:
        convex_hull(V)              V: (n, p) matrix, columns are points
        convex_hull(V, R)           R: (n, r) matrix, columns are rays
        convex_hull(V, R, L)        L: (n, l) matrix, columns span lineality
        convex_hull([P, Q, ...])    hull of the union of polyhedra

    FAIL-FAST:
        InputError if there is no point; DimensionMismatch if the pieces
        live in different dimensions.
    """
    if isinstance(points, list) and points and all(isinstance(p, Polyhedron) for p in points):
        dims = {p.ambient_dim for p in points}
        if len(dims) != 1:
            raise DimensionMismatch(f"Polyhedra live in different dimensions: {sorted(dims)}")
        return Polyhedron(pos_hull([p.homogenized_cone for p in points]))

    V = as_exact_matrix(points, name="points", allow_vector=True)
    n = V.shape[0]
    if V.shape[1] == 0:
        raise InputError("A convex hull needs at least one point")
    cols = _homogenize(matrix_columns(V), 1)
    lin_cols = []
    for name, data, target in (("rays", rays, cols), ("lineality", lineality, lin_cols)):
        if data is None:
            continue
        M = as_exact_matrix(data, name=name, allow_vector=True)
        if M.shape[1] == 0:
            continue
        if M.shape[0] != n:
            raise DimensionMismatch(f"{name} have {M.shape[0]} rows, points have {n}")
        target.extend(_homogenize(matrix_columns(M), 0))

    hom_rays = columns_matrix(cols, n + 1)
    hom_lin = columns_matrix(lin_cols, n + 1) if lin_cols else None
    return Polyhedron(pos_hull(hom_rays, hom_lin))


def polyhedron_from_inequalities(A, b, C=None, d=None) -> Polyhedron:
    """
    Polyhedron {x : A x <= b, C x = d}.

    Args:
        A: (k, n) matrix
        b: length-k vector
        C, d: optional equations
    """
    A = as_exact_matrix(A, name="A")
    n = A.shape[1]
    b = as_exact_vector(b, A.shape[0], name="b")
    rows = [(bi,) + tuple(-x for x in a) for a, bi in zip(matrix_rows(A), b)]
    rows.append((Fraction(1),) + (Fraction(0),) * n)
    eqs = []
    if C is not None:
        C = as_exact_matrix(C, name="C")
        if C.shape[1] != n:
            raise DimensionMismatch(f"C has {C.shape[1]} columns, A has {n}")
        d = as_exact_vector(d, C.shape[0], name="d")
        eqs = [(-di,) + tuple(c) for c, di in zip(matrix_rows(C), d)]
    return Polyhedron(cone_from_inequalities(rows_matrix(rows, n + 1),
                                             rows_matrix(eqs, n + 1) if eqs else None))


def intersection(P: Polyhedron, Q: Polyhedron) -> Polyhedron:
    """Intersection of two polyhedra."""
    if P.ambient_dim != Q.ambient_dim:
        raise DimensionMismatch(f"Polyhedra live in dimensions {P.ambient_dim} and {Q.ambient_dim}")
    return Polyhedron(cone_intersection(P.homogenized_cone, Q.homogenized_cone))
