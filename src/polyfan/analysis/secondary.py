"""
Secondary Fan and Secondary Polytope
====================================

For a point configuration A = (p_1, ..., p_N) in Q^d (affinely spanning)
every height vector w in Q^N lifts the points to (p_j, w_j); the lower
faces of the lifted hull project to a regular subdivision of A.

HEIGHT CONE OF A SIMPLEX:
    For an affinely independent (d+1)-subset sigma, let c_j be the affine
    coordinates of p_j in terms of sigma. sigma is a lower cell for w iff

        w_j >= sum_{i in sigma} c_ji w_i        for every j not in sigma

    C_sigma is that cone in Q^N. Every C_sigma contains the (d+1)-dim
    space of affine functions as lineality.

CHAMBERS:
    The chamber of a regular triangulation T is the intersection of the
    C_sigma, sigma in T. Chambers are the fixed points of the same
    refinement loop that computes coarsest common refinements.

GKZ VECTOR:
    phi_T(j) = sum_{sigma in T, j in sigma} vol(sigma)

    with vol the normalized volume |det[(1, p_i)]|. The secondary polytope
    is conv{phi_T}; its normal fan is the secondary fan.

EXAMPLE:
    unit square:      2 triangulations, secondary polytope a segment
    convex pentagon:  5 triangulations, secondary polytope a pentagon
"""

import logging
from itertools import combinations
from typing import Dict, List, Tuple

from .refinement import refine
from ..builders.cone import Cone, cone_from_inequalities
from ..builders.fan import Fan
from ..builders.polyhedron import Polyhedron, convex_hull
from ..operators.exact import as_exact_matrix, determinant, matrix_columns, rank, solve_coordinates
from ..spec.constants import MAX_FRONTIER, MAX_REFINEMENT_ROUNDS
from ..spec.errors import InputError
from ..spec.structures import columns_matrix, rows_matrix

_logger = logging.getLogger(__name__)

Simplex = Tuple[int, ...]


def _configuration(points) -> List[Tuple]:
    """Homogenized points (1, p_j) of a point matrix or of a polytope's vertices."""
    if isinstance(points, Polyhedron):
        if points.is_empty or not points.is_compact:
            raise InputError("Secondary constructions need a nonempty polytope")
        cols = points.vertex_list
        d = points.ambient_dim
    else:
        M = as_exact_matrix(points, name="points")
        d = M.shape[0]
        cols = matrix_columns(M)
    if d < 1:
        raise InputError("Points must live in dimension >= 1")
    hom = [(1,) + tuple(p) for p in cols]
    if len(set(hom)) != len(hom):
        raise InputError("Point configuration has repeated points")
    if rank(hom, d + 1) != d + 1:
        raise InputError(f"Points do not affinely span Q^{d}")
    return hom


def _height_cones(hom: List[Tuple]) -> Dict[Simplex, Cone]:
    N = len(hom)
    k = len(hom[0])
    out = {}
    for sigma in combinations(range(N), k):
        basis = [hom[i] for i in sigma]
        if rank(basis, k) < k:
            continue
        rows = []
        for j in range(N):
            if j in sigma:
                continue
            c = solve_coordinates(hom[j], basis)
            row = [0] * N
            row[j] = 1
            for i, cij in zip(sigma, c):
                row[i] -= cij
            rows.append(tuple(row))
        if rows:
            out[sigma] = cone_from_inequalities(rows_matrix(rows, N))
        else:
            # a simplex: every height vector keeps it
            out[sigma] = cone_from_inequalities(rows_matrix([(0,) * N], N))
    _logger.debug("%d full-dimensional simplices in a configuration of %d points", len(out), N)
    return out


def _chambers(hom, max_rounds: int, max_frontier: int) -> List[Tuple[Cone, List[Simplex]]]:
    N = len(hom)
    cells = _height_cones(hom)
    candidates = list(dict.fromkeys(cells.values()))
    chambers = refine(candidates, N, max_rounds=max_rounds, max_frontier=max_frontier,
                      seed_minimal=False)
    out = []
    for K in sorted(chambers, key=lambda c: c.key()):
        T = sorted(sigma for sigma, C in cells.items() if C.contains(K))
        out.append((K, T))
    return out


def secondary_fan(points, max_rounds: int = MAX_REFINEMENT_ROUNDS,
                  max_frontier: int = MAX_FRONTIER) -> Fan:
    """
    Fan of height vectors, one maximal cone per regular triangulation.

    Args:
        points: (d, N) matrix, columns are points; or a Polyhedron (its vertices)

    Raises:
        InputError: non-compact polyhedron, repeated points, or points that
                    do not affinely span the ambient space
    """
    hom = _configuration(points)
    return Fan([K for K, _ in _chambers(hom, max_rounds, max_frontier)])


def regular_triangulations(points, max_rounds: int = MAX_REFINEMENT_ROUNDS,
                           max_frontier: int = MAX_FRONTIER) -> List[List[Simplex]]:
    """
    All regular triangulations, each as a sorted list of point-index tuples.

    Example:
        regular_triangulations([[0, 1, 1, 0], [0, 0, 1, 1]])
        -> [[(0, 1, 2), (0, 2, 3)], [(0, 1, 3), (1, 2, 3)]]   (in some order)
    """
    hom = _configuration(points)
    return [T for _, T in _chambers(hom, max_rounds, max_frontier)]


def gkz_vector(hom: List[Tuple], triangulation: List[Simplex]) -> Tuple:
    """GKZ vector of a triangulation of the homogenized configuration."""
    phi = [0] * len(hom)
    for sigma in triangulation:
        vol = abs(determinant([hom[i] for i in sigma]))
        for i in sigma:
            phi[i] += vol
    return tuple(phi)


def secondary_polytope(points, max_rounds: int = MAX_REFINEMENT_ROUNDS,
                       max_frontier: int = MAX_FRONTIER) -> Polyhedron:
    """
    Convex hull of the GKZ vectors of all regular triangulations.

    A Polyhedron argument caches the result in its cache.

    Returns:
        Polyhedron in Q^N, of dimension N - d - 1
    """
    def compute():
        hom = _configuration(points)
        vectors = sorted({gkz_vector(hom, T) for _, T in _chambers(hom, max_rounds, max_frontier)})
        _logger.info("secondary polytope: %d points, %d regular triangulations",
                     len(hom), len(vectors))
        return convex_hull(columns_matrix(vectors, len(hom)))

    if isinstance(points, Polyhedron):
        return points._cached('secondary_polytope', compute)
    return compute()
