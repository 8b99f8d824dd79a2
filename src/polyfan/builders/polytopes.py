"""
Named Polytopes
===============

Standard polytopes used as fixtures and as inputs for normal fans.

POLYTOPES INCLUDED:
    - hypercube(d, s)        [-s, s]^d                  V = 2^d,  F = 2d
    - cross_polytope(d, s)   conv(+-s e_i)              V = 2d,   F = 2^d
    - std_simplex(d)         conv(0, e_1, ..., e_d)     V = d+1,  F = d+1
    - cyclic_polytope(d, n)  conv((t, t^2, ..., t^d))   t = 0..n-1

EXAMPLE (d = 3):
    hypercube(3)       f-vector (8, 12, 6)
    cross_polytope(3)  f-vector (6, 12, 8)
    std_simplex(3)     f-vector (4, 6, 4)

All coordinates are integers, so every vertex is exact.
"""

from itertools import product
from typing import List, Tuple

from .polyhedron import Polyhedron, convex_hull
from ..spec.errors import InputError
from ..spec.structures import columns_matrix


def _check_dim(d: int) -> None:
    if not isinstance(d, int) or d < 1:
        raise InputError(f"Dimension must be a positive integer, got {d!r}")


def _check_scale(s) -> None:
    if s <= 0:
        raise InputError(f"Scale must be positive, got {s!r}")


def hypercube(d: int, s=1) -> Polyhedron:
    """
    Build the cube [-s, s]^d.

    TOPOLOGY (d = 3):
        V = 8 vertices (corners at (+-s, +-s, +-s))
        E = 12 edges
        F = 6 faces (squares)

    Returns:
        Polyhedron
    """
    _check_dim(d)
    _check_scale(s)
    vertices: List[Tuple] = sorted(product([-s, s], repeat=d))
    return convex_hull(columns_matrix(vertices, d))


def cross_polytope(d: int, s=1) -> Polyhedron:
    """
    Build the cross polytope conv(+-s e_i), the polar of the cube.

    TOPOLOGY (d = 3, octahedron):
        V = 6 vertices (on axes at +-s)
        E = 12 edges
        F = 8 faces (triangles)
    """
    _check_dim(d)
    _check_scale(s)
    vertices = []
    for axis in range(d):
        for sign in [-1, 1]:
            v = [0] * d
            v[axis] = sign * s
            vertices.append(tuple(v))
    return convex_hull(columns_matrix(sorted(vertices), d))


def std_simplex(d: int) -> Polyhedron:
    """Build the standard simplex conv(0, e_1, ..., e_d)."""
    _check_dim(d)
    vertices = [tuple([0] * d)]
    for axis in range(d):
        v = [0] * d
        v[axis] = 1
        vertices.append(tuple(v))
    return convex_hull(columns_matrix(vertices, d))


def cyclic_polytope(d: int, n: int) -> Polyhedron:
    """
    Build the cyclic polytope: convex hull of n points on the moment curve
    t -> (t, t^2, ..., t^d) at t = 0, ..., n-1.

    For n > d every point is a vertex and the polytope is simplicial and
    neighborly.
    """
    _check_dim(d)
    if not isinstance(n, int) or n < 1:
        raise InputError(f"Number of points must be a positive integer, got {n!r}")
    vertices = [tuple(t ** k for k in range(1, d + 1)) for t in range(n)]
    return convex_hull(columns_matrix(vertices, d))
