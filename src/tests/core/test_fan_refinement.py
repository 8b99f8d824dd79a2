"""
Tests for Fans and Refinement
=============================

Tests:
- Fan construction keeps the maximal cones
- Coarsest common refinement: four quadrants, idempotence, fan validity
- Stellar subdivision preserves the support

Run: python -m pytest tests/core/test_fan_refinement.py -v
"""

import pytest
import numpy as np
from itertools import product
import sys
import os
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.dirname(os.path.abspath(__file__)))))

from polyfan.builders import Fan, pos_hull, hypercube
from polyfan.analysis import inclusion_minimal, cc_refinement, stellar_subdivision
from polyfan.spec import InputError, DimensionMismatch, BudgetExceeded


AXES_2D = [[1, 0, -1, 0], [0, 1, 0, -1]]
Q1 = [[1, 0], [0, 1]]


def _grid(n, r=2):
    return list(product(range(-r, r + 1), repeat=n))


def _in_support(F, p):
    return any(C.contains(p) for C in F.max_cones)


# =============================================================================
# TEST A: Fan construction
# =============================================================================

def test_fan_drops_faces_and_duplicates():
    """A.1: A ray inside a generating cone is not maximal."""
    Q = pos_hull(Q1)
    F = Fan([Q, pos_hull([[1], [0]]), pos_hull([[2, 0], [0, 2]])])
    assert len(F) == 1
    assert F.max_cones == [Q]
    assert F.is_pure


def test_fan_guards():
    """A.2: Empty input and mixed dimensions."""
    with pytest.raises(InputError):
        Fan([])
    with pytest.raises(DimensionMismatch):
        Fan([pos_hull(Q1), pos_hull([[1], [0], [0]])])


def test_fan_invariants_square():
    """A.3: Normal fan of the square."""
    F = hypercube(2).normal_fan()
    assert F.dim == 2
    assert F.ambient_dim == 2
    assert F.is_complete
    assert F.is_simplicial
    assert F.is_smooth
    assert F.is_fan()
    assert F.f_vector() == [1, 4, 4]
    assert len(F.ray_list) == 4
    assert F.rays.shape == (2, 4)


def test_fan_contains_faces_only():
    """A.4: Rays of the fan are cones of the fan, the diagonal is not."""
    F = hypercube(2).normal_fan()
    assert F.contains(pos_hull([[1], [0]]))
    assert not F.contains(pos_hull([[1], [1]]))


def test_single_cone_not_complete():
    """A.5: The quadrant alone does not cover the plane."""
    assert not Fan([pos_hull(Q1)]).is_complete


def test_is_fan_detects_overlap():
    """A.6: Overlapping cones violate the fan condition."""
    F = Fan([pos_hull(Q1), pos_hull([[1, -1], [1, 1]])])
    assert not F.is_fan()


# =============================================================================
# TEST B: Coarsest common refinement
# =============================================================================

def test_inclusion_minimal():
    """B.1: Only the smallest cone survives."""
    Q = pos_hull(Q1)
    S = pos_hull([[1, 1], [0, 1]])
    assert inclusion_minimal([Q, S, Q]) == [S]


def test_four_quadrants():
    """B.2: Axis rays in the plane give the four quadrants."""
    F = cc_refinement(AXES_2D)
    assert len(F) == 4
    assert all(C.dim == 2 for C in F.max_cones)
    assert F.is_complete
    assert F == hypercube(2).normal_fan()


def test_square_self_refinement_idempotent():
    """B.3: Refining the rays of the square's normal fan changes nothing."""
    F = hypercube(2, 1).normal_fan()
    assert cc_refinement(F.rays) == F


def test_refinement_is_fan_and_idempotent():
    """B.4: Five rays in the plane give five sectors."""
    M = [[1, 1, 0, -1, 0], [0, 1, 1, 0, -1]]
    F = cc_refinement(M)
    assert len(F) == 5
    assert F.is_fan()
    assert F.is_complete
    assert cc_refinement(F.rays) == F


def test_refinement_of_cube_rays():
    """B.5: The six axis rays in Q^3 give the eight octants."""
    M = [[1, -1, 0, 0, 0, 0], [0, 0, 1, -1, 0, 0], [0, 0, 0, 0, 1, -1]]
    F = cc_refinement(M)
    assert len(F) == 8
    assert F == hypercube(3).normal_fan()


def test_refinement_guards():
    """B.6: Too few rays, rays not spanning, exhausted budget."""
    with pytest.raises(InputError):
        cc_refinement([[1], [0]])
    with pytest.raises(InputError):
        cc_refinement([[1, 2], [0, 0]])
    with pytest.raises(BudgetExceeded):
        cc_refinement(AXES_2D, max_rounds=0)


def test_square_refined_with_itself():
    """B.7: Doubled vertex columns of the square refine like one copy."""
    V = hypercube(2, 1).vertices
    F = cc_refinement(np.hstack([V, V]))
    assert len(F) == 4
    assert F == cc_refinement(V)
    assert cc_refinement(F.rays) == F
    assert F.is_complete


def test_frontier_budget_raises():
    """B.8: e1, e2, e3 and (2,-1,1) overlap after round one."""
    M = [[1, 0, 0, 2], [0, 1, 0, -1], [0, 0, 1, 1]]
    with pytest.raises(BudgetExceeded, match="frontier"):
        cc_refinement(M, max_frontier=0)
    assert cc_refinement(M).is_fan()


# =============================================================================
# TEST C: Stellar subdivision
# =============================================================================

def test_stellar_square_diagonal():
    """C.1: Subdividing by (1,1) splits one quadrant in two."""
    F = hypercube(2).normal_fan()
    G = stellar_subdivision(F, [1, 1])
    assert len(G) == 5
    assert G.is_complete
    assert G.is_fan()
    assert (1, 1) in G.ray_list
    assert pos_hull([[1, 1], [0, 1]]) in G.max_cones


def test_stellar_preserves_support():
    """C.2: union(subdivide(F, r)) == union(F) on grid points."""
    F = Fan([pos_hull(Q1), pos_hull([[-1, 0], [0, -1]])])
    G = stellar_subdivision(F, [1, 2])
    assert len(G) == 3
    for p in _grid(2):
        assert _in_support(F, p) == _in_support(G, p), f"Support differs at {p}"


def test_stellar_preserves_support_3d():
    """C.3: Same in Q^3 with a ray in the interior of an octant."""
    F = hypercube(3).normal_fan()
    G = stellar_subdivision(F, [1, 1, 1])
    assert len(G) == 8 - 1 + 3
    assert G.is_complete
    for p in _grid(3, 1):
        assert _in_support(F, p) == _in_support(G, p)


def test_stellar_existing_ray_noop():
    """C.4: Subdividing by a ray of the fan gives the same fan."""
    F = hypercube(2).normal_fan()
    assert stellar_subdivision(F, [1, 0]) == F


def test_stellar_ray_outside_support_warns():
    """C.5: Soft anomaly, not an error."""
    F = Fan([pos_hull(Q1)])
    with pytest.warns(UserWarning):
        G = stellar_subdivision(F, [-1, -1])
    assert G == F


def test_stellar_guards():
    """C.6: Wrong length, zero ray, exhausted budget."""
    F = hypercube(2).normal_fan()
    with pytest.raises(DimensionMismatch):
        stellar_subdivision(F, [1, 1, 1])
    with pytest.raises(InputError):
        stellar_subdivision(F, [0, 0])
    with pytest.raises(BudgetExceeded):
        stellar_subdivision(F, [1, 1], max_steps=0)
