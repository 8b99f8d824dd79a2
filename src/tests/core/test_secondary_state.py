"""
Tests for Secondary and State Polytopes
=======================================

Tests:
- Regular triangulations and GKZ vectors of small configurations
- Secondary polytope dimensions (N - d - 1)
- Gröbner fan walk and state polytope of homogeneous ideals
- Error taxonomy: non-homogeneous input, eps budget, cone budget

Run: python -m pytest tests/core/test_secondary_state.py -v
"""

import pytest
import sympy as sp
import sys
import os
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.dirname(os.path.abspath(__file__)))))

from polyfan.builders import convex_hull, hypercube
from polyfan.analysis import (
    regular_triangulations,
    secondary_fan,
    secondary_polytope,
    positive_grading,
    groebner_fan,
    state_polytope,
    WeightOrder,
    SympyGroebner,
)
from polyfan.spec import InputError, ConvergenceError, BudgetExceeded


SQUARE = [[0, 1, 1, 0], [0, 0, 1, 1]]
PENTAGON = [[0, 2, 3, 1, -1], [0, 0, 2, 3, 2]]
TRIANGLE = [[0, 1, 0], [0, 0, 1]]

x, y, z = sp.symbols('x y z')


# =============================================================================
# TEST A: Secondary fan and polytope
# =============================================================================

def test_square_triangulations():
    """A.1: The two diagonals of the square."""
    T = sorted(regular_triangulations(SQUARE))
    assert T == [[(0, 1, 2), (0, 2, 3)], [(0, 1, 3), (1, 2, 3)]]


def test_square_secondary_polytope():
    """A.2: GKZ vectors (2,1,2,1) and (1,2,1,2): a segment."""
    S = secondary_polytope(SQUARE)
    assert S.dim == 1
    assert set(S.vertex_list) == {(2, 1, 2, 1), (1, 2, 1, 2)}


def test_square_secondary_fan():
    """A.3: Two halfspaces sharing the affine functions as lineality."""
    F = secondary_fan(SQUARE)
    assert len(F) == 2
    assert F.lineality_dim == 3
    assert F.is_complete


def test_pentagon_secondary_polytope():
    """A.4: Five triangulations, secondary polytope is a pentagon."""
    assert len(regular_triangulations(PENTAGON)) == 5
    S = secondary_polytope(PENTAGON)
    assert S.dim == 2
    assert len(S.vertex_list) == 5
    assert S.f_vector() == [5, 5]


def test_pentagon_secondary_fan_polytopal():
    """A.5: The secondary fan is the normal fan of the secondary polytope."""
    F = secondary_fan(PENTAGON)
    assert len(F) == 5
    assert F.is_complete
    assert F.is_polytopal()


def test_triangle_single_triangulation():
    """A.6: A simplex has one triangulation; the secondary polytope is a point."""
    assert regular_triangulations(TRIANGLE) == [[(0, 1, 2)]]
    assert secondary_polytope(TRIANGLE).dim == 0


def test_polyhedron_input_cached():
    """A.7: A polytope argument uses its vertices and caches the result."""
    P = hypercube(2)
    S = secondary_polytope(P)
    assert S.dim == 1
    assert P.cache['secondary_polytope'] is S


def test_secondary_guards():
    """A.8: Unbounded, repeated and non-spanning configurations."""
    with pytest.raises(InputError):
        secondary_polytope(convex_hull([[0], [0]], [[1], [0]]))
    with pytest.raises(InputError):
        secondary_polytope([[0, 1, 2], [0, 0, 0]])
    with pytest.raises(InputError):
        secondary_polytope([[0, 1, 0, 0], [0, 0, 1, 0]])


# =============================================================================
# TEST B: Gröbner service
# =============================================================================

def test_weight_order_equality():
    """B.1: Orders with the same weights are equal and hash equal."""
    assert WeightOrder([1, 2, 3]) == WeightOrder([1, 2, 3])
    assert hash(WeightOrder([1, 2, 3])) == hash(WeightOrder([1, 2, 3]))
    assert WeightOrder([1, 2, 3]) != WeightOrder([3, 2, 1])


def test_weight_order_needs_positive_weights():
    """B.2: Non-positive weights are not a monomial order."""
    with pytest.raises(InputError):
        WeightOrder([1, 0, 1])


def test_leading_term_follows_weight():
    """B.3: The heaviest variable leads x^2 + y^2 + z^2."""
    service = SympyGroebner()
    basis = service.groebner_basis([x**2 + y**2 + z**2], [x, y, z], (3, 1, 1))
    assert [lead for lead, _ in basis] == [(2, 0, 0)]
    basis = service.groebner_basis([x**2 + y**2 + z**2], [x, y, z], (1, 3, 1))
    assert [lead for lead, _ in basis] == [(0, 2, 0)]


def test_positive_grading():
    """B.4: x^2 - yz is homogeneous for a positive grading."""
    g = positive_grading([x**2 - y*z], [x, y, z])
    assert all(gi > 0 for gi in g)
    assert 2 * g[0] == g[1] + g[2]


# =============================================================================
# TEST C: Gröbner fan and state polytope
# =============================================================================

def test_state_polytope_sum_of_squares():
    """C.1: Triangle with vertices 2*e_i."""
    S = state_polytope([x**2 + y**2 + z**2], [x, y, z])
    assert set(S.vertex_list) == {(2, 0, 0), (0, 2, 0), (0, 0, 2)}
    assert S.dim == 2


def test_groebner_fan_sum_of_squares():
    """C.2: Three cones, one per leading square, covering Q^3."""
    F = groebner_fan([x**2 + y**2 + z**2], [x, y, z])
    assert len(F) == 3
    assert F.is_complete
    assert F.lineality_dim == 1


def test_state_polytope_binomial():
    """C.3: x^2 - yz has initial ideals <x^2> and <yz>."""
    S = state_polytope([x**2 - y*z], [x, y, z])
    assert set(S.vertex_list) == {(2, 0, 0), (0, 1, 1)}
    assert S.dim == 1


def test_state_polytope_normal_fan_is_groebner_fan():
    """C.4: Outer normal fan of the state polytope."""
    polys = [x**2 + y**2 + z**2]
    F = groebner_fan(polys, [x, y, z])
    S = state_polytope(polys, [x, y, z])
    assert S.normal_fan().max_cones == F.max_cones


# =============================================================================
# TEST D: Guards
# =============================================================================

def test_non_homogeneous_raises():
    """D.1: No positive grading makes x^2 - x or x - 1 homogeneous."""
    with pytest.raises(InputError):
        state_polytope([x**2 - x], [x])
    with pytest.raises(InputError):
        groebner_fan([x - 1, y], [x, y])


def test_zero_ideal_raises():
    """D.2: Nothing to grade."""
    with pytest.raises(InputError):
        state_polytope([sp.Integer(0)], [x, y])


class _StuckService(SympyGroebner):
    """Always answers with the basis for the order x > y > z."""

    def groebner_basis(self, polys, gens, weights):
        return [((2, 0, 0), [(0, 0, 2), (0, 2, 0), (2, 0, 0)])]


def test_eps_budget_raises_convergence_error():
    """D.3: A service that never moves exhausts the eps budget."""
    with pytest.raises(ConvergenceError):
        groebner_fan([x**2 + y**2 + z**2], [x, y, z],
                     service=_StuckService(), max_eps_refinements=3)


def test_cone_budget_raises():
    """D.4: Three cones do not fit in a budget of one."""
    with pytest.raises(BudgetExceeded):
        groebner_fan([x**2 + y**2 + z**2], [x, y, z], max_cones=1)
