"""
Gröbner Fan and State Polytope
==============================

For an ideal I generated by polynomials that are homogeneous for some
strictly positive grading g, the Gröbner fan is a complete fan in Q^n:
one maximal cone per initial monomial ideal.

GRÖBNER CONE:
    For the reduced Gröbner basis G under a weight order,

        C = {w : w.(lead(f) - m) >= 0  for f in G, m a monomial of f}

    g lies in the lineality space of C, so w and w + j*g induce the same
    initial ideal. Weights are shifted by multiples of g until strictly
    positive before calling the service.

WALK (explicit frontier):
    for each cone C in the frontier and each facet W of C not yet crossed:
        p = relative interior point of W,  a = inner normal of W in C
        eps = 1/10, 1/100, ...
        recompute C' at p - eps * a until W is a facet of C' != C
    A new C' joins the frontier.

STATE POLYTOPE:
    D = max degree (in g) of all Gröbner basis elements met in the walk.
    Vertex of C = sum of the exponents of the monomials of degree <= D in
    the initial ideal of C. The normal fan of the state polytope is the
    Gröbner fan.

FAIL-FAST:
    InputError        - no positive grading (ideal not homogeneous)
    ConvergenceError  - eps shrank MAX_EPS_REFINEMENTS times without
                        reaching the neighbour across a facet
    BudgetExceeded    - more than MAX_GROEBNER_CONES cones
"""

import logging
from collections import deque
from fractions import Fraction
from itertools import product
from typing import Dict, List, Sequence, Tuple

from .groebner import BasisElement, GroebnerService, SympyGroebner
from ..builders.cone import Cone, cone_from_inequalities
from ..builders.fan import Fan
from ..builders.polyhedron import Polyhedron, convex_hull
from ..operators.double_description import extreme_rays
from ..operators.exact import IntVector, dot
from ..spec.constants import EPS_FACTOR, EPS_START, MAX_EPS_REFINEMENTS, MAX_GROEBNER_CONES
from ..spec.errors import BudgetExceeded, ConvergenceError, InputError
from ..spec.structures import columns_matrix, rows_matrix

_logger = logging.getLogger(__name__)


def positive_grading(polys: Sequence, gens: Sequence,
                     service: GroebnerService = None) -> IntVector:
    """
    A strictly positive integer grading making every generator homogeneous.

    Raises:
        InputError: if no such grading exists
    """
    service = service or SympyGroebner()
    n = len(gens)
    if n < 1:
        raise InputError("Need at least one variable")
    diffs = []
    nonzero = 0
    for f in polys:
        exps = service.exponents(f, gens)
        if not exps:
            continue
        nonzero += 1
        diffs.extend(tuple(a - b for a, b in zip(e, exps[0])) for e in exps[1:])
    if nonzero == 0:
        raise InputError("Need at least one nonzero polynomial")

    identity = [tuple(1 if i == j else 0 for j in range(n)) for i in range(n)]
    rays, _ = extreme_rays(identity, diffs, n)
    g = tuple(sum((r[i] for r in rays), 0) for i in range(n))
    if not all(x > 0 for x in g):
        raise InputError("The generators are not homogeneous for any positive grading")
    return g


def _shift_positive(w: Sequence, grading: IntVector) -> Tuple[Fraction, ...]:
    j = 0
    for wi, gi in zip(w, grading):
        if wi <= 0:
            j = max(j, int((-wi) / gi) + 1)
    return tuple(Fraction(wi) + j * gi for wi, gi in zip(w, grading))


def groebner_cone(basis: List[BasisElement], n: int) -> Cone:
    """Closed Gröbner cone of a reduced Gröbner basis."""
    rows = []
    for lead, monoms in basis:
        for m in monoms:
            if m != lead:
                rows.append(tuple(a - b for a, b in zip(lead, m)))
    if not rows:
        rows = [(0,) * n]
    return cone_from_inequalities(rows_matrix(rows, n))


class _Walk:
    """Explicit-frontier traversal of the Gröbner fan."""

    def __init__(self, polys, gens, service: GroebnerService,
                 max_cones: int, max_eps_refinements: int):
        self.polys = list(polys)
        self.gens = list(gens)
        self.n = len(self.gens)
        self.service = service
        self.max_cones = max_cones
        self.max_eps_refinements = max_eps_refinements
        self.grading = positive_grading(self.polys, self.gens, service)
        self.bases: Dict[Cone, List[BasisElement]] = {}

    def cone_at(self, w) -> Tuple[Cone, List[BasisElement]]:
        basis = self.service.groebner_basis(self.polys, self.gens,
                                            _shift_positive(w, self.grading))
        return groebner_cone(basis, self.n), basis

    def neighbour(self, C: Cone, wall: Cone) -> Tuple[Cone, List[BasisElement]]:
        a = wall.hyperplane_list[0]
        if dot(a, C.interior_vector()) < 0:
            a = tuple(-x for x in a)
        p = wall.interior_vector()
        eps = EPS_START
        for attempt in range(self.max_eps_refinements):
            w = tuple(pi - eps * ai for pi, ai in zip(p, a))
            D, basis = self.cone_at(w)
            if D != C and wall in D.faces(1):
                return D, basis
            _logger.debug("eps=%s missed the neighbour across %r (attempt %d)", eps, wall, attempt)
            eps *= EPS_FACTOR
        raise ConvergenceError(
            f"No neighbouring Gröbner cone across {wall!r} after "
            f"{self.max_eps_refinements} refinements of eps")

    def run(self) -> Dict[Cone, List[BasisElement]]:
        start, basis = self.cone_at(self.grading)
        self.bases[start] = basis
        crossed = set()
        queue = deque([start])
        while queue:
            C = queue.popleft()
            for wall in C.faces(1):
                if wall in crossed:
                    continue
                crossed.add(wall)
                D, basis = self.neighbour(C, wall)
                if D not in self.bases:
                    self.bases[D] = basis
                    if len(self.bases) > self.max_cones:
                        raise BudgetExceeded(
                            f"Gröbner fan has more than {self.max_cones} cones")
                    queue.append(D)
            _logger.debug("Gröbner walk: %d cones found, %d in frontier",
                          len(self.bases), len(queue))
        _logger.info("Gröbner walk finished with %d cones", len(self.bases))
        return self.bases


def groebner_fan(polys: Sequence, gens: Sequence, service: GroebnerService = None,
                 max_cones: int = MAX_GROEBNER_CONES,
                 max_eps_refinements: int = MAX_EPS_REFINEMENTS) -> Fan:
    """
    Gröbner fan of the ideal generated by homogeneous polynomials.

    Args:
        polys: sympy expressions
        gens: sympy symbols
        service: GroebnerService (default SympyGroebner)

    Returns:
        complete Fan in Q^len(gens)
    """
    walk = _Walk(polys, gens, service or SympyGroebner(), max_cones, max_eps_refinements)
    return Fan(list(walk.run()))


def _initial_monomials(leads: List[IntVector], grading: IntVector, D: int) -> List[IntVector]:
    """Monomials of degree <= D divisible by some leading monomial."""
    bounds = [D // gi for gi in grading]
    out = []
    for e in product(*(range(b + 1) for b in bounds)):
        if dot(grading, e) > D:
            continue
        if any(all(x >= y for x, y in zip(e, lead)) for lead in leads):
            out.append(e)
    return out


def state_polytope(polys: Sequence, gens: Sequence, service: GroebnerService = None,
                   max_cones: int = MAX_GROEBNER_CONES,
                   max_eps_refinements: int = MAX_EPS_REFINEMENTS) -> Polyhedron:
    """
    State polytope of a homogeneous ideal.

    Example:
        x, y, z = sympy.symbols('x y z')
        state_polytope([x**2 + y**2 + z**2], [x, y, z])
        -> triangle with vertices (2,0,0), (0,2,0), (0,0,2)

    Raises:
        InputError: the generators are not homogeneous
    """
    service = service or SympyGroebner()
    walk = _Walk(polys, gens, service, max_cones, max_eps_refinements)
    bases = walk.run()
    g = walk.grading
    D = max(dot(g, m) for basis in bases.values() for _, monoms in basis for m in monoms)

    vertices = set()
    for basis in bases.values():
        leads = [lead for lead, _ in basis]
        monoms = _initial_monomials(leads, g, D)
        vertices.add(tuple(sum((m[i] for m in monoms), 0) for i in range(walk.n)))
    _logger.info("state polytope: %d Gröbner cones, degree bound %d, %d distinct vertices",
                 len(bases), D, len(vertices))
    return convex_hull(columns_matrix(sorted(vertices), walk.n))
