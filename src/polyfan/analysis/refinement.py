"""
Refinement of Cone Arrangements
===============================

COARSEST COMMON REFINEMENT (cc_refinement):
    Input: an (n, m) matrix whose columns are candidate rays.

    1. Every n-subset of the columns spans a candidate cone.
    2. Keep the full-dimensional candidates.
    3. Reduce them to an inclusion-minimal family: the first frontier.
    4. For each frontier cone C1 and each candidate C2: if C2 does not
       contain C1 and C1 & C2 is full-dimensional, C1 & C2 is a refinement
       of C1. A C1 with no refinement is final.
    5. The next frontier is the set of distinct refinements. Repeat until
       it is empty.
    6. The final cones generate the fan.

    Every refinement is strictly smaller than its parent and there are
    finitely many intersections of candidates, so the loop terminates.
    Worst case is exponential in m.

FIXED POINT PROPERTY:
    A final cone is cut by no candidate: every candidate either contains
    it or meets it in a lower-dimensional set. Two overlapping final cones
    therefore contain each other, i.e. they are equal.

STELLAR SUBDIVISION:
    Every maximal cone containing the new ray r is split along its facets
    with an explicit stack: a facet not containing r becomes pos(facet, r),
    a facet containing r is split again. Cones not containing r are kept.
"""

import logging
import warnings
from itertools import combinations
from typing import Dict, List, Sequence

from ..builders.cone import Cone, intersection, pos_hull
from ..builders.fan import Fan
from ..operators.exact import as_exact_matrix, as_exact_vector, is_zero, matrix_columns, primitive, rank
from ..spec.constants import MAX_FRONTIER, MAX_REFINEMENT_ROUNDS, MAX_STELLAR_STEPS
from ..spec.errors import BudgetExceeded, InputError
from ..spec.structures import columns_matrix

_logger = logging.getLogger(__name__)


def inclusion_minimal(cones: Sequence[Cone]) -> List[Cone]:
    """
    Drop duplicates and every cone that properly contains another member.

    Returns:
        the surviving cones in input order
    """
    unique = list(dict.fromkeys(cones))
    return [c for c in unique
            if not any(d != c and d.dim <= c.dim and c.contains(d) for d in unique)]


def refine(candidates: Sequence[Cone], n: int,
           max_rounds: int = MAX_REFINEMENT_ROUNDS,
           max_frontier: int = MAX_FRONTIER,
           seed_minimal: bool = True) -> List[Cone]:
    """
    Fixed-point refinement of full-dimensional candidate cones.

    Args:
        candidates: full-dimensional cones in Q^n
        n: ambient dimension
        max_rounds: budget on frontier rounds
        max_frontier: budget on the size of one frontier
        seed_minimal: start from the inclusion-minimal candidates only;
            with False every candidate seeds the frontier, which reaches
            every intersection of candidates that no candidate cuts

    Returns:
        the distinct final cones (the maximal cones of the common refinement)

    Raises:
        BudgetExceeded: if a budget is exhausted
    """
    candidates = list(dict.fromkeys(candidates))
    frontier = inclusion_minimal(candidates) if seed_minimal else list(candidates)
    result: Dict[Cone, None] = {}

    rounds = 0
    while frontier:
        rounds += 1
        if rounds > max_rounds:
            raise BudgetExceeded(f"Refinement did not settle within {max_rounds} rounds")
        refinements: Dict[Cone, None] = {}
        for C1 in frontier:
            refined = False
            for C2 in candidates:
                if C2.contains(C1):
                    continue
                C = intersection(C1, C2)
                if C.dim == n:
                    refined = True
                    refinements[C] = None
            if not refined:
                result[C1] = None
        _logger.debug("refine round %d: %d cones in, %d refinements, %d final so far",
                      rounds, len(frontier), len(refinements), len(result))
        if len(refinements) > max_frontier:
            raise BudgetExceeded(
                f"Refinement frontier grew to {len(refinements)} cones (budget {max_frontier})")
        frontier = list(refinements)

    return list(result)


def cc_refinement(M, max_rounds: int = MAX_REFINEMENT_ROUNDS,
                  max_frontier: int = MAX_FRONTIER) -> Fan:
    """
    Coarsest common refinement of all full-dimensional cones spanned by
    n columns of M.

    Args:
        M: (n, m) matrix, columns are the candidate rays

    Returns:
        Fan

    Raises:
        InputError: n < 1, fewer than n nonzero columns, or no
                    full-dimensional candidate
    """
    M = as_exact_matrix(M, name="rays")
    n, m = M.shape
    if n < 1:
        raise InputError("The ambient dimension must be positive")
    cols = [c for c in matrix_columns(M) if not is_zero(c)]
    if len(cols) < n:
        raise InputError(f"Need at least {n} nonzero rays in dimension {n}, got {len(cols)}")

    candidates: Dict[Cone, None] = {}
    for subset in combinations(cols, n):
        if rank(list(subset), n) < n:
            continue
        candidates[pos_hull(columns_matrix(list(subset), n))] = None
    if not candidates:
        raise InputError("The rays do not span the ambient space")

    _logger.debug("cc_refinement: %d columns, %d full-dimensional candidates", m, len(candidates))
    cones = refine(list(candidates), n, max_rounds=max_rounds, max_frontier=max_frontier)
    return Fan(cones)


def stellar_subdivision(F: Fan, r, max_steps: int = MAX_STELLAR_STEPS) -> Fan:
    """
    Stellar subdivision of a fan by a ray.

    Args:
        F: Fan
        r: vector of length F.ambient_dim (scaled to a primitive ray)
        max_steps: budget on cones popped from the work stack

    Returns:
        new Fan; dimension, rays and purity are recomputed

    Raises:
        DimensionMismatch: ray of the wrong length
        InputError: zero ray
        BudgetExceeded: work stack budget exhausted
    """
    n = F.ambient_dim
    v = as_exact_vector(r, n, name="ray")
    if is_zero(v):
        raise InputError("Cannot subdivide by the zero vector")
    v = primitive(v)
    v_col = columns_matrix([v], n)

    out: List[Cone] = []
    hit = False
    steps = 0
    for C in F.max_cones:
        if not C.contains(v):
            out.append(C)
            continue
        hit = True
        stack = [C]
        while stack:
            steps += 1
            if steps > max_steps:
                raise BudgetExceeded(f"Stellar subdivision exceeded {max_steps} steps")
            D = stack.pop()
            if D.dim - D.lineality_dim <= 1:
                out.append(D)
                continue
            for f in D.faces(1):
                if f.contains(v):
                    stack.append(f)
                else:
                    out.append(pos_hull([f, v_col]))

    if not hit:
        warnings.warn(f"Ray {v} lies outside the support of the fan; fan unchanged", UserWarning)

    unique = list(dict.fromkeys(out))
    survivors = [c for c in unique
                 if not any(d != c and d.dim >= c.dim and d.contains(c) for d in unique)]
    _logger.debug("stellar_subdivision: %d -> %d maximal cones in %d steps",
                  len(F), len(survivors), steps)
    return Fan(survivors)
