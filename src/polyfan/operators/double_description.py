"""
Double Description
==================

Exact conversion between the two descriptions of a polyhedral cone:

    V-description:  C = pos(rays) + lin(lineality)
    H-description:  C = {x : A x >= 0, E x = 0}

BACKEND:
    cddlib through pycddlib, in its GMP rational mode (cdd.gmp). Entries go
    in as Fraction and come back as Fraction, so no tolerance is involved.

CDD MATRIX LAYOUT (one row per constraint or generator):
    H-side:  [b | a]   means  b + a.x >= 0   (rows in lin_set: = 0)
    V-side:  [t | v]   t = 1 point, t = 0 ray (rows in lin_set: lines)

    A cone is homogeneous, so every H row has b = 0 and the V side carries
    the origin as its only point.

CANONICAL OUTPUT:
    Rays (resp. facet normals) are projected off the lineality space
    (resp. the hyperplanes), made primitive, deduplicated and sorted.
    The lineality space (resp. hyperplanes) comes back as row_basis().
"""

from fractions import Fraction
from typing import List, Sequence, Tuple

import cdd
import cdd.gmp

from .exact import IntVector, is_zero, primitive, project_out, row_basis


def _cdd_rows(vectors: Sequence[Sequence], head: int) -> List[List[Fraction]]:
    return [[Fraction(head)] + [Fraction(x) for x in v] for v in vectors]


def _split(mat, n: int) -> Tuple[List[Tuple], List[Tuple], List[Tuple]]:
    """Rows of a cdd matrix as (homogeneous, linearity, affine) vectors."""
    homogeneous, linear, affine = [], [], []
    for i, row in enumerate(mat.array):
        head, vec = Fraction(row[0]), tuple(Fraction(x) for x in row[1:n + 1])
        if i in mat.lin_set:
            linear.append(vec)
        elif head == 0:
            homogeneous.append(vec)
        else:
            affine.append(vec)
    return homogeneous, linear, affine


def _canonical(vectors: Sequence[Sequence], span: List[IntVector]) -> List[IntVector]:
    out = set()
    for v in vectors:
        p = project_out(v, span)
        if not is_zero(p):
            out.add(primitive(p))
    return sorted(out)


def extreme_rays(inequalities: Sequence[Sequence],
                 equations: Sequence[Sequence],
                 n: int) -> Tuple[List[IntVector], List[IntVector]]:
    """
    Generators of the cone {x in Q^n : a.x >= 0 for a in inequalities,
                                        e.x = 0 for e in equations}.

    Args:
        inequalities: rows a (rational or integer)
        equations: rows e (rational or integer)
        n: ambient dimension

    Returns:
        rays: primitive extreme rays (pairwise non-proportional), sorted
        lineality: canonical integer basis of the lineality space

    PROPERTY:
        The cone equals pos(rays) + lin(lineality) and no ray is a
        non-negative combination of the others.
    """
    if n == 0:
        return [], []
    ineqs = [a for a in inequalities if not is_zero(a)]
    eqs = [e for e in equations if not is_zero(e)]

    rows = _cdd_rows(eqs, 0) + _cdd_rows(ineqs, 0)
    if not rows:
        # 0 >= 0: the whole space
        rows = [[Fraction(0)] * (n + 1)]
    mat = cdd.gmp.matrix_from_array(rows, lin_set=frozenset(range(len(eqs))),
                                    rep_type=cdd.RepType.INEQUALITY)
    gen = cdd.gmp.copy_generators(cdd.gmp.polyhedron_from_matrix(mat))

    # the affine rows are the apex at the origin
    rays, lines, _ = _split(gen, n)
    lineality = row_basis(lines, n)
    return _canonical(rays, lineality), lineality


def dual_description(rays: Sequence[Sequence],
                     lineality: Sequence[Sequence],
                     n: int) -> Tuple[List[IntVector], List[IntVector]]:
    """
    H-description of pos(rays) + lin(lineality).

    Returns:
        facets: irredundant primitive inner normals a (a.x >= 0 on the cone)
        hyperplanes: canonical basis h of the orthogonal complement of the
                     linear span (h.x = 0 on the cone)

    EXAMPLE:
        The positive quadrant pos(e1, e2) has facets [(0, 1), (1, 0)] and
        no hyperplanes.
    """
    if n == 0:
        return [], []
    lines = [l for l in lineality if not is_zero(l)]
    gens = [r for r in rays if not is_zero(r)]

    rows = _cdd_rows([[0] * n], 1) + _cdd_rows(lines, 0) + _cdd_rows(gens, 0)
    mat = cdd.gmp.matrix_from_array(rows, lin_set=frozenset(range(1, 1 + len(lines))),
                                    rep_type=cdd.RepType.GENERATOR)
    ineq = cdd.gmp.copy_inequalities(cdd.gmp.polyhedron_from_matrix(mat))

    # affine rows can only be the trivial 1 >= 0
    facets, equations, _ = _split(ineq, n)
    hyperplanes = row_basis(equations, n)
    return _canonical(facets, hyperplanes), hyperplanes
