"""Geometry construction - cones, polyhedra, fans and named polytopes."""

from .cone import (
    Cone,
    pos_hull,
    cone_from_inequalities,
    intersection,
    contains,
    faces,
    common_face,
)

from .polyhedron import (
    Polyhedron,
    convex_hull,
    polyhedron_from_inequalities,
)

from .fan import Fan

from .polytopes import (
    hypercube,
    cross_polytope,
    std_simplex,
    cyclic_polytope,
)
