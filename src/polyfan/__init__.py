"""
POLYFAN - Exact polyhedral cones, fans and projectivity
=======================================================

NO floating point. NO plotting. NO I/O.

Structure:
    builders/   - Geometry construction (cones, polyhedra, fans, named polytopes)
    operators/  - Exact linear algebra, double description
    analysis/   - Refinement, projectivity, secondary and state polytopes
    spec/       - Constants, errors and the object contract

Every geometric object (Cone, Polyhedron, Fan) exposes:
    - ambient_dim
    - generators()         (rays, lineality)
    - facet_description()  (facets, hyperplanes)
    - cache                (write-once derived results)

Matrices are numpy object arrays of exact numbers; columns are vectors.

Requirements (Python, numpy and sympy are version-checked on import):
    Python >= 3.9
    numpy >= 1.20
    sympy >= 1.12   (smith_normal_form over ZZ, callable monomial orders)
    pycddlib >= 3.0 (cdd.gmp)
"""

import sys

import numpy as np
import sympy


def _version_tuple(version: str):
    return tuple(int(p) for p in version.split(".")[:2] if p.isdigit())


if sys.version_info < (3, 9):
    raise ImportError(f"polyfan requires Python >= 3.9, got {sys.version}")
if _version_tuple(sympy.__version__) < (1, 12):
    raise ImportError(f"polyfan requires sympy >= 1.12, got {sympy.__version__}")
if _version_tuple(np.__version__) < (1, 20):
    raise ImportError(f"polyfan requires numpy >= 1.20, got {np.__version__}")

from . import spec
from . import operators
from . import builders
from . import analysis

from .spec import InputError, DimensionMismatch, ConvergenceError, BudgetExceeded
from .builders import (
    Cone,
    Polyhedron,
    Fan,
    pos_hull,
    cone_from_inequalities,
    convex_hull,
    polyhedron_from_inequalities,
    hypercube,
    cross_polytope,
    std_simplex,
    cyclic_polytope,
)
from .analysis import (
    cc_refinement,
    stellar_subdivision,
    is_polytopal,
    polytope,
    secondary_fan,
    secondary_polytope,
    regular_triangulations,
    groebner_fan,
    state_polytope,
)

__version__ = "0.1.0"
