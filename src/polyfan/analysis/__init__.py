"""
Analysis functions - depend on builders and operators.

Separated from builders to keep the layering clean:
    builders → operators → spec
    analysis → builders → operators → spec

Includes:
- refinement: coarsest common refinement, stellar subdivision
- projectivity: polytopality test and polytope reconstruction for fans
- secondary: secondary fan, regular triangulations, secondary polytope
- groebner / state_polytope: Gröbner fan walk and state polytope
"""

from .refinement import inclusion_minimal, refine, cc_refinement, stellar_subdivision
from .projectivity import is_polytopal, polytope, EdgeRecord
from .secondary import secondary_fan, secondary_polytope, regular_triangulations, gkz_vector

# Gröbner fan (polynomial arithmetic through an explicit service)
from .groebner import WeightOrder, GroebnerService, SympyGroebner
from .state_polytope import positive_grading, groebner_cone, groebner_fan, state_polytope
