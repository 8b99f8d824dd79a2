"""Exact operators - rational linear algebra and the double description method."""

from .exact import (
    to_fraction,
    as_exact_matrix,
    as_exact_vector,
    primitive,
    rank,
    kernel,
    row_basis,
    project_out,
    smith_normal_form,
    solve_coordinates,
    determinant,
)

from .double_description import (
    extreme_rays,
    dual_description,
)
