"""
Error taxonomy
==============

InputError         - bad arguments (shape, dimension, empty input). Fail fast.
DimensionMismatch  - ambient dimensions disagree.
ConvergenceError   - an adaptive search (Groebner adjacency eps) never settled.
BudgetExceeded     - a walk ran past its iteration / stack budget.

InputError derives from ValueError so callers that only know the
"raise ValueError on bad input" convention keep working.
"""


class InputError(ValueError):
    """Invalid input to a geometric construction."""


class DimensionMismatch(InputError):
    """Objects or vectors do not live in the same ambient space."""


class ConvergenceError(RuntimeError):
    """An iterative search exhausted its retries without converging."""


class BudgetExceeded(RuntimeError):
    """An explicit work budget (rounds, stack steps, cones) was exhausted."""
