"""Constants, error taxonomy and the object contract."""

from .constants import *
from .errors import InputError, DimensionMismatch, ConvergenceError, BudgetExceeded
from .structures import canonical_rays, PolyhedralObject
