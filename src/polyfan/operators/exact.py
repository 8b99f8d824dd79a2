"""
Exact Linear Algebra
====================

Thin exact layer over Python integers, fractions.Fraction and sympy.

NO floating point. Every function here is exact; vectors are tuples of
int (primitive integer vectors) or Fraction, matrices are numpy arrays
with dtype=object.

DEFINITIONS:
    primitive(v)   - positive multiple of v with integer entries and gcd 1
    kernel(rows)   - integer basis of {x : rows . x = 0}
    row_basis(V)   - canonical integer basis of span(V) (scaled RREF rows)
    project_out(v, B) - orthogonal projection of v onto span(B)^perp

CANONICAL FORMS:
    row_basis() is canonical: two vector sets with the same span give
    the same basis. Cone equality is built on this.
"""

import math
import numbers
from fractions import Fraction
from typing import List, Sequence, Tuple

import numpy as np
import sympy as sp
from sympy.matrices.normalforms import smith_normal_form as _sympy_snf
from sympy.polys.domains import ZZ

from ..spec.errors import InputError, DimensionMismatch

IntVector = Tuple[int, ...]


def to_fraction(x) -> Fraction:
    """
    Convert a scalar to an exact Fraction.

    Accepts Python/numpy integers, Fraction, sympy Rational and floats that
    hold an integer value. Anything else (e.g. 0.1) is rejected: exact
    geometry on inexact input silently gives wrong answers.
    """
    if isinstance(x, (bool, np.bool_)):
        raise InputError(f"Boolean {x!r} is not a valid coordinate")
    if isinstance(x, numbers.Integral):
        return Fraction(int(x))
    if isinstance(x, Fraction):
        return x
    if isinstance(x, sp.Rational):
        return Fraction(int(x.p), int(x.q))
    if isinstance(x, (float, np.floating)) and float(x).is_integer():
        return Fraction(int(x))
    raise InputError(f"Expected an exact integer or rational entry, got {x!r} ({type(x).__name__})")


def as_exact_matrix(data, name: str = "matrix", allow_vector: bool = False) -> np.ndarray:
    """
    Convert input to a 2-D object matrix of Fractions.

    Args:
        data: nested lists, numpy array, or sympy Matrix
        name: used in error messages
        allow_vector: if True a 1-D input becomes a single column

    Returns:
        (rows, cols) numpy array with dtype=object

    FAIL-FAST:
        Raises InputError for anything that is not 2-D (or 1-D when allowed).
    """
    if isinstance(data, sp.MatrixBase):
        data = data.tolist()
    arr = np.asarray(data, dtype=object)
    if arr.ndim == 1 and allow_vector:
        arr = arr.reshape((arr.shape[0], 1))
    if arr.ndim != 2:
        raise InputError(f"{name} must be a 2-D matrix, got shape {arr.shape}")
    out = np.empty(arr.shape, dtype=object)
    for idx in np.ndindex(arr.shape):
        out[idx] = to_fraction(arr[idx])
    return out


def as_exact_vector(data, n: int = None, name: str = "vector") -> Tuple[Fraction, ...]:
    """Convert a vector (list, 1-D array, or single-column matrix) to a Fraction tuple."""
    arr = np.asarray(data, dtype=object)
    if arr.ndim == 2 and 1 in arr.shape:
        arr = arr.reshape(-1)
    if arr.ndim != 1:
        raise InputError(f"{name} must be a vector, got shape {arr.shape}")
    v = tuple(to_fraction(x) for x in arr)
    if n is not None and len(v) != n:
        raise DimensionMismatch(f"{name} has length {len(v)}, expected {n}")
    return v


def matrix_columns(M: np.ndarray) -> List[Tuple[Fraction, ...]]:
    """Columns of an object matrix as tuples."""
    return [tuple(M[:, j]) for j in range(M.shape[1])]


def matrix_rows(M: np.ndarray) -> List[Tuple[Fraction, ...]]:
    """Rows of an object matrix as tuples."""
    return [tuple(M[i, :]) for i in range(M.shape[0])]


def dot(a: Sequence, b: Sequence):
    """Exact dot product."""
    return sum((x * y for x, y in zip(a, b)), 0)


def is_zero(v: Sequence) -> bool:
    return all(x == 0 for x in v)


def primitive(v: Sequence) -> IntVector:
    """
    Scale a rational vector to the primitive integer vector in its direction.

    The sign is preserved: primitive((-2, 4)) = (-1, 2).

    Raises:
        InputError: for the zero vector (it has no direction)
    """
    fr = [to_fraction(x) for x in v]
    if all(x == 0 for x in fr):
        raise InputError("The zero vector has no primitive representative")
    den = 1
    for x in fr:
        den = den * x.denominator // math.gcd(den, x.denominator)
    ints = [int(x * den) for x in fr]
    g = 0
    for x in ints:
        g = math.gcd(g, x)
    return tuple(x // g for x in ints)


def _to_sympy(rows: Sequence[Sequence], n: int) -> sp.Matrix:
    if len(rows) == 0:
        return sp.zeros(0, n)
    return sp.Matrix([[sp.Rational(to_fraction(x).numerator, to_fraction(x).denominator)
                       for x in r] for r in rows])


def rank(vectors: Sequence[Sequence], n: int = None) -> int:
    """Rank of a set of vectors (rows)."""
    if len(vectors) == 0:
        return 0
    return _to_sympy(vectors, n if n is not None else len(vectors[0])).rank()


def kernel(rows: Sequence[Sequence], n: int) -> List[IntVector]:
    """
    Integer basis of the right kernel {x in Q^n : r . x = 0 for every row r}.

    With no rows the kernel is all of Q^n and the standard basis is returned.
    The basis vectors are primitive.
    """
    rows = [r for r in rows if not is_zero(r)]
    if not rows:
        return [tuple(1 if i == j else 0 for j in range(n)) for i in range(n)]
    null = _to_sympy(rows, n).nullspace()
    return [primitive([to_fraction(x) for x in vec]) for vec in null]


def row_basis(vectors: Sequence[Sequence], n: int) -> List[IntVector]:
    """
    Canonical integer basis of span(vectors).

    Computed as the nonzero rows of the reduced row echelon form, each
    scaled to a primitive integer vector. Equal spans give equal bases.
    """
    vectors = [v for v in vectors if not is_zero(v)]
    if not vectors:
        return []
    R, pivots = _to_sympy(vectors, n).rref()
    return [primitive([to_fraction(x) for x in R.row(i)]) for i in range(len(pivots))]


def project_out(v: Sequence, basis: Sequence[Sequence]) -> Tuple[Fraction, ...]:
    """
    Orthogonal projection of v onto the complement of span(basis).

        p = v - B (B^T B)^{-1} B^T v

    Args:
        v: vector
        basis: linearly independent vectors (may be empty)

    Returns:
        projected vector as a Fraction tuple
    """
    v = tuple(to_fraction(x) for x in v)
    if not basis:
        return v
    n = len(v)
    B = _to_sympy(basis, n).T
    rhs = B.T * _to_sympy([v], n).T
    coeff = (B.T * B).LUsolve(rhs)
    proj = B * coeff
    return tuple(x - to_fraction(proj[i]) for i, x in enumerate(v))


def smith_normal_form(vectors: Sequence[Sequence], n: int) -> List[int]:
    """
    Nonzero Smith invariants of the integer matrix with the given rows.

    A set of primitive vectors extends to a lattice basis of Z^n iff all
    invariants equal 1.
    """
    if not vectors:
        return []
    M = sp.Matrix([[int(x) for x in r] for r in vectors])
    S = _sympy_snf(M, domain=ZZ)
    diag = [abs(int(S[i, i])) for i in range(min(S.shape))]
    return [d for d in diag if d != 0]


def solve_coordinates(target: Sequence, basis: Sequence[Sequence]) -> Tuple[Fraction, ...]:
    """
    Coefficients c with sum_i c_i basis[i] = target.

    The basis vectors must be linearly independent and target must lie in
    their span.

    Raises:
        InputError: if target is not in the span
    """
    n = len(target)
    B = _to_sympy(basis, n).T
    t = _to_sympy([target], n).T
    try:
        sol, params = B.gauss_jordan_solve(t)
    except ValueError as e:
        raise InputError(f"Vector {tuple(target)} is not in the span of the basis: {e}")
    if params.shape[0] != 0:
        raise InputError("Basis vectors for solve_coordinates must be independent")
    return tuple(to_fraction(x) for x in sol)


def determinant(vectors: Sequence[Sequence]) -> Fraction:
    """Determinant of the square matrix with the given rows."""
    return to_fraction(_to_sympy(vectors, len(vectors)).det())
