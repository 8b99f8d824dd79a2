"""
Gröbner Basis Service
=====================

All polynomial arithmetic goes through an explicit service handle. The
default handle delegates to sympy.

WEIGHT ORDER:
    x^a > x^b  iff  w.a > w.b, or w.a == w.b and x^a >grevlex x^b

    For a strictly positive weight vector this is a monomial order, so the
    reduced Gröbner basis is well defined at every weight, generic or not.

SERVICE CONTRACT:
    groebner_basis(polys, gens, weights) returns, for each element of the
    reduced Gröbner basis, (leading exponent, all exponents).
"""

from abc import ABC, abstractmethod
from fractions import Fraction
from typing import List, Sequence, Tuple

import sympy as sp
from sympy.polys.orderings import MonomialOrder, grevlex

from ..operators.exact import IntVector, dot, to_fraction
from ..spec.errors import InputError

BasisElement = Tuple[IntVector, List[IntVector]]


class WeightOrder(MonomialOrder):
    """Weight order refined by graded reverse lexicographic order."""

    alias = 'weight'
    is_global = True
    is_default = False

    def __init__(self, weights: Sequence):
        self.weights = tuple(to_fraction(w) for w in weights)
        if any(w <= 0 for w in self.weights):
            raise InputError(f"Weight order needs positive weights, got {self.weights}")

    def __call__(self, monomial):
        return (dot(self.weights, monomial), grevlex(monomial))

    def __repr__(self):
        return f"WeightOrder({[str(w) for w in self.weights]})"

    def __str__(self):
        return repr(self)

    def __eq__(self, other):
        return isinstance(other, WeightOrder) and self.weights == other.weights

    def __hash__(self):
        return hash(('WeightOrder', self.weights))


class GroebnerService(ABC):
    """Polynomial-ring handle used by the Gröbner fan walk."""

    @abstractmethod
    def groebner_basis(self, polys: Sequence, gens: Sequence,
                       weights: Sequence[Fraction]) -> List[BasisElement]:
        """Reduced Gröbner basis for the weight order of a positive weight vector."""

    @abstractmethod
    def exponents(self, poly, gens: Sequence) -> List[IntVector]:
        """Exponent vectors of the terms of one polynomial."""


class SympyGroebner(GroebnerService):
    """GroebnerService backed by sympy.groebner over QQ."""

    def groebner_basis(self, polys, gens, weights):
        order = WeightOrder(weights)
        G = sp.groebner(list(polys), *gens, order=order, domain=sp.QQ)
        out = []
        for g in G.polys:
            monoms = [tuple(int(e) for e in m) for m in g.monoms()]
            out.append((max(monoms, key=order), sorted(monoms)))
        return out

    def exponents(self, poly, gens):
        p = sp.Poly(poly, *gens)
        if p.is_zero:
            return []
        return [tuple(int(e) for e in m) for m in p.monoms()]
