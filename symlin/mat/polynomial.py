from numbers import Number
from typing import Dict, Iterable, Mapping, Tuple, Union

import numpy as np
from ordered_set import OrderedSet

from .exceptions import DomainError, LookupFailureError
from .types import Term, TermMap


class Polynomial:
    """
    Sparse multivariate polynomial with exact simplification.

    A polynomial is a mapping of terms to numeric coefficients. A term is a sorted tuple of variable names that
    represents the product of those variables; the empty term represents the constant. Terms with a null coefficient
    are never stored. Instances are immutable: every algebraic operation returns a new polynomial.
    """

    __slots__ = ("_terms",)

    def __init__(self, terms: Mapping[Term, Number] = None):
        self._terms: TermMap = self.simplify_terms(terms.items() if terms is not None else [])

    # Construction
    # ------------------------------------------------------------------------------------------------------------------

    @staticmethod
    def zero() -> "Polynomial":
        return Polynomial()

    @staticmethod
    def constant(value: Number) -> "Polynomial":
        if not isinstance(value, Number):
            raise TypeError("Cannot build a constant polynomial from '{0}'".format(value))
        return Polynomial({(): value})

    @staticmethod
    def variable(name: str) -> "Polynomial":
        # a numeric name would be indistinguishable from a coefficient
        if isinstance(name, Number) or not isinstance(name, str):
            raise TypeError("Variable name '{0}' must be a non-numeric string".format(name))
        return Polynomial({(name,): 1})

    @staticmethod
    def monomial(coefficient: Number, name: str) -> "Polynomial":
        return Polynomial.variable(name).scale(coefficient)

    @staticmethod
    def term(names: Iterable[str], coefficient: Number = 1) -> "Polynomial":
        p = Polynomial.constant(coefficient)
        for name in names:
            p = p.multiply(Polynomial.variable(name))
        return p

    @staticmethod
    def to_polynomial(value: Union["Polynomial", Number, str]) -> "Polynomial":
        if isinstance(value, Polynomial):
            return value
        elif isinstance(value, Number):
            return Polynomial.constant(value)
        elif isinstance(value, str):
            return Polynomial.variable(value)
        else:
            raise TypeError("Unable to convert '{0}' of type '{1}' into a polynomial".format(value, type(value)))

    @staticmethod
    def sum_all(polynomials: Iterable[Union["Polynomial", Number]]) -> "Polynomial":
        total = Polynomial()
        for p in polynomials:
            total = total.add(p)
        return total

    @staticmethod
    def product(polynomials: Iterable[Union["Polynomial", Number]]) -> "Polynomial":
        total = Polynomial.constant(1)
        for p in polynomials:
            total = total.multiply(p)
        return total

    @staticmethod
    def simplify_terms(terms: Iterable[Tuple[Term, Number]]) -> TermMap:
        """
        Merge like terms and drop null coefficients. Each term is canonicalized by sorting its variable names so that
        commuted products collapse onto the same key.
        :param terms: iterable of (term, coefficient) pairs
        :return: canonical term map
        """
        merged: Dict[Term, Number] = {}
        for term, coeff in terms:
            key = tuple(sorted(term))
            merged[key] = merged.get(key, 0) + coeff
        return {t: c for t, c in merged.items() if c != 0}

    # Algebra
    # ------------------------------------------------------------------------------------------------------------------

    def add(self, other: Union["Polynomial", Number]) -> "Polynomial":
        other = Polynomial.to_polynomial(other)
        return Polynomial._from_simplified(self.__merge(self._terms, other._terms, 1))

    def subtract(self, other: Union["Polynomial", Number]) -> "Polynomial":
        other = Polynomial.to_polynomial(other)
        return Polynomial._from_simplified(self.__merge(self._terms, other._terms, -1))

    def scale(self, k: Number) -> "Polynomial":
        if not isinstance(k, Number):
            raise TypeError("Scaling factor '{0}' must be numeric".format(k))
        if k == 0:
            return Polynomial()
        return Polynomial._from_simplified({t: c * k for t, c in self._terms.items() if c * k != 0})

    def multiply(self, other: Union["Polynomial", Number]) -> "Polynomial":
        other = Polynomial.to_polynomial(other)
        terms = []
        for t1, c1 in self._terms.items():
            for t2, c2 in other._terms.items():
                terms.append((t1 + t2, c1 * c2))
        return Polynomial._from_simplified(Polynomial.simplify_terms(terms))

    def divide(self, divisor: Union["Polynomial", Number]) -> "Polynomial":
        divisor = Polynomial.to_polynomial(divisor)
        if not divisor.is_constant():
            raise DomainError("Polynomial '{0}' is not a constant and cannot be used as a divisor".format(divisor))
        value = divisor.to_number()
        if value == 0:
            raise DomainError("Division of polynomial '{0}' by zero".format(self))
        return self.scale(1 / value)

    def negate(self) -> "Polynomial":
        return self.scale(-1)

    def power(self, exponent: int) -> "Polynomial":
        if not isinstance(exponent, int) or exponent < 0:
            raise DomainError("Polynomial exponent '{0}' must be a non-negative integer".format(exponent))
        result = Polynomial.constant(1)
        for _ in range(exponent):
            result = result.multiply(self)
        return result

    def substitute(self, substitutions: Mapping[str, Union["Polynomial", Number, str]]) -> "Polynomial":
        """
        Replace variables by numbers, variable names or polynomials. Variables absent from the mapping are kept.
        :param substitutions: mapping of variable names to replacement values
        :return: substituted polynomial
        """
        result = Polynomial()
        for term, coeff in self._terms.items():
            factors = [Polynomial.to_polynomial(substitutions.get(v, v)) for v in term]
            result = result.add(Polynomial.product(factors).scale(coeff))
        return result

    def evaluate(self, values: Mapping[str, Number]) -> float:
        missing = [v for v in self.variables() if v not in values]
        if len(missing) > 0:
            raise LookupFailureError(
                "Unable to evaluate polynomial '{0}': free variable(s) {1}".format(self, ", ".join(missing))
            )
        total = 0.0
        for term, coeff in self._terms.items():
            total += coeff * np.prod([values[v] for v in term])
        return float(total)

    # Introspection
    # ------------------------------------------------------------------------------------------------------------------

    def terms(self) -> TermMap:
        return dict(self._terms)

    def number_of_terms(self) -> int:
        return len(self._terms)

    def coefficient_for(self, term: Iterable[str]) -> Number:
        return self._terms.get(tuple(sorted(term)), 0)

    def coefficients(self):
        return list(self._terms.values())

    def degree(self) -> int:
        if len(self._terms) == 0:
            return 0
        return max(len(t) for t in self._terms)

    def degree_on(self, name: str) -> int:
        if len(self._terms) == 0:
            return 0
        return max(t.count(name) for t in self._terms)

    def variables(self) -> OrderedSet:
        names = set()
        for term in self._terms:
            names.update(term)
        return OrderedSet(sorted(names))

    def depends_on(self, name: str) -> bool:
        return any(name in t for t in self._terms)

    def is_zero(self) -> bool:
        return len(self._terms) == 0

    def is_constant(self) -> bool:
        return self.degree() == 0

    def has_constant_term(self) -> bool:
        return () in self._terms

    def split_constant(self) -> Tuple["Polynomial", Number]:
        """
        Separate the constant term from the variable terms.
        :return: the polynomial without its constant term, and the constant (0 if absent)
        """
        constant = self._terms.get((), 0)
        rest = {t: c for t, c in self._terms.items() if t != ()}
        return Polynomial._from_simplified(rest), constant

    def to_number(self) -> Number:
        if not self.is_constant():
            raise DomainError(
                "Cannot convert polynomial '{0}' to a number: it contains free variables".format(self)
            )
        return self._terms.get((), 0)

    def to_number_if_possible(self) -> Union["Polynomial", Number]:
        if self.is_constant():
            return self._terms.get((), 0)
        return self

    def equals(self, other: "Polynomial") -> bool:
        return isinstance(other, Polynomial) and self._terms == other._terms

    def get_literal(self) -> str:
        if len(self._terms) == 0:
            return "0"

        literal = ""
        for i, (term, coeff) in enumerate(sorted(self._terms.items(), key=lambda tc: (len(tc[0]), tc[0]))):

            sign = "-" if coeff < 0 else "+"
            magnitude = abs(coeff)
            coeff_literal = format_number(magnitude)

            if len(term) == 0:
                body = coeff_literal
            elif magnitude == 1:
                body = term_to_literal(term)
            else:
                body = "{0} {1}".format(coeff_literal, term_to_literal(term))

            if i == 0:
                literal = body if sign == "+" else "-" + body
            else:
                literal += " {0} {1}".format(sign, body)

        return literal

    # Operators
    # ------------------------------------------------------------------------------------------------------------------

    def __add__(self, other):
        return self.add(other)

    def __radd__(self, other):
        return Polynomial.to_polynomial(other).add(self)

    def __sub__(self, other):
        return self.subtract(other)

    def __rsub__(self, other):
        return Polynomial.to_polynomial(other).subtract(self)

    def __mul__(self, other):
        return self.multiply(other)

    def __rmul__(self, other):
        return Polynomial.to_polynomial(other).multiply(self)

    def __truediv__(self, other):
        return self.divide(other)

    def __neg__(self):
        return self.negate()

    def __pow__(self, power, modulo=None):
        return self.power(power)

    def __eq__(self, other):
        if isinstance(other, Number):
            other = Polynomial.constant(other)
        return self.equals(other)

    def __hash__(self):
        # constant polynomials compare equal to numbers, hence hash as their number
        if self.is_constant():
            return hash(self._terms.get((), 0))
        return hash(frozenset(self._terms.items()))

    def __len__(self):
        return len(self._terms)

    def __str__(self):
        return self.get_literal()

    def __repr__(self):
        return "Polynomial<{0}>".format(self.get_literal())

    # Private
    # ------------------------------------------------------------------------------------------------------------------

    @staticmethod
    def _from_simplified(terms: TermMap) -> "Polynomial":
        p = Polynomial.__new__(Polynomial)
        p._terms = terms
        return p

    @staticmethod
    def __merge(lhs: TermMap, rhs: TermMap, sign: int) -> TermMap:
        merged = dict(lhs)
        for term, coeff in rhs.items():
            merged[term] = merged.get(term, 0) + sign * coeff
        return {t: c for t, c in merged.items() if c != 0}


# Literal Utilities
# ----------------------------------------------------------------------------------------------------------------------

def format_number(value: Number) -> str:
    if isinstance(value, float) and value.is_integer():
        value = int(value)
    return str(value)


def term_to_literal(term: Term) -> str:
    """
    Render a product of variables, grouping repeated factors as powers.
    :param term: sorted tuple of variable names
    :return: literal of the product
    """
    factors = []
    for name in OrderedSet(term):
        count = term.count(name)
        factors.append(name if count == 1 else "{0}^{1}".format(name, count))
    return " * ".join(factors)
