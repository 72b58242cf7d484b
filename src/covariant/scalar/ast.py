"""Exact scalar coefficients: rational numbers and symbolic variables.

Every arithmetic operation normalizes its result into a sum of monomials. A monomial is a
rational coefficient times a sorted product of variables. Like monomials are merged, monomials
with a zero coefficient disappear, and the monomials of a sum are sorted with the purely numeric
one last. As a consequence, two scalars are equal exactly when they are structurally equal.
"""

from __future__ import annotations

__all__ = [
    "Scalar",
    "Numeric",
    "Variable",
    "AddedScalar",
    "MultipliedScalar",
    "ScalarLike",
    "as_scalar",
    "zero",
    "minus_one",
    "one",
]

from abc import abstractmethod
from dataclasses import dataclass
from fractions import Fraction
from numbers import Rational
from typing import Union

from ._exceptions import NonlinearScalarError, ScalarHasVariablesError

Monomial = tuple[Fraction, tuple["Variable", ...]]


class Scalar:
    __slots__ = ()

    @abstractmethod
    def deparse(self) -> str:
        raise NotImplementedError()

    def is_numeric(self) -> bool:
        return False

    def is_variable(self) -> bool:
        return False

    def has_variables(self) -> bool:
        # A normalized scalar is either a bare number or mentions at least one variable
        return not self.is_numeric()

    def to_fraction(self) -> Fraction:
        raise ScalarHasVariablesError(self)

    def to_float(self) -> float:
        return float(self.to_fraction())

    def summands(self) -> tuple[Scalar, ...]:
        return (self,)

    def variables(self) -> tuple[Variable, ...]:
        variables: dict[Variable, None] = {}
        for _, factors in monomials(self):
            for factor in factors:
                variables[factor] = None
        return tuple(variables)

    def substitute(self, variable: Variable, expression: ScalarLike) -> Scalar:
        """Replace every occurrence of `variable` with `expression`."""
        expression = as_scalar(expression)
        result: Scalar = zero
        for coefficient, factors in monomials(self):
            term: Scalar = Numeric(coefficient)
            for factor in factors:
                term = multiply_scalars(term, expression if factor == variable else factor)
            result = add_scalars(result, term)
        return result

    def separate_variables_from_rest(self) -> tuple[list[tuple[Variable, Scalar]], Scalar]:
        """Split a linear scalar into (variable, coefficient) pairs and the numeric rest."""
        pairs: list[tuple[Variable, Scalar]] = []
        rest = Fraction(0)
        for coefficient, factors in monomials(self):
            match factors:
                case ():
                    rest += coefficient
                case (variable,):
                    pairs.append((variable, Numeric(coefficient)))
                case _:
                    raise NonlinearScalarError(self)
        return pairs, Numeric(rest)

    def sort_key(self) -> tuple:
        return tuple(monomial_key(monomial) for monomial in monomials(self))

    def __lt__(self, other: Scalar) -> bool:
        if not isinstance(other, Scalar):
            return NotImplemented
        elif self.is_numeric() and other.is_numeric():
            return self.to_fraction() < other.to_fraction()
        else:
            return self.sort_key() < other.sort_key()

    def __add__(self, other: ScalarLike) -> Scalar:
        other = coerce(other)
        if other is None:
            return NotImplemented
        return add_scalars(self, other)

    def __radd__(self, other: ScalarLike) -> Scalar:
        other = coerce(other)
        if other is None:
            return NotImplemented
        return add_scalars(other, self)

    def __sub__(self, other: ScalarLike) -> Scalar:
        other = coerce(other)
        if other is None:
            return NotImplemented
        return add_scalars(self, -other)

    def __rsub__(self, other: ScalarLike) -> Scalar:
        other = coerce(other)
        if other is None:
            return NotImplemented
        return add_scalars(other, -self)

    def __mul__(self, other: ScalarLike) -> Scalar:
        other = coerce(other)
        if other is None:
            return NotImplemented
        return multiply_scalars(self, other)

    def __rmul__(self, other: ScalarLike) -> Scalar:
        other = coerce(other)
        if other is None:
            return NotImplemented
        return multiply_scalars(other, self)

    def __truediv__(self, other: ScalarLike) -> Scalar:
        other = coerce(other)
        if other is None or not other.is_numeric():
            return NotImplemented
        return multiply_scalars(self, Numeric(1 / other.to_fraction()))

    def __neg__(self) -> Scalar:
        return multiply_scalars(minus_one, self)

    def __str__(self):
        return self.deparse()


@dataclass(frozen=True, slots=True, eq=False)
class Numeric(Scalar):
    value: Fraction

    def __post_init__(self):
        if not isinstance(self.value, Fraction):
            object.__setattr__(self, "value", Fraction(self.value))

    def is_numeric(self) -> bool:
        return True

    def to_fraction(self) -> Fraction:
        return self.value

    def deparse(self) -> str:
        return str(self.value)

    def __eq__(self, other):
        if isinstance(other, Numeric):
            return self.value == other.value
        elif isinstance(other, Rational):
            return self.value == other
        elif isinstance(other, Scalar):
            return False
        else:
            return NotImplemented

    def __hash__(self):
        return hash(self.value)


@dataclass(frozen=True, slots=True)
class Variable(Scalar):
    name: str
    id: int | None = None

    def is_variable(self) -> bool:
        return True

    def deparse(self) -> str:
        if self.id is None:
            return self.name
        else:
            return f"{self.name}_{{{self.id}}}"

    def variable_key(self) -> tuple[str, int]:
        return (self.name, -1 if self.id is None else self.id)


@dataclass(frozen=True, slots=True)
class MultipliedScalar(Scalar):
    """Product of an optional leading numeric coefficient and at least one variable."""

    factors: tuple[Scalar, ...]

    def deparse(self) -> str:
        first, *rest = self.factors
        if first == -1 and len(rest) > 0:
            return "-" + " * ".join(factor.deparse() for factor in rest)
        return " * ".join(factor.deparse() for factor in self.factors)


@dataclass(frozen=True, slots=True)
class AddedScalar(Scalar):
    terms: tuple[Scalar, ...]

    def summands(self) -> tuple[Scalar, ...]:
        return self.terms

    def deparse(self) -> str:
        first, *rest = self.terms
        output = first.deparse()
        for term in rest:
            (coefficient, _), *_ = monomials(term)
            if coefficient < 0:
                output += " - " + (-term).deparse()
            else:
                output += " + " + term.deparse()
        return output


ScalarLike = Union[Scalar, int, Fraction]

zero = Numeric(Fraction(0))
one = Numeric(Fraction(1))
minus_one = Numeric(Fraction(-1))


def coerce(value) -> Scalar | None:
    if isinstance(value, Scalar):
        return value
    elif isinstance(value, Rational):
        return Numeric(Fraction(value))
    else:
        return None


def as_scalar(value: ScalarLike) -> Scalar:
    scalar = coerce(value)
    if scalar is None:
        raise TypeError(f"Cannot convert {value!r} of type {type(value)} to an exact scalar")
    return scalar


def monomials(scalar: Scalar) -> list[Monomial]:
    match scalar:
        case Numeric(value):
            return [(value, ())]
        case Variable():
            return [(Fraction(1), (scalar,))]
        case MultipliedScalar(factors):
            coefficient = Fraction(1)
            variables = []
            for factor in factors:
                if isinstance(factor, Numeric):
                    coefficient *= factor.value
                else:
                    variables.append(factor)
            return [(coefficient, tuple(variables))]
        case AddedScalar(terms):
            return [monomial for term in terms for monomial in monomials(term)]
        case _:
            raise NotImplementedError(f"monomials not implemented for {type(scalar)}: {scalar}")


def monomial_key(monomial: Monomial) -> tuple:
    coefficient, variables = monomial
    return (len(variables) == 0, tuple(variable.variable_key() for variable in variables))


def from_monomials(items: list[Monomial]) -> Scalar:
    merged: dict[tuple[Variable, ...], Fraction] = {}
    for coefficient, variables in items:
        merged[variables] = merged.get(variables, Fraction(0)) + coefficient

    terms: list[Scalar] = []
    for variables, coefficient in sorted(
        merged.items(), key=lambda item: monomial_key((item[1], item[0]))
    ):
        if coefficient == 0:
            continue
        elif len(variables) == 0:
            terms.append(Numeric(coefficient))
        elif coefficient == 1 and len(variables) == 1:
            terms.append(variables[0])
        elif coefficient == 1:
            terms.append(MultipliedScalar(variables))
        else:
            terms.append(MultipliedScalar((Numeric(coefficient), *variables)))

    if len(terms) == 0:
        return zero
    elif len(terms) == 1:
        return terms[0]
    else:
        return AddedScalar(tuple(terms))


def add_scalars(left: Scalar, right: Scalar) -> Scalar:
    if isinstance(left, Numeric) and isinstance(right, Numeric):
        return Numeric(left.value + right.value)
    return from_monomials(monomials(left) + monomials(right))


def multiply_scalars(left: Scalar, right: Scalar) -> Scalar:
    if isinstance(left, Numeric) and isinstance(right, Numeric):
        return Numeric(left.value * right.value)
    return from_monomials(
        [
            (
                left_coefficient * right_coefficient,
                tuple(
                    sorted(
                        (*left_variables, *right_variables),
                        key=lambda variable: variable.variable_key(),
                    )
                ),
            )
            for left_coefficient, left_variables in monomials(left)
            for right_coefficient, right_variables in monomials(right)
        ]
    )
