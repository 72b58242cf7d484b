from __future__ import annotations

__all__ = [
    "evaluate",
    "evaluate_assignments",
    "components",
    "is_zero",
    "is_equal",
    "epsilon_component",
]

from fractions import Fraction
from functools import singledispatch
from itertools import product
from typing import Sequence

from ..indices import IncompleteIndexAssignmentError, IndexAssignments
from ..scalar import Numeric, Scalar, minus_one, one, zero
from ._exceptions import CannotAddTensorsError, CannotMultiplyTensorsError
from .ast import (
    Added,
    Custom,
    Delta,
    Epsilon,
    EpsilonGamma,
    Gamma,
    Multiplied,
    Node,
    Scaled,
    ScalarTensor,
    Substitute,
    Zero,
)


def evaluate(node: Node, values: Sequence[int]) -> Scalar:
    """The component of the tensor with one value per index, in the order of its slots."""
    values = tuple(values)
    if len(values) != len(node.indices):
        raise IncompleteIndexAssignmentError(len(node.indices), len(values))
    return evaluate_component(node, values)


def evaluate_assignments(node: Node, assignments: IndexAssignments) -> Scalar:
    return evaluate_component(node, assignments.values_for(node.indices))


def epsilon_component(values: Sequence[int]) -> int:
    """Sign of the permutation sorting `values`, or 0 if any two coincide."""
    result = Fraction(1)
    for p in range(len(values)):
        for q in range(p + 1, len(values)):
            result *= Fraction(values[q] - values[p], q - p)
    return int(result)


@singledispatch
def evaluate_component(self: Node, values: tuple[int, ...]) -> Scalar:
    raise NotImplementedError(f"evaluate_component not implemented for {type(self)}: {self}")


@evaluate_component.register(Zero)
def evaluate_zero(self: Zero, values: tuple[int, ...]) -> Scalar:
    return zero


@evaluate_component.register(ScalarTensor)
def evaluate_scalar_tensor(self: ScalarTensor, values: tuple[int, ...]) -> Scalar:
    return self.value


@evaluate_component.register(Custom)
def evaluate_custom(self: Custom, values: tuple[int, ...]) -> Scalar:
    return self.table.get(values, zero)


@evaluate_component.register(Delta)
def evaluate_delta(self: Delta, values: tuple[int, ...]) -> Scalar:
    first, second = values
    return one if first == second else zero


@evaluate_component.register(Epsilon)
def evaluate_epsilon(self: Epsilon, values: tuple[int, ...]) -> Scalar:
    return Numeric(epsilon_component(values))


def gamma_component(first: int, second: int, start: int, p: int) -> Scalar:
    if first != second:
        return zero
    elif first - start < p:
        return minus_one
    else:
        return one


@evaluate_component.register(Gamma)
def evaluate_gamma(self: Gamma, values: tuple[int, ...]) -> Scalar:
    first, second = values
    return gamma_component(first, second, self.indices[0].range.start, self.p)


@evaluate_component.register(EpsilonGamma)
def evaluate_epsilon_gamma(self: EpsilonGamma, values: tuple[int, ...]) -> Scalar:
    # The gamma blocks are Euclidean, so each of them is a Kronecker delta
    result = 1
    if self.num_epsilon == 1:
        result = epsilon_component(values[:3])
        if result == 0:
            return zero

    for position in range(3 * self.num_epsilon, len(values), 2):
        if values[position] != values[position + 1]:
            return zero

    return Numeric(result)


@evaluate_component.register(Added)
def evaluate_added(self: Added, values: tuple[int, ...]) -> Scalar:
    assignments = IndexAssignments.from_indices(self.indices, values)

    total = zero
    for summand in self.summands:
        if isinstance(summand, Zero):
            continue
        if not summand.indices.is_permutation_of(self.indices):
            raise CannotAddTensorsError(self.indices, summand.indices)
        total = total + evaluate_assignments(summand, assignments)
    return total


@evaluate_component.register(Multiplied)
def evaluate_multiplied(self: Multiplied, values: tuple[int, ...]) -> Scalar:
    names = self.indices.names()
    if len(set(names)) != len(names):
        raise CannotMultiplyTensorsError(self.left.indices, self.right.indices)

    assignments = IndexAssignments.from_indices(self.indices, values)
    contracted = self.contracted()

    total = zero
    for contracted_values in product(*(index.range for index in contracted)):
        assignments.update(zip(contracted.names(), contracted_values))
        left = evaluate_assignments(self.left, assignments)
        if left == 0:
            continue
        total = total + left * evaluate_assignments(self.right, assignments)
    return total


@evaluate_component.register(Scaled)
def evaluate_scaled(self: Scaled, values: tuple[int, ...]) -> Scalar:
    return self.scale * evaluate_component(self.child, values)


@evaluate_component.register(Substitute)
def evaluate_substitute(self: Substitute, values: tuple[int, ...]) -> Scalar:
    assignments = IndexAssignments.from_indices(self.indices, values)
    return evaluate_assignments(self.child, assignments)


def components(node: Node) -> dict[tuple[int, ...], Scalar]:
    """Every component of the tensor keyed by the values of its indices in slot order."""
    return {
        values: evaluate_component(node, values) for values in node.indices.all_combinations()
    }


def is_zero(node: Node) -> bool:
    """Whether every component of the tensor is exactly zero."""
    if isinstance(node, Zero):
        return True
    return all(
        evaluate_component(node, values) == 0 for values in node.indices.all_combinations()
    )


def is_equal(left: Node, right: Node) -> bool:
    """Whether two tensors agree on every component, matching indices by name."""
    if isinstance(left, Zero) or isinstance(right, Zero):
        return is_zero(right) and is_zero(left)
    if not left.indices.is_permutation_of(right.indices):
        return False

    for values in left.indices.all_combinations():
        assignments = IndexAssignments.from_indices(left.indices, values)
        if evaluate_component(left, values) != evaluate_assignments(right, assignments):
            return False
    return True
