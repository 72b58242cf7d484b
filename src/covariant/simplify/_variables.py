from __future__ import annotations

__all__ = [
    "has_variables",
    "collect_by_variables",
    "extract_variables",
    "to_homogeneous_linear_system",
    "substitute_variable",
    "substitute_variables",
    "redefine_variables",
]

from fractions import Fraction
from functools import reduce
from typing import Iterable

from sympy import Matrix

from .._matrix import to_matrix
from ..indices import IndexAssignments
from ..node import (
    Multiplied,
    Node,
    Scaled,
    Zero,
    add,
    evaluate_assignments,
    multiply,
    scale,
    separate_scale,
    summands,
)
from ..scalar import ScalarLike, Variable
from ._expand import expand


def total(nodes: Iterable[Node]) -> Node:
    return reduce(add, nodes, Zero())


def has_variables(node: Node) -> bool:
    """Whether the coefficient of any summand contains a variable."""
    return any(separate_scale(term)[0].has_variables() for term in summands(node))


def group_by_variables(node: Node) -> tuple[dict[Variable, Node], Node]:
    grouped: dict[Variable, Node] = {}
    rest: Node = Zero()
    for term in summands(node):
        term_scale, unit = separate_scale(term)
        pairs, numeric = term_scale.separate_variables_from_rest()
        for variable, coefficient in pairs:
            grouped[variable] = add(grouped.get(variable, Zero()), scale(unit, coefficient))
        rest = add(rest, scale(unit, numeric))
    return grouped, rest


def collect_by_variables(node: Node) -> Node:
    """Rewrite an expression as a sum of one tensor per variable plus a variable-free rest.

    Raises `NonlinearScalarError` if a coefficient contains a product of variables.
    """
    grouped, rest = group_by_variables(expand(node))
    return add(total(scale(tensor, variable) for variable, tensor in grouped.items()), rest)


def extract_variables(node: Node) -> tuple[list[tuple[Variable, Node]], Node]:
    """The tensor multiplying each variable and the inhomogeneous part without variables."""
    grouped, rest = group_by_variables(node)
    return list(grouped.items()), rest


def to_homogeneous_linear_system(node: Node) -> tuple[Matrix, list[Variable]]:
    """Matrix whose columns are the components of the tensors multiplying each variable.

    Setting the tensor to zero is then the linear system `matrix * variables == -inhomogeneous`,
    which is homogeneous when the inhomogeneous part vanishes. There is one row per assignment
    of values to the free indices.
    """
    pairs, _ = extract_variables(node)
    variables = [variable for variable, _ in pairs]

    rows: list[list[Fraction]] = []
    for values in node.indices.all_combinations():
        assignments = IndexAssignments.from_indices(node.indices, values)
        rows.append(
            [evaluate_assignments(tensor, assignments).to_fraction() for _, tensor in pairs]
        )

    return to_matrix(rows, len(variables)), variables


def substitute_variable(node: Node, variable: Variable, expression: ScalarLike) -> Node:
    """Replace the variable by the expression in the coefficient of every summand."""
    terms = []
    for term in summands(node):
        term_scale, unit = separate_scale(term)
        terms.append(scale(unit, term_scale.substitute(variable, expression)))
    return total(terms)


def substitute_variables(
    node: Node, substitutions: Iterable[tuple[Variable, ScalarLike]]
) -> Node:
    for variable, expression in substitutions:
        node = substitute_variable(node, variable, expression)
    return collect_by_variables(node)


def redefine_variables(node: Node, name: str, offset: int = 0) -> Node:
    """Replace every coefficient containing variables by a fresh variable `name_{k}`.

    The fresh variables are numbered from `offset + 1` in the order of the summands.
    """
    count = offset
    terms = []
    for term in summands(node):
        match term:
            case Scaled(child, factor) if factor.has_variables():
                count += 1
                terms.append(scale(child, Variable(name, count)))
            case Multiplied(left, right):
                left_scale, left_unit = separate_scale(left)
                right_scale, right_unit = separate_scale(right)
                product = multiply(left_unit, right_unit)
                if left_scale.has_variables() or right_scale.has_variables():
                    count += 1
                    terms.append(scale(product, Variable(name, count)))
                else:
                    terms.append(scale(product, left_scale * right_scale))
            case _:
                terms.append(term)
    return total(terms)
