"""Reduction of a sum of tensors to a linearly independent basis.

Every summand is evaluated on every assignment of values to the free indices of the sum. The
resulting matrix has one column per summand. Its reduced row echelon form expresses the columns
without a pivot in terms of those with one, so the sum collapses onto the summands owning a pivot,
each multiplied by the combination of the original coefficients read off its row.
"""

from __future__ import annotations

__all__ = ["simplify"]

import logging
from fractions import Fraction
from functools import reduce

from .._matrix import row_echelon_form
from .._pool import DEFAULT_PROCESSES, parallel_map
from ..indices import IndexAssignments
from ..node import (
    Added,
    Multiplied,
    Node,
    Scaled,
    Zero,
    add,
    evaluate_assignments,
    multiply,
    scale,
    separate_scale,
)
from ..scalar import Scalar, zero

logger = logging.getLogger(__name__)


def simplify(node: Node, *, processes: int = DEFAULT_PROCESSES) -> Node:
    """Express a sum of tensors through a minimal set of its summands with exact coefficients."""
    match node:
        case Scaled(child, factor):
            return scale(simplify(child, processes=processes), factor)
        case Multiplied(left, right):
            return multiply(
                simplify(left, processes=processes), simplify(right, processes=processes)
            )
        case Added():
            return simplify_sum(node, processes)
        case _:
            return node


def simplify_sum(node: Added, processes: int) -> Node:
    coefficients, units = zip(*(separate_scale(summand) for summand in node.summands))

    assignments = [
        IndexAssignments.from_indices(node.indices, values)
        for values in node.indices.all_combinations()
    ]

    def column(unit: Node) -> list[Fraction]:
        return [evaluate_assignments(unit, assignment).to_fraction() for assignment in assignments]

    columns = parallel_map(column, units, processes)
    rows = [[columns[i][j] for i in range(len(units))] for j in range(len(assignments))]
    reduced = row_echelon_form(rows)
    logger.debug("Reducing a %d x %d component matrix", len(rows), len(units))

    basis: dict[Scalar, Node] = {}
    for row in reduced[: min(len(reduced), len(units))]:
        pivot = next((i for i, value in enumerate(row) if value != 0), None)
        if pivot is None:
            break

        coefficient = zero
        for i in range(pivot, len(units)):
            if row[i] != 0:
                coefficient = coefficient + coefficients[i] * row[i]

        if coefficient in basis:
            basis[coefficient] = add(basis[coefficient], units[pivot])
        else:
            basis[coefficient] = units[pivot]

    logger.debug("Simplified %d summands to %d basis terms", len(units), len(basis))
    return reduce(add, (scale(unit, coefficient) for coefficient, unit in basis.items()), Zero())
