"""Eagerly normalizing arithmetic on nodes.

Sums stay flat, scales never nest, and products consult a table of contraction heuristics
before building a product node.
"""

from __future__ import annotations

__all__ = ["add", "multiply", "scale", "negate", "summands", "separate_scale"]

from typing import Callable, Optional

from ..scalar import Scalar, ScalarLike, as_scalar, one
from .ast import Added, Delta, Multiplied, Node, NodeKind, Scaled, Substitute, Zero


def add(left: Node, right: Node) -> Node:
    """Sum of two nodes.

    Whether the two nodes carry compatible indices is only checked when the sum is evaluated.
    """
    match left, right:
        case Zero(), _:
            return right
        case _, Zero():
            return left
        case Added(left_summands), Added(right_summands):
            return Added((*left_summands, *right_summands))
        case Added(left_summands), _:
            return Added((*left_summands, right))
        case _, Added(right_summands):
            return Added((left, *right_summands))
        case _:
            return Added((left, right))


def contract_delta(delta: Delta, other: Node) -> Optional[Node]:
    """Multiply by a Kronecker delta by renaming the contracted index of the other factor."""
    contracting = [
        (index, partner)
        for index, partner in zip(delta.indices, reversed(delta.indices))
        if any(index.contracts_with(candidate) for candidate in other.indices)
    ]
    if len(contracting) != 1:
        return None

    [(contracted, surviving)] = contracting
    if other.indices.contains_index(surviving):
        return None

    from ._relabel import set_indices

    return set_indices(other, other.indices.shuffle({contracted: surviving}))


Heuristic = Callable[[Node, Node], Optional[Node]]

contraction_heuristics: dict[tuple[Optional[NodeKind], Optional[NodeKind]], Heuristic] = {
    (NodeKind.delta, None): lambda left, right: contract_delta(left, right),
    (None, NodeKind.delta): lambda left, right: contract_delta(right, left),
}


def find_heuristic(left: Node, right: Node) -> Optional[Heuristic]:
    for key in [(left.kind, right.kind), (left.kind, None), (None, right.kind)]:
        heuristic = contraction_heuristics.get(key)
        if heuristic is not None:
            return heuristic
    return None


def multiply(left: Node, right: Node) -> Node:
    """Product of two nodes, contracting indices shared with opposite covariance.

    A repeated index that cannot be contracted is only reported when the product is evaluated.
    """
    heuristic = find_heuristic(left, right)
    if heuristic is not None:
        result = heuristic(left, right)
        if result is not None:
            return result

    if isinstance(left, Zero) or isinstance(right, Zero):
        return Zero()

    return Multiplied(left, right)


def scale(node: Node, factor: ScalarLike) -> Node:
    factor = as_scalar(factor)

    if factor == 1:
        return node
    elif factor == 0:
        return Zero()

    match node:
        case Zero():
            return node
        case Scaled(child, existing):
            return scale(child, existing * factor)
        case Substitute(child, indices):
            scaled = scale(child, factor)
            if isinstance(scaled, Zero):
                return scaled
            return Substitute(scaled, indices)
        case _:
            return Scaled(node, factor)


def negate(node: Node) -> Node:
    return scale(node, -1)


def summands(node: Node) -> tuple[Node, ...]:
    match node:
        case Zero():
            return ()
        case Added(terms):
            return terms
        case _:
            return (node,)


def separate_scale(node: Node) -> tuple[Scalar, Node]:
    """Split a node into its overall scale and the unit-scale rest."""
    match node:
        case Scaled(child, factor):
            return factor, child
        case Substitute(child, indices):
            factor, unit = separate_scale(child)
            return factor, Substitute(unit, indices)
        case _:
            return one, node
