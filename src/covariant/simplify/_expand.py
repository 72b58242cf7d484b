from __future__ import annotations

__all__ = ["expand"]

from functools import reduce, singledispatch
from itertools import product

from ..node import (
    Added,
    Multiplied,
    Node,
    Scaled,
    Substitute,
    Zero,
    add,
    multiply,
    scale,
    separate_scale,
    summands,
)


def total(nodes) -> Node:
    return reduce(add, nodes, Zero())


@singledispatch
def expand(self: Node) -> Node:
    """Distribute products and scales over sums until the result is a flat sum.

    Scalar coefficients are not expanded: `(3 + x) * A` stays as it is.
    """
    return self


@expand.register(Added)
def expand_added(self: Added) -> Node:
    return total(expand(summand) for summand in self.summands)


@expand.register(Scaled)
def expand_scaled(self: Scaled) -> Node:
    return total(scale(term, self.scale) for term in summands(expand(self.child)))


def multiply_terms(left: Node, right: Node) -> Node:
    left_scale, left_unit = separate_scale(left)
    right_scale, right_unit = separate_scale(right)
    return scale(multiply(left_unit, right_unit), left_scale * right_scale)


@expand.register(Multiplied)
def expand_multiplied(self: Multiplied) -> Node:
    return total(
        multiply_terms(left, right)
        for left, right in product(summands(expand(self.left)), summands(expand(self.right)))
    )


@expand.register(Substitute)
def expand_substitute(self: Substitute) -> Node:
    terms = []
    for term in summands(expand(self.child)):
        term_scale, unit = separate_scale(term)
        terms.append(scale(Substitute(unit, self.indices), term_scale))
    return total(terms)
