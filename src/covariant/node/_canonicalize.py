"""Canonical form of a node.

Each kind with a known symmetry sorts its own indices into the fixed order given by
`Index.sort_key` and folds any sign picked up on the way into a scale. A Kronecker delta is left
as it is. The result is equal to the input when both are
evaluated with indices matched by name.
"""

from __future__ import annotations

__all__ = ["canonicalize"]

from functools import reduce, singledispatch

from ..indices import Indices, Permutation
from ._arithmetic import add, scale, separate_scale
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


def sorted_with_sign(indices: Indices) -> tuple[Indices, int]:
    ordered = indices.ordered()
    return ordered, Permutation.between(indices, ordered).sign()


@singledispatch
def canonicalize(self: Node) -> Node:
    raise NotImplementedError(f"canonicalize not implemented for {type(self)}: {self}")


@canonicalize.register(Zero)
@canonicalize.register(ScalarTensor)
@canonicalize.register(Custom)
@canonicalize.register(Substitute)
def canonicalize_identity(self: Node) -> Node:
    # A generic tensor has no known symmetry, so its slot order is already canonical
    return self


@canonicalize.register(Delta)
def canonicalize_delta(self: Delta) -> Node:
    # The first slot is always up, so sorting would move an index between up and down
    return self


@canonicalize.register(Gamma)
def canonicalize_gamma(self: Gamma) -> Node:
    return Gamma(self.indices.ordered(), self.p, self.q, self.name, self.printed_text)


@canonicalize.register(Epsilon)
def canonicalize_epsilon(self: Epsilon) -> Node:
    ordered, sign = sorted_with_sign(self.indices)
    return scale(Epsilon(ordered, self.name, self.printed_text), sign)


@canonicalize.register(EpsilonGamma)
def canonicalize_epsilon_gamma(self: EpsilonGamma) -> Node:
    epsilon, sign = sorted_with_sign(self.epsilon_indices())
    gammas = sorted(
        (gamma.ordered() for gamma in self.gamma_indices()),
        key=lambda gamma: gamma[0].sort_key,
    )
    indices = reduce(Indices.__add__, gammas, epsilon)
    return scale(
        EpsilonGamma(self.num_epsilon, self.num_gamma, indices, self.name, self.printed_text),
        sign,
    )


@canonicalize.register(Scaled)
def canonicalize_scaled(self: Scaled) -> Node:
    return scale(canonicalize(self.child), self.scale)


@canonicalize.register(Added)
def canonicalize_added(self: Added) -> Node:
    return reduce(add, (canonicalize(summand) for summand in self.summands), Zero())


@canonicalize.register(Multiplied)
def canonicalize_multiplied(self: Multiplied) -> Node:
    left_scale, left = separate_scale(canonicalize(self.left))
    right_scale, right = separate_scale(canonicalize(self.right))
    if isinstance(left, Zero) or isinstance(right, Zero):
        return Zero()
    return scale(Multiplied(left, right, self.name, self.printed_text), left_scale * right_scale)
