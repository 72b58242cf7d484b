"""Tensor expression tree.

Nodes are immutable. Every node exposes `indices`, the free indices of the tensor in slot order,
as well as a `name` and the `printed_text` used when deparsing. Algorithms over the tree live in
their own modules as single-dispatch functions.
"""

from __future__ import annotations

__all__ = [
    "NodeKind",
    "Node",
    "Zero",
    "ScalarTensor",
    "Custom",
    "Delta",
    "Epsilon",
    "Gamma",
    "EpsilonGamma",
    "Added",
    "Multiplied",
    "Scaled",
    "Substitute",
]

from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum
from typing import ClassVar

from ..indices import Indices
from ..scalar import Scalar, as_scalar
from ._exceptions import InvalidTensorError


class NodeKind(int, Enum):
    """Kind tag of a node, also written into the binary format."""

    custom = -1
    added = 1
    multiplied = 2
    scaled = 3
    zero = 4
    scalar = 101
    epsilon = 201
    gamma = 202
    epsilon_gamma = 203
    delta = 204
    substitute = 301


class Node:
    __slots__ = ()

    kind: ClassVar[NodeKind]

    def __str__(self):
        from ._deparse import deparse

        return deparse(self)


@dataclass(frozen=True, slots=True)
class Zero(Node):
    name: str = ""
    printed_text: str = "0"

    kind: ClassVar[NodeKind] = NodeKind.zero

    @property
    def indices(self) -> Indices:
        return Indices()


@dataclass(frozen=True, slots=True)
class ScalarTensor(Node):
    value: Scalar
    name: str = ""
    printed_text: str = ""

    kind: ClassVar[NodeKind] = NodeKind.scalar

    def __post_init__(self):
        object.__setattr__(self, "value", as_scalar(self.value))

    @property
    def indices(self) -> Indices:
        return Indices()


@dataclass(frozen=True, slots=True)
class Custom(Node):
    """Generic named tensor with an optional table of nonzero components.

    The table maps a tuple of index values, in slot order, to the component. Components not in
    the table are zero.
    """

    name: str
    printed_text: str
    indices: Indices
    components: tuple[tuple[tuple[int, ...], Scalar], ...] = ()
    table: dict[tuple[int, ...], Scalar] = field(init=False, repr=False, compare=False)

    kind: ClassVar[NodeKind] = NodeKind.custom

    def __post_init__(self):
        items = self.components.items() if isinstance(self.components, Mapping) else self.components
        components = tuple(
            sorted(((tuple(key), as_scalar(value)) for key, value in items), key=lambda x: x[0])
        )
        for key, _ in components:
            if len(key) != len(self.indices):
                raise InvalidTensorError(
                    "custom",
                    f"component {key} does not match the indices {self.indices.deparse()}",
                )
        object.__setattr__(self, "components", components)
        object.__setattr__(self, "table", dict(components))


@dataclass(frozen=True, slots=True)
class Delta(Node):
    """Kronecker delta. The first index is always up and the second always down."""

    indices: Indices
    name: str = "delta"
    printed_text: str = "\\delta"

    kind: ClassVar[NodeKind] = NodeKind.delta

    def __post_init__(self):
        if len(self.indices) != 2:
            raise InvalidTensorError("delta", f"expected 2 indices, got {len(self.indices)}")
        upper, lower = self.indices
        object.__setattr__(self, "indices", Indices(upper.raised(), lower.lowered()))


@dataclass(frozen=True, slots=True)
class Epsilon(Node):
    """Levi-Civita symbol with one index per value of its range."""

    indices: Indices
    name: str = "epsilon"
    printed_text: str = "\\epsilon"

    kind: ClassVar[NodeKind] = NodeKind.epsilon

    def __post_init__(self):
        if len(self.indices) == 0 or len(self.indices) != self.indices[0].range.size:
            raise InvalidTensorError(
                "epsilon",
                f"the number of indices must equal the size of the index range, got "
                f"{self.indices.deparse()}",
            )


@dataclass(frozen=True, slots=True)
class Gamma(Node):
    """Flat metric of signature (p, q): -1 on the first p diagonal entries, +1 on the rest."""

    indices: Indices
    p: int = 0
    q: int = 3
    name: str = "gamma"
    printed_text: str = "\\gamma"

    kind: ClassVar[NodeKind] = NodeKind.gamma

    def __post_init__(self):
        if len(self.indices) != 2:
            raise InvalidTensorError("gamma", f"expected 2 indices, got {len(self.indices)}")


@dataclass(frozen=True, slots=True)
class EpsilonGamma(Node):
    """Product of at most one epsilon over the first three slots and gammas over slot pairs."""

    num_epsilon: int
    num_gamma: int
    indices: Indices
    name: str = ""
    printed_text: str = ""

    kind: ClassVar[NodeKind] = NodeKind.epsilon_gamma

    def __post_init__(self):
        if self.num_epsilon not in (0, 1):
            raise InvalidTensorError(
                "epsilon-gamma", f"at most one epsilon is allowed, got {self.num_epsilon}"
            )
        if 3 * self.num_epsilon + 2 * self.num_gamma != len(self.indices):
            raise InvalidTensorError(
                "epsilon-gamma",
                f"{self.num_epsilon} epsilons and {self.num_gamma} gammas do not fit the "
                f"indices {self.indices.deparse()}",
            )

    def epsilon_indices(self) -> Indices:
        return self.indices.partial(0, 3 * self.num_epsilon)

    def gamma_indices(self) -> list[Indices]:
        start = 3 * self.num_epsilon
        return [
            self.indices.partial(start + 2 * i, start + 2 * i + 2) for i in range(self.num_gamma)
        ]


@dataclass(frozen=True, slots=True)
class Added(Node):
    """Sum of tensors; its index order is the order of the first summand."""

    summands: tuple[Node, ...]
    name: str = ""
    printed_text: str = ""

    kind: ClassVar[NodeKind] = NodeKind.added

    def __post_init__(self):
        if len(self.summands) == 0:
            raise InvalidTensorError("added", "a sum needs at least one summand")

    @property
    def indices(self) -> Indices:
        return self.summands[0].indices


@dataclass(frozen=True, slots=True)
class Multiplied(Node):
    """Product of two tensors; indices shared with opposite covariance are summed over."""

    left: Node
    right: Node
    name: str = ""
    printed_text: str = ""
    indices: Indices = field(init=False)

    kind: ClassVar[NodeKind] = NodeKind.multiplied

    def __post_init__(self):
        object.__setattr__(
            self, "indices", self.left.indices.contract(self.right.indices, strict=False)
        )

    def contracted(self) -> Indices:
        """The indices that are summed over, each listed once."""
        summed: dict = {}
        for index in self.left.indices + self.right.indices:
            if not self.indices.contains_index(index):
                summed.setdefault(index, index)
        return Indices(*summed.values())


@dataclass(frozen=True, slots=True)
class Scaled(Node):
    child: Node
    scale: Scalar
    name: str = ""
    printed_text: str = ""

    kind: ClassVar[NodeKind] = NodeKind.scaled

    def __post_init__(self):
        object.__setattr__(self, "scale", as_scalar(self.scale))

    @property
    def indices(self) -> Indices:
        return self.child.indices


@dataclass(frozen=True, slots=True)
class Substitute(Node):
    """The child tensor with its slots reordered to `indices`."""

    child: Node
    indices: Indices
    name: str = ""
    printed_text: str = ""

    kind: ClassVar[NodeKind] = NodeKind.substitute

    def __post_init__(self):
        if not self.indices.is_permutation_of(self.child.indices):
            raise InvalidTensorError(
                "substitute",
                f"{self.indices.deparse()} is not a permutation of "
                f"{self.child.indices.deparse()}",
            )
