from __future__ import annotations

__all__ = ["set_indices"]

from dataclasses import replace
from functools import singledispatch
from itertools import count

from ..indices import Index, Indices
from ._exceptions import InvalidTensorError
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


def set_indices(node: Node, indices: Indices) -> Node:
    """Relabel the free indices of a node slot by slot.

    The result carries `indices` and every child is relabelled consistently. Summed indices
    inside products are renamed when they would clash with the new labels.
    """
    if len(indices) != len(node.indices):
        raise InvalidTensorError(
            type(node).__name__.lower(),
            f"cannot relabel {node.indices.deparse()} as {indices.deparse()}",
        )
    return relabel(node, dict(zip(node.indices, indices)))


@singledispatch
def relabel(self: Node, mapping: dict[Index, Index]) -> Node:
    raise NotImplementedError(f"relabel not implemented for {type(self)}: {self}")


@relabel.register(Zero)
@relabel.register(ScalarTensor)
def relabel_without_indices(self: Node, mapping: dict[Index, Index]) -> Node:
    return self


@relabel.register(Custom)
@relabel.register(Delta)
@relabel.register(Epsilon)
@relabel.register(Gamma)
@relabel.register(EpsilonGamma)
def relabel_atomic(self: Node, mapping: dict[Index, Index]) -> Node:
    return replace(self, indices=self.indices.shuffle(mapping))


@relabel.register(Added)
def relabel_added(self: Added, mapping: dict[Index, Index]) -> Node:
    return replace(self, summands=tuple(relabel(summand, mapping) for summand in self.summands))


@relabel.register(Scaled)
def relabel_scaled(self: Scaled, mapping: dict[Index, Index]) -> Node:
    return replace(self, child=relabel(self.child, mapping))


@relabel.register(Substitute)
def relabel_substitute(self: Substitute, mapping: dict[Index, Index]) -> Node:
    return Substitute(
        relabel(self.child, mapping),
        self.indices.shuffle(mapping),
        self.name,
        self.printed_text,
    )


def fresh_name(index: Index, taken: set[str]) -> str:
    base = "i" if index.name.startswith("\\") else index.name[0]
    for i in count(1):
        candidate = f"{base}{i}"
        if candidate not in taken:
            return candidate


@relabel.register(Multiplied)
def relabel_multiplied(self: Multiplied, mapping: dict[Index, Index]) -> Node:
    external = {
        index: target for index, target in mapping.items() if self.indices.contains_index(index)
    }
    relabelled = self.indices.shuffle(external)

    # Summed indices that collide with a new label get a fresh name on both sides
    taken = {
        *relabelled.names(),
        *self.left.indices.names(),
        *self.right.indices.names(),
    }
    renames: dict[Index, str] = {}
    for index in self.contracted():
        if relabelled.contains_index(index):
            renames[index] = fresh_name(index, taken)
            taken.add(renames[index])

    def child_mapping(child: Node) -> dict[Index, Index]:
        child_specific = {
            index: Index(renames[index], index.range, index.contravariant)
            for index in child.indices
            if index in renames
        }
        return {**external, **child_specific}

    return Multiplied(
        relabel(self.left, child_mapping(self.left)),
        relabel(self.right, child_mapping(self.right)),
        self.name,
        self.printed_text,
    )
