"""Symmetrization of tensors over a subset of their indices.

Every member of the orbit of the selected indices is canonicalized, members that are the same
tensor are merged by adding their scales, and the merged terms are averaged over the orbit.
Sums are handled summand by summand, after which terms that coincide are pooled.
"""

from __future__ import annotations

__all__ = ["symmetrize", "antisymmetrize", "exchange_symmetrize", "merge_terms"]

import logging
from fractions import Fraction
from functools import reduce
from typing import Iterable

from .._pool import DEFAULT_PROCESSES, parallel_map
from ..indices import Index, Indices, Permutation, index_orbit
from ..node import (
    Added,
    Node,
    Scaled,
    Zero,
    add,
    canonicalize,
    negate,
    scale,
    separate_scale,
    set_indices,
    summands,
)
from ..scalar import Scalar

logger = logging.getLogger(__name__)


def merge_terms(terms: Iterable[tuple[Scalar, Node]]) -> list[tuple[Scalar, Node]]:
    """Merge (scale, unit tensor) pairs whose unit tensors are the same, adding their scales.

    The units are expected to be in canonical form. Pairs whose merged scale is exactly zero are
    dropped. The order of first appearance is kept.
    """
    merged: dict[Node, Scalar] = {}
    for term_scale, unit in terms:
        if isinstance(unit, Zero):
            continue
        if unit in merged:
            merged[unit] = merged[unit] + term_scale
        else:
            merged[unit] = term_scale
    return [(term_scale, unit) for unit, term_scale in merged.items() if term_scale != 0]


def total(nodes: Iterable[Node]) -> Node:
    return reduce(add, nodes, Zero())


def same_up_to_sign(left: Scalar, right: Scalar, signed: bool) -> bool:
    return left == right or (signed and left == -right)


def pool_summands(results: list[Node], signed: bool) -> Node:
    """Sum symmetrized summands, merging the terms that they have in common.

    Merging is only attempted when the symmetrized summands share their overall scale, up to sign
    if `signed`. Otherwise the summands are simply added.
    """
    separated = [separate_scale(result) for result in results if not isinstance(result, Zero)]
    if len(separated) == 0:
        return Zero()

    overall, _ = separated[0]
    if not all(same_up_to_sign(term_scale, overall, signed) for term_scale, _ in separated):
        return total(scale(unit, term_scale) for term_scale, unit in separated)

    stack = [
        term if term_scale == overall else negate(term)
        for term_scale, unit in separated
        for term in summands(unit)
    ]
    reduced = merge_terms(separate_scale(term) for term in stack)
    logger.debug("Pooled %d terms into %d distinct terms", len(stack), len(reduced))
    if len(reduced) == 0:
        return Zero()

    last, _ = reduced[0]
    if all(same_up_to_sign(term_scale, last, signed) for term_scale, _ in reduced):
        pooled = total(unit if term_scale == last else negate(unit) for term_scale, unit in reduced)
        return scale(scale(pooled, last), overall)
    else:
        return scale(total(scale(unit, term_scale) for term_scale, unit in reduced), overall)


def symmetrize_orbit(node: Node, indices: Indices, antisymmetric: bool, processes: int) -> Node:
    orbit = index_orbit(node.indices, indices)

    def canonical_member(member: Indices) -> Node:
        canonical = canonicalize(set_indices(node, member))
        if antisymmetric:
            return scale(canonical, Permutation.between(node.indices, member).sign())
        return canonical

    members = parallel_map(canonical_member, orbit, processes)
    merged = merge_terms(separate_scale(member) for member in members)
    logger.debug(
        "Orbit of %d members over %s merged into %d terms",
        len(orbit),
        indices.deparse(),
        len(merged),
    )

    result = total(scale(unit, term_scale) for term_scale, unit in merged)
    if isinstance(result, Zero):
        return result
    return scale(result, Fraction(1, len(orbit)))


def symmetrize_any(node: Node, indices: Indices, antisymmetric: bool, processes: int) -> Node:
    match node:
        case Zero():
            return node
        case Added(terms):
            results = parallel_map(
                lambda summand: symmetrize_any(summand, indices, antisymmetric, 1),
                terms,
                processes,
            )
            return pool_summands(results, signed=antisymmetric)
        case Scaled(child, factor):
            result = symmetrize_any(child, indices, antisymmetric, processes)
            if isinstance(result, Zero):
                return result
            return scale(result, factor)
        case _:
            return symmetrize_orbit(node, indices, antisymmetric, processes)


def symmetrize(node: Node, indices: Indices, *, processes: int = DEFAULT_PROCESSES) -> Node:
    """Average of the tensor over every permutation of the given indices."""
    return symmetrize_any(node, indices, False, processes)


def antisymmetrize(node: Node, indices: Indices, *, processes: int = DEFAULT_PROCESSES) -> Node:
    """Signed average of the tensor over every permutation of the given indices."""
    return symmetrize_any(node, indices, True, processes)


def exchange_any(node: Node, mapping: dict[Index, Index], processes: int) -> Node:
    match node:
        case Zero():
            return node
        case Added(terms):
            results = parallel_map(
                lambda summand: exchange_any(summand, mapping, 1), terms, processes
            )
            return pool_summands(results, signed=True)
        case Scaled(child, factor):
            return scale(exchange_any(child, mapping, processes), factor)
        case _:
            original_scale, original = separate_scale(canonicalize(node))
            exchanged_scale, exchanged = separate_scale(
                canonicalize(set_indices(node, node.indices.shuffle(mapping)))
            )
            if original == exchanged:
                return scale(original, (original_scale + exchanged_scale) / 2)
            else:
                return scale(
                    add(scale(original, original_scale), scale(exchanged, exchanged_scale)),
                    Fraction(1, 2),
                )


def exchange_symmetrize(
    node: Node, source: Indices, target: Indices, *, processes: int = DEFAULT_PROCESSES
) -> Node:
    """Average of the tensor and the tensor with each `source` index replaced by `target`.

    For example, with source `abcd` and target `cdab`, `T_{abcd}` becomes
    `(T_{abcd} + T_{cdab}) / 2`.
    """
    return exchange_any(node, dict(zip(source, target, strict=True)), processes)
