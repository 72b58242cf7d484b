from __future__ import annotations

__all__ = ["Indices", "IndexAssignments"]

from collections.abc import Mapping, Sequence
from itertools import groupby, product
from typing import TYPE_CHECKING, Iterator, overload

from ._exceptions import (
    CannotContractTensorsError,
    IncompleteIndexAssignmentError,
    MissingIndexError,
)
from ._index import Index, Range

if TYPE_CHECKING:
    from ._permutation import Permutation

roman_letters = "abcdefghijklmnopqrstuvwxyz"
greek_letters = (
    "\\alpha",
    "\\beta",
    "\\gamma",
    "\\delta",
    "\\epsilon",
    "\\zeta",
    "\\eta",
    "\\theta",
    "\\iota",
    "\\kappa",
    "\\lambda",
    "\\mu",
    "\\nu",
    "\\xi",
    "\\pi",
    "\\rho",
    "\\sigma",
    "\\tau",
    "\\upsilon",
    "\\phi",
    "\\chi",
    "\\psi",
    "\\omega",
)


class Indices(Sequence[Index]):
    """Ordered list of the indexes of a tensor.

    The order of the indexes is the order of the slots of the tensor. The same index may appear
    twice only when it appears once up and once down, in which case it is a contraction.
    """

    __slots__ = ("_indices",)

    def __init__(self, *indices: Index):
        self._indices = tuple(indices)

    @staticmethod
    def roman_series(
        count: int, index_range: Range, offset: int = 0, *, contravariant: bool = False
    ) -> Indices:
        return Indices(
            *(
                Index(roman_letters[offset + i], index_range, contravariant)
                for i in range(count)
            )
        )

    @staticmethod
    def greek_series(
        count: int, index_range: Range, offset: int = 0, *, contravariant: bool = False
    ) -> Indices:
        return Indices(
            *(Index(greek_letters[offset + i], index_range, contravariant) for i in range(count))
        )

    def __len__(self) -> int:
        return len(self._indices)

    @overload
    def __getitem__(self, item: int) -> Index: ...

    @overload
    def __getitem__(self, item: slice) -> Indices: ...

    def __getitem__(self, item):
        if isinstance(item, slice):
            return Indices(*self._indices[item])
        else:
            return self._indices[item]

    def __iter__(self) -> Iterator[Index]:
        return iter(self._indices)

    def __add__(self, other: Indices) -> Indices:
        if isinstance(other, Indices):
            return Indices(*self._indices, *other._indices)
        else:
            return NotImplemented

    def __eq__(self, other):
        if isinstance(other, Indices):
            return self._indices == other._indices
        else:
            return NotImplemented

    def __hash__(self):
        return hash(self._indices)

    def __repr__(self) -> str:
        return f"Indices({', '.join(repr(index) for index in self._indices)})"

    def __str__(self) -> str:
        return self.deparse()

    def names(self) -> tuple[str, ...]:
        return tuple(index.name for index in self._indices)

    def index_of(self, index: Index) -> int:
        for i, candidate in enumerate(self._indices):
            if candidate == index:
                return i
        raise MissingIndexError(index, self)

    def contains_index(self, index: Index) -> bool:
        return index in self._indices

    def permute(self, permutation: Permutation) -> Indices:
        return permutation(self)

    def shuffle(self, mapping: Mapping[Index, Index]) -> Indices:
        """Replace every index that is a key of the mapping with its value."""
        return Indices(*(mapping.get(index, index) for index in self._indices))

    def partial(self, start: int, stop: int) -> Indices:
        """The indexes in slots `start` up to, but not including, `stop`."""
        return Indices(*self._indices[start:stop])

    def ordered(self) -> Indices:
        return Indices(*sorted(self._indices, key=lambda index: index.sort_key))

    def is_permutation_of(self, other: Indices) -> bool:
        return sorted(index.sort_key for index in self._indices) == sorted(
            index.sort_key for index in other._indices
        )

    def contains_contractions(self) -> bool:
        return any(
            first.contracts_with(second)
            for i, first in enumerate(self._indices)
            for second in self._indices[i + 1 :]
        )

    def contract(self, other: Indices, *, strict: bool = True) -> Indices:
        """Indices of the product of a tensor with these indexes and one with the other indexes.

        Every pair of equal indexes with opposite covariance is summed over and disappears. The
        remaining indexes keep their order, left first. A repeated index that does not form such a
        pair cannot be contracted; if `strict` this raises, otherwise the repeat is kept so that the
        evaluation of the product can report it.
        """
        combined = [*self._indices, *other._indices]
        dropped: set[int] = set()
        for i, first in enumerate(combined):
            if i in dropped:
                continue
            for j in range(i + 1, len(combined)):
                if j not in dropped and first.contracts_with(combined[j]):
                    dropped.update((i, j))
                    break

        remaining = [index for k, index in enumerate(combined) if k not in dropped]

        if strict and len(set(remaining)) != len(remaining):
            raise CannotContractTensorsError(self, other)

        return Indices(*remaining)

    def all_combinations(self) -> list[tuple[int, ...]]:
        """Every assignment of values to these indexes, the last index varying fastest."""
        return list(product(*(index.range for index in self._indices)))

    def deparse(self) -> str:
        if len(self._indices) == 0:
            return ""

        separator = " " if any(index.name.startswith("\\") for index in self._indices) else ""
        return "".join(
            ("^" if contravariant else "_")
            + "{"
            + separator.join(index.name for index in group)
            + "}"
            for contravariant, group in groupby(self._indices, key=lambda x: x.contravariant)
        )


class IndexAssignments(dict[str, int]):
    """Values of indexes keyed by index name.

    Sums need this indirection because their summands may list the same indexes in a different
    order, as in `A_{ab} + A_{ba}`.
    """

    @staticmethod
    def from_indices(indices: Indices, values: Sequence[int]) -> IndexAssignments:
        if len(values) != len(indices):
            raise IncompleteIndexAssignmentError(len(indices), len(values))
        return IndexAssignments(zip(indices.names(), values, strict=True))

    def values_for(self, indices: Indices) -> tuple[int, ...]:
        names = indices.names()
        if not all(name in self for name in names):
            raise IncompleteIndexAssignmentError(
                len(names), sum(1 for name in names if name in self)
            )
        return tuple(self[name] for name in names)
