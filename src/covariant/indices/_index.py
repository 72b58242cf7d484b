from __future__ import annotations

__all__ = ["Range", "Index"]

import re
from dataclasses import dataclass, field, replace
from typing import Iterator

from ._exceptions import InvalidIndexNameError

index_name_pattern = re.compile(r"\\[A-Za-z]+|[A-Za-z][0-9]*")


@dataclass(frozen=True, slots=True)
class Range:
    """Inclusive range of values an index runs over, e.g. `Range(1, 3)` is 1, 2, 3."""

    start: int
    stop: int

    @property
    def size(self) -> int:
        return self.stop - self.start + 1

    def __iter__(self) -> Iterator[int]:
        return iter(range(self.start, self.stop + 1))

    def __contains__(self, value: int) -> bool:
        return self.start <= value <= self.stop

    def __str__(self):
        return f"[{self.start},{self.stop}]"


@dataclass(frozen=True, slots=True)
class Index:
    """A named tensor slot running over a range of values.

    Two indexes are equal when their names and ranges are equal. Whether the index is up
    (contravariant) or down (covariant) is carried along, but only matters when deciding if
    two equal indexes form a contraction pair.
    """

    name: str
    range: Range
    contravariant: bool = field(default=False, compare=False)

    def __post_init__(self):
        if index_name_pattern.fullmatch(self.name) is None:
            raise InvalidIndexNameError(self.name)

    @property
    def sort_key(self) -> tuple[int, int, str]:
        return (self.range.start, self.range.stop, self.name)

    def __lt__(self, other: Index) -> bool:
        if isinstance(other, Index):
            return self.sort_key < other.sort_key
        else:
            return NotImplemented

    def contracts_with(self, other: Index) -> bool:
        return self == other and self.contravariant != other.contravariant

    def raised(self) -> Index:
        return replace(self, contravariant=True)

    def lowered(self) -> Index:
        return replace(self, contravariant=False)

    def __str__(self):
        return ("^" if self.contravariant else "_") + self.name
