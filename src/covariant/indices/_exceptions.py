from __future__ import annotations

__all__ = [
    "InvalidIndexNameError",
    "IncompleteIndexAssignmentError",
    "CannotContractTensorsError",
    "MissingIndexError",
]

from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from ._index import Index
    from ._indices import Indices


@dataclass(frozen=True, slots=True)
class InvalidIndexNameError(Exception):
    name: str

    def __str__(self):
        return (
            f"Expected an index name to be a letter followed by optional digits or a LaTeX "
            f"macro like \\alpha, but got {self.name!r}"
        )


@dataclass(frozen=True, slots=True)
class IncompleteIndexAssignmentError(Exception):
    expected: int
    actual: int

    def __str__(self):
        return (
            f"Expected a value for each of the {self.expected} indexes of the tensor, "
            f"but got {self.actual} values"
        )


@dataclass(frozen=True, slots=True)
class CannotContractTensorsError(Exception):
    left: Indices
    right: Indices

    def __str__(self):
        return (
            f"Expected every repeated index to appear once up and once down, but cannot "
            f"contract {self.left.deparse()} with {self.right.deparse()}"
        )


@dataclass(frozen=True, slots=True)
class MissingIndexError(Exception):
    index: Index
    indices: Indices

    def __str__(self):
        return f"Index {self.index.name} is not among the indexes {self.indices.deparse()}"
