from __future__ import annotations

__all__ = ["CannotAddTensorsError", "CannotMultiplyTensorsError", "InvalidTensorError"]

from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from ..indices import Indices


@dataclass(frozen=True, slots=True)
class CannotAddTensorsError(Exception):
    expected: Indices
    actual: Indices

    def __str__(self):
        return (
            f"Expected every summand to carry a permutation of {self.expected.deparse()}, but "
            f"found a summand with {self.actual.deparse()}"
        )


@dataclass(frozen=True, slots=True)
class CannotMultiplyTensorsError(Exception):
    left: Indices
    right: Indices

    def __str__(self):
        return (
            f"Cannot multiply a tensor with indices {self.left.deparse()} by a tensor with "
            f"indices {self.right.deparse()} because an index repeats without being contracted"
        )


@dataclass(frozen=True, slots=True)
class InvalidTensorError(Exception):
    kind: str
    reason: str

    def __str__(self):
        return f"Invalid {self.kind} tensor: {self.reason}"
