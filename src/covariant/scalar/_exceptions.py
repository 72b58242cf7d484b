from __future__ import annotations

__all__ = ["ScalarHasVariablesError", "NonlinearScalarError"]

from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .ast import Scalar


@dataclass(frozen=True, slots=True)
class ScalarHasVariablesError(Exception):
    scalar: Scalar

    def __str__(self):
        return f"Expected a purely numeric scalar, but {self.scalar} contains variables"


@dataclass(frozen=True, slots=True)
class NonlinearScalarError(Exception):
    scalar: Scalar

    def __str__(self):
        return (
            f"Expected every term to contain at most one variable, but {self.scalar} has a "
            f"product of variables"
        )
