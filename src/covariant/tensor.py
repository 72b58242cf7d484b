from __future__ import annotations

__all__ = ["Tensor"]

from collections.abc import Iterable, Mapping
from fractions import Fraction
from numbers import Rational

from returns import result
from sympy import Matrix

from ._pool import DEFAULT_PROCESSES
from .indices import IndexAssignments, Indices, Range
from .node import (
    Added,
    Custom,
    Delta,
    Epsilon,
    EpsilonGamma,
    Gamma,
    Node,
    Scaled,
    ScalarTensor,
    Substitute,
    Zero,
    add,
    canonicalize,
    components,
    deparse,
    evaluate,
    evaluate_assignments,
    is_equal,
    is_zero,
    multiply,
    negate,
    scale,
    separate_scale,
    set_indices,
    summands,
)
from .scalar import Scalar, ScalarLike, Variable, as_scalar
from .serialization import WrongFormatError, deserialize, serialize
from .simplify import (
    collect_by_variables,
    expand,
    extract_variables,
    has_variables,
    redefine_variables,
    simplify,
    substitute_variable,
    substitute_variables,
    to_homogeneous_linear_system,
)
from .symmetrize import antisymmetrize, exchange_symmetrize, symmetrize


class Tensor:
    """Tensor expression with exact coefficients.

    This is a thin wrapper around an immutable node of the expression tree. An instance should be
    constructed via the static methods and combined with the arithmetic operators.
    """

    __slots__ = ("node",)

    def __init__(self, node: Node):
        self.node = node

    @staticmethod
    def zero() -> Tensor:
        return Tensor(Zero())

    @staticmethod
    def one() -> Tensor:
        return Tensor(ScalarTensor(as_scalar(1)))

    @staticmethod
    def scalar(value: ScalarLike) -> Tensor:
        return Tensor(ScalarTensor(as_scalar(value)))

    @staticmethod
    def custom(
        name: str,
        printed_text: str,
        indices: Indices,
        components: Mapping[tuple[int, ...], ScalarLike] | None = None,
    ) -> Tensor:
        return Tensor(Custom(name, printed_text, indices, components or ()))

    @staticmethod
    def delta(indices: Indices) -> Tensor:
        return Tensor(Delta(indices))

    @staticmethod
    def epsilon(indices: Indices) -> Tensor:
        return Tensor(Epsilon(indices))

    @staticmethod
    def gamma(indices: Indices, p: int = 0, q: int = 3) -> Tensor:
        return Tensor(Gamma(indices, p, q))

    @staticmethod
    def epsilon_gamma(num_epsilon: int, num_gamma: int, indices: Indices) -> Tensor:
        return Tensor(EpsilonGamma(num_epsilon, num_gamma, indices))

    @staticmethod
    def euclidean_metric(offset: int = 0) -> Tensor:
        return Tensor.gamma(Indices.greek_series(2, Range(0, 3), offset), 0, 4)

    @staticmethod
    def minkowskian_metric(offset: int = 0) -> Tensor:
        return Tensor.gamma(Indices.greek_series(2, Range(0, 3), offset), 1, 3)

    @staticmethod
    def spatial_metric(offset: int = 0) -> Tensor:
        return Tensor.gamma(Indices.roman_series(2, Range(1, 3), offset), 0, 3)

    @staticmethod
    def space_time_epsilon(offset: int = 0) -> Tensor:
        return Tensor.epsilon(Indices.greek_series(4, Range(0, 3), offset))

    @staticmethod
    def space_epsilon(offset: int = 0) -> Tensor:
        return Tensor.epsilon(Indices.roman_series(3, Range(1, 3), offset))

    @staticmethod
    def contraction(tensor: Tensor, indices: Indices) -> Tensor:
        """Relabel the tensor; indices listed once up and once down are then summed over."""
        relabelled = set_indices(tensor.node, indices)
        if not indices.contains_contractions():
            return Tensor(relabelled)
        return Tensor.one() * Tensor(relabelled)

    @staticmethod
    def substitute(tensor: Tensor, indices: Indices) -> Tensor:
        """Reorder the slots of the tensor to `indices` without changing its components."""
        match tensor.node:
            case Added(terms):
                return sum(Tensor.substitute(Tensor(term), indices) for term in terms)
            case Scaled(child, factor):
                return factor * Tensor.substitute(Tensor(child), indices)
            case _:
                return Tensor(Substitute(tensor.node, indices))

    @staticmethod
    def deserialize(data: bytes) -> result.Result[Tensor, WrongFormatError]:
        return deserialize(data).map(Tensor)

    @property
    def indices(self) -> Indices:
        return self.node.indices

    def set_indices(self, indices: Indices) -> Tensor:
        return Tensor(set_indices(self.node, indices))

    def summands(self) -> list[Tensor]:
        return [Tensor(term) for term in summands(self.node)]

    def separate_scale(self) -> tuple[Scalar, Tensor]:
        factor, unit = separate_scale(self.node)
        return factor, Tensor(unit)

    def canonicalize(self) -> Tensor:
        return Tensor(canonicalize(self.node))

    def expand(self) -> Tensor:
        return Tensor(expand(self.node))

    def simplify(self, *, processes: int = DEFAULT_PROCESSES) -> Tensor:
        return Tensor(simplify(self.node, processes=processes))

    def symmetrize(self, indices: Indices, *, processes: int = DEFAULT_PROCESSES) -> Tensor:
        return Tensor(symmetrize(self.node, indices, processes=processes))

    def antisymmetrize(self, indices: Indices, *, processes: int = DEFAULT_PROCESSES) -> Tensor:
        return Tensor(antisymmetrize(self.node, indices, processes=processes))

    def exchange_symmetrize(
        self, source: Indices, target: Indices, *, processes: int = DEFAULT_PROCESSES
    ) -> Tensor:
        return Tensor(exchange_symmetrize(self.node, source, target, processes=processes))

    def is_zero(self) -> bool:
        return is_zero(self.node)

    def is_equal(self, other: Tensor) -> bool:
        """Whether both tensors have the same components, matching indices by name."""
        return is_equal(self.node, other.node)

    def components(self) -> dict[tuple[int, ...], Scalar]:
        return components(self.node)

    def has_variables(self) -> bool:
        return has_variables(self.node)

    def collect_by_variables(self) -> Tensor:
        return Tensor(collect_by_variables(self.node))

    def extract_variables(self) -> tuple[list[tuple[Variable, Tensor]], Tensor]:
        pairs, rest = extract_variables(self.node)
        return [(variable, Tensor(tensor)) for variable, tensor in pairs], Tensor(rest)

    def to_homogeneous_linear_system(self) -> tuple[Matrix, list[Variable]]:
        return to_homogeneous_linear_system(self.node)

    def substitute_variable(self, variable: Variable, expression: ScalarLike) -> Tensor:
        return Tensor(substitute_variable(self.node, variable, expression))

    def substitute_variables(
        self, substitutions: Iterable[tuple[Variable, ScalarLike]]
    ) -> Tensor:
        return Tensor(substitute_variables(self.node, substitutions))

    def redefine_variables(self, name: str, offset: int = 0) -> Tensor:
        return Tensor(redefine_variables(self.node, name, offset))

    def serialize(self) -> bytes:
        return serialize(self.node)

    def deparse(self) -> str:
        return deparse(self.node)

    def __call__(self, *values: int | IndexAssignments) -> Scalar:
        match values:
            case (IndexAssignments() as assignments,):
                return evaluate_assignments(self.node, assignments)
            case _:
                return evaluate(self.node, values)

    def __add__(self, other) -> Tensor:
        if isinstance(other, Tensor):
            return Tensor(add(self.node, other.node))
        elif isinstance(other, Rational) and other == 0:
            return self
        else:
            return NotImplemented

    def __radd__(self, other) -> Tensor:
        if isinstance(other, Tensor):
            return Tensor(add(other.node, self.node))
        elif isinstance(other, Rational) and other == 0:
            # Allows the builtin sum
            return self
        else:
            return NotImplemented

    def __sub__(self, other) -> Tensor:
        if isinstance(other, Tensor):
            return Tensor(add(self.node, negate(other.node)))
        else:
            return NotImplemented

    def __neg__(self) -> Tensor:
        return Tensor(negate(self.node))

    def __mul__(self, other) -> Tensor:
        if isinstance(other, Tensor):
            return Tensor(multiply(self.node, other.node))
        elif isinstance(other, (Scalar, Rational)):
            return Tensor(scale(self.node, other))
        else:
            return NotImplemented

    def __rmul__(self, other) -> Tensor:
        if isinstance(other, (Scalar, Rational)):
            return Tensor(scale(self.node, other))
        else:
            return NotImplemented

    def __truediv__(self, other) -> Tensor:
        if isinstance(other, Rational):
            return Tensor(scale(self.node, Fraction(1) / other))
        else:
            return NotImplemented

    def __eq__(self, other):
        if isinstance(other, Tensor):
            return self.node == other.node
        else:
            return NotImplemented

    def __hash__(self):
        return hash(self.node)

    def __str__(self):
        return self.deparse()

    def __repr__(self):
        return f"Tensor({self.node!r})"
