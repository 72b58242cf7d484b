from __future__ import annotations

__all__ = ["deserialize", "deserialize_scalar"]

import logging
import struct
from dataclasses import replace
from typing import Any, Callable

from returns import result

from ..indices import Index, Indices, InvalidIndexNameError, Range
from ..node import (
    Added,
    Custom,
    Delta,
    Epsilon,
    EpsilonGamma,
    Gamma,
    InvalidTensorError,
    Multiplied,
    Node,
    NodeKind,
    Scaled,
    ScalarTensor,
    Substitute,
    Zero,
)
from ..scalar import Numeric, Scalar, Variable, zero
from ._exceptions import WrongFormatError
from ._serialize import ScalarTag

logger = logging.getLogger(__name__)


class Reader:
    __slots__ = ("data", "position")

    def __init__(self, data: bytes):
        self.data = data
        self.position = 0

    def fail(self, reason: str) -> WrongFormatError:
        return WrongFormatError(reason, self.position)

    def read_struct(self, format: str) -> tuple[Any, ...]:
        size = struct.calcsize(format)
        if self.position + size > len(self.data):
            raise self.fail(f"expected {size} more bytes, but the data ends")
        values = struct.unpack_from(format, self.data, self.position)
        self.position += size
        return values

    def read_string(self) -> str:
        end = self.data.find(b";", self.position)
        if end < 0:
            raise self.fail("expected a string terminated by ';'")
        try:
            string = self.data[self.position : end].decode("utf-8")
        except UnicodeDecodeError as e:
            raise self.fail(str(e)) from e
        self.position = end + 1
        return string

    def read_indices(self) -> Indices:
        (count,) = self.read_struct("<Q")
        indices = []
        for _ in range(count):
            name = self.read_string()
            start, stop, contravariant = self.read_struct("<ii?")
            indices.append(Index(name, Range(start, stop), contravariant))
        return Indices(*indices)

    def read_scalar(self) -> Scalar:
        (tag,) = self.read_struct("<i")
        match tag:
            case ScalarTag.numeric:
                numerator, denominator = self.read_struct("<qQ")
                if denominator == 0:
                    raise self.fail("zero denominator")
                return Numeric(numerator) / denominator
            case ScalarTag.variable:
                name = self.read_string()
                (id,) = self.read_struct("<q")
                return Variable(name, None if id == -1 else id)
            case ScalarTag.added:
                (count,) = self.read_struct("<Q")
                total = zero
                for _ in range(count):
                    total = total + self.read_scalar()
                return total
            case ScalarTag.multiplied:
                (count,) = self.read_struct("<Q")
                product = Numeric(1)
                for _ in range(count):
                    product = product * self.read_scalar()
                return product
            case _:
                raise self.fail(f"unknown scalar tag {tag}")

    def read_node(self) -> Node:
        start = self.position
        name = self.read_string()
        printed_text = self.read_string()
        indices = self.read_indices()
        (tag,) = self.read_struct("<i")
        try:
            kind = NodeKind(tag)
        except ValueError as e:
            raise self.fail(f"unknown node kind {tag}") from e

        node = node_readers[kind](self, indices, name, printed_text)
        logger.debug("Decoded %s node from bytes %d to %d", kind.name, start, self.position)

        if isinstance(node, Custom):
            return node
        return replace(node, name=name, printed_text=printed_text)


def read_custom(reader: Reader, indices: Indices, name: str, printed_text: str) -> Node:
    (count,) = reader.read_struct("<Q")
    components = []
    for _ in range(count):
        values = reader.read_struct(f"<{len(indices)}q")
        components.append((values, reader.read_scalar()))
    return Custom(name, printed_text, indices, tuple(components))


def read_added(reader: Reader, indices: Indices, name: str, printed_text: str) -> Node:
    (count,) = reader.read_struct("<Q")
    if count == 0:
        raise reader.fail("a sum needs at least one summand")
    return Added(tuple(reader.read_node() for _ in range(count)))


def read_multiplied(reader: Reader, indices: Indices, name: str, printed_text: str) -> Node:
    left = reader.read_node()
    right = reader.read_node()
    return Multiplied(left, right)


def read_scaled(reader: Reader, indices: Indices, name: str, printed_text: str) -> Node:
    scale = reader.read_scalar()
    return Scaled(reader.read_node(), scale)


def read_gamma(reader: Reader, indices: Indices, name: str, printed_text: str) -> Node:
    p, q = reader.read_struct("<ii")
    return Gamma(indices, p, q)


def read_epsilon_gamma(reader: Reader, indices: Indices, name: str, printed_text: str) -> Node:
    num_epsilon, num_gamma = reader.read_struct("<II")
    return EpsilonGamma(num_epsilon, num_gamma, indices)


node_readers: dict[NodeKind, Callable[[Reader, Indices, str, str], Node]] = {
    NodeKind.custom: read_custom,
    NodeKind.added: read_added,
    NodeKind.multiplied: read_multiplied,
    NodeKind.scaled: read_scaled,
    NodeKind.zero: lambda reader, indices, name, printed_text: Zero(),
    NodeKind.scalar: lambda reader, indices, name, printed_text: ScalarTensor(
        reader.read_scalar()
    ),
    NodeKind.epsilon: lambda reader, indices, name, printed_text: Epsilon(indices),
    NodeKind.gamma: read_gamma,
    NodeKind.epsilon_gamma: read_epsilon_gamma,
    NodeKind.delta: lambda reader, indices, name, printed_text: Delta(indices),
    NodeKind.substitute: lambda reader, indices, name, printed_text: Substitute(
        reader.read_node(), indices
    ),
}


def run_reader(
    data: bytes, read: Callable[[Reader], Any]
) -> result.Result[Any, WrongFormatError]:
    reader = Reader(data)
    try:
        value = read(reader)
    except WrongFormatError as e:
        return result.Failure(e)
    except (InvalidTensorError, InvalidIndexNameError) as e:
        return result.Failure(reader.fail(str(e)))

    if reader.position != len(data):
        return result.Failure(reader.fail(f"{len(data) - reader.position} unread bytes"))
    return result.Success(value)


def deserialize(data: bytes, /) -> result.Result[Node, WrongFormatError]:
    return run_reader(data, Reader.read_node)


def deserialize_scalar(data: bytes, /) -> result.Result[Scalar, WrongFormatError]:
    return run_reader(data, Reader.read_scalar)
