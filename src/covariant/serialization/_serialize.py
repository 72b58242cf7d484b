"""Binary format of nodes and scalars.

A node is written as `name;printed_text;`, its index list, a 4-byte kind tag and a payload that
depends on the kind. All integers are little endian.

Strings are terminated by `;`, so names and printed texts cannot contain one. Numerators and
variable ids are 8-byte signed integers and denominators are 8-byte unsigned integers. Values
beyond these limits raise `CannotSerializeError`.
"""

from __future__ import annotations

__all__ = ["serialize", "serialize_scalar", "serialize_indices", "ScalarTag"]

import struct
from enum import Enum
from functools import singledispatch

from ..indices import Indices
from ..node import (
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
from ..scalar import AddedScalar, MultipliedScalar, Numeric, Scalar, Variable
from ._exceptions import CannotSerializeError


class ScalarTag(int, Enum):
    numeric = 1
    variable = 2
    added = 3
    multiplied = 4


def encode_string(string: str) -> bytes:
    if ";" in string:
        raise CannotSerializeError(string, "strings cannot contain ';'")
    return string.encode("utf-8") + b";"


def pack_limited(value: object, limit: str, format: str, *fields: int) -> bytes:
    try:
        return struct.pack(format, *fields)
    except struct.error as e:
        raise CannotSerializeError(value, limit) from e


def serialize_indices(indices: Indices) -> bytes:
    output = struct.pack("<Q", len(indices))
    for index in indices:
        output += encode_string(index.name)
        output += pack_limited(
            index,
            "range bounds must fit in 4-byte signed integers",
            "<ii?",
            index.range.start,
            index.range.stop,
            index.contravariant,
        )
    return output


@singledispatch
def serialize_scalar(self: Scalar) -> bytes:
    raise NotImplementedError(f"serialize_scalar not implemented for {type(self)}: {self}")


@serialize_scalar.register(Numeric)
def serialize_numeric(self: Numeric) -> bytes:
    return pack_limited(
        self,
        "numerator and denominator must fit in 8-byte integers",
        "<iqQ",
        ScalarTag.numeric,
        self.value.numerator,
        self.value.denominator,
    )


@serialize_scalar.register(Variable)
def serialize_variable(self: Variable) -> bytes:
    return (
        struct.pack("<i", ScalarTag.variable)
        + encode_string(self.name)
        + pack_limited(
            self, "ids must fit in 8-byte signed integers", "<q", -1 if self.id is None else self.id
        )
    )


@serialize_scalar.register(AddedScalar)
def serialize_added_scalar(self: AddedScalar) -> bytes:
    return struct.pack("<iQ", ScalarTag.added, len(self.terms)) + b"".join(
        serialize_scalar(term) for term in self.terms
    )


@serialize_scalar.register(MultipliedScalar)
def serialize_multiplied_scalar(self: MultipliedScalar) -> bytes:
    return struct.pack("<iQ", ScalarTag.multiplied, len(self.factors)) + b"".join(
        serialize_scalar(factor) for factor in self.factors
    )


def serialize(node: Node) -> bytes:
    """Binary form of the node, read back by `deserialize`.

    Raises `CannotSerializeError` if a name contains `;` or a number exceeds its fixed width.
    """
    return (
        encode_string(node.name)
        + encode_string(node.printed_text)
        + serialize_indices(node.indices)
        + struct.pack("<i", node.kind)
        + serialize_payload(node)
    )


@singledispatch
def serialize_payload(self: Node) -> bytes:
    raise NotImplementedError(f"serialize_payload not implemented for {type(self)}: {self}")


@serialize_payload.register(Zero)
@serialize_payload.register(Delta)
@serialize_payload.register(Epsilon)
def serialize_without_payload(self: Node) -> bytes:
    return b""


@serialize_payload.register(Custom)
def serialize_custom(self: Custom) -> bytes:
    output = struct.pack("<Q", len(self.components))
    for values, component in self.components:
        output += struct.pack(f"<{len(values)}q", *values) + serialize_scalar(component)
    return output


@serialize_payload.register(ScalarTensor)
def serialize_scalar_tensor(self: ScalarTensor) -> bytes:
    return serialize_scalar(self.value)


@serialize_payload.register(Gamma)
def serialize_gamma(self: Gamma) -> bytes:
    return struct.pack("<ii", self.p, self.q)


@serialize_payload.register(EpsilonGamma)
def serialize_epsilon_gamma(self: EpsilonGamma) -> bytes:
    return struct.pack("<II", self.num_epsilon, self.num_gamma)


@serialize_payload.register(Added)
def serialize_added(self: Added) -> bytes:
    return struct.pack("<Q", len(self.summands)) + b"".join(
        serialize(summand) for summand in self.summands
    )


@serialize_payload.register(Multiplied)
def serialize_multiplied(self: Multiplied) -> bytes:
    return serialize(self.left) + serialize(self.right)


@serialize_payload.register(Scaled)
def serialize_scaled(self: Scaled) -> bytes:
    return serialize_scalar(self.scale) + serialize(self.child)


@serialize_payload.register(Substitute)
def serialize_substitute(self: Substitute) -> bytes:
    return serialize(self.child)
