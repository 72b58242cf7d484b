import struct
from fractions import Fraction

import pytest
from returns.result import Failure

from covariant.indices import Index, Indices, Range
from covariant.node import (
    Added,
    Custom,
    Delta,
    Epsilon,
    EpsilonGamma,
    Gamma,
    Multiplied,
    NodeKind,
    Scaled,
    ScalarTensor,
    Substitute,
    Zero,
)
from covariant.scalar import Numeric, Variable
from covariant.serialization import (
    CannotSerializeError,
    WrongFormatError,
    deserialize,
    deserialize_scalar,
    serialize,
    serialize_scalar,
)

r = Range(1, 3)
a, b, c, d, e = Indices.roman_series(5, r)
x = Variable("x")
e1 = Variable("e", 1)

A = Custom("A", "A", Indices(a, b.raised()), {(1, 2): Fraction(-3, 4), (2, 2): x + 1})

nodes = [
    Zero(),
    ScalarTensor(Fraction(3, 4)),
    ScalarTensor(2 * x - e1 + 5),
    Custom("B", "\\mathcal{B}", Indices()),
    A,
    Custom("g", "g", Indices.greek_series(2, Range(0, 3))),
    Delta(Indices(a, b)),
    Epsilon(Indices(a, b, c)),
    Gamma(Indices(a, b), 1, 2),
    EpsilonGamma(1, 1, Indices(a, b, c, d, e)),
    EpsilonGamma(0, 2, Indices(a, b, c, d)),
    Added((A, Scaled(A, -1))),
    Multiplied(A, Custom("C", "C", Indices(b, c))),
    Scaled(Epsilon(Indices(a, b, c)), x * e1),
    Substitute(A, Indices(b.raised(), a)),
    Substitute(Scaled(A, 2), Indices(b.raised(), a), "name", "text"),
    Scaled(Gamma(Indices(a, b), name="h", printed_text="h"), 7),
]


@pytest.mark.parametrize("node", nodes)
def test_round_trip(node):
    data = serialize(node)
    actual = deserialize(data).unwrap()
    assert actual == node
    assert serialize(actual) == data
    assert actual.name == node.name
    assert actual.printed_text == node.printed_text


@pytest.mark.parametrize(
    "scalar", [Numeric(0), Numeric(Fraction(-7, 3)), x, e1, 2 * x - e1 + 5, x * e1, -x]
)
def test_scalar_round_trip(scalar):
    data = serialize_scalar(scalar)
    assert deserialize_scalar(data).unwrap() == scalar


def test_numeric_layout():
    assert serialize_scalar(Numeric(Fraction(-3, 4))) == struct.pack("<iqQ", 1, -3, 4)


def test_variable_layout():
    assert serialize_scalar(e1) == struct.pack("<i", 2) + b"e;" + struct.pack("<q", 1)
    assert serialize_scalar(x) == struct.pack("<i", 2) + b"x;" + struct.pack("<q", -1)


def test_zero_layout():
    assert serialize(Zero()) == b";0;" + struct.pack("<Q", 0) + struct.pack("<i", 4)


def test_gamma_layout():
    expected = (
        b"gamma;\\gamma;"
        + struct.pack("<Q", 2)
        + b"a;"
        + struct.pack("<ii?", 1, 3, False)
        + b"b;"
        + struct.pack("<ii?", 1, 3, True)
        + struct.pack("<i", NodeKind.gamma)
        + struct.pack("<ii", 0, 3)
    )
    assert serialize(Gamma(Indices(a, b.raised()))) == expected


def test_delta_keeps_covariance():
    delta = deserialize(serialize(Delta(Indices(a, b)))).unwrap()
    assert delta.indices[0].contravariant
    assert not delta.indices[1].contravariant


def test_custom_keeps_covariance():
    custom = deserialize(serialize(A)).unwrap()
    assert [index.contravariant for index in custom.indices] == [False, True]


def index_bytes(name: bytes, start: int = 1, stop: int = 3) -> bytes:
    return name + b";" + struct.pack("<ii?", start, stop, False)


@pytest.mark.parametrize(
    "data",
    [
        b"",
        b"no terminator",
        b";0;",
        b";0;" + struct.pack("<Q", 0),
        b";0;" + struct.pack("<Q", 0) + struct.pack("<i", 99),
        b";0;" + struct.pack("<Q", 0) + struct.pack("<i", 4) + b"extra",
        b";;" + struct.pack("<Q", 1) + index_bytes(b"1a") + struct.pack("<i", 4),
        b";;" + struct.pack("<Q", 1) + index_bytes(b"a") + struct.pack("<i", NodeKind.epsilon),
        b";;" + struct.pack("<Q", 0) + struct.pack("<i", NodeKind.added) + struct.pack("<Q", 0),
        b";;" + struct.pack("<Q", 0) + struct.pack("<i", NodeKind.scalar) + struct.pack("<i", 9),
        b";;"
        + struct.pack("<Q", 0)
        + struct.pack("<i", NodeKind.scalar)
        + struct.pack("<iqQ", 1, 1, 0),
        b"\xff;;" + struct.pack("<Q", 0) + struct.pack("<i", 4),
        serialize(Added((Zero(), Zero())))[:-3],
    ],
)
def test_malformed(data):
    result = deserialize(data)
    assert isinstance(result, Failure)
    assert isinstance(result.failure(), WrongFormatError)


def test_error_position():
    error = deserialize(serialize(Zero()) + b"xy").failure()
    assert error.position == len(serialize(Zero()))
    assert "2 unread bytes" in str(error)


def test_index_round_trip_keeps_range():
    custom = Custom("T", "T", Indices(Index("i", Range(-2, 5))))
    assert deserialize(serialize(custom)).unwrap().indices[0].range == Range(-2, 5)


@pytest.mark.parametrize(
    "node",
    [
        ScalarTensor(Fraction(2**70, 3)),
        ScalarTensor(Fraction(1, 2**65)),
        ScalarTensor(Variable("y", 2**64)),
        Scaled(Gamma(Indices(a, b)), Fraction(-(2**64))),
        Custom("T", "T", Indices(Index("i", Range(0, 2**40)))),
    ],
)
def test_numbers_too_large(node):
    with pytest.raises(CannotSerializeError, match="fit in"):
        serialize(node)


@pytest.mark.parametrize(
    "node",
    [
        Custom("T;U", "T", Indices(a)),
        Custom("T", "T;", Indices(a)),
        Gamma(Indices(a, b), name="g;"),
        ScalarTensor(Variable("x;")),
    ],
)
def test_strings_with_terminator(node):
    with pytest.raises(CannotSerializeError, match="';'"):
        serialize(node)
