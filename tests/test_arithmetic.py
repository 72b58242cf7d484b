import pytest

from covariant.indices import Indices, Range
from covariant.node import (
    Added,
    CannotAddTensorsError,
    CannotMultiplyTensorsError,
    Custom,
    Delta,
    Epsilon,
    EpsilonGamma,
    Gamma,
    InvalidTensorError,
    Multiplied,
    ScalarTensor,
    Scaled,
    Substitute,
    Zero,
    add,
    evaluate,
    multiply,
    negate,
    scale,
    separate_scale,
    summands,
)
from covariant.scalar import Variable

r = Range(0, 3)
a, b, c, d = Indices.roman_series(4, r)

A = Custom("A", "A", Indices(a, b), {(0, 1): 1})
B = Custom("B", "B", Indices(a, b), {(1, 0): 2})
C = Custom("C", "C", Indices(b, a))


def test_add_zero():
    assert add(Zero(), A) is A
    assert add(A, Zero()) is A
    assert add(Zero(), Zero()) == Zero()


def test_add_flattens():
    assert add(A, B) == Added((A, B))
    assert add(Added((A, B)), C) == Added((A, B, C))
    assert add(A, Added((B, C))) == Added((A, B, C))
    assert add(Added((A, B)), Added((C, A))) == Added((A, B, C, A))


def test_add_is_associative():
    assert add(add(A, B), C) == add(A, add(B, C))


def test_scale():
    assert scale(A, 1) is A
    assert scale(A, 0) == Zero()
    assert scale(Zero(), 5) == Zero()
    assert scale(A, 2) == Scaled(A, 2)
    assert scale(scale(A, 2), 3) == Scaled(A, 6)
    assert scale(scale(A, 2), Variable("x")) == Scaled(A, 2 * Variable("x"))
    assert scale(scale(A, 2), 0) == Zero()


def test_scale_substitute():
    substitute = Substitute(A, Indices(b, a))
    assert scale(substitute, 3) == Substitute(Scaled(A, 3), Indices(b, a))


def test_negate():
    assert negate(A) == Scaled(A, -1)
    assert negate(negate(A)) == A


def test_summands():
    assert summands(Zero()) == ()
    assert summands(A) == (A,)
    assert summands(add(A, B)) == (A, B)


def test_separate_scale():
    assert separate_scale(A) == (1, A)
    assert separate_scale(scale(A, 3)) == (3, A)
    assert separate_scale(Substitute(scale(A, 3), Indices(b, a))) == (
        3,
        Substitute(A, Indices(b, a)),
    )


def test_multiply_zero():
    assert multiply(A, Zero()) == Zero()
    assert multiply(Zero(), A) == Zero()


def test_multiply_contracts():
    right = Custom("B", "B", Indices(b.raised(), c))
    product = multiply(A, right)
    assert product == Multiplied(A, right)
    assert product.indices == Indices(a, c)
    assert product.contracted() == Indices(b)


def test_multiply_by_delta_renames():
    delta = Delta(Indices(a, b))
    tensor = Custom("T", "T", Indices(b.raised(), c))
    expected = Custom("T", "T", Indices(a.raised(), c))

    for product in [multiply(delta, tensor), multiply(tensor, delta)]:
        assert product == expected
        assert product.indices[0].contravariant


def test_multiply_by_delta_without_contraction():
    delta = Delta(Indices(a, b))
    tensor = Custom("T", "T", Indices(c, d))
    assert multiply(delta, tensor) == Multiplied(delta, tensor)


def test_multiply_by_delta_with_double_contraction():
    delta = Delta(Indices(a, b))
    tensor = Custom("T", "T", Indices(b.raised(), a))
    product = multiply(delta, tensor)
    assert isinstance(product, Multiplied)
    assert product.indices == Indices()


def test_multiply_by_delta_with_existing_index():
    delta = Delta(Indices(a, b))
    tensor = Custom("T", "T", Indices(b.raised(), a.raised()))
    assert isinstance(multiply(delta, tensor), Multiplied)


def test_multiply_is_lenient():
    product = multiply(Custom("A", "A", Indices(a)), Custom("B", "B", Indices(a)))
    assert product.indices == Indices(a, a)

    with pytest.raises(CannotMultiplyTensorsError):
        evaluate(product, (0, 0))


def test_add_is_lenient():
    total = add(Custom("A", "A", Indices(a)), Custom("B", "B", Indices(b)))

    with pytest.raises(CannotAddTensorsError):
        evaluate(total, (0,))


def test_added_indices_follow_first_summand():
    assert add(C, A).indices.names() == ("b", "a")


@pytest.mark.parametrize(
    "build",
    [
        lambda: Delta(Indices(a)),
        lambda: Gamma(Indices(a, b, c)),
        lambda: Epsilon(Indices(a, b, c)),
        lambda: Epsilon(Indices()),
        lambda: EpsilonGamma(2, 0, Indices(a, b, c, d)),
        lambda: EpsilonGamma(1, 1, Indices(a, b, c, d)),
        lambda: Substitute(A, Indices(a, c)),
        lambda: Custom("A", "A", Indices(a, b), {(0,): 1}),
        lambda: Added(()),
    ],
)
def test_invalid_tensors(build):
    with pytest.raises(InvalidTensorError):
        build()


def test_delta_forces_covariance():
    delta = Delta(Indices(a, b.raised()))
    assert delta.indices[0].contravariant
    assert not delta.indices[1].contravariant


def test_custom_components_are_normalized():
    tensor = Custom("A", "A", Indices(a, b), {(1, 0): 2, (0, 1): 1})
    assert tensor.components == (((0, 1), 1), ((1, 0), 2))
    assert tensor == Custom("A", "A", Indices(a, b), [((0, 1), 1), ((1, 0), 2)])


def test_scalar_tensor():
    assert ScalarTensor(3).indices == Indices()
    assert evaluate(ScalarTensor(3), ()) == 3
