import pytest
from sympy import Matrix

from covariant.indices import Indices, Range
from covariant.node import (
    Added,
    Custom,
    Epsilon,
    Gamma,
    Multiplied,
    Scaled,
    Substitute,
    Zero,
    add,
    is_equal,
    multiply,
    negate,
    scale,
)
from covariant.scalar import NonlinearScalarError, Variable
from covariant.simplify import (
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

r = Range(0, 2)
a, b, c = Indices.roman_series(3, r)
x = Variable("x")
y = Variable("y")

A = Custom("A", "A", Indices(a, b), {(0, 1): 1})
B = Custom("B", "B", Indices(a, b), {(1, 1): 2})
C = Custom("C", "C", Indices(b.raised(),), {(1,): 1})
gamma_ab = Gamma(Indices(a, b))
gamma_ba = Gamma(Indices(b, a))


def test_expand_product_of_sums():
    product = Multiplied(add(A, B), C)
    assert expand(product) == Added((Multiplied(A, C), Multiplied(B, C)))


def test_expand_scaled_sum():
    assert expand(scale(add(A, B), 2)) == Added((Scaled(A, 2), Scaled(B, 2)))


def test_expand_pulls_scales_out_of_products():
    product = Multiplied(scale(A, 2), scale(C, 3))
    assert expand(product) == Scaled(Multiplied(A, C), 6)


def test_expand_keeps_products_without_sums():
    product = Multiplied(A, C)
    assert expand(product) == product


def test_expand_substitute():
    substitute = Substitute(add(A, scale(B, 2)), Indices(b, a))
    assert expand(substitute) == Added(
        (Substitute(A, Indices(b, a)), Substitute(Scaled(B, 2), Indices(b, a)))
    )


def test_expand_does_not_expand_scalars():
    node = scale(A, x + 1)
    assert expand(node) == node


def test_expand_preserves_value():
    node = multiply(add(A, scale(B, 3)), add(C, negate(C)))
    assert is_equal(expand(node), node)


@pytest.mark.parametrize("processes", [1, 4])
def test_simplify_dependent_sums(processes):
    assert simplify(add(gamma_ab, negate(gamma_ba)), processes=processes) == Zero()
    assert simplify(add(gamma_ab, gamma_ba), processes=processes) == Scaled(gamma_ab, 2)


def test_simplify_cyclic_epsilons():
    abc = Epsilon(Indices(a, b, c))
    bca = Epsilon(Indices(b, c, a))
    cab = Epsilon(Indices(c, a, b))
    assert simplify(add(abc, add(bca, scale(cab, -2)))) == Zero()
    assert simplify(add(abc, Epsilon(Indices(b, a, c)))) == Zero()


def test_simplify_independent_sum():
    assert simplify(add(A, B)) == Added((A, B))
    assert simplify(add(A, scale(B, 2))) == Added((A, Scaled(B, 2)))


def test_simplify_with_variables():
    node = add(scale(gamma_ab, x), scale(gamma_ba, y))
    assert simplify(node) == Scaled(gamma_ab, x + y)


def test_simplify_non_sums():
    assert simplify(gamma_ab) == gamma_ab
    assert simplify(Zero()) == Zero()
    assert simplify(scale(add(gamma_ab, gamma_ba), 3)) == Scaled(gamma_ab, 6)


def test_simplify_inside_product():
    node = Multiplied(add(gamma_ab, gamma_ba), C)
    assert simplify(node) == Multiplied(Scaled(gamma_ab, 2), C)


def test_simplify_preserves_value():
    transposed = Custom("A", "A", Indices(b, a), A.components)
    node = add(A, add(transposed, add(scale(A, 3), add(gamma_ab, negate(gamma_ba)))))
    simplified = simplify(node)
    assert is_equal(simplified, node)
    assert simplified == Added((Scaled(A, 4), transposed))


def test_has_variables():
    assert has_variables(add(A, scale(B, x)))
    assert not has_variables(add(A, scale(B, 2)))
    assert not has_variables(Zero())


def test_collect_by_variables():
    node = add(scale(A, x), add(scale(B, x), scale(A, 2)))
    assert collect_by_variables(node) == Added((Scaled(Added((A, B)), x), Scaled(A, 2)))


def test_collect_expands_first():
    node = scale(add(A, B), x + 1)
    assert is_equal(collect_by_variables(node), node)


def test_collect_nonlinear():
    with pytest.raises(NonlinearScalarError):
        collect_by_variables(scale(A, x * y))


def test_extract_variables():
    node = add(scale(A, 2 * x + 1), scale(B, y))
    pairs, rest = extract_variables(node)
    assert pairs == [(x, Scaled(A, 2)), (y, B)]
    assert rest == A


def test_to_homogeneous_linear_system():
    vector_a = Custom("U", "U", Indices(a), {(0,): 1, (1,): 2})
    vector_b = Custom("V", "V", Indices(a), {(1,): 3})
    matrix, variables = to_homogeneous_linear_system(add(scale(vector_a, x), scale(vector_b, y)))
    assert matrix == Matrix([[1, 0], [2, 3], [0, 0]])
    assert variables == [x, y]


def test_to_homogeneous_linear_system_without_variables():
    matrix, variables = to_homogeneous_linear_system(A)
    assert matrix.shape == (9, 0)
    assert variables == []


def test_substitute_variable():
    assert substitute_variable(scale(A, x + 1), x, y) == Scaled(A, y + 1)
    assert substitute_variable(scale(A, x + 1), x, -1) == Zero()
    assert substitute_variable(add(scale(A, x), B), x, 2) == Added((Scaled(A, 2), B))


def test_substitute_variables():
    node = add(scale(A, x), scale(B, y))
    substituted = substitute_variables(node, [(x, y), (y, 2)])
    assert substituted == Added((Scaled(A, 2), Scaled(B, 2)))


def test_substitute_variables_collects():
    node = add(scale(A, x), scale(B, y))
    substituted = substitute_variables(node, [(y, x)])
    assert substituted == Scaled(Added((A, B)), x)


def test_redefine_variables():
    node = add(scale(A, x + y), add(B, scale(gamma_ab, 2 * x)))
    assert redefine_variables(node, "e") == Added(
        (Scaled(A, Variable("e", 1)), B, Scaled(gamma_ab, Variable("e", 2)))
    )
    assert redefine_variables(node, "e", 4) == Added(
        (Scaled(A, Variable("e", 5)), B, Scaled(gamma_ab, Variable("e", 6)))
    )


def test_redefine_variables_in_products():
    product = Multiplied(scale(A, x), C)
    numeric = Multiplied(scale(A, 3), C)
    assert redefine_variables(add(product, numeric), "k") == Added(
        (Scaled(Multiplied(A, C), Variable("k", 1)), Scaled(Multiplied(A, C), 3))
    )
