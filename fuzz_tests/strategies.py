from operator import add as add_scalars
from operator import mul as multiply_scalars

import hypothesis.strategies as st

from covariant.indices import Index, Indices, Range
from covariant.node import (
    Custom,
    Delta,
    Epsilon,
    EpsilonGamma,
    Gamma,
    Multiplied,
    Node,
    Substitute,
    add,
    multiply,
    scale,
    set_indices,
)
from covariant.scalar import Numeric, Variable

index_range = Range(0, 2)
a, b, c, d, e = Indices.roman_series(5, index_range)

index_names = st.sampled_from(["a", "b", "c", "i", "j", "k1", "\\alpha", "\\beta", "\\mu"])


@st.composite
def index_lists(draw, max_size: int = 5) -> Indices:
    names = draw(st.lists(index_names, unique=True, max_size=max_size))
    return Indices(*(Index(name, index_range, draw(st.booleans())) for name in names))


fractions = st.fractions(min_value=-20, max_value=20, max_denominator=12)
nonzero_fractions = fractions.filter(lambda x: x != 0)

numerics = st.builds(Numeric, fractions)
variables = st.builds(
    Variable,
    st.sampled_from(["x", "y", "z", "e"]),
    st.none() | st.integers(min_value=0, max_value=3),
)
scalars = st.recursive(
    numerics | variables,
    lambda children: st.builds(add_scalars, children, children)
    | st.builds(multiply_scalars, children, children),
    max_leaves=6,
)

pairs = st.permutations([a, b]).map(lambda indices: Indices(*indices))
values = st.integers(min_value=0, max_value=2)
component_tables = st.dictionaries(st.tuples(values, values), fractions, max_size=4)

gammas = st.builds(Gamma, pairs, st.integers(min_value=0, max_value=2), st.just(3))
deltas = st.builds(Delta, pairs)
customs = st.builds(
    lambda name, indices, table: Custom(name, name, indices, table),
    st.sampled_from(["S", "T"]),
    pairs,
    component_tables,
)


def make_product(p: int, right: Node) -> Node:
    match right:
        case Delta():
            # Built directly, since multiplying by a delta would rename it away
            return Multiplied(Gamma(Indices(a, c), p), Delta(Indices(c, b)))
        case _:
            return multiply(Gamma(Indices(a, c.raised()), p), set_indices(right, Indices(c, b)))


products = st.builds(
    make_product, st.integers(min_value=0, max_value=2), gammas | deltas | customs
)

# Tensors whose free indices are a permutation of a and b
matrices = st.deferred(
    lambda: gammas
    | deltas
    | customs
    | products
    | st.builds(add, matrices, matrices)
    | st.builds(scale, matrices, nonzero_fractions)
    | st.builds(Substitute, matrices, pairs)
)

epsilons = st.permutations([a, b, c]).map(lambda indices: Epsilon(Indices(*indices)))
epsilon_gammas = st.builds(
    lambda epsilon, gamma: EpsilonGamma(1, 1, Indices(*epsilon, *gamma)),
    st.permutations([a, b, c]),
    st.permutations([d, e]),
)

nodes = matrices | epsilons | epsilon_gammas
