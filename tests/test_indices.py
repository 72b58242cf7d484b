import pytest
from parsita import ParseError

from covariant.indices import (
    CannotContractTensorsError,
    IncompleteIndexAssignmentError,
    Index,
    IndexAssignments,
    Indices,
    InvalidIndexNameError,
    MissingIndexError,
    Permutation,
    Range,
    index_orbit,
    parse_indices,
)

r = Range(0, 3)
a, b, c, d = Indices.roman_series(4, r)


def test_range():
    assert Range(1, 3).size == 3
    assert list(Range(1, 3)) == [1, 2, 3]
    assert 3 in Range(1, 3)
    assert 0 not in Range(1, 3)


@pytest.mark.parametrize("name", ["a", "z9", "B12", "\\alpha", "\\Omega"])
def test_valid_index_names(name):
    assert Index(name, r).name == name


@pytest.mark.parametrize("name", ["", "ab", "1", "a_b", "\\", "\\1"])
def test_invalid_index_names(name):
    with pytest.raises(InvalidIndexNameError):
        Index(name, r)


def test_index_equality_ignores_covariance():
    assert a == a.raised()
    assert hash(a) == hash(a.raised())
    assert a != Index("a", Range(1, 3))


def test_contracts_with():
    assert a.contracts_with(a.raised())
    assert a.raised().contracts_with(a)
    assert not a.contracts_with(a)
    assert not a.contracts_with(b.raised())


def test_index_order():
    assert Index("z", Range(0, 3)) < Index("a", Range(1, 3))
    assert Index("a", r) < Index("b", r)
    assert Indices(c, a, b).ordered() == Indices(a, b, c)


def test_series():
    assert Indices.roman_series(3, r).names() == ("a", "b", "c")
    assert Indices.roman_series(2, r, 2).names() == ("c", "d")
    assert Indices.greek_series(2, r, 1).names() == ("\\beta", "\\gamma")
    assert all(index.contravariant for index in Indices.greek_series(2, r, contravariant=True))


def test_sequence_behavior():
    indices = Indices(a, b, c)
    assert len(indices) == 3
    assert indices[1] == b
    assert indices[1:] == Indices(b, c)
    assert indices + Indices(d) == Indices(a, b, c, d)
    assert indices.partial(0, 2) == Indices(a, b)
    assert indices.index_of(c) == 2
    assert indices.contains_index(c.raised())
    assert not indices.contains_index(d)


def test_index_of_missing():
    with pytest.raises(MissingIndexError):
        Indices(a, b).index_of(c)


def test_shuffle():
    shuffled = Indices(a, b, c).shuffle({a: c.raised(), c: a})
    assert shuffled == Indices(c, b, a)
    assert shuffled[0].contravariant
    assert not shuffled[2].contravariant


def test_is_permutation_of():
    assert Indices(a, b, c).is_permutation_of(Indices(c, a, b.raised()))
    assert not Indices(a, b).is_permutation_of(Indices(a, c))
    assert not Indices(a, b).is_permutation_of(Indices(a, b, c))


def test_contains_contractions():
    assert Indices(a, b, a.raised()).contains_contractions()
    assert not Indices(a, b, a).contains_contractions()


@pytest.mark.parametrize(
    ("left", "right", "expected"),
    [
        (Indices(a, b), Indices(c, d), Indices(a, b, c, d)),
        (Indices(a, b), Indices(b.raised(), c), Indices(a, c)),
        (Indices(a.raised(), b), Indices(b.raised(), a), Indices()),
        (Indices(), Indices(a), Indices(a)),
    ],
)
def test_contract(left, right, expected):
    assert left.contract(right) == expected


def test_contract_same_covariance():
    with pytest.raises(CannotContractTensorsError):
        Indices(a, b).contract(Indices(b, c))

    assert Indices(a, b).contract(Indices(b, c), strict=False) == Indices(a, b, b, c)


def test_all_combinations():
    indices = Indices(Index("a", Range(0, 1)), Index("b", Range(1, 2)))
    assert indices.all_combinations() == [(0, 1), (0, 2), (1, 1), (1, 2)]
    assert Indices().all_combinations() == [()]


@pytest.mark.parametrize(
    ("indices", "string"),
    [
        (Indices(), ""),
        (Indices(a, b), "_{ab}"),
        (Indices(a, b, c.raised()), "_{ab}^{c}"),
        (Indices(a.raised(), b, c.raised()), "^{a}_{b}^{c}"),
        (Indices.greek_series(2, r), "_{\\alpha \\beta}"),
        (Indices(Index("a1", r), Index("b", r)), "_{a1b}"),
    ],
)
def test_deparse_and_parse(indices, string):
    assert indices.deparse() == string

    parsed = parse_indices(string, r).unwrap()
    assert parsed == indices
    assert [index.contravariant for index in parsed] == [index.contravariant for index in indices]


@pytest.mark.parametrize("string", ["_{}", "_{ab", "ab", "^{a}_"])
def test_parse_indices_failure(string):
    assert isinstance(parse_indices(string, r).failure(), ParseError)


def test_index_assignments():
    assignments = IndexAssignments.from_indices(Indices(a, b), (1, 2))
    assert assignments == {"a": 1, "b": 2}
    assert assignments.values_for(Indices(b, a)) == (2, 1)


def test_incomplete_index_assignments():
    with pytest.raises(IncompleteIndexAssignmentError):
        IndexAssignments.from_indices(Indices(a, b), (1,))

    with pytest.raises(IncompleteIndexAssignmentError):
        IndexAssignments({"a": 1}).values_for(Indices(a, b))


def test_permutation():
    permutation = Permutation.between(Indices(a, b, c), Indices(b, c, a))
    assert permutation == Permutation((1, 2, 0))
    assert permutation(Indices(a, b, c)) == Indices(b, c, a)
    assert Indices(a, b, c).permute(permutation) == Indices(b, c, a)
    assert permutation.inverse() == Permutation((2, 0, 1))
    assert permutation.inverse()(permutation(Indices(a, b, c))) == Indices(a, b, c)


def test_invalid_permutation():
    with pytest.raises(ValueError):
        Permutation((0, 0, 1))


@pytest.mark.parametrize(
    ("images", "sign"),
    [
        ((), 1),
        ((0, 1, 2), 1),
        ((1, 0, 2), -1),
        ((1, 2, 0), 1),
        ((2, 1, 0), -1),
        ((1, 0, 3, 2), 1),
        ((1, 2, 3, 0), -1),
    ],
)
def test_permutation_sign(images, sign):
    assert Permutation(images).sign() == sign


def test_identity_permutation():
    assert Permutation.identity(3)(Indices(a, b, c)) == Indices(a, b, c)
    assert Permutation.identity(3).sign() == 1


def test_index_orbit():
    assert index_orbit(Indices(a, b, c), Indices(a, b)) == [Indices(a, b, c), Indices(b, a, c)]
    assert index_orbit(Indices(a, b, c), Indices(a, c)) == [Indices(a, b, c), Indices(c, b, a)]
    assert index_orbit(Indices(a, b), Indices()) == [Indices(a, b)]

    orbit = index_orbit(Indices(a, b, c, d), Indices(b, c, d))
    assert len(orbit) == 6
    assert orbit[0] == Indices(a, b, c, d)
    assert all(member[0] == a for member in orbit)


def test_index_orbit_keeps_covariance():
    orbit = index_orbit(Indices(a.raised(), b), Indices(a, b))
    assert orbit == [Indices(a, b), Indices(b, a)]
    assert orbit[1][1].contravariant


def test_index_orbit_missing_index():
    with pytest.raises(MissingIndexError):
        index_orbit(Indices(a, b), Indices(c))
