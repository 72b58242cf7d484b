from __future__ import annotations

__all__ = ["row_echelon_form", "to_matrix"]

from fractions import Fraction

from sympy import Matrix, Rational


def to_rational(value: Fraction) -> Rational:
    return Rational(value.numerator, value.denominator)


def to_fraction(value: Rational) -> Fraction:
    return Fraction(int(value.p), int(value.q))


def to_matrix(rows: list[list[Fraction]], columns: int) -> Matrix:
    if len(rows) == 0 or columns == 0:
        return Matrix.zeros(len(rows), columns)
    return Matrix([[to_rational(value) for value in row] for row in rows])


def row_echelon_form(rows: list[list[Fraction]]) -> list[list[Fraction]]:
    """Exact reduced row echelon form of a matrix given as a list of rows.

    Every nonzero row of the result starts with a 1 and the all-zero rows are at the bottom.
    """
    if len(rows) == 0 or len(rows[0]) == 0:
        return [list(row) for row in rows]

    reduced, _ = to_matrix(rows, len(rows[0])).rref()
    return [
        [to_fraction(reduced[i, j]) for j in range(reduced.cols)] for i in range(reduced.rows)
    ]
