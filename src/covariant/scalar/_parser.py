__all__ = ["parse_scalar"]

from fractions import Fraction
from functools import reduce
from operator import mul, neg

from parsita import ParseError, ParserContext, lit, opt, reg, rep, rep1sep
from parsita.util import splat
from returns import result

from .ast import Numeric, Scalar, Variable


def make_variable(name: str, id: list[int]) -> Variable:
    return Variable(name, id[0] if id else None)


def make_expression(first: Scalar, rest: list[tuple[str, Scalar]]) -> Scalar:
    value = first
    for op, term in rest:
        match op:
            case "+":
                value = value + term
            case "-":
                value = value - term
    return value


class ScalarParsers(ParserContext, whitespace=r"[ ]*"):
    integer = reg(r"[0-9]+") > int

    number = reg(r"[0-9]+(/[1-9][0-9]*)?") > (lambda x: Numeric(Fraction(x)))
    variable = reg(r"[A-Za-z][A-Za-z0-9]*") & opt("_{" >> integer << "}") > splat(make_variable)

    parentheses = "(" >> expression << ")"  # noqa: F821
    negation = "-" >> factor > neg  # noqa: F821
    factor = negation | number | variable | parentheses

    term = rep1sep(factor, "*") > (lambda x: reduce(mul, x))
    expression = term & rep(lit("+", "-") & term) > splat(make_expression)


def parse_scalar(string: str, /) -> result.Result[Scalar, ParseError]:
    """Parse the printed form of a scalar, e.g. `3/4 * e_{1} - x + 2`."""
    return ScalarParsers.expression.parse(string)
