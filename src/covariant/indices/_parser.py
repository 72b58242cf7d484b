__all__ = ["parse_indices"]

from parsita import ParseError, ParserContext, lit, reg, rep, rep1
from parsita.util import constant
from returns import result

from ._index import Index, Range
from ._indices import Indices


def make_indices(groups: list[tuple[bool, list[str]]], index_range: Range) -> Indices:
    return Indices(
        *(
            Index(name, index_range, contravariant)
            for contravariant, names in groups
            for name in names
        )
    )


class IndicesParsers(ParserContext, whitespace=r"[ ]*"):
    name = reg(r"\\[A-Za-z]+|[A-Za-z][0-9]*")

    down = lit("_") > constant(False)
    up = lit("^") > constant(True)
    group = (down | up) & ("{" >> rep1(name) << "}")

    indices = rep(group)


def parse_indices(string: str, index_range: Range, /) -> result.Result[Indices, ParseError]:
    """Parse the printed form of an index list, e.g. `_{ab}^{c}`, over the given range."""
    return IndicesParsers.indices.parse(string).map(
        lambda groups: make_indices(groups, index_range)
    )
