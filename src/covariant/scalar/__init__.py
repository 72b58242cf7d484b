from ._exceptions import NonlinearScalarError, ScalarHasVariablesError
from ._parser import parse_scalar
from .ast import (
    AddedScalar,
    MultipliedScalar,
    Numeric,
    Scalar,
    ScalarLike,
    Variable,
    as_scalar,
    minus_one,
    one,
    zero,
)
