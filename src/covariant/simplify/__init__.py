from ._expand import expand
from ._simplify import simplify
from ._variables import (
    collect_by_variables,
    extract_variables,
    has_variables,
    redefine_variables,
    substitute_variable,
    substitute_variables,
    to_homogeneous_linear_system,
)
