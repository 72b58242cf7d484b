from .indices import (
    CannotContractTensorsError,
    IncompleteIndexAssignmentError,
    Index,
    IndexAssignments,
    Indices,
    InvalidIndexNameError,
    MissingIndexError,
    Permutation,
    Range,
    parse_indices,
)
from .node import CannotAddTensorsError, CannotMultiplyTensorsError, InvalidTensorError
from .scalar import (
    NonlinearScalarError,
    Numeric,
    Scalar,
    ScalarHasVariablesError,
    Variable,
    as_scalar,
    parse_scalar,
)
from .serialization import CannotSerializeError, WrongFormatError
from .tensor import Tensor
