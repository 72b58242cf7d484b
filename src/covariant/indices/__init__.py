from ._exceptions import (
    CannotContractTensorsError,
    IncompleteIndexAssignmentError,
    InvalidIndexNameError,
    MissingIndexError,
)
from ._index import Index, Range
from ._indices import IndexAssignments, Indices
from ._parser import parse_indices
from ._permutation import Permutation, index_orbit
