from ._arithmetic import add, multiply, negate, scale, separate_scale, summands
from ._canonicalize import canonicalize
from ._deparse import deparse
from ._evaluate import components, evaluate, evaluate_assignments, is_equal, is_zero
from ._exceptions import CannotAddTensorsError, CannotMultiplyTensorsError, InvalidTensorError
from ._relabel import set_indices
from .ast import (
    Added,
    Custom,
    Delta,
    Epsilon,
    EpsilonGamma,
    Gamma,
    Multiplied,
    Node,
    NodeKind,
    Scaled,
    ScalarTensor,
    Substitute,
    Zero,
)
