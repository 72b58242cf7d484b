__all__ = ["deparse"]

from functools import singledispatch

from ..scalar import AddedScalar
from .ast import (
    Added,
    Custom,
    Delta,
    Epsilon,
    EpsilonGamma,
    Gamma,
    Multiplied,
    Node,
    Scaled,
    ScalarTensor,
    Substitute,
    Zero,
)


@singledispatch
def deparse(self: Node) -> str:
    """Convert the node into LaTeX-like text."""
    raise NotImplementedError(f"deparse not implemented for {type(self)}: {self}")


@deparse.register(Zero)
def deparse_zero(self: Zero) -> str:
    return "0"


@deparse.register(ScalarTensor)
def deparse_scalar_tensor(self: ScalarTensor) -> str:
    if self.printed_text != "":
        return self.printed_text
    return self.value.deparse()


@deparse.register(Custom)
@deparse.register(Delta)
@deparse.register(Epsilon)
@deparse.register(Gamma)
def deparse_atomic(self: Node) -> str:
    return self.printed_text + self.indices.deparse()


@deparse.register(EpsilonGamma)
def deparse_epsilon_gamma(self: EpsilonGamma) -> str:
    output = ""
    if self.num_epsilon == 1:
        output += "\\epsilon" + self.epsilon_indices().deparse()
    for gamma in self.gamma_indices():
        output += "\\gamma" + gamma.deparse()
    return output


@deparse.register(Added)
def deparse_added(self: Added) -> str:
    first, *rest = self.summands
    output = deparse(first)
    for summand in rest:
        if isinstance(summand, Scaled) and summand.scale == -1:
            output += " - " + deparse(summand.child)
        else:
            output += " + " + deparse(summand)
    return output


def parenthesized(node: Node) -> str:
    if isinstance(node, Added):
        return f"({deparse(node)})"
    else:
        return deparse(node)


@deparse.register(Multiplied)
def deparse_multiplied(self: Multiplied) -> str:
    return parenthesized(self.left) + parenthesized(self.right)


@deparse.register(Scaled)
def deparse_scaled(self: Scaled) -> str:
    if self.scale == -1:
        prefix = "-"
    elif isinstance(self.scale, AddedScalar):
        prefix = f"({self.scale.deparse()}) * "
    else:
        prefix = f"{self.scale.deparse()} * "
    return prefix + parenthesized(self.child)


@deparse.register(Substitute)
def deparse_substitute(self: Substitute) -> str:
    return deparse(self.child)
