"""Function tiers and concrete function implementations."""

from nlpkit.functions.base import (
    Capability,
    DifferentiableFunction,
    Function,
    TwiceDifferentiableFunction,
    describe_capability,
    require_capability,
)
from nlpkit.functions.callback import CallbackFunction
from nlpkit.functions.finite_difference import (
    FiniteDifferenceGradient,
    check_gradient,
    finite_difference_gradient,
    max_gradient_error,
)
from nlpkit.functions.numeric import ConstantFunction, LinearFunction, QuadraticFunction
from nlpkit.functions.symbolic import SymbolicFunction

__all__ = [
    "Capability",
    "Function",
    "DifferentiableFunction",
    "TwiceDifferentiableFunction",
    "describe_capability",
    "require_capability",
    "CallbackFunction",
    "ConstantFunction",
    "LinearFunction",
    "QuadraticFunction",
    "SymbolicFunction",
    "FiniteDifferenceGradient",
    "finite_difference_gradient",
    "max_gradient_error",
    "check_gradient",
]
