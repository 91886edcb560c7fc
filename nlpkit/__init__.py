"""nlpkit: differentiable functions, constrained problems and solver dispatch.

Build cost and constraint functions, compose them into a :class:`Problem`
and hand it to a registered backend::

    from nlpkit import Problem, make_interval, solve

    problem = Problem(cost)
    problem.set_all_argument_bounds(make_interval(1.0, 5.0))
    problem.add_constraint(g, make_lower_interval(25.0))
    result = solve(problem, "scipy-slsqp")
"""
from __future__ import annotations

from nlpkit.errors import (
    CapabilityMismatch,
    DimensionMismatch,
    InvalidInterval,
    InvalidScale,
    NlpkitError,
    ShapeMismatch,
    UnknownBackend,
)
from nlpkit.functions import (
    CallbackFunction,
    Capability,
    ConstantFunction,
    DifferentiableFunction,
    FiniteDifferenceGradient,
    Function,
    LinearFunction,
    QuadraticFunction,
    SymbolicFunction,
    TwiceDifferentiableFunction,
    check_gradient,
)
from nlpkit.interval import (
    Interval,
    make_equality_interval,
    make_infinite_interval,
    make_interval,
    make_lower_interval,
    make_upper_interval,
)
from nlpkit.optimization import (
    NoSolution,
    SolverDispatch,
    SolverError,
    Success,
    SuccessWithWarnings,
    list_backends,
    match_result,
    register_backend,
    solve,
)
from nlpkit.problem import Constraint, Problem

__version__ = "0.1.0"

__all__ = [
    "NlpkitError",
    "DimensionMismatch",
    "ShapeMismatch",
    "InvalidInterval",
    "InvalidScale",
    "UnknownBackend",
    "CapabilityMismatch",
    "Capability",
    "Function",
    "DifferentiableFunction",
    "TwiceDifferentiableFunction",
    "CallbackFunction",
    "ConstantFunction",
    "LinearFunction",
    "QuadraticFunction",
    "SymbolicFunction",
    "FiniteDifferenceGradient",
    "check_gradient",
    "Interval",
    "make_interval",
    "make_lower_interval",
    "make_upper_interval",
    "make_infinite_interval",
    "make_equality_interval",
    "Problem",
    "Constraint",
    "SolverDispatch",
    "solve",
    "list_backends",
    "register_backend",
    "match_result",
    "Success",
    "SuccessWithWarnings",
    "NoSolution",
    "SolverError",
]
