"""Solver backends, result variants and dispatch."""

from nlpkit.optimization.base import SolverBackend, coerce_options
from nlpkit.optimization.dispatch import DispatchState, SolverDispatch, solve
from nlpkit.optimization.ipopt_options import IPOPTOptions
from nlpkit.optimization.registry import (
    BackendRegistry,
    default_registry,
    list_backends,
    register_backend,
)
from nlpkit.optimization.result import (
    BackendError,
    NoSolution,
    NoSolutionFound,
    ResultKind,
    SolverError,
    SolverResult,
    Success,
    SuccessWithWarnings,
    match_result,
)
from nlpkit.optimization.scipy_backends import ScipyOptions

__all__ = [
    "SolverBackend",
    "coerce_options",
    "DispatchState",
    "SolverDispatch",
    "solve",
    "BackendRegistry",
    "default_registry",
    "list_backends",
    "register_backend",
    "IPOPTOptions",
    "ScipyOptions",
    "ResultKind",
    "Success",
    "SuccessWithWarnings",
    "NoSolution",
    "NoSolutionFound",
    "BackendError",
    "SolverError",
    "SolverResult",
    "match_result",
]
