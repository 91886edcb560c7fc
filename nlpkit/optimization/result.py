"""
Solver outcomes as a closed set of result variants.

Exactly one of :class:`Success`, :class:`SuccessWithWarnings`,
:class:`NoSolution` or :class:`SolverError` is returned by every solve. They
are values, not exceptions: a backend that ran and failed reports it through
the returned variant. :func:`match_result` requires a handler for every
variant so callers cannot silently ignore a case.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Dict, Optional, Tuple, TypeVar, Union

import numpy as np

T = TypeVar("T")


class ResultKind(Enum):
    """Discriminant of a solver result."""

    SUCCESS = "success"
    SUCCESS_WITH_WARNINGS = "success_with_warnings"
    NO_SOLUTION = "no_solution"
    ERROR = "error"


@dataclass(frozen=True, eq=False)
class Success:
    """A solution was found.

    ``constraints`` holds the stacked constraint values at ``x`` and
    ``multipliers`` the matching dual values when the backend reports them,
    both in the order constraints were added to the problem.
    """

    x: np.ndarray
    value: float
    constraints: Optional[np.ndarray] = None
    multipliers: Optional[np.ndarray] = None
    iterations: Optional[int] = None
    solve_time: Optional[float] = None
    metadata: Dict[str, Any] = field(default_factory=dict)

    kind = ResultKind.SUCCESS

    def is_successful(self) -> bool:
        return True

    def summary(self) -> Dict[str, Any]:
        out = {
            "kind": self.kind.value,
            "x": self.x.tolist(),
            "value": self.value,
            "iterations": self.iterations,
            "solve_time": self.solve_time,
        }
        if self.constraints is not None:
            out["constraints"] = self.constraints.tolist()
        if self.multipliers is not None:
            out["multipliers"] = self.multipliers.tolist()
        return out


@dataclass(frozen=True, eq=False)
class SuccessWithWarnings(Success):
    """A solution was found but the backend flagged caveats."""

    warnings: Tuple[str, ...] = ()

    kind = ResultKind.SUCCESS_WITH_WARNINGS

    def summary(self) -> Dict[str, Any]:
        out = super().summary()
        out["warnings"] = list(self.warnings)
        return out


@dataclass(frozen=True)
class NoSolution:
    """The backend ran and found no solution."""

    message: str = ""
    metadata: Dict[str, Any] = field(default_factory=dict)

    kind = ResultKind.NO_SOLUTION

    def is_successful(self) -> bool:
        return False

    def summary(self) -> Dict[str, Any]:
        return {"kind": self.kind.value, "message": self.message}


@dataclass(frozen=True, eq=False)
class SolverError:
    """The backend reported a failure.

    ``last_state`` keeps the last iterate when the backend exposes one.
    """

    message: str
    last_state: Optional[Success] = None
    metadata: Dict[str, Any] = field(default_factory=dict)

    kind = ResultKind.ERROR

    def is_successful(self) -> bool:
        return False

    def summary(self) -> Dict[str, Any]:
        out = {"kind": self.kind.value, "message": self.message}
        if self.last_state is not None:
            out["last_state"] = self.last_state.summary()
        return out


# Names used by the error taxonomy for the two failure outcomes
NoSolutionFound = NoSolution
BackendError = SolverError

SolverResult = Union[Success, SuccessWithWarnings, NoSolution, SolverError]

RESULT_TYPES: Tuple[type, ...] = (Success, SuccessWithWarnings, NoSolution, SolverError)


def match_result(
    result: SolverResult,
    *,
    on_success: Callable[[Success], T],
    on_warnings: Callable[[SuccessWithWarnings], T],
    on_no_solution: Callable[[NoSolution], T],
    on_error: Callable[[SolverError], T],
) -> T:
    """Dispatch *result* to the handler of its variant.

    All four handlers are required keyword arguments.
    """
    # SuccessWithWarnings subclasses Success, so test it first
    if isinstance(result, SuccessWithWarnings):
        return on_warnings(result)
    if isinstance(result, Success):
        return on_success(result)
    if isinstance(result, NoSolution):
        return on_no_solution(result)
    if isinstance(result, SolverError):
        return on_error(result)
    raise TypeError(f"Not a solver result: {result!r}")
