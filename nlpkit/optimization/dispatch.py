"""
Solver dispatch.

:class:`SolverDispatch` hands a :class:`~nlpkit.problem.Problem` to a backend
selected by identifier. Configuration problems are raised before any solving
starts (:class:`~nlpkit.errors.UnknownBackend`,
:class:`~nlpkit.errors.CapabilityMismatch`); whatever the backend returns
afterwards is passed back unchanged. There are no retries: callers
reconfigure and call again.
"""

from __future__ import annotations

from enum import Enum
from typing import Any, List, Optional, Tuple

from nlpkit.logging import get_logger
from nlpkit.optimization.registry import BackendRegistry, default_registry
from nlpkit.optimization.result import RESULT_TYPES, ResultKind, SolverResult
from nlpkit.problem import Problem

log = get_logger(__name__)


class DispatchState(Enum):
    """State of the most recent solve call."""

    CONFIGURED = "configured"
    DISPATCHED = "dispatched"
    SUCCEEDED = "succeeded"
    SUCCEEDED_WITH_WARNINGS = "succeeded_with_warnings"
    NO_SOLUTION_FOUND = "no_solution_found"
    ERRORED = "errored"


_FINAL_STATES = {
    ResultKind.SUCCESS: DispatchState.SUCCEEDED,
    ResultKind.SUCCESS_WITH_WARNINGS: DispatchState.SUCCEEDED_WITH_WARNINGS,
    ResultKind.NO_SOLUTION: DispatchState.NO_SOLUTION_FOUND,
    ResultKind.ERROR: DispatchState.ERRORED,
}


class SolverDispatch:
    """Dispatch problems to registered backends and keep a result history."""

    def __init__(self, registry: Optional[BackendRegistry] = None):
        self.registry = registry if registry is not None else default_registry()
        self.state: Optional[DispatchState] = None
        self._history: List[Tuple[str, SolverResult]] = []

    def solve(self, problem: Problem, backend_id: str, backend_config: Any = None) -> SolverResult:
        """
        Solve *problem* with the backend registered as *backend_id*.

        Args:
            problem: Problem to solve; it is not modified.
            backend_id: Registered backend identifier or alias.
            backend_config: Backend options (dataclass, dict or None).

        Returns:
            One of the solver result variants.

        Raises:
            UnknownBackend: *backend_id* is not registered.
            CapabilityMismatch: the problem does not meet the backend's
                requirements.
        """
        self.state = None
        backend = self.registry.create(backend_id, backend_config)
        backend.check_problem(problem)
        self._transition(DispatchState.CONFIGURED)

        for index, value, interval in problem.starting_point_violations():
            log.warning(
                "Dispatching with x0[%d] = %g outside argument bounds %s", index, value, interval
            )

        self._transition(DispatchState.DISPATCHED)
        log.info(f"Dispatching {problem!r} to backend '{backend.name}'")
        result = backend.solve(problem)
        if not isinstance(result, RESULT_TYPES):
            raise TypeError(
                f"Backend '{backend.name}' returned {type(result).__name__}, not a solver result"
            )

        self._transition(_FINAL_STATES[result.kind])
        self._history.append((backend.name, result))
        log.info(f"Backend '{backend.name}' finished: {result.kind.value}")
        return result

    def _transition(self, state: DispatchState) -> None:
        log.debug(f"Dispatch state: {self.state.value if self.state else 'none'} -> {state.value}")
        self.state = state

    def get_history(self) -> List[Tuple[str, SolverResult]]:
        return self._history.copy()

    def clear_history(self) -> None:
        self._history.clear()


def solve(
    problem: Problem,
    backend_id: str,
    backend_config: Any = None,
    *,
    registry: Optional[BackendRegistry] = None,
) -> SolverResult:
    """Solve *problem* with a fresh :class:`SolverDispatch`."""
    return SolverDispatch(registry).solve(problem, backend_id, backend_config)
