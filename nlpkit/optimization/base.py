"""
Solver backend contract.

A backend wraps one external optimization algorithm. It declares the
capability tag it needs from every function of a problem and whether it
accepts general constraints; :meth:`SolverBackend.check_problem` enforces
both before any solving starts. :meth:`SolverBackend.solve` never raises for
solve-time failures: exceptions escaping the algorithm (user callbacks
included) are logged and returned as :class:`SolverError`.
"""

from __future__ import annotations

import dataclasses
import time
from abc import ABC, abstractmethod
from typing import Any, Dict, Optional

import numpy as np

from nlpkit.errors import CapabilityMismatch
from nlpkit.functions.base import Capability, describe_capability, require_capability
from nlpkit.logging import get_logger
from nlpkit.optimization.result import (
    NoSolution,
    SolverError,
    SolverResult,
    Success,
    SuccessWithWarnings,
)
from nlpkit.problem import Problem

log = get_logger(__name__)


def coerce_options(options_type: Optional[type], config: Any) -> Any:
    """Turn a backend configuration into an options dataclass instance.

    ``config`` may be None (defaults), an instance of *options_type* or a dict
    of its fields. Unknown dict keys raise ``TypeError``.
    """
    if options_type is None:
        return config
    if config is None:
        return options_type()
    if isinstance(config, options_type):
        return dataclasses.replace(config)
    if isinstance(config, dict):
        return options_type(**config)
    raise TypeError(
        f"Expected {options_type.__name__}, dict or None as backend config, "
        f"got {type(config).__name__}"
    )


class SolverBackend(ABC):
    """Base class for solver backends.

    Subclasses set ``name``, ``required_capability``, ``supports_constraints``
    and ``options_type`` and implement :meth:`_solve`. Options dataclasses
    must provide a ``feasibility_tol`` field.
    """

    name: str = "backend"
    required_capability: Capability = Capability.DIFFERENTIABLE
    supports_constraints: bool = True
    options_type: Optional[type] = None

    def __init__(self, options: Any = None):
        self.options = coerce_options(self.options_type, options)

    @property
    def feasibility_tol(self) -> float:
        return float(self.options.feasibility_tol)

    def check_problem(self, problem: Problem) -> None:
        """Raise :class:`CapabilityMismatch` if *problem* cannot be handled."""
        if problem.output_size != 1:
            raise CapabilityMismatch(
                f"Backend '{self.name}' minimizes scalar costs; "
                f"cost '{problem.cost.description}' has output size {problem.output_size}"
            )
        if problem.constraints and not self.supports_constraints:
            raise CapabilityMismatch(
                f"Backend '{self.name}' handles argument bounds only; "
                f"problem has {len(problem.constraints)} constraint(s)"
            )
        for role, function in problem.functions():
            require_capability(function, self.required_capability, role)

    def solve(self, problem: Problem) -> SolverResult:
        """Run the backend on *problem* and return a result variant."""
        start = time.time()
        try:
            return self._solve(problem)
        except Exception as e:
            elapsed = time.time() - start
            log.error(f"Backend '{self.name}' failed after {elapsed:.3f}s: {e!s}", exc_info=True)
            return SolverError(
                message=f"{type(e).__name__}: {e!s}",
                metadata={"backend": self.name, "solve_time": elapsed},
            )

    @abstractmethod
    def _solve(self, problem: Problem) -> SolverResult:
        """Solve *problem*; may raise, :meth:`solve` converts exceptions."""

    def _classify(
        self,
        problem: Problem,
        x: Any,
        *,
        converged: bool = False,
        acceptable: bool = False,
        limit_reached: bool = False,
        infeasible: bool = False,
        message: str = "",
        multipliers: Optional[np.ndarray] = None,
        iterations: Optional[int] = None,
        solve_time: Optional[float] = None,
        metadata: Optional[Dict[str, Any]] = None,
    ) -> SolverResult:
        """Translate a raw backend outcome into a result variant.

        - converged and feasible: Success
        - acceptable or limit reached, and feasible: SuccessWithWarnings
        - infeasibility reported, or a candidate that violates bounds: NoSolution
        - anything else: SolverError carrying the last iterate
        """
        metadata = dict(metadata or {})
        metadata.setdefault("backend", self.name)

        if infeasible:
            return NoSolution(message=message or "Problem is infeasible", metadata=metadata)

        x = np.array(x, dtype=float).reshape(-1)
        violation = problem.max_violation(x)
        metadata["max_violation"] = violation
        state = dict(
            x=x,
            value=problem.evaluate_cost(x),
            constraints=problem.evaluate_constraints(x) if problem.constraints else None,
            multipliers=multipliers,
            iterations=iterations,
            solve_time=solve_time,
            metadata=metadata,
        )
        feasible = violation <= self.feasibility_tol

        if converged or acceptable or limit_reached:
            if not feasible:
                return NoSolution(
                    message=(
                        f"{message}; max violation {violation:.3e} exceeds "
                        f"tolerance {self.feasibility_tol:.1e}"
                    ),
                    metadata=metadata,
                )
            if converged:
                return Success(**state)
            return SuccessWithWarnings(warnings=(message,), **state)

        return SolverError(message=message or "Solver failed", last_state=Success(**state), metadata=metadata)

    def __repr__(self) -> str:
        return (
            f"<{type(self).__name__} '{self.name}' "
            f"requires {describe_capability(self.required_capability)}>"
        )
