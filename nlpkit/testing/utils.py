"""Assertion helpers shared by the test suite."""

from __future__ import annotations

from typing import Any

import numpy as np

from nlpkit.constants import SYMMETRY_TOL
from nlpkit.functions.base import TwiceDifferentiableFunction
from nlpkit.optimization.result import SolverResult, Success
from nlpkit.problem import Problem


def assert_hessian_symmetric(
    function: TwiceDifferentiableFunction, x: Any, tol: float = SYMMETRY_TOL
) -> None:
    """Assert every output Hessian of *function* is symmetric at *x*."""
    for i in range(function.output_size):
        h = function.hessian(x, i)
        asym = float(np.max(np.abs(h - h.T)))
        scale = max(1.0, float(np.max(np.abs(h))))
        assert asym <= tol * scale, (
            f"Hessian {i} of '{function.description}' is not symmetric: "
            f"max |H - H^T| = {asym:.2e}"
        )


def assert_solver_success(result: SolverResult, problem: Problem, tol: float = 1e-5) -> None:
    """Standard assertions for a successful optimization run."""
    assert isinstance(result, Success), f"Solver did not succeed: {result.summary()}"
    violation = problem.max_violation(result.x)
    assert violation < tol, f"Constraint violation {violation} > {tol}"
