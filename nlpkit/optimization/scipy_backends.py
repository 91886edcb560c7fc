"""
Backends built on ``scipy.optimize.minimize``.

- ``scipy-slsqp``: sequential least squares programming; gradients only.
- ``scipy-trust-constr``: trust-region interior point with exact Hessians of
  the cost and of every constraint.
- ``scipy-lbfgsb``: limited-memory BFGS with argument bounds only.

Constraint scales are applied to the residuals handed to SciPy, so a
constraint with scale ``s`` contributes ``s * (g(x) - bound)``.
"""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional, Tuple

import numpy as np
from scipy.optimize import Bounds, NonlinearConstraint, minimize

from nlpkit.constants import FEASIBILITY_TOL
from nlpkit.functions.base import Capability
from nlpkit.logging import get_logger
from nlpkit.optimization.base import SolverBackend
from nlpkit.optimization.result import SolverResult
from nlpkit.problem import Constraint, Problem

log = get_logger(__name__)


@dataclass
class ScipyOptions:
    """Options shared by the SciPy backends."""

    max_iter: int = 1000
    # ftol for SLSQP and L-BFGS-B, gtol for trust-constr
    tol: float = 1e-8
    # Step tolerance used by trust-constr
    xtol: float = 1e-8
    feasibility_tol: float = FEASIBILITY_TOL
    disp: bool = False
    # Passed verbatim in the ``options`` dict of ``scipy.optimize.minimize``
    extra: Dict[str, Any] = field(default_factory=dict)


# SLSQP exit modes
_SLSQP_SUCCESS = 0
_SLSQP_INCOMPATIBLE = 4
_SLSQP_ITERATION_LIMIT = 9

# trust-constr statuses
_TRUST_MAX_ITER = 0
_TRUST_CONVERGED = (1, 2)


def _bounds(problem: Problem) -> Optional[Bounds]:
    lower, upper = problem.argument_bound_arrays()
    if np.all(np.isneginf(lower)) and np.all(np.isposinf(upper)):
        return None
    return Bounds(lower, upper)


def _cost_callbacks(problem: Problem) -> Tuple[Callable, Callable]:
    cost = problem.cost

    def fun(x: np.ndarray) -> float:
        return float(cost.evaluate(x)[0])

    def jac(x: np.ndarray) -> np.ndarray:
        return cost.gradient(x, 0)

    return fun, jac


def _constraint_arrays(constraint: Constraint) -> Tuple[np.ndarray, np.ndarray, np.ndarray]:
    lower = np.array([b.lower for b in constraint.bounds])
    upper = np.array([b.upper for b in constraint.bounds])
    scales = np.array(constraint.scales)
    return lower, upper, scales


def _residual(constraint: Constraint, rows: np.ndarray, offset: np.ndarray, sign: float,
              scales: np.ndarray) -> Tuple[Callable, Callable]:
    function = constraint.function
    weight = sign * scales

    def fun(x: np.ndarray) -> np.ndarray:
        return weight * (function.evaluate(x)[rows] - offset)

    def jac(x: np.ndarray) -> np.ndarray:
        return weight[:, None] * function.jacobian(x)[rows]

    return fun, jac


def slsqp_constraints(problem: Problem) -> List[Dict[str, Any]]:
    """Translate problem constraints into SLSQP ``eq``/``ineq`` dicts.

    Equality rows become one ``eq`` entry; each finite side of a
    two-sided interval becomes one ``ineq`` entry.
    """
    out: List[Dict[str, Any]] = []
    for constraint in problem.constraints:
        lower, upper, scales = _constraint_arrays(constraint)
        equality = lower == upper
        groups = (
            ("eq", np.flatnonzero(equality), lower, 1.0),
            ("ineq", np.flatnonzero(~equality & np.isfinite(lower)), lower, 1.0),
            ("ineq", np.flatnonzero(~equality & np.isfinite(upper)), upper, -1.0),
        )
        for kind, rows, bound, sign in groups:
            if rows.size == 0:
                continue
            fun, jac = _residual(constraint, rows, bound[rows], sign, scales[rows])
            out.append({"type": kind, "fun": fun, "jac": jac})
    return out


def _nonlinear_constraint(constraint: Constraint) -> NonlinearConstraint:
    function = constraint.function
    lower, upper, scales = _constraint_arrays(constraint)

    def fun(x: np.ndarray) -> np.ndarray:
        return scales * function.evaluate(x)

    def jac(x: np.ndarray) -> np.ndarray:
        return scales[:, None] * function.jacobian(x)

    def hess(x: np.ndarray, v: np.ndarray) -> np.ndarray:
        weights = scales * np.asarray(v, dtype=float)
        return sum(w * function.hessian(x, i) for i, w in enumerate(weights))

    return NonlinearConstraint(fun, scales * lower, scales * upper, jac=jac, hess=hess)


class _ScipyBackend(SolverBackend):
    options_type = ScipyOptions
    method = ""

    def _minimize_options(self) -> Dict[str, Any]:
        raise NotImplementedError

    def _minimize(self, problem: Problem, **kwargs: Any) -> Tuple[Any, float]:
        fun, jac = _cost_callbacks(problem)
        x0 = problem.initial_guess()
        options = self._minimize_options()
        options.update(self.options.extra)
        log.debug(f"Calling scipy.optimize.minimize(method='{self.method}') with n={x0.size}")
        start = time.time()
        res = minimize(
            fun,
            x0,
            method=self.method,
            jac=jac,
            bounds=_bounds(problem),
            options=options,
            **kwargs,
        )
        elapsed = time.time() - start
        log.info(
            f"{self.method} finished in {elapsed:.3f}s: status={res.status}, "
            f"nit={getattr(res, 'nit', None)}, message={res.message}"
        )
        return res, elapsed

    @staticmethod
    def _metadata(res: Any) -> Dict[str, Any]:
        return {
            "status": int(res.status),
            "message": str(res.message),
            "nfev": int(getattr(res, "nfev", 0)),
        }


class SLSQPBackend(_ScipyBackend):
    """Sequential least squares programming (gradient-based SQP)."""

    name = "scipy-slsqp"
    method = "SLSQP"
    required_capability = Capability.DIFFERENTIABLE

    def _minimize_options(self) -> Dict[str, Any]:
        return {"maxiter": self.options.max_iter, "ftol": self.options.tol, "disp": self.options.disp}

    def _solve(self, problem: Problem) -> SolverResult:
        res, elapsed = self._minimize(problem, constraints=slsqp_constraints(problem))
        status = int(res.status)
        return self._classify(
            problem,
            res.x,
            converged=status == _SLSQP_SUCCESS,
            limit_reached=status == _SLSQP_ITERATION_LIMIT,
            infeasible=status == _SLSQP_INCOMPATIBLE,
            message=str(res.message),
            iterations=int(getattr(res, "nit", 0)),
            solve_time=elapsed,
            metadata=self._metadata(res),
        )


class TrustConstrBackend(_ScipyBackend):
    """Trust-region interior point using exact Hessians."""

    name = "scipy-trust-constr"
    method = "trust-constr"
    required_capability = Capability.TWICE_DIFFERENTIABLE

    def _minimize_options(self) -> Dict[str, Any]:
        return {
            "maxiter": self.options.max_iter,
            "gtol": self.options.tol,
            "xtol": self.options.xtol,
            "disp": self.options.disp,
        }

    def _solve(self, problem: Problem) -> SolverResult:
        cost = problem.cost
        constraints = [_nonlinear_constraint(c) for c in problem.constraints]
        res, elapsed = self._minimize(
            problem,
            hess=lambda x: cost.hessian(x, 0),
            constraints=constraints,
        )
        multipliers = None
        if constraints:
            # Bound multipliers, when present, follow the constraint entries.
            # SciPy reports duals of the scaled rows s * g; s * v is the dual of g.
            duals = [
                np.atleast_1d(v) * np.array(c.scales)
                for v, c in zip(res.v[: len(constraints)], problem.constraints)
            ]
            multipliers = np.concatenate(duals)
        status = int(res.status)
        return self._classify(
            problem,
            res.x,
            converged=status in _TRUST_CONVERGED,
            limit_reached=status == _TRUST_MAX_ITER,
            message=str(res.message),
            multipliers=multipliers,
            iterations=int(getattr(res, "nit", 0)),
            solve_time=elapsed,
            metadata=self._metadata(res),
        )


class LBFGSBBackend(_ScipyBackend):
    """Limited-memory BFGS for problems with argument bounds only."""

    name = "scipy-lbfgsb"
    method = "L-BFGS-B"
    required_capability = Capability.DIFFERENTIABLE
    supports_constraints = False

    def _minimize_options(self) -> Dict[str, Any]:
        return {"maxiter": self.options.max_iter, "ftol": self.options.tol}

    def _solve(self, problem: Problem) -> SolverResult:
        res, elapsed = self._minimize(problem)
        return self._classify(
            problem,
            res.x,
            converged=bool(res.success),
            # status 1: iteration or evaluation limit
            limit_reached=int(res.status) == 1,
            message=str(res.message),
            iterations=int(getattr(res, "nit", 0)),
            solve_time=elapsed,
            metadata=self._metadata(res),
        )
