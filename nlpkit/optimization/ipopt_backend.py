"""
IPOPT backend through CasADi ``nlpsol``.

The NLP is assembled symbolically: every function of the problem must carry
the SYMBOLIC capability and re-emit its expression on the decision variable,
so IPOPT gets exact first and second derivatives from CasADi. Constraint
multipliers (``lam_g``) are returned in constraint order.
"""

from __future__ import annotations

import time
from typing import Any, Dict

import casadi as ca
import numpy as np

from nlpkit.functions.base import Capability
from nlpkit.logging import get_logger
from nlpkit.optimization.base import SolverBackend
from nlpkit.optimization.ipopt_factory import create_ipopt_solver
from nlpkit.optimization.ipopt_options import IPOPTOptions
from nlpkit.optimization.result import SolverResult
from nlpkit.problem import Problem

log = get_logger(__name__)

# IPOPT return statuses as reported in ``solver.stats()["return_status"]``
_CONVERGED = {"Solve_Succeeded"}
_ACCEPTABLE = {"Solved_To_Acceptable_Level", "Feasible_Point_Found"}
_LIMITS = {
    "Maximum_Iterations_Exceeded",
    "Maximum_CpuTime_Exceeded",
    "Maximum_WallTime_Exceeded",
}
_INFEASIBLE = {"Infeasible_Problem_Detected"}


class IpoptBackend(SolverBackend):
    """Interior-point solver IPOPT with exact symbolic Hessians."""

    name = "ipopt"
    required_capability = Capability.TWICE_DIFFERENTIABLE | Capability.SYMBOLIC
    options_type = IPOPTOptions

    def build_nlp(self, problem: Problem) -> Dict[str, Any]:
        """Return the CasADi NLP dict ``{"x", "f"[, "g"]}`` for *problem*."""
        x = ca.SX.sym("x", problem.input_size)
        nlp = {"x": x, "f": problem.cost.expression(x)}
        if problem.constraints:
            nlp["g"] = ca.vertcat(*[c.function.expression(x) for c in problem.constraints])
        return nlp

    def _solve(self, problem: Problem) -> SolverResult:
        solver = create_ipopt_solver("nlpkit_ipopt", self.build_nlp(problem), self.options)

        lbx, ubx = problem.argument_bound_arrays()
        kwargs: Dict[str, Any] = {"x0": problem.initial_guess(), "lbx": lbx, "ubx": ubx}
        if problem.constraints:
            kwargs["lbg"], kwargs["ubg"] = problem.constraint_bounds()

        log.info(
            f"Calling IPOPT: n_vars={problem.input_size}, "
            f"n_constraints={problem.constraint_count}, max_iter={self.options.max_iter}"
        )
        start = time.time()
        sol = solver(**kwargs)
        elapsed = time.time() - start

        stats = solver.stats()
        status = str(stats.get("return_status", "unknown"))
        iterations = int(stats.get("iter_count", 0))
        log.info(f"IPOPT finished in {elapsed:.3f}s: status={status}, iterations={iterations}")

        multipliers = None
        if problem.constraints:
            multipliers = np.asarray(sol["lam_g"].full()).reshape(-1)

        return self._classify(
            problem,
            np.asarray(sol["x"].full()).reshape(-1),
            converged=status in _CONVERGED,
            acceptable=status in _ACCEPTABLE,
            limit_reached=status in _LIMITS,
            infeasible=status in _INFEASIBLE,
            message=status,
            multipliers=multipliers,
            iterations=iterations,
            solve_time=elapsed,
            metadata={"return_status": status, "success": bool(stats.get("success", False))},
        )
