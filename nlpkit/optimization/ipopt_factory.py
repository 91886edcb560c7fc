"""
Centralized IPOPT solver factory.

All IPOPT solvers are created here so option handling (linear solver choice,
option file, output suppression) stays in one place.
"""

from __future__ import annotations

from typing import Any

import casadi as ca

from nlpkit.constants import IPOPT_LINEAR_SOLVER
from nlpkit.logging import get_logger
from nlpkit.optimization.ipopt_options import IPOPTOptions, build_casadi_options

log = get_logger(__name__)


def ipopt_available() -> bool:
    """Return True if the CasADi build ships the ipopt plugin."""
    try:
        return bool(ca.has_nlpsol("ipopt"))
    except Exception as e:  # pragma: no cover - depends on CasADi build
        log.debug(f"IPOPT availability check failed: {e}")
        return False


def create_ipopt_solver(name: str, nlp: dict[str, Any], options: IPOPTOptions | None = None) -> Any:
    """
    Create an IPOPT solver through CasADi.

    Args:
        name: Name for the solver instance
        nlp: NLP definition with keys ``x``, ``f`` and optionally ``g``
        options: IPOPT options; defaults when omitted

    Returns:
        CasADi ``nlpsol`` function
    """
    opts = build_casadi_options(options or IPOPTOptions())
    linear_solver = opts.get("ipopt.linear_solver")
    if linear_solver != IPOPT_LINEAR_SOLVER:
        log.info(
            "Using IPOPT linear solver %s (default %s)", linear_solver, IPOPT_LINEAR_SOLVER
        )

    log.debug(f"Creating solver '{name}' with linear solver: {linear_solver}")
    return ca.nlpsol(name, "ipopt", nlp, opts)
