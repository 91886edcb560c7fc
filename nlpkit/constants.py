"""Constants used across nlpkit.

Numerical tolerances are plain floats. Solver related settings may be
overridden from the environment so deployments can tune them without code
changes.
"""

from __future__ import annotations

import os


def _env_float(name: str, default: float) -> float:
    value = os.getenv(name)
    if value is None or not value.strip():
        return default
    return float(value)


# =============================================================================
# Numerical Tolerances
# =============================================================================

# Maximum bound/constraint violation accepted for a solution to be feasible
FEASIBILITY_TOL: float = _env_float("NLPKIT_FEASIBILITY_TOL", 1e-6)

# Step used by central finite differences
FINITE_DIFFERENCE_EPS: float = 1e-6

# Relative tolerance used when comparing analytic and numeric gradients
GRADIENT_CHECK_RTOL: float = 1e-4

# Symmetry tolerance for Hessian checks
SYMMETRY_TOL: float = 1e-10


# =============================================================================
# Solver Configuration
# =============================================================================

# MUMPS ships with the CasADi wheels; HSL solvers need a separate library
IPOPT_LINEAR_SOLVER: str = os.getenv("NLPKIT_IPOPT_LINEAR_SOLVER", "mumps")

# Optional ipopt.opt file passed through to IPOPT
IPOPT_OPT_PATH: str | None = os.getenv("NLPKIT_IPOPT_OPT_FILE") or None
