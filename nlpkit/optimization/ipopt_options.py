"""Central facility for constructing Ipopt/CasADi solver options.

:class:`IPOPTOptions` is the configuration accepted by the ``ipopt`` backend.
:func:`build_casadi_options` converts it into the dictionary expected by
CasADi's ``nlpsol``. Only explicitly mapped fields become ``ipopt.*`` keys;
anything else must go through ``extra``.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import Any, Dict, Final

from nlpkit.constants import FEASIBILITY_TOL, IPOPT_LINEAR_SOLVER, IPOPT_OPT_PATH
from nlpkit.logging import get_logger

log = get_logger(__name__)


@dataclass
class IPOPTOptions:
    """IPOPT solver options."""

    # Basic solver options
    max_iter: int = 3000
    max_cpu_time: float = 3600.0
    tol: float = 1e-8
    acceptable_tol: float = 1e-6
    acceptable_iter: int = 15
    constr_viol_tol: float = 1e-8

    linear_solver: str = IPOPT_LINEAR_SOLVER

    # Barrier parameter options
    mu_strategy: str = "adaptive"  # "monotone", "adaptive"

    # "exact" uses the symbolic Hessian of the Lagrangian
    hessian_approximation: str = "exact"  # "exact", "limited-memory"

    # Output options
    print_level: int = 0
    print_time: bool = False

    # Acceptance threshold for the returned point (bounds and constraints)
    feasibility_tol: float = FEASIBILITY_TOL

    # Additional ``ipopt.*`` options, keys without the prefix
    extra: Dict[str, Any] = field(default_factory=dict)


_DIRECT_MAP: Final = {
    "max_iter": "ipopt.max_iter",
    "max_cpu_time": "ipopt.max_cpu_time",
    "tol": "ipopt.tol",
    "acceptable_tol": "ipopt.acceptable_tol",
    "acceptable_iter": "ipopt.acceptable_iter",
    "constr_viol_tol": "ipopt.constr_viol_tol",
    "linear_solver": "ipopt.linear_solver",
    "mu_strategy": "ipopt.mu_strategy",
    "hessian_approximation": "ipopt.hessian_approximation",
    "print_level": "ipopt.print_level",
}


def build_casadi_options(ipopt_options: IPOPTOptions) -> Dict[str, Any]:
    """Return the CasADi ``nlpsol`` options dict for *ipopt_options*."""
    opts: Dict[str, Any] = {}

    data = asdict(ipopt_options)
    for name, key in _DIRECT_MAP.items():
        if data.get(name) is not None:
            opts[key] = data[name]

    # Banner and timing output are noise for library use
    opts["ipopt.sb"] = "yes"
    opts["print_time"] = bool(ipopt_options.print_time)
    # Failed solves are reported through the return status, not exceptions
    opts["error_on_fail"] = False

    for key, value in ipopt_options.extra.items():
        opts[f"ipopt.{key}"] = value

    if IPOPT_OPT_PATH:
        opts.setdefault("ipopt.option_file_name", IPOPT_OPT_PATH)

    return opts
