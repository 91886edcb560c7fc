"""
Functions defined by CasADi expressions.

The expression is built once on an ``SX`` symbol; gradients, Jacobian and
per-output Hessians are derived with CasADi's algorithmic differentiation and
compiled into ``casadi.Function`` objects. Backends that assemble their own
NLP (IPOPT through ``nlpsol``) re-emit the expression on their decision
variable with :meth:`SymbolicFunction.expression`.

Example
-------
>>> f = SymbolicFunction(2, lambda x: (1 - x[0]) ** 2 + 100 * (x[1] - x[0] ** 2) ** 2,
...                      description="rosenbrock")
>>> grad = f.gradient([1.0, 1.0])
"""

from __future__ import annotations

from typing import Any, Callable

import casadi as ca
import numpy as np

from nlpkit.functions.base import Capability, TwiceDifferentiableFunction

ExpressionBuilder = Callable[[Any], Any]


def _as_column(expr: Any) -> Any:
    if isinstance(expr, (list, tuple)):
        expr = ca.vertcat(*expr)
    return ca.vec(ca.SX(expr))


class SymbolicFunction(TwiceDifferentiableFunction):
    """Twice-differentiable function generated from a CasADi expression."""

    capabilities = Capability.TWICE_DIFFERENTIABLE | Capability.SYMBOLIC

    def __init__(self, input_size: int, build: ExpressionBuilder, description: str = ""):
        x = ca.SX.sym("x", int(input_size))
        expr = _as_column(build(x))
        super().__init__(input_size, expr.numel(), description)

        name = "nlpkit_symbolic"
        hessians = [ca.hessian(expr[i], x)[0] for i in range(self.output_size)]
        self._value_fn = ca.Function(name, [x], [expr])
        self._jacobian_fn = ca.Function(f"{name}_jac", [x], [ca.jacobian(expr, x)])
        self._hessian_fn = ca.Function(f"{name}_hess", [x], hessians)

    def expression(self, x: Any) -> Any:
        """Return the symbolic value at the CasADi symbol *x*."""
        return self._value_fn.call([x])[0]

    def _compute(self, x: np.ndarray) -> np.ndarray:
        return self._value_fn.call([x])[0].full().reshape(-1)

    def _jacobian(self, x: np.ndarray) -> np.ndarray:
        return self._jacobian_fn.call([x])[0].full()

    def _gradient(self, x: np.ndarray, function_id: int) -> np.ndarray:
        return self._jacobian(x)[function_id]

    def _hessian(self, x: np.ndarray, function_id: int) -> np.ndarray:
        return self._hessian_fn.call([x])[function_id].full()
