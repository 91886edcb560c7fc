"""
Finite-difference derivatives and gradient checking.

Central differences are used throughout: each gradient costs ``2 n``
function evaluations and is accurate to O(eps^2). This is good enough to
validate hand-written gradients and to make value-only functions usable by
gradient-based backends, but analytic derivatives should be preferred for
real problems.
"""

from __future__ import annotations

from typing import Any

import numpy as np

from nlpkit.constants import FINITE_DIFFERENCE_EPS, GRADIENT_CHECK_RTOL
from nlpkit.functions.base import (
    Capability,
    DifferentiableFunction,
    Function,
    require_capability,
)
from nlpkit.logging import get_logger

log = get_logger(__name__)


def finite_difference_gradient(
    function: Function,
    x: Any,
    function_id: int = 0,
    epsilon: float = FINITE_DIFFERENCE_EPS,
) -> np.ndarray:
    """Central-difference approximation of the gradient of one output."""
    x = np.array(x, dtype=float).reshape(-1)
    grad = np.zeros(function.input_size)
    for i in range(function.input_size):
        step = np.zeros_like(x)
        # Relative step keeps truncation error balanced for large |x_i|
        step[i] = epsilon * max(1.0, abs(x[i]))
        f_plus = function.evaluate(x + step)[function_id]
        f_minus = function.evaluate(x - step)[function_id]
        grad[i] = (f_plus - f_minus) / (2.0 * step[i])
    return grad


def max_gradient_error(
    function: DifferentiableFunction,
    x: Any,
    function_id: int = 0,
    epsilon: float = FINITE_DIFFERENCE_EPS,
) -> float:
    """Return the largest scaled difference between analytic and numeric gradients.

    Each component error is divided by ``max(1, |analytic|)`` so the value can
    be compared against a relative tolerance.
    """
    require_capability(function, Capability.GRADIENT, "Checked function")
    analytic = function.gradient(x, function_id)
    numeric = finite_difference_gradient(function, x, function_id, epsilon)
    scale = np.maximum(1.0, np.abs(analytic))
    return float(np.max(np.abs(analytic - numeric) / scale))


def check_gradient(
    function: DifferentiableFunction,
    x: Any,
    function_id: int = 0,
    rtol: float = GRADIENT_CHECK_RTOL,
    epsilon: float = FINITE_DIFFERENCE_EPS,
) -> bool:
    """Return True if the analytic gradient matches central differences."""
    error = max_gradient_error(function, x, function_id, epsilon)
    if error > rtol:
        log.warning(
            "Gradient check failed for '%s' (output %d): error %.3e > %.1e",
            function.description,
            function_id,
            error,
            rtol,
        )
        return False
    return True


class FiniteDifferenceGradient(DifferentiableFunction):
    """Differentiable wrapper computing gradients of *function* numerically."""

    def __init__(self, function: Function, epsilon: float = FINITE_DIFFERENCE_EPS):
        super().__init__(
            function.input_size,
            function.output_size,
            f"{function.description} (finite differences)",
        )
        if epsilon <= 0.0:
            raise ValueError(f"epsilon must be positive, got {epsilon}")
        self._function = function
        self._epsilon = float(epsilon)

    @property
    def wrapped(self) -> Function:
        return self._function

    def _compute(self, x: np.ndarray) -> np.ndarray:
        return self._function.evaluate(x)

    def _gradient(self, x: np.ndarray, function_id: int) -> np.ndarray:
        return finite_difference_gradient(self._function, x, function_id, self._epsilon)
