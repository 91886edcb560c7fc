"""
Base function classes and capability tags.

A function maps a real vector of fixed size ``input_size`` to a real vector
of fixed size ``output_size``. What a function can compute beyond its value is
declared through a :class:`Capability` tag rather than inferred from the
class hierarchy, so problems and solver backends compare tags when checking
compatibility.

The classes below provide the argument checking shared by every
implementation. Subclasses implement the protected ``_compute``,
``_gradient`` and ``_hessian`` hooks and receive arguments that are already
validated 1-D float arrays.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from enum import Flag
from typing import Any

import numpy as np

from nlpkit.errors import CapabilityMismatch, DimensionMismatch, ShapeMismatch


class Capability(Flag):
    """What a function is able to evaluate."""

    NONE = 0
    VALUE = 1
    GRADIENT = 2
    HESSIAN = 4
    # Function can emit a CasADi expression of itself
    SYMBOLIC = 8

    DIFFERENTIABLE = VALUE | GRADIENT
    TWICE_DIFFERENTIABLE = VALUE | GRADIENT | HESSIAN


def describe_capability(capability: Capability) -> str:
    """Return a readable ``A|B|C`` rendering of a capability tag."""
    names = [
        member.name
        for member in (
            Capability.VALUE,
            Capability.GRADIENT,
            Capability.HESSIAN,
            Capability.SYMBOLIC,
        )
        if member in capability
    ]
    return "|".join(names) if names else "NONE"


def require_capability(function: "Function", required: Capability, role: str) -> None:
    """Raise :class:`CapabilityMismatch` if *function* lacks *required*."""
    if not function.supports(required):
        missing = required & ~function.capabilities
        raise CapabilityMismatch(
            f"{role} '{function.description}' provides "
            f"{describe_capability(function.capabilities)} but "
            f"{describe_capability(required)} is required "
            f"(missing {describe_capability(missing)})"
        )


class Function(ABC):
    """
    Evaluable mapping from R^input_size to R^output_size.

    Instances are immutable after construction and may be shared between
    several problems or constraints.
    """

    capabilities: Capability = Capability.VALUE

    def __init__(self, input_size: int, output_size: int, description: str = ""):
        if int(input_size) < 1:
            raise ValueError(f"input_size must be >= 1, got {input_size}")
        if int(output_size) < 1:
            raise ValueError(f"output_size must be >= 1, got {output_size}")
        self._input_size = int(input_size)
        self._output_size = int(output_size)
        self._description = description or type(self).__name__

    @property
    def input_size(self) -> int:
        return self._input_size

    @property
    def output_size(self) -> int:
        return self._output_size

    @property
    def description(self) -> str:
        return self._description

    def supports(self, required: Capability) -> bool:
        """Return True if this function's tag includes *required*."""
        return (self.capabilities & required) == required

    def evaluate(self, x: Any) -> np.ndarray:
        """Evaluate the function at *x* and return a vector of output_size."""
        arg = self._check_argument(x)
        result = np.asarray(self._compute(arg), dtype=float).reshape(-1)
        if result.size != self._output_size:
            raise ShapeMismatch(
                f"'{self.description}' returned {result.size} values, "
                f"expected {self._output_size}"
            )
        return result

    def __call__(self, x: Any) -> np.ndarray:
        return self.evaluate(x)

    @abstractmethod
    def _compute(self, x: np.ndarray) -> Any:
        """Return the function value at a validated argument."""

    def _check_argument(self, x: Any) -> np.ndarray:
        arg = np.array(x, dtype=float)
        # Column and row vectors are accepted, matrices are not
        if sum(d != 1 for d in arg.shape) > 1:
            raise DimensionMismatch(self._input_size, arg.size, f"argument of shape {arg.shape}")
        arg = arg.reshape(-1)
        if arg.size != self._input_size:
            raise DimensionMismatch(self._input_size, arg.size)
        return arg

    def _check_function_id(self, function_id: int) -> int:
        if not 0 <= function_id < self._output_size:
            raise IndexError(
                f"function_id {function_id} out of range for output_size {self._output_size}"
            )
        return int(function_id)

    def __repr__(self) -> str:
        return (
            f"<{type(self).__name__} '{self.description}' "
            f"R^{self._input_size} -> R^{self._output_size} "
            f"[{describe_capability(self.capabilities)}]>"
        )


class DifferentiableFunction(Function):
    """Function with a gradient for each output component."""

    capabilities = Capability.DIFFERENTIABLE

    def gradient(self, x: Any, function_id: int = 0) -> np.ndarray:
        """Return the gradient of output *function_id* (a Jacobian row)."""
        arg = self._check_argument(x)
        function_id = self._check_function_id(function_id)
        grad = np.asarray(self._gradient(arg, function_id), dtype=float).reshape(-1)
        if grad.size != self._input_size:
            raise ShapeMismatch(
                f"gradient of '{self.description}' has {grad.size} entries, "
                f"expected {self._input_size}"
            )
        return grad

    def jacobian(self, x: Any) -> np.ndarray:
        """Return the ``output_size x input_size`` Jacobian matrix."""
        arg = self._check_argument(x)
        jac = np.asarray(self._jacobian(arg), dtype=float)
        expected = (self._output_size, self._input_size)
        if jac.size != expected[0] * expected[1]:
            raise ShapeMismatch(
                f"jacobian of '{self.description}' has {jac.size} entries, expected {expected}"
            )
        return jac.reshape(expected)

    @abstractmethod
    def _gradient(self, x: np.ndarray, function_id: int) -> Any:
        """Return the gradient of one output at a validated argument."""

    def _jacobian(self, x: np.ndarray) -> Any:
        return np.vstack([
            np.asarray(self._gradient(x, i), dtype=float).reshape(-1)
            for i in range(self._output_size)
        ])


class TwiceDifferentiableFunction(DifferentiableFunction):
    """Differentiable function that also provides Hessians."""

    capabilities = Capability.TWICE_DIFFERENTIABLE

    def hessian(self, x: Any, function_id: int = 0) -> np.ndarray:
        """Return the ``input_size x input_size`` Hessian of one output."""
        arg = self._check_argument(x)
        function_id = self._check_function_id(function_id)
        hess = np.asarray(self._hessian(arg, function_id), dtype=float)
        n = self._input_size
        if hess.size != n * n:
            raise ShapeMismatch(
                f"hessian of '{self.description}' has {hess.size} entries, expected ({n}, {n})"
            )
        return hess.reshape(n, n)

    @abstractmethod
    def _hessian(self, x: np.ndarray, function_id: int) -> Any:
        """Return the Hessian of one output at a validated argument."""
