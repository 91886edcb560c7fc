"""
Closed-form numeric functions.

Constant, affine and quadratic maps are common building blocks for costs and
constraints (box-like linear constraints, least-distance objectives). Their
derivatives are exact and cheap, so all of them are twice differentiable.
"""

from __future__ import annotations

from typing import Any, Optional

import numpy as np

from nlpkit.errors import ShapeMismatch
from nlpkit.functions.base import TwiceDifferentiableFunction


class ConstantFunction(TwiceDifferentiableFunction):
    """f(x) = c for every x."""

    def __init__(self, value: Any, input_size: int, description: str = ""):
        offset = np.array(value, dtype=float).reshape(-1)
        super().__init__(input_size, offset.size, description or "constant")
        self._offset = offset
        self._offset.setflags(write=False)

    @property
    def offset(self) -> np.ndarray:
        return self._offset.copy()

    def _compute(self, x: np.ndarray) -> np.ndarray:
        return self._offset.copy()

    def _gradient(self, x: np.ndarray, function_id: int) -> np.ndarray:
        return np.zeros(self.input_size)

    def _hessian(self, x: np.ndarray, function_id: int) -> np.ndarray:
        return np.zeros((self.input_size, self.input_size))


class LinearFunction(TwiceDifferentiableFunction):
    """f(x) = A x + b."""

    def __init__(self, A: Any, b: Optional[Any] = None, description: str = ""):
        A = np.atleast_2d(np.array(A, dtype=float))
        if A.ndim != 2:
            raise ShapeMismatch(f"A must be a matrix, got shape {A.shape}")
        m, n = A.shape
        b = np.zeros(m) if b is None else np.array(b, dtype=float).reshape(-1)
        if b.size != m:
            raise ShapeMismatch(f"b has size {b.size}, expected {m}")
        super().__init__(n, m, description or "linear")
        self._A = A
        self._b = b
        self._A.setflags(write=False)
        self._b.setflags(write=False)

    @property
    def A(self) -> np.ndarray:
        return self._A.copy()

    @property
    def b(self) -> np.ndarray:
        return self._b.copy()

    def _compute(self, x: np.ndarray) -> np.ndarray:
        return self._A @ x + self._b

    def _gradient(self, x: np.ndarray, function_id: int) -> np.ndarray:
        return self._A[function_id].copy()

    def _jacobian(self, x: np.ndarray) -> np.ndarray:
        return self._A.copy()

    def _hessian(self, x: np.ndarray, function_id: int) -> np.ndarray:
        return np.zeros((self.input_size, self.input_size))


class QuadraticFunction(TwiceDifferentiableFunction):
    """
    Scalar quadratic f(x) = 1/2 x^T A x + b^T x + c.

    ``A`` is symmetrized on construction so the Hessian is exactly symmetric.
    """

    def __init__(
        self,
        A: Any,
        b: Optional[Any] = None,
        c: float = 0.0,
        description: str = "",
    ):
        A = np.array(A, dtype=float)
        if A.ndim != 2 or A.shape[0] != A.shape[1]:
            raise ShapeMismatch(f"A must be square, got shape {A.shape}")
        n = A.shape[0]
        b = np.zeros(n) if b is None else np.array(b, dtype=float).reshape(-1)
        if b.size != n:
            raise ShapeMismatch(f"b has size {b.size}, expected {n}")
        super().__init__(n, 1, description or "quadratic")
        self._A = 0.5 * (A + A.T)
        self._b = b
        self._c = float(c)
        self._A.setflags(write=False)
        self._b.setflags(write=False)

    def _compute(self, x: np.ndarray) -> np.ndarray:
        return np.array([0.5 * x @ self._A @ x + self._b @ x + self._c])

    def _gradient(self, x: np.ndarray, function_id: int) -> np.ndarray:
        return self._A @ x + self._b

    def _hessian(self, x: np.ndarray, function_id: int) -> np.ndarray:
        return self._A.copy()
