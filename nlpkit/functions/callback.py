"""Functions assembled from plain Python callables."""

from __future__ import annotations

from typing import Any, Callable, Optional

import numpy as np

from nlpkit.errors import CapabilityMismatch
from nlpkit.functions.base import Capability, TwiceDifferentiableFunction

ComputeFn = Callable[[np.ndarray], Any]
DerivativeFn = Callable[[np.ndarray, int], Any]


class CallbackFunction(TwiceDifferentiableFunction):
    """
    Function whose value and derivatives come from user callables.

    The capability tag is derived from the callables supplied: ``compute``
    alone gives a value-only function, adding ``gradient`` makes it
    differentiable and adding ``hessian`` twice differentiable. Requesting a
    derivative that was not supplied raises :class:`CapabilityMismatch`.

    ``gradient`` and ``hessian`` receive ``(x, function_id)``.
    """

    def __init__(
        self,
        input_size: int,
        output_size: int,
        compute: ComputeFn,
        gradient: Optional[DerivativeFn] = None,
        hessian: Optional[DerivativeFn] = None,
        description: str = "",
    ):
        super().__init__(input_size, output_size, description)
        if hessian is not None and gradient is None:
            raise ValueError("A hessian callback requires a gradient callback")
        self._compute_fn = compute
        self._gradient_fn = gradient
        self._hessian_fn = hessian

        capabilities = Capability.VALUE
        if gradient is not None:
            capabilities |= Capability.GRADIENT
        if hessian is not None:
            capabilities |= Capability.HESSIAN
        self.capabilities = capabilities

    def _compute(self, x: np.ndarray) -> Any:
        return self._compute_fn(x)

    def _gradient(self, x: np.ndarray, function_id: int) -> Any:
        if self._gradient_fn is None:
            raise CapabilityMismatch(f"'{self.description}' has no gradient callback")
        return self._gradient_fn(x, function_id)

    def _hessian(self, x: np.ndarray, function_id: int) -> Any:
        if self._hessian_fn is None:
            raise CapabilityMismatch(f"'{self.description}' has no hessian callback")
        return self._hessian_fn(x, function_id)
