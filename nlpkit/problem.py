"""
Constrained optimization problem composition.

A :class:`Problem` owns one cost function and an ordered, append-only list of
constraints. Each constraint is a differentiable function together with one
:class:`~nlpkit.interval.Interval` and one scale per output component.
Argument bounds, argument scales and the starting point are sized from the
cost function's input.

Constraint order is part of the contract: stacked constraint values,
Jacobians, bounds and dual vectors returned by backends all follow the order
in which constraints were added.

Solver backends only read a problem. Every array exposed here is a copy, so a
backend cannot modify the problem it was given.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from functools import reduce
from typing import Any, Iterable, List, Optional, Sequence, Tuple, Union

import numpy as np

from nlpkit.errors import DimensionMismatch, InvalidScale, ShapeMismatch
from nlpkit.functions.base import (
    Capability,
    DifferentiableFunction,
    Function,
    require_capability,
)
from nlpkit.interval import Interval, make_infinite_interval
from nlpkit.logging import get_logger

log = get_logger(__name__)

IntervalLike = Union[Interval, Tuple[float, float]]


def _is_single_interval(value: Any) -> bool:
    """True for an Interval or a lone `(lower, upper)` pair of scalars."""
    return isinstance(value, Interval) or (
        isinstance(value, tuple) and len(value) == 2 and all(np.isscalar(v) for v in value)
    )


def _as_interval(value: IntervalLike) -> Interval:
    if isinstance(value, Interval):
        return value
    lower, upper = value
    return Interval(lower, upper)


def _as_scales(scales: Any, count: int) -> Tuple[float, ...]:
    if scales is None:
        return (1.0,) * count
    if np.isscalar(scales):
        scales = [scales]
    result = tuple(float(s) for s in scales)
    for s in result:
        if not math.isfinite(s) or s <= 0.0:
            raise InvalidScale(f"Scales must be finite and positive, got {s}")
    return result


@dataclass(frozen=True)
class Constraint:
    """A constraint function with its per-output bounds and scales."""

    function: DifferentiableFunction
    bounds: Tuple[Interval, ...]
    scales: Tuple[float, ...]

    @property
    def size(self) -> int:
        return self.function.output_size


class Problem:
    """
    Cost function, ordered constraints, argument bounds and starting point.

    Args:
        cost: Cost function to minimize. Must provide at least a gradient.

    Raises:
        CapabilityMismatch: if the cost function is not differentiable.
    """

    def __init__(self, cost: Function):
        require_capability(cost, Capability.DIFFERENTIABLE, "Cost function")
        self._cost = cost
        n = cost.input_size
        self._constraints: List[Constraint] = []
        self._argument_bounds: List[Interval] = [make_infinite_interval()] * n
        self._argument_scales = np.ones(n)
        self._starting_point: Optional[np.ndarray] = None

    # ------------------------------------------------------------------
    # Structure
    # ------------------------------------------------------------------

    @property
    def cost(self) -> Function:
        return self._cost

    @property
    def input_size(self) -> int:
        return self._cost.input_size

    @property
    def output_size(self) -> int:
        return self._cost.output_size

    @property
    def constraints(self) -> Tuple[Constraint, ...]:
        return tuple(self._constraints)

    @property
    def constraint_count(self) -> int:
        """Total number of constraint rows (sum of output sizes)."""
        return sum(c.size for c in self._constraints)

    @property
    def capabilities(self) -> Capability:
        """Capabilities shared by the cost and every constraint function."""
        tags = [self._cost.capabilities] + [c.function.capabilities for c in self._constraints]
        return reduce(lambda a, b: a & b, tags)

    def functions(self) -> Iterable[Tuple[str, Function]]:
        """Yield ``(role, function)`` for the cost and each constraint."""
        yield "Cost function", self._cost
        for i, constraint in enumerate(self._constraints):
            yield f"Constraint {i}", constraint.function

    def add_constraint(
        self,
        function: DifferentiableFunction,
        bounds: Union[IntervalLike, Sequence[IntervalLike]],
        scales: Optional[Union[float, Sequence[float]]] = None,
    ) -> None:
        """Append a constraint.

        Args:
            function: Differentiable constraint function on the problem's
                argument space.
            bounds: One interval per output of *function*. A single interval
                is accepted for scalar functions.
            scales: One positive scale per output; defaults to 1.0.

        Raises:
            CapabilityMismatch: *function* has no gradient.
            DimensionMismatch: input size differs from the cost function's.
            ShapeMismatch: bounds, scales and output size disagree.
            InvalidScale: a scale is not finite and positive.
        """
        require_capability(function, Capability.DIFFERENTIABLE, "Constraint")
        if function.input_size != self.input_size:
            raise DimensionMismatch(self.input_size, function.input_size, "constraint input")

        if _is_single_interval(bounds):
            bounds = [bounds]
        intervals = tuple(_as_interval(b) for b in bounds)
        scale_values = _as_scales(scales, len(intervals))

        if len(intervals) != len(scale_values):
            raise ShapeMismatch(
                f"Constraint '{function.description}': {len(intervals)} bounds "
                f"but {len(scale_values)} scales"
            )
        if len(intervals) != function.output_size:
            raise ShapeMismatch(
                f"Constraint '{function.description}': {len(intervals)} bounds "
                f"for output size {function.output_size}"
            )

        self._constraints.append(Constraint(function, intervals, scale_values))
        log.debug(
            "Added constraint %d: %s in %s",
            len(self._constraints) - 1,
            function.description,
            ", ".join(str(b) for b in intervals),
        )

    # ------------------------------------------------------------------
    # Argument bounds, scales and starting point
    # ------------------------------------------------------------------

    @property
    def argument_bounds(self) -> Tuple[Interval, ...]:
        return tuple(self._argument_bounds)

    def set_argument_bounds(self, index: int, interval: IntervalLike) -> None:
        """Set the bounds of argument *index*."""
        if not 0 <= index < self.input_size:
            raise IndexError(f"Argument index {index} out of range for size {self.input_size}")
        self._argument_bounds[index] = _as_interval(interval)
        self._report_starting_point()

    def set_all_argument_bounds(
        self, intervals: Union[IntervalLike, Sequence[IntervalLike]]
    ) -> None:
        """Set every argument bound; a single interval applies to all arguments."""
        if _is_single_interval(intervals):
            new_bounds = [_as_interval(intervals)] * self.input_size
        else:
            new_bounds = [_as_interval(i) for i in intervals]
        if len(new_bounds) != self.input_size:
            raise DimensionMismatch(self.input_size, len(new_bounds), "argument bounds")
        self._argument_bounds = new_bounds
        self._report_starting_point()

    @property
    def argument_scales(self) -> np.ndarray:
        return self._argument_scales.copy()

    def set_argument_scales(self, scales: Sequence[float]) -> None:
        values = _as_scales(scales, self.input_size)
        if len(values) != self.input_size:
            raise DimensionMismatch(self.input_size, len(values), "argument scales")
        self._argument_scales = np.array(values)

    @property
    def starting_point(self) -> Optional[np.ndarray]:
        return None if self._starting_point is None else self._starting_point.copy()

    def set_starting_point(self, x: Any) -> None:
        """Set the starting point; the previous value is kept on failure."""
        point = np.array(x, dtype=float).reshape(-1)
        if point.size != self.input_size:
            raise DimensionMismatch(self.input_size, point.size, "starting point")
        self._starting_point = point
        self._report_starting_point()

    def starting_point_violations(self) -> List[Tuple[int, float, Interval]]:
        """Return ``(index, value, interval)`` for starting-point entries out of bounds."""
        if self._starting_point is None:
            return []
        return [
            (i, float(value), interval)
            for i, (value, interval) in enumerate(zip(self._starting_point, self._argument_bounds))
            if not interval.contains(value)
        ]

    def _report_starting_point(self) -> None:
        for index, value, interval in self.starting_point_violations():
            log.warning(
                "Starting point x[%d] = %g lies outside its argument bounds %s",
                index,
                value,
                interval,
            )

    def initial_guess(self) -> np.ndarray:
        """Starting point if set, otherwise zero projected onto the argument bounds."""
        if self._starting_point is not None:
            return self._starting_point.copy()
        return np.array([interval.clip(0.0) for interval in self._argument_bounds])

    # ------------------------------------------------------------------
    # Stacked views used by solver backends
    # ------------------------------------------------------------------

    def argument_bound_arrays(self) -> Tuple[np.ndarray, np.ndarray]:
        lower = np.array([b.lower for b in self._argument_bounds])
        upper = np.array([b.upper for b in self._argument_bounds])
        return lower, upper

    def constraint_bounds(self) -> Tuple[np.ndarray, np.ndarray]:
        """Stacked lower and upper constraint bounds in constraint order."""
        intervals = [b for c in self._constraints for b in c.bounds]
        lower = np.array([b.lower for b in intervals], dtype=float)
        upper = np.array([b.upper for b in intervals], dtype=float)
        return lower, upper

    def evaluate_cost(self, x: Any) -> float:
        return float(self._cost.evaluate(x)[0])

    def evaluate_constraints(self, x: Any) -> np.ndarray:
        """Stacked constraint values in constraint order."""
        if not self._constraints:
            return np.zeros(0)
        return np.concatenate([c.function.evaluate(x) for c in self._constraints])

    def constraint_jacobian(self, x: Any) -> np.ndarray:
        """Stacked ``constraint_count x input_size`` Jacobian."""
        if not self._constraints:
            return np.zeros((0, self.input_size))
        return np.vstack([c.function.jacobian(x) for c in self._constraints])

    def max_violation(self, x: Any) -> float:
        """Largest violation of argument bounds and constraint bounds at *x*."""
        x = np.array(x, dtype=float).reshape(-1)
        violations = [b.violation(v) for v, b in zip(x, self._argument_bounds)]
        values = self.evaluate_constraints(x)
        intervals = [b for c in self._constraints for b in c.bounds]
        violations.extend(b.violation(v) for v, b in zip(values, intervals))
        return max(violations, default=0.0)

    def __repr__(self) -> str:
        return (
            f"<Problem cost='{self._cost.description}' n={self.input_size} "
            f"constraints={len(self._constraints)} rows={self.constraint_count}>"
        )
