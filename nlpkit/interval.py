"""
Closed real intervals used for argument and constraint bounds.

An interval is ``[lower, upper]`` where either side may be infinite. The
helper constructors mirror the usual bound shapes found in NLP solvers:
two-sided, lower-only, upper-only, equality and free.
"""

from __future__ import annotations

import math
from dataclasses import dataclass

from nlpkit.errors import InvalidInterval

INFINITY = math.inf


@dataclass(frozen=True)
class Interval:
    """Closed interval ``[lower, upper]`` with ``lower <= upper``."""

    lower: float = -INFINITY
    upper: float = INFINITY

    def __post_init__(self):
        lower = float(self.lower)
        upper = float(self.upper)
        if math.isnan(lower) or math.isnan(upper):
            raise InvalidInterval(f"Interval bounds must not be NaN: [{lower}, {upper}]")
        if lower > upper:
            raise InvalidInterval(
                f"Interval lower bound {lower} is greater than upper bound {upper}"
            )
        # Normalize ints and numpy scalars to plain floats
        object.__setattr__(self, "lower", lower)
        object.__setattr__(self, "upper", upper)

    @property
    def is_equality(self) -> bool:
        return self.lower == self.upper

    @property
    def is_free(self) -> bool:
        return self.lower == -INFINITY and self.upper == INFINITY

    @property
    def is_lower_only(self) -> bool:
        return math.isfinite(self.lower) and self.upper == INFINITY

    @property
    def is_upper_only(self) -> bool:
        return self.lower == -INFINITY and math.isfinite(self.upper)

    def contains(self, value: float, tol: float = 0.0) -> bool:
        """Return True if *value* lies in the interval widened by *tol*."""
        return self.violation(value) <= tol

    def violation(self, value: float) -> float:
        """Distance from *value* to the interval (0 inside, infinite for NaN)."""
        value = float(value)
        if math.isnan(value):
            return math.inf
        if value < self.lower:
            return self.lower - value
        if value > self.upper:
            return value - self.upper
        return 0.0

    def clip(self, value: float) -> float:
        """Project *value* onto the interval."""
        return min(max(float(value), self.lower), self.upper)

    def __str__(self) -> str:
        return f"[{self.lower}, {self.upper}]"


def make_interval(lower: float, upper: float) -> Interval:
    """Two-sided interval ``[lower, upper]``."""
    return Interval(lower, upper)


def make_lower_interval(lower: float) -> Interval:
    """Interval ``[lower, +inf)``."""
    return Interval(lower, INFINITY)


def make_upper_interval(upper: float) -> Interval:
    """Interval ``(-inf, upper]``."""
    return Interval(-INFINITY, upper)


def make_infinite_interval() -> Interval:
    """Free interval ``(-inf, +inf)``."""
    return Interval(-INFINITY, INFINITY)


def make_equality_interval(value: float) -> Interval:
    """Degenerate interval ``[value, value]``."""
    return Interval(value, value)
