"""Unit tests for intervals and their constructors."""

from __future__ import annotations

import math

import pytest

from nlpkit.errors import InvalidInterval
from nlpkit.interval import (
    Interval,
    make_equality_interval,
    make_infinite_interval,
    make_interval,
    make_lower_interval,
    make_upper_interval,
)


class TestConstruction:
    def test_two_sided(self) -> None:
        interval = make_interval(1, 5)
        assert interval.lower == 1.0 and interval.upper == 5.0
        assert isinstance(interval.lower, float)
        assert not interval.is_equality and not interval.is_free

    def test_lower_only(self) -> None:
        interval = make_lower_interval(25.0)
        assert interval.upper == math.inf
        assert interval.is_lower_only and not interval.is_upper_only

    def test_upper_only(self) -> None:
        interval = make_upper_interval(-3.0)
        assert interval.lower == -math.inf
        assert interval.is_upper_only and not interval.is_lower_only

    def test_equality(self) -> None:
        assert make_equality_interval(40.0).is_equality
        assert make_interval(40.0, 40.0).is_equality

    def test_free(self) -> None:
        assert make_infinite_interval().is_free
        assert Interval().is_free

    def test_lower_above_upper_rejected(self) -> None:
        with pytest.raises(InvalidInterval):
            make_interval(5.0, 1.0)

    def test_nan_rejected(self) -> None:
        with pytest.raises(InvalidInterval):
            make_interval(float("nan"), 1.0)

    def test_invalid_interval_is_value_error(self) -> None:
        with pytest.raises(ValueError):
            Interval(2.0, 1.0)

    def test_immutable(self) -> None:
        interval = make_interval(1.0, 2.0)
        with pytest.raises(AttributeError):
            interval.lower = 0.0  # type: ignore[misc]


class TestMembership:
    def test_contains_closed_ends(self) -> None:
        interval = make_interval(1.0, 5.0)
        assert interval.contains(1.0)
        assert interval.contains(5.0)
        assert not interval.contains(5.0 + 1e-9)

    def test_contains_with_tolerance(self) -> None:
        assert make_interval(1.0, 5.0).contains(5.0 + 1e-9, tol=1e-8)

    def test_violation(self) -> None:
        interval = make_interval(1.0, 5.0)
        assert interval.violation(0.5) == pytest.approx(0.5)
        assert interval.violation(7.0) == pytest.approx(2.0)
        assert interval.violation(3.0) == 0.0

    def test_violation_unbounded_side(self) -> None:
        assert make_lower_interval(25.0).violation(1e12) == 0.0

    def test_clip(self) -> None:
        interval = make_interval(1.0, 5.0)
        assert interval.clip(0.0) == 1.0
        assert interval.clip(9.0) == 5.0
        assert make_infinite_interval().clip(0.0) == 0.0

    def test_nan_is_never_contained(self) -> None:
        interval = make_interval(1.0, 5.0)
        assert interval.violation(float("nan")) == math.inf
        assert not interval.contains(float("nan"), tol=1e6)
        assert make_infinite_interval().violation(math.nan) == math.inf
