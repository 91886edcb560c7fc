"""Property tests for function and interval invariants."""

import numpy as np
import pytest
from hypothesis import given, settings
from hypothesis import strategies as st

from nlpkit.errors import DimensionMismatch
from nlpkit.functions import check_gradient, max_gradient_error
from nlpkit.interval import make_interval
from nlpkit.testing.problems import (
    HS71Cost,
    HS71Product,
    HS71SquaredNorm,
    hs71_symbolic_functions,
)
from nlpkit.testing.utils import assert_hessian_symmetric

HS71_FUNCTIONS = [HS71Cost(), HS71Product(), HS71SquaredNorm()]

box_points = st.lists(
    st.floats(min_value=1.0, max_value=5.0, allow_nan=False), min_size=4, max_size=4
)


@pytest.mark.parametrize("function", HS71_FUNCTIONS, ids=lambda f: type(f).__name__)
@settings(max_examples=25, deadline=None)
@given(size=st.integers(min_value=0, max_value=12).filter(lambda n: n != 4))
def test_wrong_argument_length_always_rejected(function, size):
    x = np.ones(size)
    with pytest.raises(DimensionMismatch):
        function.evaluate(x)
    with pytest.raises(DimensionMismatch):
        function.gradient(x)
    with pytest.raises(DimensionMismatch):
        function.hessian(x)


@pytest.mark.parametrize("function", HS71_FUNCTIONS, ids=lambda f: type(f).__name__)
def test_hessian_symmetric_on_random_points(function):
    # Seeded so failures are reproducible
    rng = np.random.default_rng(20240117)
    for x in rng.uniform(1.0, 5.0, size=(100, 4)):
        assert_hessian_symmetric(function, x)


def test_symbolic_hessians_symmetric_on_random_points():
    rng = np.random.default_rng(20240118)
    functions = hs71_symbolic_functions()
    for x in rng.uniform(1.0, 5.0, size=(100, 4)):
        for function in functions:
            assert_hessian_symmetric(function, x)


@pytest.mark.parametrize("function", HS71_FUNCTIONS, ids=lambda f: type(f).__name__)
@settings(max_examples=50, deadline=None)
@given(values=box_points)
def test_gradient_matches_finite_differences(function, values):
    x = np.array(values)
    assert check_gradient(function, x, rtol=1e-4), max_gradient_error(function, x)


@settings(max_examples=50, deadline=None)
@given(
    lower=st.floats(min_value=-1e6, max_value=1e6, allow_nan=False),
    width=st.floats(min_value=0.0, max_value=1e6, allow_nan=False),
    value=st.floats(min_value=-1e7, max_value=1e7, allow_nan=False),
)
def test_clip_lands_inside_and_removes_violation(lower, width, value):
    interval = make_interval(lower, lower + width)
    clipped = interval.clip(value)
    assert interval.contains(clipped)
    assert interval.violation(clipped) == 0.0
    assert (interval.violation(value) == 0.0) == interval.contains(value)
