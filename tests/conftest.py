"""
Pytest configuration for the nlpkit test suite.

Shared fixtures build the Hock–Schittkowski 71 problem and a stub backend
that records whether it was asked to solve anything.
"""

import os

import numpy as np
import pytest

# Keep solver chatter out of test output unless explicitly requested
os.environ.setdefault("NLPKIT_LOG_LEVEL", "WARNING")

from nlpkit.functions.base import Capability
from nlpkit.optimization.base import SolverBackend
from nlpkit.optimization.registry import BackendRegistry
from nlpkit.optimization.result import Success
from nlpkit.testing.problems import build_hs71_problem


class RecordingBackend(SolverBackend):
    """Backend returning the starting point as a solution and counting calls."""

    name = "recording"
    required_capability = Capability.TWICE_DIFFERENTIABLE
    calls = 0

    def _solve(self, problem):
        type(self).calls += 1
        x = problem.initial_guess()
        return Success(x=x, value=problem.evaluate_cost(x))

    @property
    def feasibility_tol(self) -> float:
        return 1e-6


@pytest.fixture
def recording_backend():
    RecordingBackend.calls = 0
    yield RecordingBackend
    RecordingBackend.calls = 0


@pytest.fixture
def registry(recording_backend):
    reg = BackendRegistry()
    reg.register("recording", recording_backend, aliases=("rec",))
    return reg


@pytest.fixture
def hs71_problem():
    return build_hs71_problem()


@pytest.fixture
def hs71_symbolic_problem():
    return build_hs71_problem(symbolic=True)


@pytest.fixture
def rng():
    return np.random.default_rng(20240117)
