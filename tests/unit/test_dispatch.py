"""Unit tests for solver dispatch."""

from __future__ import annotations

import logging

import numpy as np
import pytest

from nlpkit.errors import CapabilityMismatch, UnknownBackend
from nlpkit.functions import CallbackFunction
from nlpkit.interval import make_lower_interval
from nlpkit.optimization.base import SolverBackend
from nlpkit.optimization.dispatch import DispatchState, SolverDispatch, solve
from nlpkit.optimization.result import NoSolution, SolverError, Success
from nlpkit.optimization.scipy_backends import TrustConstrBackend
from nlpkit.problem import Problem
from nlpkit.testing.problems import HS71Cost


def _gradient_only_constraint() -> CallbackFunction:
    return CallbackFunction(
        4, 1, lambda x: [x.sum()], gradient=lambda x, i: np.ones(4), description="sum"
    )


class TestConfigurationErrors:
    def test_unknown_backend(self, registry, hs71_problem, recording_backend) -> None:
        dispatch = SolverDispatch(registry)
        with pytest.raises(UnknownBackend):
            dispatch.solve(hs71_problem, "no-such-backend")
        assert recording_backend.calls == 0
        assert dispatch.state is None
        assert dispatch.get_history() == []

    def test_non_string_backend_id(self, hs71_problem) -> None:
        with pytest.raises(UnknownBackend):
            solve(hs71_problem, None)  # type: ignore[arg-type]

    def test_capability_mismatch_before_solving(self, registry, recording_backend) -> None:
        problem = Problem(HS71Cost())
        problem.add_constraint(_gradient_only_constraint(), [make_lower_interval(0.0)])
        with pytest.raises(CapabilityMismatch, match="Constraint 0 'sum'"):
            SolverDispatch(registry).solve(problem, "recording")
        assert recording_backend.calls == 0

    def test_capability_mismatch_with_builtin_backend(self, monkeypatch) -> None:
        called = []
        monkeypatch.setattr(TrustConstrBackend, "_solve", lambda self, p: called.append(p))
        problem = Problem(HS71Cost())
        problem.add_constraint(_gradient_only_constraint(), [make_lower_interval(0.0)])
        with pytest.raises(CapabilityMismatch):
            solve(problem, "scipy-trust-constr")
        assert called == []

    def test_symbolic_required_by_ipopt(self, hs71_problem) -> None:
        with pytest.raises(CapabilityMismatch, match="SYMBOLIC"):
            solve(hs71_problem, "ipopt")

    def test_constraints_rejected_by_bounds_only_backend(self, hs71_problem) -> None:
        with pytest.raises(CapabilityMismatch):
            solve(hs71_problem, "scipy-lbfgsb")

    def test_vector_cost_rejected(self, registry) -> None:
        cost = CallbackFunction(
            2,
            2,
            lambda x: x,
            gradient=lambda x, i: np.eye(2)[i],
            hessian=lambda x, i: np.zeros((2, 2)),
        )
        with pytest.raises(CapabilityMismatch, match="scalar"):
            SolverDispatch(registry).solve(Problem(cost), "recording")

    def test_bad_backend_config(self, hs71_problem) -> None:
        with pytest.raises(TypeError):
            solve(hs71_problem, "slsqp", backend_config=42)


class TestDispatch:
    def test_success_recorded(self, registry, hs71_problem, recording_backend) -> None:
        dispatch = SolverDispatch(registry)
        result = dispatch.solve(hs71_problem, "rec")
        assert isinstance(result, Success)
        assert recording_backend.calls == 1
        assert dispatch.state is DispatchState.SUCCEEDED
        history = dispatch.get_history()
        assert len(history) == 1
        assert history[0] == ("recording", result)

    def test_problem_not_modified(self, registry, hs71_problem) -> None:
        before = hs71_problem.starting_point
        SolverDispatch(registry).solve(hs71_problem, "recording")
        np.testing.assert_allclose(hs71_problem.starting_point, before)
        assert hs71_problem.constraint_count == 2

    def test_clear_history(self, registry, hs71_problem) -> None:
        dispatch = SolverDispatch(registry)
        dispatch.solve(hs71_problem, "recording")
        dispatch.clear_history()
        assert dispatch.get_history() == []

    def test_history_is_a_copy(self, registry, hs71_problem) -> None:
        dispatch = SolverDispatch(registry)
        dispatch.solve(hs71_problem, "recording")
        dispatch.get_history().clear()
        assert len(dispatch.get_history()) == 1

    def test_start_outside_bounds_is_dispatched_with_warning(
        self, registry, hs71_problem, recording_backend, caplog
    ) -> None:
        hs71_problem.set_starting_point([0.0, 5.0, 5.0, 1.0])
        with caplog.at_level(logging.WARNING, logger="nlpkit.optimization.dispatch"):
            SolverDispatch(registry).solve(hs71_problem, "recording")
        assert recording_backend.calls == 1
        assert "outside argument bounds" in caplog.text

    def test_backend_exception_becomes_error(self, registry, hs71_problem) -> None:
        class Exploding(SolverBackend):
            name = "exploding"

            def _solve(self, problem):
                raise RuntimeError("callback blew up")

        registry.register("exploding", Exploding)
        dispatch = SolverDispatch(registry)
        result = dispatch.solve(hs71_problem, "exploding")
        assert isinstance(result, SolverError)
        assert "callback blew up" in result.message
        assert dispatch.state is DispatchState.ERRORED

    def test_no_solution_state(self, registry, hs71_problem) -> None:
        class Hopeless(SolverBackend):
            name = "hopeless"

            def _solve(self, problem):
                return NoSolution("infeasible")

        registry.register("hopeless", Hopeless)
        dispatch = SolverDispatch(registry)
        assert isinstance(dispatch.solve(hs71_problem, "hopeless"), NoSolution)
        assert dispatch.state is DispatchState.NO_SOLUTION_FOUND

    def test_non_result_return_rejected(self, registry, hs71_problem) -> None:
        class Broken(SolverBackend):
            name = "broken"

            def _solve(self, problem):
                return None

        registry.register("broken", Broken)
        with pytest.raises(TypeError):
            SolverDispatch(registry).solve(hs71_problem, "broken")

    def test_module_level_solve_uses_given_registry(self, registry, hs71_problem, recording_backend) -> None:
        solve(hs71_problem, "recording", registry=registry)
        assert recording_backend.calls == 1
