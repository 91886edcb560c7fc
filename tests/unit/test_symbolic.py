"""Unit tests for CasADi-backed symbolic functions."""

from __future__ import annotations

import casadi as ca
import numpy as np
import pytest

from nlpkit.errors import DimensionMismatch
from nlpkit.functions import Capability, SymbolicFunction
from nlpkit.testing.problems import (
    HS71_START,
    HS71Cost,
    HS71Product,
    HS71SquaredNorm,
    hs71_symbolic_functions,
)


def _rosenbrock() -> SymbolicFunction:
    return SymbolicFunction(
        2, lambda x: (1 - x[0]) ** 2 + 100 * (x[1] - x[0] ** 2) ** 2, "rosenbrock"
    )


class TestSymbolicFunction:
    def test_capabilities(self) -> None:
        f = _rosenbrock()
        assert f.supports(Capability.TWICE_DIFFERENTIABLE | Capability.SYMBOLIC)
        assert f.input_size == 2 and f.output_size == 1

    def test_value_gradient_hessian(self) -> None:
        f = _rosenbrock()
        np.testing.assert_allclose(f([1.0, 1.0]), [0.0])
        np.testing.assert_allclose(f.gradient([1.0, 1.0]), [0.0, 0.0], atol=1e-12)
        np.testing.assert_allclose(f.hessian([1.0, 1.0]), [[802.0, -400.0], [-400.0, 200.0]])

    def test_vector_output(self) -> None:
        f = SymbolicFunction(2, lambda x: [x[0] * x[1], x[0] + x[1]], "pair")
        assert f.output_size == 2
        np.testing.assert_allclose(f([2.0, 3.0]), [6.0, 5.0])
        np.testing.assert_allclose(f.jacobian([2.0, 3.0]), [[3.0, 2.0], [1.0, 1.0]])
        np.testing.assert_allclose(f.hessian([2.0, 3.0], 0), [[0.0, 1.0], [1.0, 0.0]])
        np.testing.assert_allclose(f.hessian([2.0, 3.0], 1), np.zeros((2, 2)))

    def test_wrong_length(self) -> None:
        with pytest.raises(DimensionMismatch):
            _rosenbrock().evaluate([1.0, 2.0, 3.0])

    def test_expression_on_new_symbol(self) -> None:
        f = _rosenbrock()
        y = ca.SX.sym("y", 2)
        expr = f.expression(y)
        value = ca.Function("check", [y], [expr])(ca.DM([0.0, 0.0]))
        assert float(value) == pytest.approx(1.0)

    @pytest.mark.parametrize(
        "index, reference",
        [(0, HS71Cost()), (1, HS71Product()), (2, HS71SquaredNorm())],
    )
    def test_matches_hand_written_hs71(self, index, reference) -> None:
        symbolic = hs71_symbolic_functions()[index]
        x = np.array([1.3, 2.1, 4.2, 3.7])
        for point in (x, HS71_START):
            np.testing.assert_allclose(symbolic(point), reference(point))
            np.testing.assert_allclose(symbolic.gradient(point), reference.gradient(point))
            np.testing.assert_allclose(symbolic.hessian(point), reference.hessian(point))
