"""Unit tests for IPOPT option building."""

from __future__ import annotations

import pytest

from nlpkit.constants import IPOPT_LINEAR_SOLVER
from nlpkit.optimization.base import coerce_options
from nlpkit.optimization.ipopt_options import IPOPTOptions, build_casadi_options


class TestBuildCasadiOptions:
    def test_defaults(self) -> None:
        opts = build_casadi_options(IPOPTOptions())
        assert opts["ipopt.max_iter"] == 3000
        assert opts["ipopt.linear_solver"] == IPOPT_LINEAR_SOLVER
        assert opts["ipopt.hessian_approximation"] == "exact"
        assert opts["ipopt.print_level"] == 0
        assert opts["ipopt.sb"] == "yes"
        assert opts["print_time"] is False
        assert opts["error_on_fail"] is False

    def test_unmapped_fields_are_not_forwarded(self) -> None:
        opts = build_casadi_options(IPOPTOptions())
        assert "ipopt.feasibility_tol" not in opts
        assert "ipopt.extra" not in opts

    def test_extra_options_get_prefix(self) -> None:
        opts = build_casadi_options(IPOPTOptions(extra={"nlp_scaling_method": "none"}))
        assert opts["ipopt.nlp_scaling_method"] == "none"

    def test_overrides(self) -> None:
        options = coerce_options(
            IPOPTOptions, {"max_iter": 50, "hessian_approximation": "limited-memory"}
        )
        opts = build_casadi_options(options)
        assert opts["ipopt.max_iter"] == 50
        assert opts["ipopt.hessian_approximation"] == "limited-memory"

    def test_option_file_from_environment(self, monkeypatch) -> None:
        monkeypatch.setattr(
            "nlpkit.optimization.ipopt_options.IPOPT_OPT_PATH", "/tmp/ipopt.opt"
        )
        opts = build_casadi_options(IPOPTOptions())
        assert opts["ipopt.option_file_name"] == "/tmp/ipopt.opt"

    def test_unknown_field_rejected(self) -> None:
        with pytest.raises(TypeError):
            coerce_options(IPOPTOptions, {"linear_solvr": "ma57"})
