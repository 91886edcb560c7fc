"""
Solve Hock–Schittkowski problem 71 with a chosen backend.

Usage:
    python examples/hs71.py [--backend NAME] [--max-iter N] [-v]

``--backend`` defaults to ``ipopt``, which runs on the symbolic HS71
functions; any other registered identifier uses the hand-written ones.
"""

from __future__ import annotations

import argparse
import logging
import sys

from nlpkit import list_backends, match_result, solve
from nlpkit.logging import get_logger, set_log_level
from nlpkit.testing.problems import build_hs71_problem

log = get_logger(__name__)


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[1])
    parser.add_argument("--backend", default="ipopt", choices=list_backends())
    parser.add_argument("--max-iter", type=int, default=None)
    parser.add_argument("-v", "--verbose", action="store_true", help="debug output")
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")
    set_log_level("DEBUG" if args.verbose else "INFO")
    log.setLevel(logging.INFO)

    problem = build_hs71_problem(symbolic=args.backend == "ipopt")
    config = {"max_iter": args.max_iter} if args.max_iter is not None else None
    result = solve(problem, args.backend, config)

    def report_solution(res) -> int:
        log.info(f"A solution has been found: x={res.x}, f={res.value:.7f}")
        return 0

    def report_warnings(res) -> int:
        log.warning(f"Solution found with warnings: {'; '.join(res.warnings)}")
        return report_solution(res)

    def report_failure(res) -> int:
        log.error(f"A solution should have been found: {res.message}")
        return 2

    return match_result(
        result,
        on_success=report_solution,
        on_warnings=report_warnings,
        on_no_solution=report_failure,
        on_error=report_failure,
    )


if __name__ == "__main__":
    sys.exit(main())
