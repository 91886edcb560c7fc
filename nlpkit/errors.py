"""Exception hierarchy for nlpkit.

Composition and dispatch configuration problems raise one of these errors.
Outcomes of a solve that actually ran (no solution, backend failure) are not
exceptions; they are returned as :mod:`nlpkit.optimization.result` values.
"""

from __future__ import annotations


class NlpkitError(Exception):
    """Base class for all nlpkit errors."""


class DimensionMismatch(NlpkitError, ValueError):
    """An argument vector does not have the expected length."""

    def __init__(self, expected: int, actual: int, what: str = "argument"):
        self.expected = expected
        self.actual = actual
        super().__init__(f"{what} has size {actual}, expected {expected}")


class ShapeMismatch(NlpkitError, ValueError):
    """Bounds, scales and function output sizes disagree."""


class InvalidInterval(NlpkitError, ValueError):
    """Interval with lower bound above upper bound or NaN bounds."""


class InvalidScale(NlpkitError, ValueError):
    """Scale factor that is not a finite positive number."""


class UnknownBackend(NlpkitError, LookupError):
    """No solver backend registered under the requested identifier."""

    def __init__(self, backend_id: str, available: list[str] | None = None):
        self.backend_id = backend_id
        self.available = list(available or [])
        msg = f"Unknown solver backend '{backend_id}'"
        if self.available:
            msg += f" (available: {', '.join(self.available)})"
        super().__init__(msg)


class CapabilityMismatch(NlpkitError, TypeError):
    """A function does not provide the capabilities a consumer requires."""
