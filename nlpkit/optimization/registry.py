"""
Named registry of solver backends.

A registry maps an identifier (case-insensitive) to a factory that accepts a
backend configuration and returns a :class:`SolverBackend`. Backend classes
are valid factories since their constructor takes the configuration.

The default registry is populated from a fixed table of built-in backends the
first time it is requested.
"""

from __future__ import annotations

from typing import Any, Callable, Dict, Iterable, List, Optional

from nlpkit.errors import UnknownBackend
from nlpkit.logging import get_logger
from nlpkit.optimization.base import SolverBackend

log = get_logger(__name__)

BackendFactory = Callable[[Any], SolverBackend]


class BackendRegistry:
    """Mapping from backend identifier to backend factory."""

    def __init__(self) -> None:
        self._factories: Dict[str, BackendFactory] = {}
        self._aliases: Dict[str, str] = {}

    @staticmethod
    def _key(name: str) -> str:
        return name.strip().lower()

    def register(
        self,
        name: str,
        factory: BackendFactory,
        *,
        aliases: Iterable[str] = (),
        overwrite: bool = False,
    ) -> None:
        """Register *factory* under *name* and optional *aliases*."""
        key = self._key(name)
        keys = [key] + [self._key(a) for a in aliases]
        if not overwrite:
            taken = [k for k in keys if k in self._factories or k in self._aliases]
            if taken:
                raise ValueError(f"Backend identifier(s) already registered: {', '.join(taken)}")
        self._factories[key] = factory
        for alias in keys[1:]:
            self._aliases[alias] = key
        log.debug(f"Registered solver backend: {key}")

    def resolve(self, name: str) -> str:
        """Return the canonical identifier for *name* or raise UnknownBackend."""
        if not isinstance(name, str):
            raise UnknownBackend(repr(name), self.names())
        key = self._key(name)
        key = self._aliases.get(key, key)
        if key not in self._factories:
            raise UnknownBackend(name, self.names())
        return key

    def get(self, name: str) -> BackendFactory:
        return self._factories[self.resolve(name)]

    def create(self, name: str, config: Any = None) -> SolverBackend:
        """Instantiate the backend registered as *name* with *config*."""
        return self.get(name)(config)

    def names(self) -> List[str]:
        return sorted(self._factories)

    def __contains__(self, name: object) -> bool:
        if not isinstance(name, str):
            return False
        key = self._key(name)
        return key in self._factories or key in self._aliases

    def __len__(self) -> int:
        return len(self._factories)


def _register_builtin_backends(registry: BackendRegistry) -> None:
    from nlpkit.optimization.ipopt_backend import IpoptBackend
    from nlpkit.optimization.scipy_backends import (
        LBFGSBBackend,
        SLSQPBackend,
        TrustConstrBackend,
    )

    registry.register(SLSQPBackend.name, SLSQPBackend, aliases=("slsqp",))
    registry.register(TrustConstrBackend.name, TrustConstrBackend, aliases=("trust-constr",))
    registry.register(LBFGSBBackend.name, LBFGSBBackend, aliases=("lbfgsb", "l-bfgs-b"))
    registry.register(IpoptBackend.name, IpoptBackend)


_DEFAULT_REGISTRY: Optional[BackendRegistry] = None


def default_registry() -> BackendRegistry:
    """Return the process-wide registry holding the built-in backends."""
    global _DEFAULT_REGISTRY
    if _DEFAULT_REGISTRY is None:
        registry = BackendRegistry()
        _register_builtin_backends(registry)
        _DEFAULT_REGISTRY = registry
    return _DEFAULT_REGISTRY


def register_backend(
    name: str,
    factory: BackendFactory,
    *,
    aliases: Iterable[str] = (),
    overwrite: bool = False,
) -> None:
    """Register a backend in the default registry."""
    default_registry().register(name, factory, aliases=aliases, overwrite=overwrite)


def list_backends() -> List[str]:
    return default_registry().names()
