"""Registry of solving strategies keyed by name."""

from __future__ import annotations

from typing import Any, Callable, Dict, Protocol, Tuple

from contracts.errors import ConfigError

from .grid import Grid
from .result import SolveResult


class Solver(Protocol):
    name: str

    def solve(self, puzzle: Grid) -> SolveResult: ...


SolverFactory = Callable[[Any], Solver]

_STRATEGY_REGISTRY: Dict[str, SolverFactory] = {}


def register_strategy(name: str, factory: SolverFactory) -> None:
    """Register ``factory`` under ``name``.

    The factory receives the resolved strategy configuration and returns a
    fresh solver instance for a single call.
    """

    if not name:
        raise ValueError("strategy name must be a non-empty string")
    _STRATEGY_REGISTRY[name] = factory


def get_factory(name: str) -> SolverFactory:
    try:
        return _STRATEGY_REGISTRY[name]
    except KeyError as exc:
        raise ConfigError("unknown-strategy", name) from exc


def available_strategies() -> Tuple[str, ...]:
    return tuple(sorted(_STRATEGY_REGISTRY))


__all__ = ["Solver", "SolverFactory", "available_strategies", "get_factory", "register_strategy"]
