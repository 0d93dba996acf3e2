"""Public entry points of the solving engine."""

from __future__ import annotations

from .solver_port import as_config, as_grid, solve, solve_document
from .strategy_config import Strategy, StrategyConfig, resolve_strategy_config

__all__ = [
    "Strategy",
    "StrategyConfig",
    "as_config",
    "as_grid",
    "resolve_strategy_config",
    "solve",
    "solve_document",
]
