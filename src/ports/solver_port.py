"""Facade for the solving strategies.

``solve`` checks the clues, resolves the strategy configuration, runs the
registered solver on a private copy of the grid and returns a normalised
:class:`~solver.result.SolveResult`.  Conflicting clues never reach a solver.
"""

from __future__ import annotations

import logging
import time
from typing import Any, Mapping, Optional, Sequence, Union

from contracts.canon import grid_digest
from contracts.errors import GridFormatError, InvalidPuzzleError
from contracts.schema import validate_document
from orchestrator import log
from solver import get_factory
from solver.grid import Grid, find_conflicts
from solver.result import SolveResult, SolveStatus

from .strategy_config import StrategyConfig, resolve_strategy_config

_LOGGER = logging.getLogger(__name__)

GridLike = Union[Grid, str, Sequence[Sequence[Optional[int]]]]
ConfigLike = Union[StrategyConfig, Mapping[str, Any], None]


def as_grid(value: GridLike) -> Grid:
    """Accept a :class:`Grid`, an 81-character string or 9x9 nested rows."""

    if isinstance(value, Grid):
        return value
    if isinstance(value, str):
        return Grid.from_string(value)
    if isinstance(value, Sequence):
        return Grid.from_rows(value)
    raise GridFormatError(f"unsupported grid input: {type(value)!r}")


def as_config(value: ConfigLike, *, env: Mapping[str, str] | None = None) -> StrategyConfig:
    if isinstance(value, StrategyConfig):
        return value
    return resolve_strategy_config(value, env=env)


def _emit_event(puzzle: Grid, config: StrategyConfig, result: SolveResult, elapsed_ms: float) -> None:
    log.append_event(
        {
            "type": "sudoku.solve.v1",
            "strategy": config.strategy.value,
            "seed": config.seed,
            "status": result.status.value,
            "puzzle_digest": grid_digest(puzzle),
            "clues": puzzle.clue_count(),
            "solution_digest": None if result.grid is None else grid_digest(result.grid),
            "time_ms": round(elapsed_ms, 3),
            "stats": dict(result.stats),
            "issues": [issue.path for issue in result.issues],
        }
    )


def solve(
    grid: GridLike,
    strategy_config: ConfigLike = None,
    *,
    env: Mapping[str, str] | None = None,
    log_events: bool | None = None,
) -> SolveResult:
    """Solve ``grid`` with the configured strategy.

    Parameters
    ----------
    grid:
        The puzzle.  It is never mutated.
    strategy_config:
        A :class:`StrategyConfig`, a mapping of explicit overrides layered
        over ``config.toml`` and the environment, or ``None`` for the
        configured defaults.
    env:
        Extra environment entries merged over ``os.environ`` while resolving
        settings.
    log_events:
        Force the JSONL run event on or off; ``None`` follows the
        ``[events]`` configuration.

    Returns
    -------
    SolveResult
        ``solved`` with the completed grid, ``exhausted`` when no solution
        was found, or ``invalid_puzzle`` listing the clashing clues.
    """

    puzzle = as_grid(grid)
    config = as_config(strategy_config, env=env)
    strategy = config.strategy.value

    start = time.perf_counter()
    issues = find_conflicts(puzzle)
    if issues:
        _LOGGER.info("%s: rejected puzzle with %d conflicting clue(s)", strategy, len(issues))
        result = SolveResult.invalid(strategy, tuple(issues))
    else:
        solver = get_factory(strategy)(config)
        result = solver.solve(puzzle.copy())
    elapsed_ms = (time.perf_counter() - start) * 1000
    _LOGGER.debug("%s finished with %s in %.1f ms", strategy, result.status.value, elapsed_ms)

    if log_events if log_events is not None else log.events_enabled(env):
        _emit_event(puzzle, config, result, elapsed_ms)
    return result


def solve_document(
    payload: Mapping[str, Any],
    *,
    env: Mapping[str, str] | None = None,
    strict: bool = False,
    log_events: bool | None = None,
) -> SolveResult:
    """Validate a JSON puzzle document and solve it.

    Raises :class:`~contracts.errors.ConfigError` when the document breaks
    the schema.  With ``strict=True`` conflicting clues raise
    :class:`~contracts.errors.InvalidPuzzleError` instead of being returned.
    """

    validate_document(dict(payload), "PuzzleDocument")
    config = resolve_strategy_config(payload.get("strategy"), env=env)
    result = solve(payload["grid"], config, env=env, log_events=log_events)
    if strict and result.status is SolveStatus.INVALID_PUZZLE:
        raise InvalidPuzzleError(result.issues)
    return result


__all__ = ["as_config", "as_grid", "solve", "solve_document"]
