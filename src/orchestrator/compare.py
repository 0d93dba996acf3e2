"""Run two strategies on one puzzle and classify how their outcomes relate."""

from __future__ import annotations

import time
from dataclasses import dataclass
from typing import Any, Callable, Mapping, Tuple

from contracts.canon import grid_digest
from ports.solver_port import GridLike, as_config, as_grid, solve
from ports.strategy_config import Strategy, StrategyConfig
from solver.result import SolveResult, SolveStatus

from . import log

__all__ = ["CompareResult", "classify", "compare_strategies"]

MATCH = "match"
SOLUTION_DIFFERS = "solution-differs"
SOLVABILITY_MISMATCH = "solvability-mismatch"
INVALID = "invalid"


@dataclass(frozen=True)
class CompareResult:
    kind: str
    primary: SolveResult
    secondary: SolveResult
    timings: Mapping[str, float]
    event: Mapping[str, Any]

    @property
    def consistent(self) -> bool:
        """Both strategies agree on solvability (solutions may still differ)."""

        return self.kind in {MATCH, SOLUTION_DIFFERS, INVALID}


def classify(primary: SolveResult, secondary: SolveResult) -> str:
    """Name the relation between two outcomes for the same puzzle.

    ``solution-differs`` is only possible for puzzles with more than one
    solution; annealing exhausting its budget shows up as
    ``solvability-mismatch`` against a complete strategy.
    """

    statuses = {primary.status, secondary.status}
    if SolveStatus.INVALID_PUZZLE in statuses:
        return INVALID if len(statuses) == 1 else SOLVABILITY_MISMATCH
    if primary.status is not secondary.status:
        return SOLVABILITY_MISMATCH
    if primary.status is SolveStatus.SOLVED and primary.grid != secondary.grid:
        return SOLUTION_DIFFERS
    return MATCH


def _timed(runner: Callable[[], SolveResult]) -> Tuple[SolveResult, float]:
    start = time.perf_counter()
    result = runner()
    return result, (time.perf_counter() - start) * 1000


def compare_strategies(
    grid: GridLike,
    primary: Strategy | str = Strategy.BACKTRACKING,
    secondary: Strategy | str = Strategy.EXACT_COVER,
    *,
    base: StrategyConfig | Mapping[str, Any] | None = None,
    env: Mapping[str, str] | None = None,
    log_events: bool | None = None,
) -> CompareResult:
    """Solve ``grid`` with both strategies and report the comparison.

    ``base`` supplies shared settings (annealing parameters, seed); only the
    strategy differs between the two runs.
    """

    puzzle = as_grid(grid)
    config = as_config(base, env=env)
    first = as_config({**config.to_payload(), "strategy": Strategy.from_value(primary)})
    second = as_config({**config.to_payload(), "strategy": Strategy.from_value(secondary)})

    primary_result, primary_ms = _timed(lambda: solve(puzzle, first, env=env, log_events=False))
    secondary_result, secondary_ms = _timed(lambda: solve(puzzle, second, env=env, log_events=False))
    kind = classify(primary_result, secondary_result)

    event = {
        "type": "sudoku.compare.v1",
        "puzzle_digest": grid_digest(puzzle),
        "primary": first.strategy.value,
        "secondary": second.strategy.value,
        "primary_status": primary_result.status.value,
        "secondary_status": secondary_result.status.value,
        "kind": kind,
        "time_ms_primary": round(primary_ms, 3),
        "time_ms_secondary": round(secondary_ms, 3),
    }
    if log_events if log_events is not None else log.events_enabled(env):
        log.append_event(event)

    return CompareResult(
        kind=kind,
        primary=primary_result,
        secondary=secondary_result,
        timings={"primary_ms": primary_ms, "secondary_ms": secondary_ms},
        event=event,
    )
