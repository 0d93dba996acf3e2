from __future__ import annotations

import json

import pytest

from contracts.errors import ConfigError, InvalidPuzzleError
from orchestrator import log
from ports import solver_port
from ports.strategy_config import Strategy
from solver.grid import Grid, preserves_clues
from solver.result import SolveStatus

from puzzles import CLASSIC_PUZZLE, CLASSIC_SOLUTION, DUPLICATE_ROW_PUZZLE

_COMPLETE = ("backtracking", "exact_cover")


@pytest.fixture
def event_dir(tmp_path, monkeypatch):
    monkeypatch.setattr(log, "_LOG_DIR", None)
    monkeypatch.setattr(log, "_MAX_BYTES", None)
    monkeypatch.setattr(log, "_CURRENT_PATH", None)
    log.configure(tmp_path / "events")
    return tmp_path / "events"


def _read_events(root) -> list[dict]:
    events = []
    for path in sorted(root.rglob("*.jsonl")):
        events.extend(json.loads(line) for line in path.read_text("utf-8").splitlines())
    return events


@pytest.mark.parametrize("strategy", list(Strategy))
def test_conflicting_clues_are_rejected_by_every_strategy(strategy: Strategy, duplicate_row: Grid):
    result = solver_port.solve(duplicate_row, {"strategy": strategy, "seed": 0})
    assert result.status is SolveStatus.INVALID_PUZZLE
    assert result.strategy == strategy.value
    assert result.grid is None
    assert [issue.path for issue in result.issues] == ["row:1/digit:5", "box:1/digit:5"]
    with pytest.raises(InvalidPuzzleError):
        result.unwrap()


@pytest.mark.parametrize("strategy", list(Strategy))
def test_full_grid_is_returned_unchanged(strategy: Strategy, classic_solution: Grid):
    result = solver_port.solve(classic_solution, {"strategy": strategy, "seed": 0})
    assert result.is_solved
    assert result.unwrap() == classic_solution


@pytest.mark.parametrize("strategy", _COMPLETE)
def test_complete_strategies_agree(strategy: str, classic: Grid):
    before = classic.copy()
    result = solver_port.solve(classic, {"strategy": strategy})
    assert result.grid == Grid.from_string(CLASSIC_SOLUTION)
    assert preserves_clues(classic, result.grid)
    assert classic == before


@pytest.mark.parametrize("strategy", _COMPLETE)
def test_unsatisfiable_puzzle_is_exhausted(strategy: str, contradiction: Grid):
    result = solver_port.solve(contradiction, {"strategy": strategy})
    assert result.status is SolveStatus.EXHAUSTED
    with pytest.raises(LookupError):
        result.unwrap()


def test_idempotent_for_seeded_annealing(near_complete: Grid):
    config = {"strategy": "annealing", "seed": 17, "max_iterations": 20_000}
    first = solver_port.solve(near_complete, config)
    second = solver_port.solve(near_complete, config)
    assert first.same_outcome(second)
    assert first.stats == second.stats


def test_accepts_strings_and_rows():
    by_string = solver_port.solve(CLASSIC_PUZZLE, {"strategy": "backtracking"})
    by_rows = solver_port.solve(Grid.from_string(CLASSIC_PUZZLE).to_rows(), {"strategy": "backtracking"})
    assert by_string.same_outcome(by_rows)


def test_default_strategy_comes_from_config(classic: Grid):
    assert solver_port.solve(classic).strategy == "exact_cover"
    assert solver_port.solve(classic, env={"SUDOKU_STRATEGY": "backtracking"}).strategy == "backtracking"


def test_payload_shape(classic: Grid):
    payload = solver_port.solve(classic, {"strategy": "exact_cover"}).to_payload()
    assert payload["status"] == "solved"
    assert payload["grid"] == CLASSIC_SOLUTION
    assert payload["digest"].startswith("sha256-")
    assert payload["issues"] == []
    assert set(payload["stats"]) == {"nodes", "backtracks", "max_depth", "rows"}


def test_solve_document_with_rows_and_strategy():
    rows = [[d or None for d in row] for row in Grid.from_string(CLASSIC_PUZZLE).to_rows()]
    result = solver_port.solve_document({"name": "classic", "grid": rows, "strategy": {"strategy": "backtracking"}})
    assert result.strategy == "backtracking"
    assert result.grid.to_string() == CLASSIC_SOLUTION


@pytest.mark.parametrize(
    "document",
    [
        {},
        {"grid": "123"},
        {"grid": CLASSIC_PUZZLE, "strategy": {"strategy": "brute-force"}},
        {"grid": CLASSIC_PUZZLE, "strategy": {"cooling_factor": 1.5}},
        {"grid": CLASSIC_PUZZLE, "extra": True},
    ],
)
def test_solve_document_rejects_schema_violations(document: dict):
    with pytest.raises(ConfigError) as exc:
        solver_port.solve_document(document)
    assert exc.value.code == "schema-invalid"


def test_solve_document_strict_raises_on_conflicts():
    document = {"grid": DUPLICATE_ROW_PUZZLE}
    assert solver_port.solve_document(document).status is SolveStatus.INVALID_PUZZLE
    with pytest.raises(InvalidPuzzleError) as exc:
        solver_port.solve_document(document, strict=True)
    assert exc.value.issues[0].code == "duplicate-clue"


def test_events_written_when_enabled(event_dir, classic: Grid, duplicate_row: Grid):
    solver_port.solve(classic, {"strategy": "backtracking"}, env={"SUDOKU_EVENTS": "1"})
    solver_port.solve(duplicate_row, {"strategy": "exact_cover"}, log_events=True)
    solver_port.solve(classic, {"strategy": "exact_cover"})

    events = _read_events(event_dir)
    assert [event["status"] for event in events] == ["solved", "invalid_puzzle"]
    first, second = events
    assert first["type"] == "sudoku.solve.v1"
    assert first["strategy"] == "backtracking"
    assert first["clues"] == 30
    assert first["solution_digest"].startswith("sha256-")
    assert first["time_ms"] >= 0
    assert "ts" in first
    assert second["issues"] == ["row:1/digit:5", "box:1/digit:5"]
    assert second["solution_digest"] is None
