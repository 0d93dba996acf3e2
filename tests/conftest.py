from __future__ import annotations

import os

import pytest

import project_config
from puzzles import CLASSIC_PUZZLE, CLASSIC_SOLUTION, CONTRADICTION_PUZZLE, DUPLICATE_ROW_PUZZLE
from solver.grid import Grid


@pytest.fixture(autouse=True)
def _isolated_config(monkeypatch):
    for key in list(os.environ):
        if key.startswith(("SUDOKU_", "CLI_SUDOKU_")):
            monkeypatch.delenv(key, raising=False)
    project_config.reload()
    yield
    project_config.reload()


@pytest.fixture
def classic() -> Grid:
    return Grid.from_string(CLASSIC_PUZZLE)


@pytest.fixture
def classic_solution() -> Grid:
    return Grid.from_string(CLASSIC_SOLUTION)


@pytest.fixture
def contradiction() -> Grid:
    return Grid.from_string(CONTRADICTION_PUZZLE)


@pytest.fixture
def duplicate_row() -> Grid:
    return Grid.from_string(DUPLICATE_ROW_PUZZLE)


@pytest.fixture
def near_complete(classic_solution: Grid) -> Grid:
    """The classic solution with a few blanks spread over several boxes."""

    grid = classic_solution.copy()
    for row, col in [(0, 0), (1, 1), (2, 2), (0, 4), (1, 3), (4, 4), (5, 5), (8, 8), (7, 6), (6, 7)]:
        grid.remove(row, col)
    return grid
