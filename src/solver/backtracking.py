"""Depth-first search with the most-constrained-cell heuristic."""

from __future__ import annotations

import logging
from typing import Optional, Tuple

from .bits import iter_digits, popcount
from .grid import SIZE, Grid
from .result import SolveResult

_LOGGER = logging.getLogger(__name__)

STRATEGY = "backtracking"


class BacktrackingSolver:
    """Recursive backtracking over a private copy of the puzzle.

    At every level the empty cell with the fewest legal digits is chosen
    (row-major order breaks ties) and its digits are tried in ascending
    order.  A cell with no legal digit fails the branch.  The search is
    deterministic and its depth is bounded by the number of empty cells.
    """

    name = STRATEGY

    def __init__(self) -> None:
        self.nodes = 0
        self.backtracks = 0
        self.max_depth = 0

    def _select_cell(self, grid: Grid) -> Optional[Tuple[int, int, int]]:
        best: Optional[Tuple[int, int, int]] = None
        best_count = SIZE + 1
        for row, col in grid.empty_cells():
            mask = grid.candidates(row, col)
            count = popcount(mask)
            if count < best_count:
                best, best_count = (row, col, mask), count
                if count <= 1:
                    break
        return best

    def _search(self, grid: Grid, depth: int) -> bool:
        if depth > self.max_depth:
            self.max_depth = depth
        cell = self._select_cell(grid)
        if cell is None:
            return True
        row, col, mask = cell
        for digit in iter_digits(mask):
            self.nodes += 1
            grid.place(row, col, digit)
            if self._search(grid, depth + 1):
                return True
            grid.remove(row, col)
            self.backtracks += 1
        return False

    def solve(self, puzzle: Grid) -> SolveResult:
        """Solve ``puzzle`` without mutating it.

        The clues must be conflict free; the facade checks that before
        calling in.
        """

        work = puzzle.copy()
        self.nodes = self.backtracks = self.max_depth = 0
        _LOGGER.debug("backtracking start: %d clues", work.clue_count())
        found = self._search(work, 0)
        stats = {"nodes": self.nodes, "backtracks": self.backtracks, "max_depth": self.max_depth}
        _LOGGER.debug("backtracking %s: %s", "solved" if found else "exhausted", stats)
        if found:
            return SolveResult.solved(work, STRATEGY, **stats)
        return SolveResult.exhausted(STRATEGY, **stats)


__all__ = ["BacktrackingSolver", "STRATEGY"]
