"""Algorithm X over an index-addressed Dancing Links arena.

Node ``0`` is the root header, nodes ``1..n_columns`` are column headers
and every later node belongs to a matrix row.  Links are plain integer
indices into parallel lists, so covering a column splices indices out and
uncovering splices them back in reverse order, leaving the arena exactly as
it was before the cover.
"""

from __future__ import annotations

import logging
from typing import Iterator, List, Sequence, Tuple

from .grid import CELLS, SIZE, Grid, box_index
from .result import SolveResult

_LOGGER = logging.getLogger(__name__)

STRATEGY = "exact_cover"

ROOT = 0
# Column blocks: cell filled | row has digit | column has digit | box has digit.
CELL_OFFSET = 0
ROW_OFFSET = CELLS
COL_OFFSET = 2 * CELLS
BOX_OFFSET = 3 * CELLS
N_COLUMNS = 4 * CELLS


class DancingLinks:
    """Sparse 0/1 matrix supporting O(1) cover and exact uncover."""

    def __init__(self, n_columns: int) -> None:
        self.n_columns = n_columns
        headers = range(n_columns + 1)
        self.left = [i - 1 for i in headers]
        self.right = [i + 1 for i in headers]
        self.left[ROOT] = n_columns
        self.right[n_columns] = ROOT
        self.up = list(headers)
        self.down = list(headers)
        self.column = list(headers)
        self.row_id = [-1] * (n_columns + 1)
        self.size = [0] * (n_columns + 1)
        self.n_rows = 0
        self.nodes = 0
        self.backtracks = 0
        self.max_depth = 0
        self._partial: List[int] = []

    def add_row(self, columns: Sequence[int]) -> int:
        """Append a row covering the 0-based ``columns``; return its row id."""

        row = self.n_rows
        first = -1
        for col in columns:
            header = col + 1
            node = len(self.left)
            self.column.append(header)
            self.row_id.append(row)
            # vertical: insert above the header, i.e. at the bottom of the column
            self.up.append(self.up[header])
            self.down.append(header)
            self.down[self.up[header]] = node
            self.up[header] = node
            self.size[header] += 1
            # horizontal: circular list through the row's nodes
            if first < 0:
                first = node
                self.left.append(node)
                self.right.append(node)
            else:
                last = self.left[first]
                self.left.append(last)
                self.right.append(first)
                self.right[last] = node
                self.left[first] = node
        self.n_rows += 1
        return row

    def cover(self, header: int) -> None:
        left, right, up, down = self.left, self.right, self.up, self.down
        right[left[header]] = right[header]
        left[right[header]] = left[header]
        i = down[header]
        while i != header:
            j = right[i]
            while j != i:
                down[up[j]] = down[j]
                up[down[j]] = up[j]
                self.size[self.column[j]] -= 1
                j = right[j]
            i = down[i]

    def uncover(self, header: int) -> None:
        left, right, up, down = self.left, self.right, self.up, self.down
        i = up[header]
        while i != header:
            j = left[i]
            while j != i:
                self.size[self.column[j]] += 1
                down[up[j]] = j
                up[down[j]] = j
                j = left[j]
            i = up[i]
        right[left[header]] = header
        left[right[header]] = header

    def choose_column(self) -> int:
        """Uncovered header with the fewest rows; the lowest index wins ties."""

        best = ROOT
        best_size = -1
        c = self.right[ROOT]
        while c != ROOT:
            if best == ROOT or self.size[c] < best_size:
                best, best_size = c, self.size[c]
                if best_size == 0:
                    break
            c = self.right[c]
        return best

    def snapshot(self) -> Tuple[Tuple[int, ...], ...]:
        return (
            tuple(self.left),
            tuple(self.right),
            tuple(self.up),
            tuple(self.down),
            tuple(self.size),
        )

    def solutions(self) -> Iterator[Tuple[int, ...]]:
        """Yield exact covers as tuples of row ids, in search order.

        Abandoning the iterator early still uncovers every column it
        covered, so the arena is left intact either way.
        """

        self._partial = []
        yield from self._search(0)

    def _search(self, depth: int) -> Iterator[Tuple[int, ...]]:
        if depth > self.max_depth:
            self.max_depth = depth
        if self.right[ROOT] == ROOT:
            yield tuple(self._partial)
            return
        header = self.choose_column()
        if self.size[header] == 0:
            return
        self.cover(header)
        try:
            r = self.down[header]
            while r != header:
                self.nodes += 1
                self._partial.append(self.row_id[r])
                j = self.right[r]
                while j != r:
                    self.cover(self.column[j])
                    j = self.right[j]
                try:
                    found = False
                    for cover in self._search(depth + 1):
                        found = True
                        yield cover
                    if not found:
                        self.backtracks += 1
                finally:
                    j = self.left[r]
                    while j != r:
                        self.uncover(self.column[j])
                        j = self.left[j]
                    self._partial.pop()
                r = self.down[r]
        finally:
            self.uncover(header)


def constraint_columns(row: int, col: int, digit: int) -> Tuple[int, int, int, int]:
    """The four 0-based constraint columns satisfied by ``digit`` at ``(row, col)``."""

    d = digit - 1
    return (
        CELL_OFFSET + row * SIZE + col,
        ROW_OFFSET + row * SIZE + d,
        COL_OFFSET + col * SIZE + d,
        BOX_OFFSET + box_index(row, col) * SIZE + d,
    )


class ExactCoverMatrix:
    """The 324-column Sudoku exact-cover matrix for one puzzle snapshot.

    A clue contributes a single row; an empty cell contributes one row per
    digit that does not clash with a clue in its row, column or box.
    """

    def __init__(self, puzzle: Grid) -> None:
        self.puzzle = puzzle
        self.links = DancingLinks(N_COLUMNS)
        self.placements: List[Tuple[int, int, int]] = []
        for index in range(CELLS):
            row, col = divmod(index, SIZE)
            clue = puzzle.get(row, col)
            digits = [clue] if clue else [d for d in range(1, SIZE + 1) if puzzle.is_legal(row, col, d)]
            for digit in digits:
                self.links.add_row(constraint_columns(row, col, digit))
                self.placements.append((row, col, digit))

    @property
    def n_rows(self) -> int:
        return self.links.n_rows

    def to_grid(self, cover: Sequence[int]) -> Grid:
        grid = self.puzzle.copy()
        for row_id in cover:
            row, col, digit = self.placements[row_id]
            if not grid.get(row, col):
                grid.place(row, col, digit)
        return grid

    def count_solutions(self, limit: int = 2) -> int:
        """Count exact covers, stopping once ``limit`` have been seen."""

        count = 0
        search = self.links.solutions()
        try:
            for _ in search:
                count += 1
                if count >= limit:
                    break
        finally:
            search.close()
        return count


class ExactCoverSolver:
    """Solve by building a fresh :class:`ExactCoverMatrix` per call."""

    name = STRATEGY

    def solve(self, puzzle: Grid) -> SolveResult:
        matrix = ExactCoverMatrix(puzzle)
        links = matrix.links
        _LOGGER.debug("exact cover start: %d candidate rows", matrix.n_rows)
        search = links.solutions()
        try:
            cover = next(search, None)
        finally:
            search.close()
        stats = {
            "nodes": links.nodes,
            "backtracks": links.backtracks,
            "max_depth": links.max_depth,
            "rows": matrix.n_rows,
        }
        _LOGGER.debug("exact cover %s: %s", "solved" if cover is not None else "exhausted", stats)
        if cover is None:
            return SolveResult.exhausted(STRATEGY, **stats)
        return SolveResult.solved(matrix.to_grid(cover), STRATEGY, **stats)


__all__ = [
    "DancingLinks",
    "ExactCoverMatrix",
    "ExactCoverSolver",
    "N_COLUMNS",
    "STRATEGY",
    "constraint_columns",
]
