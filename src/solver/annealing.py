"""Simulated annealing over box-preserving swaps.

Every box is first completed to a permutation of 1..9 around its clues, so
only row and column duplicates remain.  The energy is the number of
``(row, digit)`` and ``(column, digit)`` pairs that occur more than once; it
is zero exactly when the grid is solved.  Moves swap two non-clue cells of
one box and are accepted with the Metropolis rule.
"""

from __future__ import annotations

import logging
import math
import random
from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

from contracts.errors import ConfigError

from .grid import SIZE, Grid, box_cells
from .result import SolveResult

_LOGGER = logging.getLogger(__name__)

STRATEGY = "annealing"


@dataclass(frozen=True)
class AnnealingParams:
    initial_temperature: float = 0.5
    cooling_factor: float = 0.99
    cooling_interval: int = 100
    min_temperature: float = 0.01
    max_iterations: int = 200_000
    seed: Optional[int] = None

    def __post_init__(self) -> None:
        for name in ("initial_temperature", "cooling_factor", "min_temperature"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, (int, float)):
                raise ConfigError(name, f"expected a number, got {value!r}")
        for name in ("cooling_interval", "max_iterations", "seed"):
            value = getattr(self, name)
            if value is None and name == "seed":
                continue
            if isinstance(value, bool) or not isinstance(value, int):
                raise ConfigError(name, f"expected an integer, got {value!r}")
        if not self.initial_temperature > 0:
            raise ConfigError("initial_temperature", "must be > 0")
        if not 0 < self.cooling_factor < 1:
            raise ConfigError("cooling_factor", "must be in (0, 1)")
        if self.cooling_interval < 1:
            raise ConfigError("cooling_interval", "must be >= 1")
        if not self.min_temperature > 0:
            raise ConfigError("min_temperature", "must be > 0")
        if self.max_iterations < 1:
            raise ConfigError("max_iterations", "must be >= 1")
        if self.seed is not None and self.seed < 0:
            raise ConfigError("seed", "must be >= 0")


class AnnealingState:
    """Working cells plus the row/column digit counts behind the energy."""

    def __init__(self, cells: Sequence[int], fixed: Sequence[bool]) -> None:
        self.cells = list(cells)
        self.fixed = list(fixed)
        self.row_counts = [[0] * (SIZE + 1) for _ in range(SIZE)]
        self.col_counts = [[0] * (SIZE + 1) for _ in range(SIZE)]
        for index, digit in enumerate(self.cells):
            row, col = divmod(index, SIZE)
            self.row_counts[row][digit] += 1
            self.col_counts[col][digit] += 1
        self.energy = self.full_energy()

    def full_energy(self) -> int:
        dup_rows = sum(1 for counts in self.row_counts for n in counts[1:] if n > 1)
        dup_cols = sum(1 for counts in self.col_counts for n in counts[1:] if n > 1)
        return dup_rows + dup_cols

    def _touched(self, a: int, b: int) -> List[Tuple[List[int], int]]:
        ra, ca = divmod(a, SIZE)
        rb, cb = divmod(b, SIZE)
        da, db = self.cells[a], self.cells[b]
        units = (self.row_counts[ra], self.row_counts[rb], self.col_counts[ca], self.col_counts[cb])
        tables = {id(t): t for t in units}
        return [(table, digit) for table in tables.values() for digit in (da, db)]

    def swap_delta(self, a: int, b: int) -> int:
        """Energy change if the digits in cells ``a`` and ``b`` were swapped."""

        if self.cells[a] == self.cells[b]:
            return 0
        touched = self._touched(a, b)
        before = sum(1 for table, digit in touched if table[digit] > 1)
        self._move(a, b)
        after = sum(1 for table, digit in touched if table[digit] > 1)
        self._move(a, b)
        return after - before

    def swap(self, a: int, b: int, delta: int) -> None:
        self._move(a, b)
        self.energy += delta

    def _move(self, a: int, b: int) -> None:
        ra, ca = divmod(a, SIZE)
        rb, cb = divmod(b, SIZE)
        da, db = self.cells[a], self.cells[b]
        self.row_counts[ra][da] -= 1
        self.col_counts[ca][da] -= 1
        self.row_counts[rb][db] -= 1
        self.col_counts[cb][db] -= 1
        self.row_counts[ra][db] += 1
        self.col_counts[ca][db] += 1
        self.row_counts[rb][da] += 1
        self.col_counts[cb][da] += 1
        self.cells[a], self.cells[b] = db, da


def initial_fill(puzzle: Grid, rng: random.Random) -> List[int]:
    """Complete every box to a permutation of 1..9 keeping the clues in place."""

    cells = list(puzzle)
    for box in range(SIZE):
        coords = box_cells(box)
        present = {puzzle.get(r, c) for r, c in coords} - {0}
        missing = [d for d in range(1, SIZE + 1) if d not in present]
        rng.shuffle(missing)
        free = [r * SIZE + c for r, c in coords if not puzzle.get(r, c)]
        for index, digit in zip(free, missing):
            cells[index] = digit
    return cells


class AnnealingSolver:
    """Best-effort stochastic solver.

    ``Exhausted`` here only means the iteration budget ran out; it says
    nothing about whether the puzzle has a solution.
    """

    name = STRATEGY

    def __init__(self, params: AnnealingParams | None = None, *, rng: random.Random | None = None) -> None:
        self.params = params or AnnealingParams()
        self._rng = rng

    def solve(self, puzzle: Grid) -> SolveResult:
        params = self.params
        rng = self._rng if self._rng is not None else random.Random(params.seed)
        fixed = [bool(d) for d in puzzle]
        state = AnnealingState(initial_fill(puzzle, rng), fixed)

        free_by_box = [
            [r * SIZE + c for r, c in box_cells(b) if not fixed[r * SIZE + c]] for b in range(SIZE)
        ]
        movable = [cells for cells in free_by_box if len(cells) >= 2]

        temperature = params.initial_temperature
        best = state.energy
        accepted = 0
        iterations = 0
        _LOGGER.debug("annealing start: energy=%d movable_boxes=%d", state.energy, len(movable))

        while state.energy > 0 and movable and iterations < params.max_iterations:
            iterations += 1
            box = movable[rng.randrange(len(movable))]
            a, b = rng.sample(box, 2)
            delta = state.swap_delta(a, b)
            if delta <= 0 or rng.random() < math.exp(-delta / temperature):
                state.swap(a, b, delta)
                accepted += 1
                if state.energy < best:
                    best = state.energy
            if iterations % params.cooling_interval == 0:
                temperature = max(params.min_temperature, temperature * params.cooling_factor)

        stats = {
            "iterations": iterations,
            "accepted": accepted,
            "best_energy": best,
            "final_energy": state.energy,
            "final_temperature": temperature,
        }
        _LOGGER.debug("annealing %s: %s", "solved" if state.energy == 0 else "exhausted", stats)
        if state.energy == 0:
            return SolveResult.solved(Grid(state.cells), STRATEGY, **stats)
        return SolveResult.exhausted(STRATEGY, **stats)


__all__ = [
    "AnnealingParams",
    "AnnealingSolver",
    "AnnealingState",
    "STRATEGY",
    "initial_fill",
]
