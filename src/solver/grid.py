"""9x9 grid model with incremental row/column/box digit masks."""

from __future__ import annotations

from typing import Iterable, Iterator, List, Optional, Sequence, Tuple

from contracts.errors import ConstraintViolation, GridFormatError, ValidationIssue, make_error

from .bits import FULL_MASK, clear_bit, digit_bit, has_bit, popcount

SIZE = 9
BOX = 3
CELLS = SIZE * SIZE
EMPTY = 0

_EMPTY_CHARS = {"0", "."}
_DIGIT_CHARS = "123456789"


def box_index(row: int, col: int) -> int:
    return (row // BOX) * BOX + col // BOX


def box_cells(box: int) -> List[Tuple[int, int]]:
    """Return the ``(row, col)`` coordinates of ``box`` in row-major order."""

    top, left = (box // BOX) * BOX, (box % BOX) * BOX
    return [(top + dr, left + dc) for dr in range(BOX) for dc in range(BOX)]


def _check_digit(value: object, where: str) -> int:
    if value is None:
        return EMPTY
    if isinstance(value, bool) or not isinstance(value, int):
        raise GridFormatError(f"{where}: expected an int digit, got {value!r}")
    if not 0 <= value <= SIZE:
        raise GridFormatError(f"{where}: digit {value} out of range 0..{SIZE}")
    return value


class Grid:
    """Mutable 9x9 Sudoku grid.

    Empty cells hold ``0``.  ``row_masks``, ``col_masks`` and ``box_masks``
    mirror the filled cells after every :meth:`place` / :meth:`remove`.
    A grid loaded from input may contain duplicate clues; :meth:`place`
    never creates new ones.
    """

    __slots__ = ("_cells", "row_masks", "col_masks", "box_masks")

    def __init__(self, cells: Optional[Sequence[int]] = None) -> None:
        if cells is None:
            cells = [EMPTY] * CELLS
        if len(cells) != CELLS:
            raise GridFormatError(f"expected {CELLS} cells, got {len(cells)}")
        self._cells = [_check_digit(v, f"cell {i}") for i, v in enumerate(cells)]
        self.row_masks = [0] * SIZE
        self.col_masks = [0] * SIZE
        self.box_masks = [0] * SIZE
        for index, digit in enumerate(self._cells):
            if digit:
                row, col = divmod(index, SIZE)
                bit = digit_bit(digit)
                self.row_masks[row] |= bit
                self.col_masks[col] |= bit
                self.box_masks[box_index(row, col)] |= bit

    # Construction -------------------------------------------------------

    @classmethod
    def empty(cls) -> "Grid":
        return cls()

    @classmethod
    def from_rows(cls, rows: Sequence[Sequence[Optional[int]]]) -> "Grid":
        if len(rows) != SIZE:
            raise GridFormatError(f"expected {SIZE} rows, got {len(rows)}")
        cells: List[int] = []
        for r, row in enumerate(rows):
            if len(row) != SIZE:
                raise GridFormatError(f"row {r + 1}: expected {SIZE} cells, got {len(row)}")
            cells.extend(_check_digit(v, f"r{r + 1}c{c + 1}") for c, v in enumerate(row))
        return cls(cells)

    @classmethod
    def from_string(cls, text: str) -> "Grid":
        """Parse 81 characters; ``0`` or ``.`` mark empty cells, whitespace is ignored."""

        compact = "".join(text.split())
        if len(compact) != CELLS:
            raise GridFormatError(f"expected {CELLS} characters, got {len(compact)}")
        cells = []
        for i, ch in enumerate(compact):
            if ch in _EMPTY_CHARS:
                cells.append(EMPTY)
            elif ch in _DIGIT_CHARS:
                cells.append(int(ch))
            else:
                raise GridFormatError(f"cell {i}: unexpected character {ch!r}")
        return cls(cells)

    def copy(self) -> "Grid":
        clone = Grid.__new__(Grid)
        clone._cells = self._cells[:]
        clone.row_masks = self.row_masks[:]
        clone.col_masks = self.col_masks[:]
        clone.box_masks = self.box_masks[:]
        return clone

    # Access -------------------------------------------------------------

    def get(self, row: int, col: int) -> int:
        return self._cells[row * SIZE + col]

    def __getitem__(self, key: Tuple[int, int]) -> int:
        row, col = key
        return self.get(row, col)

    def __iter__(self) -> Iterator[int]:
        return iter(self._cells)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Grid):
            return NotImplemented
        return self._cells == other._cells

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"Grid({self.to_string()!r})"

    def cells(self) -> Tuple[int, ...]:
        return tuple(self._cells)

    def to_rows(self) -> List[List[int]]:
        return [self._cells[r * SIZE:(r + 1) * SIZE] for r in range(SIZE)]

    def to_string(self, empty: str = "0") -> str:
        return "".join(str(d) if d else empty for d in self._cells)

    def empty_cells(self) -> Iterator[Tuple[int, int]]:
        for index, digit in enumerate(self._cells):
            if not digit:
                yield divmod(index, SIZE)

    def clue_count(self) -> int:
        return sum(1 for d in self._cells if d)

    # Mutation -----------------------------------------------------------

    def place(self, row: int, col: int, digit: int) -> None:
        """Put ``digit`` into the empty cell ``(row, col)``.

        Raises :class:`ConstraintViolation` when the cell is filled, the digit
        is outside 1..9 or the digit already sits in the row, column or box.
        """

        if not 1 <= digit <= SIZE:
            raise ConstraintViolation(row, col, digit, "digit-out-of-range")
        index = row * SIZE + col
        if self._cells[index]:
            raise ConstraintViolation(row, col, digit, "cell-occupied")
        if not self.is_legal(row, col, digit):
            raise ConstraintViolation(row, col, digit, "duplicate-digit")
        bit = digit_bit(digit)
        self._cells[index] = digit
        self.row_masks[row] |= bit
        self.col_masks[col] |= bit
        self.box_masks[box_index(row, col)] |= bit

    def remove(self, row: int, col: int) -> int:
        """Clear ``(row, col)`` and return the digit it held."""

        index = row * SIZE + col
        digit = self._cells[index]
        if not digit:
            raise ConstraintViolation(row, col, None, "cell-empty")
        self._cells[index] = EMPTY
        self.row_masks[row] = clear_bit(self.row_masks[row], digit)
        self.col_masks[col] = clear_bit(self.col_masks[col], digit)
        b = box_index(row, col)
        self.box_masks[b] = clear_bit(self.box_masks[b], digit)
        return digit

    # Constraint checks --------------------------------------------------

    def used_mask(self, row: int, col: int) -> int:
        return self.row_masks[row] | self.col_masks[col] | self.box_masks[box_index(row, col)]

    def is_legal(self, row: int, col: int, digit: int) -> bool:
        return not has_bit(self.used_mask(row, col), digit)

    def candidates(self, row: int, col: int) -> int:
        """Mask of digits that may still go into ``(row, col)``; 0 for filled cells."""

        if self._cells[row * SIZE + col]:
            return 0
        return FULL_MASK & ~self.used_mask(row, col)

    def is_complete_and_valid(self) -> bool:
        return is_complete_and_valid(self)


# Pure checker functions -----------------------------------------------------


def iter_units() -> Iterator[Tuple[str, int, List[Tuple[int, int]]]]:
    """Yield ``(kind, index, cells)`` for all 27 rows, columns and boxes."""

    for r in range(SIZE):
        yield "row", r, [(r, c) for c in range(SIZE)]
    for c in range(SIZE):
        yield "col", c, [(r, c) for r in range(SIZE)]
    for b in range(SIZE):
        yield "box", b, box_cells(b)


def is_legal(grid: Grid, row: int, col: int, digit: int) -> bool:
    return grid.is_legal(row, col, digit)


def is_complete_and_valid(grid: Grid) -> bool:
    """True iff every cell is filled and every unit is a permutation of 1..9.

    Recomputed from the cells so it does not trust the cached masks.
    """

    for _, _, cells in iter_units():
        seen = 0
        for r, c in cells:
            digit = grid.get(r, c)
            if not digit:
                return False
            seen |= digit_bit(digit)
        if seen != FULL_MASK:
            return False
    return True


def find_conflicts(grid: Grid) -> List[ValidationIssue]:
    """List every digit that appears more than once in a row, column or box."""

    issues: List[ValidationIssue] = []
    for kind, index, cells in iter_units():
        positions: dict[int, List[Tuple[int, int]]] = {}
        for r, c in cells:
            digit = grid.get(r, c)
            if digit:
                positions.setdefault(digit, []).append((r, c))
        for digit in sorted(positions):
            where = positions[digit]
            if len(where) > 1:
                at = ", ".join(f"r{r + 1}c{c + 1}" for r, c in where)
                issues.append(
                    make_error(
                        "duplicate-clue",
                        f"digit {digit} appears {len(where)} times in {kind} {index + 1} ({at})",
                        f"{kind}:{index + 1}/digit:{digit}",
                    )
                )
    return issues


def has_conflicts(grid: Grid) -> bool:
    return bool(find_conflicts(grid))


def preserves_clues(puzzle: Grid, solution: Grid) -> bool:
    return all(p == 0 or p == s for p, s in zip(puzzle, solution))


def mask_sizes(grid: Grid) -> Iterable[int]:
    """Population counts of all unit masks (rows, then columns, then boxes)."""

    for masks in (grid.row_masks, grid.col_masks, grid.box_masks):
        for mask in masks:
            yield popcount(mask)


__all__ = [
    "BOX",
    "CELLS",
    "EMPTY",
    "SIZE",
    "Grid",
    "box_cells",
    "box_index",
    "find_conflicts",
    "has_conflicts",
    "is_complete_and_valid",
    "is_legal",
    "iter_units",
    "mask_sizes",
    "preserves_clues",
]
