"""Text input and output for 9x9 grids.

Two input shapes are understood: 81 characters (``0`` or ``.`` for blanks,
whitespace ignored) and comma separated lines where an empty field or ``0``
marks a blank.  Lines starting with ``#`` are comments.
"""

from __future__ import annotations

from typing import List

from contracts.errors import GridFormatError
from solver.grid import BOX, CELLS, SIZE, Grid

_DIGITS = "0123456789"


def _parse_csv(lines: List[str]) -> Grid:
    cells: List[int] = []
    for lineno, line in enumerate(lines, start=1):
        for field in line.split(","):
            field = field.strip()
            if not field:
                cells.append(0)
                continue
            if len(field) != 1 or field not in _DIGITS:
                raise GridFormatError(f"line {lineno}: invalid digit {field!r}")
            cells.append(int(field))
    if len(cells) != CELLS:
        raise GridFormatError(f"board not 9x9: got {len(cells)} cells")
    return Grid(cells)


def parse_puzzle(text: str) -> Grid:
    """Parse a puzzle from either supported text layout."""

    lines = [line for line in text.splitlines() if line.strip() and not line.lstrip().startswith("#")]
    if any("," in line for line in lines):
        return _parse_csv(lines)
    return Grid.from_string("".join(lines))


def to_csv(grid: Grid) -> str:
    return "\n".join(",".join(str(d) if d else "" for d in row) for row in grid.to_rows()) + "\n"


def render_ascii(grid: Grid, empty: str = ".") -> str:
    rule = "+-------+-------+-------+"
    lines = []
    for r, row in enumerate(grid.to_rows()):
        if r % BOX == 0:
            lines.append(rule)
        chunks = [" ".join(str(d) if d else empty for d in row[i:i + BOX]) for i in range(0, SIZE, BOX)]
        lines.append("| " + " | ".join(chunks) + " |")
    lines.append(rule)
    return "\n".join(lines)


def _border(left: str, fill: str, cell_sep: str, box_sep: str, right: str) -> str:
    parts = [left]
    for c in range(SIZE):
        parts.append(fill * 3)
        if c == SIZE - 1:
            parts.append(right)
        elif c % BOX == BOX - 1:
            parts.append(box_sep)
        else:
            parts.append(cell_sep)
    return "".join(parts)


def render_box(grid: Grid) -> str:
    """Double-line box-drawing table, three characters per cell."""

    lines = [_border("╔", "═", "╤", "╦", "╗")]
    rows = grid.to_rows()
    for r, row in enumerate(rows):
        parts = ["║"]
        for c, digit in enumerate(row):
            parts.append(f" {digit} " if digit else "   ")
            parts.append("║" if c % BOX == BOX - 1 else "│")
        lines.append("".join(parts))
        if r == SIZE - 1:
            break
        if r % BOX == BOX - 1:
            lines.append(_border("╠", "═", "╪", "╬", "╣"))
        else:
            lines.append(_border("╟", "─", "┼", "╫", "╢"))
    lines.append(_border("╚", "═", "╧", "╩", "╝"))
    return "\n".join(lines)


__all__ = ["parse_puzzle", "render_ascii", "render_box", "to_csv"]
