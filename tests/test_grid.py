from __future__ import annotations

import pytest

from contracts.errors import ConstraintViolation, GridFormatError
from solver.bits import FULL_MASK, iter_digits, popcount
from solver.grid import (
    Grid,
    box_cells,
    box_index,
    find_conflicts,
    has_conflicts,
    is_complete_and_valid,
    mask_sizes,
    preserves_clues,
)


def _recomputed_masks(grid: Grid) -> tuple[list[int], list[int], list[int]]:
    rows, cols, boxes = [0] * 9, [0] * 9, [0] * 9
    for r in range(9):
        for c in range(9):
            d = grid.get(r, c)
            if d:
                rows[r] |= 1 << (d - 1)
                cols[c] |= 1 << (d - 1)
                boxes[box_index(r, c)] |= 1 << (d - 1)
    return rows, cols, boxes


def _assert_masks_consistent(grid: Grid) -> None:
    assert (grid.row_masks, grid.col_masks, grid.box_masks) == _recomputed_masks(grid)


def test_bits_helpers():
    assert list(iter_digits(0b100000101)) == [1, 3, 9]
    assert popcount(FULL_MASK) == 9
    assert list(iter_digits(0)) == []


def test_box_geometry():
    assert box_index(0, 0) == 0
    assert box_index(4, 7) == 5
    assert box_index(8, 8) == 8
    assert box_cells(4) == [(3, 3), (3, 4), (3, 5), (4, 3), (4, 4), (4, 5), (5, 3), (5, 4), (5, 5)]


def test_place_updates_masks(classic: Grid):
    assert classic.is_legal(0, 2, 4)
    classic.place(0, 2, 4)
    assert classic.get(0, 2) == 4
    assert not classic.is_legal(0, 8, 4)
    assert not classic.is_legal(8, 2, 4)
    assert not classic.is_legal(1, 1, 4)
    _assert_masks_consistent(classic)


def test_remove_restores_masks(classic: Grid):
    before = (classic.row_masks[:], classic.col_masks[:], classic.box_masks[:])
    classic.place(0, 2, 4)
    assert classic.remove(0, 2) == 4
    assert classic.get(0, 2) == 0
    assert (classic.row_masks, classic.col_masks, classic.box_masks) == before


def test_place_rejects_duplicates_and_occupied_cells(classic: Grid):
    with pytest.raises(ConstraintViolation) as dup:
        classic.place(0, 2, 5)
    assert dup.value.reason == "duplicate-digit"
    assert classic.get(0, 2) == 0

    with pytest.raises(ConstraintViolation) as occupied:
        classic.place(0, 0, 1)
    assert occupied.value.reason == "cell-occupied"

    with pytest.raises(ConstraintViolation) as out_of_range:
        classic.place(0, 2, 10)
    assert out_of_range.value.reason == "digit-out-of-range"
    _assert_masks_consistent(classic)


def test_remove_empty_cell_raises():
    with pytest.raises(ConstraintViolation) as exc:
        Grid.empty().remove(3, 3)
    assert exc.value.reason == "cell-empty"
    assert str(exc.value) == "cell-empty:r4c4"


def test_candidates_exclude_peers(classic: Grid):
    # r1c3 sees 5, 3, 7 in its row, 8 in its column and 6, 9, 8 in its box.
    mask = classic.candidates(0, 2)
    assert list(iter_digits(mask)) == [1, 2, 4]
    assert classic.candidates(0, 0) == 0


def test_from_string_accepts_dots_and_whitespace(classic: Grid):
    text = "\n".join(classic.to_string(".")[i:i + 9] for i in range(0, 81, 9))
    assert Grid.from_string(text) == classic


@pytest.mark.parametrize("text", ["123", "x" * 81, "0" * 82, "²" + "0" * 80, "٣" + "0" * 80, "-" + "0" * 80])
def test_from_string_rejects_bad_input(text: str):
    with pytest.raises(GridFormatError):
        Grid.from_string(text)


def test_from_rows_round_trip_and_errors(classic: Grid):
    assert Grid.from_rows(classic.to_rows()) == classic
    rows = [[None] * 9 for _ in range(9)]
    rows[4][4] = 7
    assert Grid.from_rows(rows).get(4, 4) == 7
    with pytest.raises(GridFormatError):
        Grid.from_rows(rows[:8])
    rows[0] = [0] * 8
    with pytest.raises(GridFormatError):
        Grid.from_rows(rows)
    with pytest.raises(GridFormatError):
        Grid([10] + [0] * 80)


def test_copy_is_independent(classic: Grid):
    clone = classic.copy()
    clone.place(0, 2, 4)
    assert classic.get(0, 2) == 0
    _assert_masks_consistent(classic)
    _assert_masks_consistent(clone)


def test_complete_and_valid(classic: Grid, classic_solution: Grid):
    assert is_complete_and_valid(classic_solution)
    assert classic_solution.is_complete_and_valid()
    assert not is_complete_and_valid(classic)
    assert list(mask_sizes(classic_solution)) == [9] * 27

    rows = classic_solution.to_rows()
    rows[0][0], rows[0][1] = rows[0][1], rows[0][0]
    # Row 1 is still a permutation but columns 1 and 2 now repeat digits.
    assert not is_complete_and_valid(Grid.from_rows(rows))


def test_find_conflicts_reports_each_unit(duplicate_row: Grid, classic: Grid):
    issues = find_conflicts(duplicate_row)
    assert [issue.path for issue in issues] == ["row:1/digit:5", "box:1/digit:5"]
    assert all(issue.code == "duplicate-clue" for issue in issues)
    assert "r1c1, r1c2" in issues[0].msg
    assert has_conflicts(duplicate_row)
    assert not has_conflicts(classic)


def test_preserves_clues(classic: Grid, classic_solution: Grid):
    assert preserves_clues(classic, classic_solution)
    other = classic_solution.to_rows()
    other[0][0] = 1
    assert not preserves_clues(classic, Grid.from_rows(other))
