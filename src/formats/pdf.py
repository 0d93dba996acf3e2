"""Render a puzzle and its solution on a landscape A4 PDF page."""

from __future__ import annotations

from pathlib import Path
from typing import Optional

import matplotlib

matplotlib.use("Agg")

import matplotlib.pyplot as plt  # noqa: E402
from matplotlib.backends.backend_pdf import PdfPages  # noqa: E402

from solver.grid import SIZE, Grid  # noqa: E402

INCH_PER_CM = 0.3937007874
PAGE_W_IN = 29.7 * INCH_PER_CM
PAGE_H_IN = 21.0 * INCH_PER_CM


def _draw_grid(fig, grid: Grid, clues: Grid, left_in: float, bottom_in: float, size_in: float) -> None:
    ax = fig.add_axes(
        [left_in / PAGE_W_IN, bottom_in / PAGE_H_IN, size_in / PAGE_W_IN, size_in / PAGE_H_IN],
        frameon=False,
    )
    for i in range(SIZE + 1):
        lw = 1.0 if i % 3 else 2.5
        ax.axvline(i / SIZE, color="k", linewidth=lw)
        ax.axhline(i / SIZE, color="k", linewidth=lw)
    ax.set_xlim(0, 1)
    ax.set_ylim(0, 1)
    ax.axis("off")
    fs = int(0.6 * size_in * 72 / SIZE)
    for r in range(SIZE):
        for c in range(SIZE):
            digit = grid.get(r, c)
            if not digit:
                continue
            given = bool(clues.get(r, c))
            ax.text(
                (c + 0.5) / SIZE,
                1 - (r + 0.5) / SIZE,
                str(digit),
                ha="center",
                va="center",
                fontsize=fs,
                color="k" if given else "#1f5fbf",
                fontweight="bold" if given else "normal",
            )


def export_pdf(
    puzzle: Grid,
    path: str | Path,
    solution: Optional[Grid] = None,
    *,
    title: str | None = None,
    margin_cm: float = 2.5,
    gap_cm: float = 2.0,
) -> Path:
    """Write ``puzzle`` (and ``solution`` next to it, when given) to ``path``.

    Clues are drawn bold black; digits filled in by a solver are blue.
    """

    out_path = Path(path)
    margin_in = margin_cm * INCH_PER_CM
    gap_in = gap_cm * INCH_PER_CM
    panels = 2 if solution is not None else 1
    avail_w = PAGE_W_IN - 2 * margin_in - gap_in * (panels - 1)
    avail_h = PAGE_H_IN - 2 * margin_in
    size_in = min(avail_w / panels, avail_h)
    total_w = size_in * panels + gap_in * (panels - 1)
    left = (PAGE_W_IN - total_w) / 2
    bottom = (PAGE_H_IN - size_in) / 2

    with PdfPages(out_path) as pdf:
        fig = plt.figure(figsize=(PAGE_W_IN, PAGE_H_IN))
        try:
            _draw_grid(fig, puzzle, puzzle, left, bottom, size_in)
            if solution is not None:
                _draw_grid(fig, solution, puzzle, left + size_in + gap_in, bottom, size_in)
            if title:
                fig.text(0.5, 1 - (margin_in / 2) / PAGE_H_IN, title, ha="center", va="center", fontsize=12)
            pdf.savefig(fig)
        finally:
            plt.close(fig)
    return out_path


__all__ = ["export_pdf"]
