"""Puzzle input parsing and output rendering.

``formats.pdf`` needs matplotlib and is imported on demand.
"""

from __future__ import annotations

from .text import parse_puzzle, render_ascii, render_box, to_csv

__all__ = ["parse_puzzle", "render_ascii", "render_box", "to_csv"]
