"""Sudoku 9x9 solving engine: grid model and the three search strategies."""

from __future__ import annotations

from .annealing import AnnealingParams, AnnealingSolver
from .backtracking import BacktrackingSolver
from .exact_cover import DancingLinks, ExactCoverMatrix, ExactCoverSolver
from .grid import Grid, find_conflicts, has_conflicts, is_complete_and_valid, is_legal, preserves_clues
from .registry import available_strategies, get_factory, register_strategy
from .result import SolveResult, SolveStatus

register_strategy(BacktrackingSolver.name, lambda config: BacktrackingSolver())
register_strategy(ExactCoverSolver.name, lambda config: ExactCoverSolver())
register_strategy(AnnealingSolver.name, lambda config: AnnealingSolver(config.annealing_params()))

__all__ = [
    "AnnealingParams",
    "AnnealingSolver",
    "BacktrackingSolver",
    "DancingLinks",
    "ExactCoverMatrix",
    "ExactCoverSolver",
    "Grid",
    "SolveResult",
    "SolveStatus",
    "available_strategies",
    "find_conflicts",
    "get_factory",
    "has_conflicts",
    "is_complete_and_valid",
    "is_legal",
    "preserves_clues",
    "register_strategy",
]
