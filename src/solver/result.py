"""Normalised outcome of a solve call."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Mapping, Optional, Tuple

from contracts.canon import grid_digest
from contracts.errors import InvalidPuzzleError, ValidationIssue

from .grid import Grid


class SolveStatus(str, Enum):
    SOLVED = "solved"
    EXHAUSTED = "exhausted"
    INVALID_PUZZLE = "invalid_puzzle"


@dataclass(frozen=True)
class SolveResult:
    """Outcome returned by every strategy.

    ``grid`` is set only for :attr:`SolveStatus.SOLVED`.  ``issues`` lists the
    conflicting clues for :attr:`SolveStatus.INVALID_PUZZLE`.  ``stats`` holds
    strategy specific counters (nodes, backtracks, iterations, ...).
    """

    status: SolveStatus
    strategy: str
    grid: Optional[Grid] = None
    stats: Mapping[str, Any] = field(default_factory=dict)
    issues: Tuple[ValidationIssue, ...] = ()

    @classmethod
    def solved(cls, grid: Grid, strategy: str, **stats: Any) -> "SolveResult":
        return cls(SolveStatus.SOLVED, strategy, grid=grid, stats=stats)

    @classmethod
    def exhausted(cls, strategy: str, **stats: Any) -> "SolveResult":
        return cls(SolveStatus.EXHAUSTED, strategy, stats=stats)

    @classmethod
    def invalid(cls, strategy: str, issues: Tuple[ValidationIssue, ...]) -> "SolveResult":
        return cls(SolveStatus.INVALID_PUZZLE, strategy, issues=tuple(issues))

    @property
    def is_solved(self) -> bool:
        return self.status is SolveStatus.SOLVED

    def unwrap(self) -> Grid:
        """Return the solved grid or raise.

        Raises :class:`InvalidPuzzleError` for conflicting clues and
        :class:`LookupError` when no solution was found.
        """

        if self.status is SolveStatus.INVALID_PUZZLE:
            raise InvalidPuzzleError(self.issues)
        if self.grid is None:
            raise LookupError(f"{self.strategy}: no solution found")
        return self.grid

    def same_outcome(self, other: "SolveResult") -> bool:
        """Compare status and grid only; stats and strategy name are ignored."""

        return self.status is other.status and self.grid == other.grid

    def to_payload(self) -> dict:
        return {
            "status": self.status.value,
            "strategy": self.strategy,
            "grid": None if self.grid is None else self.grid.to_string(),
            "digest": None if self.grid is None else grid_digest(self.grid),
            "stats": dict(self.stats),
            "issues": [issue.to_payload() for issue in self.issues],
        }


__all__ = ["SolveResult", "SolveStatus"]
