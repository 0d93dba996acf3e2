"""Shared error types for the Sudoku solving engine."""

from __future__ import annotations


from dataclasses import dataclass
from typing import Sequence

SEVERITY_ERROR = "ERROR"
SEVERITY_WARN = "WARN"


@dataclass(frozen=True)
class ValidationIssue:
    """Single finding produced while checking puzzle clues or documents."""

    code: str
    msg: str
    path: str
    severity: str

    def to_payload(self) -> dict:
        return {"code": self.code, "msg": self.msg, "path": self.path, "severity": self.severity}


def make_error(code: str, msg: str, path: str) -> ValidationIssue:
    """Construct an error-level :class:`ValidationIssue`."""

    return ValidationIssue(code=code, msg=msg, path=path, severity=SEVERITY_ERROR)


def make_warning(code: str, msg: str, path: str) -> ValidationIssue:
    """Construct a warning-level :class:`ValidationIssue`."""

    return ValidationIssue(code=code, msg=msg, path=path, severity=SEVERITY_WARN)


class ConstraintViolation(ValueError):
    """Raised when a grid mutation breaks its precondition.

    Seeing this from a solver means the solver is wrong; callers of the
    public ``solve`` facade never receive it.
    """

    def __init__(self, row: int, col: int, digit: int | None, reason: str) -> None:
        self.row = row
        self.col = col
        self.digit = digit
        self.reason = reason
        target = f"r{row + 1}c{col + 1}"
        if digit is not None:
            target = f"{digit}@{target}"
        super().__init__(f"{reason}:{target}")


class GridFormatError(ValueError):
    """Raised when puzzle input does not describe a 9x9 grid of digits."""


class ConfigError(ValueError):
    """Raised for invalid strategy settings or malformed puzzle documents."""

    def __init__(self, code: str, detail: str | None = None) -> None:
        self.code = code
        self.detail = detail
        message = code if detail is None else f"{code}:{detail}"
        super().__init__(message)


class InvalidPuzzleError(ValueError):
    """Raised by strict entry points when the given clues contradict each other."""

    def __init__(self, issues: Sequence[ValidationIssue]) -> None:
        self.issues = tuple(issues)
        summary = ", ".join(issue.path for issue in self.issues) or "unknown"
        super().__init__(f"invalid-puzzle:{summary}")


__all__ = [
    "SEVERITY_ERROR",
    "SEVERITY_WARN",
    "ConfigError",
    "ConstraintViolation",
    "GridFormatError",
    "InvalidPuzzleError",
    "ValidationIssue",
    "make_error",
    "make_warning",
]
