"""Contracts shared by the solving engine: errors, canonical JSON, schemas."""

from __future__ import annotations

from .canon import canonical_dump, canonical_sha256, grid_digest
from .errors import (
    ConfigError,
    ConstraintViolation,
    GridFormatError,
    InvalidPuzzleError,
    ValidationIssue,
)
from .schema import collect_issues, validate_document

__all__ = [
    "ConfigError",
    "ConstraintViolation",
    "GridFormatError",
    "InvalidPuzzleError",
    "ValidationIssue",
    "canonical_dump",
    "canonical_sha256",
    "collect_issues",
    "grid_digest",
    "validate_document",
]
