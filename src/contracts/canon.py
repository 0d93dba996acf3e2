"""Canonical JSON encoding and digests for puzzles and solve results.

Dictionaries are emitted with sorted keys and no insignificant whitespace,
floats are normalised through :class:`decimal.Decimal` and NaN/Infinity are
rejected, so two equal payloads always hash to the same digest.
"""

from __future__ import annotations

import hashlib
import json
import math
from decimal import Decimal
from enum import Enum
from typing import Any, Iterable

__all__ = ["canonical_dump", "canonical_sha256", "grid_digest"]


def _canonical_float(value: float) -> Any:
    if math.isnan(value) or math.isinf(value):
        raise ValueError("NaN and Infinity are not permitted in canonical payloads")
    if value == 0:
        return 0
    if value.is_integer():
        return int(value)
    text = format(Decimal(repr(value)).normalize(), "f")
    return json.loads(text)


def _canonicalize(obj: Any) -> Any:
    if obj is None or isinstance(obj, (bool, str)):
        return obj
    if isinstance(obj, Enum):
        return _canonicalize(obj.value)
    if isinstance(obj, int):
        return obj
    if isinstance(obj, float):
        return _canonical_float(obj)
    if isinstance(obj, (list, tuple)):
        return [_canonicalize(item) for item in obj]
    if isinstance(obj, dict):
        return {str(key): _canonicalize(obj[key]) for key in sorted(obj, key=str)}
    raise TypeError(f"Unsupported type for canonical JSON: {type(obj)!r}")


def canonical_dump(obj: Any) -> bytes:
    """Return canonical UTF-8 JSON bytes for ``obj``."""

    return json.dumps(
        _canonicalize(obj),
        sort_keys=True,
        ensure_ascii=False,
        separators=(",", ":"),
        allow_nan=False,
    ).encode("utf-8")


def canonical_sha256(obj: Any) -> str:
    digest = hashlib.sha256(canonical_dump(obj)).hexdigest()
    return f"sha256-{digest}"


def grid_digest(cells: Iterable[int]) -> str:
    """Digest of a grid given as its 81 cell values in row-major order."""

    return canonical_sha256({"kind": "sudoku-9x9", "grid": "".join(str(int(d)) for d in cells)})
