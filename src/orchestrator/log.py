"""JSONL event log for solve runs, partitioned by UTC date with size rotation."""

from __future__ import annotations

import json
import threading
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Mapping

from project_config import build_env, coerce_bool, get_config

__all__ = ["configure", "append_event", "current_log_path", "events_enabled", "log_dir"]

_DEFAULT_MAX_BYTES = 10 * 1024 * 1024
_DEFAULT_DIR = "logs/solve"
_LOCK = threading.Lock()
_LOG_DIR: Path | None = None
_MAX_BYTES: int | None = None
_CURRENT_PATH: Path | None = None


def _events_section() -> Dict[str, Any]:
    section = get_config().get("events", {})
    return section if isinstance(section, dict) else {}


def configure(base_dir: str | Path, *, max_bytes: int | None = None) -> None:
    """Send all further events to ``base_dir``, overriding ``config.toml``."""

    global _LOG_DIR, _MAX_BYTES, _CURRENT_PATH
    _LOG_DIR = Path(base_dir)
    _MAX_BYTES = max_bytes
    _CURRENT_PATH = None


def log_dir() -> Path:
    if _LOG_DIR is not None:
        return _LOG_DIR
    return Path(str(_events_section().get("dir", _DEFAULT_DIR)))


def _max_bytes() -> int:
    if _MAX_BYTES:
        return _MAX_BYTES
    value = _events_section().get("max_bytes")
    return value if isinstance(value, int) and value > 0 else _DEFAULT_MAX_BYTES


def events_enabled(env: Mapping[str, str] | None = None) -> bool:
    """``SUDOKU_EVENTS`` in the environment wins over ``[events].enabled``."""

    enabled = bool(coerce_bool(_events_section().get("enabled")) or False)
    override = coerce_bool(build_env(env).get("SUDOKU_EVENTS"))
    if override is not None:
        enabled = override
    return enabled


def _date_prefix() -> str:
    return datetime.now(timezone.utc).strftime("%Y%m%d")


def _resolve_log_path() -> Path:
    global _CURRENT_PATH
    date_dir = log_dir() / _date_prefix()
    date_dir.mkdir(parents=True, exist_ok=True)
    limit = _max_bytes()

    if _CURRENT_PATH is not None and _CURRENT_PATH.parent == date_dir and _CURRENT_PATH.exists():
        if _CURRENT_PATH.stat().st_size < limit:
            return _CURRENT_PATH

    counter = 0
    while True:
        candidate = date_dir / f"solve_{counter:02d}.jsonl"
        if not candidate.exists() or candidate.stat().st_size < limit:
            _CURRENT_PATH = candidate
            return candidate
        counter += 1


def append_event(event: Dict[str, Any]) -> Path:
    """Append ``event`` to the active JSONL file and return the file path."""

    payload = dict(event)
    payload.setdefault("ts", datetime.now(timezone.utc).isoformat(timespec="milliseconds"))

    line = json.dumps(payload, sort_keys=True, ensure_ascii=False)
    with _LOCK:
        path = _resolve_log_path()
        with path.open("a", encoding="utf-8") as handle:
            handle.write(line + "\n")
    return path


def current_log_path() -> Path | None:
    return _CURRENT_PATH
