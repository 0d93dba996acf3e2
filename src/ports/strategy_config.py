"""Strategy selection and annealing parameters with layered overrides.

Precedence, lowest first: built-in defaults, ``config.toml``, ``SUDOKU_*``
environment variables, ``CLI_SUDOKU_*`` environment variables, explicit
keyword overrides.  Environment values that do not parse are ignored;
explicit overrides are validated and rejected with :class:`ConfigError`.
"""

from __future__ import annotations

from dataclasses import dataclass, fields, replace
from enum import Enum
from typing import Any, Dict, Mapping, Optional

from contracts.errors import ConfigError
from project_config import build_env, get_config
from solver.annealing import AnnealingParams


class Strategy(str, Enum):
    BACKTRACKING = "backtracking"
    EXACT_COVER = "exact_cover"
    ANNEALING = "annealing"

    @classmethod
    def from_value(cls, value: Any) -> "Strategy":
        if isinstance(value, Strategy):
            return value
        normalised = str(value).strip().lower().replace("-", "_")
        try:
            return cls(normalised)
        except ValueError as exc:
            raise ConfigError("unknown-strategy", str(value)) from exc


_DEFAULT_ANNEALING = AnnealingParams()


@dataclass(frozen=True)
class StrategyConfig:
    """Finalised solver selection after precedence resolution."""

    strategy: Strategy = Strategy.EXACT_COVER
    initial_temperature: float = _DEFAULT_ANNEALING.initial_temperature
    cooling_factor: float = _DEFAULT_ANNEALING.cooling_factor
    cooling_interval: int = _DEFAULT_ANNEALING.cooling_interval
    min_temperature: float = _DEFAULT_ANNEALING.min_temperature
    max_iterations: int = _DEFAULT_ANNEALING.max_iterations
    seed: Optional[int] = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "strategy", Strategy.from_value(self.strategy))
        self.annealing_params()

    def annealing_params(self) -> AnnealingParams:
        return AnnealingParams(
            initial_temperature=self.initial_temperature,
            cooling_factor=self.cooling_factor,
            cooling_interval=self.cooling_interval,
            min_temperature=self.min_temperature,
            max_iterations=self.max_iterations,
            seed=self.seed,
        )

    def to_payload(self) -> Dict[str, Any]:
        payload = {f.name: getattr(self, f.name) for f in fields(self)}
        payload["strategy"] = self.strategy.value
        return payload


_FLOAT_FIELDS = ("initial_temperature", "cooling_factor", "min_temperature")
_INT_FIELDS = ("cooling_interval", "max_iterations")


def _parse_int(value: Any) -> Optional[int]:
    try:
        if isinstance(value, bool):
            return None
        if isinstance(value, int):
            return value
        if isinstance(value, str) and value.strip():
            return int(value)
    except (TypeError, ValueError):
        return None
    return None


def _parse_float(value: Any) -> Optional[float]:
    try:
        if isinstance(value, bool):
            return None
        if isinstance(value, (int, float)):
            return float(value)
        if isinstance(value, str) and value.strip():
            return float(value)
    except (TypeError, ValueError):
        return None
    return None


def _parse_strategy(value: Any) -> Optional[Strategy]:
    try:
        return Strategy.from_value(value)
    except ConfigError:
        return None


def _lenient(settings: Dict[str, Any], overrides: Mapping[str, Any]) -> Dict[str, Any]:
    """Apply ``overrides`` keeping only values that parse."""

    merged = dict(settings)
    if "strategy" in overrides:
        maybe = _parse_strategy(overrides["strategy"])
        if maybe is not None:
            merged["strategy"] = maybe
    for name in _FLOAT_FIELDS:
        if name in overrides:
            maybe_float = _parse_float(overrides[name])
            if maybe_float is not None:
                merged[name] = maybe_float
    for name in _INT_FIELDS:
        if name in overrides:
            maybe_int = _parse_int(overrides[name])
            if maybe_int is not None:
                merged[name] = maybe_int
    if "seed" in overrides:
        raw = overrides["seed"]
        if raw is None or (isinstance(raw, str) and raw.strip().lower() in {"", "none", "random"}):
            merged["seed"] = None
        else:
            maybe_seed = _parse_int(raw)
            if maybe_seed is not None:
                merged["seed"] = maybe_seed
    return merged


def _toml_overrides() -> Dict[str, Any]:
    config = get_config()
    solver_cfg = config.get("solver", {})
    payload: Dict[str, Any] = {}
    if not isinstance(solver_cfg, dict):
        return payload
    if "default_strategy" in solver_cfg:
        payload["strategy"] = solver_cfg["default_strategy"]
    annealing_cfg = solver_cfg.get("annealing")
    if isinstance(annealing_cfg, dict):
        payload.update(annealing_cfg)
    return payload


def _env_overrides(env: Mapping[str, str], prefix: str) -> Dict[str, Any]:
    payload: Dict[str, Any] = {}
    if f"{prefix}STRATEGY" in env:
        payload["strategy"] = env[f"{prefix}STRATEGY"]
    if f"{prefix}SEED" in env:
        payload["seed"] = env[f"{prefix}SEED"]
    for name in _FLOAT_FIELDS + _INT_FIELDS:
        key = f"{prefix}ANNEALING_{name.upper()}"
        if key in env:
            payload[name] = env[key]
    return payload


def resolve_strategy_config(
    overrides: Mapping[str, Any] | None = None,
    *,
    env: Mapping[str, str] | None = None,
) -> StrategyConfig:
    """Build a :class:`StrategyConfig` from every configuration layer.

    ``env`` is merged over the process environment.  Keys in ``overrides``
    that are ``None`` are treated as absent, except ``seed`` where ``None``
    explicitly asks for a non-deterministic run.
    """

    env_map = build_env(env)
    settings = StrategyConfig().to_payload()
    settings = _lenient(settings, _toml_overrides())
    settings = _lenient(settings, _env_overrides(env_map, "SUDOKU_"))
    settings = _lenient(settings, _env_overrides(env_map, "CLI_SUDOKU_"))

    config = StrategyConfig(**settings)
    if overrides:
        explicit = {k: v for k, v in overrides.items() if v is not None or k == "seed"}
        unknown = set(explicit) - {f.name for f in fields(StrategyConfig)}
        if unknown:
            raise ConfigError("unknown-setting", ", ".join(sorted(unknown)))
        config = replace(config, **explicit)
    return config


__all__ = ["Strategy", "StrategyConfig", "resolve_strategy_config"]
