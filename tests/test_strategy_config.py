from __future__ import annotations

import pytest

import project_config
from contracts.errors import ConfigError
from ports.strategy_config import Strategy, StrategyConfig, resolve_strategy_config


def _write_config(tmp_path, monkeypatch, body: str) -> None:
    path = tmp_path / "config.toml"
    path.write_text(body, "utf-8")
    monkeypatch.setenv("SUDOKU_CONFIG", str(path))
    project_config.reload()


def test_defaults_from_repository_config():
    config = resolve_strategy_config()
    assert config.strategy is Strategy.EXACT_COVER
    assert config.initial_temperature == 0.5
    assert config.cooling_factor == 0.99
    assert config.cooling_interval == 100
    assert config.min_temperature == 0.01
    assert config.max_iterations == 200_000
    assert config.seed is None


def test_toml_overrides_builtin_defaults(tmp_path, monkeypatch):
    _write_config(
        tmp_path,
        monkeypatch,
        '[solver]\ndefault_strategy = "annealing"\n\n[solver.annealing]\ncooling_factor = 0.9\nseed = 4\n',
    )
    config = resolve_strategy_config()
    assert config.strategy is Strategy.ANNEALING
    assert config.cooling_factor == 0.9
    assert config.seed == 4
    assert config.max_iterations == 200_000


def test_missing_override_file_is_an_error(tmp_path, monkeypatch):
    monkeypatch.setenv("SUDOKU_CONFIG", str(tmp_path / "absent.toml"))
    project_config.reload()
    with pytest.raises(RuntimeError):
        resolve_strategy_config()


def test_environment_overrides_toml():
    config = resolve_strategy_config(env={"SUDOKU_STRATEGY": "backtracking", "SUDOKU_SEED": "12"})
    assert config.strategy is Strategy.BACKTRACKING
    assert config.seed == 12


def test_cli_overrides_environment():
    env = {
        "SUDOKU_STRATEGY": "backtracking",
        "SUDOKU_ANNEALING_MAX_ITERATIONS": "10",
        "CLI_SUDOKU_STRATEGY": "annealing",
        "CLI_SUDOKU_ANNEALING_MAX_ITERATIONS": "20",
    }
    config = resolve_strategy_config(env=env)
    assert config.strategy is Strategy.ANNEALING
    assert config.max_iterations == 20


def test_explicit_overrides_win():
    env = {"CLI_SUDOKU_STRATEGY": "annealing", "CLI_SUDOKU_SEED": "3"}
    config = resolve_strategy_config({"strategy": "backtracking", "seed": None}, env=env)
    assert config.strategy is Strategy.BACKTRACKING
    assert config.seed is None


def test_explicit_none_is_ignored_except_for_seed():
    config = resolve_strategy_config({"strategy": None, "max_iterations": None}, env={"SUDOKU_STRATEGY": "annealing"})
    assert config.strategy is Strategy.ANNEALING
    assert config.max_iterations == 200_000


def test_unparseable_environment_values_are_ignored():
    env = {
        "SUDOKU_STRATEGY": "quantum",
        "SUDOKU_SEED": "abc",
        "SUDOKU_ANNEALING_COOLING_FACTOR": "fast",
        "SUDOKU_ANNEALING_COOLING_INTERVAL": "",
    }
    config = resolve_strategy_config(env=env)
    assert config.strategy is Strategy.EXACT_COVER
    assert config.seed is None
    assert config.cooling_factor == 0.99
    assert config.cooling_interval == 100


def test_environment_seed_can_be_cleared():
    config = resolve_strategy_config(env={"SUDOKU_SEED": "5", "CLI_SUDOKU_SEED": "random"})
    assert config.seed is None


def test_strategy_names_accept_dashes():
    assert Strategy.from_value("exact-cover") is Strategy.EXACT_COVER
    assert resolve_strategy_config({"strategy": "Exact-Cover"}).strategy is Strategy.EXACT_COVER


@pytest.mark.parametrize(
    "overrides, code",
    [
        ({"strategy": "brute_force"}, "unknown-strategy"),
        ({"cooling_factor": 1.5}, "cooling_factor"),
        ({"max_iterations": 0}, "max_iterations"),
        ({"temperature": 1.0}, "unknown-setting"),
        ({"max_iterations": "100"}, "max_iterations"),
        ({"strategy": "annealing", "max_iterations": 1.5}, "max_iterations"),
        ({"seed": 2.5}, "seed"),
        ({"seed": True}, "seed"),
        ({"min_temperature": "cold"}, "min_temperature"),
    ],
)
def test_invalid_explicit_overrides_raise(overrides: dict, code: str):
    with pytest.raises(ConfigError) as exc:
        resolve_strategy_config(overrides)
    assert exc.value.code == code


def test_annealing_params_and_payload():
    config = StrategyConfig(strategy="annealing", seed=9, max_iterations=50)
    params = config.annealing_params()
    assert params.seed == 9
    assert params.max_iterations == 50
    payload = config.to_payload()
    assert payload["strategy"] == "annealing"
    assert payload["seed"] == 9
