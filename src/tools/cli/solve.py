"""Command line front end for the solving engine."""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Dict, List

from contracts.errors import ConfigError, GridFormatError
from formats.text import parse_puzzle, render_ascii, render_box, to_csv
from orchestrator.compare import compare_strategies
from ports.solver_port import solve
from ports.strategy_config import resolve_strategy_config
from solver.exact_cover import ExactCoverMatrix
from solver.grid import Grid, has_conflicts
from solver.registry import available_strategies
from solver.result import SolveResult, SolveStatus

EXIT_SOLVED = 0
EXIT_EXHAUSTED = 1
EXIT_INVALID = 2

# 17 clues; hostile to plain cell-order backtracking.
EXTREME_PUZZLE = (
    "000000000"
    "000003085"
    "001020000"
    "000507000"
    "004000100"
    "090000000"
    "500000073"
    "002010000"
    "000040009"
)

_RENDERERS = {
    "ascii": render_ascii,
    "box": render_box,
    "csv": to_csv,
    "plain": lambda grid: grid.to_string(),
}


def _build_cli_env(args: argparse.Namespace) -> Dict[str, str]:
    env: Dict[str, str] = {}
    pairs = {
        "CLI_SUDOKU_STRATEGY": getattr(args, "strategy", None),
        "CLI_SUDOKU_SEED": args.seed,
        "CLI_SUDOKU_ANNEALING_INITIAL_TEMPERATURE": args.initial_temperature,
        "CLI_SUDOKU_ANNEALING_COOLING_FACTOR": args.cooling_factor,
        "CLI_SUDOKU_ANNEALING_COOLING_INTERVAL": args.cooling_interval,
        "CLI_SUDOKU_ANNEALING_MIN_TEMPERATURE": args.min_temperature,
        "CLI_SUDOKU_ANNEALING_MAX_ITERATIONS": args.max_iterations,
    }
    for key, value in pairs.items():
        if value is not None:
            env[key] = str(value)
    if args.events is not None:
        env["SUDOKU_EVENTS"] = "1" if args.events else "0"
    return env


def _read_puzzle(path: str | None) -> Grid:
    if path is None:
        return Grid.from_string(EXTREME_PUZZLE)
    if path == "-":
        return parse_puzzle(sys.stdin.read())
    try:
        text = Path(path).read_text("utf-8")
    except UnicodeDecodeError as exc:
        raise GridFormatError(f"{path}: not UTF-8 text") from exc
    return parse_puzzle(text)


def _uniqueness(puzzle: Grid) -> str:
    if has_conflicts(puzzle):
        return "invalid"
    count = ExactCoverMatrix(puzzle).count_solutions(limit=2)
    return {0: "none", 1: "unique"}.get(count, "multiple")


def _exit_code(result: SolveResult) -> int:
    if result.status is SolveStatus.SOLVED:
        return EXIT_SOLVED
    if result.status is SolveStatus.EXHAUSTED:
        return EXIT_EXHAUSTED
    return EXIT_INVALID


def cmd_solve(args: argparse.Namespace) -> int:
    puzzle = _read_puzzle(args.path)
    env = _build_cli_env(args)
    config = resolve_strategy_config(env=env)
    result = solve(puzzle, config, env=env)

    if args.format == "json":
        payload = result.to_payload()
        payload["puzzle"] = puzzle.to_string()
        if args.check_unique:
            payload["uniqueness"] = _uniqueness(puzzle)
        print(json.dumps(payload, indent=2, sort_keys=True))
    else:
        render = _RENDERERS[args.format]
        print(render(puzzle))
        print(f"{config.strategy.value}: {result.status.value}")
        for issue in result.issues:
            print(f"  {issue.msg}")
        if result.grid is not None:
            print(render(result.grid))
        if args.check_unique:
            print(f"uniqueness: {_uniqueness(puzzle)}")

    if args.pdf:
        from formats.pdf import export_pdf

        export_pdf(puzzle, args.pdf, result.grid, title=f"{config.strategy.value}: {result.status.value}")
    return _exit_code(result)


def cmd_compare(args: argparse.Namespace) -> int:
    puzzle = _read_puzzle(args.path)
    env = _build_cli_env(args)
    outcome = compare_strategies(puzzle, args.primary, args.secondary, env=env)
    print(json.dumps(dict(outcome.event), indent=2, sort_keys=True))
    return 0 if outcome.consistent else EXIT_EXHAUSTED


def _add_common(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("path", nargs="?", default=None, help="Puzzle file ('-' for stdin); built-in puzzle if omitted")
    parser.add_argument("--seed", type=int, default=None)
    parser.add_argument("--initial-temperature", type=float, default=None)
    parser.add_argument("--cooling-factor", type=float, default=None)
    parser.add_argument("--cooling-interval", type=int, default=None)
    parser.add_argument("--min-temperature", type=float, default=None)
    parser.add_argument("--max-iterations", type=int, default=None)
    parser.add_argument(
        "--events",
        action=argparse.BooleanOptionalAction,
        default=None,
        help="Append a JSONL run event (default: [events] in config.toml)",
    )


def _build_parser() -> argparse.ArgumentParser:
    strategies = list(available_strategies())
    parser = argparse.ArgumentParser(description="Solve 9x9 Sudoku puzzles")
    parser.add_argument("-v", "--verbose", action="count", default=0)
    sub = parser.add_subparsers(dest="command", required=True)

    run = sub.add_parser("solve", help="Solve one puzzle")
    _add_common(run)
    run.add_argument("--strategy", choices=strategies, default=None)
    run.add_argument("--format", choices=sorted(_RENDERERS) + ["json"], default="box")
    run.add_argument("--pdf", default=None, help="Also write puzzle and solution to this PDF")
    run.add_argument("--check-unique", action="store_true", help="Report whether the solution is unique")
    run.set_defaults(func=cmd_solve)

    compare = sub.add_parser("compare", help="Check two strategies agree on a puzzle")
    _add_common(compare)
    compare.add_argument("--primary", choices=strategies, default="backtracking")
    compare.add_argument("--secondary", choices=strategies, default="exact_cover")
    compare.set_defaults(func=cmd_compare)

    return parser


def main(argv: List[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)
    level = logging.WARNING - 10 * min(args.verbose, 2)
    logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s")
    try:
        return args.func(args)
    except (GridFormatError, ConfigError, OSError) as exc:
        print(f"error: {exc}", file=sys.stderr)
        return EXIT_INVALID


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
