"""CLI for running and inspecting template engine benchmarks."""

from __future__ import annotations

import argparse
import json
import logging
from pathlib import Path
from typing import Sequence

import yaml

from .catalog import EXECUTION_MODES, FEATURES
from .logging_utils import JsonlLogger
from .options import (
    BenchmarkOptions,
    load_options,
    options_to_dict,
    parse_options,
    save_options,
)
from .orchestrator import TemplateBenchmark
from .results import BenchmarkResult, ResultStatus

LOGGER = logging.getLogger(__name__)


def configure_logging(level: str) -> None:
    """Configure logging format and level for CLI commands."""
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s | %(levelname)-8s | %(message)s",
    )


def _resolve_options(args: argparse.Namespace) -> BenchmarkOptions:
    overrides = args.set or None
    if args.config is not None:
        return load_options(args.config, overrides=overrides)
    return parse_options(overrides=overrides)


def _print_result(result: BenchmarkResult) -> None:
    print(f"Result: {result.result.value}")
    if result.result is ResultStatus.MISMATCHED_OUTPUT:
        assert result.reference is not None  # set for every mismatch
        print(f"Reference: {result.reference.type.value}/{result.reference.tag}")
        for failure in result.failures:
            print(f"- mismatch: {failure.type.value}/{failure.tag}")
        return
    if not result.succeeded:
        return
    print(result.title)
    for tag, label in sorted(result.descriptions.items()):
        print(f"  {tag:>8}: {label}")
    for block in result.benchmarks:
        print(f"\n{block.type.value}")
        rows = block.comparison.chart()
        widths = [max(len(row[col]) for row in rows) for col in range(len(rows[0]))]
        for row in rows:
            print(" ".join(cell.rjust(width) for cell, width in zip(row, widths)))


def run_command(args: argparse.Namespace) -> int:
    """Verify and time every retained engine."""
    configure_logging(args.log_level)
    options = _resolve_options(args)

    with TemplateBenchmark(options) as bench:
        for name, reasons in sorted(bench.engine_errors.items()):
            for reason in reasons:
                LOGGER.warning("Engine %s skipped: %s", name, reason)
        LOGGER.info(
            "Running %d benchmarks, expected duration >= %.1fs",
            bench.number_of_benchmarks(),
            bench.estimate_benchmark_duration(),
        )
        result = bench.benchmark()

    record = result.to_dict()
    if args.json is not None:
        args.json.parent.mkdir(parents=True, exist_ok=True)
        args.json.write_text(json.dumps(record, indent=2) + "\n", encoding="utf-8")
    if args.history is not None:
        JsonlLogger(args.history).write(record)

    _print_result(result)
    return 0 if result.succeeded else 1


def show_config_command(args: argparse.Namespace) -> int:
    """Print fully resolved options."""
    options = _resolve_options(args)
    if args.output is not None:
        save_options(args.output, options)
        return 0
    print(yaml.safe_dump(options_to_dict(options), sort_keys=False), end="")
    return 0


def list_features_command(args: argparse.Namespace) -> int:
    del args
    for feature in FEATURES:
        print(feature.value)
    return 0


def list_modes_command(args: argparse.Namespace) -> int:
    del args
    for mode in EXECUTION_MODES:
        print(mode.value)
    return 0


def list_engines_command(args: argparse.Namespace) -> int:
    """Print loaded engines and why any of them would be skipped."""
    configure_logging(args.log_level)
    options = _resolve_options(args)
    with TemplateBenchmark(options) as bench:
        errors = bench.engine_errors
        names = sorted(set(bench.engines) | set(errors))
        for name in names:
            reasons = errors.get(name)
            status = "skipped" if reasons else "ok"
            print(f"{name}: {status}")
            for reason in reasons or []:
                print(f"  - {reason}")
    return 0


def _add_option_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="YAML file with benchmark options.",
    )
    parser.add_argument(
        "--set",
        action="append",
        default=[],
        help="OmegaConf-style option override, e.g. template_repeats=5",
    )


def build_parser() -> argparse.ArgumentParser:
    """Build argument parser for benchmark commands."""
    parser = argparse.ArgumentParser(
        prog="tplbench",
        description="Compare template engine performance on synthetic workloads.",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    run_parser = sub.add_parser("run", help="Verify and time engines.")
    _add_option_arguments(run_parser)
    run_parser.add_argument(
        "--json",
        type=Path,
        default=None,
        help="Write the result as JSON to this path.",
    )
    run_parser.add_argument(
        "--history",
        type=Path,
        default=None,
        help="Append the result to this JSON Lines file.",
    )
    run_parser.add_argument("--log-level", default="INFO", help="Logging level.")
    run_parser.set_defaults(handler=run_command)

    show_parser = sub.add_parser("show-config", help="Print resolved options.")
    _add_option_arguments(show_parser)
    show_parser.add_argument(
        "--output",
        type=Path,
        default=None,
        help="Write the options to this YAML file instead of stdout.",
    )
    show_parser.set_defaults(handler=show_config_command)

    engines_parser = sub.add_parser(
        "list-engines", help="Show loaded engines and rejection reasons."
    )
    _add_option_arguments(engines_parser)
    engines_parser.add_argument("--log-level", default="WARNING", help="Logging level.")
    engines_parser.set_defaults(handler=list_engines_command)

    features_parser = sub.add_parser("list-features", help="Print feature names.")
    features_parser.set_defaults(handler=list_features_command)

    modes_parser = sub.add_parser("list-modes", help="Print execution mode names.")
    modes_parser.set_defaults(handler=list_modes_command)

    return parser


def main(argv: Sequence[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    return args.handler(args)


if __name__ == "__main__":
    raise SystemExit(main())
