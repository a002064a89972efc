"""Capability negotiation between the orchestrator and engine plugins."""

from __future__ import annotations

from dataclasses import dataclass, field
import logging
from pathlib import Path
from typing import Sequence

from .catalog import ExecutionMode, Feature
from .engine import BaseEngine, BenchmarkFunction, BenchmarkFunctions

LOGGER = logging.getLogger(__name__)

NO_BENCHMARK_FUNCTIONS = "No matching benchmark functions."


@dataclass
class Negotiation:
    """Outcome of negotiating one engine against the enabled catalogs.

    Attributes
    ----------
    name:
        Engine name the outcome belongs to.
    functions:
        Retained benchmark functions per execution mode, canonical order.
    syntaxes:
        Declared fragment per enabled feature, canonical order.
    errors:
        Rejection reasons; an engine with no errors is retained.
    """

    name: str
    functions: dict[ExecutionMode, dict[str, BenchmarkFunction]] = field(
        default_factory=dict
    )
    syntaxes: list[tuple[Feature, str]] = field(default_factory=list)
    errors: list[str] = field(default_factory=list)

    @property
    def accepted(self) -> bool:
        return not self.errors

    @property
    def needs_workload_file(self) -> bool:
        return any(mode.on_disk for mode in self.functions)


def negotiate_modes(
    engine: BaseEngine,
    modes: Sequence[ExecutionMode],
    workload_dir: Path,
    cache_dir: Path,
) -> dict[ExecutionMode, dict[str, BenchmarkFunction]]:
    """Collect non-empty benchmark function sets for each enabled mode."""
    retained: dict[ExecutionMode, dict[str, BenchmarkFunction]] = {}
    for mode in modes:
        provider = engine.benchmark_provider(mode)
        if provider is None:
            continue
        functions: BenchmarkFunctions | None = provider(workload_dir, cache_dir)
        if not functions:
            continue
        retained[mode] = dict(functions)
    return retained


def collect_syntaxes(
    engine: BaseEngine, features: Sequence[Feature]
) -> tuple[list[tuple[Feature, str]], list[Feature]]:
    """Return declared fragments and the features lacking one."""
    declared: list[tuple[Feature, str]] = []
    missing: list[Feature] = []
    for feature in features:
        syntax = engine.feature_syntax(feature)
        if syntax is None:
            missing.append(feature)
        else:
            declared.append((feature, syntax))
    return declared, missing


def missing_syntax_message(missing: Sequence[Feature]) -> str:
    return "No syntaxes provided for: " + " ".join(f.value for f in missing) + "."


def negotiate(
    name: str,
    engine: BaseEngine,
    *,
    modes: Sequence[ExecutionMode],
    features: Sequence[Feature],
    workload_dir: Path,
    cache_dir: Path,
) -> Negotiation:
    """Negotiate execution modes first, then feature syntax.

    An engine without any usable mode is rejected before its syntax is
    inspected. Partial feature support is a rejection: a smaller workload
    would not be comparable with the other engines.
    """
    outcome = Negotiation(name=name)
    outcome.functions = negotiate_modes(engine, modes, workload_dir, cache_dir)
    if not outcome.functions:
        outcome.errors.append(NO_BENCHMARK_FUNCTIONS)
        LOGGER.info("Engine %s rejected: %s", name, NO_BENCHMARK_FUNCTIONS)
        return outcome

    outcome.syntaxes, missing = collect_syntaxes(engine, features)
    if missing:
        message = missing_syntax_message(missing)
        outcome.errors.append(message)
        LOGGER.info("Engine %s rejected: %s", name, message)
    return outcome
