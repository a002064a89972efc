"""Uniform zero-argument wrappers around engine benchmark functions."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Iterable, Mapping

from .catalog import EXECUTION_MODES, VARS_PRIMARY, VARS_SECONDARY, ExecutionMode
from .engine import BenchmarkFunction
from .synthesis import Workload


class BenchmarkFunctionError(RuntimeError):
    """Raised when engine code fails while being verified or timed."""

    def __init__(self, mode: ExecutionMode, tag: str, cause: BaseException) -> None:
        super().__init__(f"Benchmark function {mode.value}/{tag} failed: {cause}")
        self.mode = mode
        self.tag = tag


@dataclass(frozen=True)
class BenchmarkCall:
    """One (engine, mode, tag) benchmark bound to its inputs.

    Calling the object renders the workload reference appropriate for the
    mode (body for string modes, file name otherwise) with both variable
    datasets, so downstream passes never branch on mode semantics.
    """

    mode: ExecutionMode
    tag: str
    engine: str
    function: BenchmarkFunction
    workload_ref: str
    vars_primary: Mapping[str, Any] = field(default_factory=lambda: VARS_PRIMARY)
    vars_secondary: Mapping[str, Any] = field(default_factory=lambda: VARS_SECONDARY)

    def __call__(self) -> str | None:
        try:
            return self.function(
                self.workload_ref, self.vars_primary, self.vars_secondary
            )
        except Exception as exc:
            raise BenchmarkFunctionError(self.mode, self.tag, exc) from exc


def workload_ref_for(mode: ExecutionMode, workload: Workload) -> str:
    return workload.body if mode.from_string else workload.filename


def wrap_functions(
    engine: str,
    functions: Mapping[ExecutionMode, Mapping[str, BenchmarkFunction]],
    workload: Workload,
) -> list[BenchmarkCall]:
    """Wrap every retained function of one engine."""
    calls: list[BenchmarkCall] = []
    for mode in EXECUTION_MODES:
        for tag, function in functions.get(mode, {}).items():
            calls.append(
                BenchmarkCall(
                    mode=mode,
                    tag=tag,
                    engine=engine,
                    function=function,
                    workload_ref=workload_ref_for(mode, workload),
                )
            )
    return calls


def calls_by_mode(
    calls: Iterable[BenchmarkCall],
) -> dict[ExecutionMode, dict[str, BenchmarkCall]]:
    """Group calls per mode (canonical order) and tag (sorted order)."""
    grouped: dict[ExecutionMode, dict[str, BenchmarkCall]] = {}
    pending = list(calls)
    for mode in EXECUTION_MODES:
        tagged = {call.tag: call for call in pending if call.mode is mode}
        if tagged:
            grouped[mode] = {tag: tagged[tag] for tag in sorted(tagged)}
    return grouped
