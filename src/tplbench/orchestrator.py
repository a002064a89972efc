"""Benchmark orchestration across template engine plugins.

:class:`TemplateBenchmark` runs the whole setup at construction time:

1. Activate engine plugins from an :class:`~tplbench.registry.EngineRegistry`.
2. Negotiate execution modes and feature syntax per engine.
3. Synthesize and persist each retained engine's workload.
4. Wrap every benchmark function into a zero-argument call.

:meth:`TemplateBenchmark.benchmark` then verifies every output against a
reference and only times the calls once all of them agree. Temporary
directories live until :meth:`TemplateBenchmark.close` (or the end of a
``with`` block).
"""

from __future__ import annotations

import logging
from pathlib import Path
import time
from types import TracebackType
from typing import Any, Mapping

from .catalog import EXECUTION_MODES, FEATURES, ExecutionMode, Feature
from .execution import BenchmarkCall, calls_by_mode, wrap_functions
from .negotiation import negotiate
from .options import BenchmarkOptions, default_options, parse_options
from .registry import EngineErrors, EngineRegistry, default_engine_registry
from .results import BenchmarkResult, ModeBenchmark, ResultStatus
from .synthesis import Workload, synthesize_workload
from .timing import compare_these, time_these
from .verification import verify
from .workspace import BenchmarkWorkspace, PreservedPaths

LOGGER = logging.getLogger(__name__)


class TemplateBenchmark:
    """Compare template engines under one shared set of workloads.

    Parameters
    ----------
    options:
        :class:`BenchmarkOptions` or a mapping of option overrides.
    registry:
        Engine registry; defaults to the bundled plugins.
    **overrides:
        Additional option overrides applied on top of ``options``.
    """

    def __init__(
        self,
        options: BenchmarkOptions | Mapping[str, object] | None = None,
        *,
        registry: EngineRegistry | None = None,
        **overrides: object,
    ) -> None:
        if isinstance(options, BenchmarkOptions) and not overrides:
            self.options = parse_options(options)
        else:
            merged: dict[str, object] = {}
            if isinstance(options, BenchmarkOptions):
                merged.update(vars(options))
            elif options is not None:
                merged.update(options)
            merged.update(overrides)
            self.options = parse_options(merged)

        self._features = self.options.enabled_features()
        self._modes = self.options.enabled_modes()
        self._engines: list[str] = []
        self._errors: EngineErrors = {}
        self._workloads: dict[str, Workload] = {}
        self._calls: list[BenchmarkCall] = []
        self._descriptions: dict[str, str] = {}

        self._workspace = BenchmarkWorkspace(preserve=self.options.preserve_temp)
        try:
            self._setup(registry or default_engine_registry())
        except BaseException:
            self._workspace.close()
            raise

    def _setup(self, registry: EngineRegistry) -> None:
        active, errors = registry.activate()
        self._errors.update(errors)
        self._engines = [item.name for item in active]
        tag_owner: dict[tuple[ExecutionMode, str], str] = {}

        for item in active:
            workload_dir, cache_dir = self._workspace.engine_dirs(item.name)
            try:
                outcome = negotiate(
                    item.name,
                    item.engine,
                    modes=self._modes,
                    features=self._features,
                    workload_dir=workload_dir,
                    cache_dir=cache_dir,
                )
                descriptions = item.engine.benchmark_descriptions()
            except Exception as exc:
                LOGGER.warning(
                    "Engine %s failed during negotiation: %s", item.name, exc
                )
                self._errors.setdefault(item.name, []).append(
                    f"Engine capability query failure: {exc}"
                )
                continue
            if not outcome.accepted:
                self._errors.setdefault(item.name, []).extend(outcome.errors)
                continue

            clashes = sorted(
                {
                    f"{tag} ({tag_owner[(mode, tag)]})"
                    for mode, functions in outcome.functions.items()
                    for tag in functions
                    if (mode, tag) in tag_owner
                }
            )
            if clashes:
                message = f"Benchmark tags already in use: {', '.join(clashes)}."
                LOGGER.info("Engine %s rejected: %s", item.name, message)
                self._errors.setdefault(item.name, []).append(message)
                continue

            workload = synthesize_workload(
                item.name,
                outcome.syntaxes,
                repeats=self.options.template_repeats,
                workload_dir=workload_dir,
                write_file=outcome.needs_workload_file,
            )
            self._workloads[item.name] = workload
            self._calls.extend(wrap_functions(item.name, outcome.functions, workload))

            for mode, functions in outcome.functions.items():
                for tag in functions:
                    tag_owner[(mode, tag)] = item.name
                    self._descriptions[tag] = descriptions.get(tag, tag)

        LOGGER.info(
            "Prepared %d benchmark functions from %d engines (%d rejected)",
            len(self._calls),
            len(self._workloads),
            len(self._errors),
        )

    def benchmark(self) -> BenchmarkResult:
        """Verify every benchmark output, then time each enabled mode."""
        if self._workspace.closed:
            raise RuntimeError("TemplateBenchmark is closed")
        verification = verify(self._calls, self.options.reference_tag)
        if verification.status is ResultStatus.NO_BENCHMARKS:
            return BenchmarkResult(result=ResultStatus.NO_BENCHMARKS)
        if not verification.passed:
            return BenchmarkResult(
                result=verification.status,
                reference=verification.reference,
                failures=list(verification.failures),
            )

        start_time = int(time.time())
        result = BenchmarkResult(
            result=ResultStatus.SUCCESS,
            start_time=start_time,
            title="Template Benchmark @" + time.ctime(start_time),
            descriptions=dict(self._descriptions),
        )
        duration = self.options.duration
        if not duration:
            return result

        style = self.options.style
        for mode, tagged in calls_by_mode(self._calls).items():
            LOGGER.info("Timing %d functions for %s", len(tagged), mode.value)
            timings = time_these(tagged, duration, style)
            comparison = compare_these(timings, style)
            result.benchmarks.append(
                ModeBenchmark(type=mode, timings=timings, comparison=comparison)
            )
        return result

    @staticmethod
    def default_options() -> dict[str, Any]:
        return default_options()

    @staticmethod
    def valid_features() -> list[Feature]:
        return list(FEATURES)

    @staticmethod
    def valid_modes() -> list[ExecutionMode]:
        return list(EXECUTION_MODES)

    @property
    def engines(self) -> list[str]:
        """Names of engines that loaded successfully."""
        return list(self._engines)

    @property
    def retained_engines(self) -> list[str]:
        """Names of engines that passed negotiation."""
        return list(self._workloads)

    @property
    def features(self) -> list[Feature]:
        return list(self._features)

    @property
    def modes(self) -> list[ExecutionMode]:
        return list(self._modes)

    @property
    def engine_errors(self) -> EngineErrors:
        return {name: list(reasons) for name, reasons in self._errors.items()}

    @property
    def template_dir(self) -> Path:
        return self._workspace.template_dir

    @property
    def cache_dir(self) -> Path:
        return self._workspace.cache_dir

    def workload_for(self, name: str) -> Workload:
        return self._workloads[name]

    def number_of_benchmarks(self) -> int:
        return len(self._calls)

    def estimate_benchmark_duration(self) -> float:
        """Lower-bound estimate of the timing pass in seconds."""
        return self.options.duration * self.number_of_benchmarks()

    def close(self) -> PreservedPaths | None:
        """Remove (or report) the temporary directories."""
        return self._workspace.close()

    def __enter__(self) -> TemplateBenchmark:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()
