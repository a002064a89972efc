"""Result records returned by a benchmark run."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from .catalog import ExecutionMode
from .timing import Comparison, Timing

NO_CONTENT = "[no content returned]\n"


class ResultStatus(str, Enum):
    """Terminal status of a run."""

    SUCCESS = "SUCCESS"
    NO_BENCHMARKS = "NO BENCHMARKS TO RUN"
    MISMATCHED_OUTPUT = "MISMATCHED TEMPLATE OUTPUT"


@dataclass(frozen=True)
class OutputRecord:
    """Captured output of one benchmark function."""

    type: ExecutionMode
    tag: str
    output: str | None

    @property
    def display_output(self) -> str:
        return NO_CONTENT if self.output is None else self.output

    def to_dict(self) -> dict[str, Any]:
        return {"type": self.type.value, "tag": self.tag, "output": self.display_output}


@dataclass(frozen=True)
class ModeBenchmark:
    """Timing block of one execution mode."""

    type: ExecutionMode
    timings: dict[str, Timing]
    comparison: Comparison

    def to_dict(self) -> dict[str, Any]:
        return {
            "type": self.type.value,
            "timings": {tag: t.to_summary() for tag, t in self.timings.items()},
            "comparison": self.comparison.to_summary(),
        }


@dataclass
class BenchmarkResult:
    """Structured outcome of :meth:`TemplateBenchmark.benchmark`.

    Failed runs carry ``reference`` and ``failures`` (mismatch only);
    successful runs carry ``start_time``, ``title``, ``descriptions`` and one
    :class:`ModeBenchmark` per timed mode.
    """

    result: ResultStatus
    reference: OutputRecord | None = None
    failures: list[OutputRecord] = field(default_factory=list)
    start_time: int | None = None
    title: str | None = None
    descriptions: dict[str, str] = field(default_factory=dict)
    benchmarks: list[ModeBenchmark] = field(default_factory=list)

    @property
    def succeeded(self) -> bool:
        return self.result is ResultStatus.SUCCESS

    def benchmark_for(self, mode: ExecutionMode) -> ModeBenchmark | None:
        for block in self.benchmarks:
            if block.type is mode:
                return block
        return None

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"result": self.result.value}
        if self.result is ResultStatus.MISMATCHED_OUTPUT:
            data["reference"] = self.reference.to_dict() if self.reference else None
            data["failures"] = [failure.to_dict() for failure in self.failures]
        if self.result is ResultStatus.SUCCESS:
            data["start_time"] = self.start_time
            data["title"] = self.title
            data["descriptions"] = dict(self.descriptions)
            data["benchmarks"] = [block.to_dict() for block in self.benchmarks]
        return data
