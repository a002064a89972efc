"""Timing subsystem used by the benchmark timing pass.

Each callable is run in calibrated batches until at least the requested
wall-clock duration has been spent on it. Per-call times of every batch are
kept as raw samples so callers can derive their own statistics; the
comparison chart mirrors the classic "rate plus pairwise percentage" table.
"""

from __future__ import annotations

from dataclasses import dataclass
import logging
import sys
import time
from typing import Callable, Mapping, TextIO

import numpy as np

LOGGER = logging.getLogger(__name__)

TIMING_STYLES: tuple[str, ...] = ("none", "brief", "all")

# Batches shorter than this are grown so timer resolution stays negligible.
MIN_BATCH_SECONDS = 0.01
MAX_BATCH_SIZE = 1 << 20


@dataclass(frozen=True)
class Timing:
    """Raw timing of one callable.

    Attributes
    ----------
    tag:
        Benchmark tag the callable was registered under.
    iterations:
        Total number of calls measured.
    elapsed:
        Wall-clock seconds spent in measured calls.
    cpu:
        Process CPU seconds spent in measured calls.
    samples:
        Mean per-call seconds of each measured batch.
    """

    tag: str
    iterations: int
    elapsed: float
    cpu: float
    samples: np.ndarray

    @property
    def rate(self) -> float:
        """Calls per wall-clock second."""
        if self.elapsed <= 0.0:
            return float("inf")
        return self.iterations / self.elapsed

    @property
    def mean(self) -> float:
        if self.samples.size == 0:
            return float("nan")
        return float(np.mean(self.samples))

    @property
    def median(self) -> float:
        if self.samples.size == 0:
            return float("nan")
        return float(np.median(self.samples))

    def to_summary(self) -> dict[str, object]:
        return {
            "iterations": self.iterations,
            "elapsed_sec": self.elapsed,
            "cpu_sec": self.cpu,
            "rate_per_sec": self.rate,
            "mean_sec": self.mean,
            "median_sec": self.median,
            "samples": [float(value) for value in self.samples],
        }


@dataclass(frozen=True)
class Comparison:
    """Pairwise relative performance of a set of timings.

    ``relative[i, j]`` is how much faster (positive percent) or slower
    (negative percent) ``tags[i]`` ran than ``tags[j]``. Tags are ordered
    slowest first.
    """

    tags: tuple[str, ...]
    rates: np.ndarray
    relative: np.ndarray

    def chart(self) -> list[list[str]]:
        """Return the comparison as rows of display strings."""
        rows: list[list[str]] = [["", "Rate", *self.tags]]
        for i, tag in enumerate(self.tags):
            row = [tag, _format_rate(float(self.rates[i]))]
            for j in range(len(self.tags)):
                if i == j:
                    row.append("--")
                else:
                    row.append(_format_percent(float(self.relative[i, j])))
            rows.append(row)
        return rows

    def to_summary(self) -> dict[str, object]:
        return {
            "tags": list(self.tags),
            "rates": [float(value) for value in self.rates],
            "relative_percent": [
                [float(value) for value in row] for row in self.relative
            ],
            "chart": self.chart(),
        }


def _format_rate(rate: float) -> str:
    if not np.isfinite(rate):
        return "inf/s"
    if rate >= 100:
        return f"{rate:.0f}/s"
    if rate >= 10:
        return f"{rate:.1f}/s"
    return f"{rate:.2f}/s"


def _format_percent(value: float) -> str:
    if not np.isfinite(value):
        return "n/a"
    return f"{value:.0f}%"


def _run_batch(fn: Callable[[], object], size: int) -> tuple[float, float]:
    wall_start = time.perf_counter()
    cpu_start = time.process_time()
    for _ in range(size):
        fn()
    return time.perf_counter() - wall_start, time.process_time() - cpu_start


def time_callable(tag: str, fn: Callable[[], object], duration: float) -> Timing:
    """Measure ``fn`` for at least ``duration`` wall-clock seconds.

    The batch size starts at one call and doubles until a batch takes at least
    :data:`MIN_BATCH_SECONDS`; calibration batches count towards the result.
    At least one batch is always measured, so ``duration`` is a lower bound
    and not a hard cutoff.
    """
    samples: list[float] = []
    iterations = 0
    elapsed = 0.0
    cpu = 0.0
    batch_size = 1

    while True:
        batch_wall, batch_cpu = _run_batch(fn, batch_size)
        samples.append(batch_wall / batch_size)
        iterations += batch_size
        elapsed += batch_wall
        cpu += batch_cpu
        if elapsed >= duration:
            break
        if batch_wall < MIN_BATCH_SECONDS and batch_size < MAX_BATCH_SIZE:
            batch_size *= 2

    return Timing(
        tag=tag,
        iterations=iterations,
        elapsed=elapsed,
        cpu=cpu,
        samples=np.asarray(samples, dtype=np.float64),
    )


def time_these(
    functions: Mapping[str, Callable[[], object]],
    duration: float,
    style: str = "none",
    *,
    stream: TextIO | None = None,
) -> dict[str, Timing]:
    """Time every callable in ``functions`` (sorted by tag)."""
    out = stream or sys.stdout
    timings: dict[str, Timing] = {}
    for tag in sorted(functions):
        LOGGER.debug("Timing %s for at least %.2fs", tag, duration)
        timing = time_callable(tag, functions[tag], duration)
        timings[tag] = timing
        if style != "none":
            out.write(
                f"{tag:>10}: {timing.elapsed:6.2f} wallclock secs "
                f"({timing.cpu:6.2f} cpu) @ {_format_rate(timing.rate)} "
                f"(n={timing.iterations})\n"
            )
    return timings


def compare_these(
    timings: Mapping[str, Timing],
    style: str = "none",
    *,
    stream: TextIO | None = None,
) -> Comparison:
    """Derive the pairwise relative-rate comparison of ``timings``."""
    ordered = sorted(timings.values(), key=lambda item: (item.rate, item.tag))
    tags = tuple(item.tag for item in ordered)
    rates = np.array([item.rate for item in ordered], dtype=np.float64)
    with np.errstate(divide="ignore", invalid="ignore"):
        relative = (rates[:, np.newaxis] / rates[np.newaxis, :] - 1.0) * 100.0
    comparison = Comparison(tags=tags, rates=rates, relative=relative)

    if style == "all":
        out = stream or sys.stdout
        rows = comparison.chart()
        widths = [max(len(row[col]) for row in rows) for col in range(len(rows[0]))]
        for row in rows:
            cells = [cell.rjust(width) for cell, width in zip(row, widths)]
            out.write(" ".join(cells) + "\n")
    return comparison
