from __future__ import annotations

import io

import numpy as np
import pytest

from tplbench.timing import Timing, compare_these, time_callable, time_these


def _timing(tag: str, iterations: int, elapsed: float) -> Timing:
    return Timing(
        tag=tag,
        iterations=iterations,
        elapsed=elapsed,
        cpu=elapsed,
        samples=np.array([elapsed / iterations]),
    )


def test_zero_duration_still_measures_one_batch() -> None:
    calls = []
    timing = time_callable("t", lambda: calls.append(1), 0.0)
    assert timing.iterations == 1
    assert len(calls) == 1
    assert timing.samples.shape == (1,)


def test_time_callable_runs_for_at_least_duration() -> None:
    timing = time_callable("t", lambda: None, 0.02)
    assert timing.elapsed >= 0.02
    assert timing.rate > 0


def test_rate_is_infinite_without_elapsed_time() -> None:
    assert _timing("t", 3, 0.0).rate == float("inf")


def test_time_these_reports_per_tag() -> None:
    out = io.StringIO()
    functions = {"b": lambda: None, "a": lambda: None}
    timings = time_these(functions, 0.0, "brief", stream=out)
    assert list(timings) == ["a", "b"]
    lines = out.getvalue().splitlines()
    assert len(lines) == 2
    assert lines[0].strip().startswith("a:")
    assert "wallclock secs" in lines[0]


def test_time_these_is_silent_without_style() -> None:
    out = io.StringIO()
    time_these({"a": lambda: None}, 0.0, "none", stream=out)
    assert out.getvalue() == ""


def test_compare_these_orders_slowest_first() -> None:
    timings = {"fast": _timing("fast", 20, 1.0), "slow": _timing("slow", 10, 1.0)}
    comparison = compare_these(timings)
    assert comparison.tags == ("slow", "fast")
    assert comparison.relative[1, 0] == pytest.approx(100.0)
    assert comparison.relative[0, 1] == pytest.approx(-50.0)
    assert comparison.chart() == [
        ["", "Rate", "slow", "fast"],
        ["slow", "10.0/s", "--", "-50%"],
        ["fast", "20.0/s", "100%", "--"],
    ]


def test_compare_these_prints_chart_for_full_style() -> None:
    out = io.StringIO()
    compare_these({"a": _timing("a", 5, 1.0)}, "all", stream=out)
    assert "Rate" in out.getvalue()
    assert "--" in out.getvalue()

    quiet = io.StringIO()
    compare_these({"a": _timing("a", 5, 1.0)}, "brief", stream=quiet)
    assert quiet.getvalue() == ""
