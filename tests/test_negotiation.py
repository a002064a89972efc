from __future__ import annotations

from pathlib import Path

from tplbench.catalog import EXECUTION_MODES, ExecutionMode, Feature
from tplbench.negotiation import (
    NO_BENCHMARK_FUNCTIONS,
    collect_syntaxes,
    missing_syntax_message,
    negotiate,
)


def test_modes_are_checked_before_syntax(fake_engine_cls, tmp_path: Path) -> None:
    engine = fake_engine_cls("A", syntaxes={})
    outcome = negotiate(
        "a",
        engine,
        modes=[ExecutionMode.INSTANCE_REUSE],
        features=[Feature.LITERAL_TEXT],
        workload_dir=tmp_path,
        cache_dir=tmp_path,
    )
    assert not outcome.accepted
    assert outcome.errors == [NO_BENCHMARK_FUNCTIONS]
    assert outcome.syntaxes == []


def test_empty_function_sets_are_dropped(fake_engine_cls, tmp_path: Path) -> None:
    class StringOnly(fake_engine_cls):
        def benchmark_functions_for_uncached_disk(self, workload_dir, cache_dir):
            return {}

    outcome = negotiate(
        "a",
        StringOnly("A"),
        modes=list(EXECUTION_MODES),
        features=[Feature.LITERAL_TEXT],
        workload_dir=tmp_path,
        cache_dir=tmp_path,
    )
    assert outcome.accepted
    assert list(outcome.functions) == [ExecutionMode.UNCACHED_STRING]
    assert not outcome.needs_workload_file


def test_functions_follow_canonical_mode_order(fake_engine_cls, tmp_path: Path) -> None:
    outcome = negotiate(
        "a",
        fake_engine_cls("A"),
        modes=[ExecutionMode.UNCACHED_STRING, ExecutionMode.UNCACHED_DISK],
        features=[Feature.SCALAR_VARIABLE, Feature.LITERAL_TEXT],
        workload_dir=tmp_path,
        cache_dir=tmp_path,
    )
    assert list(outcome.functions) == [
        ExecutionMode.UNCACHED_STRING,
        ExecutionMode.UNCACHED_DISK,
    ]
    assert set(outcome.functions[ExecutionMode.UNCACHED_DISK]) == {"A"}
    assert outcome.needs_workload_file


def test_collect_syntaxes_splits_declared_and_missing(fake_engine_cls) -> None:
    engine = fake_engine_cls(
        "A", syntaxes={"literal_text": "hello", "scalar_variable": None}
    )
    declared, missing = collect_syntaxes(
        engine,
        [Feature.LITERAL_TEXT, Feature.SCALAR_VARIABLE, Feature.CONSTANT_EXPRESSION],
    )
    assert declared == [(Feature.LITERAL_TEXT, "hello")]
    assert missing == [Feature.SCALAR_VARIABLE, Feature.CONSTANT_EXPRESSION]
    assert missing_syntax_message(missing) == (
        "No syntaxes provided for: scalar_variable constant_expression."
    )
