from __future__ import annotations

from pathlib import Path
from typing import Any, Callable, Mapping

import pytest

from tplbench.catalog import FEATURES
from tplbench.engine import BaseEngine, BenchmarkFunctions
from tplbench.registry import EngineRegistry


class FakeEngine(BaseEngine):
    """Engine whose rendering is a plain text transform of the workload."""

    feature_syntaxes = {feature.value: f"<{feature.value}>" for feature in FEATURES}

    def __init__(
        self,
        tag: str,
        transform: Callable[[str], str | None] | None = None,
        *,
        syntaxes: Mapping[str, str | None] | None = None,
    ) -> None:
        self.tag = tag
        self.transform = transform or (lambda text: text)
        if syntaxes is not None:
            self.feature_syntaxes = syntaxes

    def benchmark_descriptions(self) -> dict[str, str]:
        return {self.tag: f"Fake {self.tag}"}

    def benchmark_functions_for_uncached_string(
        self, workload_dir: Path, cache_dir: Path
    ) -> BenchmarkFunctions:
        del workload_dir, cache_dir

        def render(source: str, vars1: Mapping[str, Any], vars2: Mapping[str, Any]):
            del vars1, vars2
            return self.transform(source)

        return {self.tag: render}

    def benchmark_functions_for_uncached_disk(
        self, workload_dir: Path, cache_dir: Path
    ) -> BenchmarkFunctions:
        del cache_dir

        def render(name: str, vars1: Mapping[str, Any], vars2: Mapping[str, Any]):
            del vars1, vars2
            return self.transform((workload_dir / name).read_text(encoding="utf-8"))

        return {self.tag: render}


@pytest.fixture
def fake_engine_cls() -> type[FakeEngine]:
    return FakeEngine


@pytest.fixture
def make_registry() -> Callable[..., EngineRegistry]:
    """Build a registry from ``name=engine`` pairs."""

    def build(**engines: BaseEngine) -> EngineRegistry:
        registry = EngineRegistry()
        for name, engine in engines.items():
            registry.register(name, lambda engine=engine: engine)
        return registry

    return build


@pytest.fixture
def isolated_tempdir(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Redirect :func:`tempfile.mkdtemp` into ``tmp_path``."""
    import tempfile

    root = tmp_path / "tmp"
    root.mkdir()
    monkeypatch.setattr(tempfile, "tempdir", str(root))
    return root
