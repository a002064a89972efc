"""Capability interface implemented by template engine plugins."""

from __future__ import annotations

from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Callable, ClassVar, Generic, Mapping, Protocol, TypeVar

from .catalog import ExecutionMode, Feature

BenchmarkFunction = Callable[[str, Mapping[str, Any], Mapping[str, Any]], "str | None"]
BenchmarkFunctions = Mapping[str, BenchmarkFunction]

THandle = TypeVar("THandle")


class BenchmarkProvider(Protocol):
    """Callable returning the benchmark functions of one execution mode."""

    def __call__(
        self, workload_dir: Path, cache_dir: Path
    ) -> BenchmarkFunctions | None: ...


class BaseEngine(ABC):
    """Base class for template engine plugins.

    Subclasses declare ``feature_syntaxes`` (feature name to template
    fragment, ``None`` for unsupported features) and one
    ``benchmark_functions_for_<mode>(workload_dir, cache_dir)`` method per
    supported :class:`~tplbench.catalog.ExecutionMode`. A benchmark function
    is called as ``fn(workload_ref, vars_primary, vars_secondary)`` where
    ``workload_ref`` is the workload body for string modes and the workload
    file name (relative to ``workload_dir``) for on-disk modes.
    """

    feature_syntaxes: ClassVar[Mapping[str, str | None]] = {}
    syntax_type: ClassVar[str] = "mini-language"
    pure_python: ClassVar[bool] = True

    def feature_syntax(self, feature: Feature) -> str | None:
        """Return the template fragment for ``feature`` or ``None``."""
        return self.feature_syntaxes.get(feature.value)

    @abstractmethod
    def benchmark_descriptions(self) -> dict[str, str]:
        """Return benchmark tag to human-readable label."""

    def benchmark_provider(self, mode: ExecutionMode) -> BenchmarkProvider | None:
        """Return the provider for ``mode`` if the engine supports it."""
        provider = getattr(self, f"benchmark_functions_for_{mode.value}", None)
        if provider is None or not callable(provider):
            return None
        return provider


class ReusableRenderer(Generic[THandle]):
    """Own one lazily created renderer handle for instance-reuse benchmarks.

    The handle is built by ``factory`` on the first :meth:`render` call and
    reused by every later call for the lifetime of this object.
    """

    def __init__(
        self,
        factory: Callable[[], THandle],
        render_fn: Callable[[THandle, str, dict[str, Any]], str],
    ) -> None:
        self._factory = factory
        self._render_fn = render_fn
        self._handle: THandle | None = None

    @property
    def handle(self) -> THandle | None:
        return self._handle

    def render(
        self,
        workload_ref: str,
        vars_primary: Mapping[str, Any],
        vars_secondary: Mapping[str, Any],
    ) -> str:
        if self._handle is None:
            self._handle = self._factory()
        return self._render_fn(
            self._handle, workload_ref, {**vars_primary, **vars_secondary}
        )

    __call__ = render
