"""Temporary directory management for one benchmark run.

A workspace owns two sibling roots: ``<root>/`` holding one workload
directory per engine, and ``<root>.cache/`` holding one cache directory per
engine. Teardown is registered with :func:`weakref.finalize`, so it runs
exactly once whether triggered by :meth:`BenchmarkWorkspace.close`, a
``with`` block, or interpreter exit.
"""

from __future__ import annotations

from dataclasses import dataclass
import logging
from pathlib import Path
import shutil
import tempfile
from types import TracebackType
import weakref

LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True)
class PreservedPaths:
    """Roots left on disk because preservation was requested."""

    template_dir: Path
    cache_dir: Path


def _remove_tree(path: Path) -> None:
    if not path.exists():
        LOGGER.debug("Temporary directory already removed: %s", path)
        return
    try:
        shutil.rmtree(path)
    except OSError as exc:
        LOGGER.warning("Failed to remove temporary directory %s: %s", path, exc)


def _teardown(template_dir: Path, cache_dir: Path, preserve: bool) -> PreservedPaths | None:
    if preserve:
        LOGGER.info("Not removing cache dir %s", cache_dir)
        LOGGER.info("Not removing template dir %s", template_dir)
        return PreservedPaths(template_dir=template_dir, cache_dir=cache_dir)
    _remove_tree(cache_dir)
    _remove_tree(template_dir)
    return None


class BenchmarkWorkspace:
    """Process-unique temporary roots with per-engine subdirectories."""

    def __init__(self, *, preserve: bool = False, prefix: str = "tplbench-") -> None:
        self.preserve = preserve
        self.template_dir = Path(tempfile.mkdtemp(prefix=prefix))
        self.cache_dir = self.template_dir.with_name(self.template_dir.name + ".cache")
        self._finalizer = weakref.finalize(
            self, _teardown, self.template_dir, self.cache_dir, preserve
        )
        # The cache root is created after registering teardown so a failure
        # here still removes the template root.
        self.cache_dir.mkdir()
        LOGGER.debug("Created workspace %s", self.template_dir)

    def engine_dirs(self, name: str) -> tuple[Path, Path]:
        """Create and return ``(workload_dir, cache_dir)`` for engine ``name``."""
        workload_dir = self.template_dir / name
        cache_dir = self.cache_dir / name
        workload_dir.mkdir(parents=True, exist_ok=True)
        cache_dir.mkdir(parents=True, exist_ok=True)
        return workload_dir, cache_dir

    @property
    def closed(self) -> bool:
        return not self._finalizer.alive

    def close(self) -> PreservedPaths | None:
        """Tear down the workspace; later calls are no-ops returning ``None``."""
        return self._finalizer()

    def __enter__(self) -> BenchmarkWorkspace:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()
