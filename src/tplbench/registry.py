"""Registry utilities for template engine plugins."""

from __future__ import annotations

from dataclasses import dataclass, field
import importlib
import logging
import pkgutil
from typing import Callable

from .engine import BaseEngine

LOGGER = logging.getLogger(__name__)

ENGINE_NAMESPACE = "tplbench.engines"

EngineFactory = Callable[[], BaseEngine]
EngineErrors = dict[str, list[str]]


class RegistryError(RuntimeError):
    """Raised for invalid registry operations."""


@dataclass(frozen=True)
class ActiveEngine:
    """Successfully activated engine plugin."""

    name: str
    engine: BaseEngine


def _module_factory(module_name: str) -> EngineFactory:
    def factory() -> BaseEngine:
        module = importlib.import_module(module_name)
        engine_cls = getattr(module, "ENGINE", None)
        if engine_cls is None:
            raise RegistryError(f"Module '{module_name}' does not define ENGINE.")
        engine = engine_cls()
        if not isinstance(engine, BaseEngine):
            raise RegistryError(
                f"ENGINE of '{module_name}' is not a BaseEngine subclass."
            )
        return engine

    return factory


@dataclass
class EngineRegistry:
    """Name-to-factory mapping for engine plugins."""

    _factories: dict[str, EngineFactory] = field(default_factory=dict)

    def register(
        self,
        name: str,
        factory: EngineFactory,
        *,
        overwrite: bool = False,
    ) -> None:
        if not overwrite and name in self._factories:
            raise RegistryError(f"Engine '{name}' is already registered.")
        self._factories[name] = factory

    def discover(self, package: str = ENGINE_NAMESPACE) -> list[str]:
        """Register one lazy factory per plugin module found in ``package``.

        Modules are imported only on :meth:`activate`, so a plugin whose
        third-party renderer is missing fails there and is recorded instead
        of breaking discovery.
        """
        pkg = importlib.import_module(package)
        found: list[str] = []
        for info in pkgutil.iter_modules(pkg.__path__):
            if info.name.startswith("_"):
                continue
            if info.name not in self._factories:
                self.register(info.name, _module_factory(f"{package}.{info.name}"))
            found.append(info.name)
        LOGGER.debug("Discovered %d engine plugins in %s", len(found), package)
        return sorted(found)

    def activate(self) -> tuple[list[ActiveEngine], EngineErrors]:
        """Instantiate every registered engine, isolating failures per engine."""
        engines: list[ActiveEngine] = []
        errors: EngineErrors = {}
        for name in self.available():
            try:
                engine = self._factories[name]()
            except Exception as exc:
                LOGGER.warning("Engine %s failed to load: %s", name, exc)
                errors.setdefault(name, []).append(
                    f"Engine module load failure: {exc}"
                )
                continue
            engines.append(ActiveEngine(name=name, engine=engine))
        return engines, errors

    def available(self) -> list[str]:
        return sorted(self._factories)


def default_engine_registry() -> EngineRegistry:
    """Return a registry populated with the bundled engine plugins."""
    registry = EngineRegistry()
    registry.discover()
    return registry
