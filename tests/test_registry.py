from __future__ import annotations

import pytest

from tplbench.registry import (
    EngineRegistry,
    RegistryError,
    _module_factory,
    default_engine_registry,
)


def test_register_rejects_duplicates_unless_overwritten(fake_engine_cls) -> None:
    registry = EngineRegistry()
    registry.register("a", lambda: fake_engine_cls("A"))
    with pytest.raises(RegistryError):
        registry.register("a", lambda: fake_engine_cls("A"))
    registry.register("a", lambda: fake_engine_cls("B"), overwrite=True)
    active, errors = registry.activate()
    assert errors == {}
    assert [item.name for item in active] == ["a"]
    assert active[0].engine.benchmark_descriptions() == {"B": "Fake B"}


def test_activate_runs_in_name_order(fake_engine_cls) -> None:
    registry = EngineRegistry()
    for name in ("zeta", "alpha", "mu"):
        registry.register(name, lambda: fake_engine_cls("T"))
    active, _ = registry.activate()
    assert [item.name for item in active] == ["alpha", "mu", "zeta"]


def test_default_registry_discovers_bundled_plugins() -> None:
    registry = default_engine_registry()
    assert registry.available() == ["jinja2_engine", "string_template"]


def test_module_without_engine_attribute_fails_activation() -> None:
    registry = EngineRegistry()
    registry.register("catalog", _module_factory("tplbench.catalog"))
    active, errors = registry.activate()
    assert active == []
    assert errors == {
        "catalog": [
            "Engine module load failure: "
            "Module 'tplbench.catalog' does not define ENGINE."
        ]
    }


def test_missing_module_fails_activation() -> None:
    registry = EngineRegistry()
    registry.register("ghost", _module_factory("tplbench.engines.ghost"))
    _, errors = registry.activate()
    assert errors["ghost"][0].startswith("Engine module load failure: ")
