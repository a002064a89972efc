from __future__ import annotations

from pathlib import Path

import pytest

from tplbench.catalog import FEATURES, VARS_PRIMARY, VARS_SECONDARY, ExecutionMode
from tplbench.engines.string_template import StringTemplateEngine
from tplbench.orchestrator import TemplateBenchmark
from tplbench.registry import EngineRegistry, _module_factory
from tplbench.results import ResultStatus

ALL_FEATURES = {feature.value: True for feature in FEATURES}
TEXT_AND_SCALAR = {
    feature.value: feature.value in ("literal_text", "scalar_variable")
    for feature in FEATURES
}


def _registry(*modules: str) -> EngineRegistry:
    registry = EngineRegistry()
    for module in modules:
        registry.register(module, _module_factory(f"tplbench.engines.{module}"))
    return registry


def test_string_template_renders_scalar(tmp_path: Path) -> None:
    engine = StringTemplateEngine()
    functions = engine.benchmark_functions_for_uncached_string(tmp_path, tmp_path)
    render = functions["STpl"]
    assert render("${scalar_variable}!", VARS_PRIMARY, VARS_SECONDARY) == (
        "I is a scalar, yarr!!"
    )
    assert engine.benchmark_provider(ExecutionMode.DISK_CACHE) is None


def test_string_template_rejected_for_default_features(isolated_tempdir) -> None:
    with TemplateBenchmark(
        {"duration": 0}, registry=_registry("string_template")
    ) as bench:
        errors = bench.engine_errors["string_template"]
    assert len(errors) == 1
    assert errors[0].startswith("No syntaxes provided for: records_loop_value ")


def test_jinja2_renders_every_feature_consistently(isolated_tempdir) -> None:
    pytest.importorskip("jinja2")
    options = dict(ALL_FEATURES, duration=0, template_repeats=2)
    with TemplateBenchmark(options, registry=_registry("jinja2_engine")) as bench:
        assert bench.engine_errors == {}
        assert bench.number_of_benchmarks() == 5
        result = bench.benchmark()
    assert result.result is ResultStatus.SUCCESS
    assert result.descriptions["J2"].startswith("Jinja2 (")


def test_jinja2_feature_output(tmp_path: Path) -> None:
    pytest.importorskip("jinja2")
    from tplbench.engines.jinja2_engine import Jinja2Engine

    engine = Jinja2Engine()
    render = engine.benchmark_functions_for_uncached_string(tmp_path, tmp_path)["J2"]
    syntaxes = engine.feature_syntaxes
    expected = {
        "scalar_variable": "I is a scalar, yarr!",
        "array_variable_value": "an",
        "deep_data_structure_value": "My god, it's full of hashes.",
        "hash_loop_value": (
            "aaa: firstbbb: secondccc: thirdddd: fourtheee: fifth"
        ),
        "variable_if_else_literal": "false",
        "complex_variable_expression": "21",
        "variable_function": "HI THERE",
    }
    for feature, output in expected.items():
        assert render(syntaxes[feature], VARS_PRIMARY, VARS_SECONDARY) == output


def test_jinja2_and_string_template_agree_on_shared_features(
    isolated_tempdir,
) -> None:
    pytest.importorskip("jinja2")
    options = dict(TEXT_AND_SCALAR, duration=0, template_repeats=3)
    registry = _registry("jinja2_engine", "string_template")
    with TemplateBenchmark(options, registry=registry) as bench:
        assert bench.retained_engines == ["jinja2_engine", "string_template"]
        result = bench.benchmark()
    assert result.result is ResultStatus.SUCCESS
    assert set(result.descriptions) == {"J2", "STpl"}


def test_jinja2_instance_reuse_keeps_environment(tmp_path: Path) -> None:
    pytest.importorskip("jinja2")
    from tplbench.engines.jinja2_engine import Jinja2Engine

    (tmp_path / "w.txt").write_text("{{ scalar_variable }}\n", encoding="utf-8")
    cache_dir = tmp_path / "cache"
    cache_dir.mkdir()
    render = Jinja2Engine().benchmark_functions_for_instance_reuse(
        tmp_path, cache_dir
    )["J2"]
    first = render("w.txt", VARS_PRIMARY, VARS_SECONDARY)
    renderer = render.__self__
    handle = renderer.handle
    assert render("w.txt", VARS_PRIMARY, VARS_SECONDARY) == first
    assert renderer.handle is handle
    assert first == "I is a scalar, yarr!\n"
