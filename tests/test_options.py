from __future__ import annotations

from pathlib import Path

import pytest

from tplbench.catalog import EXECUTION_MODES, FEATURES
from tplbench.options import (
    BenchmarkOptions,
    OptionsError,
    default_options,
    load_options,
    options_to_dict,
    parse_options,
    save_options,
)


def test_parse_options_applies_defaults() -> None:
    options = parse_options({"template_repeats": 5})
    assert options.template_repeats == 5
    assert options.duration == 10.0
    assert options.style == "none"
    assert options.reference_tag == "J2"
    assert options.enabled_modes() == list(EXECUTION_MODES)


def test_parse_options_rejects_unknown_key() -> None:
    with pytest.raises(OptionsError):
        parse_options({"loop_unrolling": True})


def test_parse_options_rejects_ill_typed_value() -> None:
    with pytest.raises(OptionsError):
        parse_options({"template_repeats": "many"})


def test_zero_features_is_rejected() -> None:
    with pytest.raises(OptionsError, match="feature"):
        parse_options({feature.value: False for feature in FEATURES})


def test_zero_modes_is_rejected() -> None:
    with pytest.raises(OptionsError, match="execution mode"):
        parse_options({mode.value: False for mode in EXECUTION_MODES})


@pytest.mark.parametrize(
    "overrides",
    [{"template_repeats": 0}, {"duration": -1.0}, {"style": "verbose"}],
)
def test_out_of_range_values_are_rejected(overrides: dict[str, object]) -> None:
    with pytest.raises(OptionsError):
        parse_options(overrides)


def test_parse_options_accepts_dataclass_instance() -> None:
    options = BenchmarkOptions(duration=0.0)
    assert parse_options(options) == options


def test_parse_options_checks_dataclass_field_types() -> None:
    with pytest.raises(OptionsError):
        parse_options(BenchmarkOptions(template_repeats="many"))  # type: ignore[arg-type]
    with pytest.raises(OptionsError):
        parse_options(BenchmarkOptions(duration="fast"))  # type: ignore[arg-type]


def test_dotlist_overrides_are_checked_against_schema() -> None:
    options = parse_options({"style": "brief"}, overrides=["template_repeats=4"])
    assert options.template_repeats == 4
    assert options.style == "brief"
    with pytest.raises(OptionsError):
        parse_options(overrides=["template_repeats=lots"])
    with pytest.raises(OptionsError):
        parse_options(overrides=["loop_unrolling=true"])


def test_load_options_merges_yaml_and_overrides(tmp_path: Path) -> None:
    path = tmp_path / "bench.yaml"
    path.write_text("template_repeats: 3\nconstant_expression: true\n", encoding="utf-8")
    options = load_options(path, overrides=["duration=0.5", "style=brief"])
    assert options.template_repeats == 3
    assert options.constant_expression is True
    assert options.duration == 0.5
    assert options.style == "brief"


def test_default_options_round_trip_through_dict() -> None:
    defaults = default_options()
    assert defaults == options_to_dict(BenchmarkOptions())
    assert parse_options(defaults) == BenchmarkOptions()


def test_load_options_rejects_unknown_yaml_key(tmp_path: Path) -> None:
    path = tmp_path / "bench.yaml"
    path.write_text("loop_unrolling: true\n", encoding="utf-8")
    with pytest.raises(OptionsError):
        load_options(path)


def test_saved_options_load_back(tmp_path: Path) -> None:
    options = BenchmarkOptions(duration=0.5, style="all", reference_tag=None)
    path = tmp_path / "out" / "bench.yaml"
    save_options(path, options)
    assert load_options(path) == options
