"""Typed OmegaConf schema for benchmark options.

Every recognized option is a field of :class:`BenchmarkOptions`. Caller
overrides, YAML files and dotlist entries are all merged over the structured
defaults, so unknown keys and ill-typed values are rejected at construction
time instead of surfacing as an empty benchmark later.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass
import importlib
from pathlib import Path
from typing import Any, Iterable, Mapping

import yaml

from .catalog import EXECUTION_MODES, FEATURES, ExecutionMode, Feature
from .timing import TIMING_STYLES

try:
    omegaconf = importlib.import_module("omegaconf")
except ModuleNotFoundError as exc:  # pragma: no cover
    raise RuntimeError(
        "tplbench.options requires 'omegaconf'. Install dependencies with `pip install -e .`."
    ) from exc

OmegaConf = omegaconf.OmegaConf


class OptionsError(ValueError):
    """Raised for unknown, ill-typed, or inconsistent benchmark options."""


@dataclass
class BenchmarkOptions:
    """Options controlling one orchestrator instance.

    Feature and execution-mode flags are named after the catalog values in
    :mod:`tplbench.catalog`.
    """

    literal_text: bool = True
    scalar_variable: bool = True
    hash_variable_value: bool = False
    array_variable_value: bool = False
    deep_data_structure_value: bool = False
    array_loop_value: bool = False
    hash_loop_value: bool = False
    records_loop_value: bool = True
    array_loop_template: bool = False
    hash_loop_template: bool = False
    records_loop_template: bool = True
    constant_if_literal: bool = False
    variable_if_literal: bool = True
    constant_if_else_literal: bool = False
    variable_if_else_literal: bool = True
    constant_if_template: bool = False
    variable_if_template: bool = True
    constant_if_else_template: bool = False
    variable_if_else_template: bool = True
    constant_expression: bool = False
    variable_expression: bool = False
    complex_variable_expression: bool = False
    constant_function: bool = False
    variable_function: bool = False

    uncached_string: bool = True
    uncached_disk: bool = True
    disk_cache: bool = True
    shared_memory_cache: bool = True
    memory_cache: bool = True
    instance_reuse: bool = True

    template_repeats: int = 30
    duration: float = 10.0
    style: str = "none"
    preserve_temp: bool = False
    reference_tag: str | None = "J2"

    def enabled_features(self) -> list[Feature]:
        """Return enabled features in canonical order."""
        return [feature for feature in FEATURES if getattr(self, feature.value)]

    def enabled_modes(self) -> list[ExecutionMode]:
        """Return enabled execution modes in canonical order."""
        return [mode for mode in EXECUTION_MODES if getattr(self, mode.value)]


def validate_options(options: BenchmarkOptions) -> None:
    """Reject option combinations that cannot produce a meaningful run."""
    if options.template_repeats < 1:
        raise OptionsError(
            f"template_repeats must be >= 1, got {options.template_repeats}"
        )
    if options.duration < 0:
        raise OptionsError(f"duration must be >= 0, got {options.duration}")
    if options.style not in TIMING_STYLES:
        allowed = ", ".join(TIMING_STYLES)
        raise OptionsError(f"Unknown style '{options.style}'. Allowed: {allowed}")
    if not options.enabled_features():
        raise OptionsError("At least one feature must be enabled.")
    if not options.enabled_modes():
        raise OptionsError("At least one execution mode must be enabled.")


def _dotlist(overrides: Iterable[str] | None) -> list[Any]:
    items = [item for item in (overrides or []) if item]
    return [OmegaConf.from_dotlist(items)] if items else []


def _decode(sources: list[Any]) -> BenchmarkOptions:
    merged = OmegaConf.merge(OmegaConf.structured(BenchmarkOptions), *sources)
    decoded = OmegaConf.to_object(merged)
    if not isinstance(decoded, BenchmarkOptions):
        raise TypeError("Failed to decode options as BenchmarkOptions")
    validate_options(decoded)
    return decoded


def parse_options(
    data: Mapping[str, object] | BenchmarkOptions | None = None,
    *,
    overrides: Iterable[str] | None = None,
) -> BenchmarkOptions:
    """Decode caller options into validated :class:`BenchmarkOptions`.

    ``data`` may be a mapping or an existing :class:`BenchmarkOptions`; both
    are checked against the schema. ``overrides`` are dotlist entries such as
    ``template_repeats=5`` applied last.
    """
    try:
        if isinstance(data, BenchmarkOptions):
            source = OmegaConf.structured(data)
        else:
            source = OmegaConf.create(dict(data or {}))
        return _decode([source, *_dotlist(overrides)])
    except omegaconf.errors.OmegaConfBaseException as exc:
        raise OptionsError(f"Invalid benchmark options: {exc}") from exc


def load_options(
    path: str | Path,
    *,
    overrides: Iterable[str] | None = None,
) -> BenchmarkOptions:
    """Load options from a YAML file with optional ``key=value`` overrides."""
    try:
        return _decode([OmegaConf.load(Path(path)), *_dotlist(overrides)])
    except omegaconf.errors.OmegaConfBaseException as exc:
        raise OptionsError(f"Invalid benchmark options in {path}: {exc}") from exc


def save_options(path: str | Path, options: BenchmarkOptions) -> None:
    """Write options to a YAML file that :func:`load_options` reads back."""
    out = Path(path)
    out.parent.mkdir(parents=True, exist_ok=True)
    with out.open("w", encoding="utf-8") as handle:
        yaml.safe_dump(options_to_dict(options), handle, sort_keys=False)


def default_options() -> dict[str, Any]:
    """Return the documented defaults as a plain dictionary."""
    return asdict(BenchmarkOptions())


def options_to_dict(options: BenchmarkOptions) -> dict[str, Any]:
    """Convert :class:`BenchmarkOptions` to a plain dictionary."""
    return asdict(options)
