"""tplbench public API."""

from .catalog import (
    EXECUTION_MODES,
    FEATURES,
    LITERAL_TEXT,
    VARS_PRIMARY,
    VARS_SECONDARY,
    ExecutionMode,
    Feature,
)
from .engine import BaseEngine, ReusableRenderer
from .execution import BenchmarkCall, BenchmarkFunctionError
from .logging_utils import JsonlLogger
from .options import (
    BenchmarkOptions,
    OptionsError,
    default_options,
    load_options,
    parse_options,
    save_options,
)
from .orchestrator import TemplateBenchmark
from .registry import EngineRegistry, RegistryError, default_engine_registry
from .results import BenchmarkResult, ModeBenchmark, OutputRecord, ResultStatus
from .workspace import BenchmarkWorkspace, PreservedPaths

__all__ = [
    "EXECUTION_MODES",
    "FEATURES",
    "LITERAL_TEXT",
    "VARS_PRIMARY",
    "VARS_SECONDARY",
    "ExecutionMode",
    "Feature",
    "BaseEngine",
    "ReusableRenderer",
    "BenchmarkCall",
    "BenchmarkFunctionError",
    "JsonlLogger",
    "BenchmarkOptions",
    "OptionsError",
    "default_options",
    "load_options",
    "parse_options",
    "save_options",
    "TemplateBenchmark",
    "EngineRegistry",
    "RegistryError",
    "default_engine_registry",
    "BenchmarkResult",
    "ModeBenchmark",
    "OutputRecord",
    "ResultStatus",
    "BenchmarkWorkspace",
    "PreservedPaths",
]
