"""Standard-library ``string.Template`` plugin.

``string.Template`` only substitutes placeholders, so loops, conditionals,
expressions and function calls have no syntax here and the engine is only
retained when the enabled features are limited to text and scalars.
"""

from __future__ import annotations

from pathlib import Path
from string import Template
from typing import Any, Mapping

from tplbench.catalog import LITERAL_TEXT, merged_vars
from tplbench.engine import BaseEngine, BenchmarkFunctions

TAG = "STpl"


class StringTemplateEngine(BaseEngine):
    feature_syntaxes = {
        "literal_text": LITERAL_TEXT,
        "scalar_variable": "${scalar_variable}",
    }
    syntax_type = "placeholder"
    pure_python = True

    def benchmark_descriptions(self) -> dict[str, str]:
        return {TAG: "string.Template (stdlib)"}

    def benchmark_functions_for_uncached_string(
        self, workload_dir: Path, cache_dir: Path
    ) -> BenchmarkFunctions:
        del workload_dir, cache_dir

        def render(
            source: str, vars1: Mapping[str, Any], vars2: Mapping[str, Any]
        ) -> str:
            return Template(source).substitute(merged_vars(vars1, vars2))

        return {TAG: render}

    def benchmark_functions_for_uncached_disk(
        self, workload_dir: Path, cache_dir: Path
    ) -> BenchmarkFunctions:
        del cache_dir

        def render(
            name: str, vars1: Mapping[str, Any], vars2: Mapping[str, Any]
        ) -> str:
            source = (workload_dir / name).read_text(encoding="utf-8")
            return Template(source).substitute(merged_vars(vars1, vars2))

        return {TAG: render}


ENGINE = StringTemplateEngine
