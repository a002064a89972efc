"""Jinja2 plugin."""

from __future__ import annotations

from importlib.metadata import version
from pathlib import Path
from typing import Any, Mapping

from jinja2 import (
    BytecodeCache,
    Environment,
    FileSystemBytecodeCache,
    FileSystemLoader,
)
from jinja2.bccache import Bucket

from tplbench.catalog import LITERAL_TEXT, merged_vars
from tplbench.engine import BaseEngine, BenchmarkFunctions, ReusableRenderer

TAG = "J2"

_RECORDS_LOOP = "{% for r in records_loop %}{{ r.name }}: {{ r.age }}{% endfor %}"
_ARRAY_LOOP = "{% for i in array_loop %}{{ i }}{% endfor %}"
_HASH_LOOP = "{% for k, v in hash_loop|dictsort %}{{ k }}: {{ v }}{% endfor %}"


class MemoryBytecodeCache(BytecodeCache):
    """In-process bytecode store shared by short-lived environments."""

    def __init__(self) -> None:
        self._store: dict[str, bytes] = {}

    def load_bytecode(self, bucket: Bucket) -> None:
        code = self._store.get(bucket.key)
        if code is not None:
            bucket.bytecode_from_string(code)

    def dump_bytecode(self, bucket: Bucket) -> None:
        self._store[bucket.key] = bucket.bytecode_to_string()

    def clear(self) -> None:
        self._store.clear()


def _environment(**kwargs: Any) -> Environment:
    return Environment(keep_trailing_newline=True, **kwargs)


def _render_file(env: Environment, name: str, context: dict[str, Any]) -> str:
    return env.get_template(name).render(context)


class Jinja2Engine(BaseEngine):
    feature_syntaxes = {
        "literal_text": LITERAL_TEXT,
        "scalar_variable": "{{ scalar_variable }}",
        "hash_variable_value": "{{ hash_variable.hash_value_key }}",
        "array_variable_value": "{{ array_variable[2] }}",
        # "is" is a Jinja keyword, so the first hop needs subscript syntax.
        "deep_data_structure_value": "{{ this['is'].a.very.deep.hash.structure }}",
        "array_loop_value": _ARRAY_LOOP,
        "hash_loop_value": _HASH_LOOP,
        "records_loop_value": _RECORDS_LOOP,
        "array_loop_template": _ARRAY_LOOP,
        "hash_loop_template": _HASH_LOOP,
        "records_loop_template": _RECORDS_LOOP,
        "constant_if_literal": "{% if 1 %}true{% endif %}",
        "variable_if_literal": "{% if variable_if %}true{% endif %}",
        "constant_if_else_literal": "{% if 1 %}true{% else %}false{% endif %}",
        "variable_if_else_literal": (
            "{% if variable_if_else %}true{% else %}false{% endif %}"
        ),
        "constant_if_template": "{% if 1 %}{{ template_if_true }}{% endif %}",
        "variable_if_template": (
            "{% if variable_if %}{{ template_if_true }}{% endif %}"
        ),
        "constant_if_else_template": (
            "{% if 1 %}{{ template_if_true }}{% else %}"
            "{{ template_if_false }}{% endif %}"
        ),
        "variable_if_else_template": (
            "{% if variable_if_else %}{{ template_if_true }}{% else %}"
            "{{ template_if_false }}{% endif %}"
        ),
        "constant_expression": "{{ 10 + 12 }}",
        "variable_expression": "{{ variable_expression_a * variable_expression_b }}",
        "complex_variable_expression": (
            "{{ ((variable_expression_a * variable_expression_b) + "
            "variable_expression_a - variable_expression_b) // "
            "variable_expression_b }}"
        ),
        "constant_function": "{{ 'this has a substring.'|upper }}",
        "variable_function": "{{ variable_function_arg|upper }}",
    }
    syntax_type = "mini-language"
    pure_python = True

    def benchmark_descriptions(self) -> dict[str, str]:
        return {TAG: f"Jinja2 ({version('jinja2')})"}

    def benchmark_functions_for_uncached_string(
        self, workload_dir: Path, cache_dir: Path
    ) -> BenchmarkFunctions:
        del workload_dir, cache_dir

        def render(
            source: str, vars1: Mapping[str, Any], vars2: Mapping[str, Any]
        ) -> str:
            env = _environment(cache_size=0)
            return env.from_string(source).render(merged_vars(vars1, vars2))

        return {TAG: render}

    def benchmark_functions_for_uncached_disk(
        self, workload_dir: Path, cache_dir: Path
    ) -> BenchmarkFunctions:
        del cache_dir

        def render(
            name: str, vars1: Mapping[str, Any], vars2: Mapping[str, Any]
        ) -> str:
            env = _environment(loader=FileSystemLoader(workload_dir), cache_size=0)
            return _render_file(env, name, merged_vars(vars1, vars2))

        return {TAG: render}

    def benchmark_functions_for_disk_cache(
        self, workload_dir: Path, cache_dir: Path
    ) -> BenchmarkFunctions:
        def render(
            name: str, vars1: Mapping[str, Any], vars2: Mapping[str, Any]
        ) -> str:
            env = _environment(
                loader=FileSystemLoader(workload_dir),
                bytecode_cache=FileSystemBytecodeCache(str(cache_dir)),
                cache_size=0,
            )
            return _render_file(env, name, merged_vars(vars1, vars2))

        return {TAG: render}

    def benchmark_functions_for_shared_memory_cache(
        self, workload_dir: Path, cache_dir: Path
    ) -> BenchmarkFunctions | None:
        # Jinja2's memcached bytecode cache needs an external server.
        return None

    def benchmark_functions_for_memory_cache(
        self, workload_dir: Path, cache_dir: Path
    ) -> BenchmarkFunctions:
        del cache_dir
        bytecode_cache = MemoryBytecodeCache()

        def render(
            name: str, vars1: Mapping[str, Any], vars2: Mapping[str, Any]
        ) -> str:
            env = _environment(
                loader=FileSystemLoader(workload_dir),
                bytecode_cache=bytecode_cache,
                cache_size=0,
            )
            return _render_file(env, name, merged_vars(vars1, vars2))

        return {TAG: render}

    def benchmark_functions_for_instance_reuse(
        self, workload_dir: Path, cache_dir: Path
    ) -> BenchmarkFunctions:
        renderer: ReusableRenderer[Environment] = ReusableRenderer(
            lambda: _environment(
                loader=FileSystemLoader(workload_dir),
                bytecode_cache=FileSystemBytecodeCache(str(cache_dir)),
            ),
            _render_file,
        )
        return {TAG: renderer.render}


ENGINE = Jinja2Engine
