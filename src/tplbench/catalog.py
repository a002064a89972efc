"""Feature and execution-mode catalogs shared by every benchmark run.

Both catalogs are closed and ordered. Workloads are always composed in
``Feature`` order and modes are always visited in ``ExecutionMode`` order, so
results from different engines stay structurally comparable.
"""

from __future__ import annotations

from enum import Enum
from types import MappingProxyType
from typing import Any, Mapping


class Feature(str, Enum):
    """Template-language capability exercised by a synthesized workload."""

    LITERAL_TEXT = "literal_text"
    SCALAR_VARIABLE = "scalar_variable"
    HASH_VARIABLE_VALUE = "hash_variable_value"
    ARRAY_VARIABLE_VALUE = "array_variable_value"
    DEEP_DATA_STRUCTURE_VALUE = "deep_data_structure_value"
    ARRAY_LOOP_VALUE = "array_loop_value"
    HASH_LOOP_VALUE = "hash_loop_value"
    RECORDS_LOOP_VALUE = "records_loop_value"
    ARRAY_LOOP_TEMPLATE = "array_loop_template"
    HASH_LOOP_TEMPLATE = "hash_loop_template"
    RECORDS_LOOP_TEMPLATE = "records_loop_template"
    CONSTANT_IF_LITERAL = "constant_if_literal"
    VARIABLE_IF_LITERAL = "variable_if_literal"
    CONSTANT_IF_ELSE_LITERAL = "constant_if_else_literal"
    VARIABLE_IF_ELSE_LITERAL = "variable_if_else_literal"
    CONSTANT_IF_TEMPLATE = "constant_if_template"
    VARIABLE_IF_TEMPLATE = "variable_if_template"
    CONSTANT_IF_ELSE_TEMPLATE = "constant_if_else_template"
    VARIABLE_IF_ELSE_TEMPLATE = "variable_if_else_template"
    CONSTANT_EXPRESSION = "constant_expression"
    VARIABLE_EXPRESSION = "variable_expression"
    COMPLEX_VARIABLE_EXPRESSION = "complex_variable_expression"
    CONSTANT_FUNCTION = "constant_function"
    VARIABLE_FUNCTION = "variable_function"


class ExecutionMode(str, Enum):
    """Caching/instantiation strategy an engine is exercised under."""

    UNCACHED_STRING = "uncached_string"
    UNCACHED_DISK = "uncached_disk"
    DISK_CACHE = "disk_cache"
    SHARED_MEMORY_CACHE = "shared_memory_cache"
    MEMORY_CACHE = "memory_cache"
    INSTANCE_REUSE = "instance_reuse"

    @property
    def from_string(self) -> bool:
        """Return ``True`` when the mode renders the in-memory workload body."""
        return self.value.endswith("_string")

    @property
    def on_disk(self) -> bool:
        """Return ``True`` when the mode renders the workload file."""
        return not self.from_string


FEATURES: tuple[Feature, ...] = tuple(Feature)
EXECUTION_MODES: tuple[ExecutionMode, ...] = tuple(ExecutionMode)

DEFAULT_FEATURES: frozenset[Feature] = frozenset(
    {
        Feature.LITERAL_TEXT,
        Feature.SCALAR_VARIABLE,
        Feature.RECORDS_LOOP_VALUE,
        Feature.RECORDS_LOOP_TEMPLATE,
        Feature.VARIABLE_IF_LITERAL,
        Feature.VARIABLE_IF_ELSE_LITERAL,
        Feature.VARIABLE_IF_TEMPLATE,
        Feature.VARIABLE_IF_ELSE_TEMPLATE,
    }
)

# Five lines of twelve words; plugins reuse it so literal output is identical.
LITERAL_TEXT = "\n".join([" ".join(["foo"] * 12)] * 5)


def _freeze(value: Any) -> Any:
    if isinstance(value, Mapping):
        return MappingProxyType({key: _freeze(item) for key, item in value.items()})
    if isinstance(value, (list, tuple)):
        return tuple(_freeze(item) for item in value)
    return value


VARS_PRIMARY: Mapping[str, Any] = _freeze(
    {
        "scalar_variable": "I is a scalar, yarr!",
        "hash_variable": {
            "hash_value_key": "I spy with my little eye, something beginning with H.",
        },
        "array_variable": ["I", "have", "an", "imagination", "honest"],
        "this": {
            "is": {
                "a": {
                    "very": {
                        "deep": {
                            "hash": {
                                "structure": "My god, it's full of hashes.",
                            }
                        }
                    }
                }
            }
        },
        "template_if_true": "True dat",
        "template_if_false": "Nay, Mister Wilks",
    }
)

VARS_SECONDARY: Mapping[str, Any] = _freeze(
    {
        "array_loop": [
            "five",
            "four",
            "three",
            "two",
            "one",
            "coming",
            "ready",
            "or",
            "not",
        ],
        "hash_loop": {
            "aaa": "first",
            "bbb": "second",
            "ccc": "third",
            "ddd": "fourth",
            "eee": "fifth",
        },
        "records_loop": [
            {"name": "Joe Bloggs", "age": 16},
            {"name": "Fred Bloggs", "age": 23},
            {"name": "Nigel Bloggs", "age": 43},
            {"name": "Tarquin Bloggs", "age": 143},
            {"name": "Geoffrey Bloggs", "age": 13},
        ],
        "variable_if": 1,
        "variable_if_else": 0,
        "variable_expression_a": 20,
        "variable_expression_b": 10,
        "variable_function_arg": "Hi there",
    }
)


def merged_vars(
    primary: Mapping[str, Any], secondary: Mapping[str, Any]
) -> dict[str, Any]:
    """Return one flat context built from both variable datasets."""
    return {**primary, **secondary}
