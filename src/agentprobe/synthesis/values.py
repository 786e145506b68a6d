# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""
Deterministic example values for JSON-Schema-like type descriptors.

``synthesize`` is total and side-effect free: the same schema always yields the same value,
which keeps baseline probes reproducible. Resolution order is example, default, first enum
entry, const, composition (allOf merge; first oneOf/anyOf branch), then the declared type.
"""

from __future__ import annotations

import copy
from collections.abc import Mapping
from typing import Any

from ..utils.numbers import round_half_up

MAX_OPTIONAL_PROPERTIES = 3
MAX_ARRAY_ITEMS = 3
MAX_DEPTH = 12

DEFAULT_MINIMUM = 0
DEFAULT_MAXIMUM = 100
DEFAULT_MAX_LENGTH = 50
STRING_PLACEHOLDER = "test_value"

FORMAT_VALUES: dict[str, str] = {
    "date": "2024-01-01",
    "date-time": "2024-01-01T00:00:00Z",
    "time": "12:00:00",
    "email": "test@example.com",
    "uri": "https://example.com",
    "url": "https://example.com",
    "uuid": "f47ac10b-58cc-4372-a567-0e02b2c3d479",
    "hostname": "example.com",
    "ipv4": "192.168.1.1",
    "ipv6": "2001:0db8:85a3:0000:0000:8a2e:0370:7334",
    "byte": "dGVzdA==",
    "binary": "binary-data",
    "password": "password123",
    "phone": "+1-555-555-5555",
}

# Only a few character-class shapes are recognised; patterns are not solved in general.
PATTERN_VALUES: tuple[tuple[str, str], ...] = (
    ("[A-Z]", "ABCD"),
    ("[a-z]", "abcd"),
    ("[0-9]", "1234"),
)


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def schema_type(schema: Mapping[str, Any]) -> str | None:
    """Declared type; for a type list (``["string", "null"]``) the first non-null member."""
    declared = schema.get("type")
    if isinstance(declared, list):
        for item in declared:
            if item != "null":
                return str(item)
        return "null" if declared else None
    return str(declared) if declared else None


def synthesize(schema: Mapping[str, Any] | None) -> Any:
    """Return a value conforming to ``schema`` (best effort, never raises)."""
    return _synthesize(schema, 0)


def _synthesize(schema: Mapping[str, Any] | None, depth: int) -> Any:
    if not isinstance(schema, Mapping) or depth > MAX_DEPTH:
        return {}

    # Unresolved reference: the normalization layer should have inlined it.
    if "$ref" in schema:
        return {}

    if "example" in schema:
        return copy.deepcopy(schema["example"])
    if "default" in schema:
        return copy.deepcopy(schema["default"])

    enum = schema.get("enum")
    if isinstance(enum, list) and enum:
        return copy.deepcopy(enum[0])

    if "const" in schema:
        return copy.deepcopy(schema["const"])

    all_of = schema.get("allOf")
    if isinstance(all_of, list) and all_of:
        merged: dict[str, Any] = {}
        for branch in all_of:
            generated = _synthesize(branch, depth + 1)
            if isinstance(generated, dict):
                merged.update(generated)
        return merged

    for keyword in ("oneOf", "anyOf"):
        branches = schema.get(keyword)
        if isinstance(branches, list) and branches:
            return _synthesize(branches[0], depth + 1)

    kind = schema_type(schema)
    if kind == "object":
        return _synthesize_object(schema, depth)
    if kind == "array":
        return _synthesize_array(schema, depth)
    if kind == "string":
        return _synthesize_string(schema)
    if kind in ("integer", "number"):
        return _synthesize_number(schema, integer=kind == "integer")
    if kind == "boolean":
        return True
    if kind == "null":
        return None
    if isinstance(schema.get("properties"), Mapping):
        return _synthesize_object(schema, depth)
    return {}


def _synthesize_object(schema: Mapping[str, Any], depth: int) -> dict[str, Any]:
    properties = schema.get("properties")
    if not isinstance(properties, Mapping):
        return {}
    required = schema.get("required")
    required_names = set(required) if isinstance(required, list) else set()

    result: dict[str, Any] = {}
    for name, prop in properties.items():
        if name in required_names:
            result[name] = _synthesize(prop, depth + 1)

    optional_count = 0
    for name, prop in properties.items():
        if name in required_names:
            continue
        if optional_count >= MAX_OPTIONAL_PROPERTIES:
            break
        result[name] = _synthesize(prop, depth + 1)
        optional_count += 1
    return result


def _synthesize_array(schema: Mapping[str, Any], depth: int) -> list[Any]:
    items = schema.get("items")
    if not isinstance(items, Mapping):
        return []
    min_items = schema.get("minItems")
    wanted = min_items if _is_number(min_items) and min_items > 0 else 1
    count = max(1, min(int(wanted), MAX_ARRAY_ITEMS))
    return [_synthesize(items, depth + 1) for _ in range(count)]


def _synthesize_string(schema: Mapping[str, Any]) -> str:
    fmt = schema.get("format")
    if isinstance(fmt, str) and fmt in FORMAT_VALUES:
        return FORMAT_VALUES[fmt]

    pattern = schema.get("pattern")
    if isinstance(pattern, str):
        for fragment, value in PATTERN_VALUES:
            if fragment in pattern:
                return value

    min_length = schema.get("minLength")
    max_length = schema.get("maxLength")
    low = int(min_length) if _is_number(min_length) and min_length > 0 else 1
    high = int(max_length) if _is_number(max_length) and max_length > 0 else DEFAULT_MAX_LENGTH
    target = min(low + 10, high)
    return STRING_PLACEHOLDER.ljust(target, "_")[:target]


def numeric_bounds(schema: Mapping[str, Any]) -> tuple[float, float]:
    """
    Effective inclusive ``[low, high]`` range for a numeric schema.

    Exclusive bounds (3.0 boolean flags or 3.1 numeric values) move the edge inwards by one.
    A lone bound outside the default ``[0, 100]`` range widens the other edge by 100.
    """
    minimum = schema.get("minimum")
    maximum = schema.get("maximum")
    exclusive_min = schema.get("exclusiveMinimum")
    exclusive_max = schema.get("exclusiveMaximum")

    low: float | None = minimum if _is_number(minimum) else None
    low_exclusive = False
    if isinstance(exclusive_min, bool):
        low_exclusive = exclusive_min and low is not None
    elif _is_number(exclusive_min):
        low = low if low is not None else exclusive_min
        low_exclusive = True

    high: float | None = maximum if _is_number(maximum) else None
    high_exclusive = False
    if isinstance(exclusive_max, bool):
        high_exclusive = exclusive_max and high is not None
    elif _is_number(exclusive_max):
        high = high if high is not None else exclusive_max
        high_exclusive = True

    if low is None:
        low = DEFAULT_MINIMUM if high is None or high >= DEFAULT_MINIMUM else high - DEFAULT_MAXIMUM
    if high is None:
        high = DEFAULT_MAXIMUM if low <= DEFAULT_MAXIMUM else low + DEFAULT_MAXIMUM

    if low_exclusive:
        low += 1
    if high_exclusive:
        high -= 1
    return low, high


def _synthesize_number(schema: Mapping[str, Any], *, integer: bool) -> int | float:
    low, high = numeric_bounds(schema)
    value: float = (low + high) / 2

    multiple_of = schema.get("multipleOf")
    if _is_number(multiple_of) and multiple_of > 0:
        value = round_half_up(value / multiple_of) * multiple_of

    if integer:
        return round_half_up(value)
    return float(value)


__all__ = ["FORMAT_VALUES", "numeric_bounds", "schema_type", "synthesize"]
