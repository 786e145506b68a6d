# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""
Malformation catalogue: expectations, selection policy and request mutations.

Each mutation takes the valid baseline request and returns an independent copy carrying
exactly one contract violation. The baseline is never modified.
"""

from __future__ import annotations

import copy
from collections.abc import Mapping
from dataclasses import dataclass, replace
from typing import Any

from ..models.probe import MalformationKind, ProbeRequest
from ..openapi.models import OperationDescriptor, Parameter
from ..openapi.responses import request_body_schema, required_body_fields
from .values import schema_type, synthesize

INVALID_JSON_BODY = "{invalid json, missing quotes: value}"
UNKNOWN_FIELD_NAME = "__agentprobe_unknown_field__"
UNKNOWN_FIELD_VALUE = "unexpected_value"
INVALID_PATH_VALUE = "__invalid_path_value__"

UNSAFE_METHODS = frozenset({"DELETE", "PUT", "PATCH"})

WRONG_TYPE_VALUES: dict[str, Any] = {
    "string": 12345,
    "integer": "not_a_number",
    "number": "not_a_number",
    "boolean": "not_a_boolean",
    "array": "not_an_array",
    "object": "not_an_object",
}


@dataclass(frozen=True)
class MalformationExpectation:
    kind: MalformationKind
    expected_status_codes: tuple[int, ...]
    expected_behavior: str


EXPECTATIONS: dict[MalformationKind, MalformationExpectation] = {
    expectation.kind: expectation
    for expectation in (
        MalformationExpectation(MalformationKind.NONE, (200, 201, 204), "Success response"),
        MalformationExpectation(
            MalformationKind.INVALID_JSON, (400,), "400 Bad Request with JSON parse error message"
        ),
        MalformationExpectation(
            MalformationKind.MISSING_REQUIRED, (400, 422), "400/422 identifying the missing required field"
        ),
        MalformationExpectation(MalformationKind.WRONG_TYPE, (400, 422), "400/422 identifying the type mismatch"),
        MalformationExpectation(
            MalformationKind.EXTRA_FIELD,
            (200, 201, 400, 422),
            "Accept or reject with clear message about unknown field",
        ),
        MalformationExpectation(MalformationKind.MISSING_AUTH, (401, 403), "401 Unauthorized or 403 Forbidden"),
        MalformationExpectation(
            MalformationKind.EMPTY_BODY, (400, 422), "400/422 indicating request body is required"
        ),
        MalformationExpectation(
            MalformationKind.NULL_REQUIRED, (400, 422), "400/422 indicating field cannot be null"
        ),
        MalformationExpectation(
            MalformationKind.INVALID_PATH_PARAM,
            (400, 404, 422),
            "400/404/422 with clear error about invalid path parameter",
        ),
        MalformationExpectation(
            MalformationKind.BOUNDARY_VALUE, (400, 422), "400/422 identifying the out-of-bounds value"
        ),
    )
}


def expectation_for(kind: MalformationKind) -> MalformationExpectation:
    return EXPECTATIONS[kind]


# ---------------------------------------------------------------------------
# Selection policy
# ---------------------------------------------------------------------------


def should_probe_malformations(operation: OperationDescriptor, *, sandbox: bool, extended: bool = False) -> bool:
    """Unsafe methods outside sandbox mode are only probed when they declare a request body."""
    has_body = operation.request_body is not None
    if not sandbox and operation.method in UNSAFE_METHODS:
        return has_body
    if has_body or operation.has_security:
        return True
    return extended and bool(operation.parameters_in("path"))


def select_malformations(operation: OperationDescriptor, *, extended: bool = False) -> list[MalformationKind]:
    """Malformations that apply to ``operation``, in execution order."""
    kinds: list[MalformationKind] = []
    has_body = operation.request_body is not None
    has_required_fields = bool(required_body_fields(operation))

    if operation.has_security:
        kinds.append(MalformationKind.MISSING_AUTH)

    if has_body:
        kinds.append(MalformationKind.INVALID_JSON)
        kinds.append(MalformationKind.EXTRA_FIELD)
        if has_required_fields:
            kinds.append(MalformationKind.MISSING_REQUIRED)
            kinds.append(MalformationKind.NULL_REQUIRED)
        kinds.append(MalformationKind.WRONG_TYPE)

    if extended:
        if has_body and operation.request_body.required:
            kinds.append(MalformationKind.EMPTY_BODY)
        if boundary_candidate(request_body_schema(operation)) is not None:
            kinds.append(MalformationKind.BOUNDARY_VALUE)
        if operation.parameters_in("path"):
            kinds.append(MalformationKind.INVALID_PATH_PARAM)

    return kinds


# ---------------------------------------------------------------------------
# Mutations
# ---------------------------------------------------------------------------


def derive_request(request: ProbeRequest, kind: MalformationKind, **changes: Any) -> ProbeRequest:
    """Independent copy of ``request``: fresh header/query dicts, deep-copied body unless replaced."""
    fields: dict[str, Any] = {
        "headers": dict(request.headers),
        "query": dict(request.query),
        "body": copy.deepcopy(request.body),
        "malformation": kind,
    }
    fields.update(changes)
    return replace(request, **fields)


def apply_invalid_json(request: ProbeRequest, operation: OperationDescriptor) -> ProbeRequest:
    return derive_request(request, MalformationKind.INVALID_JSON, body=INVALID_JSON_BODY)


def _first_required_field(operation: OperationDescriptor) -> str | None:
    required = required_body_fields(operation)
    return required[0] if required else None


def apply_missing_required(request: ProbeRequest, operation: OperationDescriptor) -> ProbeRequest:
    target = _first_required_field(operation)
    if not isinstance(request.body, dict) or target is None:
        return derive_request(request, MalformationKind.MISSING_REQUIRED)
    body = copy.deepcopy(request.body)
    body.pop(target, None)
    return derive_request(request, MalformationKind.MISSING_REQUIRED, body=body)


def apply_null_required(request: ProbeRequest, operation: OperationDescriptor) -> ProbeRequest:
    target = _first_required_field(operation)
    if not isinstance(request.body, dict) or target is None:
        return derive_request(request, MalformationKind.NULL_REQUIRED)
    body = copy.deepcopy(request.body)
    body[target] = None
    return derive_request(request, MalformationKind.NULL_REQUIRED, body=body)


def _wrong_type_value(prop: Any) -> Any:
    if not isinstance(prop, Mapping):
        return None
    kind = schema_type(prop)
    if kind is None and isinstance(prop.get("properties"), Mapping):
        kind = "object"
    return WRONG_TYPE_VALUES.get(kind or "")


def apply_wrong_type(request: ProbeRequest, operation: OperationDescriptor) -> ProbeRequest:
    schema = request_body_schema(operation) or {}
    properties = schema.get("properties")
    if not isinstance(request.body, dict) or not isinstance(properties, Mapping):
        return derive_request(request, MalformationKind.WRONG_TYPE)

    body = copy.deepcopy(request.body)
    for name, prop in properties.items():
        if name not in body:
            continue
        replacement = _wrong_type_value(prop)
        if replacement is None:
            continue
        body[name] = replacement
        break
    return derive_request(request, MalformationKind.WRONG_TYPE, body=body)


def apply_extra_field(request: ProbeRequest, operation: OperationDescriptor) -> ProbeRequest:
    if isinstance(request.body, dict):
        body = copy.deepcopy(request.body)
        body[UNKNOWN_FIELD_NAME] = UNKNOWN_FIELD_VALUE
    else:
        body = {UNKNOWN_FIELD_NAME: UNKNOWN_FIELD_VALUE}
    return derive_request(request, MalformationKind.EXTRA_FIELD, body=body)


def apply_missing_auth(request: ProbeRequest, operation: OperationDescriptor) -> ProbeRequest:
    return derive_request(request, MalformationKind.MISSING_AUTH)


def apply_empty_body(request: ProbeRequest, operation: OperationDescriptor) -> ProbeRequest:
    return derive_request(request, MalformationKind.EMPTY_BODY, body=None)


_MISSING = object()


def _out_of_bounds_value(prop: Mapping[str, Any]) -> Any:
    """A value one step past the first declared bound, or ``_MISSING`` when unbounded."""
    kind = schema_type(prop)
    if kind in ("integer", "number"):
        maximum = prop.get("maximum")
        exclusive_max = prop.get("exclusiveMaximum")
        minimum = prop.get("minimum")
        exclusive_min = prop.get("exclusiveMinimum")
        if isinstance(maximum, (int, float)) and not isinstance(maximum, bool):
            return maximum if exclusive_max is True else maximum + 1
        if isinstance(exclusive_max, (int, float)) and not isinstance(exclusive_max, bool):
            return exclusive_max
        if isinstance(minimum, (int, float)) and not isinstance(minimum, bool):
            return minimum if exclusive_min is True else minimum - 1
        if isinstance(exclusive_min, (int, float)) and not isinstance(exclusive_min, bool):
            return exclusive_min
    if kind == "string":
        max_length = prop.get("maxLength")
        min_length = prop.get("minLength")
        if isinstance(max_length, int) and not isinstance(max_length, bool) and max_length >= 0:
            return "x" * (max_length + 1)
        if isinstance(min_length, int) and not isinstance(min_length, bool) and min_length > 0:
            return "x" * (min_length - 1)
    if kind == "array":
        max_items = prop.get("maxItems")
        if isinstance(max_items, int) and not isinstance(max_items, bool) and max_items >= 0:
            return [synthesize(prop.get("items")) for _ in range(max_items + 1)]
    return _MISSING


def boundary_candidate(schema: Mapping[str, Any] | None) -> tuple[str, Any] | None:
    """First body property with a numeric, length or item-count bound, and its violating value."""
    if not isinstance(schema, Mapping):
        return None
    properties = schema.get("properties")
    if not isinstance(properties, Mapping):
        return None
    for name, prop in properties.items():
        if not isinstance(prop, Mapping):
            continue
        value = _out_of_bounds_value(prop)
        if value is not _MISSING:
            return str(name), value
    return None


def apply_boundary_value(request: ProbeRequest, operation: OperationDescriptor) -> ProbeRequest:
    candidate = boundary_candidate(request_body_schema(operation))
    if not isinstance(request.body, dict) or candidate is None:
        return derive_request(request, MalformationKind.BOUNDARY_VALUE)
    name, value = candidate
    body = copy.deepcopy(request.body)
    body[name] = value
    return derive_request(request, MalformationKind.BOUNDARY_VALUE, body=body)


def invalid_path_value(param: Parameter) -> str:
    """A path value the parameter's schema rejects (or at least cannot resolve)."""
    schema = param.schema or {}
    kind = schema_type(schema)
    if kind in ("integer", "number"):
        return "not_a_number"
    if kind == "boolean":
        return "not_a_boolean"
    fmt = schema.get("format")
    if fmt == "uuid":
        return "not-a-uuid"
    if fmt in ("date", "date-time"):
        return "not-a-date"
    return INVALID_PATH_VALUE


MUTATIONS = {
    MalformationKind.INVALID_JSON: apply_invalid_json,
    MalformationKind.MISSING_REQUIRED: apply_missing_required,
    MalformationKind.NULL_REQUIRED: apply_null_required,
    MalformationKind.WRONG_TYPE: apply_wrong_type,
    MalformationKind.EXTRA_FIELD: apply_extra_field,
    MalformationKind.MISSING_AUTH: apply_missing_auth,
    MalformationKind.EMPTY_BODY: apply_empty_body,
    MalformationKind.BOUNDARY_VALUE: apply_boundary_value,
}


__all__ = [
    "EXPECTATIONS",
    "INVALID_JSON_BODY",
    "MUTATIONS",
    "MalformationExpectation",
    "UNKNOWN_FIELD_NAME",
    "boundary_candidate",
    "derive_request",
    "expectation_for",
    "invalid_path_value",
    "select_malformations",
    "should_probe_malformations",
]
