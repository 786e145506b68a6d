# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""
Response-body validation against declared schemas.

Declared schemas use the OpenAPI dialect (``nullable``, boolean exclusive bounds), so they are
rewritten into standard JSON Schema before a Draft 2020-12 validator is compiled. A fresh
validator is built for every call; nothing is cached between validations.
"""

from __future__ import annotations

import copy
import logging
from collections.abc import Iterable, Mapping
from typing import Any

from jsonschema import Draft202012Validator, FormatChecker
from jsonschema.exceptions import SchemaError

from ..models.report import SchemaValidationError, SchemaValidationResult

logger = logging.getLogger(__name__)

COMPOSITION_KEYWORDS = ("allOf", "oneOf", "anyOf")
SCHEMA_ERROR_KEYWORD = "schema"


def _json_pointer(parts: Iterable[Any]) -> str:
    tokens = [str(part).replace("~", "~0").replace("/", "~1") for part in parts]
    return "/" + "/".join(tokens) if tokens else "/"


def _rewrite_exclusive_bound(schema: dict[str, Any], exclusive_key: str, bound_key: str) -> None:
    flag = schema.get(exclusive_key)
    if not isinstance(flag, bool):
        return
    del schema[exclusive_key]
    if flag and bound_key in schema:
        schema[exclusive_key] = schema.pop(bound_key)


def _rewrite_in_place(schema: Any) -> None:
    if not isinstance(schema, dict):
        return

    nullable = schema.pop("nullable", None) is True
    if nullable and "type" in schema:
        declared = schema["type"]
        if isinstance(declared, list):
            if "null" not in declared:
                schema["type"] = [*declared, "null"]
        elif declared != "null":
            schema["type"] = [declared, "null"]
    if nullable and isinstance(schema.get("enum"), list) and None not in schema["enum"]:
        schema["enum"] = [*schema["enum"], None]

    _rewrite_exclusive_bound(schema, "exclusiveMinimum", "minimum")
    _rewrite_exclusive_bound(schema, "exclusiveMaximum", "maximum")

    properties = schema.get("properties")
    if isinstance(properties, dict):
        for prop in properties.values():
            _rewrite_in_place(prop)

    items = schema.get("items")
    if isinstance(items, list):
        for item in items:
            _rewrite_in_place(item)
    else:
        _rewrite_in_place(items)

    _rewrite_in_place(schema.get("additionalProperties"))
    _rewrite_in_place(schema.get("not"))

    for keyword in COMPOSITION_KEYWORDS:
        branches = schema.get(keyword)
        if isinstance(branches, list):
            for branch in branches:
                _rewrite_in_place(branch)


def to_json_schema(schema: Mapping[str, Any]) -> dict[str, Any]:
    """Return a standard JSON Schema copy of an OpenAPI-dialect schema; the input is left untouched."""
    converted = copy.deepcopy(dict(schema))
    _rewrite_in_place(converted)
    return converted


def validate_schema(body: Any, schema: Mapping[str, Any]) -> SchemaValidationResult:
    """Validate ``body`` and report every violation; an uncompilable schema yields a ``schema`` error."""
    try:
        json_schema = to_json_schema(schema)
        Draft202012Validator.check_schema(json_schema)
        validator = Draft202012Validator(json_schema, format_checker=FormatChecker())
        violations = list(validator.iter_errors(body))
    except SchemaError as exc:
        logger.debug("Declared schema does not compile: %s", exc.message)
        return SchemaValidationResult(
            valid=False,
            errors=(
                SchemaValidationError(
                    path="/",
                    message=f"Schema compilation error: {exc.message}",
                    keyword=SCHEMA_ERROR_KEYWORD,
                ),
            ),
        )
    except Exception as exc:  # noqa: BLE001
        logger.debug("Schema validation failed unexpectedly: %s", exc)
        return SchemaValidationResult(
            valid=False,
            errors=(
                SchemaValidationError(
                    path="/",
                    message=f"Schema compilation error: {exc}",
                    keyword=SCHEMA_ERROR_KEYWORD,
                ),
            ),
        )

    if not violations:
        return SchemaValidationResult(valid=True)

    errors = tuple(
        SchemaValidationError(
            path=_json_pointer(error.absolute_path),
            message=error.message or "Validation failed",
            keyword=str(error.validator),
            params=error.validator_value,
        )
        for error in violations
    )
    return SchemaValidationResult(valid=False, errors=errors)


__all__ = ["to_json_schema", "validate_schema"]
