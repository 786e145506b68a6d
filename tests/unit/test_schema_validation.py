# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

from agentprobe.validation.schema import to_json_schema, validate_schema


def test_nullable_string_accepts_string_and_null_only():
    schema = {"type": "string", "nullable": True}
    assert validate_schema("hello", schema).valid is True
    assert validate_schema(None, schema).valid is True

    result = validate_schema(42, schema)
    assert result.valid is False
    assert result.errors[0].keyword == "type"
    assert result.errors[0].path == "/"


def test_to_json_schema_rewrites_nested_dialect_without_mutating_input():
    schema = {
        "type": "object",
        "properties": {
            "tags": {"type": "array", "items": {"type": "string", "nullable": True}},
            "status": {"type": "string", "enum": ["open"], "nullable": True},
            "count": {"type": "integer", "minimum": 1, "exclusiveMinimum": True},
            "ratio": {"type": "number", "maximum": 1, "exclusiveMaximum": False},
        },
        "allOf": [{"properties": {"extra": {"type": ["integer"], "nullable": True}}}],
    }
    converted = to_json_schema(schema)

    assert schema["properties"]["tags"]["items"] == {"type": "string", "nullable": True}
    assert converted["properties"]["tags"]["items"] == {"type": ["string", "null"]}
    assert converted["properties"]["status"]["enum"] == ["open", None]
    assert converted["properties"]["count"] == {"type": "integer", "exclusiveMinimum": 1}
    assert converted["properties"]["ratio"] == {"type": "number", "maximum": 1}
    assert converted["allOf"][0]["properties"]["extra"]["type"] == ["integer", "null"]


def test_boolean_exclusive_bounds_are_enforced():
    schema = {"type": "integer", "minimum": 1, "exclusiveMinimum": True}
    assert validate_schema(1, schema).valid is False
    assert validate_schema(2, schema).valid is True


def test_validation_reports_every_violation_with_paths():
    schema = {
        "type": "object",
        "required": ["id", "name"],
        "properties": {
            "user": {"type": "object", "properties": {"email": {"type": "string", "format": "email"}}},
        },
    }
    result = validate_schema({"user": {"email": "not-an-address"}}, schema)

    assert result.valid is False
    keywords = sorted(error.keyword for error in result.errors)
    assert keywords == ["format", "required", "required"]
    format_error = next(error for error in result.errors if error.keyword == "format")
    assert format_error.path == "/user/email"
    assert format_error.params == "email"
    assert result.to_dict()["valid"] is False


def test_uncompilable_schema_degrades_to_schema_error():
    result = validate_schema({"a": 1}, {"type": "strnig"})
    assert result.valid is False
    assert len(result.errors) == 1
    assert result.errors[0].keyword == "schema"
    assert result.errors[0].message.startswith("Schema compilation error")
