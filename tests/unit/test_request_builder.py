# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

import copy

import pytest

from agentprobe.errors import DescriptorError
from agentprobe.models.probe import MalformationKind
from agentprobe.openapi.models import OperationDescriptor
from agentprobe.synthesis.malformations import (
    EXPECTATIONS,
    INVALID_JSON_BODY,
    UNKNOWN_FIELD_NAME,
    select_malformations,
    should_probe_malformations,
)
from agentprobe.synthesis.requests import RequestBuilder

CREATE_ORDER = OperationDescriptor.from_mapping(
    {
        "method": "post",
        "path": "/orders",
        "security": [{"bearerAuth": []}],
        "parameters": [
            {"name": "page", "in": "query", "required": True},
            {"name": "limit", "in": "query", "schema": {"type": "integer", "default": 20}},
            {"name": "filter", "in": "query", "schema": {"type": "string"}},
            {"name": "X-Request-Id", "in": "header", "required": True, "example": "abc"},
            {"name": "Authorization", "in": "header", "required": True},
        ],
        "requestBody": {
            "required": True,
            "content": {
                "application/json": {
                    "schema": {
                        "type": "object",
                        "required": ["amount"],
                        "properties": {
                            "amount": {"type": "number"},
                            "note": {"type": "string"},
                            "quantity": {"type": "integer", "minimum": 1, "maximum": 10},
                        },
                    }
                }
            },
        },
    }
)

GET_USER = OperationDescriptor.from_mapping(
    {
        "method": "GET",
        "path": "/users/{userId}",
        "parameters": [{"name": "userId", "in": "path", "schema": {"type": "integer"}}],
    }
)


def test_build_valid_request_synthesizes_parameters_and_body():
    request = RequestBuilder("http://api/").build_valid_request(CREATE_ORDER)

    assert request.url == "http://api/orders"
    assert request.method == "POST"
    assert request.malformation is MalformationKind.NONE
    assert request.operation_key == "POST /orders"
    assert request.query == {"page": "1", "limit": "20"}
    assert request.headers == {"X-Request-Id": "abc"}
    assert request.body == {"amount": 50.0, "note": "test_value_", "quantity": 6}


def test_build_valid_request_fills_and_encodes_path_parameters():
    builder = RequestBuilder("http://api")
    assert builder.build_valid_request(GET_USER).url == "http://api/users/50"

    op = OperationDescriptor.from_mapping(
        {
            "method": "GET",
            "path": "/files/{name}/{fileId}",
            "parameters": [
                {"name": "name", "in": "path", "example": "a b/c"},
                {"name": "fileId", "in": "path"},
            ],
        }
    )
    assert builder.build_valid_request(op).url == "http://api/files/a%20b%2Fc/1"


def test_build_valid_request_prefers_media_examples():
    op = OperationDescriptor.from_mapping(
        {
            "method": "POST",
            "path": "/items",
            "requestBody": {
                "content": {
                    "application/vnd.api+json": {
                        "schema": {"type": "object", "properties": {"name": {"type": "string"}}},
                        "examples": {"basic": {"value": {"name": "widget"}}},
                    }
                }
            },
        }
    )
    assert RequestBuilder("http://api").build_valid_request(op).body == {"name": "widget"}


def test_descriptor_rejects_unusable_parameters():
    with pytest.raises(DescriptorError):
        OperationDescriptor.from_mapping({"method": "GET", "path": "/x", "parameters": [{"name": "q", "in": "body"}]})
    with pytest.raises(DescriptorError):
        OperationDescriptor.from_mapping({"method": "FETCH", "path": "/x"})


def test_malformed_requests_never_mutate_baseline():
    builder = RequestBuilder("http://api")
    baseline = builder.build_valid_request(CREATE_ORDER)
    snapshot = copy.deepcopy(baseline)

    missing = builder.build_malformed_request(CREATE_ORDER, MalformationKind.MISSING_REQUIRED, baseline)
    nulled = builder.build_malformed_request(CREATE_ORDER, MalformationKind.NULL_REQUIRED, baseline)
    for kind in MalformationKind:
        builder.build_malformed_request(CREATE_ORDER, kind, baseline)

    assert baseline == snapshot
    assert "amount" not in missing.body
    assert nulled.body["amount"] is None
    assert missing.body is not nulled.body


def test_each_body_malformation_changes_one_thing():
    builder = RequestBuilder("http://api")
    baseline = builder.build_valid_request(CREATE_ORDER)

    invalid = builder.build_malformed_request(CREATE_ORDER, MalformationKind.INVALID_JSON, baseline)
    assert invalid.body == INVALID_JSON_BODY
    assert invalid.sends_raw_body is True

    extra = builder.build_malformed_request(CREATE_ORDER, MalformationKind.EXTRA_FIELD, baseline)
    assert extra.body == {**baseline.body, UNKNOWN_FIELD_NAME: "unexpected_value"}

    wrong = builder.build_malformed_request(CREATE_ORDER, MalformationKind.WRONG_TYPE, baseline)
    assert wrong.body == {**baseline.body, "amount": "not_a_number"}

    no_auth = builder.build_malformed_request(CREATE_ORDER, MalformationKind.MISSING_AUTH, baseline)
    assert no_auth.skips_auth is True
    assert no_auth.body == baseline.body
    assert no_auth.body is not baseline.body

    empty = builder.build_malformed_request(CREATE_ORDER, MalformationKind.EMPTY_BODY, baseline)
    assert empty.body is None

    boundary = builder.build_malformed_request(CREATE_ORDER, MalformationKind.BOUNDARY_VALUE, baseline)
    assert boundary.body == {**baseline.body, "quantity": 11}


def test_wrong_type_skips_untyped_fields():
    op = OperationDescriptor.from_mapping(
        {
            "method": "POST",
            "path": "/tags",
            "requestBody": {
                "content": {
                    "application/json": {
                        "schema": {
                            "type": "object",
                            "required": ["meta", "label"],
                            "properties": {"meta": {}, "label": {"type": "string"}},
                        }
                    }
                }
            },
        }
    )
    request = RequestBuilder("http://api").build_malformed_request(op, MalformationKind.WRONG_TYPE)
    assert request.body == {"meta": {}, "label": 12345}


def test_invalid_path_param_rewrites_url():
    request = RequestBuilder("http://api").build_malformed_request(GET_USER, MalformationKind.INVALID_PATH_PARAM)
    assert request.url == "http://api/users/not_a_number"
    assert request.malformation is MalformationKind.INVALID_PATH_PARAM


def test_end_to_end_missing_required_amount():
    op = OperationDescriptor.from_mapping(
        {
            "method": "POST",
            "path": "/orders",
            "requestBody": {
                "content": {
                    "application/json": {
                        "schema": {"type": "object", "required": ["amount"], "properties": {"amount": {"type": "number"}}}
                    }
                }
            },
        }
    )
    request = RequestBuilder("http://api").build_malformed_request(op, MalformationKind.MISSING_REQUIRED)
    assert request.body == {}


def test_select_malformations_policy():
    assert select_malformations(CREATE_ORDER) == [
        MalformationKind.MISSING_AUTH,
        MalformationKind.INVALID_JSON,
        MalformationKind.EXTRA_FIELD,
        MalformationKind.MISSING_REQUIRED,
        MalformationKind.NULL_REQUIRED,
        MalformationKind.WRONG_TYPE,
    ]
    assert select_malformations(CREATE_ORDER, extended=True)[-2:] == [
        MalformationKind.EMPTY_BODY,
        MalformationKind.BOUNDARY_VALUE,
    ]
    assert select_malformations(GET_USER) == []
    assert select_malformations(GET_USER, extended=True) == [MalformationKind.INVALID_PATH_PARAM]


def test_should_probe_malformations_gates_unsafe_methods():
    delete_op = OperationDescriptor.from_mapping(
        {"method": "DELETE", "path": "/orders/{id}", "security": [{"bearerAuth": []}]}
    )
    put_op = OperationDescriptor.from_mapping(
        {"method": "PUT", "path": "/orders", "requestBody": {"content": {"application/json": {"schema": {"type": "object"}}}}}
    )

    assert should_probe_malformations(delete_op, sandbox=False) is False
    assert should_probe_malformations(delete_op, sandbox=True) is True
    assert should_probe_malformations(put_op, sandbox=False) is True
    assert should_probe_malformations(CREATE_ORDER, sandbox=False) is True
    assert should_probe_malformations(GET_USER, sandbox=False) is False
    assert should_probe_malformations(GET_USER, sandbox=False, extended=True) is True


def test_expectation_table_covers_every_kind():
    assert set(EXPECTATIONS) == set(MalformationKind)
    assert EXPECTATIONS[MalformationKind.INVALID_JSON].expected_status_codes == (400,)
    assert EXPECTATIONS[MalformationKind.MISSING_AUTH].expected_status_codes == (401, 403)
    assert EXPECTATIONS[MalformationKind.NONE].expected_status_codes == (200, 201, 204)
