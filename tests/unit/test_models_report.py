# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

import json

from agentprobe.models.probe import MalformationKind, ProbeRequest, ProbeResponse, TransportError
from agentprobe.models.report import (
    EndpointProbeReport,
    ErrorQualityResult,
    MalformationResult,
    MalformationTestResult,
    ProbeResult,
    ProbeValidation,
)
from agentprobe.openapi.models import OperationDescriptor
from agentprobe.openapi.responses import select_response_schema
from agentprobe.prober.evaluation import evaluate_malformation
from agentprobe.prober.summary import summarize
from agentprobe.utils.numbers import percentile, round_half_up
from agentprobe.utils.text import stringify_scalar

OPERATION = OperationDescriptor.from_mapping(
    {
        "method": "POST",
        "path": "/orders",
        "responses": {
            "201": {"content": {"application/json": {"schema": {"type": "object"}}}},
            "4XX": {"content": {"application/problem+json": {"schema": {"type": "object", "required": ["code"]}}}},
            "default": {"content": {"application/json": {"schema": {"type": "string"}}}},
            "204": {"description": "no content"},
        },
    }
)


def _probe(kind, status, latency, score=None, timed_out=False):
    result = None
    if score is not None:
        result = MalformationResult(
            type=kind, passed=score >= 60, score=score, expected_behavior="", actual_behavior="", feedback=""
        )
    return ProbeResult(
        operation=OPERATION,
        request=ProbeRequest(url="http://api/orders", method="POST", malformation=kind),
        response=ProbeResponse(status_code=status, latency_ms=latency, timed_out=timed_out),
        malformation_result=result,
    )


def test_select_response_schema_precedence():
    assert select_response_schema(OPERATION, 201) == {"type": "object"}
    assert select_response_schema(OPERATION, 422) == {"type": "object", "required": ["code"]}
    assert select_response_schema(OPERATION, 500) == {"type": "string"}
    assert select_response_schema(OPERATION, 204) == {"type": "string"}


def test_summarize_averages_and_percentile():
    probes = [
        _probe(MalformationKind.NONE, 201, 10.0),
        _probe(MalformationKind.INVALID_JSON, 400, 20.0, score=75),
        _probe(MalformationKind.WRONG_TYPE, 500, 31.0, score=0),
        _probe(MalformationKind.EXTRA_FIELD, 0, 999.0, score=0, timed_out=True),
    ]
    summary = summarize(probes)
    assert summary.reachable is True
    assert summary.valid_request_passed is True
    assert summary.response_matches_schema is True
    assert summary.error_handling_score == 25
    assert summary.avg_response_time_ms == 20
    assert isinstance(summary.avg_response_time_ms, int)
    assert summary.p95_response_time_ms == 31.0


def test_summarize_without_malformations_scores_full():
    summary = summarize([_probe(MalformationKind.NONE, 404, 5.0)])
    assert summary.error_handling_score == 100
    assert summary.valid_request_passed is False


def test_evaluate_malformation_partial_credit_for_other_client_error():
    response = ProbeResponse(status_code=409, status_text="Conflict", body={"message": "Error"})
    result = evaluate_malformation(MalformationKind.INVALID_JSON, response)
    assert result.score == 20 + 9
    assert result.passed is False
    assert result.actual_behavior == "409 Conflict"
    assert result.feedback.startswith("Expected status 400, got 409; Missing machine-readable error code")


def test_evaluate_malformation_accepts_extra_field_success():
    result = evaluate_malformation(MalformationKind.EXTRA_FIELD, ProbeResponse(status_code=201, status_text="Created"))
    assert result.score == 40
    assert result.feedback == "Good error handling"


def test_numeric_and_text_helpers():
    assert round_half_up(2.5) == 3
    assert round_half_up(0.5) == 1
    assert round_half_up(41.4) == 41
    assert percentile([], 0.95) == 0.0
    assert percentile([3.0, 1.0, 2.0], 0.95) == 3.0
    assert stringify_scalar(True) == "true"
    assert stringify_scalar(None) == "null"
    assert stringify_scalar(50.0) == "50"
    assert stringify_scalar(2.5) == "2.5"
    assert stringify_scalar([1, 2]) == "[1,2]"


def test_report_to_dict_is_json_ready():
    quality = ErrorQualityResult(
        has_error_code=True,
        has_message=True,
        message_is_helpful=False,
        identifies_field=True,
        suggests_fix=False,
        has_doc_url=False,
        score=60,
        feedback=("Error message is too generic",),
    )
    baseline = _probe(MalformationKind.NONE, 201, 12.0)
    failing = ProbeResult(
        operation=OPERATION,
        request=ProbeRequest(url="http://api/orders", method="POST", body="{x", malformation=MalformationKind.INVALID_JSON),
        response=ProbeResponse(status_code=0, status_text="Timeout", timed_out=True, error=TransportError("TIMEOUT", "slow")),
        validation=ProbeValidation(error_quality=quality),
        malformation_result=evaluate_malformation(MalformationKind.INVALID_JSON, ProbeResponse(status_code=0)),
    )
    report = EndpointProbeReport(operation=OPERATION, probes=(baseline, failing), summary=summarize([baseline, failing]))

    payload = report.to_dict()
    json.dumps(payload)
    assert payload["operation"] == "POST /orders"
    assert payload["probes"][1]["request"]["malformation"] == "invalid-json"
    assert payload["probes"][1]["response"]["error"] == {"code": "TIMEOUT", "message": "slow"}
    assert payload["probes"][1]["validation"]["error_quality"]["score"] == 60

    flattened = MalformationTestResult.from_probe(failing)
    assert flattened.type is MalformationKind.INVALID_JSON
    assert flattened.response == {"status_code": 0, "body": None, "latency_ms": 0.0}
    assert flattened.error_quality is quality
