# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Dataclasses for validation outcomes and probe reports."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from ..openapi.models import OperationDescriptor
from .probe import MalformationKind, ProbeRequest, ProbeResponse


@dataclass(frozen=True)
class SchemaValidationError:
    path: str
    message: str
    keyword: str
    params: Any = None

    def to_dict(self) -> dict[str, Any]:
        return {"path": self.path, "message": self.message, "keyword": self.keyword, "params": self.params}


@dataclass(frozen=True)
class SchemaValidationResult:
    valid: bool
    errors: tuple[SchemaValidationError, ...] = ()

    def to_dict(self) -> dict[str, Any]:
        return {"valid": self.valid, "errors": [error.to_dict() for error in self.errors]}


@dataclass(frozen=True)
class ErrorQualityResult:
    """How actionable an error response is for an automated caller."""

    has_error_code: bool
    has_message: bool
    message_is_helpful: bool
    identifies_field: bool
    suggests_fix: bool
    has_doc_url: bool
    score: int
    feedback: tuple[str, ...] = ()

    def to_dict(self) -> dict[str, Any]:
        return {
            "has_error_code": self.has_error_code,
            "has_message": self.has_message,
            "message_is_helpful": self.message_is_helpful,
            "identifies_field": self.identifies_field,
            "suggests_fix": self.suggests_fix,
            "has_doc_url": self.has_doc_url,
            "score": self.score,
            "feedback": list(self.feedback),
        }


@dataclass(frozen=True)
class MalformationResult:
    type: MalformationKind
    passed: bool
    score: int
    expected_behavior: str
    actual_behavior: str
    feedback: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "type": self.type.value,
            "passed": self.passed,
            "score": self.score,
            "expected_behavior": self.expected_behavior,
            "actual_behavior": self.actual_behavior,
            "feedback": self.feedback,
        }


@dataclass(frozen=True)
class ProbeValidation:
    # None when there was no schema to validate against.
    schema_valid: bool | None = None
    schema_errors: tuple[SchemaValidationError, ...] = ()
    error_quality: ErrorQualityResult | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "schema_valid": self.schema_valid,
            "schema_errors": [error.to_dict() for error in self.schema_errors],
            "error_quality": self.error_quality.to_dict() if self.error_quality else None,
        }


@dataclass(frozen=True)
class ProbeResult:
    operation: OperationDescriptor
    request: ProbeRequest
    response: ProbeResponse
    validation: ProbeValidation = field(default_factory=ProbeValidation)
    malformation_result: MalformationResult | None = None

    @property
    def is_baseline(self) -> bool:
        return self.request.malformation is MalformationKind.NONE

    def to_dict(self) -> dict[str, Any]:
        return {
            "operation": self.operation.key,
            "request": self.request.to_dict(),
            "response": self.response.to_dict(),
            "validation": self.validation.to_dict(),
            "malformation_result": self.malformation_result.to_dict() if self.malformation_result else None,
        }


@dataclass(frozen=True)
class EndpointSummary:
    reachable: bool
    valid_request_passed: bool
    response_matches_schema: bool
    error_handling_score: int
    avg_response_time_ms: int
    p95_response_time_ms: float

    def to_dict(self) -> dict[str, Any]:
        return {
            "reachable": self.reachable,
            "valid_request_passed": self.valid_request_passed,
            "response_matches_schema": self.response_matches_schema,
            "error_handling_score": self.error_handling_score,
            "avg_response_time_ms": self.avg_response_time_ms,
            "p95_response_time_ms": self.p95_response_time_ms,
        }


@dataclass(frozen=True)
class EndpointProbeReport:
    """Full probe run for one operation: baseline first, then malformation probes."""

    operation: OperationDescriptor
    probes: tuple[ProbeResult, ...]
    summary: EndpointSummary

    @property
    def baseline(self) -> ProbeResult:
        return self.probes[0]

    @property
    def malformation_probes(self) -> tuple[ProbeResult, ...]:
        return tuple(probe for probe in self.probes if not probe.is_baseline)

    def to_dict(self) -> dict[str, Any]:
        return {
            "operation": self.operation.key,
            "operation_id": self.operation.operation_id,
            "probes": [probe.to_dict() for probe in self.probes],
            "summary": self.summary.to_dict(),
        }


@dataclass(frozen=True)
class MalformationTestResult:
    """Flattened malformation outcome consumed by the rule-check engine."""

    type: MalformationKind
    request: dict[str, Any]
    response: dict[str, Any]
    evaluation: MalformationResult
    error_quality: ErrorQualityResult | None = None

    @classmethod
    def from_probe(cls, probe: ProbeResult) -> MalformationTestResult:
        evaluation = probe.malformation_result or MalformationResult(
            type=probe.request.malformation,
            passed=False,
            score=0,
            expected_behavior="",
            actual_behavior="",
            feedback="",
        )
        return cls(
            type=probe.request.malformation,
            request=probe.request.summary(),
            response=probe.response.summary(),
            evaluation=evaluation,
            error_quality=probe.validation.error_quality,
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "type": self.type.value,
            "request": dict(self.request),
            "response": dict(self.response),
            "evaluation": self.evaluation.to_dict(),
            "error_quality": self.error_quality.to_dict() if self.error_quality else None,
        }


@dataclass(frozen=True)
class LiveResponse:
    status_code: int
    body: Any = None
    headers: dict[str, str] = field(default_factory=dict)
    response_time_ms: float = 0.0

    def to_dict(self) -> dict[str, Any]:
        return {
            "status_code": self.status_code,
            "body": self.body,
            "headers": dict(self.headers),
            "response_time_ms": self.response_time_ms,
        }
