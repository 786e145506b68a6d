# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""
Prober: baseline then malformation probes for each operation.

Operations and their probes run strictly one after another. The transport's rate limiter is
the only shared mutable state and it relies on that ordering; a concurrent caller must give
each worker its own Prober or serialize access to the shared limiter.
"""

from __future__ import annotations

import logging
from collections.abc import Callable

from ..config import ProberSettings
from ..errors import REQUEST_BUILD_ERROR
from ..http.client import HttpClient
from ..http.transport import TransportClient
from ..models.probe import MalformationKind, ProbeRequest, ProbeResponse, TransportError
from ..models.report import (
    EndpointProbeReport,
    LiveResponse,
    MalformationTestResult,
    ProbeResult,
    ProbeValidation,
)
from ..openapi.models import NormalizedAPI, OperationDescriptor
from ..openapi.responses import select_response_schema
from ..synthesis.malformations import select_malformations, should_probe_malformations
from ..synthesis.requests import RequestBuilder
from ..validation.error_quality import evaluate_error_response
from ..validation.schema import validate_schema
from .evaluation import evaluate_malformation
from .summary import summarize

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[int, int], None]


class Prober:
    """Probes live endpoints with a valid request and a set of contract violations."""

    def __init__(
        self,
        settings: ProberSettings,
        transport: TransportClient | None = None,
        http_client: HttpClient | None = None,
    ):
        self.settings = settings
        self.transport = transport or TransportClient(settings, http_client=http_client)
        self.builder = RequestBuilder(settings.base_url)

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def probe_endpoint(self, operation: OperationDescriptor) -> EndpointProbeReport:
        baseline, baseline_request = self._probe_baseline(operation)
        probes: list[ProbeResult] = [baseline]

        if should_probe_malformations(
            operation,
            sandbox=self.settings.sandbox,
            extended=self.settings.extended_malformations,
        ):
            probes.extend(self._probe_malformations(operation, baseline_request))

        return EndpointProbeReport(operation=operation, probes=tuple(probes), summary=summarize(probes))

    def probe_all(
        self,
        api: NormalizedAPI,
        on_progress: ProgressCallback | None = None,
    ) -> dict[str, EndpointProbeReport]:
        results: dict[str, EndpointProbeReport] = {}
        total = len(api.operations)
        for completed, operation in enumerate(api.operations, start=1):
            logger.debug("Probing %s (%d/%d)", operation.key, completed, total)
            results[operation.key] = self.probe_endpoint(operation)
            if on_progress is not None:
                on_progress(completed, total)
        return results

    def run_malformation_tests(self, operation: OperationDescriptor) -> list[MalformationTestResult]:
        """Only the selected malformations go over the wire; the baseline is built locally."""
        try:
            baseline = self.builder.build_valid_request(operation)
        except Exception as exc:  # noqa: BLE001
            logger.warning("Could not build baseline request for %s: %s", operation.key, exc)
            baseline = None
        return [MalformationTestResult.from_probe(probe) for probe in self._probe_malformations(operation, baseline)]

    def get_live_response(self, operation: OperationDescriptor) -> LiveResponse | None:
        """Single valid request; ``None`` when it could not be built or no HTTP response arrived."""
        try:
            request = self.builder.build_valid_request(operation)
        except Exception as exc:  # noqa: BLE001
            logger.debug("Could not build live request for %s: %s", operation.key, exc)
            return None
        response = self.transport.send(request)
        if response.error is not None:
            return None
        return LiveResponse(
            status_code=response.status_code,
            body=response.body,
            headers=dict(response.headers),
            response_time_ms=response.latency_ms,
        )

    def close(self) -> None:
        self.transport.close()

    # ------------------------------------------------------------------
    # Probe steps
    # ------------------------------------------------------------------

    def _probe_baseline(self, operation: OperationDescriptor) -> tuple[ProbeResult, ProbeRequest | None]:
        try:
            request = self.builder.build_valid_request(operation)
        except Exception as exc:  # noqa: BLE001
            logger.warning("Could not build baseline request for %s: %s", operation.key, exc)
            request = ProbeRequest(
                url=f"{self.builder.base_url}{operation.path}",
                method=operation.method,
                operation_key=operation.key,
            )
            response = ProbeResponse(
                status_code=0,
                status_text="Request Build Failed",
                error=TransportError(code=REQUEST_BUILD_ERROR, message=str(exc)),
                attempts=0,
            )
            return ProbeResult(operation=operation, request=request, response=response), None

        response = self.transport.send(request)
        result = ProbeResult(
            operation=operation,
            request=request,
            response=response,
            validation=self._validate_baseline(operation, response),
        )
        return result, request

    def _validate_baseline(self, operation: OperationDescriptor, response: ProbeResponse) -> ProbeValidation:
        if response.failed or response.body is None:
            return ProbeValidation()
        schema = select_response_schema(operation, response.status_code)
        if schema is None:
            return ProbeValidation()
        result = validate_schema(response.body, schema)
        return ProbeValidation(schema_valid=result.valid, schema_errors=result.errors)

    def _probe_malformations(self, operation: OperationDescriptor, baseline: ProbeRequest | None) -> list[ProbeResult]:
        probes: list[ProbeResult] = []
        for kind in select_malformations(operation, extended=self.settings.extended_malformations):
            try:
                probes.append(self._probe_malformation(operation, kind, baseline))
            except Exception as exc:  # noqa: BLE001
                logger.warning("Skipping %s probe for %s: %s", kind.value, operation.key, exc)
        return probes

    def _probe_malformation(
        self,
        operation: OperationDescriptor,
        kind: MalformationKind,
        baseline: ProbeRequest | None,
    ) -> ProbeResult:
        request = self.builder.build_malformed_request(operation, kind, baseline)
        response = self.transport.send(request)
        quality = evaluate_error_response(response) if response.status_code >= 400 else None
        return ProbeResult(
            operation=operation,
            request=request,
            response=response,
            validation=ProbeValidation(error_quality=quality),
            malformation_result=evaluate_malformation(kind, response, quality),
        )


__all__ = ["Prober", "ProgressCallback"]
