# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Per-endpoint summary statistics."""

from __future__ import annotations

from collections.abc import Sequence

from ..models.report import EndpointSummary, ProbeResult
from ..utils.numbers import percentile, round_half_up

P95 = 0.95


def summarize(probes: Sequence[ProbeResult]) -> EndpointSummary:
    """``probes[0]`` must be the baseline probe."""
    baseline = probes[0]
    response = baseline.response

    latencies = [probe.response.latency_ms for probe in probes if not probe.response.failed]
    scores = [probe.malformation_result.score for probe in probes if probe.malformation_result is not None]

    schema_valid = baseline.validation.schema_valid
    return EndpointSummary(
        reachable=not response.failed,
        valid_request_passed=response.is_success,
        response_matches_schema=schema_valid if schema_valid is not None else True,
        error_handling_score=round_half_up(sum(scores) / len(scores)) if scores else 100,
        avg_response_time_ms=round_half_up(sum(latencies) / len(latencies)) if latencies else 0,
        p95_response_time_ms=percentile(latencies, P95),
    )


__all__ = ["summarize"]
