# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Score a malformation probe against its expectation."""

from __future__ import annotations

from ..models.probe import MalformationKind, ProbeResponse
from ..models.report import ErrorQualityResult, MalformationResult
from ..synthesis.malformations import expectation_for
from ..utils.numbers import round_half_up
from ..validation.error_quality import evaluate_error_response

EXPECTED_STATUS_SCORE = 40
CLIENT_ERROR_SCORE = 20
ERROR_QUALITY_WEIGHT = 0.6
PASS_THRESHOLD = 60


def evaluate_malformation(
    kind: MalformationKind,
    response: ProbeResponse,
    quality: ErrorQualityResult | None = None,
) -> MalformationResult:
    """
    Status match is worth 40 (any other 4xx earns 20), plus 60% of the error-quality score
    for responses at or above 400. A result passes at 60.
    """
    expectation = expectation_for(kind)
    expected = " or ".join(str(code) for code in expectation.expected_status_codes)
    status = response.status_code

    score = 0
    feedback: list[str] = []
    if status in expectation.expected_status_codes:
        score += EXPECTED_STATUS_SCORE
    elif response.is_client_error:
        score += CLIENT_ERROR_SCORE
        feedback.append(f"Expected status {expected}, got {status}")
    else:
        feedback.append(f"Expected {expected}, got {status}")

    if status >= 400:
        if quality is None:
            quality = evaluate_error_response(response)
        score += round_half_up(quality.score * ERROR_QUALITY_WEIGHT)
        feedback.extend(quality.feedback)

    return MalformationResult(
        type=kind,
        passed=score >= PASS_THRESHOLD,
        score=score,
        expected_behavior=expectation.expected_behavior,
        actual_behavior=f"{status} {response.status_text}".strip(),
        feedback="; ".join(feedback) or "Good error handling",
    )


__all__ = ["PASS_THRESHOLD", "evaluate_malformation"]
