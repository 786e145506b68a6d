# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""
Heuristic scoring of error responses for automated consumers.

The score is out of 100: machine-readable code (25), message (15), helpful message (20),
offending field identified (20), fix suggested (10) and documentation link (10).
"""

from __future__ import annotations

import re
from collections.abc import Mapping
from typing import Any

from ..models.probe import ProbeResponse
from ..models.report import ErrorQualityResult

CODE_FIELDS = ("code", "error_code", "errorCode", "error", "type")
MESSAGE_FIELDS = ("message", "error", "detail", "details", "msg")
# ``details`` is usually structured, so it never supplies the message text.
MESSAGE_TEXT_FIELDS = ("message", "error", "detail", "msg")
DETAIL_LIST_FIELDS = ("detail", "details", "errors")
FIELD_INDICATORS = ("field", "property", "path", "location", "loc", "param", "parameter")
DOC_URL_FIELDS = ("docs", "documentation", "help", "more_info", "moreInfo", "doc_url", "docUrl", "link", "url")
COMPARISON_FIELDS = ("expected", "received", "actual")

GENERIC_MESSAGES = frozenset(
    {
        "error",
        "failed",
        "invalid",
        "bad request",
        "internal error",
        "server error",
        "something went wrong",
        "an error occurred",
        "request failed",
        "validation failed",
        "not found",
        "unauthorized",
        "forbidden",
    }
)
SPECIFIC_WORDS = ("must", "should", "expected", "received")
FIX_PHRASES = (
    "should be",
    "must be",
    "expected",
    "try",
    "use",
    "provide",
    "include",
    "required",
    "allowed",
    "valid values",
    "example",
    "e.g.",
    "such as",
    "like",
)
VALIDATION_STATUSES = frozenset({400, 422})

MIN_HELPFUL_LENGTH = 10
SPECIFIC_MESSAGE_LENGTH = 20

FIELD_REFERENCE_RE = re.compile(r"\"[a-z_]+\"|'[a-z_]+'|\.[a-z_]+")
DIGIT_RE = re.compile(r"\d")
URL_RE = re.compile(r"https?://")

SCORE_ERROR_CODE = 25
SCORE_MESSAGE = 15
SCORE_HELPFUL = 20
SCORE_FIELD = 20
SCORE_FIX = 10
SCORE_DOC_URL = 10


def extract_message(body: Mapping[str, Any]) -> str | None:
    """First string among the message-like fields (may be empty)."""
    for name in MESSAGE_TEXT_FIELDS:
        value = body.get(name)
        if isinstance(value, str):
            return value
    return None


def has_error_code(body: Mapping[str, Any]) -> bool:
    for name in CODE_FIELDS:
        value = body.get(name)
        if isinstance(value, str) and value and (" " not in value or value == value.upper()):
            return True
    return False


def has_message(body: Mapping[str, Any]) -> bool:
    return any(isinstance(body.get(name), str) and body.get(name) for name in MESSAGE_FIELDS)


def is_message_helpful(body: Mapping[str, Any]) -> bool:
    message = extract_message(body)
    if not message:
        return False
    normalized = message.lower().strip()
    if len(normalized) < MIN_HELPFUL_LENGTH or normalized in GENERIC_MESSAGES:
        return False
    if '"' in message or "'" in message or DIGIT_RE.search(message):
        return True
    if any(word in message for word in SPECIFIC_WORDS):
        return True
    return len(message) > SPECIFIC_MESSAGE_LENGTH


def _first_detail_list(body: Mapping[str, Any]) -> Any:
    for name in DETAIL_LIST_FIELDS:
        value = body.get(name)
        if value:
            return value
    return None


def identifies_field(body: Mapping[str, Any], status_code: int) -> bool:
    # Field attribution only means something for validation failures.
    if status_code not in VALIDATION_STATUSES:
        return True

    if any(indicator in body for indicator in FIELD_INDICATORS):
        return True

    details = _first_detail_list(body)
    if isinstance(details, list):
        for item in details:
            if isinstance(item, Mapping) and any(indicator in item for indicator in FIELD_INDICATORS):
                return True

    message = extract_message(body)
    return bool(message and FIELD_REFERENCE_RE.search(message))


def suggests_fix(body: Mapping[str, Any]) -> bool:
    message = extract_message(body)
    if not message:
        return False
    lowered = message.lower()
    if any(phrase in lowered for phrase in FIX_PHRASES):
        return True
    return any(name in body for name in COMPARISON_FIELDS)


def has_doc_url(body: Mapping[str, Any]) -> bool:
    for name in DOC_URL_FIELDS:
        value = body.get(name)
        if isinstance(value, str) and value.startswith("http"):
            return True
    message = extract_message(body)
    return bool(message and URL_RE.search(message))


def evaluate_error_response(response: ProbeResponse) -> ErrorQualityResult:
    """Score how actionable ``response`` is as an error for an automated caller."""
    body = response.body
    if not isinstance(body, Mapping):
        return ErrorQualityResult(
            has_error_code=False,
            has_message=False,
            message_is_helpful=False,
            identifies_field=False,
            suggests_fix=False,
            has_doc_url=False,
            score=0,
            feedback=("Error response is not a JSON object",),
        )

    feedback: list[str] = []
    score = 0

    code = has_error_code(body)
    if code:
        score += SCORE_ERROR_CODE
    else:
        feedback.append("Missing machine-readable error code")

    message = has_message(body)
    if message:
        score += SCORE_MESSAGE
    else:
        feedback.append("Missing error message")

    helpful = message and is_message_helpful(body)
    if helpful:
        score += SCORE_HELPFUL
    elif message:
        feedback.append("Error message is too generic")

    field_identified = identifies_field(body, response.status_code)
    if field_identified:
        score += SCORE_FIELD
    else:
        feedback.append("Validation error does not identify problematic field")

    fix = suggests_fix(body)
    if fix:
        score += SCORE_FIX
    else:
        feedback.append("Error does not suggest how to fix the issue")

    doc_url = has_doc_url(body)
    if doc_url:
        score += SCORE_DOC_URL
    else:
        feedback.append("No documentation URL for more information")

    return ErrorQualityResult(
        has_error_code=code,
        has_message=message,
        message_is_helpful=helpful,
        identifies_field=field_identified,
        suggests_fix=fix,
        has_doc_url=doc_url,
        score=score,
        feedback=tuple(feedback),
    )


__all__ = [
    "evaluate_error_response",
    "extract_message",
    "has_doc_url",
    "has_error_code",
    "identifies_field",
    "is_message_helpful",
    "suggests_fix",
]
