# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Media-type and response-schema lookup helpers."""

from __future__ import annotations

from .models import MediaType, OperationDescriptor, ResponseSpec, Schema

JSON_MEDIA_TYPE = "application/json"


def json_media(content: dict[str, MediaType] | None) -> MediaType | None:
    """Prefer ``application/json``; fall back to the first ``+json`` structured-syntax type."""
    if not content:
        return None
    if JSON_MEDIA_TYPE in content:
        return content[JSON_MEDIA_TYPE]
    for media_type, media in content.items():
        base = media_type.split(";", 1)[0].strip().lower()
        if base == JSON_MEDIA_TYPE or base.endswith("+json"):
            return media
    return None


def request_body_media(operation: OperationDescriptor) -> MediaType | None:
    if operation.request_body is None:
        return None
    return json_media(operation.request_body.content)


def request_body_schema(operation: OperationDescriptor) -> Schema | None:
    media = request_body_media(operation)
    return media.schema if media is not None else None


def required_body_fields(operation: OperationDescriptor) -> list[str]:
    schema = request_body_schema(operation) or {}
    required = schema.get("required")
    return [str(name) for name in required] if isinstance(required, list) else []


def _response_schema(declared: ResponseSpec | None) -> Schema | None:
    if declared is None:
        return None
    media = json_media(declared.content)
    return media.schema if media is not None and media.schema else None


def select_response_schema(operation: OperationDescriptor, status_code: int) -> Schema | None:
    """Best declared schema for a status: exact code, then ``4XX``-style class, then ``default``."""
    responses = operation.responses
    status_class = f"{status_code // 100}XX"
    candidates = (
        str(status_code),
        status_class,
        status_class.lower(),
        "default",
    )
    for key in candidates:
        schema = _response_schema(responses.get(key))
        if schema is not None:
            return schema
    return None


__all__ = [
    "JSON_MEDIA_TYPE",
    "json_media",
    "request_body_media",
    "request_body_schema",
    "required_body_fields",
    "select_response_schema",
]
