# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Operation model consumed from the normalization layer."""

from .models import (
    MediaType,
    NormalizedAPI,
    OperationDescriptor,
    Parameter,
    RequestBody,
    ResponseSpec,
    Schema,
)
from .responses import (
    json_media,
    request_body_media,
    request_body_schema,
    required_body_fields,
    select_response_schema,
)

__all__ = [
    "MediaType",
    "NormalizedAPI",
    "OperationDescriptor",
    "Parameter",
    "RequestBody",
    "ResponseSpec",
    "Schema",
    "json_media",
    "request_body_media",
    "request_body_schema",
    "required_body_fields",
    "select_response_schema",
]
