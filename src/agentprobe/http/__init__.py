# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""HTTP transport exports."""

from .adapters import StubHttpClient
from .auth import apply_auth, strip_auth
from .client import HttpClient, create_default_http_client
from .headers import header_value, normalize_headers, without_headers
from .httpx_client import HttpxClient
from .models import Headers, HttpRequest, HttpResponse, RetryConfig
from .ratelimit import RateLimiter
from .retry import build_default_retry_config, is_retryable, send_with_retries
from .transport import TransportClient, parse_body, to_probe_response

__all__ = [
    "Headers",
    "HttpClient",
    "HttpxClient",
    "HttpRequest",
    "HttpResponse",
    "RateLimiter",
    "RetryConfig",
    "StubHttpClient",
    "TransportClient",
    "apply_auth",
    "build_default_retry_config",
    "create_default_http_client",
    "header_value",
    "is_retryable",
    "normalize_headers",
    "parse_body",
    "send_with_retries",
    "strip_auth",
    "to_probe_response",
    "without_headers",
]
