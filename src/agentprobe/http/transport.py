# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""
TransportClient: executes one ProbeRequest under the resilience policy.

Every send is paced by the shared RateLimiter, carries the configured credentials (unless
the request is a ``missing-auth`` probe) and is retried on transport failures and 5xx
responses. ``send`` never raises; every failure resolves to a ProbeResponse.
"""

from __future__ import annotations

import json
import logging
from datetime import date, datetime, time
from typing import Any

from ..config import ProberSettings
from ..errors import REQUEST_BUILD_ERROR, ErrorCategory, error_category_to_reason
from ..models.probe import ProbeRequest, ProbeResponse, TransportError
from .auth import apply_auth, strip_auth
from .client import HttpClient, create_default_http_client
from .headers import header_value, normalize_headers
from .models import HttpRequest, HttpResponse, RetryConfig
from .ratelimit import RateLimiter
from .retry import send_with_retries

logger = logging.getLogger(__name__)

BODY_METHODS = frozenset({"POST", "PUT", "PATCH"})
BASE_HEADERS = {
    "Content-Type": "application/json",
    "Accept": "application/json",
}


def _json_default(value: Any) -> Any:
    # YAML loaders turn unquoted dates in examples into date objects.
    if isinstance(value, (datetime, date, time)):
        return value.isoformat()
    if isinstance(value, (set, frozenset, tuple)):
        return list(value)
    if isinstance(value, bytes):
        return value.decode("utf-8", errors="replace")
    raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")


def serialize_body(body: Any) -> str:
    return json.dumps(body, default=_json_default)


def parse_body(headers: dict[str, str], text: str) -> Any:
    """Decode a JSON body when the content type says so; otherwise return the text."""
    content_type = header_value(headers, "content-type").lower()
    if "json" in content_type:
        if not text.strip():
            return None
        try:
            return json.loads(text)
        except ValueError:
            return text
    return text


def to_probe_response(response: HttpResponse) -> ProbeResponse:
    attempts = int(response.meta.get("attempts", 1) or 1)
    if response.status_code is None:
        category = response.error_category or ErrorCategory.UNKNOWN_ERROR
        return ProbeResponse(
            status_code=0,
            status_text="Timeout" if response.timed_out else "Request Failed",
            latency_ms=round(response.elapsed_ms, 2),
            timed_out=response.timed_out,
            error=TransportError(
                code=category.value,
                message=response.error_message or error_category_to_reason(category),
            ),
            attempts=attempts,
        )
    headers = normalize_headers(response.headers)
    return ProbeResponse(
        status_code=response.status_code,
        status_text=response.reason,
        headers=headers,
        body=parse_body(headers, response.text),
        latency_ms=round(response.elapsed_ms, 2),
        attempts=attempts,
    )


class TransportClient:
    """Sends probe requests with pacing, credentials and retries."""

    def __init__(
        self,
        settings: ProberSettings,
        http_client: HttpClient | None = None,
        rate_limiter: RateLimiter | None = None,
    ):
        self.settings = settings
        self.http_client = http_client or create_default_http_client(settings)
        self.rate_limiter = rate_limiter or RateLimiter(settings.requests_per_second)
        self.retry_config = RetryConfig.from_settings(settings)

    def build_http_request(self, request: ProbeRequest) -> HttpRequest:
        headers = dict(BASE_HEADERS)
        headers["User-Agent"] = self.settings.user_agent
        headers.update(self.settings.headers or {})
        headers.update(request.headers or {})
        params = dict(request.query or {})

        if request.skips_auth:
            headers, params = strip_auth(headers, params, self.settings.auth)
        else:
            apply_auth(headers, params, self.settings.auth)

        body: str | None = None
        if request.has_body and request.method.upper() in BODY_METHODS:
            body = request.body if request.sends_raw_body else serialize_body(request.body)

        return HttpRequest(
            url=request.url,
            method=request.method.upper(),
            headers=headers,
            params=params,
            body=body,
            timeout=self.settings.timeout,
            allow_redirects=self.settings.allow_redirects,
        )

    def send(self, request: ProbeRequest) -> ProbeResponse:
        try:
            http_request = self.build_http_request(request)
        except Exception as exc:  # noqa: BLE001
            logger.warning("Could not assemble %s %s: %s", request.method, request.url, exc)
            return ProbeResponse(
                status_code=0,
                status_text="Request Build Failed",
                error=TransportError(code=REQUEST_BUILD_ERROR, message=str(exc) or type(exc).__name__),
                attempts=0,
            )

        self.rate_limiter.acquire()
        response = send_with_retries(self.http_client, http_request, retry_config=self.retry_config)
        if response.is_transport_failure:
            logger.debug(
                "%s %s failed after %s attempt(s): %s",
                http_request.method,
                http_request.url,
                response.meta.get("attempts"),
                response.error_message,
            )
        return to_probe_response(response)

    def close(self) -> None:
        close = getattr(self.http_client, "close", None)
        if callable(close):
            close()


__all__ = ["TransportClient", "parse_body", "serialize_body", "to_probe_response"]
