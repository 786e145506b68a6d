# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Retry helper for HttpClient implementations."""

from __future__ import annotations

import logging
import time

from ..config import load_settings
from ..errors import ErrorCategory, categorize_exception
from .client import HttpClient
from .models import HttpRequest, HttpResponse, RetryConfig

logger = logging.getLogger(__name__)


def build_default_retry_config() -> RetryConfig:
    """Create a RetryConfig from environment-backed ProberSettings."""
    return RetryConfig.from_settings(load_settings())


def is_retryable(response: HttpResponse) -> bool:
    """
    Transport failures and 5xx responses are transient; everything else is returned as-is.

    4xx responses are the subject of error-handling evaluation, never a reason to retry.
    """
    if response.status_code is None:
        return True
    return 500 <= response.status_code < 600


def send_with_retries(
    client: HttpClient,
    request: HttpRequest,
    *,
    retry_config: RetryConfig | None = None,
) -> HttpResponse:
    """Execute a request with bounded retries and linear backoff. Never raises."""
    cfg = retry_config or build_default_retry_config()

    last_response: HttpResponse | None = None
    attempt = 0
    while attempt < cfg.max_attempts:
        attempt += 1
        try:
            response = client.request(request)
        except Exception as exc:  # noqa: BLE001
            category = categorize_exception(exc)
            response = HttpResponse(
                ok=False,
                url=request.url,
                timed_out=category is ErrorCategory.TIMEOUT,
                error_message=str(exc) or type(exc).__name__,
                error_type=exc.__class__.__name__,
                error_category=category,
            )
        last_response = response

        if not is_retryable(response):
            break
        if attempt >= cfg.max_attempts:
            logger.debug("Retries exhausted for %s %s after %d attempts", request.method, request.url, attempt)
            response.meta["retry_exhausted"] = True
            break

        delay = cfg.retry_delay * attempt
        logger.debug(
            "Retrying %s %s (attempt %d/%d, status=%s, error=%s) in %.2fs",
            request.method,
            request.url,
            attempt,
            cfg.max_attempts,
            response.status_code,
            response.error_type,
            delay,
        )
        if delay > 0:
            time.sleep(delay)

    if last_response is None:
        return HttpResponse(ok=False, url=request.url, error_message="No attempts made", meta={"attempts": 0})
    last_response.meta["attempts"] = attempt
    last_response.meta["retry_count"] = attempt - 1
    return last_response
