# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""httpx-backed HttpClient implementation."""

from __future__ import annotations

import time

import httpx

from ..config import ProberSettings, load_settings
from ..errors import ErrorCategory, categorize_exception
from .client import HttpClient
from .models import HttpRequest, HttpResponse


class HttpxClient(HttpClient):
    """Synchronous httpx client wrapper performing exactly one attempt per call."""

    def __init__(self, settings: ProberSettings | None = None, client: httpx.Client | None = None):
        self.settings = settings or load_settings()
        self._client = client or httpx.Client(
            follow_redirects=self.settings.allow_redirects,
            timeout=self.settings.timeout,
            verify=self.settings.verify_ssl,
        )

    def request(self, request: HttpRequest) -> HttpResponse:
        headers = dict(request.headers or {})
        headers.setdefault("User-Agent", self.settings.user_agent)

        max_body_bytes = self.settings.max_body_bytes
        if max_body_bytes <= 0:
            max_body_bytes = 16 * 1024 * 1024

        timeout = request.timeout if request.timeout is not None else self.settings.timeout
        started = time.perf_counter()

        try:
            with self._client.stream(
                request.method,
                request.url,
                params=request.params or None,
                headers=headers,
                content=request.body,
                timeout=timeout,
                follow_redirects=request.allow_redirects,
            ) as resp:
                content = bytearray()
                truncated = False
                for chunk in resp.iter_bytes():
                    if not chunk:
                        continue
                    remaining = max_body_bytes - len(content)
                    if remaining <= 0:
                        truncated = True
                        break
                    if len(chunk) > remaining:
                        content.extend(chunk[:remaining])
                        truncated = True
                        break
                    content.extend(chunk)

                encoding = resp.encoding or "utf-8"
                try:
                    text = bytes(content).decode(encoding, errors="replace")
                except LookupError:
                    text = bytes(content).decode("utf-8", errors="replace")

            elapsed_ms = (time.perf_counter() - started) * 1000.0
            return HttpResponse(
                ok=True,
                status_code=resp.status_code,
                reason=resp.reason_phrase or "",
                headers={key.lower(): value for key, value in resp.headers.items()},
                text=text,
                content=bytes(content),
                url=str(resp.url),
                elapsed_ms=elapsed_ms,
                meta={
                    "body_truncated": truncated,
                    "body_bytes_read": len(content),
                    "body_bytes_limit": max_body_bytes,
                },
            )
        except Exception as exc:  # noqa: BLE001
            elapsed_ms = (time.perf_counter() - started) * 1000.0
            category = categorize_exception(exc)
            timed_out = category is ErrorCategory.TIMEOUT
            message = f"Request timed out after {timeout:g}s" if timed_out else (str(exc) or type(exc).__name__)
            return HttpResponse(
                ok=False,
                url=request.url,
                elapsed_ms=elapsed_ms,
                timed_out=timed_out,
                error_message=message,
                error_type=type(exc).__name__,
                error_category=category,
            )

    def close(self) -> None:
        self._client.close()
