# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""HTTP request/response data models used by the transport layer."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from ..config import ProberSettings
from ..errors import ErrorCategory

Headers = dict[str, str]


@dataclass
class HttpRequest:
    """Wire-level request consumed by HttpClient implementations."""

    url: str
    method: str = "GET"
    headers: Headers | None = None
    params: dict[str, str] | None = None
    body: bytes | str | None = None
    timeout: float | None = None
    allow_redirects: bool = True


@dataclass
class HttpResponse:
    """
    Result of a single HTTP attempt.

    ``ok`` means a response was received (any status code); transport failures carry
    ``status_code=None`` together with the error fields.
    """

    ok: bool
    status_code: int | None = None
    reason: str = ""
    headers: Headers = field(default_factory=dict)
    text: str = ""
    content: bytes = b""
    url: str | None = None
    elapsed_ms: float = 0.0
    timed_out: bool = False
    error_message: str | None = None
    error_type: str | None = None
    error_category: ErrorCategory | None = None
    meta: dict[str, Any] = field(default_factory=dict)

    @property
    def is_transport_failure(self) -> bool:
        return self.status_code is None


@dataclass
class RetryConfig:
    """Retry policy: up to ``retries + 1`` attempts with linear backoff (``delay * attempt``)."""

    retries: int = 2
    retry_delay: float = 1.0

    @property
    def max_attempts(self) -> int:
        return max(0, self.retries) + 1

    @classmethod
    def from_settings(cls, settings: ProberSettings) -> RetryConfig:
        """Build a retry config from the shared ProberSettings."""
        return cls(
            retries=max(0, settings.retries),
            retry_delay=max(0.0, settings.retry_delay),
        )
