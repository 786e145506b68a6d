# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""In-process HttpClient implementations for tests and offline runs."""

from __future__ import annotations

from collections.abc import Callable

from .client import HttpClient
from .models import HttpRequest, HttpResponse

Responder = Callable[[HttpRequest], HttpResponse]


class StubHttpClient(HttpClient):
    """
    Deterministic, programmable HttpClient.

    Responses are looked up by ``"METHOD url"`` first, then by bare URL; a ``fallback``
    responder handles anything unmatched. Every request is recorded in ``requests``.
    """

    def __init__(
        self,
        responses: dict[str, HttpResponse] | None = None,
        fallback: Responder | None = None,
    ):
        self._responses = dict(responses or {})
        self._fallback = fallback
        self.requests: list[HttpRequest] = []
        self.closed = False

    def add(self, key: str, response: HttpResponse) -> None:
        self._responses[key] = response

    def request(self, request: HttpRequest) -> HttpResponse:
        self.requests.append(request)
        for key in (f"{request.method.upper()} {request.url}", request.url):
            if key in self._responses:
                return self._responses[key]
        if self._fallback is not None:
            return self._fallback(request)
        return HttpResponse(ok=False, status_code=None, url=request.url, error_message="No stubbed response configured")

    def close(self) -> None:
        self.closed = True
