# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

import datetime
import json
import time

import httpx

from agentprobe.config import AuthConfig, ProberSettings
from agentprobe.errors import REQUEST_BUILD_ERROR, ErrorCategory
from agentprobe.http import ratelimit
from agentprobe.http.adapters import StubHttpClient
from agentprobe.http.auth import apply_auth, strip_auth
from agentprobe.http.httpx_client import HttpxClient
from agentprobe.http.models import HttpRequest, HttpResponse, RetryConfig
from agentprobe.http.ratelimit import RateLimiter
from agentprobe.http.retry import send_with_retries
from agentprobe.http.transport import TransportClient, parse_body, to_probe_response
from agentprobe.models.probe import MalformationKind, ProbeRequest


class SequenceHttpClient:
    def __init__(self, responses):
        self._responses = list(responses)
        self.calls = 0

    def request(self, request: HttpRequest) -> HttpResponse:  # noqa: ARG002
        self.calls += 1
        return self._responses[min(self.calls - 1, len(self._responses) - 1)]

    def close(self) -> None:
        self.closed = True


def test_retry_config_from_settings():
    retry = RetryConfig.from_settings(ProberSettings(retries=-3, retry_delay=0.5))
    assert retry.max_attempts == 1
    assert retry.retry_delay == 0.5
    assert RetryConfig(retries=2).max_attempts == 3


def test_send_with_retries_exhausts_on_server_errors(monkeypatch):
    delays = []
    monkeypatch.setattr(time, "sleep", delays.append)
    client = SequenceHttpClient([HttpResponse(ok=True, status_code=503, reason="Service Unavailable")])

    result = send_with_retries(client, HttpRequest(url="http://example"), retry_config=RetryConfig(retries=2, retry_delay=1.0))

    assert client.calls == 3
    assert result.status_code == 503
    assert result.meta["attempts"] == 3
    assert result.meta["retry_exhausted"] is True
    # Linear backoff: delay * attempt number.
    assert delays == [1.0, 2.0]


def test_send_with_retries_returns_client_errors_immediately(monkeypatch):
    monkeypatch.setattr(time, "sleep", lambda _: None)
    client = SequenceHttpClient([HttpResponse(ok=True, status_code=404), HttpResponse(ok=True, status_code=200)])
    result = send_with_retries(client, HttpRequest(url="http://example"), retry_config=RetryConfig(retries=2))
    assert result.status_code == 404
    assert result.meta["retry_count"] == 0
    assert client.calls == 1


def test_send_with_retries_recovers_after_server_error(monkeypatch):
    monkeypatch.setattr(time, "sleep", lambda _: None)
    client = SequenceHttpClient([HttpResponse(ok=True, status_code=500), HttpResponse(ok=True, status_code=200)])
    result = send_with_retries(client, HttpRequest(url="http://example"), retry_config=RetryConfig(retries=2))
    assert result.status_code == 200
    assert result.meta["retry_count"] == 1


def test_send_with_retries_converts_exceptions(monkeypatch):
    monkeypatch.setattr(time, "sleep", lambda _: None)

    class AlwaysTimesOut:
        def __init__(self):
            self.calls = 0

        def request(self, request: HttpRequest) -> HttpResponse:  # noqa: ARG002
            self.calls += 1
            raise httpx.ReadTimeout("too slow")

    client = AlwaysTimesOut()
    result = send_with_retries(client, HttpRequest(url="http://example"), retry_config=RetryConfig(retries=1))
    assert client.calls == 2
    assert result.ok is False
    assert result.status_code is None
    assert result.timed_out is True
    assert result.error_category is ErrorCategory.TIMEOUT
    assert result.error_type == "ReadTimeout"


def test_rate_limiter_enforces_minimum_interval(monkeypatch):
    clock = {"now": 100.0}
    slept = []

    def fake_sleep(seconds):
        slept.append(seconds)
        clock["now"] += seconds

    monkeypatch.setattr(ratelimit.time, "monotonic", lambda: clock["now"])
    monkeypatch.setattr(ratelimit.time, "sleep", fake_sleep)

    limiter = RateLimiter(requests_per_second=2)
    assert limiter.min_interval == 0.5
    assert limiter.acquire() == 0.0
    clock["now"] += 0.2
    assert abs(limiter.acquire() - 0.3) < 1e-9
    clock["now"] += 1.0
    assert limiter.acquire() == 0.0
    assert len(slept) == 1


def test_rate_limiter_disabled_without_rate():
    limiter = RateLimiter(None)
    assert limiter.enabled is False
    assert limiter.acquire() == 0.0


def test_apply_and_strip_auth_variants():
    headers, params = {}, {}
    apply_auth(headers, params, AuthConfig(type="bearer", token="abc"))
    assert headers == {"Authorization": "Bearer abc"}

    headers, params = {}, {}
    apply_auth(headers, params, AuthConfig(type="api_key", api_key="k", api_key_in="query", api_key_name="key"))
    assert headers == {}
    assert params == {"key": "k"}

    headers, params = {}, {}
    apply_auth(headers, params, AuthConfig(type="basic", username="user", password="pass"))
    assert headers["Authorization"] == "Basic dXNlcjpwYXNz"

    auth = AuthConfig(type="api_key", api_key="k", api_key_name="X-Key")
    stripped_headers, stripped_params = strip_auth(
        {"x-key": "k", "authorization": "Bearer leftover", "Accept": "application/json"},
        {"page": "1"},
        auth,
    )
    assert stripped_headers == {"Accept": "application/json"}
    assert stripped_params == {"page": "1"}


def test_parse_body_uses_content_type():
    assert parse_body({"content-type": "application/json"}, '{"a": 1}') == {"a": 1}
    assert parse_body({"content-type": "application/problem+json"}, "not json") == "not json"
    assert parse_body({"content-type": "application/json"}, "  ") is None
    assert parse_body({"content-type": "text/plain"}, '{"a": 1}') == '{"a": 1}'


def test_transport_attaches_auth_and_serializes_body():
    client = StubHttpClient(fallback=lambda req: HttpResponse(ok=True, status_code=201, headers={"Content-Type": "application/json"}, text='{"id": 1}'))
    settings = ProberSettings(base_url="http://api", auth=AuthConfig(token="secret"), headers={"X-Trace": "1"})
    transport = TransportClient(settings, http_client=client)

    response = transport.send(ProbeRequest(url="http://api/orders", method="POST", query={"q": "1"}, body={"amount": 5}))

    sent = client.requests[0]
    assert sent.headers["Authorization"] == "Bearer secret"
    assert sent.headers["X-Trace"] == "1"
    assert sent.headers["Content-Type"] == "application/json"
    assert sent.params == {"q": "1"}
    assert json.loads(sent.body) == {"amount": 5}
    assert response.status_code == 201
    assert response.body == {"id": 1}
    assert response.headers["content-type"] == "application/json"


def test_transport_missing_auth_strips_credentials():
    client = StubHttpClient(fallback=lambda req: HttpResponse(ok=True, status_code=401))
    settings = ProberSettings(
        base_url="http://api",
        auth=AuthConfig(token="secret"),
        headers={"Authorization": "Bearer default"},
    )
    transport = TransportClient(settings, http_client=client)

    transport.send(ProbeRequest(url="http://api/orders", method="GET", malformation=MalformationKind.MISSING_AUTH))

    assert "Authorization" not in client.requests[0].headers


def test_transport_sends_invalid_json_verbatim_and_skips_get_body():
    client = StubHttpClient(fallback=lambda req: HttpResponse(ok=True, status_code=400))
    transport = TransportClient(ProberSettings(base_url="http://api"), http_client=client)

    transport.send(ProbeRequest(url="http://api/orders", method="POST", body="{broken", malformation=MalformationKind.INVALID_JSON))
    transport.send(ProbeRequest(url="http://api/orders", method="GET", body={"ignored": True}))

    assert client.requests[0].body == "{broken"
    assert client.requests[1].body is None


def test_transport_serializes_date_examples_as_iso_strings():
    client = StubHttpClient(fallback=lambda req: HttpResponse(ok=True, status_code=201))
    transport = TransportClient(ProberSettings(base_url="http://api"), http_client=client)

    response = transport.send(
        ProbeRequest(url="http://api/events", method="POST", body={"day": datetime.date(2024, 1, 1), "tags": ("a",)})
    )

    assert response.status_code == 201
    assert json.loads(client.requests[0].body) == {"day": "2024-01-01", "tags": ["a"]}


def test_transport_returns_build_failure_for_unserializable_body():
    client = StubHttpClient(fallback=lambda req: HttpResponse(ok=True, status_code=201))
    transport = TransportClient(ProberSettings(base_url="http://api"), http_client=client)

    response = transport.send(ProbeRequest(url="http://api/events", method="POST", body={"blob": object()}))

    assert client.requests == []
    assert response.status_code == 0
    assert response.failed is True
    assert response.attempts == 0
    assert response.error.code == REQUEST_BUILD_ERROR
    assert "not JSON serializable" in response.error.message


def test_to_probe_response_falls_back_to_category_reason():
    response = to_probe_response(
        HttpResponse(ok=False, timed_out=True, error_category=ErrorCategory.TIMEOUT, meta={"attempts": 3})
    )

    assert response.status_text == "Timeout"
    assert response.error.code == "TIMEOUT"
    assert response.error.message == "Request timed out"
    assert response.attempts == 3


def test_transport_reports_transport_failure(monkeypatch):
    monkeypatch.setattr(time, "sleep", lambda _: None)
    client = StubHttpClient()
    transport = TransportClient(ProberSettings(base_url="http://api", retries=1), http_client=client)

    response = transport.send(ProbeRequest(url="http://api/down", method="GET"))

    assert len(client.requests) == 2
    assert response.status_code == 0
    assert response.status_text == "Request Failed"
    assert response.failed is True
    assert response.error.code == ErrorCategory.UNKNOWN_ERROR.value
    assert response.attempts == 2


def test_httpx_client_reads_body_with_cap():
    def handler(request: httpx.Request) -> httpx.Response:
        assert request.url.params["page"] == "1"
        return httpx.Response(200, headers={"Content-Type": "application/json"}, content=b'{"items": []}')

    settings = ProberSettings(base_url="http://api", max_body_bytes=5)
    client = HttpxClient(settings, client=httpx.Client(transport=httpx.MockTransport(handler)))

    response = client.request(HttpRequest(url="http://api/items", params={"page": "1"}))

    assert response.ok is True
    assert response.status_code == 200
    assert response.reason == "OK"
    assert response.headers["content-type"] == "application/json"
    assert response.text == '{"ite'
    assert response.meta["body_truncated"] is True
    client.close()


def test_httpx_client_flags_timeouts():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ReadTimeout("slow", request=request)

    settings = ProberSettings(base_url="http://api", timeout=2.0)
    client = HttpxClient(settings, client=httpx.Client(transport=httpx.MockTransport(handler)))

    response = client.request(HttpRequest(url="http://api/slow", timeout=2.0))

    assert response.ok is False
    assert response.timed_out is True
    assert response.error_category is ErrorCategory.TIMEOUT
    assert response.error_message == "Request timed out after 2s"
