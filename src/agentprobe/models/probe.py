# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Probe request/response models."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class MalformationKind(str, Enum):
    NONE = "none"
    INVALID_JSON = "invalid-json"
    MISSING_REQUIRED = "missing-required"
    WRONG_TYPE = "wrong-type"
    EXTRA_FIELD = "extra-field"
    MISSING_AUTH = "missing-auth"
    EMPTY_BODY = "empty-body"
    NULL_REQUIRED = "null-required"
    INVALID_PATH_PARAM = "invalid-path-param"
    BOUNDARY_VALUE = "boundary-value"


@dataclass(frozen=True)
class ProbeRequest:
    """
    A synthesized request for one operation.

    ``body`` holds the JSON value to send (``None`` means no body). For ``invalid-json``
    probes it holds the raw, unparseable string that goes on the wire verbatim.
    """

    url: str
    method: str
    headers: dict[str, str] = field(default_factory=dict)
    query: dict[str, str] = field(default_factory=dict)
    body: Any = None
    malformation: MalformationKind = MalformationKind.NONE
    operation_key: str = ""

    @property
    def has_body(self) -> bool:
        return self.body is not None

    @property
    def skips_auth(self) -> bool:
        return self.malformation is MalformationKind.MISSING_AUTH

    @property
    def sends_raw_body(self) -> bool:
        return self.malformation is MalformationKind.INVALID_JSON and isinstance(self.body, str)

    def summary(self) -> dict[str, Any]:
        return {"method": self.method, "url": self.url, "body": self.body}

    def to_dict(self) -> dict[str, Any]:
        return {
            "url": self.url,
            "method": self.method,
            "headers": dict(self.headers),
            "query": dict(self.query),
            "body": self.body,
            "malformation": self.malformation.value,
            "operation_key": self.operation_key,
        }


@dataclass(frozen=True)
class TransportError:
    code: str
    message: str

    def to_dict(self) -> dict[str, str]:
        return {"code": self.code, "message": self.message}


@dataclass(frozen=True)
class ProbeResponse:
    """Terminal outcome of one logical send (after retries)."""

    status_code: int
    status_text: str = ""
    headers: dict[str, str] = field(default_factory=dict)
    body: Any = None
    latency_ms: float = 0.0
    timed_out: bool = False
    error: TransportError | None = None
    attempts: int = 1

    @property
    def failed(self) -> bool:
        """True when no usable HTTP response was obtained."""
        return self.error is not None or self.timed_out

    @property
    def is_success(self) -> bool:
        return 200 <= self.status_code < 300

    @property
    def is_client_error(self) -> bool:
        return 400 <= self.status_code < 500

    def summary(self) -> dict[str, Any]:
        return {"status_code": self.status_code, "body": self.body, "latency_ms": self.latency_ms}

    def to_dict(self) -> dict[str, Any]:
        return {
            "status_code": self.status_code,
            "status_text": self.status_text,
            "headers": dict(self.headers),
            "body": self.body,
            "latency_ms": self.latency_ms,
            "timed_out": self.timed_out,
            "error": self.error.to_dict() if self.error else None,
            "attempts": self.attempts,
        }
