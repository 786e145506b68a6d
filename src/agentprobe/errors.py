# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Error taxonomy and exception helpers."""

from __future__ import annotations

import socket
import ssl as ssl_module
from enum import Enum
from typing import Any

import httpx


class AgentProbeError(Exception):
    """Base class for errors raised to agentprobe callers."""

    def __init__(self, message: str, context: dict[str, Any] | None = None):
        super().__init__(message)
        self.message = message
        self.context = dict(context or {})


class ConfigError(AgentProbeError):
    """Invalid prober configuration (missing base URL, bad auth settings, ...)."""


class DescriptorError(AgentProbeError):
    """An operation/API mapping handed in by the normalization layer is unusable."""


class SynthesisError(AgentProbeError):
    """A request could not be synthesized for an operation."""


# Error code recorded when a baseline request cannot be synthesized.
REQUEST_BUILD_ERROR = "REQUEST_BUILD_ERROR"


class ErrorCategory(str, Enum):
    TIMEOUT = "TIMEOUT"
    CONNECTION_ERROR = "CONNECTION_ERROR"
    SSL_ERROR = "SSL_ERROR"
    DNS_ERROR = "DNS_ERROR"
    PROTOCOL_ERROR = "PROTOCOL_ERROR"
    UNKNOWN_ERROR = "UNKNOWN_ERROR"
    NONE = "NONE"


def categorize_exception(exc: BaseException) -> ErrorCategory:
    """
    Map Python/httpx exceptions to ErrorCategory.
    """
    if isinstance(exc, (httpx.TimeoutException, TimeoutError, socket.timeout)):
        return ErrorCategory.TIMEOUT

    cause = exc.__cause__ or exc.__context__
    if isinstance(cause, (socket.gaierror, socket.herror)):
        return ErrorCategory.DNS_ERROR
    if isinstance(cause, (ssl_module.SSLError, ssl_module.CertificateError)):
        return ErrorCategory.SSL_ERROR

    if isinstance(exc, (httpx.RemoteProtocolError, httpx.LocalProtocolError)):
        return ErrorCategory.PROTOCOL_ERROR

    if isinstance(exc, (httpx.ConnectError, httpx.NetworkError, httpx.ProxyError)):
        return ErrorCategory.CONNECTION_ERROR

    if isinstance(exc, (ssl_module.SSLError, ssl_module.CertificateError)):
        return ErrorCategory.SSL_ERROR

    if isinstance(exc, (socket.gaierror, socket.herror)):
        return ErrorCategory.DNS_ERROR

    if isinstance(exc, (ConnectionError, ConnectionRefusedError, ConnectionResetError)):
        return ErrorCategory.CONNECTION_ERROR

    return ErrorCategory.UNKNOWN_ERROR


def error_category_to_reason(category: ErrorCategory | None) -> str:
    """User-facing reason string."""
    mapping = {
        ErrorCategory.TIMEOUT: "Request timed out",
        ErrorCategory.CONNECTION_ERROR: "Connection refused or reset",
        ErrorCategory.SSL_ERROR: "TLS/certificate issue",
        ErrorCategory.DNS_ERROR: "DNS resolution failure",
        ErrorCategory.PROTOCOL_ERROR: "Malformed HTTP exchange",
        ErrorCategory.UNKNOWN_ERROR: "Network error during probe",
        ErrorCategory.NONE: "",
        None: "",
    }
    return mapping.get(category, "Probe failed due to network error")


__all__ = [
    "AgentProbeError",
    "ConfigError",
    "DescriptorError",
    "ErrorCategory",
    "REQUEST_BUILD_ERROR",
    "SynthesisError",
    "categorize_exception",
    "error_category_to_reason",
]
