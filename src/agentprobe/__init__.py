# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""agentprobe: live OpenAPI conformance and error-handling prober."""

from .config import AuthConfig, ProberSettings, load_settings
from .errors import AgentProbeError, ConfigError, DescriptorError, ErrorCategory, SynthesisError
from .log import setup_logging
from .models import (
    EndpointProbeReport,
    EndpointSummary,
    ErrorQualityResult,
    LiveResponse,
    MalformationKind,
    MalformationResult,
    MalformationTestResult,
    ProbeRequest,
    ProbeResponse,
    ProbeResult,
)
from .openapi import NormalizedAPI, OperationDescriptor
from .prober import Prober
from .runtime import AgentProbe
from .synthesis import RequestBuilder, synthesize
from .validation import evaluate_error_response, validate_schema
from .version import __version__

__all__ = [
    "AgentProbe",
    "AgentProbeError",
    "AuthConfig",
    "ConfigError",
    "DescriptorError",
    "EndpointProbeReport",
    "EndpointSummary",
    "ErrorCategory",
    "ErrorQualityResult",
    "LiveResponse",
    "MalformationKind",
    "MalformationResult",
    "MalformationTestResult",
    "NormalizedAPI",
    "OperationDescriptor",
    "ProbeRequest",
    "ProbeResponse",
    "ProbeResult",
    "Prober",
    "ProberSettings",
    "RequestBuilder",
    "SynthesisError",
    "__version__",
    "load_settings",
    "setup_logging",
    "evaluate_error_response",
    "synthesize",
    "validate_schema",
]
