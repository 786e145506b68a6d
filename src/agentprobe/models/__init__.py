# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Dataclass exports for agentprobe."""

from .probe import MalformationKind, ProbeRequest, ProbeResponse, TransportError
from .report import (
    EndpointProbeReport,
    EndpointSummary,
    ErrorQualityResult,
    LiveResponse,
    MalformationResult,
    MalformationTestResult,
    ProbeResult,
    ProbeValidation,
    SchemaValidationError,
    SchemaValidationResult,
)

__all__ = [
    "EndpointProbeReport",
    "EndpointSummary",
    "ErrorQualityResult",
    "LiveResponse",
    "MalformationKind",
    "MalformationResult",
    "MalformationTestResult",
    "ProbeRequest",
    "ProbeResponse",
    "ProbeResult",
    "ProbeValidation",
    "SchemaValidationError",
    "SchemaValidationResult",
    "TransportError",
]
