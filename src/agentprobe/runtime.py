# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""High-level agentprobe facade for live endpoint probing."""

from __future__ import annotations

from collections.abc import Mapping
from contextlib import suppress
from typing import Any

from .config import ProberSettings, load_settings
from .http.client import HttpClient, create_default_http_client
from .http.transport import TransportClient
from .models import EndpointProbeReport, LiveResponse, MalformationTestResult
from .openapi.models import NormalizedAPI, OperationDescriptor
from .prober.engine import Prober, ProgressCallback


def _as_operation(operation: OperationDescriptor | Mapping[str, Any]) -> OperationDescriptor:
    if isinstance(operation, OperationDescriptor):
        return operation
    return OperationDescriptor.from_mapping(operation)


def _as_api(api: NormalizedAPI | Mapping[str, Any]) -> NormalizedAPI:
    if isinstance(api, NormalizedAPI):
        return api
    return NormalizedAPI.from_mapping(api)


class AgentProbe:
    """
    Convenience wrapper that wires settings, one shared HTTP client and the prober.

    Settings are validated up front so configuration mistakes surface as ``ConfigError``
    before any request is sent. Operations may be passed as descriptors or as plain mappings
    from the normalization layer.
    """

    def __init__(self, settings: ProberSettings | None = None, http_client: HttpClient | None = None):
        self.settings = settings or load_settings()
        self.settings.validate()
        self.http_client = http_client or create_default_http_client(self.settings)
        self.transport = TransportClient(self.settings, http_client=self.http_client)
        self.prober = Prober(self.settings, transport=self.transport)

    def probe(self, operation: OperationDescriptor | Mapping[str, Any]) -> EndpointProbeReport:
        return self.prober.probe_endpoint(_as_operation(operation))

    def probe_all(
        self,
        api: NormalizedAPI | Mapping[str, Any],
        on_progress: ProgressCallback | None = None,
    ) -> dict[str, EndpointProbeReport]:
        return self.prober.probe_all(_as_api(api), on_progress=on_progress)

    def malformation_tests(self, operation: OperationDescriptor | Mapping[str, Any]) -> list[MalformationTestResult]:
        return self.prober.run_malformation_tests(_as_operation(operation))

    def live_response(self, operation: OperationDescriptor | Mapping[str, Any]) -> LiveResponse | None:
        return self.prober.get_live_response(_as_operation(operation))

    def close(self) -> None:
        with suppress(Exception):
            if hasattr(self.http_client, "close"):
                self.http_client.close()

    def __enter__(self) -> AgentProbe:
        return self

    def __exit__(self, _exc_type, _exc, _tb) -> None:  # noqa: ANN001
        self.close()
