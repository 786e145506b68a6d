# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Build valid baseline requests and their malformed variants for an operation."""

from __future__ import annotations

import logging
from typing import Any
from urllib.parse import quote

from ..errors import SynthesisError
from ..models.probe import MalformationKind, ProbeRequest
from ..openapi.models import OperationDescriptor, Parameter
from ..openapi.responses import request_body_media
from ..utils.text import stringify_scalar
from .malformations import MUTATIONS, derive_request, invalid_path_value
from .values import synthesize

logger = logging.getLogger(__name__)

# Managed by the transport layer (content negotiation and credentials).
RESERVED_HEADERS = frozenset({"accept", "content-type", "authorization"})

NAME_HINTS: tuple[tuple[tuple[str, ...], str], ...] = (
    (("id",), "1"),
    (("page",), "1"),
    (("limit", "size"), "10"),
    (("skip", "offset"), "0"),
    (("sort",), "created_at"),
    (("order",), "desc"),
)
FALLBACK_PARAM_VALUE = "test"


def _name_hint(name: str) -> str:
    lowered = name.lower()
    for needles, value in NAME_HINTS:
        if any(needle in lowered for needle in needles):
            return value
    return FALLBACK_PARAM_VALUE


def parameter_value(param: Parameter) -> str:
    """Example, first named example, schema synthesis, then a name-based guess."""
    if param.example is not None:
        return stringify_scalar(param.example)
    for value in param.examples.values():
        return stringify_scalar(value)
    if param.schema:
        return stringify_scalar(synthesize(param.schema))
    return _name_hint(param.name)


def request_body_value(operation: OperationDescriptor) -> Any:
    media = request_body_media(operation)
    if media is None:
        return None
    if media.example is not None:
        return media.example
    for value in media.examples.values():
        return value
    if media.schema is None:
        return None
    return synthesize(media.schema)


class RequestBuilder:
    """Turns operation descriptors into concrete :class:`ProbeRequest` objects."""

    def __init__(self, base_url: str):
        self.base_url = base_url.rstrip("/")

    def build_url(self, operation: OperationDescriptor, overrides: dict[str, str] | None = None) -> str:
        overrides = overrides or {}
        path = operation.path
        for param in operation.parameters_in("path"):
            value = overrides.get(param.name)
            if value is None:
                value = parameter_value(param)
            path = path.replace("{" + param.name + "}", quote(value, safe=""))
        return f"{self.base_url}{path}"

    def build_valid_request(self, operation: OperationDescriptor) -> ProbeRequest:
        try:
            url = self.build_url(operation)
            query = {
                param.name: parameter_value(param)
                for param in operation.parameters_in("query")
                if param.required or (param.schema and "default" in param.schema)
            }
            headers = {
                param.name: parameter_value(param)
                for param in operation.parameters_in("header")
                if param.required and param.name.lower() not in RESERVED_HEADERS
            }
            body = request_body_value(operation)
        except SynthesisError:
            raise
        except Exception as exc:  # noqa: BLE001
            raise SynthesisError(f"Could not build request for {operation.key}", {"error": str(exc)}) from exc

        return ProbeRequest(
            url=url,
            method=operation.method,
            headers=headers,
            query=query,
            body=body,
            malformation=MalformationKind.NONE,
            operation_key=operation.key,
        )

    def build_malformed_request(
        self,
        operation: OperationDescriptor,
        kind: MalformationKind,
        baseline: ProbeRequest | None = None,
    ) -> ProbeRequest:
        """
        Derive a request that violates the contract in exactly one way.

        ``baseline`` is left untouched; when omitted a fresh valid request is built first.
        """
        if baseline is None:
            baseline = self.build_valid_request(operation)
        if kind is MalformationKind.NONE:
            return derive_request(baseline, MalformationKind.NONE)

        if kind is MalformationKind.INVALID_PATH_PARAM:
            path_params = operation.parameters_in("path")
            if not path_params:
                return derive_request(baseline, kind)
            target = path_params[0]
            url = self.build_url(operation, {target.name: invalid_path_value(target)})
            return derive_request(baseline, kind, url=url)

        mutate = MUTATIONS.get(kind)
        if mutate is None:
            raise SynthesisError(f"Unsupported malformation: {kind}", {"operation": operation.key})
        logger.debug("Applying %s malformation to %s", kind.value, operation.key)
        return mutate(baseline, operation)


__all__ = ["RequestBuilder", "parameter_value", "request_body_value"]
