# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""
Read-only operation model supplied by the normalization layer.

Schemas stay plain JSON-Schema-like dicts (already dereferenced); the dataclasses here only
give the operation envelope a typed shape. Nothing in the prober mutates these objects.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from ..errors import DescriptorError

Schema = dict[str, Any]
SecurityRequirement = dict[str, list[str]]

PARAMETER_LOCATIONS = frozenset({"path", "query", "header", "cookie"})
HTTP_METHODS = frozenset({"GET", "POST", "PUT", "PATCH", "DELETE", "HEAD", "OPTIONS"})


def _as_mapping(value: Any) -> Mapping[str, Any]:
    return value if isinstance(value, Mapping) else {}


def _example_values(raw: Any) -> dict[str, Any]:
    """Keep named examples that carry an inline ``value``."""
    values: dict[str, Any] = {}
    for name, example in _as_mapping(raw).items():
        if isinstance(example, Mapping) and "value" in example:
            values[str(name)] = example["value"]
    return values


@dataclass(frozen=True)
class Parameter:
    name: str
    location: str
    required: bool = False
    schema: Schema | None = None
    example: Any = None
    examples: dict[str, Any] = field(default_factory=dict)
    description: str | None = None

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> Parameter:
        name = data.get("name")
        location = str(data.get("in") or data.get("location") or "").lower()
        if not name or location not in PARAMETER_LOCATIONS:
            raise DescriptorError("Parameter needs a name and a valid location", {"parameter": dict(data)})
        schema = data.get("schema")
        return cls(
            name=str(name),
            location=location,
            # Path parameters are always required (OpenAPI 3.x).
            required=bool(data.get("required")) or location == "path",
            schema=dict(schema) if isinstance(schema, Mapping) else None,
            example=data.get("example"),
            examples=_example_values(data.get("examples")),
            description=data.get("description"),
        )


@dataclass(frozen=True)
class MediaType:
    schema: Schema | None = None
    example: Any = None
    examples: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> MediaType:
        schema = data.get("schema")
        return cls(
            schema=dict(schema) if isinstance(schema, Mapping) else None,
            example=data.get("example"),
            examples=_example_values(data.get("examples")),
        )


@dataclass(frozen=True)
class RequestBody:
    content: dict[str, MediaType] = field(default_factory=dict)
    required: bool = False
    description: str | None = None

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> RequestBody:
        return cls(
            content={str(k): MediaType.from_mapping(_as_mapping(v)) for k, v in _as_mapping(data.get("content")).items()},
            required=bool(data.get("required")),
            description=data.get("description"),
        )


@dataclass(frozen=True)
class ResponseSpec:
    description: str = ""
    content: dict[str, MediaType] = field(default_factory=dict)

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> ResponseSpec:
        return cls(
            description=str(data.get("description") or ""),
            content={str(k): MediaType.from_mapping(_as_mapping(v)) for k, v in _as_mapping(data.get("content")).items()},
        )


@dataclass(frozen=True)
class OperationDescriptor:
    """One HTTP method + path combination from the normalized API definition."""

    method: str
    path: str
    parameters: tuple[Parameter, ...] = ()
    request_body: RequestBody | None = None
    responses: dict[str, ResponseSpec] = field(default_factory=dict)
    security: tuple[SecurityRequirement, ...] = ()
    operation_id: str | None = None
    summary: str | None = None

    @property
    def key(self) -> str:
        return f"{self.method} {self.path}"

    @property
    def has_security(self) -> bool:
        return len(self.security) > 0

    def parameters_in(self, location: str) -> list[Parameter]:
        return [param for param in self.parameters if param.location == location]

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> OperationDescriptor:
        method = str(data.get("method") or "").upper()
        path = data.get("path")
        if method not in HTTP_METHODS or not isinstance(path, str) or not path:
            raise DescriptorError("Operation needs a known HTTP method and a path", {"method": method, "path": path})

        raw_body = data.get("requestBody", data.get("request_body"))
        raw_security = data.get("security") or []
        return cls(
            method=method,
            path=path,
            parameters=tuple(Parameter.from_mapping(p) for p in data.get("parameters") or [] if isinstance(p, Mapping)),
            request_body=RequestBody.from_mapping(raw_body) if isinstance(raw_body, Mapping) else None,
            responses={str(code): ResponseSpec.from_mapping(_as_mapping(raw)) for code, raw in _as_mapping(data.get("responses")).items()},
            security=tuple(dict(req) for req in raw_security if isinstance(req, Mapping)),
            operation_id=data.get("operationId", data.get("operation_id")),
            summary=data.get("summary"),
        )


@dataclass(frozen=True)
class NormalizedAPI:
    """Version-unified API definition: just the parts the prober consumes."""

    operations: tuple[OperationDescriptor, ...] = ()
    title: str = ""
    version: str = ""
    servers: tuple[str, ...] = ()

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> NormalizedAPI:
        info = _as_mapping(data.get("info"))
        raw_operations = data.get("endpoints", data.get("operations")) or []
        servers = []
        for server in data.get("servers") or []:
            url = server.get("url") if isinstance(server, Mapping) else server
            if isinstance(url, str) and url:
                servers.append(url)
        return cls(
            operations=tuple(OperationDescriptor.from_mapping(op) for op in raw_operations if isinstance(op, Mapping)),
            title=str(info.get("title") or ""),
            version=str(info.get("version") or ""),
            servers=tuple(servers),
        )
