# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Credential assembly. This is the only place auth material is attached to a request."""

from __future__ import annotations

import base64

from ..config import DEFAULT_API_KEY_NAME, AuthConfig
from .headers import without_headers


def auth_header_names(auth: AuthConfig | None) -> set[str]:
    """Header names that may carry credentials for the given config."""
    names = {"Authorization"}
    if auth is not None and auth.type == "api_key":
        names.add(auth.api_key_name or DEFAULT_API_KEY_NAME)
    return names


def apply_auth(
    headers: dict[str, str],
    params: dict[str, str],
    auth: AuthConfig | None,
) -> None:
    """Attach credentials to ``headers``/``params`` in place (callers pass their own copies)."""
    if auth is None:
        return

    if auth.type == "bearer":
        if auth.token:
            headers["Authorization"] = f"Bearer {auth.token}"
    elif auth.type == "api_key":
        if auth.api_key:
            name = auth.api_key_name or DEFAULT_API_KEY_NAME
            if auth.api_key_in == "query":
                params[name] = auth.api_key
            else:
                headers[name] = auth.api_key
    elif auth.type == "basic":
        if auth.username and auth.password:
            credentials = base64.b64encode(f"{auth.username}:{auth.password}".encode()).decode("ascii")
            headers["Authorization"] = f"Basic {credentials}"


def strip_auth(
    headers: dict[str, str],
    params: dict[str, str],
    auth: AuthConfig | None,
) -> tuple[dict[str, str], dict[str, str]]:
    """Remove any credential-bearing header or query parameter supplied by default settings."""
    stripped_headers = without_headers(headers, auth_header_names(auth))
    stripped_params = dict(params)
    if auth is not None and auth.type == "api_key" and auth.api_key_in == "query":
        stripped_params.pop(auth.api_key_name or DEFAULT_API_KEY_NAME, None)
    return stripped_headers, stripped_params


__all__ = ["apply_auth", "auth_header_names", "strip_auth"]
