# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Header normalization utilities.

HTTP header field names are case-insensitive (RFC 9110). Probe requests merge headers from
several sources (defaults, settings, synthesized header parameters, credentials) and responses
are reported with lowercase keys, so lookups and removals here ignore case.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping


def normalize_headers(headers: Mapping[object, object] | None) -> dict[str, str]:
    """Return a lowercase-keyed copy of a header mapping."""
    if not headers:
        return {}
    out: dict[str, str] = {}
    for key, value in headers.items():
        if key is None:
            continue
        name = str(key).strip().lower()
        if not name:
            continue
        out[name] = "" if value is None else str(value)
    return out


def header_value(headers: Mapping[str, str] | None, name: str, default: str = "") -> str:
    """Return a header value using case-insensitive key matching."""
    if not headers or not name:
        return default
    lower = name.lower()
    for key, value in headers.items():
        if key is not None and str(key).lower() == lower:
            return default if value is None else str(value).strip()
    return default


def without_headers(headers: Mapping[str, str], names: Iterable[str]) -> dict[str, str]:
    """Return a copy of ``headers`` with every header in ``names`` removed (case-insensitive)."""
    drop = {name.lower() for name in names if name}
    return {key: value for key, value in headers.items() if key.lower() not in drop}


__all__ = ["header_value", "normalize_headers", "without_headers"]
