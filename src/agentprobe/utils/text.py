# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Text helpers."""

from __future__ import annotations

import json
from typing import Any


def stringify_scalar(value: Any) -> str:
    """
    Render a synthesized value for a URL path, query string or header.

    Uses JSON spelling for booleans/null and drops the ``.0`` of integral floats so that
    ``True`` becomes ``true`` and ``50.0`` becomes ``50``.
    """
    if isinstance(value, bool):
        return "true" if value else "false"
    if value is None:
        return "null"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    if isinstance(value, (dict, list)):
        return json.dumps(value, separators=(",", ":"))
    return str(value)
