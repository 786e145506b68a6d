# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Numeric helpers shared by synthesis and scoring."""

from __future__ import annotations

import math
from collections.abc import Sequence


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves towards +inf (builtin ``round`` uses banker's rounding)."""
    return int(math.floor(value + 0.5))


def percentile(values: Sequence[float], fraction: float) -> float:
    """Nearest-rank percentile: ``sorted(values)[floor(n * fraction)]`` clamped to the last item."""
    if not values:
        return 0.0
    ordered = sorted(values)
    index = min(int(math.floor(len(ordered) * fraction)), len(ordered) - 1)
    return ordered[index]
