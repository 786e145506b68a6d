# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Utility exports."""

from .numbers import percentile, round_half_up
from .text import stringify_scalar

__all__ = [
    "percentile",
    "round_half_up",
    "stringify_scalar",
]
