# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Probe orchestration and scoring."""

from .engine import Prober, ProgressCallback
from .evaluation import evaluate_malformation
from .summary import summarize

__all__ = ["Prober", "ProgressCallback", "evaluate_malformation", "summarize"]
