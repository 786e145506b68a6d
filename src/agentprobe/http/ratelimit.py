# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""
Global request pacing.

One RateLimiter is shared by every send of a probe run. Pacing is a read-modify-write of the
last request timestamp; the lock keeps it single-writer even if sends are ever issued from
more than one thread.
"""

from __future__ import annotations

import threading
import time


class RateLimiter:
    """Enforce a minimum interval of ``1 / requests_per_second`` seconds between sends."""

    def __init__(self, requests_per_second: float | None = None):
        if requests_per_second and requests_per_second > 0:
            self.min_interval = 1.0 / requests_per_second
        else:
            self.min_interval = 0.0
        self._last_request: float | None = None
        self._lock = threading.Lock()

    @property
    def enabled(self) -> bool:
        return self.min_interval > 0

    def acquire(self) -> float:
        """Block until the next send is allowed; returns the seconds spent waiting."""
        if not self.enabled:
            return 0.0
        with self._lock:
            waited = 0.0
            if self._last_request is not None:
                elapsed = time.monotonic() - self._last_request
                if elapsed < self.min_interval:
                    waited = self.min_interval - elapsed
                    time.sleep(waited)
            self._last_request = time.monotonic()
            return waited

    def reset(self) -> None:
        with self._lock:
            self._last_request = None
