"""
Bounded connection-duration statistics.

Keeps the durations (ms) of the last N connection attempts and derives a
rolling average. Deterministic and synchronous; the manager feeds it.
"""

from __future__ import annotations

import math
from collections import deque
from typing import Deque

from spec import CONN_STATS_WINDOW, RECONNECT_TARGET_MS


class ConnectionStats:
    """
    Sliding window of connection-attempt durations.

    Invariants:
    - len(self) <= window
    - oldest entry is evicted first
    - average() is the mean of exactly the entries held (NaN when empty)
    """

    def __init__(self, *, window: int = CONN_STATS_WINDOW) -> None:
        if window <= 0:
            raise ValueError("window must be > 0")

        self._durations: Deque[float] = deque(maxlen=window)

    def record(self, duration_ms: float) -> float:
        """Add one attempt duration and return the new average."""
        self._durations.append(max(0.0, duration_ms))
        return self.average()

    def average(self) -> float:
        if not self._durations:
            return math.nan
        return sum(self._durations) / len(self._durations)

    def durations(self) -> tuple[float, ...]:
        """Snapshot, oldest first."""
        return tuple(self._durations)

    def __len__(self) -> int:
        return len(self._durations)


def reconnect_delay_ms(avg_conn_duration_ms: float) -> float:
    """
    Delay before the next connection attempt.

    max(0, RECONNECT_TARGET_MS - average): attempts that fail instantly are
    spaced ~5s apart, connections that lived longer than that reconnect
    immediately. With no data yet (NaN) the full target is used.
    """
    if math.isnan(avg_conn_duration_ms):
        return float(RECONNECT_TARGET_MS)
    return max(0.0, RECONNECT_TARGET_MS - avg_conn_duration_ms)
