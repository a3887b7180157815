"""
Connection state-change events.

ConnectionManager pushes one ConnectionEvent to every subscriber whenever
its state, detail or average connection duration changes. Events carry
data only (no behavior).
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any, Callable

from transport.connection_status import ConnectionDetail, ConnectionState


@dataclass(frozen=True)
class ConnectionEvent:
    """
    Immutable snapshot of the manager's observable outputs.

    avg_conn_duration_ms:
        Rolling average of the last attempts, NaN until the first attempt
        has finished.
    """
    ts_ms: int
    label: str
    state: ConnectionState
    detail: ConnectionDetail
    avg_conn_duration_ms: float

    def as_dict(self) -> dict[str, Any]:
        avg = self.avg_conn_duration_ms
        return {
            "ts_ms": self.ts_ms,
            "label": self.label,
            "state": self.state.value,
            "detail": self.detail.value,
            # JSON has no NaN
            "avg_conn_duration_ms": None if math.isnan(avg) else round(avg, 3),
        }


ConnectionListener = Callable[[ConnectionEvent], None]
