"""
Connection status tracking for the RC transport.

connection state: DISCONNECTED | CONNECTING | CONNECTED
connection detail: why the last transition happened

Pure data owned by ConnectionManager. Protocol state lives in the session.
"""
from __future__ import annotations

from enum import Enum


class ConnectionState(str, Enum):
    """
    Connection lifecycle state.

    Allowed transitions:
        DISCONNECTED -> CONNECTING -> CONNECTED | DISCONNECTED
        CONNECTED -> DISCONNECTED
    """
    DISCONNECTED = "DISCONNECTED"
    CONNECTING = "CONNECTING"  # TCP connect in progress
    CONNECTED = "CONNECTED"    # Socket open, session attached


class ConnectionDetail(str, Enum):
    """
    Classification of the last connection outcome.

    NONE covers both "no error" and a graceful abort (including our own
    close()/redirect()).
    """
    NONE = "NONE"
    UNKNOWN = "UNKNOWN"
    CONN_RESET = "CONN_RESET"
    CONN_REFUSED = "CONN_REFUSED"
    TIMED_OUT = "TIMED_OUT"
    INTERRUPTED = "INTERRUPTED"
