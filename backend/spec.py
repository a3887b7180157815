"""
BEHAVIORAL CONSTANTS
--------------------
Single source of truth for all behavioral invariants in the system.

Rules:
- If changing a value changes runtime behavior, it belongs here.
- No magic numbers elsewhere in the codebase.
- Other modules MUST import from this file.
"""

from __future__ import annotations

from typing import Final, Tuple

# =============================================================================
# Connection target
# =============================================================================

# Host values that disable auto-connect (useful for test mocking)
DISABLED_HOSTS: Final[Tuple[str, ...]] = ("", "!")

RC_DEFAULT_PORT: Final[int] = 4212
RC_DEFAULT_LABEL: Final[str] = "vlc"

# =============================================================================
# Reconnect policy
# =============================================================================

# Number of connection-attempt durations kept for the rolling average
CONN_STATS_WINDOW: Final[int] = 6

# Delay before the next attempt is max(0, target - avg_conn_duration_ms).
# An instantly rejected attempt therefore waits ~5s; a long-lived
# connection reconnects immediately.
RECONNECT_TARGET_MS: Final[int] = 5000

# =============================================================================
# Socket
# =============================================================================

TCP_NODELAY: Final[bool] = True
TCP_KEEPALIVE: Final[bool] = True

# One read delivery == one complete response (no framing on the wire)
RC_READ_CHUNK_BYTES: Final[int] = 65_536

# =============================================================================
# RC wire format
# =============================================================================

RC_ENCODING: Final[str] = "utf-8"
RC_COMMAND_TERMINATOR: Final[str] = "\n"

# Substring of the handshake response that marks a rejected password
RC_WRONG_PASSWORD_MARKER: Final[str] = "Wrong password"

# =============================================================================
# Playlist polling
# =============================================================================

PLAYLIST_UPDATE_INTERVAL_MS_DEFAULT: Final[int] = 200

PLAYLIST_HEADER_PREFIX: Final[str] = "+----[ Playlist - "

SECONDS_PER_HOUR: Final[int] = 3600
SECONDS_PER_MINUTE: Final[int] = 60

# =============================================================================
# HTTP surface
# =============================================================================

HTTP_COMMAND_TIMEOUT_S: Final[float] = 5.0
