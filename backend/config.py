"""
Application configuration.

Responsibilities:
- Load deployment-specific configuration
- Read environment variables
- Provide a typed, immutable config object

Non-responsibilities:
- No connection logic
- No protocol constants (see spec.py)
- No runtime mutation
"""

from __future__ import annotations

import os
from dataclasses import dataclass

from spec import (
    PLAYLIST_UPDATE_INTERVAL_MS_DEFAULT,
    RC_DEFAULT_LABEL,
    RC_DEFAULT_PORT,
)


def _env_flag(name: str, default: str) -> bool:
    return os.environ.get(name, default) == "1"


@dataclass(frozen=True)
class AppConfig:
    """
    Immutable application configuration.

    Constructed once at process startup.
    Passed downward to the RC client and the HTTP surface.
    """

    # ------------------------------------------------------------------
    # Environment
    # ------------------------------------------------------------------

    env: str
    log_level: str

    # ------------------------------------------------------------------
    # RC connection
    # ------------------------------------------------------------------

    rc_host: str
    rc_port: int
    rc_password: str
    rc_label: str
    rc_verbose: bool

    playlist_update_interval_ms: int

    # ------------------------------------------------------------------
    # Observability
    # ------------------------------------------------------------------

    enable_json_logs: bool

    # ------------------------------------------------------------------
    # HTTP
    # ------------------------------------------------------------------

    http_host: str
    http_port: int

    # ------------------------------------------------------------------
    # Factory
    # ------------------------------------------------------------------

    @staticmethod
    def load_from_env() -> AppConfig:
        """
        Load configuration from environment variables.

        Raises:
            ValueError if a numeric variable is not an integer, or the
            playlist poll interval is not positive.
        """
        playlist_update_interval_ms = int(
            os.environ.get(
                "PLAYLIST_UPDATE_INTERVAL_MS",
                str(PLAYLIST_UPDATE_INTERVAL_MS_DEFAULT),
            )
        )
        if playlist_update_interval_ms <= 0:
            raise ValueError("PLAYLIST_UPDATE_INTERVAL_MS must be > 0")

        return AppConfig(
            env=os.environ.get("ENV", "dev"),
            log_level=os.environ.get("LOG_LEVEL", "INFO"),

            # "!" disables auto-connect (see spec.DISABLED_HOSTS)
            rc_host=os.environ.get("RC_HOST", "localhost"),
            rc_port=int(os.environ.get("RC_PORT", str(RC_DEFAULT_PORT))),
            rc_password=os.environ.get("RC_PASSWORD", ""),
            rc_label=os.environ.get("RC_LABEL", RC_DEFAULT_LABEL),
            rc_verbose=_env_flag("RC_VERBOSE", "1"),
            playlist_update_interval_ms=playlist_update_interval_ms,

            enable_json_logs=_env_flag("ENABLE_JSON_LOGS", "1"),

            http_host=os.environ.get("HTTP_HOST", "0.0.0.0"),
            http_port=int(os.environ.get("HTTP_PORT", "8000")),
        )
