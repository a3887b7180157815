"""
JSONL event logger.

- Write one JSON object per line
- Output to stdout
- No buffering, no batching
- No side effects beyond logging

Events carry an optional "level" field (debug/info/warning/error/fatal).
Events without one are treated as info.
"""

from __future__ import annotations

import json
import sys
from typing import Any, Mapping, Callable


_LEVELS: dict[str, int] = {
    "debug": 10,
    "info": 20,
    "warning": 30,
    "error": 40,
    "fatal": 50,
}


# ------------------------------------------------------------------
# Explicit output sink (patchable in tests)
# ------------------------------------------------------------------

def _stdout_print(line: str) -> None:
    sys.stdout.write(line + "\n")
    sys.stdout.flush()

_print: Callable[[str], None] = _stdout_print

_min_level: int = _LEVELS["debug"]
_json_lines: bool = True


def configure(*, level: str = "debug", json_lines: bool = True) -> None:
    """
    Set the minimum emitted level and the output format.

    Called once at startup from AppConfig (LOG_LEVEL, ENABLE_JSON_LOGS).
    Unknown level names fall back to debug.
    """
    global _min_level, _json_lines  # pylint: disable=global-statement
    _min_level = _LEVELS.get(level.lower(), _LEVELS["debug"])
    _json_lines = json_lines


def _format_plain(event: Mapping[str, Any]) -> str:
    head = f"{event.get('level', 'info').upper()} {event.get('event_type', '-')}"
    rest = " ".join(
        f"{k}={v}" for k, v in event.items()
        if k not in ("level", "event_type")
    )
    return f"{head} {rest}".rstrip()


def log_event(event: Mapping[str, Any]) -> None:
    """
    Write a single JSONL event to stdout.

    The caller is responsible for:
    - Supplying a fully-formed event dict
    - Including ts_ms, event_type, level, label, etc.

    This function:
    - Drops events below the configured level
    - Serializes to JSON
    - Writes exactly one line
    - Flushes immediately (no buffering)
    - Never raises
    """
    level = _LEVELS.get(str(event.get("level", "info")).lower(), _LEVELS["info"])
    if level < _min_level:
        return

    if not _json_lines:
        _print(_format_plain(event))
        return

    try:
        line = json.dumps(event, ensure_ascii=False, separators=(",", ":"))
    except (TypeError, ValueError) as e:
        # Last-resort fallback: logging must never crash the runtime
        fallback: dict[str, Any] = {
            "ts_ms": event.get("ts_ms"),
            "event_type": "LOGGER_SERIALIZATION_ERROR",
            "level": "error",
            "error": str(e),
            "original_event_repr": repr(event),
        }
        line = json.dumps(fallback, ensure_ascii=False, separators=(",", ":"))

    _print(line)
