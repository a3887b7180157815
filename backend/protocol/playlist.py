"""
Playlist dump parser.

Turns the response to the `playlist` command into typed entries:

    +----[ Playlist - playlist ]
    | 1 - Playlist
    |   4 - SongA (00:03:45)
    |  *5 - SongB (00:02:10) [played 3 times]
    | 2 - Media Library
    +----[ End of playlist ]

Rules:
- Everything before the header line is ignored.
- Inside the block, lines are skipped until the first entry line.
- The first non-entry line after entries have started ends the block.
- Entry order is preserved.
- Never raises on malformed input; unmatched lines are skipped.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

from spec import (
    PLAYLIST_HEADER_PREFIX,
    SECONDS_PER_HOUR,
    SECONDS_PER_MINUTE,
)


@dataclass(frozen=True)
class PlaylistEntry:
    """
    One playlist item.

    id:
        Player-assigned item id (use with `goto`).

    length:
        Duration in whole seconds, 0 when the dump carries no duration.

    current:
        True for the item marked with `*` (currently playing).
    """
    id: int
    name: str
    length: int
    current: bool


# "|" + three marker/indent characters + id + " - " + rest.
# Top-level nodes ("| 1 - Playlist") and nested children ("|     7 - x")
# do not match.
_ENTRY_RE = re.compile(r"^\|(?P<lead>[ *]{3})(?P<id>\d+) - (?P<rest>.*)$")

_ANNOTATIONS_RE = re.compile(
    r"^(?P<name>.*?)"
    r"(?: \((?P<h>\d+):(?P<m>\d{2}):(?P<s>\d{2})\))?"
    r"(?: \[played \d+ times?\])?$"
)


def duration_to_seconds(hours: int, minutes: int, seconds: int) -> int:
    return hours * SECONDS_PER_HOUR + minutes * SECONDS_PER_MINUTE + seconds


def parse_entry(line: str) -> PlaylistEntry | None:
    """Parse a single entry line, or return None if it is not one."""
    match = _ENTRY_RE.match(line)
    if match is None:
        return None

    rest = match.group("rest").strip()
    annotated = _ANNOTATIONS_RE.match(rest)
    # _ANNOTATIONS_RE matches any string; the guard keeps type checkers quiet
    if annotated is None:
        return None

    if annotated.group("h") is not None:
        length = duration_to_seconds(
            int(annotated.group("h")),
            int(annotated.group("m")),
            int(annotated.group("s")),
        )
    else:
        length = 0

    return PlaylistEntry(
        id=int(match.group("id")),
        name=annotated.group("name").strip(),
        length=length,
        current="*" in match.group("lead"),
    )


def parse_playlist(text: str) -> list[PlaylistEntry]:
    """
    Parse a full playlist dump.

    Returns an empty list when the header is missing or the block holds
    no entries.
    """
    entries: list[PlaylistEntry] = []
    in_block = False
    started = False

    for raw in text.split("\n"):
        line = raw.replace("\r", "")

        if not in_block:
            if line.startswith(PLAYLIST_HEADER_PREFIX):
                in_block = True
            continue

        entry = parse_entry(line)
        if entry is None:
            if started:
                break
            continue

        started = True
        entries.append(entry)

    return entries
