"""
RC command catalog.

Pure builders: verb + arguments -> wire command string (without the
trailing newline, which the session appends).

Rules:
- No state, no IO.
- Optional arguments are omitted when None or the empty string; other
  falsy values such as 0 are still sent ("volume 0" sets the volume,
  "volume" queries it).
- Builders whose verb shadows a Python builtin carry a trailing underscore;
  CATALOG maps the wire verb to its builder.
"""

from __future__ import annotations

from typing import Callable, Final, Literal, Optional

OnOff = Literal["on", "off"]


def _with_optional(verb: str, arg: object | None) -> str:
    if arg is None or arg == "":
        return verb
    return f"{verb} {arg}"


# -----------------------------------------------------------------------------
# Playlist
# -----------------------------------------------------------------------------

def add(xyz: str) -> str:
    """Add XYZ to the playlist. Syntax: add XYZ"""
    return f"add {xyz}"


def enqueue(xyz: str) -> str:
    """Queue XYZ to the playlist. Syntax: enqueue XYZ"""
    return f"enqueue {xyz}"


def playlist() -> str:
    """Show items currently in the playlist."""
    return "playlist"


def search(query: Optional[str] = None) -> str:
    """Search for items in the playlist (or reset the search)."""
    return _with_optional("search", query)


def delete(x: int) -> str:
    """Delete item X in the playlist."""
    return f"delete {x}"


def move(x: int, y: int) -> str:
    """Move item X in the playlist after Y."""
    return f"move {x} {y}"


def sort(key: str) -> str:
    """Sort the playlist."""
    return f"sort {key}"


def sd(sd_name: Optional[str] = None) -> str:
    """Show services discovery or toggle."""
    return _with_optional("sd", sd_name)


def play() -> str:
    return "play"


def stop() -> str:
    return "stop"


def next_() -> str:
    """Next playlist item."""
    return "next"


def prev() -> str:
    """Previous playlist item."""
    return "prev"


def goto(index: int) -> str:
    """Go to the playlist item with the given id."""
    return f"goto {index}"


def repeat(state: Optional[OnOff] = None) -> str:
    """Toggle playlist repeat."""
    return _with_optional("repeat", state)


def loop(state: Optional[OnOff] = None) -> str:
    """Toggle playlist loop."""
    return _with_optional("loop", state)


def random(state: Optional[OnOff] = None) -> str:
    """Toggle playlist random."""
    return _with_optional("random", state)


def clear() -> str:
    return "clear"


def status() -> str:
    """Current playlist status."""
    return "status"


# -----------------------------------------------------------------------------
# Titles / chapters
# -----------------------------------------------------------------------------

def title(x: Optional[int] = None) -> str:
    """Set/get title in the current item."""
    return _with_optional("title", x)


def title_n() -> str:
    return "title_n"


def title_p() -> str:
    return "title_p"


def chapter(x: Optional[int] = None) -> str:
    """Set/get chapter in the current item."""
    return _with_optional("chapter", x)


def chapter_n() -> str:
    return "chapter_n"


def chapter_p() -> str:
    return "chapter_p"


# -----------------------------------------------------------------------------
# Playback
# -----------------------------------------------------------------------------

def seek(x: int) -> str:
    """Seek in seconds."""
    return f"seek {x}"


def pause() -> str:
    """Toggle pause."""
    return "pause"


def fastforward() -> str:
    """Set to maximum rate."""
    return "fastforward"


def rewind() -> str:
    """Set to minimum rate."""
    return "rewind"


def faster() -> str:
    return "faster"


def slower() -> str:
    return "slower"


def normal() -> str:
    return "normal"


def rate(playback_rate: float) -> str:
    """Set playback rate to value."""
    return f"rate {playback_rate}"


def frame() -> str:
    """Play frame by frame."""
    return "frame"


def fullscreen(state: Optional[OnOff] = None) -> str:
    """Toggle fullscreen."""
    return _with_optional("fullscreen", state)


def info(x: Optional[str] = None) -> str:
    """Information about the current stream (or specified id)."""
    return _with_optional("info", x)


def stats() -> str:
    """Show statistical information."""
    return "stats"


def get_time() -> str:
    """Seconds elapsed since the stream's beginning."""
    return "get_time"


def is_playing() -> str:
    """1 if a stream plays, 0 otherwise."""
    return "is_playing"


def get_title() -> str:
    return "get_title"


def get_length() -> str:
    return "get_length"


# -----------------------------------------------------------------------------
# Audio / video
# -----------------------------------------------------------------------------

def volume(x: Optional[int] = None) -> str:
    """Set/get audio volume."""
    return _with_optional("volume", x)


def volup(x: Optional[int] = None) -> str:
    """Raise audio volume X steps."""
    return _with_optional("volup", x)


def voldown(x: Optional[int] = None) -> str:
    """Lower audio volume X steps."""
    return _with_optional("voldown", x)


def achan(x: Optional[str] = None) -> str:
    """Set/get stereo audio output mode."""
    return _with_optional("achan", x)


def atrack(x: Optional[int] = None) -> str:
    """Set/get audio track."""
    return _with_optional("atrack", x)


def vtrack(x: Optional[int] = None) -> str:
    """Set/get video track."""
    return _with_optional("vtrack", x)


def vratio(x: Optional[str] = None) -> str:
    """Set/get video aspect ratio."""
    return _with_optional("vratio", x)


def vcrop(x: Optional[str] = None) -> str:
    """Set/get video crop."""
    return _with_optional("vcrop", x)


def vzoom(x: Optional[str] = None) -> str:
    """Set/get video zoom."""
    return _with_optional("vzoom", x)


def vdeinterlace(x: Optional[str] = None) -> str:
    return _with_optional("vdeinterlace", x)


def vdeinterlace_mode(x: Optional[str] = None) -> str:
    return _with_optional("vdeinterlace_mode", x)


def snapshot() -> str:
    """Take video snapshot."""
    return "snapshot"


def strack(x: Optional[int] = None) -> str:
    """Set/get subtitle track."""
    return _with_optional("strack", x)


# -----------------------------------------------------------------------------
# Interface
# -----------------------------------------------------------------------------

def description() -> str:
    """Describe this module."""
    return "description"


def help_(pattern: Optional[str] = None) -> str:
    """A help message."""
    return _with_optional("help", pattern)


def longhelp(pattern: Optional[str] = None) -> str:
    """A longer help message."""
    return _with_optional("longhelp", pattern)


def lock() -> str:
    """Lock the telnet prompt."""
    return "lock"


def logout() -> str:
    """Exit (if in a socket connection)."""
    return "logout"


def quit_() -> str:
    """Quit the player (or logout if in a socket connection)."""
    return "quit"


def shutdown() -> str:
    """Shut the player down."""
    return "shutdown"


# -----------------------------------------------------------------------------
# Catalog
# -----------------------------------------------------------------------------

CATALOG: Final[dict[str, Callable[..., str]]] = {
    "add": add,
    "enqueue": enqueue,
    "playlist": playlist,
    "search": search,
    "delete": delete,
    "move": move,
    "sort": sort,
    "sd": sd,
    "play": play,
    "stop": stop,
    "next": next_,
    "prev": prev,
    "goto": goto,
    "repeat": repeat,
    "loop": loop,
    "random": random,
    "clear": clear,
    "status": status,
    "title": title,
    "title_n": title_n,
    "title_p": title_p,
    "chapter": chapter,
    "chapter_n": chapter_n,
    "chapter_p": chapter_p,
    "seek": seek,
    "pause": pause,
    "fastforward": fastforward,
    "rewind": rewind,
    "faster": faster,
    "slower": slower,
    "normal": normal,
    "rate": rate,
    "frame": frame,
    "fullscreen": fullscreen,
    "info": info,
    "stats": stats,
    "get_time": get_time,
    "is_playing": is_playing,
    "get_title": get_title,
    "get_length": get_length,
    "volume": volume,
    "volup": volup,
    "voldown": voldown,
    "achan": achan,
    "atrack": atrack,
    "vtrack": vtrack,
    "vratio": vratio,
    "vcrop": vcrop,
    "vzoom": vzoom,
    "vdeinterlace": vdeinterlace,
    "vdeinterlace_mode": vdeinterlace_mode,
    "snapshot": snapshot,
    "strack": strack,
    "description": description,
    "help": help_,
    "longhelp": longhelp,
    "lock": lock,
    "logout": logout,
    "quit": quit_,
    "shutdown": shutdown,
}


def build(verb: str, *args: object) -> str:
    """
    Build the wire string for a catalog verb.

    Raises:
        UnknownCommand if the verb is not in the catalog.
        TypeError if the arguments do not fit the builder.
    """
    builder = CATALOG.get(verb)
    if builder is None:
        raise UnknownCommand(verb)
    return builder(*args)


class UnknownCommand(KeyError):
    """Raised when a verb is not part of the RC command catalog."""
