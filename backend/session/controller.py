"""
Typed command interface handed to on_connect listeners.

One async method per catalog verb (protocol.commands.CATALOG), each
building the wire string with the catalog and forwarding it through the
session's send primitive. Every method resolves with the player's trimmed
response text, or raises RequestCancelled if the connection drops first.
"""

from __future__ import annotations

from typing import Awaitable, Callable, Optional, Sequence

from protocol import commands
from protocol.commands import OnOff
from protocol.playlist import PlaylistEntry


SendFn = Callable[[str], Awaitable[str]]
PlaylistGetter = Callable[[], Sequence[PlaylistEntry]]


class RCController:
    """Command proxy bound to exactly one session."""

    def __init__(self, *, send: SendFn, get_playlist: PlaylistGetter) -> None:
        self._send = send
        self._get_playlist = get_playlist

    async def send(self, command: str) -> str:
        """Send a raw command line (without newline)."""
        return await self._send(command)

    def get_playlist(self) -> Sequence[PlaylistEntry]:
        """Latest polled playlist (empty until the first poll completes)."""
        return self._get_playlist()

    # ------------------------------------------------------------------
    # Playlist
    # ------------------------------------------------------------------

    async def add(self, xyz: str) -> str:
        return await self._send(commands.add(xyz))

    async def enqueue(self, xyz: str) -> str:
        return await self._send(commands.enqueue(xyz))

    async def playlist(self) -> str:
        return await self._send(commands.playlist())

    async def search(self, query: Optional[str] = None) -> str:
        return await self._send(commands.search(query))

    async def delete(self, x: int) -> str:
        return await self._send(commands.delete(x))

    async def move(self, x: int, y: int) -> str:
        return await self._send(commands.move(x, y))

    async def sort(self, key: str) -> str:
        return await self._send(commands.sort(key))

    async def sd(self, sd_name: Optional[str] = None) -> str:
        return await self._send(commands.sd(sd_name))

    async def play(self) -> str:
        return await self._send(commands.play())

    async def stop(self) -> str:
        return await self._send(commands.stop())

    async def next(self) -> str:
        return await self._send(commands.next_())

    async def prev(self) -> str:
        return await self._send(commands.prev())

    async def goto(self, index: int) -> str:
        return await self._send(commands.goto(index))

    async def repeat(self, state: Optional[OnOff] = None) -> str:
        return await self._send(commands.repeat(state))

    async def loop(self, state: Optional[OnOff] = None) -> str:
        return await self._send(commands.loop(state))

    async def random(self, state: Optional[OnOff] = None) -> str:
        return await self._send(commands.random(state))

    async def clear(self) -> str:
        return await self._send(commands.clear())

    async def status(self) -> str:
        return await self._send(commands.status())

    # ------------------------------------------------------------------
    # Titles / chapters
    # ------------------------------------------------------------------

    async def title(self, x: Optional[int] = None) -> str:
        return await self._send(commands.title(x))

    async def title_n(self) -> str:
        return await self._send(commands.title_n())

    async def title_p(self) -> str:
        return await self._send(commands.title_p())

    async def chapter(self, x: Optional[int] = None) -> str:
        return await self._send(commands.chapter(x))

    async def chapter_n(self) -> str:
        return await self._send(commands.chapter_n())

    async def chapter_p(self) -> str:
        return await self._send(commands.chapter_p())

    # ------------------------------------------------------------------
    # Playback
    # ------------------------------------------------------------------

    async def seek(self, x: int) -> str:
        return await self._send(commands.seek(x))

    async def pause(self) -> str:
        return await self._send(commands.pause())

    async def fastforward(self) -> str:
        return await self._send(commands.fastforward())

    async def rewind(self) -> str:
        return await self._send(commands.rewind())

    async def faster(self) -> str:
        return await self._send(commands.faster())

    async def slower(self) -> str:
        return await self._send(commands.slower())

    async def normal(self) -> str:
        return await self._send(commands.normal())

    async def rate(self, playback_rate: float) -> str:
        return await self._send(commands.rate(playback_rate))

    async def frame(self) -> str:
        return await self._send(commands.frame())

    async def fullscreen(self, state: Optional[OnOff] = None) -> str:
        return await self._send(commands.fullscreen(state))

    async def info(self, x: Optional[str] = None) -> str:
        return await self._send(commands.info(x))

    async def stats(self) -> str:
        return await self._send(commands.stats())

    async def get_time(self) -> str:
        return await self._send(commands.get_time())

    async def is_playing(self) -> str:
        return await self._send(commands.is_playing())

    async def get_title(self) -> str:
        return await self._send(commands.get_title())

    async def get_length(self) -> str:
        return await self._send(commands.get_length())

    # ------------------------------------------------------------------
    # Audio / video
    # ------------------------------------------------------------------

    async def volume(self, x: Optional[int] = None) -> str:
        return await self._send(commands.volume(x))

    async def volup(self, x: Optional[int] = None) -> str:
        return await self._send(commands.volup(x))

    async def voldown(self, x: Optional[int] = None) -> str:
        return await self._send(commands.voldown(x))

    async def achan(self, x: Optional[str] = None) -> str:
        return await self._send(commands.achan(x))

    async def atrack(self, x: Optional[int] = None) -> str:
        return await self._send(commands.atrack(x))

    async def vtrack(self, x: Optional[int] = None) -> str:
        return await self._send(commands.vtrack(x))

    async def vratio(self, x: Optional[str] = None) -> str:
        return await self._send(commands.vratio(x))

    async def vcrop(self, x: Optional[str] = None) -> str:
        return await self._send(commands.vcrop(x))

    async def vzoom(self, x: Optional[str] = None) -> str:
        return await self._send(commands.vzoom(x))

    async def vdeinterlace(self, x: Optional[str] = None) -> str:
        return await self._send(commands.vdeinterlace(x))

    async def vdeinterlace_mode(self, x: Optional[str] = None) -> str:
        return await self._send(commands.vdeinterlace_mode(x))

    async def snapshot(self) -> str:
        return await self._send(commands.snapshot())

    async def strack(self, x: Optional[int] = None) -> str:
        return await self._send(commands.strack(x))

    # ------------------------------------------------------------------
    # Interface
    # ------------------------------------------------------------------

    async def description(self) -> str:
        return await self._send(commands.description())

    async def help(self, pattern: Optional[str] = None) -> str:
        return await self._send(commands.help_(pattern))

    async def longhelp(self, pattern: Optional[str] = None) -> str:
        return await self._send(commands.longhelp(pattern))

    async def lock(self) -> str:
        return await self._send(commands.lock())

    async def logout(self) -> str:
        return await self._send(commands.logout())

    async def quit(self) -> str:
        return await self._send(commands.quit_())

    async def shutdown(self) -> str:
        return await self._send(commands.shutdown())
