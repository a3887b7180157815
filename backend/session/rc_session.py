"""
RC protocol session (one per TCP connection).

Responsibilities:
- Password handshake (the password is the first command on the wire)
- Pair commands with responses through the single-in-flight pipeline
- Poll the playlist periodically once authenticated
- Hand an RCController to on_connect listeners

Lifecycle:
- Created by ConnectionManager right after the socket opens
- recv() is fed every inbound chunk (one chunk == one response)
- destroy() is called exactly once when the connection ends; nothing in
  here survives a reconnect

Authentication failure is detected by substring only. The connection stays
open, polling never starts and on_connect never fires; on_auth_failed and an
RC_AUTH_FAILED log event are the only signals.
"""

from __future__ import annotations

import asyncio
import time
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Optional

from observability.logger import log_event
from protocol import commands
from protocol.playlist import PlaylistEntry, parse_playlist
from session.controller import RCController
from session.pipeline import RCError, RequestPipeline

from spec import (
    PLAYLIST_UPDATE_INTERVAL_MS_DEFAULT,
    RC_DEFAULT_LABEL,
    RC_WRONG_PASSWORD_MARKER,
)


def _now_ms() -> int:
    return time.time_ns() // 1_000_000


@dataclass(frozen=True)
class RCListeners:
    """
    Host application callbacks.

    on_connect:
        Once per successfully authenticated connection.

    on_disconnect:
        Once per session teardown (authenticated or not).

    on_auth_failed:
        Once when the handshake response reports a wrong password.

    on_playlist:
        After every completed playlist poll, with the fresh entries.
    """
    on_connect: Optional[Callable[[RCController], None]] = None
    on_disconnect: Optional[Callable[[], None]] = None
    on_auth_failed: Optional[Callable[[str], None]] = None
    on_playlist: Optional[Callable[[tuple[PlaylistEntry, ...]], None]] = None


class RCSession:
    """
    Protocol state for exactly one connection.

    Must be constructed inside a running event loop (the handshake is
    written synchronously from __init__, its response awaited in a task).
    """

    def __init__(
        self,
        *,
        send: Callable[[bytes], None],
        password: str,
        listeners: RCListeners | None = None,
        playlist_update_interval_ms: int = PLAYLIST_UPDATE_INTERVAL_MS_DEFAULT,
        label: str = RC_DEFAULT_LABEL,
    ) -> None:
        if playlist_update_interval_ms <= 0:
            raise ValueError("playlist_update_interval_ms must be > 0")

        self._pipeline = RequestPipeline(write=send)
        self._listeners = listeners or RCListeners()
        self._interval_s = playlist_update_interval_ms / 1000.0
        self._label = label

        self._playlist: tuple[PlaylistEntry, ...] = ()
        self._poll_task: asyncio.Task[None] | None = None
        self._destroyed = False

        # None until the handshake response arrives
        self.authenticated: bool | None = None

        self.controller = RCController(send=self.send, get_playlist=self.get_playlist)

        handshake = self._pipeline.submit(password)
        self._handshake_task: asyncio.Task[None] | None = asyncio.get_running_loop().create_task(
            self._authenticate(handshake),
            name=f"rc-handshake-{label}",
        )

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def send(self, command: str) -> Awaitable[str]:
        """
        Queue a command; await the result for the trimmed response.

        The command hits the wire immediately when nothing is in flight.

        Raises:
            SessionClosed after destroy().
        """
        return self._pipeline.submit(command)

    def get_playlist(self) -> tuple[PlaylistEntry, ...]:
        return self._playlist

    @property
    def polling(self) -> bool:
        return self._poll_task is not None and not self._poll_task.done()

    @property
    def destroyed(self) -> bool:
        return self._destroyed

    # ------------------------------------------------------------------
    # TransportSession contract
    # ------------------------------------------------------------------

    def recv(self, data: bytes) -> None:
        if self._destroyed:
            return

        if not self._pipeline.deliver(data):
            log_event({
                "ts_ms": _now_ms(),
                "event_type": "RC_UNSOLICITED_DATA",
                "level": "debug",
                "label": self._label,
                "bytes": len(data),
            })

    def destroy(self) -> None:
        if self._destroyed:
            return
        self._destroyed = True

        for task in (self._poll_task, self._handshake_task):
            if task is not None and not task.done():
                task.cancel()
        self._poll_task = None
        self._handshake_task = None

        cancelled = self._pipeline.close("connection closed")

        log_event({
            "ts_ms": _now_ms(),
            "event_type": "RC_SESSION_DESTROYED",
            "level": "info",
            "label": self._label,
            "authenticated": self.authenticated,
            "cancelled_requests": cancelled,
        })

        self._call_listener("on_disconnect", self._listeners.on_disconnect)

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------

    async def _authenticate(self, handshake: Awaitable[str]) -> None:
        try:
            response = await handshake
        except RCError:
            return

        if RC_WRONG_PASSWORD_MARKER in response:
            self.authenticated = False
            log_event({
                "ts_ms": _now_ms(),
                "event_type": "RC_AUTH_FAILED",
                "level": "error",
                "label": self._label,
            })
            self._call_listener("on_auth_failed", self._listeners.on_auth_failed, response)
            return

        self.authenticated = True
        log_event({
            "ts_ms": _now_ms(),
            "event_type": "RC_AUTHENTICATED",
            "level": "info",
            "label": self._label,
        })

        self._poll_task = asyncio.get_running_loop().create_task(
            self._poll_playlist(),
            name=f"rc-playlist-poll-{self._label}",
        )
        self._call_listener("on_connect", self._listeners.on_connect, self.controller)

    async def _poll_playlist(self) -> None:
        """
        Refresh the cached playlist every interval.

        The poll's own request queues behind any caller request (no
        priority); the next tick is scheduled after the response.
        """
        while True:
            await asyncio.sleep(self._interval_s)

            try:
                response = await self.send(commands.playlist())
            except RCError:
                return

            # swap whole tuple; observers never see a partial update
            self._playlist = tuple(parse_playlist(response))
            self._call_listener("on_playlist", self._listeners.on_playlist, self._playlist)

    def _call_listener(self, name: str, listener: Optional[Callable[..., None]], *args: Any) -> None:
        if listener is None:
            return
        try:
            listener(*args)
        except Exception as exc:  # pylint: disable=broad-exception-caught
            log_event({
                "ts_ms": _now_ms(),
                "event_type": "RC_LISTENER_ERROR",
                "level": "error",
                "label": self._label,
                "listener": name,
                "exception": type(exc).__name__,
                "message": str(exc),
            })
