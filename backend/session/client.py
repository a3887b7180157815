"""
RC client facade.

Binds a ConnectionManager to an RCSession factory configured with the
password, listeners and playlist poll interval. This is the object host
applications construct and keep for the process lifetime; sessions come
and go underneath it with every reconnect.

Usage:

    async def main() -> None:
        def on_connect(vlc: RCController) -> None:
            asyncio.create_task(vlc.goto(3))

        client = RCClient("localhost", 4212, "secret",
                          RCListeners(on_connect=on_connect))
        ...
        await client.shutdown()
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Callable

from protocol.playlist import PlaylistEntry
from session.controller import RCController
from session.rc_session import RCListeners, RCSession
from transport.connection_status import ConnectionDetail, ConnectionState
from transport.events import ConnectionListener
from transport.manager import ConnectionManager, SendCallback

from spec import PLAYLIST_UPDATE_INTERVAL_MS_DEFAULT, RC_DEFAULT_LABEL

if TYPE_CHECKING:
    from config import AppConfig


class RCClient:
    """
    Self-healing RC connection with a typed command interface.

    Must be constructed inside a running event loop.
    """

    def __init__(
        self,
        host: str,
        port: int,
        password: str,
        listeners: RCListeners | None = None,
        playlist_update_interval_ms: int = PLAYLIST_UPDATE_INTERVAL_MS_DEFAULT,
        *,
        label: str = RC_DEFAULT_LABEL,
        verbose: bool = True,
    ) -> None:
        if playlist_update_interval_ms <= 0:
            raise ValueError("playlist_update_interval_ms must be > 0")

        self.password = password
        self.listeners = listeners or RCListeners()
        self.playlist_update_interval_ms = playlist_update_interval_ms
        self._label = label

        self._session: RCSession | None = None
        self._controller: RCController | None = None

        # write hook of the current connection (None between connections)
        self.send_fn: SendCallback | None = None

        self._manager = ConnectionManager(
            host=host,
            port=port,
            session_factory=self._create_session,
            label=label,
            verbose=verbose,
        )

    @classmethod
    def from_config(cls, config: AppConfig, listeners: RCListeners | None = None) -> RCClient:
        return cls(
            config.rc_host,
            config.rc_port,
            config.rc_password,
            listeners,
            config.playlist_update_interval_ms,
            label=config.rc_label,
            verbose=config.rc_verbose,
        )

    # ------------------------------------------------------------------
    # Observable outputs
    # ------------------------------------------------------------------

    @property
    def manager(self) -> ConnectionManager:
        return self._manager

    @property
    def state(self) -> ConnectionState:
        return self._manager.state

    @property
    def detail(self) -> ConnectionDetail:
        return self._manager.detail

    @property
    def avg_conn_duration_ms(self) -> float:
        return self._manager.avg_conn_duration_ms

    @property
    def controller(self) -> RCController | None:
        """Controller of the current authenticated session, else None."""
        return self._controller

    @property
    def playlist(self) -> tuple[PlaylistEntry, ...]:
        if self._session is None:
            return ()
        return self._session.get_playlist()

    def subscribe(self, listener: ConnectionListener) -> Callable[[], None]:
        return self._manager.subscribe(listener)

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def redirect(self, host: str, port: int) -> None:
        self._manager.redirect(host, port)

    def close(self) -> None:
        self._manager.close()

    async def shutdown(self) -> None:
        await self._manager.shutdown()

    # ------------------------------------------------------------------
    # Session factory
    # ------------------------------------------------------------------

    def _create_session(self, send: SendCallback) -> RCSession:
        user = self.listeners

        def _on_connect(controller: RCController) -> None:
            self._controller = controller
            if user.on_connect is not None:
                user.on_connect(controller)

        def _on_disconnect() -> None:
            if self._session is session:
                self._session = None
                self._controller = None
                self.send_fn = None
            if user.on_disconnect is not None:
                user.on_disconnect()

        session = RCSession(
            send=send,
            password=self.password,
            listeners=RCListeners(
                on_connect=_on_connect,
                on_disconnect=_on_disconnect,
                on_auth_failed=user.on_auth_failed,
                on_playlist=user.on_playlist,
            ),
            playlist_update_interval_ms=self.playlist_update_interval_ms,
            label=self._label,
        )

        self._session = session
        self.send_fn = send
        return session
