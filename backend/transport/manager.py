"""
Connection manager for the RC transport.

Responsibilities:
- Own the TCP socket and the reconnect loop
- Track connection state / detail independently of protocol state
- Classify socket failures (never fatal, always retried)
- Keep bounded connection-duration statistics
- Build a fresh session per connection attempt and pump inbound bytes
  into it
- Push ConnectionEvents to subscribers

Non-responsibilities:
- Any protocol logic (handshake, request pairing, parsing)
- Delivery guarantees across reconnects

Loop (one task, strictly sequential):

    connect -> session = factory(write) -> session.recv(chunk)* ->
    EOF / error -> classify -> record duration -> session.destroy() ->
    wait max(0, 5000 - avg) -> repeat
"""

from __future__ import annotations

import asyncio
import math
import socket
import time
from typing import Callable, Protocol

from observability.logger import log_event
from observability.metrics import start_timer, stop_timer
from transport.connection_status import ConnectionDetail, ConnectionState
from transport.errors import classify_error, common_detail
from transport.events import ConnectionEvent, ConnectionListener
from transport.stats import ConnectionStats, reconnect_delay_ms

from spec import (
    DISABLED_HOSTS,
    RC_READ_CHUNK_BYTES,
    TCP_KEEPALIVE,
    TCP_NODELAY,
)


# ------------------------------------------------------------------
# Session contract
# ------------------------------------------------------------------

SendCallback = Callable[[bytes], None]


class TransportSession(Protocol):
    """
    One session == one connection attempt.

    Protocol state machines live here so they are reset for every
    connection.
    """

    def recv(self, data: bytes) -> None: ...

    def destroy(self) -> None: ...


SessionFactory = Callable[[SendCallback], TransportSession]


# ------------------------------------------------------------------
# Helpers
# ------------------------------------------------------------------

def _now_ms() -> int:
    return time.time_ns() // 1_000_000


def host_enabled(host: str) -> bool:
    return host not in DISABLED_HOSTS


def _configure_socket(writer: asyncio.StreamWriter) -> None:
    sock = writer.get_extra_info("socket")
    if sock is None:
        return
    # Low latency + dead-peer detection suit control traffic
    if TCP_NODELAY:
        sock.setsockopt(socket.IPPROTO_TCP, socket.TCP_NODELAY, 1)
    if TCP_KEEPALIVE:
        sock.setsockopt(socket.SOL_SOCKET, socket.SO_KEEPALIVE, 1)


async def open_stream(host: str, port: int) -> tuple[asyncio.StreamReader, asyncio.StreamWriter]:
    """
    asyncio.open_connection, tried one resolved address at a time.

    When every address fails, the first failure is re-raised if they all
    classify alike (e.g. ::1 and 127.0.0.1 both refused), otherwise an
    OSError without errno (UNKNOWN) listing them.
    """
    loop = asyncio.get_running_loop()
    infos = await loop.getaddrinfo(host, port, type=socket.SOCK_STREAM)

    failures: list[OSError] = []
    for family, _, _, _, sockaddr in infos:
        try:
            return await asyncio.open_connection(sockaddr[0], sockaddr[1], family=family)
        except OSError as exc:
            failures.append(exc)

    if not failures:
        raise OSError(f"no addresses for {host}:{port}")
    if len(failures) == 1 or common_detail(failures) is not ConnectionDetail.UNKNOWN:
        raise failures[0]
    raise OSError("Multiple exceptions: " + ", ".join(str(e) for e in failures))


# ------------------------------------------------------------------
# ConnectionManager
# ------------------------------------------------------------------

class ConnectionManager:
    """
    Keeps a logical always-on connection to host:port.

    Must be constructed inside a running event loop: the reconnect loop is
    started immediately unless the host is disabled ("" or "!").

    Guarantees:
    - At most one connection attempt runs at a time
    - No session outlives its connection
    - Writes aimed at a superseded connection are logged, never raised
    """

    def __init__(
        self,
        *,
        host: str,
        port: int,
        session_factory: SessionFactory,
        label: str | None = None,
        verbose: bool = True,
    ) -> None:
        self._host = host
        self._port = port
        self._session_factory = session_factory
        self._label = label or f"{host}:{port}"

        # enables info logs and classified-error logs
        self.verbose = verbose

        self._closed = False
        self._state = ConnectionState.DISCONNECTED
        self._detail = ConnectionDetail.NONE
        self._stats = ConnectionStats()
        self._avg_conn_duration_ms = math.nan

        self._listeners: list[ConnectionListener] = []

        self._writer: asyncio.StreamWriter | None = None
        # Bumped by redirect()/close(); an attempt whose generation is stale
        # must not become the current connection.
        self._generation = 0
        self._wake = asyncio.Event()
        self._task: asyncio.Task[None] | None = None
        # TCP connect of the running attempt; cancelled by redirect()/close()
        self._connect_task: asyncio.Task[tuple[asyncio.StreamReader, asyncio.StreamWriter]] | None = None

        if host_enabled(host):
            self._ensure_running()

    # ------------------------------------------------------------------
    # Observable outputs (read-only)
    # ------------------------------------------------------------------

    @property
    def state(self) -> ConnectionState:
        return self._state

    @property
    def detail(self) -> ConnectionDetail:
        return self._detail

    @property
    def avg_conn_duration_ms(self) -> float:
        """Rolling average of the last attempt durations (NaN before the first)."""
        return self._avg_conn_duration_ms

    @property
    def stats(self) -> tuple[float, ...]:
        return self._stats.durations()

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def host(self) -> str:
        return self._host

    @property
    def port(self) -> int:
        return self._port

    @property
    def label(self) -> str:
        return self._label

    def snapshot(self) -> ConnectionEvent:
        return ConnectionEvent(
            ts_ms=_now_ms(),
            label=self._label,
            state=self._state,
            detail=self._detail,
            avg_conn_duration_ms=self._avg_conn_duration_ms,
        )

    def subscribe(self, listener: ConnectionListener) -> Callable[[], None]:
        """
        Register a listener for ConnectionEvents.

        Returns a function that removes the listener again.
        """
        self._listeners.append(listener)

        def _unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _unsubscribe

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def redirect(self, host: str, port: int) -> None:
        """
        Switch to a new target.

        The active socket (if any) is closed and a pending connect is
        cancelled, which drives the current attempt through its normal
        cleanup. The loop is (re)started when
        it is not running, e.g. after close() or a disabled host.
        """
        self._host = host
        self._port = port
        self._generation += 1
        self._drop_current()
        self._cancel_connect()
        self._closed = False
        self._set_status(ConnectionState.DISCONNECTED, ConnectionDetail.NONE)

        self._log("RC_REDIRECT", host=host, port=port)

        self._wake.set()
        if host_enabled(host):
            self._ensure_running()

    def close(self) -> None:
        """Close the active socket and stop reconnecting."""
        self._generation += 1
        self._drop_current()
        self._cancel_connect()
        self._closed = True
        self._set_status(ConnectionState.DISCONNECTED, ConnectionDetail.NONE)
        self._wake.set()

    async def shutdown(self) -> None:
        """close() and wait until the loop task has finished."""
        self.close()
        task = self._task
        if task is None or task.done():
            return

        task.cancel()
        try:
            await task
        except asyncio.CancelledError:
            pass

    # ------------------------------------------------------------------
    # Loop
    # ------------------------------------------------------------------

    def _ensure_running(self) -> None:
        if self._task is not None and not self._task.done():
            return
        self._task = asyncio.get_running_loop().create_task(
            self._run(),
            name=f"rc-connection-{self._label}",
        )

    async def _run(self) -> None:
        while not self._closed and host_enabled(self._host):
            await self._attempt()

            if self._closed or not host_enabled(self._host):
                break

            await self._wait_before_retry(reconnect_delay_ms(self._avg_conn_duration_ms))

    async def _wait_before_retry(self, delay_ms: float) -> None:
        # redirect()/close() cut the wait short
        try:
            await asyncio.wait_for(self._wake.wait(), timeout=delay_ms / 1000.0)
        except asyncio.TimeoutError:
            pass

    async def _connect(self, generation: int) -> tuple[asyncio.StreamReader, asyncio.StreamWriter]:
        task = asyncio.get_running_loop().create_task(
            open_stream(self._host, self._port),
            name=f"rc-connect-{self._label}",
        )
        self._connect_task = task
        try:
            return await task
        except asyncio.CancelledError:
            # Cancelled through redirect()/close() rather than our own task
            if task.cancelled() and generation != self._generation:
                raise ConnectionAbortedError("connect superseded by redirect/close") from None
            raise
        finally:
            self._connect_task = None

    async def _attempt(self) -> None:
        generation = self._generation
        self._wake.clear()

        timer_id = start_timer("rc_connection_attempt")
        session: TransportSession | None = None
        writer: asyncio.StreamWriter | None = None
        failure: ConnectionDetail | None = None

        try:
            self._log("RC_CONNECTING", host=self._host, port=self._port)
            self._set_status(ConnectionState.CONNECTING, self._detail)

            reader, writer = await self._connect(generation)

            if generation != self._generation or self._closed:
                raise ConnectionAbortedError("attempt superseded by redirect/close")

            self._writer = writer
            _configure_socket(writer)

            self._log("RC_CONNECTED")
            self._set_status(ConnectionState.CONNECTED, ConnectionDetail.NONE)

            session = self._session_factory(self._make_write(writer))

            while True:
                data = await reader.read(RC_READ_CHUNK_BYTES)
                if not data:
                    break
                session.recv(data)

        except Exception as exc:  # pylint: disable=broad-exception-caught
            failure = self._handle_error(exc)

        finally:
            if writer is not None:
                writer.close()
            if self._writer is writer:
                self._writer = None

            self._set_status(
                ConnectionState.DISCONNECTED,
                failure if failure is not None else self._detail,
            )

            duration_ms = stop_timer(timer_id, label=self._label, emit=self.verbose)
            if duration_ms is not None:
                self._avg_conn_duration_ms = self._stats.record(duration_ms)
                self._notify()

            if session is not None:
                self._destroy_session(session)

    # ------------------------------------------------------------------
    # Socket write hook
    # ------------------------------------------------------------------

    def _make_write(self, writer: asyncio.StreamWriter) -> SendCallback:
        def _write(data: bytes) -> None:
            if writer is not self._writer:
                log_event({
                    "ts_ms": _now_ms(),
                    "event_type": "STALE_SOCKET_WRITE",
                    "level": "fatal",
                    "label": self._label,
                    "message": "attempt to write to closed socket failed, please check your driver code",
                    "bytes": len(data),
                })
                return

            try:
                writer.write(data)
            except Exception as exc:  # pylint: disable=broad-exception-caught
                self._set_status(ConnectionState.DISCONNECTED, self._handle_error(exc))
                self._drop_current()

        return _write

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _cancel_connect(self) -> None:
        task = self._connect_task
        if task is not None and not task.done():
            task.cancel()

    def _drop_current(self) -> None:
        writer = self._writer
        self._writer = None
        if writer is not None:
            writer.close()

    def _destroy_session(self, session: TransportSession) -> None:
        try:
            session.destroy()
        except Exception as exc:  # pylint: disable=broad-exception-caught
            log_event({
                "ts_ms": _now_ms(),
                "event_type": "RC_SESSION_DESTROY_FAILED",
                "level": "error",
                "label": self._label,
                "exception": type(exc).__name__,
                "message": str(exc),
            })

    def _handle_error(self, err: BaseException) -> ConnectionDetail:
        detail = classify_error(err)

        if detail is ConnectionDetail.UNKNOWN:
            log_event({
                "ts_ms": _now_ms(),
                "event_type": "RC_UNKNOWN_ERROR",
                "level": "error",
                "label": self._label,
                "exception": type(err).__name__,
                "message": str(err),
            })
        elif self.verbose:
            log_event({
                "ts_ms": _now_ms(),
                "event_type": "RC_CONNECTION_ERROR",
                "level": "error",
                "label": self._label,
                "exception": type(err).__name__,
                "detail": detail.value,
            })

        return detail

    def _set_status(self, state: ConnectionState, detail: ConnectionDetail) -> None:
        if state is self._state and detail is self._detail:
            return
        self._state = state
        self._detail = detail
        self._notify()

    def _notify(self) -> None:
        if not self._listeners:
            return
        event = self.snapshot()
        for listener in tuple(self._listeners):
            try:
                listener(event)
            except Exception as exc:  # pylint: disable=broad-exception-caught
                log_event({
                    "ts_ms": _now_ms(),
                    "event_type": "RC_LISTENER_ERROR",
                    "level": "error",
                    "label": self._label,
                    "exception": type(exc).__name__,
                    "message": str(exc),
                })

    def _log(self, event_type: str, **fields: object) -> None:
        if not self.verbose:
            return
        log_event({
            "ts_ms": _now_ms(),
            "event_type": event_type,
            "level": "info",
            "label": self._label,
            **fields,
        })
