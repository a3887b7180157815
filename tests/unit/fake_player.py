# pylint: disable=missing-module-docstring,missing-function-docstring

from __future__ import annotations

import asyncio
from typing import Callable


PLAYLIST_DUMP = "\r\n".join([
    "+----[ Playlist - playlist ]",
    "| 1 - Playlist",
    "|   4 - Intro (00:00:30)",
    "|  *5 - Szene1 (00:03:45) [played 2 times]",
    "|   6 - Szene1 (00:01:00)",
    "| 2 - Media Library",
    "+----[ End of playlist ]",
])


class FakePlayer:
    """
    Loopback stand-in for the player's RC interface.

    One line in, one write out. The first line of every connection is the
    password.
    """

    def __init__(self, *, password: str = "secret", playlist_dump: str = PLAYLIST_DUMP) -> None:
        self.password = password
        self.playlist_dump = playlist_dump
        self.received: list[str] = []
        self.connections = 0
        self.disconnections = 0
        self.port = 0
        self._writers: list[asyncio.StreamWriter] = []
        self._server: asyncio.AbstractServer | None = None

    async def start(self) -> FakePlayer:
        self._server = await asyncio.start_server(self._handle, "127.0.0.1", 0)
        self.port = self._server.sockets[0].getsockname()[1]
        return self

    async def _handle(self, reader: asyncio.StreamReader, writer: asyncio.StreamWriter) -> None:
        self.connections += 1
        self._writers.append(writer)
        authed = False
        try:
            while True:
                line = await reader.readline()
                if not line:
                    break
                cmd = line.decode().strip()
                self.received.append(cmd)

                if not authed:
                    authed = cmd == self.password
                    reply = "Welcome, Master" if authed else "Wrong password"
                elif cmd == "playlist":
                    reply = self.playlist_dump
                else:
                    reply = f"{cmd}: returned 0 (no error)"

                writer.write((reply + "\r\n").encode())
                await writer.drain()
        except ConnectionError:
            pass
        finally:
            self.disconnections += 1
            writer.close()

    def drop_clients(self) -> None:
        for writer in self._writers:
            writer.close()
        self._writers.clear()

    async def stop(self) -> None:
        self.drop_clients()
        if self._server is not None:
            self._server.close()
            await self._server.wait_closed()


async def wait_until(predicate: Callable[[], bool], timeout: float = 3.0) -> None:
    loop = asyncio.get_running_loop()
    deadline = loop.time() + timeout
    while not predicate():
        if loop.time() > deadline:
            raise AssertionError("condition not met before timeout")
        await asyncio.sleep(0.01)


async def free_port() -> int:
    """A loopback port with nothing listening on it."""
    server = await asyncio.start_server(lambda r, w: None, "127.0.0.1", 0)
    port = server.sockets[0].getsockname()[1]
    server.close()
    await server.wait_closed()
    return port
