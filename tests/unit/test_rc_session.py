# pylint: disable=missing-module-docstring,missing-function-docstring

import asyncio

import pytest

import session.rc_session as rc_session_mod
from session.controller import RCController
from session.pipeline import RequestCancelled, SessionClosed
from session.rc_session import RCListeners, RCSession

from fake_player import PLAYLIST_DUMP, wait_until


class Recorder:
    def __init__(self):
        self.connects = []
        self.disconnects = 0
        self.auth_failures = []
        self.playlists = []

    def listeners(self) -> RCListeners:
        return RCListeners(
            on_connect=self.connects.append,
            on_disconnect=self._on_disconnect,
            on_auth_failed=self.auth_failures.append,
            on_playlist=self.playlists.append,
        )

    def _on_disconnect(self):
        self.disconnects += 1


@pytest.fixture(autouse=True)
def quiet_logs(monkeypatch):
    events = []
    monkeypatch.setattr(rc_session_mod, "log_event", events.append)
    return events


# ---------------------------------------------------------------------
# Handshake
# ---------------------------------------------------------------------

def test_password_is_first_write():
    async def scenario():
        written = []
        session = RCSession(send=written.append, password="secret")

        assert written == [b"secret\n"]
        assert session.authenticated is None
        session.destroy()

    asyncio.run(scenario())


def test_wrong_password_never_connects_or_polls(quiet_logs):
    async def scenario():
        written = []
        rec = Recorder()
        session = RCSession(
            send=written.append,
            password="nope",
            listeners=rec.listeners(),
            playlist_update_interval_ms=10,
        )

        session.recv(b"Wrong password\r\n")
        await asyncio.sleep(0.05)

        assert session.authenticated is False
        assert not session.polling
        assert rec.connects == []
        assert rec.auth_failures == ["Wrong password"]
        assert written == [b"nope\n"]
        assert any(e["event_type"] == "RC_AUTH_FAILED" for e in quiet_logs)

        session.destroy()
        assert rec.disconnects == 1

    asyncio.run(scenario())


def test_successful_handshake_hands_out_controller_and_polls():
    async def scenario():
        written = []
        rec = Recorder()
        session = RCSession(
            send=written.append,
            password="secret",
            listeners=rec.listeners(),
            playlist_update_interval_ms=10,
        )

        session.recv(b"Welcome, Master\r\n")
        await wait_until(lambda: bool(rec.connects))

        assert session.authenticated is True
        assert isinstance(rec.connects[0], RCController)
        assert session.polling

        await wait_until(lambda: written[-1] == b"playlist\n")
        session.recv(PLAYLIST_DUMP.encode())
        await wait_until(lambda: bool(rec.playlists))

        assert [e.id for e in session.get_playlist()] == [4, 5, 6]
        assert rec.playlists[0] == session.get_playlist()
        assert session.controller.get_playlist() == session.get_playlist()

        session.destroy()

    asyncio.run(scenario())


def test_invalid_interval_rejected():
    async def scenario():
        with pytest.raises(ValueError):
            RCSession(send=lambda data: None, password="x", playlist_update_interval_ms=0)

    asyncio.run(scenario())


# ---------------------------------------------------------------------
# Commands through the controller
# ---------------------------------------------------------------------

def test_controller_commands_queue_behind_handshake():
    async def scenario():
        written = []
        session = RCSession(send=written.append, password="secret", playlist_update_interval_ms=10_000)

        goto = asyncio.ensure_future(session.controller.goto(5))
        await asyncio.sleep(0)
        assert written == [b"secret\n"]

        session.recv(b"Welcome\r\n")
        await wait_until(lambda: written[-1] == b"goto 5\n")
        session.recv(b"goto: returned 0 (no error)\r\n")

        assert await goto == "goto: returned 0 (no error)"
        session.destroy()

    asyncio.run(scenario())


# ---------------------------------------------------------------------
# Teardown
# ---------------------------------------------------------------------

def test_destroy_is_idempotent_and_stops_polling():
    async def scenario():
        written = []
        rec = Recorder()
        session = RCSession(
            send=written.append,
            password="secret",
            listeners=rec.listeners(),
            playlist_update_interval_ms=10,
        )
        session.recv(b"Welcome\r\n")
        await wait_until(lambda: session.polling)

        session.destroy()
        session.destroy()
        writes_at_destroy = len(written)
        await asyncio.sleep(0.05)

        assert rec.disconnects == 1
        assert not session.polling
        assert session.destroyed
        assert len(written) == writes_at_destroy

    asyncio.run(scenario())


def test_destroy_fails_outstanding_requests():
    async def scenario():
        session = RCSession(send=lambda data: None, password="secret")
        pending = session.send("status")

        session.destroy()

        with pytest.raises(RequestCancelled):
            await pending
        with pytest.raises(SessionClosed):
            session.send("status")

    asyncio.run(scenario())


def test_data_after_destroy_is_ignored():
    async def scenario():
        session = RCSession(send=lambda data: None, password="secret")
        session.destroy()

        session.recv(b"Welcome\r\n")
        await asyncio.sleep(0)

        assert session.authenticated is None

    asyncio.run(scenario())


def test_listener_errors_are_logged_not_raised(quiet_logs):
    async def scenario():
        def boom(_controller):
            raise RuntimeError("listener broke")

        session = RCSession(
            send=lambda data: None,
            password="secret",
            listeners=RCListeners(on_connect=boom),
            playlist_update_interval_ms=10_000,
        )
        session.recv(b"Welcome\r\n")
        await wait_until(lambda: session.authenticated is True)
        await asyncio.sleep(0)

        errors = [e for e in quiet_logs if e["event_type"] == "RC_LISTENER_ERROR"]
        assert errors and errors[0]["listener"] == "on_connect"
        session.destroy()

    asyncio.run(scenario())
