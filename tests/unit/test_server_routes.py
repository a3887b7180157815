# pylint: disable=missing-module-docstring,missing-function-docstring

import pytest
from fastapi import WebSocketDisconnect
from fastapi.testclient import TestClient

import server.routes as routes_mod
from config import AppConfig
from server.app import create_app


def _config(**overrides) -> AppConfig:
    values = dict(
        env="test",
        log_level="debug",
        rc_host="!",
        rc_port=4212,
        rc_password="pw",
        rc_label="vlc",
        rc_verbose=False,
        playlist_update_interval_ms=200,
        enable_json_logs=True,
        http_host="127.0.0.1",
        http_port=8000,
    )
    values.update(overrides)
    return AppConfig(**values)


@pytest.fixture
def client():
    with TestClient(create_app(_config())) as c:
        yield c


def test_health(client):
    assert client.get("/health").json() == {"status": "ok"}


def test_status_while_disabled(client):
    body = client.get("/status").json()

    assert body["state"] == "DISCONNECTED"
    assert body["detail"] == "NONE"
    assert body["avg_conn_duration_ms"] is None
    assert body["host"] == "!"
    assert body["authenticated"] is False


def test_playlist_empty_until_polled(client):
    assert client.get("/playlist").json() == []


def test_unknown_command_is_404(client):
    assert client.post("/commands/frobnicate", json={"args": []}).status_code == 404


def test_bad_arguments_are_422(client):
    assert client.post("/commands/goto", json={"args": []}).status_code == 422


def test_command_without_connection_is_503(client):
    resp = client.post("/commands/play")

    assert resp.status_code == 503


def test_redirect_updates_target(client):
    resp = client.post("/redirect", json={"host": "", "port": 4300})

    assert resp.status_code == 200
    body = client.get("/status").json()
    assert body["host"] == ""
    assert body["port"] == 4300
    assert body["closed"] is False


def test_events_stream_starts_with_snapshot(client):
    with client.websocket_connect("/events") as ws:
        first = ws.receive_json()

    assert first["state"] == "DISCONNECTED"
    assert first["label"] == "vlc"


class _UnserializableJson:
    @staticmethod
    def dumps(obj):
        raise ValueError("cannot encode event")


def test_events_stream_failure_is_logged_and_closed(client, monkeypatch):
    logged = []
    monkeypatch.setattr(routes_mod, "log_event", logged.append)
    monkeypatch.setattr(routes_mod, "json", _UnserializableJson)

    with client.websocket_connect("/events") as ws:
        with pytest.raises(WebSocketDisconnect) as info:
            ws.receive_json()

    assert info.value.code == 1011
    errors = [e for e in logged if e["event_type"] == "EVENTS_WS_ERROR"]
    assert len(errors) == 1
    assert isinstance(errors[0]["ts_ms"], int)
    assert errors[0]["label"] == "vlc"
    assert errors[0]["exception"] == "ValueError"
