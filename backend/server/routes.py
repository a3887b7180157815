"""
Route registration for the RC control API.

Responsibilities:
- Define HTTP and WebSocket endpoints
- Pull the shared RCClient from app.state
- Translate RC errors into HTTP status codes

Endpoints:
- GET  /health
- GET  /status            connection state / detail / average duration
- GET  /playlist          latest polled playlist
- POST /commands/{verb}   {"args": [...]} -> {"response": "..."}
- POST /redirect          {"host": "...", "port": 4212}
- WS   /events            ConnectionEvents as JSON, current snapshot first
"""

from __future__ import annotations

import asyncio
import json
import time
from dataclasses import asdict
from typing import Any

from fastapi import FastAPI, HTTPException, WebSocket, WebSocketDisconnect
from fastapi.websockets import WebSocketState
from pydantic import BaseModel, Field

from observability.logger import log_event
from observability.metrics import timed
from protocol.commands import UnknownCommand, build
from session.client import RCClient
from session.pipeline import RCError
from transport.events import ConnectionEvent

from spec import HTTP_COMMAND_TIMEOUT_S


class CommandRequest(BaseModel):
    args: list[Any] = Field(default_factory=list)


class RedirectRequest(BaseModel):
    host: str
    port: int


def register_routes(app: FastAPI) -> None:
    """Register all routes on the FastAPI app."""

    def _client() -> RCClient:
        return app.state.rc_client

    @app.get("/health")
    async def health() -> dict[str, str]: # pyright: ignore[reportUnusedFunction]
        return {"status": "ok"}

    @app.get("/status")
    async def status() -> dict[str, Any]: # pyright: ignore[reportUnusedFunction]
        client = _client()
        return {
            **client.manager.snapshot().as_dict(),
            "host": client.manager.host,
            "port": client.manager.port,
            "closed": client.manager.closed,
            "authenticated": client.controller is not None,
        }

    @app.get("/playlist")
    async def playlist() -> list[dict[str, Any]]: # pyright: ignore[reportUnusedFunction]
        return [asdict(entry) for entry in _client().playlist]

    @app.post("/commands/{verb}")
    async def run_command( # pyright: ignore[reportUnusedFunction]
        verb: str,
        body: CommandRequest | None = None,
    ) -> dict[str, str]:
        args = body.args if body is not None else []

        try:
            command = build(verb, *args)
        except UnknownCommand as exc:
            raise HTTPException(status_code=404, detail=f"unknown command {verb!r}") from exc
        except TypeError as exc:
            raise HTTPException(status_code=422, detail=str(exc)) from exc

        controller = _client().controller
        if controller is None:
            raise HTTPException(status_code=503, detail="not connected")

        try:
            with timed("rc_command", label=verb):
                response = await asyncio.wait_for(
                    controller.send(command),
                    timeout=HTTP_COMMAND_TIMEOUT_S,
                )
        except asyncio.TimeoutError as exc:
            raise HTTPException(status_code=504, detail="no response from player") from exc
        except RCError as exc:
            raise HTTPException(status_code=503, detail=str(exc)) from exc

        return {"command": command, "response": response}

    @app.post("/redirect")
    async def redirect(body: RedirectRequest) -> dict[str, Any]: # pyright: ignore[reportUnusedFunction]
        _client().redirect(body.host, body.port)
        return {"host": body.host, "port": body.port}

    @app.websocket("/events")
    async def events(ws: WebSocket) -> None: # pyright: ignore[reportUnusedFunction]
        await ws.accept()

        client = _client()
        queue: asyncio.Queue[ConnectionEvent] = asyncio.Queue()
        unsubscribe = client.subscribe(queue.put_nowait)
        queue.put_nowait(client.manager.snapshot())

        async def _pump() -> None:
            while True:
                event = await queue.get()
                await ws.send_text(json.dumps(event.as_dict()))

        async def _drain_inbound() -> None:
            # Only needed to notice the client going away
            while True:
                msg = await ws.receive()
                if msg["type"] == "websocket.disconnect":
                    return

        pump = asyncio.create_task(_pump())
        drain = asyncio.create_task(_drain_inbound())

        try:
            done, _ = await asyncio.wait(
                {pump, drain},
                return_when=asyncio.FIRST_COMPLETED,
            )
            for task in done:
                exc = task.exception()
                if exc is not None and not isinstance(exc, WebSocketDisconnect):
                    log_event({
                        "ts_ms": time.time_ns() // 1_000_000,
                        "event_type": "EVENTS_WS_ERROR",
                        "level": "error",
                        "label": client.manager.label,
                        "exception": type(exc).__name__,
                        "message": str(exc),
                    })
                    if ws.client_state is WebSocketState.CONNECTED:
                        await ws.close(code=1011)
        finally:
            unsubscribe()
            for task in (pump, drain):
                task.cancel()
