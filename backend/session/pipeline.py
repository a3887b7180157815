"""
Single-in-flight request pipeline.

The RC protocol has no request ids: a response is paired with a request
purely by order. The pipeline therefore keeps at most one request on the
wire; everything else waits in FIFO order.

    submit(A) -> A written, in flight
    submit(B) -> queued
    deliver(resp1) -> A resolved, B written, in flight
    deliver(resp2) -> B resolved, idle

Deterministic and synchronous apart from the returned futures.
"""

from __future__ import annotations

import asyncio
from collections import deque
from dataclasses import dataclass
from typing import Callable, Deque

from spec import RC_COMMAND_TERMINATOR, RC_ENCODING


# -------------------------
# Exceptions
# -------------------------

class RCError(Exception):
    """Base class for RC session errors."""


class RequestCancelled(RCError):
    """
    Raised into a request's waiter when its session is torn down before a
    response arrived. The command may or may not have reached the player.
    """


class SessionClosed(RCError):
    """Raised when submitting to a session that has already been destroyed."""


# -------------------------
# Wire helpers
# -------------------------

def encode_command(command: str) -> bytes:
    return (command + RC_COMMAND_TERMINATOR).encode(RC_ENCODING)


def decode_response(data: bytes) -> str:
    return data.decode(RC_ENCODING, errors="replace").strip()


# -------------------------
# Pipeline
# -------------------------

@dataclass
class PendingRequest:
    """A command and the future its caller awaits."""
    command: str
    future: asyncio.Future[str]


class RequestPipeline:
    """
    FIFO request queue with exactly one request in flight.

    write:
        Transport hook receiving encoded bytes. Called synchronously from
        submit() / deliver().
    """

    def __init__(self, *, write: Callable[[bytes], None]) -> None:
        self._write: Callable[[bytes], None] | None = write
        self._in_flight: PendingRequest | None = None
        self._queue: Deque[PendingRequest] = deque()

    # -------------------------
    # Introspection
    # -------------------------

    @property
    def in_flight(self) -> PendingRequest | None:
        return self._in_flight

    @property
    def queued(self) -> int:
        return len(self._queue)

    @property
    def closed(self) -> bool:
        return self._write is None

    # -------------------------
    # Core operations
    # -------------------------

    def submit(self, command: str) -> asyncio.Future[str]:
        """
        Submit a command.

        Written immediately when idle, queued otherwise. The returned future
        resolves with the decoded, trimmed response.

        Raises:
            SessionClosed if the pipeline has been closed.
        """
        if self._write is None:
            raise SessionClosed(f"cannot send {command!r}: session closed")

        request = PendingRequest(
            command=command,
            future=asyncio.get_running_loop().create_future(),
        )

        if self._in_flight is not None:
            self._queue.append(request)
            return request.future

        self._transmit(request)
        return request.future

    def deliver(self, data: bytes) -> bool:
        """
        Treat `data` as the complete response to the in-flight request.

        Returns False (and does nothing) when no request is in flight.
        """
        current = self._in_flight
        if current is None:
            return False

        if not current.future.done():
            current.future.set_result(decode_response(data))

        if self._queue and self._write is not None:
            self._transmit(self._queue.popleft())
        else:
            self._in_flight = None

        return True

    def close(self, reason: str) -> int:
        """
        Detach the transport and fail every outstanding request with
        RequestCancelled.

        Returns the number of requests cancelled.
        """
        self._write = None

        outstanding = []
        if self._in_flight is not None:
            outstanding.append(self._in_flight)
        outstanding.extend(self._queue)

        self._in_flight = None
        self._queue.clear()

        for request in outstanding:
            if not request.future.done():
                request.future.set_exception(
                    RequestCancelled(f"{request.command!r}: {reason}")
                )
        return len(outstanding)

    # -------------------------
    # Internal
    # -------------------------

    def _transmit(self, request: PendingRequest) -> None:
        self._in_flight = request
        assert self._write is not None
        self._write(encode_command(request.command))
