# pylint: disable=missing-module-docstring,missing-function-docstring

import asyncio

import pytest

from session.pipeline import (
    RequestCancelled,
    RequestPipeline,
    SessionClosed,
    decode_response,
    encode_command,
)


# ---------------------------------------------------------------------
# Wire helpers
# ---------------------------------------------------------------------

def test_encode_appends_newline():
    assert encode_command("goto 5") == b"goto 5\n"


def test_decode_trims_and_tolerates_bad_bytes():
    assert decode_response(b"  ok\r\n") == "ok"
    assert decode_response(b"\xffok") == "�ok"


# ---------------------------------------------------------------------
# Ordering
# ---------------------------------------------------------------------

def test_second_request_waits_for_first_response():
    async def scenario():
        written = []
        pipeline = RequestPipeline(write=written.append)

        a = pipeline.submit("A")
        b = pipeline.submit("B")

        assert written == [b"A\n"]
        assert pipeline.queued == 1

        assert pipeline.deliver(b"resp1\r\n")
        assert written == [b"A\n", b"B\n"]
        assert await a == "resp1"
        assert not b.done()

        assert pipeline.deliver(b"resp2")
        assert await b == "resp2"
        assert pipeline.in_flight is None
        assert pipeline.queued == 0

    asyncio.run(scenario())


def test_deliver_while_idle_is_ignored():
    async def scenario():
        written = []
        pipeline = RequestPipeline(write=written.append)

        assert pipeline.deliver(b"stray") is False

        fut = pipeline.submit("status")
        pipeline.deliver(b"state playing")
        assert await fut == "state playing"

    asyncio.run(scenario())


def test_abandoned_waiter_still_consumes_its_response():
    async def scenario():
        written = []
        pipeline = RequestPipeline(write=written.append)

        first = pipeline.submit("A")
        second = pipeline.submit("B")
        first.cancel()

        pipeline.deliver(b"resp1")
        pipeline.deliver(b"resp2")

        assert await second == "resp2"

    asyncio.run(scenario())


# ---------------------------------------------------------------------
# Close
# ---------------------------------------------------------------------

def test_close_cancels_in_flight_and_queued():
    async def scenario():
        pipeline = RequestPipeline(write=lambda data: None)

        a = pipeline.submit("A")
        b = pipeline.submit("B")

        assert pipeline.close("connection closed") == 2
        assert pipeline.closed

        for fut in (a, b):
            with pytest.raises(RequestCancelled):
                await fut

    asyncio.run(scenario())


def test_submit_after_close_raises():
    async def scenario():
        pipeline = RequestPipeline(write=lambda data: None)
        pipeline.close("gone")

        with pytest.raises(SessionClosed):
            pipeline.submit("play")

    asyncio.run(scenario())
