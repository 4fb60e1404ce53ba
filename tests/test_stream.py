from __future__ import annotations

import asyncio
import gc

import pytest

from turnwire import (
    Completed,
    Created,
    ErrorKind,
    OutputTextDelta,
    StreamState,
    TurnwireError,
    response_channel,
)


async def _drain(stream) -> list:
    return [event async for event in stream]


@pytest.mark.asyncio
async def test_delivers_every_event_in_order_then_ends() -> None:
    sender, stream = response_channel(4)
    expected = [OutputTextDelta(str(i)) for i in range(25)]

    async def produce() -> None:
        async with sender:
            for event in expected:
                assert await sender.send(event) is True

    producer = asyncio.create_task(produce())
    received = await _drain(stream)
    await producer

    assert received == expected
    assert stream.state is StreamState.CLOSED
    assert await stream.next() is None


@pytest.mark.asyncio
async def test_next_waits_for_producer() -> None:
    sender, stream = response_channel(1)

    pending = asyncio.create_task(stream.next())
    await asyncio.sleep(0)
    assert not pending.done()

    await sender.send(Created())
    assert await pending == Created()


@pytest.mark.asyncio
async def test_closing_sender_wakes_waiting_consumer() -> None:
    sender, stream = response_channel(1)

    pending = asyncio.create_task(stream.next())
    await asyncio.sleep(0)
    sender.close()

    assert await asyncio.wait_for(pending, 1) is None
    assert stream.state is StreamState.CLOSED


@pytest.mark.asyncio
async def test_state_transitions_open_draining_closed() -> None:
    sender, stream = response_channel(2)
    assert stream.state is StreamState.OPEN

    await sender.send(OutputTextDelta("a"))
    sender.close()
    assert stream.state is StreamState.DRAINING

    assert await stream.next() == OutputTextDelta("a")
    assert stream.state is StreamState.DRAINING
    assert await stream.next() is None
    assert stream.state is StreamState.CLOSED


@pytest.mark.asyncio
async def test_completed_is_terminal() -> None:
    sender, stream = response_channel(8)

    assert await sender.send(Created()) is True
    assert await sender.send(Completed(response_id="resp_1")) is True
    assert await sender.send(OutputTextDelta("late")) is False
    assert sender.is_closed

    assert await _drain(stream) == [Created(), Completed(response_id="resp_1")]


@pytest.mark.asyncio
async def test_failure_is_raised_then_stream_is_closed() -> None:
    sender, stream = response_channel(8)
    error = TurnwireError(ErrorKind.PROVIDER, "boom")

    await sender.send(OutputTextDelta("partial"))
    assert await sender.fail(error) is True
    assert await sender.send(OutputTextDelta("ignored")) is False

    assert await stream.next() == OutputTextDelta("partial")
    with pytest.raises(TurnwireError) as exc_info:
        await stream.next()
    assert exc_info.value is error
    assert await stream.next() is None
    assert stream.state is StreamState.CLOSED


@pytest.mark.asyncio
async def test_full_buffer_suspends_producer() -> None:
    sender, stream = response_channel(1)
    assert await sender.send(OutputTextDelta("1")) is True

    blocked = asyncio.create_task(sender.send(OutputTextDelta("2")))
    for _ in range(3):
        await asyncio.sleep(0)
    assert not blocked.done()

    assert await stream.next() == OutputTextDelta("1")
    assert await asyncio.wait_for(blocked, 1) is True
    assert await stream.next() == OutputTextDelta("2")


@pytest.mark.asyncio
async def test_consumer_close_releases_blocked_producer() -> None:
    sender, stream = response_channel(1)
    await sender.send(OutputTextDelta("1"))

    blocked = asyncio.create_task(sender.send(OutputTextDelta("2")))
    await asyncio.sleep(0)
    stream.close()

    assert await asyncio.wait_for(blocked, 1) is False
    assert await sender.send(OutputTextDelta("3")) is False
    assert await sender.fail(TurnwireError(ErrorKind.PROVIDER, "late")) is False
    assert stream.state is StreamState.CLOSED


@pytest.mark.asyncio
async def test_dropping_stream_releases_blocked_producer() -> None:
    sender, stream = response_channel(1)
    await sender.send(OutputTextDelta("1"))

    blocked = asyncio.create_task(sender.send(OutputTextDelta("2")))
    await asyncio.sleep(0)
    del stream
    gc.collect()

    assert await asyncio.wait_for(blocked, 1) is False


@pytest.mark.asyncio
async def test_cancelled_send_does_not_leak_a_slot() -> None:
    sender, stream = response_channel(1)
    await sender.send(OutputTextDelta("1"))

    blocked = asyncio.create_task(sender.send(OutputTextDelta("never")))
    await asyncio.sleep(0)
    blocked.cancel()
    with pytest.raises(asyncio.CancelledError):
        await blocked

    assert await stream.next() == OutputTextDelta("1")
    assert await sender.send(OutputTextDelta("2")) is True
    sender.close()
    assert await _drain(stream) == [OutputTextDelta("2")]


def test_rejects_non_positive_buffer() -> None:
    with pytest.raises(ValueError):
        response_channel(0)


@pytest.mark.asyncio
async def test_dropping_sender_ends_stream_after_pending_events() -> None:
    sender, stream = response_channel(4)
    await sender.send(OutputTextDelta("a"))
    del sender
    gc.collect()

    assert await stream.next() == OutputTextDelta("a")
    assert await asyncio.wait_for(stream.next(), 1) is None
    assert stream.state is StreamState.CLOSED


@pytest.mark.asyncio
async def test_dropping_sender_wakes_waiting_consumer() -> None:
    sender, stream = response_channel(4)

    pending = asyncio.create_task(stream.next())
    await asyncio.sleep(0)
    del sender
    gc.collect()

    assert await asyncio.wait_for(pending, 1) is None


@pytest.mark.asyncio
async def test_closing_stream_wakes_pending_next() -> None:
    sender, stream = response_channel(4)

    pending = asyncio.create_task(stream.next())
    await asyncio.sleep(0)
    stream.close()

    assert await asyncio.wait_for(pending, 1) is None
    assert await sender.send(OutputTextDelta("late")) is False
