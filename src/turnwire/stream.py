"""Bounded single-producer, single-consumer channels of response events.

The producer (a transport decoding the provider stream) pushes events or failures into a
bounded buffer; the consumer pulls them in enqueue order. A full buffer suspends the
producer. Closing the consumer side releases a blocked producer and turns every later
send into a rejected no-op.

A `Completed` event or a failure is terminal: the consumer sees nothing after it and the
producer cannot enqueue anything behind it.
"""

from __future__ import annotations

import asyncio
import logging
import threading
from collections import deque
from enum import Enum
from typing import Any

from turnwire.core.errors import TurnwireError
from turnwire.events import Completed, ResponseEvent

logger = logging.getLogger(__name__)

DEFAULT_BUFFER_SIZE = 1600

_Item = ResponseEvent | TurnwireError


class StreamState(str, Enum):
    OPEN = "open"
    DRAINING = "draining"
    CLOSED = "closed"


def _is_terminal(item: _Item) -> bool:
    return isinstance(item, (Completed, TurnwireError))


def _check_maxsize(maxsize: int) -> None:
    if maxsize < 1:
        raise ValueError(f"maxsize must be >= 1, got {maxsize}")


class _ChannelFlags:
    """State shared by both ends of a channel."""

    def __init__(self, maxsize: int) -> None:
        _check_maxsize(maxsize)
        self.maxsize = maxsize
        self.buffer: deque[_Item] = deque()
        self.sender_closed = False
        self.receiver_closed = False
        self.terminal_enqueued = False

    def rejection_reason(self) -> str | None:
        if self.receiver_closed:
            return "consumer is gone"
        if self.terminal_enqueued:
            return "stream already finished"
        if self.sender_closed:
            return "sender is closed"
        return None

    def state(self) -> StreamState:
        if self.receiver_closed:
            return StreamState.CLOSED
        if self.sender_closed or self.terminal_enqueued:
            return StreamState.DRAINING
        return StreamState.OPEN


# --- asyncio -----------------------------------------------------------------


class _AsyncChannel(_ChannelFlags):
    def __init__(self, maxsize: int) -> None:
        super().__init__(maxsize)
        self.getter: asyncio.Future[None] | None = None
        self.putters: deque[asyncio.Future[None]] = deque()

    @staticmethod
    def _wake(fut: asyncio.Future[None] | None) -> None:
        if fut is None or fut.done() or fut.get_loop().is_closed():
            return
        fut.set_result(None)

    def wake_getter(self) -> None:
        self._wake(self.getter)

    def wake_one_putter(self) -> None:
        while self.putters:
            fut = self.putters.popleft()
            if not fut.done():
                self._wake(fut)
                return

    def wake_all_putters(self) -> None:
        while self.putters:
            self._wake(self.putters.popleft())


class EventSender:
    """Producer handle of an asyncio response channel."""

    def __init__(self, channel: _AsyncChannel) -> None:
        self._channel = channel

    @property
    def is_closed(self) -> bool:
        return self._channel.rejection_reason() is not None

    async def _put(self, item: _Item) -> bool:
        channel = self._channel
        while True:
            reason = channel.rejection_reason()
            if reason is not None:
                logger.debug("Dropping %s: %s", type(item).__name__, reason)
                return False
            if len(channel.buffer) < channel.maxsize:
                break
            fut = asyncio.get_running_loop().create_future()
            channel.putters.append(fut)
            try:
                await fut
            except asyncio.CancelledError:
                if fut in channel.putters:
                    channel.putters.remove(fut)
                raise

        channel.buffer.append(item)
        if _is_terminal(item):
            channel.terminal_enqueued = True
        channel.wake_getter()
        return True

    async def send(self, event: ResponseEvent) -> bool:
        """Enqueue an event, waiting while the buffer is full.

        Returns False when the event was rejected because the consumer closed the stream,
        the stream already finished, or this sender was closed.
        """
        return await self._put(event)

    async def fail(self, error: TurnwireError) -> bool:
        return await self._put(error)

    def close(self) -> None:
        channel = self._channel
        if channel.sender_closed:
            return
        channel.sender_closed = True
        channel.wake_getter()

    async def __aenter__(self) -> EventSender:
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        self.close()

    def __del__(self) -> None:
        self.close()


class AsyncResponseStream:
    """Consumer handle of an asyncio response channel."""

    def __init__(self, channel: _AsyncChannel) -> None:
        self._channel = channel

    @property
    def state(self) -> StreamState:
        return self._channel.state()

    def close(self) -> None:
        """Walk away from the stream; pending and future sends are rejected."""
        channel = self._channel
        if channel.receiver_closed:
            return
        channel.receiver_closed = True
        channel.buffer.clear()
        channel.wake_all_putters()
        channel.wake_getter()

    async def next(self) -> ResponseEvent | None:
        """Return the next event, or None once the stream has ended.

        Raises:
            TurnwireError: The failure the producer reported. The stream is closed afterwards.
        """
        channel = self._channel
        while True:
            if channel.receiver_closed:
                return None
            if channel.buffer:
                item = channel.buffer.popleft()
                channel.wake_one_putter()
                if _is_terminal(item):
                    self.close()
                if isinstance(item, TurnwireError):
                    raise item
                return item
            if channel.sender_closed:
                self.close()
                return None

            fut = asyncio.get_running_loop().create_future()
            channel.getter = fut
            try:
                await fut
            finally:
                channel.getter = None

    def __aiter__(self) -> AsyncResponseStream:
        return self

    async def __anext__(self) -> ResponseEvent:
        event = await self.next()
        if event is None:
            raise StopAsyncIteration
        return event

    def __del__(self) -> None:
        self.close()


def response_channel(maxsize: int = DEFAULT_BUFFER_SIZE) -> tuple[EventSender, AsyncResponseStream]:
    channel = _AsyncChannel(maxsize)
    return EventSender(channel), AsyncResponseStream(channel)


# --- threads -----------------------------------------------------------------


class _SyncChannel(_ChannelFlags):
    def __init__(self, maxsize: int) -> None:
        super().__init__(maxsize)
        self.condition = threading.Condition()


class SyncEventSender:
    """Producer handle of a thread-safe response channel."""

    def __init__(self, channel: _SyncChannel) -> None:
        self._channel = channel

    @property
    def is_closed(self) -> bool:
        with self._channel.condition:
            return self._channel.rejection_reason() is not None

    def _put(self, item: _Item, timeout: float | None) -> bool:
        channel = self._channel
        with channel.condition:
            ready = channel.condition.wait_for(
                lambda: channel.rejection_reason() is not None or len(channel.buffer) < channel.maxsize,
                timeout,
            )
            if not ready:
                raise TimeoutError(f"Timed out after {timeout}s waiting for buffer space")
            reason = channel.rejection_reason()
            if reason is not None:
                logger.debug("Dropping %s: %s", type(item).__name__, reason)
                return False
            channel.buffer.append(item)
            if _is_terminal(item):
                channel.terminal_enqueued = True
            channel.condition.notify_all()
            return True

    def send(self, event: ResponseEvent, timeout: float | None = None) -> bool:
        """Enqueue an event, blocking while the buffer is full.

        Raises:
            TimeoutError: No buffer space became available within `timeout` seconds.
        """
        return self._put(event, timeout)

    def fail(self, error: TurnwireError, timeout: float | None = None) -> bool:
        return self._put(error, timeout)

    def close(self) -> None:
        channel = self._channel
        with channel.condition:
            channel.sender_closed = True
            channel.condition.notify_all()

    def __enter__(self) -> SyncEventSender:
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    def __del__(self) -> None:
        self.close()


class ResponseStream:
    """Consumer handle of a thread-safe response channel."""

    def __init__(self, channel: _SyncChannel) -> None:
        self._channel = channel

    @property
    def state(self) -> StreamState:
        with self._channel.condition:
            return self._channel.state()

    def close(self) -> None:
        channel = self._channel
        with channel.condition:
            channel.receiver_closed = True
            channel.buffer.clear()
            channel.condition.notify_all()

    def next(self) -> ResponseEvent | None:
        channel = self._channel
        with channel.condition:
            channel.condition.wait_for(
                lambda: channel.receiver_closed or bool(channel.buffer) or channel.sender_closed
            )
            if channel.receiver_closed:
                return None
            if not channel.buffer:
                channel.receiver_closed = True
                return None
            item = channel.buffer.popleft()
            if _is_terminal(item):
                channel.receiver_closed = True
                channel.buffer.clear()
            channel.condition.notify_all()
        if isinstance(item, TurnwireError):
            raise item
        return item

    def __iter__(self) -> ResponseStream:
        return self

    def __next__(self) -> ResponseEvent:
        event = self.next()
        if event is None:
            raise StopIteration
        return event

    def __del__(self) -> None:
        self.close()


def sync_response_channel(maxsize: int = DEFAULT_BUFFER_SIZE) -> tuple[SyncEventSender, ResponseStream]:
    channel = _SyncChannel(maxsize)
    return SyncEventSender(channel), ResponseStream(channel)
