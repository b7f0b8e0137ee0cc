"""Channel-based relay behind streaming generation.

A StreamSession owns two channels, one for text chunks and one for at most
one terminal error, plus the asyncio task that feeds them. The producer
sends the terminal error (if any) before closing the chunk channel, so a
consumer can drain the chunks and then check the error once:

    async with model.generate_stream("hello") as stream:
        async for chunk in stream:
            print(chunk, end="")
        if (error := await stream.error()) is not None:
            raise error

Leaving the ``async with`` block (or calling ``aclose()``) cancels the
producer, so an abandoned consumer never leaves a task blocked on a full
channel.
"""

from __future__ import annotations

import asyncio
import logging
import uuid
from collections import deque
from collections.abc import Awaitable, Callable
from typing import Generic, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


class ChannelClosedError(Exception):
    """Raised on send to a closed channel, or receive from a closed, drained one."""


class Channel(Generic[T]):
    """Bounded FIFO channel for a single asyncio event loop.

    ``send`` waits while the channel is full; ``close`` is synchronous and
    wakes every waiter. Items sent before ``close`` are still delivered
    unless the close discards them.
    """

    def __init__(self, capacity: int = 1) -> None:
        if capacity < 1:
            raise ValueError(f"Channel capacity must be positive, got {capacity}")
        self._capacity = capacity
        self._items: deque[T] = deque()
        self._closed = False
        self._readable = asyncio.Event()
        self._writable = asyncio.Event()
        self._writable.set()

    @property
    def closed(self) -> bool:
        return self._closed

    async def send(self, item: T) -> None:
        while not self._closed and len(self._items) >= self._capacity:
            self._writable.clear()
            await self._writable.wait()
        if self._closed:
            raise ChannelClosedError("send on closed channel")
        self._items.append(item)
        self._readable.set()

    def try_send(self, item: T) -> bool:
        """Send without waiting. Returns False if the channel is closed or full."""
        if self._closed or len(self._items) >= self._capacity:
            return False
        self._items.append(item)
        self._readable.set()
        return True

    async def receive(self) -> T:
        while not self._items and not self._closed:
            self._readable.clear()
            await self._readable.wait()
        if self._items:
            item = self._items.popleft()
            self._writable.set()
            return item
        raise ChannelClosedError("channel closed")

    def close(self, *, discard: bool = False) -> None:
        if discard:
            self._items.clear()
        self._closed = True
        self._readable.set()
        self._writable.set()

    def __aiter__(self) -> Channel[T]:
        return self

    async def __anext__(self) -> T:
        try:
            return await self.receive()
        except ChannelClosedError:
            raise StopAsyncIteration from None


Producer = Callable[["StreamSession"], Awaitable[None]]


class StreamSession:
    """One streaming call: a chunk channel, an error channel and their producer.

    Attributes:
        id: Session identifier, used as the logging correlation ID
        chunks: Text chunks, closed exactly once when the call ends
        errors: At most one terminal error, closed before ``chunks``
    """

    def __init__(self, buffer_size: int = 16, session_id: str | None = None) -> None:
        self.id = session_id or uuid.uuid4().hex
        self.chunks: Channel[str] = Channel(buffer_size)
        self.errors: Channel[Exception] = Channel(1)
        self._task: asyncio.Task[None] | None = None

    def start(self, producer: Producer) -> StreamSession:
        """Schedule ``producer`` on the running loop. Must be called once."""
        if self._task is not None:
            raise RuntimeError("stream session already started")
        self._task = asyncio.get_running_loop().create_task(
            self._run(producer), name=f"sllmi-stream-{self.id[:8]}"
        )
        return self

    async def _run(self, producer: Producer) -> None:
        try:
            await producer(self)
        except asyncio.CancelledError:
            logger.debug("Stream session cancelled", extra={"correlation_id": self.id})
            raise
        except Exception as e:
            logger.exception("Stream producer crashed", extra={"correlation_id": self.id})
            self.fail(e)
        finally:
            self.errors.close()
            self.chunks.close()

    def fail(self, error: Exception) -> bool:
        """Publish the terminal error. Only the first call has any effect."""
        return self.errors.try_send(error)

    @property
    def done(self) -> bool:
        return self._task is not None and self._task.done()

    def cancel(self) -> None:
        """Stop the producer and drop undelivered chunks."""
        if self._task is not None:
            self._task.cancel()
        self.chunks.close(discard=True)
        self.errors.close()

    async def aclose(self) -> None:
        """Cancel the producer and wait for it to finish."""
        self.cancel()
        if self._task is not None:
            await asyncio.wait([self._task])

    async def error(self) -> Exception | None:
        """Return the terminal error, or None if the call succeeded or was cancelled.

        Waits until the producer publishes an error or closes the channel.
        """
        try:
            return await self.errors.receive()
        except ChannelClosedError:
            return None

    async def text(self) -> str:
        """Collect every chunk and return the joined text, raising the terminal error."""
        parts = [chunk async for chunk in self.chunks]
        error = await self.error()
        if error is not None:
            raise error
        return "".join(parts)

    def __aiter__(self) -> Channel[str]:
        return self.chunks

    async def __aenter__(self) -> StreamSession:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()
