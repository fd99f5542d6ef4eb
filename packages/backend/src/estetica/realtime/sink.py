"""Per-subscriber write end of an event stream.

Learn: The HTTP response is owned by Starlette, so broadcasters never touch
the socket. Instead each subscriber gets a bounded queue of encoded frames
that its streaming response drains. Writing is put_nowait, so a broadcast
never suspends. A consumer that stops reading fills its queue, and the next
write raises SinkOverflowError — that is how a stalled connection is
detected and treated as a lost subscriber.
"""

import asyncio
from typing import AsyncIterator

# Marks end-of-stream inside the queue
_EOF = object()


class SinkError(Exception):
    """Raised when a frame cannot be written to a subscriber."""


class SinkClosedError(SinkError):
    """The sink was already closed."""


class SinkOverflowError(SinkError):
    """The subscriber is not draining its stream fast enough."""


class StreamSink:
    """Bounded, non-blocking frame buffer feeding one streaming response."""

    def __init__(self, max_pending: int = 256):
        if max_pending < 1:
            raise ValueError("max_pending must be at least 1")
        self.max_pending = max_pending
        self._queue: asyncio.Queue = asyncio.Queue(maxsize=max_pending)
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def pending(self) -> int:
        return self._queue.qsize()

    def write(self, frame: str) -> None:
        """Buffer one frame for delivery. Never suspends."""
        if self._closed:
            raise SinkClosedError("stream closed")
        try:
            self._queue.put_nowait(frame)
        except asyncio.QueueFull:
            raise SinkOverflowError(
                f"{self.max_pending} frames pending, consumer stalled"
            )

    def close(self) -> None:
        """Stop accepting frames and end the stream. Idempotent.

        Frames already buffered are still streamed; if the buffer is full
        they are dropped to make room for the end marker.
        """
        if self._closed:
            return
        self._closed = True
        while True:
            try:
                self._queue.put_nowait(_EOF)
                return
            except asyncio.QueueFull:
                self._queue.get_nowait()

    async def __aiter__(self) -> AsyncIterator[str]:
        while True:
            frame = await self._queue.get()
            if frame is _EOF:
                return
            yield frame
