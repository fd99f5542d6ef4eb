"""Test fixtures — a fresh EventHub per test, plus an app wired to it.

Learn: The hub is normally built once in create_app(). Tests build their
own with a fixed clock and a short heartbeat so timestamps are stable and
heartbeat behaviour can be observed in milliseconds rather than seconds.
"""

import asyncio
import json
from datetime import datetime, timezone

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from estetica.main import create_app
from estetica.realtime.hub import EventHub
from estetica.realtime.sink import SinkClosedError

FIXED_NOW = datetime(2025, 3, 1, 14, 5, 9, 120000, tzinfo=timezone.utc)
FIXED_NOW_ISO = "2025-03-01T14:05:09.120Z"


def fixed_clock() -> datetime:
    return FIXED_NOW


class RecordingSink:
    """Stand-in sink that records frames and can be told to start failing."""

    def __init__(self):
        self.frames: list[str] = []
        self.fail_writes = False
        self.close_calls = 0
        self.closed = False

    def write(self, frame: str) -> None:
        if self.fail_writes or self.closed:
            raise SinkClosedError("connection reset")
        self.frames.append(frame)

    def close(self) -> None:
        self.close_calls += 1
        self.closed = True

    @property
    def events(self) -> list[str]:
        return [name for name, _ in parse_frames("".join(self.frames))]


class BrokenCloseSink(RecordingSink):
    """Sink whose close() itself blows up."""

    def close(self) -> None:
        self.close_calls += 1
        raise RuntimeError("socket already gone")


def parse_frames(text: str) -> list[tuple[str, dict]]:
    """Split an event-stream body into (event name, decoded data) pairs."""
    frames = []
    for block in text.split("\n\n"):
        if not block:
            continue
        lines = dict(line.split(": ", 1) for line in block.split("\n"))
        frames.append((lines["event"], json.loads(lines["data"])))
    return frames


async def wait_for_subscribers(hub: EventHub, count: int, timeout: float = 2.0) -> None:
    """Wait until the hub has exactly ``count`` open streams."""

    async def poll():
        while hub.subscriber_count != count:
            await asyncio.sleep(0.01)

    await asyncio.wait_for(poll(), timeout)


@pytest.fixture()
def recording_sink():
    return RecordingSink()


@pytest_asyncio.fixture()
async def hub():
    """Fresh hub; any open streams and the heartbeat are torn down afterwards."""
    event_hub = EventHub(heartbeat_interval=30.0, max_pending=16, clock=fixed_clock)
    yield event_hub
    await event_hub.aclose()


@pytest_asyncio.fixture()
async def client(hub):
    """HTTP client for an app whose routes use the test's hub."""
    app = create_app(hub)
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
