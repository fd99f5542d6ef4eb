"""Event hub — one fan-out hub per running process.

Learn: The hub wires registry, heartbeat, broadcaster and lifecycle
together. create_app() builds exactly one and stores it on app.state;
routes get it through the get_event_hub dependency and other code can be
handed a reference. Tests simply build a fresh EventHub.
"""

import asyncio
from datetime import datetime, timezone
from typing import Any, Callable, Optional

import structlog
from starlette.requests import Request
from starlette.responses import StreamingResponse

from estetica.realtime.broadcaster import EventBroadcaster
from estetica.realtime.heartbeat import HeartbeatScheduler
from estetica.realtime.lifecycle import ConnectionLifecycle
from estetica.realtime.registry import Audience, AudienceTarget, ClientRegistry

logger = structlog.get_logger()


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class EventHub:
    """Facade used by the route layer and by event producers."""

    def __init__(
        self,
        heartbeat_interval: float = 30.0,
        max_pending: int = 256,
        clock: Callable[[], datetime] = _utcnow,
    ):
        self.registry = ClientRegistry()
        self.heartbeat = HeartbeatScheduler(self.registry, heartbeat_interval, clock)
        self.broadcaster = EventBroadcaster(self.registry, clock)
        self.lifecycle = ConnectionLifecycle(
            self.registry, self.heartbeat, max_pending, clock
        )
        self._loop: Optional[asyncio.AbstractEventLoop] = None

    @property
    def subscriber_count(self) -> int:
        return len(self.registry)

    def bind_loop(self, loop: asyncio.AbstractEventLoop) -> None:
        """Remember the loop that owns the registry, for thread-safe producers."""
        self._loop = loop

    def register_client(self, request: Request, audience: Audience) -> StreamingResponse:
        return self.lifecycle.register(request, audience)

    def broadcast(
        self,
        name: str,
        payload: Any = None,
        target: AudienceTarget = "all",
    ) -> None:
        self.broadcaster.broadcast(name, payload, target)

    def broadcast_threadsafe(
        self,
        name: str,
        payload: Any = None,
        target: AudienceTarget = "all",
    ) -> None:
        """broadcast() for producers running outside the event loop thread.

        Learn: Sync FastAPI endpoints run in a worker thread. The registry is
        only ever touched from the loop, so the call is handed over with
        call_soon_threadsafe instead of running here.
        """
        if self._loop is None or self._loop.is_closed():
            self.broadcast(name, payload, target)
            return
        self._loop.call_soon_threadsafe(self.broadcast, name, payload, target)

    async def aclose(self) -> None:
        """End every open stream and stop the heartbeat. Process shutdown only."""
        count = len(self.registry)

        def close(subscriber) -> None:
            self.registry.remove(subscriber.id)
            subscriber.sink.close()

        self.registry.for_each(close)
        await self.heartbeat.cancel()
        logger.info("events.hub_closed", closed_streams=count)
