"""Connection lifecycle — registration handshake and disconnect cleanup.

Learn: A subscriber goes registering → open → closed, and never back.

register() builds the streaming response for one client:
1. Creates the subscriber's sink and adds it to the registry
2. Queues the `connected` frame, so headers and first bytes go out at once
3. Starts the heartbeat (no-op if already running)
4. Hooks cleanup to both ends of the exchange: the body iterator's
   `finally` (stream closed or client gone) and a background task that
   runs when the request/response cycle finishes

Both hooks usually fire for the same disconnect, so cleanup is idempotent.
"""

from datetime import datetime, timezone
from typing import AsyncIterator, Callable

import structlog
from starlette.background import BackgroundTask
from starlette.requests import Request
from starlette.responses import StreamingResponse

from estetica.events.types import CONNECTED
from estetica.realtime.framing import format_frame, iso_timestamp
from estetica.realtime.heartbeat import HeartbeatScheduler
from estetica.realtime.registry import Audience, ClientRegistry
from estetica.realtime.sink import StreamSink

logger = structlog.get_logger()

STREAM_HEADERS = {
    "Cache-Control": "no-cache",
    "Connection": "keep-alive",
    "X-Accel-Buffering": "no",
}


class ConnectionLifecycle:
    """Turns an inbound request into a registered, streaming subscriber."""

    def __init__(
        self,
        registry: ClientRegistry,
        heartbeat: HeartbeatScheduler,
        max_pending: int = 256,
        clock: Callable[[], datetime] = lambda: datetime.now(timezone.utc),
    ):
        self.registry = registry
        self.heartbeat = heartbeat
        self.max_pending = max_pending
        self.clock = clock

    def open(self, audience: Audience) -> tuple[str, StreamSink, Callable[[], None]]:
        """Register a subscriber and greet it.

        Returns (subscriber_id, sink, cleanup). Transport-independent part
        of register(); the caller owns wiring cleanup to its close signals.
        """
        sink = StreamSink(max_pending=self.max_pending)
        subscriber_id = self.registry.register(sink, audience)
        subscriber = self.registry.get(subscriber_id)
        greeting = {"connectedAt": iso_timestamp(self.clock()), "audience": audience}
        self.registry.send(subscriber, format_frame(CONNECTED, greeting))
        self.heartbeat.start()

        logger.info(
            "events.client_connected",
            subscriber_id=subscriber_id,
            audience=audience,
            subscribers=len(self.registry),
        )

        def cleanup() -> None:
            removed = self.registry.remove(subscriber_id)
            sink.close()
            if removed:
                logger.info(
                    "events.client_disconnected",
                    subscriber_id=subscriber_id,
                    audience=audience,
                    subscribers=len(self.registry),
                )

        return subscriber_id, sink, cleanup

    def register(self, request: Request, audience: Audience) -> StreamingResponse:
        """Register the client behind ``request`` and return its event stream."""
        subscriber_id, sink, cleanup = self.open(audience)

        async def stream() -> AsyncIterator[str]:
            try:
                async for frame in sink:
                    yield frame
            finally:
                cleanup()

        async def on_request_finished() -> None:
            cleanup()

        response = StreamingResponse(
            stream(),
            media_type="text/event-stream",
            headers=STREAM_HEADERS,
            background=BackgroundTask(on_request_finished),
        )
        # Route handlers can read the id back, e.g. for logging
        request.state.subscriber_id = subscriber_id
        return response
