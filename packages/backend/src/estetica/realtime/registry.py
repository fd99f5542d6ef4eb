"""Client registry — the live set of event-stream subscribers.

Learn: Presence in the registry is the only liveness signal. A subscriber
is added once at registration and removed either by connection cleanup or
by the first failed write, whichever comes first. Everything runs on the
event loop thread, so no locking is needed: each mutation completes before
another coroutine can run.
"""

import uuid
from dataclasses import dataclass
from typing import Callable, Literal

import structlog

from estetica.realtime.sink import SinkError, StreamSink

logger = structlog.get_logger()

Audience = Literal["public", "auth"]
AudienceTarget = Literal["public", "auth", "all"]

AUDIENCES: tuple[str, ...] = ("public", "auth")


@dataclass(frozen=True)
class Subscriber:
    """One registered long-lived connection."""

    id: str
    audience: Audience
    sink: StreamSink


class ClientRegistry:
    """Owns every subscriber's sink; the only component that writes to one."""

    def __init__(self):
        self._subscribers: dict[str, Subscriber] = {}

    def register(self, sink: StreamSink, audience: Audience) -> str:
        """Insert a new subscriber and return its fresh id."""
        if audience not in AUDIENCES:
            raise ValueError(f"Unknown audience: {audience!r}")
        subscriber_id = str(uuid.uuid4())
        self._subscribers[subscriber_id] = Subscriber(subscriber_id, audience, sink)
        return subscriber_id

    def remove(self, subscriber_id: str) -> bool:
        """Drop a subscriber. Returns False if it was already gone."""
        return self._subscribers.pop(subscriber_id, None) is not None

    def get(self, subscriber_id: str) -> Subscriber | None:
        return self._subscribers.get(subscriber_id)

    def for_each(self, visitor: Callable[[Subscriber], None]) -> None:
        """Visit every subscriber registered at the time of the call.

        Iterates a snapshot, so visitors may remove entries (directly or
        via a failed send). Entries removed mid-iteration are skipped.
        """
        for subscriber in list(self._subscribers.values()):
            if subscriber.id in self._subscribers:
                visitor(subscriber)

    def send(self, subscriber: Subscriber, frame: str) -> None:
        """Write a frame; on failure the subscriber is removed and closed."""
        try:
            subscriber.sink.write(frame)
        except SinkError as e:
            if self.remove(subscriber.id):
                logger.info(
                    "events.delivery_failed",
                    subscriber_id=subscriber.id,
                    audience=subscriber.audience,
                    reason=str(e),
                )
            try:
                subscriber.sink.close()
            except Exception:
                # The connection is defunct either way
                logger.debug("events.close_failed", subscriber_id=subscriber.id, exc_info=True)

    def size(self) -> int:
        return len(self._subscribers)

    def __len__(self) -> int:
        return len(self._subscribers)

    def __contains__(self, subscriber_id: object) -> bool:
        return subscriber_id in self._subscribers
