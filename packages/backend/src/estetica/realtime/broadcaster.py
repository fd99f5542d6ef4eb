"""Event broadcaster — fan-out entry point for domain events.

Learn: Producers call broadcast() right after a state change (a booking was
created, a payment was recorded...). The message is serialized once and
the same frame is handed to every matching subscriber. broadcast() returns
nothing and never raises for a bad connection: whoever produces the event
must not depend on the health of any client.
"""

from datetime import datetime, timezone
from typing import Any, Callable

from estetica.realtime.framing import format_frame, iso_timestamp
from estetica.realtime.registry import Audience, AudienceTarget, ClientRegistry, Subscriber

TARGETS: tuple[str, ...] = ("public", "auth", "all")


def should_deliver(target: AudienceTarget, audience: Audience) -> bool:
    """Audience matching rule.

    `auth` broadcasts reach only dashboard (auth) subscribers. `public`
    broadcasts reach every subscriber, dashboard ones included, exactly like
    `all`. Dashboard clients rely on receiving public catalogue events.
    """
    return (
        target == "all"
        or (target == "auth" and audience == "auth")
        or target == "public"
    )


class EventBroadcaster:
    """Serializes an event once and fans it out through the registry."""

    def __init__(
        self,
        registry: ClientRegistry,
        clock: Callable[[], datetime] = lambda: datetime.now(timezone.utc),
    ):
        self.registry = registry
        self.clock = clock

    def broadcast(
        self,
        name: str,
        payload: Any = None,
        target: AudienceTarget = "all",
    ) -> None:
        if target not in TARGETS:
            raise ValueError(f"Unknown broadcast target: {target!r}")

        frame = format_frame(
            name,
            {"event": name, "payload": payload, "at": iso_timestamp(self.clock())},
        )

        def deliver(subscriber: Subscriber) -> None:
            if should_deliver(target, subscriber.audience):
                self.registry.send(subscriber, frame)

        self.registry.for_each(deliver)
