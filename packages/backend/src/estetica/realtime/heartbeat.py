"""Heartbeat scheduler — keeps idle event streams from being reclaimed.

Learn: Proxies and load balancers drop connections that stay silent too
long. Every interval a `ping` frame goes to every subscriber through the
same failure-tolerant send path as regular broadcasts, which also weeds
out dead connections.

The scheduler starts lazily with the first subscriber and stops itself
on the first tick that finds the registry empty:

  idle → running (start) → idle (tick sees no subscribers)

It runs as a plain asyncio task, so it never keeps the process alive:
shutdown cancels it together with everything else on the loop.
"""

import asyncio
import contextvars
from datetime import datetime, timezone
from typing import Callable, Optional

import structlog

from estetica.events.types import PING
from estetica.realtime.framing import format_frame, iso_timestamp
from estetica.realtime.registry import ClientRegistry

logger = structlog.get_logger()


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class HeartbeatScheduler:
    """Periodic ping over a ClientRegistry, active only while it has subscribers."""

    def __init__(
        self,
        registry: ClientRegistry,
        interval: float = 30.0,
        clock: Callable[[], datetime] = _utcnow,
    ):
        self.registry = registry
        self.interval = interval
        self.clock = clock
        self._task: Optional[asyncio.Task] = None

    @property
    def running(self) -> bool:
        return self._task is not None

    def start(self) -> None:
        """Arm the periodic timer unless it is already armed."""
        if self._task is not None:
            return
        # Fresh context: the first subscriber's request_id must not leak into ticks
        self._task = asyncio.get_running_loop().create_task(
            self._run(), name="estetica-heartbeat", context=contextvars.Context()
        )
        logger.info("heartbeat.started", interval=self.interval)

    def tick(self) -> None:
        """Ping every subscriber once."""
        frame = format_frame(PING, {"at": iso_timestamp(self.clock())})
        self.registry.for_each(lambda subscriber: self.registry.send(subscriber, frame))

    async def _run(self) -> None:
        try:
            while True:
                await asyncio.sleep(self.interval)
                try:
                    self.tick()
                except Exception:
                    logger.exception("heartbeat.error")
                if len(self.registry) == 0:
                    break
        finally:
            if self._task is asyncio.current_task():
                self._task = None
                logger.info("heartbeat.stopped")

    async def cancel(self) -> None:
        """Cancel a running timer. Used only when the whole hub shuts down."""
        task = self._task
        if task is None:
            return
        task.cancel()
        try:
            await task
        except asyncio.CancelledError:
            pass
        if self._task is task:
            self._task = None
