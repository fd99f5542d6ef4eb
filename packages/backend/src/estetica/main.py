"""FastAPI application factory.

Learn: create_app() returns a configured FastAPI instance with exactly
one EventHub on app.state. Lifespan binds the hub to the running loop at
startup and closes every open stream at shutdown, so the server does not
wait forever on connections that never end by themselves.
"""

import asyncio
from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from estetica import __version__
from estetica.api import api_router
from estetica.config import settings
from estetica.middleware.request_id import RequestIdMiddleware
from estetica.realtime.hub import EventHub

logger = structlog.get_logger()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup and shutdown lifecycle."""
    logger.info(
        "estetica.starting",
        version=__version__,
        environment=settings.environment,
        port=settings.port,
    )
    hub: EventHub = app.state.event_hub
    hub.bind_loop(asyncio.get_running_loop())

    yield

    logger.info("estetica.shutdown", subscribers=hub.subscriber_count)
    await hub.aclose()


def create_app(hub: EventHub | None = None) -> FastAPI:
    """Build and return the FastAPI application."""
    app = FastAPI(
        title="Estetica Events",
        description="Real-time event stream for the salon landing page and dashboard",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.event_hub = hub if hub is not None else EventHub(
        heartbeat_interval=settings.heartbeat_interval_seconds,
        max_pending=settings.stream_max_pending_frames,
    )

    # Request flow: RequestId → CORS → handler
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_middleware(RequestIdMiddleware)

    app.include_router(api_router)

    return app


# Default app instance (used by uvicorn: estetica.main:app)
app = create_app()
