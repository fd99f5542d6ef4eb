"""Health check endpoint."""

from fastapi import APIRouter, Depends

from estetica import __version__
from estetica.api.events import get_event_hub
from estetica.realtime.hub import EventHub

router = APIRouter()


@router.get("/health")
async def health_check(hub: EventHub = Depends(get_event_hub)):
    """Report server status and the number of open event streams."""
    return {
        "status": "ok",
        "version": __version__,
        "subscribers": hub.subscriber_count,
    }
