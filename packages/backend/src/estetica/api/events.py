"""Event stream endpoints — Server-Sent Events for landing and dashboard.

Learn: Each browser opens one long-lived GET:
- /api/public/events — landing page, anyone (audience "public")
- /api/events        — admin dashboard, staff session required (audience "auth")

The handler only resolves the audience; the hub builds the streaming
response and owns the connection from there on.
"""

from fastapi import APIRouter, Depends, Request

from estetica.auth.dependencies import CurrentUser, get_current_user
from estetica.realtime.hub import EventHub

router = APIRouter()


def get_event_hub(request: Request) -> EventHub:
    """The process-wide hub created in create_app()."""
    return request.app.state.event_hub


@router.get("/public/events")
async def public_events(request: Request, hub: EventHub = Depends(get_event_hub)):
    """Subscribe to public events (service catalogue changes)."""
    return hub.register_client(request, "public")


@router.get("/events")
async def dashboard_events(
    request: Request,
    hub: EventHub = Depends(get_event_hub),
    user: CurrentUser = Depends(get_current_user),
):
    """Subscribe to dashboard events. Requires a staff session."""
    request.state.user_id = user.id
    return hub.register_client(request, "auth")
