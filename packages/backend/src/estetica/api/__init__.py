"""API route aggregation.

All routers registered here get mounted in main.py. Auth is applied per
route: only the dashboard stream needs a staff session.
"""

from fastapi import APIRouter

from estetica.api.events import router as events_router
from estetica.api.health import router as health_router

api_router = APIRouter(prefix="/api")

api_router.include_router(health_router, tags=["health"])
api_router.include_router(events_router, tags=["events"])
