"""FastAPI auth dependencies.

Two places a dashboard token can come from:
1. `Authorization: Bearer <jwt>` header (API clients, tests)
2. The session cookie (browsers — EventSource cannot set headers)
"""

from dataclasses import dataclass
from typing import Optional

from fastapi import HTTPException, Request

from estetica.auth.jwt import TokenError, verify_token
from estetica.config import settings


@dataclass(frozen=True)
class CurrentUser:
    """The authenticated staff member making the request."""

    id: str
    email: Optional[str] = None
    role: Optional[str] = None
    name: Optional[str] = None


def _extract_token(request: Request) -> Optional[str]:
    authorization = request.headers.get("Authorization", "")
    if authorization.startswith("Bearer "):
        return authorization[7:]
    return request.cookies.get(settings.session_cookie_name)


async def get_current_user(request: Request) -> CurrentUser:
    """Resolve the current user (required — 401 if missing or invalid)."""
    token = _extract_token(request)
    if not token:
        raise HTTPException(
            status_code=401,
            detail="Missing token",
            headers={"WWW-Authenticate": "Bearer"},
        )
    try:
        payload = verify_token(token)
    except TokenError as e:
        raise HTTPException(
            status_code=401,
            detail=str(e),
            headers={"WWW-Authenticate": "Bearer"},
        )
    return CurrentUser(
        id=str(payload["id"]),
        email=payload.get("email"),
        role=payload.get("role"),
        name=payload.get("name"),
    )
