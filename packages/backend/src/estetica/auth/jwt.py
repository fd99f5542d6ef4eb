"""JWT session token creation and verification.

The token carries the staff member's id, email and role. The same secret
signs tokens in the main salon API.
"""

from datetime import datetime, timedelta, timezone
from typing import Optional

import jwt

from estetica.config import settings


class TokenError(Exception):
    """Raised when token verification fails."""


def create_session_token(
    user_id: str,
    email: str,
    role: str,
    name: Optional[str] = None,
    expires_minutes: int = 60 * 24 * 7,
) -> str:
    """Create a signed session token (one week by default, like the cookie)."""
    now = datetime.now(timezone.utc)
    payload = {
        "id": user_id,
        "email": email,
        "role": role,
        "name": name,
        "iat": now,
        "exp": now + timedelta(minutes=expires_minutes),
    }
    return jwt.encode(payload, settings.jwt_secret, algorithm=settings.jwt_algorithm)


def verify_token(token: str) -> dict:
    """Verify and decode a session token.

    Returns the payload dict on success.
    Raises TokenError on failure.
    """
    try:
        payload = jwt.decode(
            token, settings.jwt_secret, algorithms=[settings.jwt_algorithm]
        )
    except jwt.ExpiredSignatureError:
        raise TokenError("Token has expired")
    except jwt.InvalidTokenError as e:
        raise TokenError(f"Invalid token: {e}")

    if "id" not in payload:
        raise TokenError("Invalid token: missing user id")
    return payload
