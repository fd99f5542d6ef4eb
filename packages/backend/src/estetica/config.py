"""Application configuration via environment variables.

Uses pydantic-settings to load config from env vars with ESTETICA_ prefix.
No config files — everything comes from the environment.
"""

from pydantic import model_validator
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """All app configuration. Set via ESTETICA_* env vars."""

    # Server
    environment: str = "development"
    debug: bool = False
    host: str = "0.0.0.0"
    port: int = 3000

    # CORS — the dashboard's EventSource sends cookies, so origins must be explicit
    cors_origins: list[str] = [
        "http://localhost:5173",
        "http://localhost:5174",
    ]

    # Auth (dashboard session)
    jwt_secret: str = "change-me-in-production"
    jwt_algorithm: str = "HS256"
    session_cookie_name: str = "salon_session"

    # Event stream
    heartbeat_interval_seconds: float = 30.0
    stream_max_pending_frames: int = 256

    model_config = {"env_prefix": "ESTETICA_"}

    @model_validator(mode="after")
    def validate_production_settings(self):
        """Refuse to run outside development with the placeholder JWT secret."""
        if (
            self.environment != "development"
            and self.jwt_secret == "change-me-in-production"
        ):
            raise ValueError(
                "ESTETICA_JWT_SECRET must be set to a secure value in "
                "non-development environments."
            )
        return self


settings = Settings()
