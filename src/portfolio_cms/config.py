"""Runtime settings loaded from environment variables.

A ``.env`` file in the working directory is loaded on import so local
development can keep secrets out of the shell profile.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache

from dotenv import load_dotenv

load_dotenv()

_DEV_ACCESS_SECRET = "dev-access-secret-change-me-0123456789abcdef"
_DEV_REFRESH_SECRET = "dev-refresh-secret-change-me-0123456789abcdef"


@dataclass(frozen=True)
class Settings:
    """Application settings.

    Attributes:
        jwt_access_secret: HMAC key used to sign access tokens.
        jwt_refresh_secret: HMAC key used to sign refresh tokens.
        jwt_algorithm: JWT signing algorithm.
        access_token_minutes: Lifetime of an access token.
        refresh_token_days: Lifetime of a refresh token.
        email_verify_expiry_hours: Lifetime of an email verification token.
        frontend_url: Public frontend origin (CORS and verification links).
        log_level: Root logging level name.
    """

    jwt_access_secret: str = _DEV_ACCESS_SECRET
    jwt_refresh_secret: str = _DEV_REFRESH_SECRET
    jwt_algorithm: str = "HS256"
    access_token_minutes: int = 15
    refresh_token_days: int = 7
    email_verify_expiry_hours: int = 24
    frontend_url: str = "http://localhost:3001"
    log_level: str = "INFO"


def _int_env(name: str, default: int) -> int:
    raw = os.environ.get(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError as exc:
        raise ValueError(f"Environment variable {name} must be an integer, got {raw!r}") from exc


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Build settings from the environment (cached for the process)."""
    return Settings(
        jwt_access_secret=os.environ.get("JWT_ACCESS_SECRET", _DEV_ACCESS_SECRET),
        jwt_refresh_secret=os.environ.get("JWT_REFRESH_SECRET", _DEV_REFRESH_SECRET),
        jwt_algorithm=os.environ.get("JWT_ALGORITHM", "HS256"),
        access_token_minutes=_int_env("JWT_ACCESS_EXPIRES_MINUTES", 15),
        refresh_token_days=_int_env("JWT_REFRESH_EXPIRES_DAYS", 7),
        email_verify_expiry_hours=_int_env("EMAIL_VERIFY_EXPIRY_HOURS", 24),
        frontend_url=os.environ.get("FRONTEND_URL", "http://localhost:3001"),
        log_level=os.environ.get("LOG_LEVEL", "INFO").upper(),
    )
