"""Application configuration.

All settings come from environment variables with development defaults so
the service starts with no configuration at all (SQLite file in the working
directory, one-week sessions and invitations).
"""

import os
from typing import List, Optional

from core.exceptions import ConfigurationError


def _int_env(key: str, default: int) -> int:
    raw = os.getenv(key)
    if raw is None or raw == "":
        return default
    try:
        return int(raw)
    except ValueError:
        raise ConfigurationError(f"{key} must be an integer, got {raw!r}", config_key=key)


def _bool_env(key: str, default: bool) -> bool:
    raw = os.getenv(key)
    if raw is None:
        return default
    return raw.strip().lower() in ("1", "true", "yes", "on")


class Settings:
    """Centralized configuration for the NutriTrack API."""

    def __init__(self) -> None:
        self.database_url: str = os.getenv("DATABASE_URL", "sqlite:///nutritrack.db")
        self.read_database_url: str = os.getenv("READ_DATABASE_URL", self.database_url)

        self.session_ttl_days: int = _int_env("SESSION_TTL_DAYS", 7)
        self.invite_ttl_days: int = _int_env("INVITE_TTL_DAYS", 7)
        self.session_cookie_name: str = os.getenv("SESSION_COOKIE_NAME", "nutritrack_sid")
        self.cookie_secure: bool = _bool_env("COOKIE_SECURE", False)

        origins = os.getenv("CORS_ORIGINS", "*")
        self.cors_origins: List[str] = [o.strip() for o in origins.split(",") if o.strip()]

        self.seed_nutritionist_email: Optional[str] = os.getenv("SEED_NUTRITIONIST_EMAIL") or None
        self.seed_nutritionist_password: Optional[str] = os.getenv("SEED_NUTRITIONIST_PASSWORD") or None
        self.seed_nutritionist_name: str = os.getenv("SEED_NUTRITIONIST_NAME", "Nutritionist")

        if self.session_ttl_days <= 0:
            raise ConfigurationError("SESSION_TTL_DAYS must be positive", config_key="SESSION_TTL_DAYS")
        if self.invite_ttl_days <= 0:
            raise ConfigurationError("INVITE_TTL_DAYS must be positive", config_key="INVITE_TTL_DAYS")


settings = Settings()
