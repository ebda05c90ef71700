"""Configuration for the CertPrep API server."""

import logging
import os
from dataclasses import dataclass, field
from typing import List, Optional


def _env_flag(name: str) -> Optional[bool]:
    value = os.environ.get(name)
    if value is None:
        return None
    return value.strip().lower() in ("1", "true", "yes")


@dataclass
class Settings:
    """
    Server settings.

    Unset fields resolve from environment variables in __post_init__.
    Every field is overridable at construction for testing.
    """
    database_url: Optional[str] = None
    session_ttl_hours: int = 24 * 7
    cookie_secure: bool = False
    cors_origins: List[str] = field(default_factory=list)
    log_level: Optional[str] = None

    def __post_init__(self):
        if self.database_url is None:
            self.database_url = os.environ.get("DATABASE_URL", "sqlite:///./certprep.db")

        env_ttl = os.environ.get("SESSION_TTL_HOURS")
        if env_ttl is not None:
            try:
                self.session_ttl_hours = int(env_ttl)
            except ValueError:
                pass

        secure = _env_flag("COOKIE_SECURE")
        if secure is not None:
            self.cookie_secure = secure

        if not self.cors_origins:
            raw = os.environ.get("CORS_ORIGINS", "http://localhost:3000")
            self.cors_origins = [o.strip() for o in raw.split(",") if o.strip()]

        if self.log_level is None:
            self.log_level = os.environ.get("LOG_LEVEL", "INFO").upper()


def configure_logging(settings: Settings) -> None:
    """Apply the configured level to the root logger (no-op if handlers exist)."""
    level = getattr(logging, settings.log_level or "INFO", logging.INFO)
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    logging.getLogger("certprep").setLevel(level)
