"""Application settings read from the environment."""

import os
from dataclasses import dataclass, field
from functools import lru_cache

from sources.ergast import ERGAST_BASE_URL

DEFAULT_CORS_ORIGINS = [
    "http://localhost:3000",  # Dashboard dev server
    "http://127.0.0.1:3000",
]


@dataclass
class AppSettings:
    """Configuration for the dashboard API."""

    # Upstream statistics API
    ergast_base_url: str = ERGAST_BASE_URL
    ergast_timeout: float = 30.0

    # Constructor featured on the dashboard widgets
    constructor_id: str = "aston_martin"

    cors_origins: list[str] = field(default_factory=lambda: list(DEFAULT_CORS_ORIGINS))

    # Optional services
    redis_url: str | None = None
    sentry_dsn: str | None = None

    # General settings
    environment: str = "development"
    log_level: str = "INFO"

    @classmethod
    def from_env(cls) -> "AppSettings":
        origins = os.getenv("CORS_ORIGINS")
        return cls(
            ergast_base_url=os.getenv("ERGAST_BASE_URL", ERGAST_BASE_URL),
            ergast_timeout=float(os.getenv("ERGAST_TIMEOUT", "30")),
            constructor_id=os.getenv("CONSTRUCTOR_ID", "aston_martin"),
            cors_origins=(
                [o.strip() for o in origins.split(",") if o.strip()]
                if origins
                else list(DEFAULT_CORS_ORIGINS)
            ),
            redis_url=os.getenv("REDIS_URL") or None,
            sentry_dsn=os.getenv("SENTRY_DSN") or None,
            environment=os.getenv("ENVIRONMENT", "development"),
            log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
        )


@lru_cache
def get_settings() -> AppSettings:
    """Settings loaded once per process."""
    return AppSettings.from_env()
