"""Runtime configuration.

Settings are read from environment variables once, at application
creation, and passed explicitly to the components that need them.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field

# Default database location (SQLite file relative to the working directory)
DEFAULT_DATABASE_URL = "sqlite:///data/opensurvey.db"

# Raw fetches are memoised for two minutes, like the analytics view
DEFAULT_CACHE_TTL_SECONDS = 120.0

DEFAULT_TOP_N = 10
DEFAULT_MIN_TERM_LENGTH = 4

DEFAULT_CORS_ORIGINS = (
    "http://localhost:3000",  # Next.js dev server
    "http://127.0.0.1:3000",
)


@dataclass(frozen=True)
class Settings:
    """Application settings.

    Attributes:
        database_url: SQLAlchemy URL of the response store.
        cache_ttl_seconds: Lifetime of memoised response fetches.
        top_n: Default number of entries per ranking.
        min_term_length: Shortest token kept in term frequencies.
        cors_origins: Origins allowed to call the API from a browser.
        log_level: Level applied to the ``opensurvey`` logger.
    """

    database_url: str = DEFAULT_DATABASE_URL
    cache_ttl_seconds: float = DEFAULT_CACHE_TTL_SECONDS
    top_n: int = DEFAULT_TOP_N
    min_term_length: int = DEFAULT_MIN_TERM_LENGTH
    cors_origins: tuple[str, ...] = field(default=DEFAULT_CORS_ORIGINS)
    log_level: str = "INFO"


def _split_origins(raw: str | None) -> tuple[str, ...]:
    if not raw:
        return DEFAULT_CORS_ORIGINS
    return tuple(origin.strip() for origin in raw.split(",") if origin.strip())


def load_settings() -> Settings:
    """Build settings from ``OPENSURVEY_*`` environment variables.

    Returns:
        Settings with defaults for every unset variable.
    """
    return Settings(
        database_url=os.environ.get("OPENSURVEY_DATABASE_URL", DEFAULT_DATABASE_URL),
        cache_ttl_seconds=float(
            os.environ.get("OPENSURVEY_CACHE_TTL_SECONDS", DEFAULT_CACHE_TTL_SECONDS)
        ),
        top_n=int(os.environ.get("OPENSURVEY_TOP_N", DEFAULT_TOP_N)),
        min_term_length=int(
            os.environ.get("OPENSURVEY_MIN_TERM_LENGTH", DEFAULT_MIN_TERM_LENGTH)
        ),
        cors_origins=_split_origins(os.environ.get("OPENSURVEY_CORS_ORIGINS")),
        log_level=os.environ.get("OPENSURVEY_LOG_LEVEL", "INFO").upper(),
    )
