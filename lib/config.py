"""Environment-derived settings.

Values are read once (after loading a local .env file, if any) and cached.
"""

import os
from dataclasses import dataclass
from functools import lru_cache

from dotenv import load_dotenv

DEFAULT_TASKS_API_URL = "http://localhost:5000/api"

_TRUTHY = {"1", "true", "yes", "on"}


@dataclass(frozen=True)
class Settings:
    database_url: str | None = None
    db_pool_min_size: int = 1
    db_pool_max_size: int = 5
    tasks_api_url: str = DEFAULT_TASKS_API_URL
    tasks_api_timeout: float = 10.0
    # Report a missing user record as a generic server error instead of 404
    conceal_missing_profile: bool = True


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    return raw.strip().lower() in _TRUTHY


def load_settings() -> Settings:
    """Build settings from the current process environment."""
    load_dotenv()
    return Settings(
        database_url=os.getenv("DATABASE_URL") or None,
        db_pool_min_size=int(os.getenv("DB_POOL_MIN_SIZE", "1")),
        db_pool_max_size=int(os.getenv("DB_POOL_MAX_SIZE", "5")),
        tasks_api_url=os.getenv("TASKS_API_URL") or DEFAULT_TASKS_API_URL,
        tasks_api_timeout=float(os.getenv("TASKS_API_TIMEOUT", "10")),
        conceal_missing_profile=_env_bool("CONCEAL_MISSING_PROFILE", True),
    )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return the settings singleton."""
    return load_settings()
