"""Application configuration helpers."""

import logging
import os
from dataclasses import dataclass
from functools import lru_cache

from dotenv import load_dotenv

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Settings:
    database_url: str
    refresh_key: str
    sites_registry_path: str = "sites.json"
    worker_port: int = 8080
    upstream_timeout: float = 20.0
    last_error_max_chars: int = 300
    stale_after_minutes: int = 120
    county_domain_suffix: str = ".mineralrightsforum.com"


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Load settings from environment variables with sensible defaults."""
    load_dotenv()

    database_url = os.getenv("DATABASE_URL", "")
    refresh_key = os.getenv("REFRESH_KEY", "")
    sites_registry_path = os.getenv("SITES_REGISTRY_PATH", "sites.json")
    worker_port = int(os.getenv("WORKER_PORT") or os.getenv("PORT") or "8080")
    upstream_timeout = float(os.getenv("UPSTREAM_TIMEOUT_SECONDS", "20"))
    last_error_max_chars = int(os.getenv("LAST_ERROR_MAX_CHARS", "300"))
    stale_after_minutes = int(os.getenv("STALE_AFTER_MINUTES", "120"))
    county_domain_suffix = os.getenv("COUNTY_DOMAIN_SUFFIX", ".mineralrightsforum.com").strip().lower()

    if not database_url:
        logger.warning("DATABASE_URL is not set; snapshot store operations will fail.")
    if not refresh_key:
        logger.warning("REFRESH_KEY is not configured; every refresh request will be rejected.")

    return Settings(
        database_url=database_url,
        refresh_key=refresh_key,
        sites_registry_path=sites_registry_path,
        worker_port=worker_port,
        upstream_timeout=upstream_timeout,
        last_error_max_chars=last_error_max_chars,
        stale_after_minutes=stale_after_minutes,
        county_domain_suffix=county_domain_suffix,
    )
