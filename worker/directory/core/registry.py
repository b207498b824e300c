"""Site registry: maps hostnames to directory site configuration.

The registry is a JSON object keyed by hostname::

    {
      "reeves-county-texas.mineralrightsforum.com": {
        "sheet": {"url": "https://script.google.com/macros/s/.../exec"},
        "page_title": "Reeves County, TX Mineral Services Directory",
        "serving_line": "Serving mineral owners in Reeves County",
        "return_url": "https://www.mineralrightsforum.com/",
        "directory_intro": "...",
        "seo": {"title": "...", "description": "..."}
      }
    }
"""

import json
import logging
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict, Optional

from directory.core.config import get_settings
from directory.core.errors import ConfigurationError
from directory.models import SiteConfig
from directory.store.snapshots import normalize_host

logger = logging.getLogger(__name__)


@lru_cache(maxsize=4)
def _read_registry(path: str) -> Dict[str, Dict[str, Any]]:
    try:
        with open(path, "r", encoding="utf-8") as fh:
            data = json.load(fh)
    except FileNotFoundError as exc:
        raise ConfigurationError(f"site registry not found: {path}") from exc
    except ValueError as exc:
        raise ConfigurationError(f"site registry is not valid JSON: {path}") from exc

    if not isinstance(data, dict):
        raise ConfigurationError("site registry must be a JSON object keyed by host")

    logger.info("Loaded %d sites from %s", len(data), path)
    return {normalize_host(host): entry for host, entry in data.items() if isinstance(entry, dict)}


def load_sites_registry(path: Optional[str] = None) -> Dict[str, Dict[str, Any]]:
    """Return the raw registry mapping, cached per path."""
    registry_path = path or get_settings().sites_registry_path
    return _read_registry(str(Path(registry_path)))


def get_site_config(sites: Dict[str, Dict[str, Any]], host: str) -> SiteConfig:
    """Resolve ``host`` to its SiteConfig or raise ConfigurationError."""
    key = normalize_host(host)
    if not key:
        raise ConfigurationError("request host is empty")

    entry = sites.get(key)
    if entry is None:
        raise ConfigurationError(f"Unknown site: {key}")

    sheet = entry.get("sheet") or {}
    feed_url = sheet.get("url") if isinstance(sheet, dict) else None
    if not feed_url:
        raise ConfigurationError(f"Site {key} has no sheet.url configured")

    seo = entry.get("seo")
    return SiteConfig(
        host=key,
        feed_url=str(feed_url),
        page_title=str(entry.get("page_title") or ""),
        serving_line=str(entry.get("serving_line") or ""),
        return_url=str(entry.get("return_url") or ""),
        directory_intro=str(entry.get("directory_intro") or ""),
        seo=seo if isinstance(seo, dict) else {},
        raw=entry,
    )


def resolve_site(host: str, path: Optional[str] = None) -> SiteConfig:
    return get_site_config(load_sites_registry(path), host)
