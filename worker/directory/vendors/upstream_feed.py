"""Client for the spreadsheet-backed upstream company feed."""

import json
import logging
from typing import Any, Dict, List

import requests

from directory.core.errors import UpstreamError

logger = logging.getLogger(__name__)
_SESSION = requests.Session()
_NO_CACHE_HEADERS = {"Cache-Control": "no-cache", "Pragma": "no-cache", "Accept": "application/json"}


def _clip(text: str, limit: int) -> str:
    return text[:limit] if limit > 0 else text


def fetch_feed(url: str, timeout: float = 20.0, max_chars: int = 300) -> Dict[str, Any]:
    """GET the feed bypassing caches and return the validated payload.

    Raises UpstreamError for network failures, timeouts, non-2xx responses
    and payloads that are not ``{"ok": <truthy>, "companies": [...]}``.
    """
    try:
        response = _SESSION.get(url, headers=_NO_CACHE_HEADERS, timeout=timeout)
    except requests.Timeout as exc:
        logger.error("Upstream feed timed out after %ss: %s", timeout, url)
        raise UpstreamError("Fetch failed", _clip(f"fetch timeout: {exc}", max_chars)) from exc
    except requests.RequestException as exc:
        logger.error("Upstream feed request failed for %s: %s", url, exc)
        raise UpstreamError("Fetch failed", _clip(f"fetch error: {exc}", max_chars)) from exc

    if not 200 <= response.status_code < 300:
        body = response.text or ""
        logger.error("Upstream feed returned %s for %s", response.status_code, url)
        raise UpstreamError(
            f"Upstream error {response.status_code}",
            _clip(f"upstream {response.status_code}: {body[:max_chars]}", max_chars),
        )

    try:
        payload = response.json()
    except ValueError as exc:
        logger.error("Upstream feed returned invalid JSON for %s", url)
        raise UpstreamError("Invalid upstream JSON", _clip(f"invalid json: {exc}", max_chars)) from exc

    return validate_payload(payload, max_chars=max_chars)


def validate_payload(payload: Any, max_chars: int = 300) -> Dict[str, Any]:
    if not isinstance(payload, dict) or not payload.get("ok"):
        preview = json.dumps(payload, default=str)
        logger.warning("Upstream feed reported not ok: %s", preview[:200])
        raise UpstreamError("Upstream not ok", _clip(f"upstream not ok: {preview[:max_chars]}", max_chars))

    companies = payload.get("companies")
    if not isinstance(companies, list):
        logger.warning("Upstream feed companies is %s, expected list", type(companies).__name__)
        raise UpstreamError("Invalid companies array", "invalid companies array")
    return payload


def companies_of(payload: Dict[str, Any]) -> List[Dict[str, Any]]:
    """Company entries of a validated payload, skipping non-object rows."""
    return [row for row in payload["companies"] if isinstance(row, dict)]
