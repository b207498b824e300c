"""Snapshot health report used by monitors."""

import logging
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional, Tuple

from directory.store.snapshots import SiteSnapshotRepository

logger = logging.getLogger(__name__)


def parse_timestamp(value: Optional[str]) -> Optional[datetime]:
    if not value:
        return None
    text = value.strip()
    if text.endswith("Z") or text.endswith("z"):
        text = text[:-1] + "+00:00"
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def is_stale(updated_at: Optional[str], max_age_minutes: int, now: Optional[datetime] = None) -> bool:
    """Missing or unparseable timestamps count as stale."""
    parsed = parse_timestamp(updated_at)
    if parsed is None:
        return True
    current = now or datetime.now(timezone.utc)
    return current - parsed > timedelta(minutes=max_age_minutes)


def build_health_report(
    repository: SiteSnapshotRepository,
    stale_after_minutes: int,
    now: Optional[datetime] = None,
) -> Tuple[Dict[str, Any], int]:
    """Return ``(body, http_status)``; 503 when there is no data or an error is recorded."""
    snapshot = repository.read()
    body: Dict[str, Any] = {
        "ok": True,
        "host": repository.host,
        "updated_at": snapshot.updated_at,
        "etag": snapshot.etag,
        "count": snapshot.count,
        "stale": is_stale(snapshot.updated_at, stale_after_minutes, now=now),
    }
    if snapshot.last_error:
        body["last_error"] = snapshot.last_error

    status = 503 if snapshot.count == 0 or snapshot.last_error else 200
    if status != 200:
        logger.info("Health degraded for %s: count=%d last_error=%s", repository.host, snapshot.count, bool(snapshot.last_error))
    return body, status
