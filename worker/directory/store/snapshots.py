"""Per-host view over the key-value store."""

import json
import logging
from typing import Any, Dict, List, Optional

from directory.models import SiteKeys, SiteSnapshot

logger = logging.getLogger(__name__)


def normalize_host(host: Optional[str]) -> str:
    """Lowercase a request host and drop any port."""
    value = (host or "").strip().lower()
    if value.startswith("[") and "]" in value:
        return value[: value.index("]") + 1]
    return value.split(":", 1)[0]


class SiteSnapshotRepository:
    """Reads and writes the snapshot keys of one site.

    ``store`` is anything with ``get``/``put``/``delete`` on string keys.
    """

    def __init__(self, store, host: str) -> None:
        self.store = store
        self.host = normalize_host(host)
        self.keys = SiteKeys.for_host(self.host)

    def stored_etag(self) -> Optional[str]:
        return self.store.get(self.keys.etag)

    def stored_updated_at(self) -> Optional[str]:
        return self.store.get(self.keys.updated)

    def read(self) -> SiteSnapshot:
        raw = self.store.get(self.keys.data)
        return SiteSnapshot(
            companies=_decode_companies(raw, self.host),
            etag=self.store.get(self.keys.etag),
            updated_at=self.store.get(self.keys.updated),
            last_error=self.store.get(self.keys.last_error),
        )

    def write_snapshot(self, companies: List[Dict[str, Any]], etag: str, updated_at: str) -> None:
        """Persist a new generation, then clear the recorded error.

        Order is data, etag, updated, lastError; a failure part way leaves
        the keys mixed until the next successful refresh.
        """
        self.store.put(self.keys.data, json.dumps(companies, ensure_ascii=False, separators=(",", ":")))
        self.store.put(self.keys.etag, etag)
        self.store.put(self.keys.updated, updated_at)
        self.store.delete(self.keys.last_error)
        logger.info("Wrote snapshot for %s: count=%d etag=%s", self.host, len(companies), etag)

    def record_error(self, message: str) -> None:
        self.store.put(self.keys.last_error, message)
        logger.warning("Recorded refresh error for %s: %s", self.host, message)


def _decode_companies(raw: Optional[str], host: str) -> Optional[List[Dict[str, Any]]]:
    if raw is None:
        return None
    try:
        companies = json.loads(raw)
    except ValueError:
        logger.error("Stored snapshot for %s is not valid JSON", host)
        return []
    if not isinstance(companies, list):
        logger.error("Stored snapshot for %s is not a list", host)
        return []
    return companies
