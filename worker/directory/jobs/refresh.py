"""Refresh a site's stored snapshot from its upstream feed.

Used by the ``POST /refresh`` endpoint and runnable from cron::

    python -m directory.jobs.refresh --host reeves-county-texas.mineralrightsforum.com
"""

import argparse
import hmac
import json
import logging
import sys
import time
from datetime import datetime, timezone
from typing import Optional

from directory.core.config import get_settings
from directory.core.errors import AuthorizationError, DirectoryError, UpstreamError
from directory.core.registry import load_sites_registry, get_site_config
from directory.etl.etag import choose_etag
from directory.etl.visibility import filter_visible
from directory.models import RefreshResult
from directory.store.kv import PostgresKeyValueStore
from directory.store.snapshots import SiteSnapshotRepository
from directory.vendors import upstream_feed

logger = logging.getLogger(__name__)


def utc_now_iso() -> str:
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def check_refresh_key(provided_key: Optional[str], expected_key: str) -> None:
    if not provided_key or not expected_key:
        raise AuthorizationError("Unauthorized")
    if not hmac.compare_digest(provided_key.encode("utf-8"), expected_key.encode("utf-8")):
        raise AuthorizationError("Unauthorized")


def refresh_site(host: str, provided_key: Optional[str], store=None) -> RefreshResult:
    """Pull the upstream feed for ``host`` and store it unless unchanged.

    Auth and site resolution fail before anything touches the store or the
    network. Upstream failures are written to ``lastError`` and re-raised;
    store failures propagate as they are.
    """
    settings = get_settings()
    check_refresh_key(provided_key, settings.refresh_key)

    site = get_site_config(load_sites_registry(), host)
    repository = SiteSnapshotRepository(store if store is not None else PostgresKeyValueStore(), site.host)

    started = time.monotonic()
    logger.info("Refreshing %s from %s", site.host, site.feed_url)
    try:
        payload = upstream_feed.fetch_feed(
            site.feed_url,
            timeout=settings.upstream_timeout,
            max_chars=settings.last_error_max_chars,
        )
    except UpstreamError as exc:
        repository.record_error(exc.diagnostic[: settings.last_error_max_chars])
        raise

    companies = filter_visible(upstream_feed.companies_of(payload))
    count = len(companies)
    etag = choose_etag(payload.get("etag"), companies)

    if repository.stored_etag() == etag:
        logger.info("Snapshot for %s unchanged (etag=%s); skipping write", site.host, etag)
        return RefreshResult(status="noop", count=count, etag=etag, updated_at=repository.stored_updated_at())

    updated_at = str(payload.get("updated_at") or "") or utc_now_iso()
    repository.write_snapshot(companies, etag, updated_at)
    duration_ms = int((time.monotonic() - started) * 1000)
    logger.info("Refreshed %s: count=%d hidden=%d duration_ms=%d", site.host, count, len(payload["companies"]) - count, duration_ms)
    return RefreshResult(status="ok", count=count, etag=etag, updated_at=updated_at, duration_ms=duration_ms)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Refresh a directory site's snapshot from its upstream feed")
    parser.add_argument("--host", dest="host", required=True, help="Site hostname as listed in the registry")
    parser.add_argument(
        "--key",
        dest="key",
        default=None,
        help="Refresh key; defaults to REFRESH_KEY from the environment",
    )
    return parser


def main(argv=None) -> int:
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s - %(message)s")
    args = build_parser().parse_args(argv)
    key = args.key if args.key is not None else get_settings().refresh_key

    try:
        result = refresh_site(args.host, key)
    except DirectoryError as exc:
        logger.error("Refresh failed for %s: %s", args.host, exc)
        print(json.dumps({"ok": False, "error": str(exc)}))
        return 1

    print(json.dumps(result.to_dict()))
    return 0


if __name__ == "__main__":
    sys.exit(main())
