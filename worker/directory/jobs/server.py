"""HTTP entrypoint for the directory worker (refresh trigger plus read-side views)."""

from __future__ import annotations

import logging
import os
from typing import Any

from flask import Flask, Response, jsonify, request

from directory.core.config import get_settings
from directory.core.errors import DirectoryError
from directory.core.registry import get_site_config, load_sites_registry
from directory.etl.grouping import group_companies
from directory.jobs.refresh import refresh_site
from directory.store.kv import PostgresKeyValueStore, ensure_schema
from directory.store.snapshots import SiteSnapshotRepository, normalize_host
from directory.views.counties import group_by_state, list_counties
from directory.views.health import build_health_report
from directory.views.sitemap import build_sitemap

# ---------- Logging ----------
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)s %(name)s - %(message)s",
)
logger = logging.getLogger(__name__)

# ---------- App & store ----------
app = Flask(__name__)
_store = PostgresKeyValueStore()


def _request_host() -> str:
    return normalize_host(request.host)


@app.errorhandler(DirectoryError)
def handle_directory_error(exc: DirectoryError) -> Any:
    if exc.status_code >= 500:
        logger.warning("%s on %s %s: %s", type(exc).__name__, request.method, request.path, exc)
    return jsonify({"ok": False, "error": str(exc)}), exc.status_code


# ---------- Routes ----------


@app.get("/")
def root() -> Any:
    """Simple root to avoid 404 on GET /"""
    return "ok", 200


@app.get("/healthz")
def liveness() -> Any:
    return jsonify({"status": "ok", "revision": os.getenv("K_REVISION", "unknown")}), 200


@app.post("/refresh")
def refresh() -> Any:
    """
    Pull the upstream feed for the requesting host into the store.
    Requires header X-Refresh-Key.
    """
    result = refresh_site(_request_host(), request.headers.get("X-Refresh-Key"), store=_store)
    return jsonify(result.to_dict()), 200


@app.get("/health")
def health() -> Any:
    repository = SiteSnapshotRepository(_store, _request_host())
    body, status = build_health_report(repository, get_settings().stale_after_minutes)
    return jsonify(body), status


@app.get("/sitemap.xml")
def sitemap() -> Any:
    host = _request_host()
    try:
        get_site_config(load_sites_registry(), host)
    except DirectoryError as exc:
        return Response(f"<!-- Error: {exc} -->", status=500, content_type="text/xml; charset=utf-8")

    return Response(
        build_sitemap(host),
        content_type="application/xml; charset=utf-8",
        headers={"Cache-Control": "public, max-age=3600"},
    )


@app.get("/api/directory")
def directory_view() -> Any:
    """Grouped listings for the requesting host's directory page."""
    site = get_site_config(load_sites_registry(), _request_host())
    snapshot = SiteSnapshotRepository(_store, site.host).read()
    if snapshot.companies is None:
        return jsonify({"ok": False, "error": "No data yet"}), 503

    categories = group_companies(snapshot.companies)
    return (
        jsonify(
            {
                "ok": True,
                "host": site.host,
                "page_title": site.page_title,
                "serving_line": site.serving_line,
                "return_url": site.return_url,
                "directory_intro": site.directory_intro,
                "seo": site.seo,
                "updated_at": snapshot.updated_at,
                "count": sum(len(c["premium"]) + len(c["free"]) for c in categories),
                "categories": categories,
            }
        ),
        200,
    )


@app.get("/api/counties")
def counties_view() -> Any:
    settings = get_settings()
    counties = list_counties(load_sites_registry(), settings.county_domain_suffix)
    return jsonify({"ok": True, "count": len(counties), "states": group_by_state(counties)}), 200


def main() -> None:
    settings = get_settings()
    port = int(os.getenv("PORT") or settings.worker_port)

    ensure_schema()
    logger.info("[BOOT] Binding on 0.0.0.0:%d", port)
    app.run(host="0.0.0.0", port=port)


if __name__ == "__main__":
    main()
