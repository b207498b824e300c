"""PostgreSQL-backed key-value store for site snapshots.

The store only promises single-key ``get``/``put``/``delete``; callers must
not assume several keys change together.
"""

import logging
from contextlib import contextmanager
from typing import Iterator, Optional

import psycopg2
from psycopg2 import pool

from directory.core.config import get_settings
from directory.core.errors import StoreError

logger = logging.getLogger(__name__)

_connection_pool: Optional[pool.SimpleConnectionPool] = None

_CREATE_TABLE = """
CREATE TABLE IF NOT EXISTS directory_kv (
    key TEXT PRIMARY KEY,
    value TEXT NOT NULL,
    updated_at TIMESTAMPTZ NOT NULL DEFAULT NOW()
);
"""

_SELECT = "SELECT value FROM directory_kv WHERE key = %(key)s;"

_UPSERT = """
INSERT INTO directory_kv (key, value, updated_at)
VALUES (%(key)s, %(value)s, NOW())
ON CONFLICT (key) DO UPDATE SET
    value = EXCLUDED.value,
    updated_at = NOW();
"""

_DELETE = "DELETE FROM directory_kv WHERE key = %(key)s;"


def init_pool(minconn: int = 1, maxconn: int = 5) -> pool.SimpleConnectionPool:
    """Create the shared connection pool on first use."""
    global _connection_pool
    if _connection_pool is None:
        settings = get_settings()
        if not settings.database_url:
            raise StoreError("DATABASE_URL is required for the snapshot store")
        try:
            _connection_pool = pool.SimpleConnectionPool(
                minconn,
                maxconn,
                dsn=settings.database_url,
                connect_timeout=10,
            )
        except psycopg2.Error as exc:
            raise StoreError(f"could not connect to snapshot store: {exc}") from exc
        logger.info("Snapshot store connection pool initialised")
    return _connection_pool


@contextmanager
def get_connection() -> Iterator["psycopg2.extensions.connection"]:
    pg_pool = init_pool()
    conn = pg_pool.getconn()
    try:
        yield conn
    finally:
        pg_pool.putconn(conn)


class PostgresKeyValueStore:
    """String key/value access on the ``directory_kv`` table."""

    def get(self, key: str) -> Optional[str]:
        row = self._execute(_SELECT, {"key": key}, fetch=True)
        return row[0] if row else None

    def put(self, key: str, value: str) -> None:
        self._execute(_UPSERT, {"key": key, "value": value})
        logger.debug("Stored %s (%d chars)", key, len(value))

    def delete(self, key: str) -> None:
        self._execute(_DELETE, {"key": key})
        logger.debug("Deleted %s", key)

    def _execute(self, sql: str, params: dict, fetch: bool = False):
        try:
            with get_connection() as conn:
                with conn.cursor() as cur:
                    cur.execute(sql, params)
                    row = cur.fetchone() if fetch else None
                conn.commit()
                return row
        except psycopg2.Error as exc:
            logger.error("Snapshot store query failed for %s: %s", params.get("key"), exc)
            raise StoreError(f"snapshot store failure: {exc}") from exc


def ensure_schema() -> None:
    """Create the key-value table when it does not exist yet."""
    try:
        with get_connection() as conn:
            with conn.cursor() as cur:
                cur.execute(_CREATE_TABLE)
            conn.commit()
    except psycopg2.Error as exc:
        raise StoreError(f"could not prepare snapshot store: {exc}") from exc
    logger.info("Snapshot store schema ready")
