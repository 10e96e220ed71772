from __future__ import annotations

import itertools
import json
import logging
import os
from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any

from ..models.config_models import DatabaseConfig
from ..models.grid import Grid

"""Grid record store.

Grids are stored whole, one JSON document per record, in one of two tables:
``newData`` (the transformed new sheet) and ``baseData`` (the base sheet).

- PostgresGridStore: psycopg2 cursor of a connection with autocommit off;
  ``transaction()`` issues BEGIN / COMMIT / ROLLBACK on it.
- InMemoryGridStore: same contract, used in mock mode and tests.

Each store offers ``transaction()``: one BEGIN/COMMIT unit per file (or per
compared pair), rolled back as a whole when any write inside it fails.
"""

__all__ = [
    "TABLES",
    "GridStoreError",
    "PostgresGridStore",
    "InMemoryGridStore",
    "resolve_dsn",
    "db_connection",
]

logger = logging.getLogger(__name__)

# logical table -> physical table
TABLES = {
    "newData": "new_data",
    "baseData": "base_data",
}


class GridStoreError(Exception):
    pass


def _physical(table: str) -> str:
    try:
        return TABLES[table]
    except KeyError:
        raise GridStoreError(f"unknown table: {table!r} (expected one of {sorted(TABLES)})") from None


class PostgresGridStore:
    def __init__(self, cursor: Any) -> None:
        self.cursor = cursor

    @contextmanager
    def transaction(self) -> Iterator[None]:
        try:
            self.cursor.execute("BEGIN")
        except Exception as e:
            raise GridStoreError(f"begin failed: {e}") from e
        try:
            yield
        except Exception:
            self._rollback()
            raise
        try:
            self.cursor.execute("COMMIT")
        except Exception as e:
            self._rollback()
            raise GridStoreError(f"commit failed: {e}") from e

    def _rollback(self) -> None:
        try:
            self.cursor.execute("ROLLBACK")
        except Exception as e:
            logger.error(f"rollback failed: {e}")

    def ensure_schema(self) -> None:
        for physical in TABLES.values():
            self.cursor.execute(
                f"CREATE TABLE IF NOT EXISTS {physical} ("
                "id SERIAL PRIMARY KEY, "
                "data JSONB NOT NULL)"
            )

    def clear(self, table: str) -> None:
        physical = _physical(table)
        try:
            self.cursor.execute(f"DELETE FROM {physical}")
        except Exception as e:
            raise GridStoreError(f"clear {table} failed: {e}") from e

    def insert(self, table: str, grid: Grid) -> int:
        from psycopg2.extras import Json

        physical = _physical(table)
        try:
            self.cursor.execute(
                f"INSERT INTO {physical} (data) VALUES (%s) RETURNING id",
                (Json(grid, dumps=lambda obj: json.dumps(obj, ensure_ascii=False, default=str)),),
            )
            return int(self.cursor.fetchone()[0])
        except Exception as e:
            raise GridStoreError(f"insert into {table} failed: {e}") from e

    def read_all(self, table: str) -> list[Grid]:
        physical = _physical(table)
        try:
            self.cursor.execute(f"SELECT data FROM {physical} ORDER BY id")
            rows = self.cursor.fetchall()
        except Exception as e:
            raise GridStoreError(f"read {table} failed: {e}") from e
        # psycopg2 decodes jsonb already; text columns come back as str
        return [json.loads(r[0]) if isinstance(r[0], str) else r[0] for r in rows]

    def replace(self, table: str, grid: Grid) -> int:
        self.clear(table)
        return self.insert(table, grid)


class InMemoryGridStore:
    def __init__(self) -> None:
        self._tables: dict[str, list[tuple[int, str]]] = {name: [] for name in TABLES}
        self._ids = itertools.count(1)

    def ensure_schema(self) -> None:
        return None

    @contextmanager
    def transaction(self) -> Iterator[None]:
        snapshot = {name: list(docs) for name, docs in self._tables.items()}
        try:
            yield
        except Exception:
            self._tables = snapshot
            raise

    def clear(self, table: str) -> None:
        _physical(table)
        self._tables[table].clear()

    def insert(self, table: str, grid: Grid) -> int:
        _physical(table)
        record_id = next(self._ids)
        # JSON round trip so readers never share lists with the caller
        self._tables[table].append((record_id, json.dumps(grid, ensure_ascii=False, default=str)))
        return record_id

    def read_all(self, table: str) -> list[Grid]:
        _physical(table)
        return [json.loads(doc) for _, doc in self._tables[table]]

    def replace(self, table: str, grid: Grid) -> int:
        self.clear(table)
        return self.insert(table, grid)


def resolve_dsn(db_cfg: DatabaseConfig) -> str:
    """Connection string; environment variables win over the config file."""
    dsn_env = os.getenv("DATABASE_URL") or os.getenv("PGDSN") or db_cfg.dsn
    if dsn_env:
        return dsn_env
    host = os.getenv("PGHOST", db_cfg.host or "localhost")
    port = os.getenv("PGPORT", str(db_cfg.port) if db_cfg.port else "5432")
    user = os.getenv("PGUSER", db_cfg.user or "postgres")
    password = os.getenv("PGPASSWORD", db_cfg.password or "")
    database = os.getenv("PGDATABASE", db_cfg.database or "postgres")
    dsn = f"host={host} port={port} user={user} dbname={database}"
    if password:
        dsn += f" password={password}"
    return dsn


@contextmanager
def db_connection(db_cfg: DatabaseConfig) -> Iterator[Any]:  # pragma: no cover (needs a live server)
    """Yield a psycopg2 cursor; commit on success, roll back on error."""
    import psycopg2

    conn = psycopg2.connect(resolve_dsn(db_cfg))
    conn.autocommit = False
    cur = conn.cursor()
    try:
        yield cur
        conn.commit()
    except Exception:
        conn.rollback()
        raise
    finally:
        cur.close()
        conn.close()
