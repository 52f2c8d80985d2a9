"""DuckDB-backed setting store."""

from __future__ import annotations

from contextlib import contextmanager
from pathlib import Path
from typing import Generator, Iterable

import duckdb
import polars as pl

from scoped_settings.manager.errors import StoreError
from scoped_settings.manager.models import SettingRecord
from scoped_settings.utils.logging import get_logger

logger = get_logger(__name__)

# Global records are stored with an empty owner so (name, owner) can be a
# primary key; NULLs never collide in a unique index.
_GLOBAL_OWNER = ""

_CREATE_TABLE = """
    CREATE TABLE IF NOT EXISTS settings (
        name VARCHAR NOT NULL,
        owner VARCHAR NOT NULL DEFAULT '',
        value VARCHAR,
        PRIMARY KEY (name, owner)
    );
"""

_UPSERT = """
    INSERT INTO settings (name, owner, value) VALUES (?, ?, ?)
    ON CONFLICT (name, owner) DO UPDATE SET value = excluded.value;
"""


class DuckDBSettingStore:
    """Persists setting records in a single DuckDB table.

    Records handed out by ``find_by`` are tracked; ``flush`` writes back the
    ones whose value changed plus everything staged with ``persist``.
    """

    def __init__(self, db_path: Path) -> None:
        self._db_path = db_path
        self._conn: duckdb.DuckDBPyConnection | None = None
        self._tracked: dict[tuple[str, str | None], SettingRecord] = {}
        self._clean: dict[tuple[str, str | None], str | None] = {}
        self._staged: list[SettingRecord] = []

    @property
    def db_path(self) -> Path:
        return self._db_path

    @contextmanager
    def connect(self) -> Generator[DuckDBSettingStore, None, None]:
        """Context manager for the DuckDB connection lifecycle."""
        self._db_path.parent.mkdir(parents=True, exist_ok=True)
        self._conn = duckdb.connect(str(self._db_path))
        self._conn.execute(_CREATE_TABLE)
        logger.debug("store_connected", path=str(self._db_path))
        try:
            yield self
        finally:
            self._conn.close()
            self._conn = None
            self._tracked.clear()
            self._clean.clear()
            self._staged.clear()

    def _require_conn(self) -> duckdb.DuckDBPyConnection:
        if self._conn is None:
            raise StoreError("Not connected. Use `with store.connect():`")
        return self._conn

    def find_by(
        self,
        names: Iterable[str] | None = None,
        owner: str | None = None,
    ) -> list[SettingRecord]:
        conn = self._require_conn()

        sql = "SELECT name, owner, value FROM settings WHERE owner = ?"
        params: list[str] = [_GLOBAL_OWNER if owner is None else owner]
        if names is not None:
            names = list(names)
            if not names:
                return []
            sql += f" AND name IN ({', '.join('?' for _ in names)})"
            params.extend(names)

        records = []
        for name, stored_owner, value in conn.execute(sql + " ORDER BY name", params).fetchall():
            key = (name, None if stored_owner == _GLOBAL_OWNER else stored_owner)
            record = self._tracked.get(key)
            if record is None:
                record = SettingRecord(name=key[0], owner=key[1], value=value)
                self._tracked[key] = record
                self._clean[key] = value
            records.append(record)
        return records

    def persist(self, record: SettingRecord) -> None:
        self._require_conn()
        self._staged.append(record)

    def flush(self) -> None:
        conn = self._require_conn()

        pending: dict[tuple[str, str | None], SettingRecord] = {
            key: record
            for key, record in self._tracked.items()
            if record.value != self._clean.get(key)
        }
        for record in self._staged:
            pending[record.key] = record

        if not pending:
            self._staged.clear()
            return

        rows = [
            (r.name, _GLOBAL_OWNER if r.owner is None else r.owner, r.value)
            for r in pending.values()
        ]
        conn.begin()
        try:
            conn.executemany(_UPSERT, rows)
            conn.commit()
        except Exception:
            conn.rollback()
            # The rejected batch is dropped rather than retried by the next flush
            self._staged.clear()
            raise

        for key, record in pending.items():
            self._tracked[key] = record
            self._clean[key] = record.value
        self._staged.clear()
        logger.debug("store_flushed", store="duckdb", rows=len(rows))

    def to_polars(self) -> pl.DataFrame:
        """All records as a Polars DataFrame; global records have a null owner."""
        conn = self._require_conn()
        return conn.sql(
            "SELECT name, NULLIF(owner, '') AS owner, value FROM settings ORDER BY owner, name"
        ).pl()

    def table_info(self) -> list[dict]:
        """Record counts per owner."""
        conn = self._require_conn()
        rows = conn.sql(
            """
            SELECT owner, COUNT(*) AS records
            FROM settings
            GROUP BY owner
            ORDER BY owner
            """
        ).fetchall()
        return [
            {"owner": None if owner == _GLOBAL_OWNER else owner, "records": count}
            for owner, count in rows
        ]
