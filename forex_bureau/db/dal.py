"""SQLite-backed entity store.

Implements the same list/insert/update/delete contract as ``MemoryStore`` on
top of the tables in ``schema``. Every sqlite3 fault is re-raised as
``StoreError`` so ledgers never see driver exceptions.
"""

from __future__ import annotations

from contextlib import closing
from pathlib import Path
import sqlite3
from typing import Any, Dict, List, Mapping

from forex_bureau.core.errors import RecordNotFound, StoreError
from forex_bureau.models.constants import INVENTORY, TRANSACTIONS

from .schema import BASIC_UTC_NOW, WRITABLE_COLUMNS, init_db
from .store import key_field

_LIST_ORDER = {
    INVENTORY: "code ASC",
    TRANSACTIONS: "created_at DESC, rowid DESC",
}


class SqliteStore:
    def __init__(self, db_path: Path):
        self.db_path = db_path
        init_db(db_path)

    # ------------------------------------------------------------------
    # Connection helpers
    def _connect(self) -> sqlite3.Connection:
        conn = sqlite3.connect(self.db_path)
        conn.row_factory = sqlite3.Row
        return conn

    @staticmethod
    def _columns(entity: str, record: Mapping[str, Any]) -> List[str]:
        return [c for c in WRITABLE_COLUMNS[entity] if c in record]

    @staticmethod
    def _public(row: sqlite3.Row) -> Dict[str, Any]:
        data = dict(row)
        data.pop("created_at", None)
        data.pop("updated_at", None)
        return data

    def _fetch(self, cur: sqlite3.Cursor, entity: str, key: str) -> Dict[str, Any]:
        field = key_field(entity)
        cur.execute(f"SELECT * FROM {entity} WHERE {field} = ?", (key,))
        row = cur.fetchone()
        if row is None:
            raise RecordNotFound(entity, key)
        return self._public(row)

    # ------------------------------------------------------------------
    # Entity store contract
    def list(self, entity: str) -> List[Dict[str, Any]]:
        key_field(entity)
        try:
            with closing(self._connect()) as conn, conn:
                cur = conn.cursor()
                cur.execute(f"SELECT * FROM {entity} ORDER BY {_LIST_ORDER[entity]}")
                return [self._public(r) for r in cur.fetchall()]
        except sqlite3.Error as e:
            raise StoreError(f"failed to list {entity}: {e}") from e

    def insert(self, entity: str, record: Mapping[str, Any]) -> Dict[str, Any]:
        field = key_field(entity)
        cols = self._columns(entity, record)
        if field not in cols or not record.get(field):
            raise StoreError(f"{entity} record is missing '{field}'")
        placeholders = ", ".join("?" for _ in cols)
        try:
            with closing(self._connect()) as conn, conn:
                cur = conn.cursor()
                cur.execute(
                    f"INSERT INTO {entity} ({', '.join(cols)}) VALUES ({placeholders})",
                    [record[c] for c in cols],
                )
                return self._fetch(cur, entity, record[field])
        except sqlite3.IntegrityError as e:
            raise StoreError(f"{entity} record '{record[field]}' rejected: {e}") from e
        except sqlite3.Error as e:
            raise StoreError(f"failed to insert into {entity}: {e}") from e

    def update(self, entity: str, key: str, patch: Mapping[str, Any]) -> Dict[str, Any]:
        field = key_field(entity)
        cols = [c for c in self._columns(entity, patch) if c != field]
        try:
            with closing(self._connect()) as conn, conn:
                cur = conn.cursor()
                if cols:
                    assignments = ", ".join(f"{c} = ?" for c in cols)
                    cur.execute(
                        f"UPDATE {entity} SET {assignments}, updated_at = ({BASIC_UTC_NOW}) "
                        f"WHERE {field} = ?",
                        [*(patch[c] for c in cols), key],
                    )
                return self._fetch(cur, entity, key)
        except sqlite3.Error as e:
            raise StoreError(f"failed to update {entity} '{key}': {e}") from e

    def delete(self, entity: str, key: str) -> Dict[str, Any]:
        field = key_field(entity)
        try:
            with closing(self._connect()) as conn, conn:
                cur = conn.cursor()
                row = self._fetch(cur, entity, key)
                cur.execute(f"DELETE FROM {entity} WHERE {field} = ?", (key,))
                return row
        except sqlite3.Error as e:
            raise StoreError(f"failed to delete {entity} '{key}': {e}") from e
