"""Database schema DDL definitions and initialization utilities.

Tables:
  - inventory: cash on hand per currency with a low-stock threshold
  - transactions: completed / pending / cancelled exchanges
"""

from __future__ import annotations
import sqlite3
from typing import Sequence
from pathlib import Path

BASIC_UTC_NOW = "strftime('%Y-%m-%dT%H:%M:%fZ','now')"

INVENTORY_DDL = f"""
CREATE TABLE IF NOT EXISTS inventory (
    code TEXT PRIMARY KEY, -- 3-letter currency code
    name TEXT NOT NULL DEFAULT '',
    amount REAL NOT NULL DEFAULT 0,
    threshold REAL NOT NULL DEFAULT 0,
    created_at TEXT NOT NULL DEFAULT ({BASIC_UTC_NOW}),
    updated_at TEXT NOT NULL DEFAULT ({BASIC_UTC_NOW})
);
"""

TRANSACTIONS_DDL = f"""
CREATE TABLE IF NOT EXISTS transactions (
    id TEXT PRIMARY KEY,
    date TEXT NOT NULL, -- ISO date (YYYY-MM-DD)
    time TEXT,
    customer TEXT NOT NULL,
    from_currency TEXT NOT NULL,
    to_currency TEXT NOT NULL,
    amount REAL NOT NULL,
    converted REAL NOT NULL DEFAULT 0,
    rate REAL NOT NULL,
    status TEXT NOT NULL DEFAULT 'completed'
        CHECK (status IN ('completed','pending','cancelled')),
    created_at TEXT NOT NULL DEFAULT ({BASIC_UTC_NOW}),
    updated_at TEXT NOT NULL DEFAULT ({BASIC_UTC_NOW})
);
"""

TRANSACTIONS_DATE_INDEX_DDL = (
    "CREATE INDEX IF NOT EXISTS idx_transactions_date ON transactions(date);"
)

DDL_ORDER: Sequence[str] = (
    INVENTORY_DDL,
    TRANSACTIONS_DDL,
    TRANSACTIONS_DATE_INDEX_DDL,
)

# Columns callers may write; timestamps are managed by the store
WRITABLE_COLUMNS = {
    "inventory": ("code", "name", "amount", "threshold"),
    "transactions": (
        "id",
        "date",
        "time",
        "customer",
        "from_currency",
        "to_currency",
        "amount",
        "converted",
        "rate",
        "status",
    ),
}


def init_db(path: Path) -> None:
    """Create all tables idempotently.

    Parameters
    ----------
    path: Path to SQLite database file.
    """
    conn = sqlite3.connect(path)
    try:
        cur = conn.cursor()
        for ddl in DDL_ORDER:
            cur.execute(ddl)
        conn.commit()
    finally:
        conn.close()
