from __future__ import annotations

from pathlib import Path
import sqlite3

import pytest

from forex_bureau.core.errors import RecordNotFound, StoreError
from forex_bureau.db.dal import SqliteStore
from forex_bureau.db.seed import seed_rows
from forex_bureau.db.store import MemoryStore
from forex_bureau.main import build_store

from conftest import make_settings


@pytest.fixture(params=["memory", "sqlite"])
def any_store(request, tmp_path: Path):
    if request.param == "memory":
        return MemoryStore()
    return SqliteStore(tmp_path / "bureau.sqlite3")


def _txn(txn_id: str, customer: str = "Ada") -> dict:
    return {
        "id": txn_id,
        "date": "2025-03-10",
        "time": "09:00 AM",
        "customer": customer,
        "from_currency": "USD",
        "to_currency": "EUR",
        "amount": 100.0,
        "converted": 92.0,
        "rate": 0.92,
        "status": "completed",
    }


def test_insert_list_update_delete_roundtrip(any_store) -> None:
    any_store.insert("inventory", {"code": "EUR", "name": "Euro", "amount": 10.0, "threshold": 5.0})

    updated = any_store.update("inventory", "EUR", {"amount": 2.5})
    assert updated["amount"] == 2.5
    assert updated["threshold"] == 5.0

    assert [r["code"] for r in any_store.list("inventory")] == ["EUR"]

    removed = any_store.delete("inventory", "EUR")
    assert removed["code"] == "EUR"
    assert any_store.list("inventory") == []


def test_transactions_list_newest_first(any_store) -> None:
    any_store.insert("transactions", _txn("T1"))
    any_store.insert("transactions", _txn("T2"))

    assert [r["id"] for r in any_store.list("transactions")] == ["T2", "T1"]


def test_duplicate_key_rejected(any_store) -> None:
    any_store.insert("inventory", {"code": "GBP", "name": "", "amount": 1.0, "threshold": 0.0})
    with pytest.raises(StoreError):
        any_store.insert("inventory", {"code": "GBP", "name": "", "amount": 2.0, "threshold": 0.0})


def test_missing_key_raises_not_found(any_store) -> None:
    with pytest.raises(RecordNotFound):
        any_store.update("transactions", "nope", {"status": "cancelled"})
    with pytest.raises(RecordNotFound):
        any_store.delete("inventory", "ZZZ")


def test_update_cannot_change_key(any_store) -> None:
    any_store.insert("transactions", _txn("T1"))

    row = any_store.update("transactions", "T1", {"id": "T9", "status": "cancelled"})

    assert row["id"] == "T1"
    assert row["status"] == "cancelled"


def test_unknown_entity_is_store_error(any_store) -> None:
    with pytest.raises(StoreError):
        any_store.list("customers")


def test_memory_stores_are_independent() -> None:
    a = MemoryStore(seed_rows())
    b = MemoryStore(seed_rows())

    a.delete("inventory", "USD")

    assert [r["code"] for r in b.list("inventory")] == ["USD", "EUR"]
    assert len(a.list("transactions")) == 2


def test_memory_list_returns_copies() -> None:
    store = MemoryStore(seed_rows())
    store.list("inventory")[0]["amount"] = -1

    assert store.list("inventory")[0]["amount"] == 125430.0


def test_sqlite_store_persists_across_instances(tmp_path: Path) -> None:
    path = tmp_path / "bureau.sqlite3"
    SqliteStore(path).insert("transactions", _txn("T1", customer="Grace"))

    rows = SqliteStore(path).list("transactions")

    assert rows[0]["customer"] == "Grace"
    assert "created_at" not in rows[0]


def test_build_store_seeds_memory_without_database() -> None:
    store = build_store(make_settings())

    assert isinstance(store, MemoryStore)
    assert [r["id"] for r in store.list("transactions")] == ["TXN001", "TXN002"]


def test_build_store_uses_sqlite_when_enabled(tmp_path: Path) -> None:
    store = build_store(make_settings(use_sqlite=True, data_dir=tmp_path))

    assert isinstance(store, SqliteStore)
    assert store.list("inventory") == []
    assert (tmp_path / "bureau.sqlite3").exists()


def test_sqlite_store_closes_connections(tmp_path: Path, monkeypatch) -> None:
    store = SqliteStore(tmp_path / "bureau.sqlite3")
    connect = store._connect
    opened = []

    def tracking_connect() -> sqlite3.Connection:
        conn = connect()
        opened.append(conn)
        return conn

    monkeypatch.setattr(store, "_connect", tracking_connect)
    store.insert("inventory", {"code": "EUR", "name": "Euro", "amount": 1.0, "threshold": 0.0})
    store.list("inventory")

    assert len(opened) == 2
    for conn in opened:
        with pytest.raises(sqlite3.ProgrammingError):
            conn.execute("SELECT 1")
