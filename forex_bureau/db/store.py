"""Generic entity store contract and the in-memory implementation.

Every ledger talks to storage through four calls keyed by entity name:
``list``, ``insert``, ``update`` and ``delete``. Faults surface as
``StoreError`` (``RecordNotFound`` for a missing key) so callers can decide
whether a failed read degrades to "empty" or a failed write is reported.

The in-memory store is constructed once per app and injected; it keeps
plain dicts per entity and has no concurrency guard. Two concurrent writers
can race (last writer wins). That is acceptable for local development, not
for production use.
"""

from __future__ import annotations

import copy
from typing import Any, Dict, List, Mapping, Optional, Protocol

from forex_bureau.core.errors import RecordNotFound, StoreError
from forex_bureau.models.constants import INVENTORY, TRANSACTIONS

Record = Dict[str, Any]

# Primary key column per entity
ENTITY_KEYS: Dict[str, str] = {
    INVENTORY: "code",
    TRANSACTIONS: "id",
}


def key_field(entity: str) -> str:
    try:
        return ENTITY_KEYS[entity]
    except KeyError:
        raise StoreError(f"unknown entity '{entity}'") from None


class EntityStore(Protocol):
    def list(self, entity: str) -> List[Record]: ...

    def insert(self, entity: str, record: Mapping[str, Any]) -> Record: ...

    def update(self, entity: str, key: str, patch: Mapping[str, Any]) -> Record: ...

    def delete(self, entity: str, key: str) -> Record: ...


class MemoryStore:
    """Dict-backed store; new rows go to the front like the newest-first lists."""

    def __init__(self, rows: Optional[Mapping[str, List[Record]]] = None):
        self._rows: Dict[str, List[Record]] = {e: [] for e in ENTITY_KEYS}
        for entity, items in (rows or {}).items():
            key_field(entity)
            self._rows[entity] = [dict(r) for r in items]

    def _find(self, entity: str, key: str) -> int:
        field = key_field(entity)
        for idx, row in enumerate(self._rows[entity]):
            if row.get(field) == key:
                return idx
        raise RecordNotFound(entity, key)

    def list(self, entity: str) -> List[Record]:
        key_field(entity)
        return copy.deepcopy(self._rows[entity])

    def insert(self, entity: str, record: Mapping[str, Any]) -> Record:
        field = key_field(entity)
        key = record.get(field)
        if not key:
            raise StoreError(f"{entity} record is missing '{field}'")
        if any(r.get(field) == key for r in self._rows[entity]):
            raise StoreError(f"{entity} record '{key}' already exists")
        row = dict(record)
        self._rows[entity].insert(0, row)
        return dict(row)

    def update(self, entity: str, key: str, patch: Mapping[str, Any]) -> Record:
        idx = self._find(entity, key)
        row = {**self._rows[entity][idx], **patch}
        # Keys are immutable; an update cannot move a record.
        row[key_field(entity)] = key
        self._rows[entity][idx] = row
        return dict(row)

    def delete(self, entity: str, key: str) -> Record:
        idx = self._find(entity, key)
        return self._rows[entity].pop(idx)
