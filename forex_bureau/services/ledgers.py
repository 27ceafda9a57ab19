"""Inventory and transaction ledgers over a generic entity store.

Reads degrade: a store fault or a non-list answer is logged and treated as
an empty ledger. Writes propagate ``StoreError`` so the HTTP layer can report
them. The two ledgers are independent; recording a transaction does not
move inventory.
"""

from __future__ import annotations

import logging
import uuid
from typing import Any, Dict, List

from forex_bureau.core.errors import StoreError
from forex_bureau.db.store import EntityStore
from forex_bureau.models.constants import INVENTORY, TRANSACTIONS, display_name
from forex_bureau.models.inventory import InventoryItemIn, InventoryItemPatch
from forex_bureau.models.transaction import TransactionIn, TransactionPatch

logger = logging.getLogger(__name__)


def _safe_list(store: EntityStore, entity: str) -> List[Dict[str, Any]]:
    try:
        rows = store.list(entity)
    except StoreError as e:
        logger.warning("store list failed, treating as empty", extra={"entity": entity, "error": str(e)})
        return []
    if not isinstance(rows, list):
        logger.warning("store returned non-list, treating as empty", extra={"entity": entity})
        return []
    return [r for r in rows if isinstance(r, dict)]


class InventoryLedger:
    def __init__(self, store: EntityStore):
        self._store = store

    def list_items(self) -> List[Dict[str, Any]]:
        return _safe_list(self._store, INVENTORY)

    def add_item(self, item: InventoryItemIn) -> Dict[str, Any]:
        row = item.model_dump()
        row["name"] = row["name"] or display_name(row["code"])
        return self._store.insert(INVENTORY, row)

    def update_item(self, code: str, patch: InventoryItemPatch) -> Dict[str, Any]:
        return self._store.update(INVENTORY, code.upper(), patch.model_dump(exclude_none=True))

    def remove_item(self, code: str) -> Dict[str, Any]:
        return self._store.delete(INVENTORY, code.upper())

    def low_stock(self) -> List[Dict[str, Any]]:
        out = []
        for row in self.list_items():
            try:
                if float(row.get("amount") or 0) < float(row.get("threshold") or 0):
                    out.append(row)
            except (TypeError, ValueError):
                continue  # unreadable numbers are not flagged
        return out


def new_transaction_id() -> str:
    return f"TXN{uuid.uuid4().hex[:10].upper()}"


class TransactionLedger:
    def __init__(self, store: EntityStore):
        self._store = store

    def list_transactions(self) -> List[Dict[str, Any]]:
        return _safe_list(self._store, TRANSACTIONS)

    def record(self, txn: TransactionIn) -> Dict[str, Any]:
        row = txn.model_dump(mode="json")
        row["id"] = row.get("id") or new_transaction_id()
        return self._store.insert(TRANSACTIONS, row)

    def update(self, txn_id: str, patch: TransactionPatch) -> Dict[str, Any]:
        return self._store.update(
            TRANSACTIONS, txn_id, patch.model_dump(mode="json", exclude_none=True)
        )

    def remove(self, txn_id: str) -> Dict[str, Any]:
        return self._store.delete(TRANSACTIONS, txn_id)
