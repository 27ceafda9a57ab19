"""Development seed rows.

Loaded into the in-memory store when no database is configured so the
dashboard has something to show on a fresh checkout. Rows are copied on
every call; callers may mutate what they receive.
"""

from __future__ import annotations

import copy
from typing import Any, Dict, List

from forex_bureau.models.constants import INVENTORY, TRANSACTIONS

_SEED_ROWS: Dict[str, List[Dict[str, Any]]] = {
    INVENTORY: [
        {"code": "USD", "name": "US Dollar", "amount": 125430.0, "threshold": 50000.0},
        {"code": "EUR", "name": "Euro", "amount": 89250.0, "threshold": 40000.0},
    ],
    TRANSACTIONS: [
        {
            "id": "TXN001",
            "date": "2025-03-10",
            "time": "10:30 AM",
            "customer": "John Doe",
            "from_currency": "USD",
            "to_currency": "EUR",
            "amount": 1000.0,
            "converted": 920.0,
            "rate": 0.92,
            "status": "completed",
        },
        {
            "id": "TXN002",
            "date": "2025-03-10",
            "time": "10:15 AM",
            "customer": "Jane Smith",
            "from_currency": "GBP",
            "to_currency": "USD",
            "amount": 500.0,
            "converted": 635.0,
            "rate": 1.27,
            "status": "completed",
        },
    ],
}


def seed_rows() -> Dict[str, List[Dict[str, Any]]]:
    return copy.deepcopy(_SEED_ROWS)
